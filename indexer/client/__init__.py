"""
Module with the Ethereum node client used by the indexer.

The main class of this module is :class:`EthClient`. It forwards the
standard calls to `Web3 <https://web3py.readthedocs.io/en/stable/>`_, adds
``debug_*`` state introspection and a best-effort ERC20 metadata query.

Example:
    ::

        import asyncio
        from indexer.client import EthClient

        async def main():
            async with await EthClient.dial("wss://mainnet.example.org") as client:
                block = await client.block_by_number(15632000)
                diff = await client.modified_account_states_by_number(15632000)

                headers = asyncio.Queue()
                subscription = await client.subscribe_new_head(headers)
                header = await headers.get()
                await subscription.unsubscribe()

        asyncio.run(main())
"""

from indexer.client.client import EthClient
from indexer.client.dumps import DirtyDump, DirtyDumpAccount, Dump, DumpAccount
from indexer.client.subscription import HeadSubscription
