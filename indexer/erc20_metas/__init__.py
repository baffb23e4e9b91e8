"""
Module for fetching ERC20 token metadata
(code, decimals, total supply, name).

The metadata is assembled by :meth:`indexer.client.EthClient.fetch_token_metadata`
from independent :class:`ERC20Caller` calls. :class:`ContractCaller` is the
generic version for any :class:`indexer.abi.ContractInterface`.

Example:
    ::

        from indexer.client import EthClient
        from indexer.erc20_metas import ERC20Caller

        async with await EthClient.dial("wss://mainnet.example.org") as client:
            meta = await client.fetch_token_metadata(
                "0x6B175474E89094C44Da98b954EedeAC495271d0F", 15632000
            )
            # => ERC20Meta({"address": 0x6b175474e89094c44da98b954eedeac495271d0f, "block_number": 15632000, "decimals": 18, ...})

            dai = ERC20Caller("0x6B175474E89094C44Da98b954EedeAC495271d0F", client)
            await dai.balance_of("0x5d3a536E4D6DbD6114cc1Ead35777bAB948E3643")
"""

from indexer.erc20_metas.erc20_meta import ERC20Meta
from indexer.erc20_metas.caller import ContractCaller, ERC20Caller
