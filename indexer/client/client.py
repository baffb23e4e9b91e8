from __future__ import annotations
import asyncio
import logging
import os
from typing import Any, Awaitable, Callable, NamedTuple, Sequence, Set, Tuple
import aiohttp
from hexbytes import HexBytes
from web3 import AsyncWeb3, WebSocketProvider
from web3.exceptions import (
    BlockNotFound,
    TransactionNotFound,
    Web3Exception,
    Web3RPCError,
)
from web3.types import RPCEndpoint

from indexer.abi.messages import CallMessage
from indexer.client.dumps import DirtyDump, Dump
from indexer.client.subscription import HeadSubscription, HeaderSink
from indexer.core import Core, is_websocket
from indexer.erc20_metas.caller import ERC20Caller
from indexer.erc20_metas.erc20_meta import ERC20Meta
from indexer.errors import (
    ConnectionClosed,
    DeadlineExceeded,
    IndexerError,
    NotFound,
    RPCError,
    TransportError,
)
from indexer.utils import (
    UINT64_MAX,
    block_identifier,
    checksum_address,
    hex_block_number,
)

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (Web3Exception, aiohttp.ClientError, OSError)


class EthClient(Core):
    """
    Asynchronous Ethereum node client used by the indexer.

    The client wraps :class:`web3.AsyncWeb3` and forwards the standard
    calls (blocks, transactions, receipts, balances, code, ``eth_call``)
    to it. On top of that it adds

        1. ``debug_*`` introspection calls (:meth:`dump_block` and
           :meth:`modified_account_states_by_number`) sent through the
           raw :meth:`invoke` primitive
        2. :meth:`fetch_token_metadata` that assembles :class:`ERC20Meta`
           from several contract calls

    **Deadlines and errors**

    Every remote method accepts ``timeout`` (seconds, the client
    default if ``None``). A call that doesn't finish in time raises
    :class:`DeadlineExceeded`; a ``timeout <= 0`` fails right away
    without touching the node. Provider failures are raised as
    :class:`TransportError`, JSON-RPC error responses as
    :class:`RPCError`. After :meth:`close` every call raises
    :class:`ConnectionClosed`.

    Calls are independent: the client doesn't serialize or reorder
    them, so it's fine to run many of them concurrently.

    **Request/Response flow for** :meth:`fetch_token_metadata`

    ::

                +-----------+                    +-------------+ +-------+
                | EthClient |                    | ERC20Caller | | Web3  |
                +-----------+                    +-------------+ +-------+
        ---------------  |                              |            |
        | Request meta |-|                              |            |
        |--------------| |                              |            |
                         | Get code (fatal on error)    |            |
                         |------------------------------------------>|
                         |                              |            |
                         | decimals, totalSupply, name  |            |
                         |----------------------------->|            |
                         |                              | eth_call x3|
                         |                              |----------->|
                         |                              |            |
                         | Failed fields -> zero values |            |
                         | and warnings                 |            |
            -----------  |                              |            |
            | Response |-|                              |            |
            |----------| |                              |            |

    Args:
        kwargs: Args for the :class:`indexer.core.Core`

    Examples:
        ::

            async with await EthClient.dial("wss://mainnet.example.org") as client:
                block = await client.block_by_number(15632000)
                dump = await client.dump_block(15632000)
    """

    _closed: bool
    _subscriptions: Set[HeadSubscription]

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._closed = False
        self._subscriptions = set()

    @staticmethod
    async def dial(rpc: str | None = None, **kwargs) -> EthClient:
        """
        Create a connected :class:`EthClient`.

        Websocket urls (``ws://``, ``wss://``) are connected right away,
        http(s) urls are used lazily.

        Args:
            rpc: Ethereum rpc url. If ``None``, ``WEB3_PROVIDER_URI`` env variable is used
            kwargs: Args for the :class:`indexer.core.Core`

        Returns:
            An instance of :class:`EthClient`

        Raises:
            TransportError: if the websocket connection fails
        """
        if rpc is None:
            rpc = os.environ.get("WEB3_PROVIDER_URI")
        if rpc is None:
            raise ValueError(
                "Ethereum RPC is not set. "
                "Use `WEB3_PROVIDER_URI` env variable or pass rpc explicitly"
            )
        if not is_websocket(rpc):
            return EthClient(rpc=rpc, **kwargs)

        w3 = AsyncWeb3(WebSocketProvider(rpc))
        try:
            await w3.provider.connect()
        except _TRANSPORT_ERRORS as e:
            raise TransportError(f"Failed to connect to {rpc}: {e}") from e
        return EthClient(rpc=rpc, w3=w3, **kwargs)

    @property
    def closed(self) -> bool:
        """
        ``True`` after :meth:`close`
        """
        return self._closed

    async def block_by_number(
        self, number: int | None = None, timeout: float | None = None
    ) -> Any:
        """
        Get a block with full transactions.

        Args:
            number: block number, ``None`` or ``"latest"`` for the latest block

        Raises:
            NotFound: if the block doesn't exist
        """
        block_id = block_identifier(number)
        return await self._request(
            "eth_getBlockByNumber",
            lambda: self.w3.eth.get_block(block_id, full_transactions=True),
            timeout,
        )

    async def block_by_hash(
        self, block_hash: str | bytes, timeout: float | None = None
    ) -> Any:
        """
        Get a block with full transactions by hash.

        Raises:
            NotFound: if the block doesn't exist
        """
        return await self._request(
            "eth_getBlockByHash",
            lambda: self.w3.eth.get_block(HexBytes(block_hash), full_transactions=True),
            timeout,
        )

    async def transaction_by_hash(
        self, tx_hash: str | bytes, timeout: float | None = None
    ) -> Tuple[Any, bool]:
        """
        Get a transaction.

        Returns:
            The transaction and ``True`` if it's still pending

        Raises:
            NotFound: if the transaction doesn't exist
        """
        tx = await self._request(
            "eth_getTransactionByHash",
            lambda: self.w3.eth.get_transaction(HexBytes(tx_hash)),
            timeout,
        )
        return tx, tx.get("blockNumber") is None

    async def transaction_receipt(
        self, tx_hash: str | bytes, timeout: float | None = None
    ) -> Any:
        """
        Get a transaction receipt.

        Raises:
            NotFound: if the receipt doesn't exist (yet)
        """
        return await self._request(
            "eth_getTransactionReceipt",
            lambda: self.w3.eth.get_transaction_receipt(HexBytes(tx_hash)),
            timeout,
        )

    async def balance_at(
        self,
        account: str | bytes,
        block_number: int | None = None,
        timeout: float | None = None,
    ) -> int:
        """
        ETH balance of ``account`` in wei.

        Args:
            account: account address
            block_number: ``None`` for the latest block
        """
        account = checksum_address(account)
        block_id = block_identifier(block_number)
        return await self._request(
            "eth_getBalance",
            lambda: self.w3.eth.get_balance(account, block_identifier=block_id),
            timeout,
        )

    async def code_at(
        self,
        account: str | bytes,
        block_number: int | None = None,
        timeout: float | None = None,
    ) -> HexBytes:
        """
        Contract bytecode of ``account`` (empty for externally owned accounts).

        Args:
            account: account address
            block_number: ``None`` for the latest block
        """
        account = checksum_address(account)
        block_id = block_identifier(block_number)
        return await self._request(
            "eth_getCode",
            lambda: self.w3.eth.get_code(account, block_identifier=block_id),
            timeout,
        )

    async def call_contract(
        self,
        message: CallMessage,
        block_number: int | None = None,
        timeout: float | None = None,
    ) -> HexBytes:
        """
        Execute a read-only contract call (``eth_call``).

        Args:
            message: call built with :func:`indexer.abi.build_call_message`
            block_number: ``None`` for the latest block

        Returns:
            Raw response bytes, decode with :func:`indexer.abi.decode_call_result`
        """
        block_id = block_identifier(block_number)
        return await self._request(
            "eth_call",
            lambda: self.w3.eth.call(message.to_dict(), block_identifier=block_id),
            timeout,
        )

    async def subscribe_new_head(
        self, sink: HeaderSink, timeout: float | None = None
    ) -> HeadSubscription:
        """
        Subscribe to new block headers. Requires a websocket connection.

        Args:
            sink: receiver of headers, e.g. :class:`asyncio.Queue`
            timeout: deadline for ``eth_subscribe``

        Returns:
            A running :class:`HeadSubscription`
        """
        subscription_id = await self._request(
            "eth_subscribe", lambda: self.w3.eth.subscribe("newHeads"), timeout
        )
        subscription = HeadSubscription(self, subscription_id, sink)
        self._subscriptions.add(subscription)
        return subscription

    async def invoke(
        self,
        method: str,
        params: Sequence[Any] = (),
        timeout: float | None = None,
    ) -> Any:
        """
        Send a raw JSON-RPC request.

        Used for methods web3 knows nothing about, like ``debug_*``.

        Args:
            method: remote method name
            params: positional params

        Returns:
            ``result`` member of the response, as sent by the node

        Raises:
            RPCError: if the node returns an error object
        """
        response = await self._request(
            method,
            lambda: self.w3.provider.make_request(RPCEndpoint(method), list(params)),
            timeout,
        )
        if response.get("error") is not None:
            raise RPCError(method, response["error"])
        return response.get("result")

    async def dump_block(self, block_number: int, timeout: float | None = None) -> Dump:
        """
        Full state dump at a block (``debug_dumpBlock``).

        Args:
            block_number: non-negative block number
        """
        if block_identifier(block_number) == "latest":
            raise ValueError("dump_block needs an explicit block number")
        result = await self.invoke(
            "debug_dumpBlock", [hex_block_number(block_number)], timeout=timeout
        )
        return Dump.from_dict(result or {})

    async def modified_account_states_by_number(
        self, number: int, timeout: float | None = None
    ) -> DirtyDump:
        """
        Accounts modified in a block (``debug_getModifiedAccountStatesByNumber``).

        Args:
            number: block number, unsigned 64-bit
        """
        if isinstance(number, bool) or not isinstance(number, int):
            raise ValueError(f"Block number must be an int, got `{number}`")
        if number < 0 or number > UINT64_MAX:
            raise ValueError(f"Block number {number} is out of uint64 range")
        result = await self.invoke(
            "debug_getModifiedAccountStatesByNumber", [number], timeout=timeout
        )
        return DirtyDump.from_dict(result or {})

    async def fetch_token_metadata(
        self,
        address: str | bytes,
        block_number: int,
        timeout: float | None = None,
    ) -> ERC20Meta:
        """
        Fetch ERC20 metadata of the token at ``address``.

        Only getting the contract code is fatal. ``decimals``, ``totalSupply``
        and ``name`` are requested concurrently and independently: a failed
        call (including one that runs out of its ``timeout``) is logged as a
        warning and leaves its field at the zero value. Cancelling the task
        that awaits this method is not a field failure and propagates.

        If the token caller can't be created, the metadata is returned with
        only ``address``, ``code`` and ``block_number`` set. ``address`` is
        validated by the code lookup first, so this branch only guards
        against a caller that rejects an already valid address.

        Args:
            address: token address
            block_number: block to read the metadata at
            timeout: deadline in seconds for each remote call

        Returns:
            An instance of :class:`ERC20Meta`

        Raises:
            TransportError: if the code can't be fetched
        """
        code = await self.code_at(address, block_number, timeout=timeout)
        meta = ERC20Meta(
            address=checksum_address(address), code=code, block_number=block_number
        )
        context = f"addr={meta.address}, number={block_number}"

        try:
            caller = ERC20Caller(address, self)
        except (IndexerError, ValueError) as e:
            logger.warning(f"Failed to initiate contract caller, {context}, err={e}")
            return meta

        decimals, total_supply, name = await asyncio.gather(
            _attempt(
                lambda: caller.decimals(block_number=block_number, timeout=timeout)
            ),
            _attempt(
                lambda: caller.total_supply(block_number=block_number, timeout=timeout)
            ),
            _attempt(lambda: caller.name(block_number=block_number, timeout=timeout)),
        )
        meta.decimals = decimals.unwrap("decimals", 0, context)
        supply = total_supply.unwrap("total supply", None, context)
        meta.total_supply = "" if supply is None else str(supply)
        meta.name = name.unwrap("name", "", context)
        return meta

    async def close(self):
        """
        Close the connection. Active subscriptions end with
        :class:`ConnectionClosed`. Calling it more than once is a no-op.
        """
        if self._closed:
            return
        self._closed = True
        for subscription in list(self._subscriptions):
            await subscription._stop(ConnectionClosed("Client is closed"))
        self._subscriptions.clear()

        w3 = self.__dict__.get("w3", self._w3)
        if w3 is None:
            return
        disconnect = getattr(w3.provider, "disconnect", None)
        if disconnect is None:
            return
        try:
            await disconnect()
        except _TRANSPORT_ERRORS as e:
            logger.warning(f"Error while closing connection to {self.rpc}: {e}")

    async def __aenter__(self) -> EthClient:
        return self

    async def __aexit__(self, *exc):
        await self.close()

    def _forget(self, subscription: HeadSubscription):
        self._subscriptions.discard(subscription)

    async def _request(
        self,
        method: str,
        send: Callable[[], Awaitable[Any]],
        timeout: float | None = None,
    ) -> Any:
        if self._closed:
            raise ConnectionClosed(f"{method}: client is closed")
        if timeout is None:
            timeout = self.timeout
        if timeout <= 0:
            raise DeadlineExceeded(f"{method}: deadline expired before the call")

        logger.debug(f"Sending {method}")
        deadline = asyncio.timeout(timeout)
        try:
            async with deadline:
                return await send()
        except IndexerError:
            raise
        except TimeoutError as e:
            if deadline.expired():
                raise DeadlineExceeded(f"{method}: no response in {timeout}s") from e
            raise TransportError(f"{method}: {e}") from e
        except (BlockNotFound, TransactionNotFound) as e:
            raise NotFound(f"{method}: {e}") from e
        except Web3RPCError as e:
            rpc_response = e.rpc_response or {}
            raise RPCError(method, rpc_response.get("error", str(e))) from e
        except _TRANSPORT_ERRORS as e:
            if self._closed:
                raise ConnectionClosed(f"{method}: client is closed") from e
            raise TransportError(f"{method}: {e}") from e


class _Outcome(NamedTuple):
    value: Any
    error: Exception | None

    def unwrap(self, field: str, zero: Any, context: str) -> Any:
        if self.error is None:
            return self.value
        logger.warning(f"Failed to get {field}, {context}, err={self.error}")
        return zero


async def _attempt(call: Callable[[], Awaitable[Any]]) -> _Outcome:
    # asyncio.CancelledError is not an Exception and always propagates
    try:
        return _Outcome(await call(), None)
    except (IndexerError, ValueError) as e:
        return _Outcome(None, e)
