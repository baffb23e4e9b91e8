from __future__ import annotations
import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any, Protocol

from indexer.errors import ConnectionClosed, IndexerError, TransportError

if TYPE_CHECKING:
    from indexer.client.client import EthClient

logger = logging.getLogger(__name__)


class HeaderSink(Protocol):
    """
    Anything with an async ``put``, e.g. :class:`asyncio.Queue`
    """

    async def put(self, item: Any) -> None:
        ...


class HeadSubscription:
    """
    A live ``newHeads`` subscription.

    A background task reads the websocket stream and puts every new block
    header into the sink. The task stops when :meth:`unsubscribe` is
    called, when the client is closed or when the stream breaks. In the
    last two cases :meth:`err` reports why.

    Note:
        The subscription consumes the whole subscription stream of the
        connection, so keep one subscription per connection.

    Args:
        client: the client that created the subscription
        subscription_id: id returned by ``eth_subscribe``
        sink: receiver of block headers
    """

    #: Subscription id returned by the node
    id: str
    _client: EthClient
    _sink: HeaderSink
    _error: asyncio.Future
    _task: asyncio.Task
    _unsubscribed: bool

    def __init__(self, client: EthClient, subscription_id: str, sink: HeaderSink):
        self.id = subscription_id
        self._client = client
        self._sink = sink
        self._unsubscribed = False
        self._error = asyncio.get_running_loop().create_future()
        self._task = asyncio.create_task(self._pump())

    @property
    def done(self) -> bool:
        """
        ``True`` when no more headers will be delivered
        """
        return self._error.done()

    async def err(self) -> IndexerError | None:
        """
        Wait until the subscription ends.

        Returns:
            ``None`` after :meth:`unsubscribe`, otherwise the error that
            ended the stream (:class:`ConnectionClosed` or :class:`TransportError`)
        """
        return await asyncio.shield(self._error)

    async def unsubscribe(self, timeout: float | None = None):
        """
        Stop delivering headers and cancel the subscription on the node.
        Calling it more than once is a no-op.

        Args:
            timeout: deadline in seconds for ``eth_unsubscribe``
        """
        if self._unsubscribed:
            return
        self._unsubscribed = True
        await self._stop(None)
        if not self._client.closed:
            await self._client._request(
                "eth_unsubscribe",
                lambda: self._client.w3.eth.unsubscribe(self.id),
                timeout,
            )

    async def _stop(self, error: IndexerError | None):
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._finish(error)

    def _finish(self, error: IndexerError | None):
        self._client._forget(self)
        if not self._error.done():
            self._error.set_result(error)

    async def _pump(self):
        try:
            async for message in self._client.w3.socket.process_subscriptions():
                if message.get("subscription") != self.id:
                    continue
                await self._sink.put(message["result"])
        except Exception as e:
            logger.warning(f"Subscription {self.id} failed: {e}")
            error = TransportError(f"Subscription {self.id} failed: {e}")
            error.__cause__ = e
            self._finish(error)
            return
        self._finish(ConnectionClosed(f"Subscription {self.id} stream ended"))
