"""
Implements :class:`Core` that is used in other modules.
"""

from __future__ import annotations
import os
from functools import cached_property
from web3 import AsyncWeb3

DEFAULT_REQUEST_TIMEOUT = 30.0


class Core:
    """
    A base class for any class that wants to use an Ethereum RPC.

    When deriving this class, you're providing the rpc url, or
    injecting a ready :class:`web3.AsyncWeb3` instance directly (handy for
    tests and for sharing one websocket connection). The web3 instance is
    instantiated on demand, so it's safe to create this class without a
    running node.

    **Configuration**

    Explicit arguments win over environment variables:

    +--------------------------+-------------------------------------------+
    | Env variable             | Meaning                                   |
    +==========================+===========================================+
    | ``WEB3_PROVIDER_URI``    | Rpc url if ``rpc`` is not passed          |
    +--------------------------+-------------------------------------------+
    | ``WEB3_REQUEST_TIMEOUT`` | Default deadline (seconds) for every      |
    |                          | remote call if ``timeout`` is not passed  |
    +--------------------------+-------------------------------------------+

    Note:
        Only http(s) urls can be turned into a web3 instance lazily.
        Websocket connections need an explicit ``await connect()``, see
        :meth:`indexer.client.EthClient.dial`.

    Args:
        rpc: An Ethereum RPC endpoint uri
        w3: an instance of web3 (overrides rpc)
        timeout: default deadline in seconds for remote calls, ``None``
                 means :data:`DEFAULT_REQUEST_TIMEOUT`
    """

    #: An Ethereum RPC endpoint uri.
    #: Can be ``None`` if :class:`web3.AsyncWeb3` is injected directly.
    rpc: str | None
    _timeout: float | None

    def __init__(
        self,
        rpc: str | None = None,
        w3: AsyncWeb3 | None = None,
        timeout: float | None = None,
    ):
        self.rpc = rpc
        self._w3 = w3
        self._timeout = timeout

    @cached_property
    def timeout(self) -> float:
        """
        Default deadline (seconds) for remote calls
        """
        if not self._timeout is None:
            return self._timeout
        env_value = os.environ.get("WEB3_REQUEST_TIMEOUT")
        if not env_value is None:
            return float(env_value)
        return DEFAULT_REQUEST_TIMEOUT

    @cached_property
    def w3(self) -> AsyncWeb3:
        """
        :class:`web3.AsyncWeb3` instance for working with Ethereum RPC
        """
        if not self._w3 is None:
            return self._w3

        if self.rpc is None:
            self.rpc = os.environ.get("WEB3_PROVIDER_URI")

        if self.rpc is None:
            raise ValueError(
                "Ethereum RPC is not set. "
                "Use `WEB3_PROVIDER_URI` env variable or pass rpc explicitly"
            )

        if is_websocket(self.rpc):
            raise ValueError(
                f"Websocket rpc `{self.rpc}` needs a connection. Use `EthClient.dial`"
            )

        return AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(self.rpc))


def is_websocket(rpc: str) -> bool:
    """
    ``True`` if the rpc url needs a persistent websocket connection
    """
    return rpc.startswith("ws://") or rpc.startswith("wss://")
