from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Any, Tuple

from indexer.abi.messages import build_call_message, decode_call_result
from indexer.abi.registry import ERC20_INTERFACE, ContractInterface
from indexer.utils import checksum_address

if TYPE_CHECKING:
    from indexer.client.client import EthClient

logger = logging.getLogger(__name__)


class ContractCaller:
    """
    Read-only calls to a single contract.

    Encodes the call with :func:`indexer.abi.build_call_message`, sends it
    with :meth:`EthClient.call_contract` and decodes the response with
    :func:`indexer.abi.decode_call_result`.

    Args:
        interface: contract interface
        address: contract address
        client: client used to send the calls

    Raises:
        ValueError: if ``address`` is not a valid address
    """

    #: Contract interface
    interface: ContractInterface
    #: Contract address (checksum)
    address: str
    _client: EthClient

    def __init__(self, interface: ContractInterface, address: str | bytes, client: EthClient):
        self.interface = interface
        self.address = checksum_address(address)
        self._client = client

    async def call(
        self,
        method: str,
        *args: Any,
        block_number: int | None = None,
        timeout: float | None = None,
    ) -> Tuple[Any, ...]:
        """
        Call a contract method.

        Args:
            method: method name
            args: method arguments
            block_number: call at this block, ``None`` for the latest block
            timeout: deadline in seconds, client default if ``None``

        Returns:
            Decoded outputs
        """
        msg = build_call_message(self.interface, self.address, method, *args)
        logger.debug(f"Calling {method} at {self.address}, block {block_number}")
        raw = await self._client.call_contract(
            msg, block_number=block_number, timeout=timeout
        )
        return decode_call_result(self.interface, method, raw)


class ERC20Caller(ContractCaller):
    """
    Typed calls to an ERC20 token contract.

    Args:
        address: token address
        client: client used to send the calls
    """

    def __init__(self, address: str | bytes, client: EthClient):
        super().__init__(ERC20_INTERFACE, address, client)

    async def decimals(self, **kwargs) -> int:
        """
        Token decimals

        Args:
            kwargs: ``block_number`` and ``timeout``, see :meth:`ContractCaller.call`
        """
        return (await self.call("decimals", **kwargs))[0]

    async def total_supply(self, **kwargs) -> int:
        """
        Token total supply
        """
        return (await self.call("totalSupply", **kwargs))[0]

    async def name(self, **kwargs) -> str:
        """
        Token name
        """
        return (await self.call("name", **kwargs))[0]

    async def symbol(self, **kwargs) -> str:
        return (await self.call("symbol", **kwargs))[0]

    async def balance_of(self, account: str | bytes, **kwargs) -> int:
        """
        Token balance of ``account``
        """
        return (await self.call("balanceOf", account, **kwargs))[0]
