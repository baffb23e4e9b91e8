from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple
from eth_typing import ChecksumAddress
from hexbytes import HexBytes

from indexer.abi.codec import WORD_SIZE, decode_values, encode_values
from indexer.abi.registry import ContractInterface
from indexer.errors import ArgumentCountMismatch, TruncatedResponse
from indexer.utils import checksum_address


@dataclass(frozen=True)
class CallMessage:
    """
    A read-only contract call ready to be sent with ``eth_call``.
    """

    #: Contract address (checksum)
    target: ChecksumAddress
    #: Selector followed by the encoded arguments
    payload: HexBytes

    def to_dict(self) -> Dict[str, Any]:
        """
        Transaction params for ``eth_call``
        """
        return {"to": self.target, "data": self.payload.to_0x_hex()}

    def __repr__(self):
        return f'CallMessage({{"target": {self.target}, "payload": {self.payload.to_0x_hex()}}})'


def build_call_message(
    interface: ContractInterface, target: str | bytes, method: str, *args: Any
) -> CallMessage:
    """
    Encode a call to ``method`` of the contract at ``target``.

    Args:
        interface: contract interface
        target: contract address
        method: method name
        args: method arguments, in declaration order

    Returns:
        An instance of :class:`CallMessage`

    Raises:
        UnknownMethod: if ``method`` is not part of ``interface``
        ArgumentCountMismatch: if ``len(args)`` doesn't match the declaration
        ArgumentTypeMismatch: if an argument can't be encoded as its declared type
        ValueError: if ``target`` is not a valid address

    Examples:
        ::

            msg = build_call_message(
                ERC20_INTERFACE,
                "0x6B175474E89094C44Da98b954EedeAC495271d0F",
                "balanceOf",
                "0x5d3a536E4D6DbD6114cc1Ead35777bAB948E3643",
            )
            msg.payload.to_0x_hex()[:10]
            # => 0x70a08231
    """
    signature = interface.signature_for(method)
    if len(args) != len(signature.input_types):
        raise ArgumentCountMismatch(
            f"`{signature.canonical}` takes {len(signature.input_types)} arguments, "
            f"got {len(args)}"
        )
    payload = signature.selector + encode_values(signature.input_types, args)
    return CallMessage(target=checksum_address(target), payload=HexBytes(payload))


def decode_call_result(
    interface: ContractInterface, method: str, raw: bytes | str
) -> Tuple[Any, ...]:
    """
    Decode the response of a call to ``method``.

    Args:
        interface: contract interface
        method: method name
        raw: response bytes (or ``0x`` hex string)

    Returns:
        Decoded outputs. A single-output method returns a one-element tuple.

    Raises:
        UnknownMethod: if ``method`` is not part of ``interface``
        TruncatedResponse: if ``raw`` is shorter than the declared outputs
        MalformedABIData: if ``raw`` can't be decoded as the declared outputs
    """
    output_types = interface.output_types_for(method)
    data = bytes(HexBytes(raw))
    expected = WORD_SIZE * len(output_types)
    if len(data) < expected:
        raise TruncatedResponse(
            f"`{method}` response is {len(data)} bytes, expected at least {expected}"
        )
    return decode_values(output_types, data)
