"""
Utility functions.
"""

from typing import Literal
from eth_typing import ChecksumAddress
from eth_typing.encoding import HexStr
from eth_utils import is_address, to_checksum_address

UINT64_MAX = 2**64 - 1


def checksum_address(address: str | bytes | None) -> ChecksumAddress:
    """
    Validate an address and convert it to the EIP-55 checksum format.

    Args:
        address: hex address (any case) or 20 raw bytes

    Returns:
        Checksum address

    Raises:
        ValueError: if ``address`` is missing or not a 20-byte address
    """
    if address is None:
        raise ValueError("Address is required")
    if isinstance(address, (bytes, bytearray)):
        if len(address) != 20:
            raise ValueError(f"Address must be 20 bytes, got {len(address)}")
        return to_checksum_address(bytes(address))
    if not isinstance(address, str) or not is_address(address):
        raise ValueError(f"Invalid address `{address}`")
    return to_checksum_address(address)


def hex_block_number(number: int) -> HexStr:
    """
    Hex representation of a block number used by ``debug_*`` rpc methods.

    Examples:
        ::

            hex_block_number(255)
            # 0xff
    """
    return HexStr(f"0x{number:x}")


def block_identifier(number: int | str | None) -> int | Literal["latest"]:
    """
    Validate a block number for rpc calls.

    Args:
        number: non-negative block number, ``"latest"`` or ``None`` (= ``"latest"``)

    Returns:
        Block identifier accepted by web3

    Raises:
        ValueError: for negative numbers and unknown tags
    """
    if number is None or number == "latest":
        return "latest"
    if isinstance(number, bool) or not isinstance(number, int):
        raise ValueError(f"Block number must be an int or `latest`, got `{number}`")
    if number < 0:
        raise ValueError(f"Block number must be non-negative, got {number}")
    return number
