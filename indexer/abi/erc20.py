"""
Shortcuts for the most used ERC20 calls.
"""

from __future__ import annotations

from indexer.abi.messages import CallMessage, build_call_message, decode_call_result
from indexer.abi.registry import ERC20_INTERFACE


def decimals_msg(contract_address: str | bytes) -> CallMessage:
    """
    ``decimals()`` call message
    """
    return build_call_message(ERC20_INTERFACE, contract_address, "decimals")


def decode_decimals(data: bytes | str) -> int:
    """
    Decode ``decimals()`` response
    """
    return decode_call_result(ERC20_INTERFACE, "decimals", data)[0]


def balance_of_msg(contract_address: str | bytes, account: str | bytes) -> CallMessage:
    """
    ``balanceOf(account)`` call message
    """
    return build_call_message(ERC20_INTERFACE, contract_address, "balanceOf", account)


def decode_balance_of(data: bytes | str) -> int:
    """
    Decode ``balanceOf(address)`` response
    """
    return decode_call_result(ERC20_INTERFACE, "balanceOf", data)[0]
