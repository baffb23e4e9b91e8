# pylint: disable=line-too-long

"""
Module for encoding contract calls and decoding their results.

The module covers a fixed set of scalar ABI types (``uintN``, ``address``,
``bool``, ``string``), which is enough for token metadata and balances.
:data:`ERC20_INTERFACE` is loaded once from the bundled ERC20 json abi
and shared by everyone.

Example:
    ::

        from indexer.abi import ERC20_INTERFACE, build_call_message, decode_call_result

        msg = build_call_message(
            ERC20_INTERFACE,
            "0x6B175474E89094C44Da98b954EedeAC495271d0F",
            "balanceOf",
            "0x5d3a536E4D6DbD6114cc1Ead35777bAB948E3643",
        )
        # => CallMessage({"target": 0x6B175474E89094C44Da98b954EedeAC495271d0F, "payload": 0x70a082310000...})

        raw = ...  # eth_call response
        (balance,) = decode_call_result(ERC20_INTERFACE, "balanceOf", raw)
"""

from indexer.abi.codec import (
    canonical_type,
    decode_single,
    decode_values,
    encode_single,
    encode_values,
    is_dynamic,
)
from indexer.abi.registry import ERC20_INTERFACE, ContractInterface, MethodSignature
from indexer.abi.messages import CallMessage, build_call_message, decode_call_result
from indexer.abi.erc20 import (
    balance_of_msg,
    decimals_msg,
    decode_balance_of,
    decode_decimals,
)
