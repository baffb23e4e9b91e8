import os
import pytest

from indexer.abi.registry import ERC20_INTERFACE, ContractInterface, MethodSignature
from indexer.errors import UnknownMethod, UnsupportedType

KNOWN_SELECTORS = {
    "name": "06fdde03",
    "symbol": "95d89b41",
    "decimals": "313ce567",
    "totalSupply": "18160ddd",
    "balanceOf": "70a08231",
    "allowance": "dd62ed3e",
    "transfer": "a9059cbb",
    "approve": "095ea7b3",
    "transferFrom": "23b872dd",
}


@pytest.mark.parametrize("method,selector", KNOWN_SELECTORS.items())
def test_erc20_selectors(method: str, selector: str):
    assert ERC20_INTERFACE.selector_for(method).hex() == selector


def test_selectors_are_stable():
    abi_path = os.path.join(
        os.path.dirname(__file__), "..", "..", "indexer", "abi", "erc20_abi.json"
    )
    first = ContractInterface.from_json_file(abi_path)
    second = ContractInterface.from_json_file(abi_path)
    for method in first.method_names:
        assert first.selector_for(method) == second.selector_for(method)
        assert first.selector_for(method) == ERC20_INTERFACE.selector_for(method)


def test_erc20_types():
    assert ERC20_INTERFACE.input_types_for("decimals") == ()
    assert ERC20_INTERFACE.output_types_for("decimals") == ("uint8",)
    assert ERC20_INTERFACE.input_types_for("balanceOf") == ("address",)
    assert ERC20_INTERFACE.output_types_for("name") == ("string",)
    assert ERC20_INTERFACE.signature_for("transferFrom").canonical == (
        "transferFrom(address,address,uint256)"
    )


def test_events_are_skipped():
    assert "Transfer" not in ERC20_INTERFACE
    assert "Approval" not in ERC20_INTERFACE
    assert ERC20_INTERFACE.method_names == sorted(KNOWN_SELECTORS.keys())


def test_unknown_method():
    with pytest.raises(UnknownMethod):
        ERC20_INTERFACE.selector_for("mint")
    with pytest.raises(UnknownMethod):
        ERC20_INTERFACE.input_types_for("")


def test_uint_alias_is_canonical():
    interface = ContractInterface.from_abi(
        [
            {
                "type": "function",
                "name": "balanceOf",
                "inputs": [{"name": "owner", "type": "address"}],
                "outputs": [{"name": "", "type": "uint"}],
            }
        ]
    )
    assert interface.output_types_for("balanceOf") == ("uint256",)


def test_unsupported_abi():
    with pytest.raises(UnsupportedType):
        ContractInterface.from_abi(
            [
                {
                    "type": "function",
                    "name": "getReserves",
                    "inputs": [],
                    "outputs": [{"name": "", "type": "uint112[]"}],
                }
            ]
        )


def test_overloads_are_rejected():
    method = MethodSignature("safeTransferFrom", ("address", "address", "uint256"), ())
    overload = MethodSignature("safeTransferFrom", ("address", "address"), ())
    with pytest.raises(UnsupportedType):
        ContractInterface([method, overload])


def test_signature_is_immutable():
    signature = ERC20_INTERFACE.signature_for("decimals")
    with pytest.raises(AttributeError):
        signature.name = "symbol"
