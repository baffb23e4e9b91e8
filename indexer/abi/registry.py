from __future__ import annotations
import json
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple
from eth_utils import keccak

from indexer.abi.codec import canonical_type
from indexer.errors import UnknownMethod, UnsupportedType


@dataclass(frozen=True)
class MethodSignature:
    """
    Name and argument types of a contract method.
    """

    #: Method name
    name: str
    #: Ordered input types
    input_types: Tuple[str, ...]
    #: Ordered output types
    output_types: Tuple[str, ...]

    @property
    def canonical(self) -> str:
        """
        Canonical signature, e.g. ``balanceOf(address)``
        """
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        """
        First 4 bytes of the keccak256 hash of :attr:`canonical`
        """
        return keccak(text=self.canonical)[:4]

    @staticmethod
    def from_abi(entry: Dict[str, Any]) -> MethodSignature:
        """
        Create :class:`MethodSignature` from a json abi function entry

        Raises:
            UnsupportedType: if any of the arguments is not a supported scalar
        """
        return MethodSignature(
            name=entry["name"],
            input_types=tuple(
                canonical_type(arg["type"]) for arg in entry.get("inputs", [])
            ),
            output_types=tuple(
                canonical_type(arg["type"]) for arg in entry.get("outputs", [])
            ),
        )


class ContractInterface:
    """
    Read-only registry of contract methods built from a json abi.

    The interface is meant to be built once (usually at import time) and
    shared. It's never mutated afterwards, so it's safe to read from any
    number of tasks or threads.

    Args:
        methods: method signatures, names must be unique

    Examples:
        ::

            interface = ContractInterface.from_json_file("erc20_abi.json")
            interface.selector_for("balanceOf").hex()
            # => 70a08231
    """

    _methods: Mapping[str, MethodSignature]

    def __init__(self, methods: Iterable[MethodSignature]):
        idx: Dict[str, MethodSignature] = {}
        for method in methods:
            if method.name in idx:
                raise UnsupportedType(f"Overloaded method `{method.name}` is not supported")
            idx[method.name] = method
        self._methods = MappingProxyType(idx)

    @staticmethod
    def from_abi(abi: List[Dict[str, Any]]) -> ContractInterface:
        """
        Build an interface from json abi entries. Everything except
        functions (events, constructor, fallback) is skipped.
        """
        return ContractInterface(
            MethodSignature.from_abi(entry)
            for entry in abi
            if entry.get("type", "function") == "function"
        )

    @staticmethod
    def from_json_file(path: str) -> ContractInterface:
        """
        Build an interface from a json abi file
        """
        with open(path, "r") as f:
            return ContractInterface.from_abi(json.load(f))

    @property
    def method_names(self) -> List[str]:
        """
        Sorted names of all methods
        """
        return sorted(self._methods.keys())

    def signature_for(self, method: str) -> MethodSignature:
        """
        Signature of a method

        Raises:
            UnknownMethod: if the method is not in the interface
        """
        try:
            return self._methods[method]
        except KeyError:
            raise UnknownMethod(f"Method `{method}` is not in the interface") from None

    def selector_for(self, method: str) -> bytes:
        return self.signature_for(method).selector

    def input_types_for(self, method: str) -> Tuple[str, ...]:
        return self.signature_for(method).input_types

    def output_types_for(self, method: str) -> Tuple[str, ...]:
        return self.signature_for(method).output_types

    def __contains__(self, method: str) -> bool:
        return method in self._methods

    def __repr__(self):
        return f"ContractInterface({self.method_names})"


_current_folder = os.path.realpath(os.path.dirname(__file__))

#: Standard ERC20 token interface, loaded once per process
ERC20_INTERFACE = ContractInterface.from_json_file(f"{_current_folder}/erc20_abi.json")
