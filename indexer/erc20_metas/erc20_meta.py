from __future__ import annotations
from typing import Any, Dict
from hexbytes import HexBytes


class ERC20Meta:
    """
    ERC20 token metadata at a block (code, decimals, total supply, name).

    The metadata is fetched on a best-effort basis: a field whose call
    failed keeps its zero value (``0`` for :attr:`decimals`, ``""`` for
    :attr:`total_supply` and :attr:`name`), so check fields for
    plausibility instead of expecting an error.

    Note:
        The convention is to use :code:`address` in lowercase format.
        This is not in line with EIP55 but makes things more uniform and
        simpler.
    """

    _address: str
    #: Raw contract bytecode
    code: HexBytes
    #: Block number the metadata was fetched at
    block_number: int
    #: Token decimals
    decimals: int
    #: Token total supply (decimal string)
    total_supply: str
    #: Token name
    name: str

    def __init__(
        self,
        address: str,
        code: bytes,
        block_number: int,
        decimals: int = 0,
        total_supply: str = "",
        name: str = "",
    ):
        self.address = address
        self.code = HexBytes(code)
        self.block_number = block_number
        self.decimals = decimals
        self.total_supply = total_supply
        self.name = name

    @property
    def address(self) -> str:
        """
        Token address (lowercase)
        """
        return self._address

    @address.setter
    def address(self, val: str):
        self._address = val.lower()

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert :class:`ERC20Meta` to dict
        """
        return {
            "address": self.address,
            "code": self.code.to_0x_hex(),
            "blockNumber": self.block_number,
            "decimals": self.decimals,
            "totalSupply": self.total_supply,
            "name": self.name,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> ERC20Meta:
        """
        Create :class:`ERC20Meta` from dict
        """
        return ERC20Meta(
            address=d["address"],
            code=HexBytes(d["code"]),
            block_number=d["blockNumber"],
            decimals=d["decimals"],
            total_supply=d["totalSupply"],
            name=d["name"],
        )

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f'ERC20Meta({{"address": {self.address}, "block_number": {self.block_number}, "decimals": {self.decimals}, "total_supply": {self.total_supply}, "name": {self.name}}})'
