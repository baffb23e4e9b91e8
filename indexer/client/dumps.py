"""
State dumps returned by the ``debug_*`` rpc methods.
"""

from __future__ import annotations
from typing import Any, Dict


class DumpAccount:
    """
    Full state of a single account in :class:`Dump`.
    """

    #: Balance in wei (decimal string, as the node sends it)
    balance: str
    nonce: int
    #: Storage root
    root: str
    code_hash: str
    #: Hex bytecode
    code: str
    #: Storage slot -> value
    storage: Dict[str, str]

    def __init__(
        self,
        balance: str,
        nonce: int = 0,
        root: str = "",
        code_hash: str = "",
        code: str = "",
        storage: Dict[str, str] | None = None,
    ):
        self.balance = balance
        self.nonce = nonce
        self.root = root
        self.code_hash = code_hash
        self.code = code
        self.storage = storage or {}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> DumpAccount:
        return DumpAccount(
            balance=str(d.get("balance", "0")),
            nonce=d.get("nonce", 0),
            root=d.get("root", ""),
            code_hash=d.get("codeHash", ""),
            code=d.get("code", ""),
            storage=d.get("storage") or {},
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "balance": self.balance,
            "nonce": self.nonce,
            "root": self.root,
            "codeHash": self.code_hash,
            "code": self.code,
            "storage": self.storage,
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f'DumpAccount({{"balance": {self.balance}, "nonce": {self.nonce}, "root": {self.root}, "code_hash": {self.code_hash}, "storage": {len(self.storage)} slots}})'


class Dump:
    """
    Full state dump at a block (``debug_dumpBlock``).
    """

    #: State root
    root: str
    #: Address -> account state
    accounts: Dict[str, DumpAccount]

    def __init__(self, root: str, accounts: Dict[str, DumpAccount] | None = None):
        self.root = root
        self.accounts = accounts or {}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> Dump:
        """
        Create :class:`Dump` from the rpc response
        """
        return Dump(
            root=d.get("root", ""),
            accounts={
                addr: DumpAccount.from_dict(acc)
                for addr, acc in (d.get("accounts") or {}).items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "accounts": {addr: acc.to_dict() for addr, acc in self.accounts.items()},
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f'Dump({{"root": {self.root}, "accounts": {len(self.accounts)}}})'


class DirtyDumpAccount:
    """
    Changed part of an account in :class:`DirtyDump`.
    """

    #: Balance in wei (decimal string)
    balance: str
    #: Changed storage slots
    storage: Dict[str, str]

    def __init__(self, balance: str, storage: Dict[str, str] | None = None):
        self.balance = balance
        self.storage = storage or {}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> DirtyDumpAccount:
        return DirtyDumpAccount(
            balance=str(d.get("balance", "0")), storage=d.get("storage") or {}
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"balance": self.balance, "storage": self.storage}

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f'DirtyDumpAccount({{"balance": {self.balance}, "storage": {len(self.storage)} slots}})'


class DirtyDump:
    """
    Accounts modified by a block (``debug_getModifiedAccountStatesByNumber``).
    """

    #: State root after the block
    root: str
    #: Address -> modified account state
    accounts: Dict[str, DirtyDumpAccount]

    def __init__(
        self, root: str, accounts: Dict[str, DirtyDumpAccount] | None = None
    ):
        self.root = root
        self.accounts = accounts or {}

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> DirtyDump:
        """
        Create :class:`DirtyDump` from the rpc response
        """
        return DirtyDump(
            root=d.get("root", ""),
            accounts={
                addr: DirtyDumpAccount.from_dict(acc)
                for addr, acc in (d.get("accounts") or {}).items()
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root,
            "accounts": {addr: acc.to_dict() for addr, acc in self.accounts.items()},
        }

    def __eq__(self, other):
        if type(other) is type(self):
            return self.__dict__ == other.__dict__
        return False

    def __repr__(self):
        return f'DirtyDump({{"root": {self.root}, "accounts": {len(self.accounts)}}})'
