"""
Encoding and decoding of scalar ABI values.

The word layout is done by `eth_abi <https://eth-abi.readthedocs.io/>`_
(strict decoding). This module only narrows it down to the scalar types
the indexer needs and translates ``eth_abi`` errors into
:class:`indexer.errors.ABIError` subclasses.

Supported type tags:

+------------+----------------------------------------------------------+
| Type tag   | Python value                                             |
+============+==========================================================+
| ``uintN``  | ``int``, ``N`` in 8..256 step 8 (``uint`` is ``uint256``)|
+------------+----------------------------------------------------------+
| ``address``| checksum ``str`` (encoding also accepts any-case hex     |
|            | strings and 20 raw bytes)                                |
+------------+----------------------------------------------------------+
| ``bool``   | ``bool``                                                 |
+------------+----------------------------------------------------------+
| ``string`` | ``str``                                                  |
+------------+----------------------------------------------------------+
"""

from __future__ import annotations
import re
from typing import Any, List, Sequence, Tuple
import eth_abi
from eth_abi.exceptions import DecodingError, EncodingError

from indexer.errors import (
    ArgumentCountMismatch,
    ArgumentTypeMismatch,
    MalformedABIData,
    UnsupportedType,
)

WORD_SIZE = 32

_UINT_RE = re.compile(r"^uint(\d+)$")


def canonical_type(type_tag: str) -> str:
    """
    Canonical form of a type tag, the one used in method signatures.

    Raises:
        UnsupportedType: if the type is not supported
    """
    if type_tag == "uint":
        return "uint256"
    if type_tag in ("address", "bool", "string"):
        return type_tag
    match = _UINT_RE.match(type_tag)
    if match:
        bits = int(match.group(1))
        if 8 <= bits <= 256 and bits % 8 == 0:
            return type_tag
    raise UnsupportedType(f"ABI type `{type_tag}` is not supported")


def is_dynamic(type_tag: str) -> bool:
    """
    ``True`` if values of the type live in the tail of the encoding
    """
    return canonical_type(type_tag) == "string"


def encode_single(value: Any, type_tag: str) -> bytes:
    """
    Encode one value as if it was the only element of an argument list.

    For static types the result is exactly one 32-byte word. For
    ``string`` it's the offset word followed by the tail.

    Raises:
        ArgumentTypeMismatch: if the value doesn't fit the type
    """
    return encode_values([type_tag], [value])


def decode_single(data: bytes, type_tag: str) -> Any:
    """
    Decode one value encoded by :func:`encode_single`.

    Raises:
        MalformedABIData: if ``data`` can't hold the value
    """
    return decode_values([type_tag], data)[0]


def encode_values(types: Sequence[str], values: Sequence[Any]) -> bytes:
    """
    Encode a list of values using the head/tail layout.

    Args:
        types: ABI types
        values: values, one per type

    Returns:
        Encoded bytes (no selector)

    Raises:
        ArgumentCountMismatch: if there's not exactly one value per type
        ArgumentTypeMismatch: if a value doesn't fit its type
    """
    if len(types) != len(values):
        raise ArgumentCountMismatch(
            f"Expected {len(types)} values for types {list(types)}, got {len(values)}"
        )
    canonical = _canonical_types(types)
    try:
        return eth_abi.encode(canonical, list(values))
    except EncodingError as e:
        raise ArgumentTypeMismatch(f"Can't encode {list(values)} as {canonical}: {e}") from e


def decode_values(types: Sequence[str], data: bytes) -> Tuple[Any, ...]:
    """
    Decode a list of values encoded with the head/tail layout.

    Padding must be zero and every offset and length must stay inside
    ``data``.

    Args:
        types: ABI types
        data: encoded bytes (no selector)

    Returns:
        A tuple of decoded values in the order of ``types``

    Raises:
        MalformedABIData: if ``data`` doesn't hold valid values of ``types``
    """
    canonical = _canonical_types(types)
    try:
        return tuple(eth_abi.decode(canonical, bytes(data)))
    except (DecodingError, UnicodeDecodeError) as e:
        raise MalformedABIData(f"Can't decode {canonical}: {e}") from e


def _canonical_types(types: Sequence[str]) -> List[str]:
    return [canonical_type(t) for t in types]
