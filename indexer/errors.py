"""
Exceptions raised by the :mod:`indexer` package.

All of them derive from :class:`IndexerError`, so callers that just want
to log and move on can catch a single type.

+--------------------------------+------------------------------------------+
| Exception                      | Meaning                                  |
+================================+==========================================+
| :class:`TransportError`        | Network / provider failure. Not retried  |
|                                | internally.                              |
+--------------------------------+------------------------------------------+
| :class:`RPCError`              | The node answered with a JSON-RPC error  |
+--------------------------------+------------------------------------------+
| :class:`NotFound`              | No such block / transaction / receipt    |
+--------------------------------+------------------------------------------+
| :class:`ConnectionClosed`      | The client was closed, or the stream     |
|                                | behind a subscription ended              |
+--------------------------------+------------------------------------------+
| :class:`CallCancelled`         | The caller cancelled the request         |
+--------------------------------+------------------------------------------+
| :class:`DeadlineExceeded`      | The request deadline fired               |
+--------------------------------+------------------------------------------+
| :class:`MalformedABIData`,     | Response bytes don't match the declared  |
| :class:`TruncatedResponse`     | outputs                                  |
+--------------------------------+------------------------------------------+
| :class:`UnknownMethod`,        | Programmer errors caught while building  |
| :class:`ArgumentCountMismatch`,| a call                                   |
| :class:`ArgumentTypeMismatch`  |                                          |
+--------------------------------+------------------------------------------+
"""

from __future__ import annotations
from typing import Any


class IndexerError(Exception):
    """
    Base class for every error raised by this package.
    """


class TransportError(IndexerError):
    """
    The remote call didn't go through (connection refused, provider
    failure, bad HTTP status etc.).
    """


class RPCError(TransportError):
    """
    The node returned a JSON-RPC error object.

    Args:
        method: remote method name
        error: the ``error`` member of the JSON-RPC response
    """

    #: Remote method name
    method: str
    #: JSON-RPC error code (``None`` if the node didn't send one)
    code: int | None

    def __init__(self, method: str, error: Any):
        self.method = method
        if isinstance(error, dict):
            self.code = error.get("code")
            message = error.get("message", str(error))
        else:
            self.code = None
            message = str(error)
        super().__init__(f"{method}: {message} (code {self.code})")


class NotFound(IndexerError):
    """
    The requested block, transaction or receipt doesn't exist.
    """


class ConnectionClosed(IndexerError):
    """
    The client was closed (or the underlying connection went away).
    Terminal: every subsequent call fails the same way.
    """


class CallCancelled(IndexerError):
    """
    The request was cancelled by the caller before it completed.
    """


class DeadlineExceeded(CallCancelled, TimeoutError):
    """
    The request deadline fired before the node answered.
    """


class ABIError(IndexerError):
    """
    Base class for ABI encoding / decoding errors.
    """


class UnsupportedType(ABIError):
    """
    The ABI type is outside of the supported scalar set.
    """


class MalformedABIData(ABIError, ValueError):
    """
    Binary data can't be decoded as the declared ABI type.
    """


class TruncatedResponse(MalformedABIData):
    """
    The call response is shorter than the declared outputs require.
    """


class UnknownMethod(ABIError):
    """
    The method is not part of the contract interface.
    """


class ArgumentCountMismatch(ABIError, TypeError):
    """
    Wrong number of arguments for a contract method.
    """


class ArgumentTypeMismatch(ABIError, TypeError):
    """
    An argument can't be encoded as the declared ABI type.
    """
