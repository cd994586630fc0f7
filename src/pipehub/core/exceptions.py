"""
Custom exception classes for the pipehub configuration core.

Every error raised while turning a configuration document into the runtime
configuration is fatal to startup: the contract is "decode once, correctly,
or refuse to start". None of these are retried.
"""

from typing import Optional


class PipehubException(Exception):
    """Base exception class for all pipehub exceptions."""

    pass


class DecodeError(PipehubException):
    """
    Raised when a document node does not match the expected field type.

    Covers wrong node kinds, unparseable integers, unknown keys inside a
    ``pipe`` block and scalar types the document model cannot represent.

    Example:
        >>> raise DecodeError("server[0].http[0].port", "expected integer, got 'eighty'")
    """

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"decode '{key}' error: {reason}")


class ValidationError(PipehubException):
    """
    Raised when a cardinality invariant is violated.

    The message names the block that exceeded its limit, e.g. ``server`` or
    ``server.http``.
    """

    def __init__(self, block: str, count: int, limit: int = 1):
        self.block = block
        self.count = count
        self.limit = limit
        super().__init__(
            f"more than one '{block}' config block found ({count}), only {limit} is allowed"
        )


class DurationParseError(PipehubException):
    """Raised when a duration literal such as ``graceful-shutdown`` is malformed."""

    def __init__(self, raw: str, reason: Optional[str] = None):
        self.raw = raw
        self.reason = reason
        message = f"parse duration '{raw}' error"
        if reason:
            message += f": {reason}"
        super().__init__(message)
