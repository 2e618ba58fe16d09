"""Exception hierarchy for the command and dispatch layer.

Errors reported by the backing store or by the connection actor are *not*
exceptions: they come back as :class:`~redisq.protocol.messages.Error`
replies. Exceptions are reserved for faults on the caller's side of the
actor boundary.
"""

from __future__ import annotations

from typing import Any


class RedisqError(Exception):
    """Base class for all redisq exceptions."""


class UnsupportedValue(RedisqError, TypeError):
    """An argument has no safe binary representation."""

    def __init__(self, value: Any, message: str | None = None) -> None:
        self.value = value
        super().__init__(message or f"Cannot encode value {value!r}")


class CannotStoreFloats(UnsupportedValue):
    """Raised for float arguments.

    Redis stores opaque strings, and a float's textual form does not
    round-trip reliably, so floats must be formatted by the caller.
    """

    def __init__(self, value: float) -> None:
        super().__init__(
            value,
            f"Cannot store floats, format {value!r} explicitly before sending",
        )


class RequestTimeout(RedisqError, TimeoutError):
    """The caller stopped waiting for the connection actor's reply.

    The request is not cancelled: it may still be executed against the
    backing store after this is raised.
    """

    def __init__(self, message: Any, timeout_ms: int) -> None:
        self.message = message
        self.timeout_ms = timeout_ms
        super().__init__(f"No reply within {timeout_ms} ms for {message!r}")


class ActorNotRunning(RedisqError, ConnectionError):
    """A message was addressed to a connection actor that is not running."""


class ProtocolViolation(RedisqError):
    """The connection actor replied with something outside its contract."""
