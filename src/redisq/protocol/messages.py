"""Messages exchanged with the connection actor.

The dispatch layer sends :class:`Request` or :class:`Pipeline`; the actor
answers a ``Request`` with one :data:`Result` and a ``Pipeline`` with a list
of results (one per frame, in order) or a single top-level :class:`Error`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

NO_CONNECTION = "no_connection"


@dataclass(frozen=True)
class Request:
    """A single command frame."""

    frame: bytes

    def __repr__(self) -> str:
        # Frames can hold large values or credentials; never print them
        return f"Request(frame_len={len(self.frame)})"


@dataclass(frozen=True)
class Pipeline:
    """An ordered batch of command frames sent as one message."""

    frames: tuple[bytes, ...]

    def __len__(self) -> int:
        return len(self.frames)

    def __repr__(self) -> str:
        return f"Pipeline(frames={len(self.frames)})"


@dataclass(frozen=True)
class Ok:
    """Successful reply carrying the decoded value."""

    value: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Error:
    """Failed reply.

    ``reason`` is either :data:`NO_CONNECTION` or the error payload the
    server returned, passed through untouched.
    """

    reason: Any

    @property
    def ok(self) -> bool:
        return False

    @property
    def no_connection(self) -> bool:
        return self.reason == NO_CONNECTION


Message = Union[Request, Pipeline]
Result = Union[Ok, Error]
