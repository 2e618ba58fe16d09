"""Value coercion: turn one command argument into binary-safe bytes.

Every argument is first classified into an :class:`ArgKind`, then encoded
according to its kind:

=========  ==========================================  ==================
Kind       Python types                                Encoding
=========  ==========================================  ==================
TEXT       ``str``                                     UTF-8
SYMBOL     ``enum.Enum`` members, ``bool``             member name,
                                                       ``true``/``false``
BINARY     ``bytes``, ``bytearray``, ``memoryview``    unchanged
INTEGER    ``int``                                     decimal text
FLOAT      ``float``                                   rejected
OPAQUE     anything else                               ``pickle``
=========  ==========================================  ==================

The OPAQUE fallback is permissive but not portable: the bytes can only be
read back by Python, and only by a compatible pickle protocol.
"""

from __future__ import annotations

import enum
import pickle
from typing import Any

from ..errors import CannotStoreFloats, UnsupportedValue


class ArgKind(enum.Enum):
    """Tag for the representation of a command argument."""

    TEXT = "text"
    SYMBOL = "symbol"
    BINARY = "binary"
    INTEGER = "integer"
    FLOAT = "float"
    OPAQUE = "opaque"


def classify(value: Any) -> ArgKind:
    """Return the argument kind for ``value``.

    Order matters: ``bool`` and ``IntEnum`` members are also ``int``
    instances and must be tagged as symbols first.
    """
    if isinstance(value, str) and not isinstance(value, enum.Enum):
        return ArgKind.TEXT
    if isinstance(value, (enum.Enum, bool)):
        return ArgKind.SYMBOL
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ArgKind.BINARY
    if isinstance(value, int):
        return ArgKind.INTEGER
    if isinstance(value, float):
        return ArgKind.FLOAT
    return ArgKind.OPAQUE


def _symbol_name(value: enum.Enum | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return value.name


def to_binary(value: Any) -> bytes:
    """Coerce a single argument to bytes.

    Raises:
        CannotStoreFloats: If ``value`` is a float.
        UnsupportedValue: If ``value`` is a string that is not valid
            Unicode (e.g. holds a lone surrogate).
    """
    kind = classify(value)
    if kind is ArgKind.TEXT:
        try:
            return value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise UnsupportedValue(value, f"Cannot encode {value!r} as UTF-8: {e.reason}") from e
    if kind is ArgKind.SYMBOL:
        return _symbol_name(value).encode("utf-8")
    if kind is ArgKind.BINARY:
        return bytes(value)
    if kind is ArgKind.INTEGER:
        return str(int(value)).encode("ascii")
    if kind is ArgKind.FLOAT:
        raise CannotStoreFloats(value)
    if kind is ArgKind.OPAQUE:
        return pickle.dumps(value)
    raise AssertionError(f"Unhandled argument kind: {kind}")
