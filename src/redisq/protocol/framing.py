"""RESP multibulk request frames.

Frame layout::

    *<argc>\\r\\n
    $<len(arg0)>\\r\\n<arg0>\\r\\n
    $<len(arg1)>\\r\\n<arg1>\\r\\n
    ...

- argc: number of arguments, decimal
- len: exact byte length of the coerced argument (not its character count)
- every header and trailer ends with CRLF
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .coercion import to_binary

NL = b"\r\n"
ARRAY_PREFIX = b"*"
BULK_PREFIX = b"$"


def to_bulk(arg: bytes) -> bytes:
    """Wrap one coerced argument in a length-prefixed bulk string."""
    return BULK_PREFIX + str(len(arg)).encode("ascii") + NL + arg + NL


def create_multibulk(args: Iterable[Any]) -> bytes:
    """Build the multibulk frame for one command.

    All arguments are coerced before anything is written, so a rejected
    argument leaves no partial frame behind.

    Args:
        args: Command verb followed by its arguments.

    Returns:
        The complete request frame.

    Raises:
        UnsupportedValue: If an argument cannot be coerced.
    """
    coerced = [to_binary(arg) for arg in args]
    header = ARRAY_PREFIX + str(len(coerced)).encode("ascii") + NL
    return header + b"".join(to_bulk(arg) for arg in coerced)


def _read_line(data: bytes, offset: int) -> tuple[bytes, int] | None:
    end = data.find(NL, offset)
    if end == -1:
        return None
    return data[offset:end], end + len(NL)


def _read_count(line: bytes, prefix: bytes) -> int | None:
    if not line.startswith(prefix):
        return None
    digits = line[len(prefix):]
    if not digits.isdigit():
        return None
    return int(digits)


def parse_multibulk(frame: bytes) -> list[bytes] | None:
    """Split a request frame back into its argument payloads.

    Returns:
        The argument list, or ``None`` if the frame is malformed,
        truncated, or has trailing bytes.
    """
    line = _read_line(frame, 0)
    if line is None:
        return None
    header, offset = line
    argc = _read_count(header, ARRAY_PREFIX)
    if argc is None:
        return None

    args: list[bytes] = []
    for _ in range(argc):
        line = _read_line(frame, offset)
        if line is None:
            return None
        header, offset = line
        size = _read_count(header, BULK_PREFIX)
        if size is None:
            return None
        end = offset + size
        if frame[end : end + len(NL)] != NL:
            return None
        args.append(frame[offset:end])
        offset = end + len(NL)

    if offset != len(frame):
        return None
    return args
