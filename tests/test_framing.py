"""Tests for multibulk frame building and parsing."""

import pytest

from redisq.errors import CannotStoreFloats
from redisq.protocol.framing import create_multibulk, parse_multibulk, to_bulk


def test_set_command_frame():
    """SET foo bar should produce the canonical frame."""
    frame = create_multibulk(["SET", "foo", "bar"])
    assert frame == b"*3\r\n$3\r\nSET\r\n$3\r\nfoo\r\n$3\r\nbar\r\n"


def test_empty_command():
    """An empty command still yields a valid header."""
    assert create_multibulk([]) == b"*0\r\n"


def test_frame_is_bytes():
    """Frames should be immutable bytes."""
    assert isinstance(create_multibulk(["PING"]), bytes)


def test_mixed_argument_types():
    """Integers and binaries should be coerced in place."""
    frame = create_multibulk(["EXPIRE", b"key", 42])
    assert frame == b"*3\r\n$6\r\nEXPIRE\r\n$3\r\nkey\r\n$2\r\n42\r\n"


def test_length_is_byte_length():
    """Declared lengths must count bytes, not characters."""
    frame = create_multibulk(["SET", "k", "héllo€"])
    payload = "héllo€".encode("utf-8")
    assert f"${len(payload)}\r\n".encode() + payload + b"\r\n" in frame
    assert len(payload) != len("héllo€")


def test_binary_with_crlf():
    """Payloads containing CRLF are length-delimited, not escaped."""
    frame = create_multibulk([b"a\r\nb"])
    assert frame == b"*1\r\n$4\r\na\r\nb\r\n"


def test_argument_count_and_segments():
    """Header count and segment lengths should match the arguments."""
    args = ["LPUSH", "list", 1, 22, 333, b"", "x" * 100]
    frame = create_multibulk(args)
    assert frame.startswith(b"*7\r\n")
    parsed = parse_multibulk(frame)
    assert parsed is not None
    assert len(parsed) == len(args)
    assert parsed[2:5] == [b"1", b"22", b"333"]
    assert parsed[5] == b""


def test_float_aborts_whole_frame():
    """A float anywhere aborts encoding before any frame is returned."""
    with pytest.raises(CannotStoreFloats):
        create_multibulk(["SET", "k", 1.0])


def test_generator_arguments():
    """Any iterable of arguments should be accepted."""
    frame = create_multibulk(a for a in ["GET", "k"])
    assert frame == b"*2\r\n$3\r\nGET\r\n$1\r\nk\r\n"


def test_to_bulk():
    """to_bulk wraps a payload with its length header."""
    assert to_bulk(b"abc") == b"$3\r\nabc\r\n"
    assert to_bulk(b"") == b"$0\r\n\r\n"


def test_parse_empty_frame():
    """*0 parses to an empty argument list."""
    assert parse_multibulk(b"*0\r\n") == []


def test_parse_truncated():
    """Truncated frames should return None."""
    frame = create_multibulk(["SET", "foo", "bar"])
    assert parse_multibulk(frame[:-3]) is None
    assert parse_multibulk(b"*2\r\n$3\r\nfoo\r\n") is None


def test_parse_bad_prefix():
    """Frames without the array or bulk prefix should return None."""
    assert parse_multibulk(b"+OK\r\n") is None
    assert parse_multibulk(b"*1\r\n:3\r\n") is None
    assert parse_multibulk(b"*x\r\n") is None


def test_parse_wrong_length():
    """A declared length that does not match the payload should fail."""
    assert parse_multibulk(b"*1\r\n$5\r\nabc\r\n") is None


def test_parse_trailing_bytes():
    """Bytes after the last segment should be rejected."""
    assert parse_multibulk(b"*0\r\nextra") is None
