"""Tests for argument classification and coercion."""

import enum
import pickle

import pytest

from redisq.errors import CannotStoreFloats, UnsupportedValue
from redisq.protocol.coercion import ArgKind, classify, to_binary


class Status(enum.Enum):
    ok = 1
    failed = 2


class Priority(enum.IntEnum):
    HIGH = 1


def test_string_is_utf8():
    """Strings should encode as UTF-8."""
    assert to_binary("foo") == b"foo"
    assert to_binary("café") == "café".encode("utf-8")


def test_unencodable_string_rejected():
    """Strings with lone surrogates should raise UnsupportedValue."""
    with pytest.raises(UnsupportedValue) as exc_info:
        to_binary("\ud800")
    assert exc_info.value.value == "\ud800"
    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)


def test_symbol_uses_name():
    """Enum members should encode as their literal name."""
    assert to_binary(Status.ok) == b"ok"


def test_int_enum_is_symbol_not_integer():
    """IntEnum members are ints too, but should be tagged as symbols."""
    assert classify(Priority.HIGH) is ArgKind.SYMBOL
    assert to_binary(Priority.HIGH) == b"HIGH"


def test_bool_is_symbol():
    """Booleans should encode as true/false, not 1/0."""
    assert classify(True) is ArgKind.SYMBOL
    assert to_binary(True) == b"true"
    assert to_binary(False) == b"false"


def test_binary_passthrough():
    """Binary blobs should pass through unchanged."""
    blob = b"\x00\xff\r\n"
    assert to_binary(blob) == blob
    assert to_binary(bytearray(b"ab")) == b"ab"
    assert to_binary(memoryview(b"cd")) == b"cd"


def test_integer_decimal():
    """Integers should encode as canonical decimal text."""
    assert to_binary(42) == b"42"
    assert to_binary(0) == b"0"
    assert to_binary(-7) == b"-7"
    assert to_binary(2**70) == str(2**70).encode()


def test_float_rejected():
    """Floats should raise CannotStoreFloats carrying the value."""
    with pytest.raises(CannotStoreFloats) as exc_info:
        to_binary(1.5)
    assert exc_info.value.value == 1.5


def test_float_fault_is_unsupported_value_and_type_error():
    """The float fault should be catchable as UnsupportedValue or TypeError."""
    with pytest.raises(UnsupportedValue):
        to_binary(0.0)
    with pytest.raises(TypeError):
        to_binary(float("nan"))


def test_opaque_fallback_pickles():
    """Unknown types should fall back to pickle."""
    value = {"a": [1, 2]}
    assert classify(value) is ArgKind.OPAQUE
    assert pickle.loads(to_binary(value)) == value


def test_classify_kinds():
    """Each supported type should map to its kind."""
    assert classify("x") is ArgKind.TEXT
    assert classify(b"x") is ArgKind.BINARY
    assert classify(3) is ArgKind.INTEGER
    assert classify(3.0) is ArgKind.FLOAT
    assert classify(None) is ArgKind.OPAQUE
