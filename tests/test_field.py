import dataclasses
import ipaddress
from datetime import datetime, timedelta, timezone

import pytest

from zaplog import field as f
from zaplog.field import Field, FieldType


class Username:
    def __init__(self, name):
        self.name = name

    def marshal_log_object(self, enc):
        enc.add_string("username", self.name)

    def __eq__(self, other):
        return isinstance(other, Username) and other.name == self.name


UTC = timezone.utc
ADDR = ipaddress.ip_address("1.2.3.4")
NAME = Username("phil")
INTS = [5, 6]


@pytest.mark.parametrize(
    "expected, got",
    [
        (Field(type=FieldType.SKIP), f.skip()),
        (Field("k", FieldType.BINARY, interface=b"ab12"), f.binary("k", b"ab12")),
        (Field("k", FieldType.BOOL, integer=1), f.bool_("k", True)),
        (Field("k", FieldType.BOOL, integer=0), f.bool_("k", False)),
        (Field("k", FieldType.BYTE_STRING, interface=b"ab12"), f.byte_string("k", b"ab12")),
        (Field("k", FieldType.COMPLEX128, interface=1 + 2j), f.complex128("k", 1 + 2j)),
        (Field("k", FieldType.COMPLEX64, interface=1 + 2j), f.complex64("k", 1 + 2j)),
        (Field("k", FieldType.DURATION, integer=1), f.duration("k", 1)),
        (Field("k", FieldType.INT64, integer=1), f.int_("k", 1)),
        (Field("k", FieldType.INT64, integer=1), f.int64("k", 1)),
        (Field("k", FieldType.INT32, integer=1), f.int32("k", 1)),
        (Field("k", FieldType.INT16, integer=1), f.int16("k", 1)),
        (Field("k", FieldType.INT8, integer=1), f.int8("k", 1)),
        (Field("k", FieldType.STRING, string="foo"), f.string("k", "foo")),
        (Field("k", FieldType.UINT64, integer=1), f.uint("k", 1)),
        (Field("k", FieldType.UINT64, integer=1), f.uint64("k", 1)),
        (Field("k", FieldType.UINT32, integer=1), f.uint32("k", 1)),
        (Field("k", FieldType.UINT16, integer=1), f.uint16("k", 1)),
        (Field("k", FieldType.UINT8, integer=1), f.uint8("k", 1)),
        (Field("k", FieldType.UINTPTR, integer=10), f.uintptr("k", 0xA)),
        (Field("k", FieldType.REFLECT, interface=INTS), f.reflect("k", INTS)),
        (Field("k", FieldType.REFLECT), f.reflect("k", None)),
        (Field("k", FieldType.STRINGER, interface=ADDR), f.stringer("k", ADDR)),
        (Field("k", FieldType.OBJECT_MARSHALER, interface=NAME), f.object_("k", NAME)),
        (Field(type=FieldType.INLINE_MARSHALER, interface=NAME), f.inline(NAME)),
        (Field("k", FieldType.NAMESPACE), f.namespace("k")),
    ],
)
def test_field_constructors(expected, got):
    assert got == expected


@pytest.mark.parametrize(
    "expected, got",
    [
        (
            Field("k", FieldType.TIME, integer=0, interface=UTC),
            f.time_("k", datetime(1970, 1, 1, tzinfo=UTC)),
        ),
        (
            Field("k", FieldType.TIME, integer=1000, interface=UTC),
            f.time_("k", datetime(1970, 1, 1, 0, 0, 0, 1, tzinfo=UTC)),
        ),
        (
            Field("k", FieldType.TIME_FULL, interface=datetime(1, 1, 1)),
            f.time_("k", datetime(1, 1, 1)),
        ),
        (
            Field("k", FieldType.TIME_FULL, interface=datetime(9999, 12, 31, tzinfo=UTC)),
            f.time_("k", datetime(9999, 12, 31, tzinfo=UTC)),
        ),
    ],
)
def test_time_constructor(expected, got):
    assert got == expected


def test_time_keeps_offset_zone():
    tz = timezone(timedelta(hours=2))
    got = f.time_("k", datetime(1970, 1, 1, 2, 0, tzinfo=tz))
    assert got == Field("k", FieldType.TIME, integer=0, interface=tz)


def test_naive_time_read_as_utc():
    assert f.time_("k", datetime(1970, 1, 1, 0, 0, 1)) == Field(
        "k", FieldType.TIME, integer=1_000_000_000, interface=None
    )


def test_time_before_epoch_within_range():
    got = f.time_("k", datetime(1700, 1, 1, tzinfo=UTC))
    assert got.type is FieldType.TIME
    assert got.integer < 0


def test_time_rejects_non_datetime():
    with pytest.raises(TypeError):
        f.time_("k", 12)


def test_float_bit_patterns():
    assert f.float64("k", 1.0) == Field("k", FieldType.FLOAT64, integer=4607182418800017408)
    assert f.float64("k", -0.0).integer == -9223372036854775808
    assert f.float32("k", 1.0) == Field("k", FieldType.FLOAT32, integer=1065353216)


def test_complex64_rounds_to_single_precision():
    got = f.complex64("k", 0.1 + 0j)
    assert got.interface.real != 0.1
    assert abs(got.interface.real - 0.1) < 1e-8


def test_uint64_reinterpreted_as_signed():
    assert f.uint64("k", 2**64 - 1).integer == -1
    assert f.uintptr("k", 2**63).integer == -(2**63)


def test_duration_from_timedelta():
    assert f.duration("k", timedelta(seconds=1)) == Field(
        "k", FieldType.DURATION, integer=1_000_000_000
    )


@pytest.mark.parametrize(
    "ctor, val",
    [
        (f.int8, 128),
        (f.int8, -129),
        (f.int16, 1 << 15),
        (f.int32, 1 << 31),
        (f.int64, 1 << 63),
        (f.uint8, 256),
        (f.uint8, -1),
        (f.uint16, 1 << 16),
        (f.uint32, 1 << 32),
        (f.uint64, 1 << 64),
        (f.duration, 1 << 63),
    ],
)
def test_out_of_range_integers(ctor, val):
    with pytest.raises(OverflowError):
        ctor("k", val)


def test_object_requires_marshaler():
    with pytest.raises(TypeError):
        f.object_("k", object())
    with pytest.raises(TypeError):
        f.inline(42)


BOOL_VAL = True
TIME_VAL = datetime.fromtimestamp(100000, tz=UTC)


@pytest.mark.parametrize(
    "ptr_ctor, ctor, val",
    [
        (f.bool_p, f.bool_, BOOL_VAL),
        (f.complex128_p, f.complex128, 0j),
        (f.complex64_p, f.complex64, 0j),
        (f.duration_p, f.duration, timedelta(seconds=1)),
        (f.float64_p, f.float64, 1.0),
        (f.float32_p, f.float32, 1.0),
        (f.int_p, f.int_, 1),
        (f.int64_p, f.int64, 1),
        (f.int32_p, f.int32, 1),
        (f.int16_p, f.int16, 1),
        (f.int8_p, f.int8, 1),
        (f.string_p, f.string, "hello"),
        (f.time_p, f.time_, TIME_VAL),
        (f.uint_p, f.uint, 1),
        (f.uint64_p, f.uint64, 1),
        (f.uint32_p, f.uint32, 1),
        (f.uint16_p, f.uint16, 1),
        (f.uint8_p, f.uint8, 1),
        (f.uintptr_p, f.uintptr, 1),
    ],
)
def test_optional_constructors(ptr_ctor, ctor, val):
    assert ptr_ctor("k", None) == f.nil_field("k")
    assert ptr_ctor("k", val) == ctor("k", val)


def test_nil_field_is_reflect_of_none():
    assert f.nil_field("k") == Field("k", FieldType.REFLECT, interface=None)


def test_fields_are_immutable_and_reusable():
    original = f.string("", "v")
    with pytest.raises(dataclasses.FrozenInstanceError):
        original.key = "k"
    renamed = dataclasses.replace(original, key="k")
    assert renamed == Field("k", FieldType.STRING, string="v")
    assert original.key == ""