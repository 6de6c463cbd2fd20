"""Strongly typed, lazily encoded log fields and their constructors."""

from __future__ import annotations

import math
import operator
import struct
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class FieldType(Enum):
    """How a :class:`Field` carries its value and how an encoder treats it."""

    UNKNOWN = auto()
    ARRAY_MARSHALER = auto()
    OBJECT_MARSHALER = auto()
    BINARY = auto()
    BOOL = auto()
    BYTE_STRING = auto()
    COMPLEX128 = auto()
    COMPLEX64 = auto()
    DURATION = auto()
    FLOAT64 = auto()
    FLOAT32 = auto()
    INT64 = auto()
    INT32 = auto()
    INT16 = auto()
    INT8 = auto()
    STRING = auto()
    TIME = auto()
    TIME_FULL = auto()
    UINT64 = auto()
    UINT32 = auto()
    UINT16 = auto()
    UINT8 = auto()
    UINTPTR = auto()
    REFLECT = auto()
    NAMESPACE = auto()
    STRINGER = auto()
    ERROR = auto()
    SKIP = auto()
    INLINE_MARSHALER = auto()


@runtime_checkable
class ObjectMarshaler(Protocol):
    """An object that writes itself into an object encoder."""

    def marshal_log_object(self, enc: Any) -> None: ...


@dataclass(frozen=True)
class Field:
    """A key and a value in one of several storage slots, chosen by ``type``.

    Numbers, booleans and durations live in ``integer``, text in ``string``
    and everything else in ``interface``.
    """

    key: str = ""
    type: FieldType = FieldType.UNKNOWN
    integer: int = 0
    string: str = ""
    interface: Any = None


def _signed(val: Any, bits: int) -> int:
    val = operator.index(val)
    low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    if not low <= val <= high:
        raise OverflowError(f"{val} does not fit in a signed {bits}-bit integer")
    return val


def _unsigned(val: Any, bits: int) -> int:
    val = operator.index(val)
    if not 0 <= val < (1 << bits):
        raise OverflowError(f"{val} does not fit in an unsigned {bits}-bit integer")
    return val


def _as_int64(val: int) -> int:
    """Reinterpret an unsigned 64-bit value as a signed one."""
    return val - (1 << 64) if val > _INT64_MAX else val


def _to_float32(f: float) -> float:
    try:
        return struct.unpack("<f", struct.pack("<f", f))[0]
    except OverflowError:
        return math.copysign(math.inf, f)


def skip() -> Field:
    """A no-op field."""
    return Field(type=FieldType.SKIP)


def nil_field(key: str) -> Field:
    """A field that encodes explicitly as nil."""
    return reflect(key, None)


def binary(key: str, val: bytes) -> Field:
    """An opaque binary blob."""
    return Field(key=key, type=FieldType.BINARY, interface=bytes(val))


def bool_(key: str, val: bool) -> Field:
    return Field(key=key, type=FieldType.BOOL, integer=1 if val else 0)


def bool_p(key: str, val: bool | None) -> Field:
    return nil_field(key) if val is None else bool_(key, val)


def byte_string(key: str, val: bytes) -> Field:
    """UTF-8 encoded text given as bytes."""
    return Field(key=key, type=FieldType.BYTE_STRING, interface=bytes(val))


def complex128(key: str, val: complex) -> Field:
    return Field(key=key, type=FieldType.COMPLEX128, interface=complex(val))


def complex128_p(key: str, val: complex | None) -> Field:
    return nil_field(key) if val is None else complex128(key, val)


def complex64(key: str, val: complex) -> Field:
    """A complex number whose parts are rounded to single precision."""
    c = complex(val)
    rounded = complex(_to_float32(c.real), _to_float32(c.imag))
    return Field(key=key, type=FieldType.COMPLEX64, interface=rounded)


def complex64_p(key: str, val: complex | None) -> Field:
    return nil_field(key) if val is None else complex64(key, val)


def float64(key: str, val: float) -> Field:
    """A double, stored as its IEEE 754 bit pattern."""
    (bits,) = struct.unpack("<q", struct.pack("<d", float(val)))
    return Field(key=key, type=FieldType.FLOAT64, integer=bits)


def float64_p(key: str, val: float | None) -> Field:
    return nil_field(key) if val is None else float64(key, val)


def float32(key: str, val: float) -> Field:
    """A single-precision float, stored as its IEEE 754 bit pattern."""
    (bits,) = struct.unpack("<I", struct.pack("<f", _to_float32(float(val))))
    return Field(key=key, type=FieldType.FLOAT32, integer=bits)


def float32_p(key: str, val: float | None) -> Field:
    return nil_field(key) if val is None else float32(key, val)


def int_(key: str, val: int) -> Field:
    return int64(key, val)


def int_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else int_(key, val)


def int64(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.INT64, integer=_signed(val, 64))


def int64_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else int64(key, val)


def int32(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.INT32, integer=_signed(val, 32))


def int32_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else int32(key, val)


def int16(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.INT16, integer=_signed(val, 16))


def int16_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else int16(key, val)


def int8(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.INT8, integer=_signed(val, 8))


def int8_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else int8(key, val)


def string(key: str, val: str) -> Field:
    return Field(key=key, type=FieldType.STRING, string=val)


def string_p(key: str, val: str | None) -> Field:
    return nil_field(key) if val is None else string(key, val)


def uint(key: str, val: int) -> Field:
    return uint64(key, val)


def uint_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else uint(key, val)


def uint64(key: str, val: int) -> Field:
    """An unsigned 64-bit integer, stored reinterpreted as signed."""
    return Field(key=key, type=FieldType.UINT64, integer=_as_int64(_unsigned(val, 64)))


def uint64_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else uint64(key, val)


def uint32(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.UINT32, integer=_unsigned(val, 32))


def uint32_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else uint32(key, val)


def uint16(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.UINT16, integer=_unsigned(val, 16))


def uint16_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else uint16(key, val)


def uint8(key: str, val: int) -> Field:
    return Field(key=key, type=FieldType.UINT8, integer=_unsigned(val, 8))


def uint8_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else uint8(key, val)


def uintptr(key: str, val: int) -> Field:
    """A pointer-sized unsigned address, stored reinterpreted as signed."""
    return Field(key=key, type=FieldType.UINTPTR, integer=_as_int64(_unsigned(val, 64)))


def uintptr_p(key: str, val: int | None) -> Field:
    return nil_field(key) if val is None else uintptr(key, val)


def reflect(key: str, val: Any) -> Field:
    """An arbitrary object, serialized generically by the encoder."""
    return Field(key=key, type=FieldType.REFLECT, interface=val)


def namespace(key: str) -> Field:
    """Open a named scope; later fields are nested inside it."""
    return Field(key=key, type=FieldType.NAMESPACE)


def stringer(key: str, val: Any) -> Field:
    """A value whose ``str()`` is taken lazily at encoding time."""
    return Field(key=key, type=FieldType.STRINGER, interface=val)


def _unix_nanos(val: datetime) -> int:
    aware = val if val.tzinfo is not None else val.replace(tzinfo=timezone.utc)
    delta = aware - _EPOCH
    return (delta.days * 86400 + delta.seconds) * 1_000_000_000 + delta.microseconds * 1000


def time_(key: str, val: datetime) -> Field:
    """A point in time.

    Times representable as int64 nanoseconds since the epoch are stored as
    that number plus their tzinfo; others are stored whole. Naive datetimes
    are read as UTC and keep ``None`` as their zone.
    """
    if not isinstance(val, datetime):
        raise TypeError(f"expected a datetime, got {type(val).__name__}")
    nanos = _unix_nanos(val)
    if not _INT64_MIN <= nanos <= _INT64_MAX:
        return Field(key=key, type=FieldType.TIME_FULL, interface=val)
    return Field(key=key, type=FieldType.TIME, integer=nanos, interface=val.tzinfo)


def time_p(key: str, val: datetime | None) -> Field:
    return nil_field(key) if val is None else time_(key, val)


def duration(key: str, val: timedelta | int) -> Field:
    """A duration, given as a timedelta or as integer nanoseconds."""
    if isinstance(val, timedelta):
        nanos = (val.days * 86400 + val.seconds) * 1_000_000_000 + val.microseconds * 1000
    else:
        nanos = operator.index(val)
    if not _INT64_MIN <= nanos <= _INT64_MAX:
        raise OverflowError(f"duration of {nanos}ns does not fit in 64 bits")
    return Field(key=key, type=FieldType.DURATION, integer=nanos)


def duration_p(key: str, val: timedelta | int | None) -> Field:
    return nil_field(key) if val is None else duration(key, val)


def _require_object_marshaler(val: Any) -> None:
    if not isinstance(val, ObjectMarshaler):
        raise TypeError(f"{type(val).__name__} has no marshal_log_object method")


def object_(key: str, val: ObjectMarshaler) -> Field:
    """A structured object that marshals itself lazily."""
    _require_object_marshaler(val)
    return Field(key=key, type=FieldType.OBJECT_MARSHALER, interface=val)


def inline(val: ObjectMarshaler) -> Field:
    """Like :func:`object_`, but adds the object's fields to the current scope."""
    _require_object_marshaler(val)
    return Field(type=FieldType.INLINE_MARSHALER, interface=val)