"""Field constructors for arrays of values and for array marshalers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Protocol, runtime_checkable

from .field import (
    Field,
    FieldType,
    ObjectMarshaler,
    _signed,
    _to_float32,
    _unsigned,
    duration,
)


@runtime_checkable
class ArrayMarshaler(Protocol):
    """An object that writes its elements into an array encoder."""

    def marshal_log_array(self, arr: Any) -> None: ...


@dataclass(frozen=True)
class _TypedArray:
    """Elements of one kind, each written with the same encoder method."""

    append: str
    values: tuple

    def marshal_log_array(self, arr: Any) -> None:
        add = getattr(arr, self.append)
        for value in self.values:
            add(value)


@dataclass(frozen=True)
class _ObjectArray:
    """Objects that marshal themselves; stops at the first failure."""

    values: tuple

    def marshal_log_array(self, arr: Any) -> None:
        for obj in self.values:
            arr.append_object(obj)


@dataclass(frozen=True)
class _StringerArray:
    """Values written as their ``str()``, taken at encoding time."""

    values: tuple

    def marshal_log_array(self, arr: Any) -> None:
        for obj in self.values:
            arr.append_string(str(obj))


def array(key: str, val: ArrayMarshaler) -> Field:
    """A field holding an array marshaler, called lazily at encoding time."""
    if not isinstance(val, ArrayMarshaler):
        raise TypeError(f"{type(val).__name__} has no marshal_log_array method")
    return Field(key=key, type=FieldType.ARRAY_MARSHALER, interface=val)


def _typed(
    key: str,
    append: str,
    values: Iterable[Any] | None,
    convert: Callable[[Any], Any],
) -> Field:
    return array(key, _TypedArray(append, tuple(convert(v) for v in values or ())))


def _complex64(value: Any) -> complex:
    c = complex(value)
    return complex(_to_float32(c.real), _to_float32(c.imag))


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a str, got {type(value).__name__}")
    return value


def _time(value: Any) -> datetime:
    if not isinstance(value, datetime):
        raise TypeError(f"expected a datetime, got {type(value).__name__}")
    return value


def _signed_of(bits: int) -> Callable[[Any], int]:
    return lambda v: _signed(v, bits)


def _unsigned_of(bits: int) -> Callable[[Any], int]:
    return lambda v: _unsigned(v, bits)


def bools(key: str, values: Iterable[bool] | None) -> Field:
    return _typed(key, "append_bool", values, bool)


def byte_strings(key: str, values: Iterable[bytes] | None) -> Field:
    """UTF-8 encoded texts, each given as bytes."""
    return _typed(key, "append_byte_string", values, bytes)


def complex128s(key: str, values: Iterable[complex] | None) -> Field:
    return _typed(key, "append_complex128", values, complex)


def complex64s(key: str, values: Iterable[complex] | None) -> Field:
    """Complex numbers whose parts are rounded to single precision."""
    return _typed(key, "append_complex64", values, _complex64)


def durations(key: str, values: Iterable[Any] | None) -> Field:
    """Durations as timedeltas or integer nanoseconds, kept as nanoseconds."""
    return _typed(key, "append_duration", values, lambda v: duration("", v).integer)


def float64s(key: str, values: Iterable[float] | None) -> Field:
    return _typed(key, "append_float64", values, float)


def float32s(key: str, values: Iterable[float] | None) -> Field:
    """Floats rounded to single precision."""
    return _typed(key, "append_float32", values, lambda v: _to_float32(float(v)))


def ints(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_int", values, _signed_of(64))


def int64s(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_int64", values, _signed_of(64))


def int32s(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_int32", values, _signed_of(32))


def int16s(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_int16", values, _signed_of(16))


def int8s(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_int8", values, _signed_of(8))


def strings(key: str, values: Iterable[str] | None) -> Field:
    return _typed(key, "append_string", values, _string)


def times(key: str, values: Iterable[datetime] | None) -> Field:
    return _typed(key, "append_time", values, _time)


def uints(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_uint", values, _unsigned_of(64))


def uint64s(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_uint64", values, _unsigned_of(64))


def uint32s(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_uint32", values, _unsigned_of(32))


def uint16s(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_uint16", values, _unsigned_of(16))


def uint8s(key: str, values: Iterable[int] | None) -> Field:
    return _typed(key, "append_uint8", values, _unsigned_of(8))


def uintptrs(key: str, values: Iterable[int] | None) -> Field:
    """Pointer-sized unsigned addresses."""
    return _typed(key, "append_uintptr", values, _unsigned_of(64))


def objects(key: str, values: Iterable[ObjectMarshaler] | None) -> Field:
    """Objects that marshal themselves; encoding stops at the first that fails."""
    items = tuple(values or ())
    for obj in items:
        if not isinstance(obj, ObjectMarshaler):
            raise TypeError(f"{type(obj).__name__} has no marshal_log_object method")
    return array(key, _ObjectArray(items))


def stringers(key: str, values: Iterable[Any] | None) -> Field:
    """Values logged as the output of ``str()``."""
    return array(key, _StringerArray(tuple(values or ())))