"""Choose the best field constructor for an arbitrary value."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Callable

from .array import (
    ArrayMarshaler,
    array,
    bools,
    complex128s,
    durations,
    float64s,
    ints,
    strings,
    times,
)
from .error import errors, named_error
from .field import (
    ObjectMarshaler,
    binary,
    bool_,
    complex128,
    duration,
    float64,
    int_,
    nil_field,
    object_,
    reflect,
    string,
    stringer,
    time_,
    uint,
)

_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_UINT64_MAX = (1 << 64) - 1


def _is_int64(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and _INT64_MIN <= v <= _INT64_MAX


_SEQUENCE_KINDS: tuple[tuple[Callable[[Any], bool], Callable[..., Any]], ...] = (
    (lambda v: isinstance(v, bool), bools),
    (_is_int64, ints),
    (lambda v: isinstance(v, float), float64s),
    (lambda v: isinstance(v, complex), complex128s),
    (lambda v: isinstance(v, str), strings),
    (lambda v: isinstance(v, datetime), times),
    (lambda v: isinstance(v, timedelta), durations),
)


def _from_sequence(key: str, values: list | tuple) -> Any:
    if not values:
        return None
    for matches, constructor in _SEQUENCE_KINDS:
        if all(matches(v) for v in values):
            return constructor(key, values)
    if any(isinstance(v, BaseException) for v in values) and all(
        v is None or isinstance(v, BaseException) for v in values
    ):
        return errors(key, values)
    return None


def _has_own_str(value: Any) -> bool:
    return type(value).__str__ is not object.__str__


def any_(key: str, value: Any):
    """Build the most specific field for ``value``, falling back to :func:`reflect`.

    Bytes are treated as binary blobs. Homogeneous lists and tuples become
    typed array fields; anything not otherwise recognized that defines its
    own ``__str__`` is logged through it.
    """
    if value is None:
        return nil_field(key)
    if isinstance(value, ObjectMarshaler):
        return object_(key, value)
    if isinstance(value, ArrayMarshaler):
        return array(key, value)
    if isinstance(value, bool):
        return bool_(key, value)
    if isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            return int_(key, value)
        if 0 <= value <= _UINT64_MAX:
            return uint(key, value)
        return reflect(key, value)
    if isinstance(value, float):
        return float64(key, value)
    if isinstance(value, complex):
        return complex128(key, value)
    if isinstance(value, str):
        return string(key, value)
    if isinstance(value, (bytes, bytearray)):
        return binary(key, value)
    if isinstance(value, datetime):
        return time_(key, value)
    if isinstance(value, timedelta):
        return duration(key, value)
    if isinstance(value, BaseException):
        return named_error(key, value)
    if isinstance(value, (list, tuple)):
        field = _from_sequence(key, value)
        return field if field is not None else reflect(key, value)
    if _has_own_str(value):
        return stringer(key, value)
    return reflect(key, value)