"""Field constructors for exceptions and lists of exceptions."""

from __future__ import annotations

import traceback
from dataclasses import dataclass
from typing import Any, Iterable

from .array import array
from .field import Field, FieldType, skip


def _require_exception(err: Any) -> None:
    if not isinstance(err, BaseException):
        raise TypeError(f"expected an exception, got {type(err).__name__}")


def _encode_error(key: str, err: BaseException, enc: Any) -> None:
    """Write ``err`` under ``key``, plus its traceback under ``key + "Verbose"``.

    The verbose form is only written for exceptions that carry a traceback,
    that is, exceptions that were actually raised.
    """
    enc.add_string(key, str(err))
    if err.__traceback__ is not None:
        verbose = "".join(traceback.format_exception(type(err), err, err.__traceback__))
        enc.add_string(key + "Verbose", verbose)


def error(err: BaseException | None) -> Field:
    """Shorthand for ``named_error("error", err)``."""
    return named_error("error", err)


def named_error(key: str, err: BaseException | None) -> Field:
    """A field holding ``err`` under ``key``; ``None`` gives a no-op field."""
    if err is None:
        return skip()
    _require_exception(err)
    return Field(key=key, type=FieldType.ERROR, interface=err)


@dataclass(frozen=True)
class _ErrorElement:
    """Presents one exception as an object with an "error" attribute."""

    err: BaseException

    def marshal_log_object(self, enc: Any) -> None:
        _encode_error("error", self.err, enc)


@dataclass(frozen=True)
class _ErrorArray:
    """Exceptions written as objects; ``None`` entries are left out."""

    values: tuple

    def marshal_log_array(self, arr: Any) -> None:
        for err in self.values:
            if err is None:
                continue
            arr.append_object(_ErrorElement(err))


def errors(key: str, errs: Iterable[BaseException | None] | None) -> Field:
    """A field holding a list of exceptions, each encoded as an object."""
    items = tuple(errs or ())
    for err in items:
        if err is not None:
            _require_exception(err)
    return array(key, _ErrorArray(items))