"""A registry of named encoder constructors."""

from __future__ import annotations

import threading
from typing import Any, Callable

EncoderConstructor = Callable[[Any], Any]


class EncoderError(ValueError):
    """Raised when an encoder cannot be registered or built."""


class NoEncoderNameError(EncoderError):
    """Raised when an encoder name is empty."""

    def __init__(self) -> None:
        super().__init__("no encoder name specified")


class EncoderRegistry:
    """Maps encoder names to constructors taking an encoder configuration."""

    def __init__(self) -> None:
        self._constructors: dict[str, EncoderConstructor] = {}
        self._lock = threading.RLock()

    def register(self, name: str, constructor: EncoderConstructor) -> None:
        """Register ``constructor`` under ``name``; names cannot be reused."""
        with self._lock:
            if not name:
                raise NoEncoderNameError()
            if name in self._constructors:
                raise EncoderError(f'encoder already registered for name "{name}"')
            self._constructors[name] = constructor

    def new(self, name: str, encoder_config: Any) -> Any:
        """Build the encoder registered under ``name`` from ``encoder_config``."""
        time_key = getattr(encoder_config, "time_key", "")
        if time_key and getattr(encoder_config, "encode_time", None) is None:
            raise EncoderError("missing EncodeTime in EncoderConfig")
        with self._lock:
            if not name:
                raise NoEncoderNameError()
            constructor = self._constructors.get(name)
        if constructor is None:
            raise EncoderError(f'no encoder registered for name "{name}"')
        return constructor(encoder_config)

    def names(self) -> list[str]:
        """Return the registered names in sorted order."""
        with self._lock:
            return sorted(self._constructors)


_default_registry = EncoderRegistry()


def register_encoder(name: str, constructor: EncoderConstructor) -> None:
    """Register an encoder constructor in the shared registry."""
    _default_registry.register(name, constructor)


def new_encoder(name: str, encoder_config: Any) -> Any:
    """Build an encoder from the shared registry."""
    return _default_registry.new(name, encoder_config)