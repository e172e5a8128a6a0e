"""Error taxonomy shared by the chained hash map containers."""

from __future__ import annotations

from typing import Any


class MapError(Exception):
    """Base exception that carries an optional hint for the caller."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class NotFoundError(MapError, KeyError):
    """Raised when ``at``/``bucket_size``/``bucket_index`` target an absent key."""

    def __init__(self, key: Any, *, hint: str | None = None) -> None:
        super().__init__(f"key {key!r} is not in the map", hint=hint)
        self.key = key


class InvalidKeyError(MapError, KeyError):
    """Raised by ``Dictionary.erase`` when the key is absent."""

    def __init__(self, key: Any, *, hint: str | None = None) -> None:
        super().__init__(f"invalid key: {key!r}", hint=hint)
        self.key = key


class LengthMismatchError(MapError, ValueError):
    """Raised when key and value sequences differ in length."""


class ConfigError(MapError, ValueError):
    """Raised for malformed configuration (TOML, env overrides, policy values)."""


__all__ = [
    "MapError",
    "NotFoundError",
    "InvalidKeyError",
    "LengthMismatchError",
    "ConfigError",
]
