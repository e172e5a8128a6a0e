"""Error contracts for chainhash containers."""

from .error import (
    ConfigError,
    InvalidKeyError,
    LengthMismatchError,
    MapError,
    NotFoundError,
)

__all__ = [
    "MapError",
    "NotFoundError",
    "InvalidKeyError",
    "LengthMismatchError",
    "ConfigError",
]
