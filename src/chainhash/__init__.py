"""Separate-chaining hash map with load-factor driven resizing."""

from . import config, contracts, core, log, stats
from .contracts import (
    ConfigError,
    InvalidKeyError,
    LengthMismatchError,
    MapError,
    NotFoundError,
)
from .core import HashMap, MapIterator, MapView, ResizePolicy
from .dictionary import Dictionary

__all__ = [
    "config",
    "contracts",
    "core",
    "log",
    "stats",
    "ConfigError",
    "Dictionary",
    "HashMap",
    "InvalidKeyError",
    "LengthMismatchError",
    "MapError",
    "MapIterator",
    "MapView",
    "NotFoundError",
    "ResizePolicy",
]
