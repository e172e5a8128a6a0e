"""Load-factor thresholds that drive growing and shrinking of the bucket table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from chainhash.contracts.error import ConfigError

START_CAPACITY = 16
LOWER_BOUNDARY = 0.25
UPPER_BOUNDARY = 0.75


def is_power_of_two(value: int) -> bool:
    return value >= 1 and (value & (value - 1)) == 0


@dataclass
class ResizePolicy:
    start_capacity: int = START_CAPACITY
    lower_boundary: float = LOWER_BOUNDARY
    upper_boundary: float = UPPER_BOUNDARY
    on_resize: Optional[Callable[[int, int], None]] = None

    def validate(self) -> None:
        if isinstance(self.start_capacity, bool) or not isinstance(self.start_capacity, int):
            raise ConfigError("resize.start_capacity must be an integer")
        if not is_power_of_two(self.start_capacity):
            raise ConfigError("resize.start_capacity must be a power of two > 0")
        for name in ("lower_boundary", "upper_boundary"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"resize.{name} must be a number")
        if not 0.0 < self.lower_boundary < self.upper_boundary:
            raise ConfigError("resize.lower_boundary must be in (0, upper_boundary)")
        if self.upper_boundary > 1.0:
            raise ConfigError("resize.upper_boundary must be <= 1")
        if self.lower_boundary * 2 > self.upper_boundary:
            raise ConfigError(
                "resize.lower_boundary must be at most half of resize.upper_boundary",
                hint="halving a table doubles its load factor",
            )

    def target_capacity(self, size: int, capacity: int) -> int:
        """Return the capacity that brings ``size / capacity`` back inside the bounds.

        Grows by doubling while the load factor is above ``upper_boundary``;
        otherwise shrinks by halving while it is below ``lower_boundary`` and the
        table still has more than one bucket. Returns ``capacity`` unchanged when
        no resize is needed.
        """

        if size / capacity > self.upper_boundary:
            while size / capacity > self.upper_boundary:
                capacity *= 2
        elif size / capacity < self.lower_boundary:
            while capacity > 1 and size / capacity < self.lower_boundary:
                capacity //= 2
        return capacity


__all__ = [
    "LOWER_BOUNDARY",
    "ResizePolicy",
    "START_CAPACITY",
    "UPPER_BOUNDARY",
    "is_power_of_two",
]
