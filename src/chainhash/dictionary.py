"""String-to-string map with a strict erase contract and bulk update."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Optional, Tuple, Union

from chainhash.contracts.error import InvalidKeyError
from chainhash.core.maps import HashMap, MapIterator, MapView
from chainhash.core.policy import ResizePolicy

PairSource = Union[Iterable[Tuple[str, str]], Mapping[str, str]]


class Dictionary(HashMap[str, str]):
    """``HashMap[str, str]`` whose ``erase`` raises on absent keys.

    Autovivified and read-only misses produce the empty string.
    """

    __slots__ = ()

    def __init__(
        self,
        keys: Optional[Iterable[str]] = None,
        values: Optional[Iterable[str]] = None,
        *,
        policy: Optional[ResizePolicy] = None,
    ) -> None:
        super().__init__(keys, values, default_factory=str, policy=policy)

    def erase(self, key: str) -> bool:
        if not super().erase(key):
            raise InvalidKeyError(key)
        return True

    def update(self, pairs: PairSource) -> None:
        """Apply every ``(key, value)`` pair in order; existing keys are replaced.

        A replaced key is erased and re-inserted, so it moves to the end of its
        bucket.
        """

        source: Iterable[Tuple[str, str]] = pairs.items() if isinstance(pairs, Mapping) else pairs
        if isinstance(pairs, (HashMap, MapView, MapIterator)):
            # Map-backed sources would be walked while this loop rehashes.
            source = list(source)
        for key, value in source:
            if self.contains_key(key):
                HashMap.erase(self, key)
            self.insert(key, value)


__all__ = ["Dictionary"]
