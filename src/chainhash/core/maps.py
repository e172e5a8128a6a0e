from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, List, Optional, Tuple, TypeVar

from chainhash.contracts.error import LengthMismatchError, NotFoundError

from .policy import ResizePolicy

logger = logging.getLogger("chainhash")

K = TypeVar("K")
V = TypeVar("V")


def _no_value() -> None:
    return None


def bucket_index_for(key: Any, capacity: int) -> int:
    """Fold ``hash(key)`` onto a power-of-two ``capacity``."""

    return hash(key) & (capacity - 1)


@dataclass
class _Entry(Generic[K, V]):
    key: K
    value: V


class _BucketTable(Generic[K, V]):
    """Fixed array of insertion-ordered buckets plus the live entry count."""

    __slots__ = ("buckets", "size")

    def __init__(self, capacity: int) -> None:
        self.buckets: List[List[_Entry[K, V]]] = [[] for _ in range(capacity)]
        self.size = 0

    @property
    def capacity(self) -> int:
        return len(self.buckets)

    def index(self, key: K) -> int:
        return bucket_index_for(key, len(self.buckets))

    def find(self, key: K) -> Optional[_Entry[K, V]]:
        for entry in self.buckets[self.index(key)]:
            if entry.key == key:
                return entry
        return None

    def insert(self, key: K, value: V) -> bool:
        bucket = self.buckets[self.index(key)]
        for entry in bucket:
            if entry.key == key:
                return False
        bucket.append(_Entry(key, value))
        self.size += 1
        return True

    def erase(self, key: K) -> bool:
        bucket = self.buckets[self.index(key)]
        for idx, entry in enumerate(bucket):
            if entry.key == key:
                del bucket[idx]
                self.size -= 1
                return True
        return False

    def clear(self) -> None:
        for bucket in self.buckets:
            bucket.clear()
        self.size = 0

    def next_occupied(self, start: int) -> int:
        idx = start
        while idx < len(self.buckets) and not self.buckets[idx]:
            idx += 1
        return idx

    def entries(self) -> Iterator[_Entry[K, V]]:
        for bucket in self.buckets:
            yield from bucket

    def rehash(self, new_capacity: int) -> "_BucketTable[K, V]":
        table: _BucketTable[K, V] = _BucketTable(new_capacity)
        for entry in self.entries():
            table.buckets[table.index(entry.key)].append(entry)
        table.size = self.size
        return table

    def copy(self) -> "_BucketTable[K, V]":
        table: _BucketTable[K, V] = _BucketTable(0)
        table.buckets = [[_Entry(e.key, e.value) for e in bucket] for bucket in self.buckets]
        table.size = self.size
        return table


class HashMap(Generic[K, V]):
    """Separate-chaining hash map whose load factor stays within policy bounds.

    Keys are unique; ``insert`` never overwrites. After every successful insert
    or erase the table is doubled or halved (with a full rehash) until
    ``lower_boundary <= size / capacity <= upper_boundary`` or the table is down
    to a single bucket.

    ``m[key]`` autovivifies absent keys with ``default_factory()``; use
    :meth:`view` for lookups that must never insert. Iteration yields
    ``(key, value)`` tuples in ascending bucket order, then insertion order.
    """

    __slots__ = ("_table", "_policy", "_default_factory", "_generation")

    def __init__(
        self,
        keys: Optional[Iterable[K]] = None,
        values: Optional[Iterable[V]] = None,
        *,
        default_factory: Optional[Callable[[], V]] = None,
        policy: Optional[ResizePolicy] = None,
    ) -> None:
        self._policy = policy if policy is not None else ResizePolicy()
        self._policy.validate()
        self._default_factory: Callable[[], Any] = default_factory or _no_value
        self._table: _BucketTable[K, V] = _BucketTable(self._policy.start_capacity)
        self._generation = 0
        if keys is None and values is None:
            return
        key_list = list(keys) if keys is not None else []
        value_list = list(values) if values is not None else []
        if len(key_list) != len(value_list):
            raise LengthMismatchError(
                f"got {len(key_list)} keys but {len(value_list)} values",
                hint="keys and values must be sequences of equal length",
            )
        for key, value in zip(key_list, value_list):
            self[key] = value

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def size(self) -> int:
        return self._table.size

    def capacity(self) -> int:
        return self._table.capacity

    def empty(self) -> bool:
        return self._table.size == 0

    def load_factor(self) -> float:
        return self._table.size / self._table.capacity

    def __len__(self) -> int:
        return self._table.size

    @property
    def policy(self) -> ResizePolicy:
        return self._policy

    @property
    def default_factory(self) -> Callable[[], Any]:
        return self._default_factory

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def contains_key(self, key: K) -> bool:
        return self._table.find(key) is not None

    def __contains__(self, key: object) -> bool:
        return self._table.find(key) is not None  # type: ignore[arg-type]

    def _entry_or_raise(self, key: K) -> _Entry[K, V]:
        entry = self._table.find(key)
        if entry is None:
            raise NotFoundError(key)
        return entry

    def at(self, key: K) -> V:
        """Return the stored value object for ``key``; raise if absent."""

        return self._entry_or_raise(key).value

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        entry = self._table.find(key)
        return default if entry is None else entry.value

    def bucket_size(self, key: K) -> int:
        self._entry_or_raise(key)
        return len(self._table.buckets[self._table.index(key)])

    def bucket_index(self, key: K) -> int:
        self._entry_or_raise(key)
        return self._table.index(key)

    def bucket_lengths(self) -> List[int]:
        return [len(bucket) for bucket in self._table.buckets]

    def __getitem__(self, key: K) -> V:
        entry = self._table.find(key)
        if entry is not None:
            return entry.value
        value = self._default_factory()
        self.insert(key, value)
        return value

    def view(self) -> "MapView[K, V]":
        return MapView(self)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def insert(self, key: K, value: V) -> bool:
        """Insert ``key`` only if absent; return whether the map changed."""

        if not self._table.insert(key, value):
            return False
        self._maybe_resize()
        return True

    def __setitem__(self, key: K, value: V) -> None:
        entry = self._table.find(key)
        if entry is not None:
            entry.value = value
            return
        self.insert(key, value)

    def erase(self, key: K) -> bool:
        if not self._table.erase(key):
            return False
        self._maybe_resize()
        return True

    def __delitem__(self, key: K) -> None:
        if not self.erase(key):
            raise NotFoundError(key)

    def clear(self) -> None:
        self._table.clear()
        self._generation += 1

    def _maybe_resize(self) -> None:
        old_capacity = self._table.capacity
        new_capacity = self._policy.target_capacity(self._table.size, old_capacity)
        if new_capacity == old_capacity:
            return
        self._table = self._table.rehash(new_capacity)
        self._generation += 1
        logger.debug(
            "Rehashed %d entries: %d -> %d buckets", self._table.size, old_capacity, new_capacity
        )
        if self._policy.on_resize:
            try:
                self._policy.on_resize(old_capacity, new_capacity)
            except Exception:  # noqa: BLE001
                logger.exception("on_resize callback failed")

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------
    def begin(self) -> "MapIterator[K, V]":
        return MapIterator(self, self._table.next_occupied(0), 0)

    def end(self) -> "MapIterator[K, V]":
        """Return the cursor at ``(capacity, 0)``, where advancing past the last entry lands."""

        return MapIterator(self, self._table.capacity, 0)

    def __iter__(self) -> "MapIterator[K, V]":
        return self.begin()

    def keys(self) -> Iterator[K]:
        for key, _ in self.begin():
            yield key

    def values(self) -> Iterator[V]:
        for _, value in self.begin():
            yield value

    def items(self) -> Iterator[Tuple[K, V]]:
        return self.begin()

    # ------------------------------------------------------------------
    # Comparison and copying
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashMap):
            return NotImplemented
        if self._table.size != other._table.size:
            return False
        for entry in self._table.entries():
            found = other._table.find(entry.key)
            if found is None or found.value != entry.value:
                return False
        return True

    def copy(self) -> "HashMap[K, V]":
        clone = self.__class__.__new__(self.__class__)
        clone._policy = self._policy
        clone._default_factory = self._default_factory
        clone._table = self._table.copy()
        clone._generation = 0
        return clone

    __copy__ = copy

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.begin())
        return f"{type(self).__name__}({{{body}}})"


class MapView(Generic[K, V]):
    """Read-only window onto a :class:`HashMap`.

    ``view[key]`` returns ``default_factory()`` for an absent key without
    inserting it, unlike ``HashMap.__getitem__``.
    """

    __slots__ = ("_map",)

    def __init__(self, hash_map: HashMap[K, V]) -> None:
        self._map = hash_map

    def __getitem__(self, key: K) -> V:
        entry = self._map._table.find(key)  # pylint: disable=protected-access
        if entry is None:
            return self._map.default_factory()
        return entry.value

    def __len__(self) -> int:
        return self._map.size()

    def __contains__(self, key: object) -> bool:
        return key in self._map

    def __iter__(self) -> "MapIterator[K, V]":
        return self._map.begin()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MapView):
            return self._map == other._map
        return self._map == other

    def size(self) -> int:
        return self._map.size()

    def capacity(self) -> int:
        return self._map.capacity()

    def empty(self) -> bool:
        return self._map.empty()

    def contains_key(self, key: K) -> bool:
        return self._map.contains_key(key)

    def at(self, key: K) -> V:
        return self._map.at(key)

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        return self._map.get(key, default)

    def bucket_size(self, key: K) -> int:
        return self._map.bucket_size(key)

    def bucket_index(self, key: K) -> int:
        return self._map.bucket_index(key)

    def begin(self) -> "MapIterator[K, V]":
        return self._map.begin()

    def end(self) -> "MapIterator[K, V]":
        return self._map.end()


class MapIterator(Generic[K, V]):
    """Forward cursor over a map's buckets.

    The cursor always rests on a live entry or on the end position
    ``(capacity, 0)``. A resize or ``clear()`` of the owning map invalidates it.
    """

    __slots__ = ("_map", "_bucket", "_slot", "_generation")

    def __init__(self, hash_map: HashMap[K, V], bucket: int, slot: int) -> None:
        self._map = hash_map
        self._bucket = bucket
        self._slot = slot
        self._generation = hash_map._generation  # pylint: disable=protected-access

    def _table(self) -> _BucketTable[K, V]:
        if self._generation != self._map._generation:  # pylint: disable=protected-access
            raise RuntimeError("map was resized or cleared during iteration")
        return self._map._table  # pylint: disable=protected-access

    def _settle(self, table: _BucketTable[K, V]) -> None:
        # An erase without resize can shrink the bucket under the cursor.
        if self._bucket < table.capacity and self._slot >= len(table.buckets[self._bucket]):
            self._bucket = table.next_occupied(self._bucket + 1)
            self._slot = 0

    def __iter__(self) -> "MapIterator[K, V]":
        return self

    def __next__(self) -> Tuple[K, V]:
        table = self._table()
        self._settle(table)
        if self._bucket >= table.capacity:
            raise StopIteration
        entry = table.buckets[self._bucket][self._slot]
        self._slot += 1
        self._settle(table)
        return entry.key, entry.value

    def current(self) -> Tuple[K, V]:
        """Return the entry under the cursor without advancing."""

        table = self._table()
        self._settle(table)
        if self._bucket >= table.capacity:
            raise IndexError("iterator is at the end position")
        entry = table.buckets[self._bucket][self._slot]
        return entry.key, entry.value

    def position(self) -> Tuple[int, int]:
        return self._bucket, self._slot

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MapIterator):
            return NotImplemented
        return (
            self._map is other._map
            and self._bucket == other._bucket
            and self._slot == other._slot
        )

    def __repr__(self) -> str:
        return f"MapIterator(bucket={self._bucket}, slot={self._slot})"


__all__ = [
    "HashMap",
    "MapIterator",
    "MapView",
    "bucket_index_for",
]
