"""Table diagnostics: load snapshots, chain-length histograms and resize tracking."""

from __future__ import annotations

import json
import logging
import math
from collections import Counter
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any, Callable, Dict, List, Optional

from jsonschema import Draft202012Validator

from chainhash.core.maps import HashMap

logger = logging.getLogger("chainhash")

STATS_SCHEMA = "chainhash.stats.v1"


@dataclass(frozen=True)
class TableStats:
    size: int
    capacity: int
    load_factor: float
    max_bucket_len: int
    empty_buckets: int
    avg_chain_len: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema": STATS_SCHEMA,
            "size": self.size,
            "capacity": self.capacity,
            "load_factor": self.load_factor,
            "max_bucket_len": self.max_bucket_len,
            "empty_buckets": self.empty_buckets,
            "avg_chain_len": self.avg_chain_len,
        }


def sample_stats(m: HashMap[Any, Any]) -> TableStats:
    lengths = m.bucket_lengths()
    occupied = [length for length in lengths if length]
    return TableStats(
        size=m.size(),
        capacity=m.capacity(),
        load_factor=m.load_factor(),
        max_bucket_len=max(lengths, default=0),
        empty_buckets=len(lengths) - len(occupied),
        avg_chain_len=(sum(occupied) / len(occupied)) if occupied else 0.0,
    )


def collect_bucket_histogram(m: HashMap[Any, Any]) -> List[List[int]]:
    """Return ``[[chain_length, bucket_count], ...]`` sorted by chain length."""

    histogram = Counter(m.bucket_lengths())
    return [[length, count] for length, count in sorted(histogram.items())]


def collect_key_heatmap(
    m: HashMap[Any, Any], target_cols: int = 32, max_cells: int = 512
) -> Dict[str, Any]:
    base_counts = m.bucket_lengths()
    original_slots = len(base_counts)
    total = sum(base_counts)
    target_cells = max(1, max_cells)
    group_width = max(1, math.ceil(original_slots / target_cells))
    aggregated: List[int] = []
    for idx in range(0, original_slots, group_width):
        aggregated.append(sum(base_counts[idx : idx + group_width]))

    cols = max(1, min(target_cols, len(aggregated)))
    rows = math.ceil(len(aggregated) / cols)
    padded_length = rows * cols
    if len(aggregated) < padded_length:
        aggregated.extend([0] * (padded_length - len(aggregated)))
    matrix = [aggregated[r * cols : (r + 1) * cols] for r in range(rows)]

    return {
        "rows": rows,
        "cols": cols,
        "matrix": matrix,
        "max": max(aggregated) if aggregated else 0,
        "total": total,
        "slot_span": group_width,
        "original_slots": original_slots,
    }


class ResizeRecorder:
    """Count grows and shrinks of attached maps and keep an optional event log."""

    def __init__(
        self,
        events: Optional[List[Dict[str, Any]]] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.grows_total = 0
        self.shrinks_total = 0
        self.events = events
        self.clock = clock or (lambda: 0.0)

    def on_resize(self, old_capacity: int, new_capacity: int) -> None:
        kind = "grow" if new_capacity > old_capacity else "shrink"
        if kind == "grow":
            self.grows_total += 1
        else:
            self.shrinks_total += 1
        if self.events is not None:
            self.events.append(
                {"type": kind, "t": self.clock(), "from": old_capacity, "to": new_capacity}
            )

    def attach(self, m: HashMap[Any, Any]) -> None:
        # The hook lives on the policy, which copies of ``m`` share.
        if m.policy.on_resize is not None:
            logger.warning("Replacing existing on_resize hook on %s", type(m).__name__)
        m.policy.on_resize = self.on_resize


@lru_cache(maxsize=1)
def _stats_validator() -> Draft202012Validator:
    schema_resource = resources.files("chainhash.contracts") / "stats_schema.json"
    with schema_resource.open(encoding="utf-8") as stream:
        schema = json.load(stream)
    return Draft202012Validator(schema)


def validate_stats_payload(payload: Dict[str, Any]) -> List[str]:
    """Return human-readable schema violations for ``payload`` (empty when valid)."""

    errors = sorted(_stats_validator().iter_errors(payload), key=lambda err: list(err.path))
    problems = [f"{err.message} @ {list(err.path)}" for err in errors]
    if problems:
        return problems
    if payload["empty_buckets"] > payload["capacity"]:
        problems.append("empty_buckets exceeds capacity")
    if not math.isclose(payload["load_factor"], payload["size"] / payload["capacity"]):
        problems.append("load_factor does not match size / capacity")
    return problems


__all__ = [
    "ResizeRecorder",
    "STATS_SCHEMA",
    "TableStats",
    "collect_bucket_histogram",
    "collect_key_heatmap",
    "sample_stats",
    "validate_stats_payload",
]
