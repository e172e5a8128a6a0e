from .maps import HashMap, MapIterator, MapView, bucket_index_for
from .policy import (
    LOWER_BOUNDARY,
    START_CAPACITY,
    UPPER_BOUNDARY,
    ResizePolicy,
    is_power_of_two,
)

__all__ = [
    "HashMap",
    "MapIterator",
    "MapView",
    "ResizePolicy",
    "bucket_index_for",
    "is_power_of_two",
    "START_CAPACITY",
    "LOWER_BOUNDARY",
    "UPPER_BOUNDARY",
]
