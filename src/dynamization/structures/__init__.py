"""Reference static structures usable with ``Dynamic``."""

from .queries import Extreme, Lookup, Member, Nearest, RangeCount, RangeItems
from .sorted_vec import MapEntry, SortedRun, SortedVec, SVMap, SVQueue
from .sorted_array import SortedArray

__all__ = [
    "Extreme",
    "Lookup",
    "MapEntry",
    "Member",
    "Nearest",
    "RangeCount",
    "RangeItems",
    "SortedRun",
    "SortedVec",
    "SVMap",
    "SVQueue",
    "SortedArray",
]
