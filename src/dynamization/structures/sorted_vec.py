"""
Sorted tuple structure, plus a priority queue and a map built on it.

A ``SortedRun`` is an immutable sorted tuple. Building one from the
concatenated contents of several runs is a sort over already-sorted runs,
which Python's sort handles as a merge.
"""

from bisect import bisect_left, bisect_right
from collections import Counter
from dataclasses import dataclass
from operator import attrgetter
from typing import (
    Any,
    Callable,
    Generic,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
    TypeVar,
    Union,
)

from ..combine import concat, maximum
from ..config import Settings
from ..container import Dynamic
from ..strategy import Strategy
from .queries import Extreme, Lookup, Member, RangeCount, RangeItems

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


@dataclass(frozen=True)
class SortedRun:
    items: Tuple[Any, ...]
    keys: Tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.items)

    def span(self, key: Any) -> Tuple[int, int]:
        """Index range of items whose key equals ``key``."""
        return bisect_left(self.keys, key), bisect_right(self.keys, key)

    def between(self, lo: Any, hi: Any) -> Tuple[int, int]:
        """Index range of items with ``lo <= key <= hi``."""
        return bisect_left(self.keys, lo), bisect_right(self.keys, hi)


def _without(items: Sequence[Any], dead: Mapping[Any, int]) -> List[Any]:
    """Drop the ``dead`` multiset from ``items``, keeping order."""
    pending = Counter(dead)
    kept = []
    for item in items:
        if pending[item] > 0:
            pending[item] -= 1
            continue
        kept.append(item)
    return kept


class SortedVec:
    """
    Capability for ``SortedRun`` structures.

    Args:
        key: Optional sort key, as for ``sorted``. Elements with equal keys
            keep their build order.

    Supports ``Member``, ``Lookup``, ``RangeCount``, ``RangeItems`` and
    ``Extreme`` queries, and logical deletion.
    """

    def __init__(self, key: Optional[Callable[[Any], Any]] = None) -> None:
        self.key = key

    def _key(self, element: Any) -> Any:
        return element if self.key is None else self.key(element)

    def build(self, elements: Sequence[Any]) -> SortedRun:
        items = tuple(sorted(elements, key=self.key))
        keys = items if self.key is None else tuple(self.key(item) for item in items)
        return SortedRun(items=items, keys=keys)

    def enumerate(self, structure: SortedRun) -> Sequence[Any]:
        return structure.items

    def size(self, structure: SortedRun) -> int:
        return len(structure)

    def count(self, structure: SortedRun, element: Any) -> int:
        start, stop = structure.span(self._key(element))
        return sum(1 for item in structure.items[start:stop] if item == element)

    def query(self, structure: SortedRun, query: Any) -> Any:
        if isinstance(query, Member):
            return self.count(structure, query.value) > 0
        if isinstance(query, Lookup):
            start, stop = structure.span(query.key)
            return list(structure.items[start:stop])
        if isinstance(query, RangeCount):
            start, stop = structure.between(query.lo, query.hi)
            return max(stop - start, 0)
        if isinstance(query, RangeItems):
            start, stop = structure.between(query.lo, query.hi)
            return list(structure.items[start:stop])
        if isinstance(query, Extreme):
            if not structure.items:
                return None
            return structure.items[-1] if query.largest else structure.items[0]
        raise TypeError(f"Unsupported query for SortedVec: {query!r}")

    def query_excluding(self, structure: SortedRun, query: Any, dead: Mapping[Any, int]) -> Any:
        if isinstance(query, Member):
            return self.count(structure, query.value) > dead.get(query.value, 0)
        if isinstance(query, RangeCount):
            total = self.query(structure, query)
            hidden = sum(
                count for element, count in dead.items()
                if query.lo <= self._key(element) <= query.hi
            )
            return total - hidden
        if isinstance(query, (Lookup, RangeItems)):
            return _without(self.query(structure, query), dead)
        if isinstance(query, Extreme):
            ordered = reversed(structure.items) if query.largest else iter(structure.items)
            pending = Counter(dead)
            for item in ordered:
                if pending[item] > 0:
                    pending[item] -= 1
                    continue
                return item
            return None
        raise TypeError(f"Unsupported query for SortedVec: {query!r}")


class SVQueue(Generic[T]):
    """
    Max-priority queue: a dynamized ``SortedVec``.

    ``pop`` deletes logically; the underlying blocks are rebuilt once half
    of the queue's physical contents are dead.
    """

    def __init__(
        self,
        strategy: Union[str, Strategy, None] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._dynamic: Dynamic = Dynamic(SortedVec(), strategy=strategy, settings=settings)

    @property
    def dynamic(self) -> Dynamic:
        return self._dynamic

    def push(self, item: T) -> None:
        self._dynamic.insert(item)

    def peek(self) -> T:
        """Return the largest item without removing it."""
        if not self._dynamic:
            raise IndexError("peek from an empty queue")
        return self._dynamic.query(Extreme(largest=True), maximum)

    def pop(self) -> T:
        """Remove and return the largest item."""
        item = self.peek()
        self._dynamic.delete(item)
        return item

    def __len__(self) -> int:
        return len(self._dynamic)

    def __bool__(self) -> bool:
        return bool(self._dynamic)


_MISSING = object()


@dataclass(frozen=True, eq=False)
class MapEntry(Generic[K, V]):
    """One stored ``key -> value`` pair. Entries compare by identity."""
    key: K
    value: V


class SVMap(Generic[K, V]):
    """
    Associative array over ``MapEntry`` objects in a dynamized ``SortedVec``.

    Keys must be orderable. Replaced and removed entries are tombstoned by
    identity, so values may be of any type, hashable or not.
    """

    def __init__(
        self,
        strategy: Union[str, Strategy, None] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._dynamic: Dynamic = Dynamic(
            SortedVec(key=attrgetter("key")), strategy=strategy, settings=settings
        )

    @property
    def dynamic(self) -> Dynamic:
        return self._dynamic

    def _entry(self, key: K) -> Optional[MapEntry[K, V]]:
        entries = self._dynamic.query(Lookup(key), concat, [])
        return entries[0] if entries else None

    def insert(self, key: K, value: V) -> Optional[V]:
        """Set ``key`` to ``value``; return the previous value, if any."""
        entry = self._entry(key)
        if entry is not None:
            self._dynamic.delete(entry)
        self._dynamic.insert(MapEntry(key, value))
        return entry.value if entry is not None else None

    def get(self, key: K, default: Any = None) -> Any:
        entry = self._entry(key)
        return entry.value if entry is not None else default

    def remove(self, key: K, default: Any = None) -> Any:
        """Remove ``key``; return its value, or ``default`` if it was absent."""
        entry = self._entry(key)
        if entry is None:
            return default
        self._dynamic.delete(entry)
        return entry.value

    def __getitem__(self, key: K) -> V:
        value = self.get(key, _MISSING)
        if value is _MISSING:
            raise KeyError(key)
        return value

    def __setitem__(self, key: K, value: V) -> None:
        self.insert(key, value)

    def __delitem__(self, key: K) -> None:
        if self.remove(key, _MISSING) is _MISSING:
            raise KeyError(key)

    def __contains__(self, key: Any) -> bool:
        return self._entry(key) is not None

    def __len__(self) -> int:
        return len(self._dynamic)

    def __iter__(self) -> Iterator[K]:
        return (key for key, _ in self.items())

    def items(self) -> List[Tuple[K, V]]:
        """Live pairs in key order."""
        entries = sorted(self._dynamic.elements(), key=attrgetter("key"))
        return [(entry.key, entry.value) for entry in entries]
