"""
Sorted numpy array for numeric range and nearest-value queries.

Structures are read-only ``float64`` arrays. Every element is converted to
``float64`` on build, so ``enumerate`` returns floats and integers beyond
``2**53`` lose precision; use ``SortedVec`` when exact values matter. There
is no tombstone support, so a ``Dynamic`` over ``SortedArray`` is
insert-only.
"""

from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from .queries import Member, Nearest, RangeCount


class SortedArray:
    """Capability for sorted, read-only ``float64`` arrays. Elements are stored as floats."""

    def build(self, elements: Sequence[float]) -> np.ndarray:
        array = np.sort(np.asarray(elements, dtype=np.float64))
        array.setflags(write=False)
        return array

    def enumerate(self, structure: np.ndarray) -> List[float]:
        return structure.tolist()

    def size(self, structure: np.ndarray) -> int:
        return int(structure.size)

    def query(self, structure: np.ndarray, query: Any) -> Any:
        if isinstance(query, RangeCount):
            lo = np.searchsorted(structure, query.lo, side="left")
            hi = np.searchsorted(structure, query.hi, side="right")
            return int(max(hi - lo, 0))
        if isinstance(query, Member):
            index = np.searchsorted(structure, query.value, side="left")
            return bool(index < structure.size and structure[index] == query.value)
        if isinstance(query, Nearest):
            return self._nearest(structure, query.value)
        raise TypeError(f"Unsupported query for SortedArray: {query!r}")

    @staticmethod
    def _nearest(structure: np.ndarray, value: float) -> Optional[Tuple[float, float]]:
        if structure.size == 0:
            return None
        index = int(np.searchsorted(structure, value))
        candidates = structure[max(index - 1, 0):index + 1]
        distances = np.abs(candidates - value)
        best = int(np.argmin(distances))
        return float(distances[best]), float(candidates[best])
