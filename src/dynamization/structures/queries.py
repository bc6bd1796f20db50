"""Query objects understood by the reference structures."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Member:
    """Is ``value`` present? Combine with ``any_of``."""
    value: Any


@dataclass(frozen=True)
class Lookup:
    """All elements whose key equals ``key``. Combine with ``concat``."""
    key: Any


@dataclass(frozen=True)
class RangeCount:
    """Number of elements with ``lo <= key <= hi``. Combine with ``add``."""
    lo: Any
    hi: Any


@dataclass(frozen=True)
class RangeItems:
    """Elements with ``lo <= key <= hi`` in key order. Combine with ``concat``."""
    lo: Any
    hi: Any


@dataclass(frozen=True)
class Extreme:
    """Largest (or smallest) element. Combine with ``maximum``/``minimum``."""
    largest: bool = True


@dataclass(frozen=True)
class Nearest:
    """``(distance, value)`` of the element closest to ``value``. Combine with ``nearest``."""
    value: float
