"""Associative reducers for folding per-block query results."""

import operator
from typing import Any, List, Optional, TypeVar

T = TypeVar("T")

add = operator.add


def concat(a: List[T], b: List[T]) -> List[T]:
    return a + b


def any_of(a: bool, b: bool) -> bool:
    return a or b


def minimum(a: Optional[T], b: Optional[T]) -> Optional[T]:
    """``min`` that treats None as "no answer from this block"."""
    if a is None:
        return b
    if b is None:
        return a
    return b if b < a else a


def maximum(a: Optional[T], b: Optional[T]) -> Optional[T]:
    """``max`` that treats None as "no answer from this block"."""
    if a is None:
        return b
    if b is None:
        return a
    return b if b > a else a


def nearest(a: Optional[Any], b: Optional[Any]) -> Optional[Any]:
    """Keep the ``(distance, value)`` pair with the smaller distance."""
    if a is None:
        return b
    if b is None:
        return a
    return b if b[0] < a[0] else a
