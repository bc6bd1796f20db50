"""Numeral-system strategies deciding which blocks merge on insertion."""

from typing import Dict, Type, Union

from .base import DigitVector, MergePlan, MergeStep, Strategy, normalize
from .binary import BinaryStrategy
from .skew import SkewBinaryStrategy

STRATEGIES: Dict[str, Type[Strategy]] = {
    "binary": BinaryStrategy,
    "skew-binary": SkewBinaryStrategy,
    "skew": SkewBinaryStrategy,
    "skew_binary": SkewBinaryStrategy,
}


def get_strategy(strategy: Union[str, Strategy]) -> Strategy:
    """Resolve a strategy name (or pass an instance through)."""
    if isinstance(strategy, Strategy):
        return strategy
    try:
        return STRATEGIES[strategy]()
    except KeyError:
        known = ", ".join(sorted(STRATEGIES))
        raise ValueError(f"Unknown strategy {strategy!r}; expected one of: {known}") from None


__all__ = [
    "DigitVector",
    "MergePlan",
    "MergeStep",
    "Strategy",
    "normalize",
    "BinaryStrategy",
    "SkewBinaryStrategy",
    "STRATEGIES",
    "get_strategy",
]
