"""
Digit vectors, merge plans and the strategy contract.

A strategy describes the element count ``n`` as a vector of digits, one per
level. A nonzero digit ``d`` at level ``i`` means ``d`` blocks of
``weight(i)`` elements each live at that level. Strategies are pure: they
never see elements or structures, only digit vectors.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Tuple

DigitVector = Tuple[int, ...]


@dataclass(frozen=True)
class MergeStep:
    """One rebuild: every block at ``consumed`` levels becomes one block at ``new_level``."""
    consumed: FrozenSet[int]
    new_level: int
    include_new: bool = True


MergePlan = Tuple[MergeStep, ...]


def normalize(digits: Iterable[int]) -> DigitVector:
    """Return ``digits`` as a tuple with trailing zero levels removed."""
    result = list(digits)
    while result and result[-1] == 0:
        result.pop()
    return tuple(result)


class Strategy:
    """
    Base class for numeral-system strategies.

    Subclasses define ``name``, ``max_digit``, ``weight`` and
    ``plan_insert``; the rest is derived from those.
    """

    name: str = ""
    max_digit: int = 1

    def weight(self, level: int) -> int:
        raise NotImplementedError

    def plan_insert(self, digits: DigitVector) -> Tuple[DigitVector, MergePlan]:
        """Return the digit vector for ``n + 1`` and the merges that realize it."""
        raise NotImplementedError

    def plan_rebuild_threshold(self) -> float:
        """Fraction of dead elements that triggers a global rebuild."""
        return 0.5

    def decode(self, digits: DigitVector) -> int:
        return sum(digit * self.weight(level) for level, digit in enumerate(digits))

    def digits_for(self, n: int) -> DigitVector:
        """
        Return the canonical digit vector for ``n`` elements.

        Greedy from the top: take as many of the largest fitting weight as
        the digit bound allows, then move down a level.
        """
        if n < 0:
            raise ValueError(f"Element count must be non-negative, got {n}")

        levels = 0
        while self.weight(levels) <= n:
            levels += 1

        digits: List[int] = [0] * levels
        remaining = n
        for level in reversed(range(levels)):
            weight = self.weight(level)
            while remaining >= weight and digits[level] < self.max_digit:
                digits[level] += 1
                remaining -= weight

        if remaining:
            raise ValueError(f"{self.name} cannot represent {n}")
        return normalize(digits)

    def validate(self, digits: DigitVector) -> None:
        """Raise ValueError if ``digits`` is not a well-formed vector for this strategy."""
        if digits and digits[-1] == 0:
            raise ValueError(f"Digit vector has trailing zeros: {digits}")
        for level, digit in enumerate(digits):
            if not 0 <= digit <= self.max_digit:
                raise ValueError(f"Digit {digit} at level {level} outside 0..{self.max_digit}")

    def block_sizes(self, digits: DigitVector) -> List[Tuple[int, int]]:
        """List ``(level, size)`` for every block the vector implies, ascending."""
        sizes = []
        for level, digit in enumerate(digits):
            sizes.extend((level, self.weight(level)) for _ in range(digit))
        return sizes

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
