"""Skew-binary decomposition."""

from typing import Tuple

from .base import DigitVector, MergePlan, MergeStep, Strategy, normalize


class SkewBinaryStrategy(Strategy):
    """
    Skew-binary decomposition.

    A unit at level ``i`` holds ``2**(i+1) - 1`` elements, digits range over
    ``{0, 1, 2}`` and only the lowest nonzero digit may be 2, so at most two
    equally sized blocks share a level.

    Inserting either adds a singleton block at level 0, or, when the lowest
    nonzero digit is 2, merges those two blocks with the new element into
    one block a level up (``2 * w(i) + 1 == w(i + 1)``). Every insertion
    therefore consumes at most two existing blocks, never a whole prefix of
    the vector.
    """

    name = "skew-binary"
    max_digit = 2

    def weight(self, level: int) -> int:
        return 2 ** (level + 1) - 1

    def plan_insert(self, digits: DigitVector) -> Tuple[DigitVector, MergePlan]:
        new_digits = list(digits)

        lowest = next((level for level, digit in enumerate(digits) if digit), None)
        if lowest is not None and digits[lowest] == 2:
            new_digits[lowest] = 0
            if lowest + 1 == len(new_digits):
                new_digits.append(0)
            new_digits[lowest + 1] += 1
            step = MergeStep(consumed=frozenset([lowest]), new_level=lowest + 1)
        else:
            if not new_digits:
                new_digits.append(0)
            new_digits[0] += 1
            step = MergeStep(consumed=frozenset(), new_level=0)

        return normalize(new_digits), (step,)
