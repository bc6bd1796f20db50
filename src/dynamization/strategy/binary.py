"""Binary (Bentley-Saxe) decomposition."""

from typing import Tuple

from .base import DigitVector, MergePlan, MergeStep, Strategy, normalize


class BinaryStrategy(Strategy):
    """
    Classical binary decomposition.

    The digit vector is the binary representation of ``n`` and a set bit at
    level ``i`` is one block of ``2**i`` elements. Inserting finds the
    lowest clear bit ``i`` and merges every block below it, together with
    the new element, into a single block at level ``i``.

    Amortized cost per insertion is logarithmic, but a single insertion may
    rebuild everything (going from ``2**k - 1`` to ``2**k`` elements). See
    ``SkewBinaryStrategy`` for a bounded number of merges per insertion.
    """

    name = "binary"
    max_digit = 1

    def weight(self, level: int) -> int:
        return 2 ** level

    def plan_insert(self, digits: DigitVector) -> Tuple[DigitVector, MergePlan]:
        target = 0
        while target < len(digits) and digits[target] == 1:
            target += 1

        new_digits = [0] * max(len(digits), target + 1)
        new_digits[target + 1:len(digits)] = digits[target + 1:]
        new_digits[target] = 1

        step = MergeStep(consumed=frozenset(range(target)), new_level=target)
        return normalize(new_digits), (step,)
