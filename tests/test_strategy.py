"""Tests for the binary and skew-binary numeral systems."""

import pytest
from hypothesis import given, strategies as st

from dynamization.strategy import (
    BinaryStrategy,
    MergeStep,
    SkewBinaryStrategy,
    get_strategy,
    normalize,
)


def count_up(strategy, n):
    """Apply ``n`` increments from zero, returning the digits and every plan."""
    digits = ()
    plans = []
    for _ in range(n):
        digits, plan = strategy.plan_insert(digits)
        plans.append(plan)
    return digits, plans


class TestDigitVectors:
    def test_normalize_strips_trailing_zeros(self):
        assert normalize([1, 0, 1, 0, 0]) == (1, 0, 1)
        assert normalize([0, 0]) == ()
        assert normalize([]) == ()

    def test_merge_step_is_immutable(self):
        step = MergeStep(consumed=frozenset({0}), new_level=1)
        with pytest.raises(AttributeError):
            step.new_level = 2  # type: ignore

    def test_get_strategy_by_name(self):
        assert isinstance(get_strategy("binary"), BinaryStrategy)
        assert isinstance(get_strategy("skew-binary"), SkewBinaryStrategy)
        assert isinstance(get_strategy("skew"), SkewBinaryStrategy)

    def test_get_strategy_passes_instances_through(self):
        strategy = SkewBinaryStrategy()
        assert get_strategy(strategy) is strategy

    def test_get_strategy_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown strategy"):
            get_strategy("fibonacci")

    def test_digits_for_rejects_negative(self):
        with pytest.raises(ValueError):
            BinaryStrategy().digits_for(-1)


class TestBinaryStrategy:
    def test_weights_are_powers_of_two(self):
        strategy = BinaryStrategy()
        assert [strategy.weight(level) for level in range(5)] == [1, 2, 4, 8, 16]

    def test_first_insert_creates_singleton(self):
        digits, plan = BinaryStrategy().plan_insert(())
        assert digits == (1,)
        assert plan == (MergeStep(consumed=frozenset(), new_level=0),)

    def test_carry_consumes_all_set_low_bits(self):
        """Going from 7 to 8 merges levels 0..2 into level 3."""
        digits, plan = BinaryStrategy().plan_insert((1, 1, 1))
        assert digits == (0, 0, 0, 1)
        assert plan == (MergeStep(consumed=frozenset({0, 1, 2}), new_level=3),)

    def test_carry_stops_at_first_zero(self):
        digits, plan = BinaryStrategy().plan_insert((1, 1, 0, 1))
        assert digits == (0, 0, 1, 1)
        assert plan[0].consumed == frozenset({0, 1})
        assert plan[0].new_level == 2

    @given(n=st.integers(min_value=0, max_value=600))
    def test_increments_match_binary_representation(self, n):
        strategy = BinaryStrategy()
        digits, _ = count_up(strategy, n)
        assert strategy.decode(digits) == n
        assert digits == strategy.digits_for(n)
        assert sum(digits) == bin(n).count("1")

    def test_worst_case_merge_is_whole_vector(self):
        """A carry into 2**k consumes every existing block."""
        _, plans = count_up(BinaryStrategy(), 64)
        assert plans[-1][0].consumed == frozenset(range(6))


class TestSkewBinaryStrategy:
    def test_weights(self):
        strategy = SkewBinaryStrategy()
        assert [strategy.weight(level) for level in range(5)] == [1, 3, 7, 15, 31]

    def test_small_sequence(self):
        """0..10 in canonical skew binary, lowest digit first."""
        expected = [
            (), (1,), (2,), (0, 1), (1, 1), (2, 1), (0, 2),
            (0, 0, 1), (1, 0, 1), (2, 0, 1), (0, 1, 1),
        ]
        strategy = SkewBinaryStrategy()
        digits = ()
        for n, want in enumerate(expected):
            assert digits == want, f"n={n}"
            digits, _ = strategy.plan_insert(digits)

    def test_two_lowest_blocks_merge_up(self):
        digits, plan = SkewBinaryStrategy().plan_insert((0, 2))
        assert digits == (0, 0, 1)
        assert plan == (MergeStep(consumed=frozenset({1}), new_level=2),)

    def test_singleton_when_no_two(self):
        digits, plan = SkewBinaryStrategy().plan_insert((0, 1, 1))
        assert digits == (1, 1, 1)
        assert plan == (MergeStep(consumed=frozenset(), new_level=0),)

    @given(n=st.integers(min_value=0, max_value=600))
    def test_increments_stay_canonical(self, n):
        """Only the lowest nonzero digit may be 2, and decoding gives n."""
        strategy = SkewBinaryStrategy()
        digits, _ = count_up(strategy, n)
        strategy.validate(digits)
        assert strategy.decode(digits) == n
        assert digits == strategy.digits_for(n)

        nonzero = [level for level, digit in enumerate(digits) if digit]
        for level in nonzero[1:]:
            assert digits[level] == 1

    def test_every_plan_consumes_at_most_one_level(self):
        _, plans = count_up(SkewBinaryStrategy(), 2000)
        for plan in plans:
            assert len(plan) == 1
            assert len(plan[0].consumed) <= 1

    def test_validate_rejects_large_digit(self):
        with pytest.raises(ValueError):
            SkewBinaryStrategy().validate((3,))
