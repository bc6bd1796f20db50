"""Tests for the numpy sorted array structure."""

import numpy as np
import pytest
from hypothesis import given, settings as hypothesis_settings, strategies as st

from dynamization import DeletionUnsupported, Dynamic
from dynamization.combine import add, any_of, nearest
from dynamization.structures import Member, Nearest, RangeCount, SortedArray


class TestSortedArray:
    def test_build_is_sorted_and_read_only(self):
        array = SortedArray().build([3.0, 1.0, 2.0])
        assert array.tolist() == [1.0, 2.0, 3.0]
        assert array.dtype == np.float64
        with pytest.raises(ValueError):
            array[0] = 10.0

    def test_range_count(self):
        capability = SortedArray()
        array = capability.build([1, 2, 2, 3, 5])
        assert capability.query(array, RangeCount(2, 3)) == 3
        assert capability.query(array, RangeCount(4, 4)) == 0

    def test_member(self):
        capability = SortedArray()
        array = capability.build([1, 5, 9])
        assert capability.query(array, Member(5)) is True
        assert capability.query(array, Member(6)) is False
        assert capability.query(array, Member(100)) is False

    def test_nearest(self):
        capability = SortedArray()
        array = capability.build([1, 5, 9])
        assert capability.query(array, Nearest(6.5)) == (1.5, 5.0)
        assert capability.query(array, Nearest(-3)) == (4.0, 1.0)
        assert capability.query(array, Nearest(20)) == (11.0, 9.0)
        assert capability.query(capability.build([]), Nearest(1)) is None

    def test_enumerate_and_size(self):
        capability = SortedArray()
        array = capability.build([2, 1])
        assert capability.enumerate(array) == [1.0, 2.0]
        assert capability.size(array) == 2


class TestDynamicSortedArray:
    @pytest.mark.parametrize("strategy", ["binary", "skew-binary"])
    @given(values=st.lists(st.integers(-1000, 1000), min_size=1, max_size=80),
           target=st.integers(-1200, 1200))
    @hypothesis_settings(max_examples=30, deadline=None)
    def test_nearest_matches_brute_force(self, strategy, values, target):
        dynamic = Dynamic(SortedArray(), strategy=strategy)
        dynamic.extend(values)

        distance, _ = dynamic.query(Nearest(target), nearest)
        assert distance == min(abs(value - target) for value in values)

    def test_range_count_and_member(self):
        dynamic = Dynamic(SortedArray())
        dynamic.extend(range(100))
        assert dynamic.query(RangeCount(10, 19), add, 0) == 10
        assert dynamic.query(Member(42), any_of, False) is True

    def test_elements_are_stored_as_floats(self):
        dynamic = Dynamic(SortedArray())
        dynamic.extend([2 ** 60 + 3, 2 ** 60 + 1, 7])

        elements = sorted(dynamic.elements())
        assert all(isinstance(value, float) for value in elements)
        assert elements == [7.0, float(2 ** 60 + 1), float(2 ** 60 + 3)]

    def test_delete_unsupported(self):
        dynamic = Dynamic(SortedArray())
        dynamic.insert(1.0)
        with pytest.raises(DeletionUnsupported):
            dynamic.delete(1.0)
