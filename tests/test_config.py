import pytest
from hypothesis import given, strategies as st

from dynamization.config import Settings
from dynamization.container import Dynamic
from tests.helpers.capabilities import TupleCapability


class TestSettings:
    def test_default_values(self):
        """Test that Settings has sensible defaults."""
        settings = Settings()
        assert settings.strategy == "binary"
        assert settings.rebuild_threshold is None
        assert settings.max_levels == 64

    def test_custom_values(self):
        """Test that Settings accepts custom values."""
        settings = Settings(strategy="skew-binary", rebuild_threshold=0.25, max_levels=8)
        assert settings.strategy == "skew-binary"
        assert settings.rebuild_threshold == 0.25
        assert settings.max_levels == 8

    def test_default_threshold_comes_from_strategy(self):
        """Without an explicit threshold the container uses the strategy's."""
        dynamic = Dynamic(TupleCapability())
        assert dynamic.rebuild_threshold == 0.5

    def test_explicit_threshold_wins(self):
        dynamic = Dynamic(TupleCapability(), settings=Settings(rebuild_threshold=0.75))
        assert dynamic.rebuild_threshold == 0.75

    def test_strategy_argument_overrides_settings(self):
        dynamic = Dynamic(TupleCapability(), strategy="skew", settings=Settings(strategy="binary"))
        assert dynamic.strategy.name == "skew-binary"


class TestConfigValidation:
    def test_unknown_strategy_rejected(self):
        with pytest.raises(ValueError, match="Unknown strategy"):
            Settings(strategy="ternary")

    @given(threshold=st.one_of(
        st.floats(max_value=0.0, allow_nan=False),
        st.floats(min_value=1.0, exclude_min=True, allow_nan=False),
    ))
    def test_out_of_range_threshold_rejected(self, threshold):
        """For any threshold outside (0, 1], configuration should be invalid."""
        with pytest.raises(ValueError):
            Settings(rebuild_threshold=threshold)

    @given(threshold=st.floats(min_value=0.0, max_value=1.0, exclude_min=True))
    def test_in_range_threshold_accepted(self, threshold):
        settings = Settings(rebuild_threshold=threshold)
        assert settings.rebuild_threshold == threshold

    @given(levels=st.integers(max_value=0))
    def test_non_positive_max_levels_rejected(self, levels):
        with pytest.raises(ValueError):
            Settings(max_levels=levels)
