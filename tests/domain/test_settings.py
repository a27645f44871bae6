import math

import pytest

from swing_lab.domain.scores import Category
from swing_lab.domain.settings import (
    DEFAULT_CATEGORY_SPECS,
    DEFAULT_COMPOSITE_WEIGHTS,
    LEVEL_THRESHOLDS,
    CategorySpec,
    resolve_level,
)


class TestDefaults:
    def test_composite_weights_sum_to_one(self) -> None:
        assert math.isclose(sum(DEFAULT_COMPOSITE_WEIGHTS.values()), 1.0)

    @pytest.mark.parametrize("spec", DEFAULT_CATEGORY_SPECS, ids=lambda s: s.category.value)
    def test_category_weights_sum_to_one(self, spec: CategorySpec) -> None:
        assert math.isclose(sum(m.weight for m in spec.metrics), 1.0)
        if spec.fallback:
            assert math.isclose(sum(m.weight for m in spec.fallback), 1.0)

    def test_one_spec_per_category(self) -> None:
        assert [s.category for s in DEFAULT_CATEGORY_SPECS] == list(Category)

    def test_level_thresholds_rise_with_level(self) -> None:
        order = ["youth", "middle_school", "high_school", "college", "pro"]
        barrels = [LEVEL_THRESHOLDS[level].barrel_ev_min for level in order]
        assert barrels == sorted(barrels)


class TestResolveLevel:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("High School", "high_school"),
            ("HS", "high_school"),
            ("middle-school", "middle_school"),
            ("MLB", "pro"),
            ("12U", "youth"),
            ("college", "college"),
        ],
    )
    def test_known_levels(self, raw: str, expected: str) -> None:
        assert resolve_level(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "beer league"])
    def test_unknown_uses_default(self, raw: str | None) -> None:
        assert resolve_level(raw) == "high_school"
        assert resolve_level(raw, default="college") == "college"
