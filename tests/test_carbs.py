"""Tests for the per-meal carb budget."""

from glucose_planner.services.carbs import carb_badge, max_carbs


def test_base_budget_by_category_and_insulin() -> None:
    assert max_carbs("type1", True, 120) == 50
    assert max_carbs("type1", False, 120) == 40
    assert max_carbs("type2", True, 120) == 45
    assert max_carbs("type2", False, 120) == 35
    assert max_carbs("gestational", False, 120) == 45
    assert max_carbs(None, False, 120) == 45


def test_high_average_reduces_budget() -> None:
    assert max_carbs("type2", False, 150) == 25
    assert max_carbs("type1", True, 190) == 35
    assert max_carbs("type2", False, 200) == 20


def test_low_average_raises_budget() -> None:
    assert max_carbs("type2", False, 75) == 45
    assert max_carbs("type1", True, 60) == 60


def test_threshold_values_are_not_adjusted() -> None:
    assert max_carbs("type2", True, 140) == 45
    assert max_carbs("type2", True, 80) == 45
    assert max_carbs("type2", True, 180) == 35


def test_budget_never_drops_below_floor() -> None:
    for category in ("type1", "type2", "gestational", "prediabetes", None):
        for insulin in (True, False):
            for average in (40, 79, 100, 141, 181, 400):
                assert max_carbs(category, insulin, average) >= 20


def test_carb_badge_thresholds() -> None:
    assert carb_badge(20) == "Low-Carb"
    assert carb_badge(20.5) == "Medium"
    assert carb_badge(35) == "Medium"
    assert carb_badge(36) == "High-Carb"
