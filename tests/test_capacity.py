"""Tests for the slot capacity calculator."""
import pytest

from lesson_timetable.models import (ALL_CELLS, FALLBACK_MAX_COACHES, MaxCoaches,
    ReduceSlot, default_constraints)
from lesson_timetable.solver.capacity import base_capacity, slot_capacity


def test_no_constraints_uses_fallback() -> None:
    assert FALLBACK_MAX_COACHES == 7
    for day, slot in ALL_CELLS:
        assert slot_capacity(day, slot, []) == FALLBACK_MAX_COACHES


def test_max_coaches_without_reductions_is_raw_value() -> None:
    rules = [MaxCoaches(id="c1", value=4)]
    for day, slot in ALL_CELLS:
        assert slot_capacity(day, slot, rules) == 4


@pytest.mark.parametrize("day,slot,expected", [
    ("tue", "breakfast", 6),
    ("mon", "breakfast", 3),   # 50%
    ("wed", "rest",      1),   # 75% -> floor(1.5)
    ("fri", "fruit",     1),
    ("fri", "rest",      0),   # fully blocked
])
def test_default_rules(day, slot, expected) -> None:
    assert slot_capacity(day, slot, default_constraints()) == expected


def test_disabled_max_coaches_falls_back() -> None:
    rules = default_constraints()
    rules[0].enabled = False
    assert base_capacity(rules) == 7
    # floor(7 * 0.5)
    assert slot_capacity("mon", "breakfast", rules) == 3
    assert slot_capacity("tue", "rest", rules) == 7


def test_only_first_matching_reduction_applies() -> None:
    rules = [
        MaxCoaches(value=6),
        ReduceSlot(id="a", day="thu", slot="fruit", reduction=50),
        ReduceSlot(id="b", day="thu", slot="fruit", reduction=100),
    ]
    assert slot_capacity("thu", "fruit", rules) == 3


def test_disabled_reduction_is_skipped() -> None:
    rules = [
        MaxCoaches(value=6),
        ReduceSlot(id="a", day="thu", slot="fruit", reduction=100, enabled=False),
        ReduceSlot(id="b", day="thu", slot="fruit", reduction=50),
    ]
    assert slot_capacity("thu", "fruit", rules) == 3


@pytest.mark.parametrize("bad", [
    ReduceSlot(day="monday", slot="breakfast", reduction=100),
    ReduceSlot(day="mon", slot="lunch", reduction=100),
    ReduceSlot(day="mon", slot="breakfast", reduction=None),
    ReduceSlot(day="mon", slot="breakfast", reduction=150),
    ReduceSlot(day="mon", slot="breakfast", reduction=-5),
])
def test_malformed_reduction_never_matches(bad) -> None:
    rules = [MaxCoaches(value=6), bad]
    assert slot_capacity("mon", "breakfast", rules) == 6


def test_malformed_reduction_does_not_shadow_valid_one() -> None:
    rules = [
        MaxCoaches(value=6),
        ReduceSlot(id="bad", day="mon", slot="breakfast", reduction=None),
        ReduceSlot(id="ok",  day="mon", slot="breakfast", reduction=50),
    ]
    assert slot_capacity("mon", "breakfast", rules) == 3


def test_malformed_max_coaches_ignored() -> None:
    assert base_capacity([MaxCoaches(value=-1)]) == 7
    assert base_capacity([MaxCoaches(value=-1), MaxCoaches(value=2)]) == 2
