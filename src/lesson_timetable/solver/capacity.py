"""
Slot capacity: how many coaches may run a lesson in one (day, slot) cell.

Only the first enabled reduce_slot rule that matches a cell is applied.
Rules are not stacked, and their priority field is not consulted.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Iterable, Optional

from ..models import (DAY_INDEX, FALLBACK_MAX_COACHES, SLOTS, Constraint,
    MaxCoaches, ReduceSlot)


def base_capacity(constraints: Iterable[Constraint]) -> int:
    """Value of the first enabled, well-formed max_coaches rule, else the fallback."""
    for c in constraints:
        if not isinstance(c, MaxCoaches) or not c.enabled:
            continue
        if isinstance(c.value, int) and not isinstance(c.value, bool) and c.value >= 0:
            return c.value
    return FALLBACK_MAX_COACHES


def valid_reduction(c: ReduceSlot) -> Optional[float]:
    """Return the reduction percentage, or None if the rule is malformed."""
    r = c.reduction
    if isinstance(r, bool) or not isinstance(r, Real):
        return None
    if math.isnan(r) or not 0 <= r <= 100:
        return None
    if c.day not in DAY_INDEX or c.slot not in SLOTS:
        return None
    return float(r)


def find_reduction(day: str, slot: str,
                   constraints: Iterable[Constraint]) -> Optional[ReduceSlot]:
    for c in constraints:
        if not isinstance(c, ReduceSlot) or not c.enabled:
            continue
        if c.day == day and c.slot == slot and valid_reduction(c) is not None:
            return c
    return None


def slot_capacity(day: str, slot: str, constraints: Iterable[Constraint]) -> int:
    constraints = list(constraints)
    base = base_capacity(constraints)
    rule = find_reduction(day, slot, constraints)
    if rule is None:
        return base
    # floor(base * (1 - r/100)), kept in integer-friendly form
    return max(0, math.floor(base * (100 - float(rule.reduction)) / 100))
