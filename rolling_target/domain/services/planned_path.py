"""
PLANNED-PATH CALCULATOR (ENGINE-2)
Idealized compounding curve: C0 * (1 + p)^n

Never persisted. Always a pure function of initial capital and target.
A plan too large for a float is reported as math.inf.
"""

import math
from datetime import date
from typing import List, Sequence


def planned_capital(initial_capital: float, target_percent: float, day_index: int) -> float:
    """Capital the plan expects after `day_index` days at `target_percent` per day."""
    try:
        growth = (1 + target_percent / 100) ** day_index
    except OverflowError:
        return math.inf
    return initial_capital * growth


def day_indices(dates: Sequence[date], rollover_weekends: bool = True) -> List[int]:
    """
    Plan exponent for each trading day.

    rollover_weekends=True: days without trades roll over, so the index is
    the 1-based position of the record.
    rollover_weekends=False: every calendar day since the first trade
    advances the plan.
    """
    if not dates:
        return []
    if rollover_weekends:
        return list(range(1, len(dates) + 1))
    first = dates[0]
    return [(d - first).days + 1 for d in dates]


def next_day_index(
    last_index: int,
    last_date: date,
    today: date,
    rollover_weekends: bool = True,
) -> int:
    """
    Index of the day still in progress.

    Always at least one step past the last closed day.
    """
    if rollover_weekends:
        return last_index + 1
    return last_index + max(1, (today - last_date).days)
