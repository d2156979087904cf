"""
Record expansion: (classes x periods) -> flat ChangeRecords.

This is the only place where literal periods ("3h" -> 3) are converted to
the configured record convention. Nothing upstream shifts periods.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from classchanges.config import ZERO_BASED, PeriodConvention
from classchanges.model import ALL_PERIODS, ChangeRecord, ResolvedChange


def expand_periods(periods: Tuple[int, ...], convention: PeriodConvention = ZERO_BASED) -> Tuple[int, ...]:
    """
    Map a PeriodSet onto record periods.

    ALL_PERIODS becomes the convention's full-day range; literal periods are
    shifted by the convention's offset and dropped when out of range.
    """
    if tuple(periods) == ALL_PERIODS:
        return convention.full_day_periods
    out: List[int] = []
    for p in periods:
        q = p + convention.offset
        if q in convention.valid_periods and q not in out:
            out.append(q)
    return tuple(out)


def expand(
    date: str,
    resolved: Iterable[ResolvedChange],
    description: str,
    convention: PeriodConvention = ZERO_BASED,
) -> List[ChangeRecord]:
    """
    One record per (class, period) for one announcement.

    Order follows the resolved changes, then their classes, then periods.
    If two changes hit the same (class, period), the later one wins but
    keeps the position of the first.
    """
    by_slot: dict[tuple[str, int], ChangeRecord] = {}
    for change in resolved:
        periods = expand_periods(change.periods, convention)
        for cls in change.classes:
            for period in periods:
                by_slot[(cls.class_year, period)] = ChangeRecord(
                    date=date,
                    class_year=cls.class_year,
                    period=period,
                    new_subject=change.subject,
                    description=description,
                )
    return list(by_slot.values())
