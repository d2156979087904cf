"""
Terminal rendering of change records (rich tables).
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterable, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def _period_key(period: Any) -> int:
    try:
        return int(period)
    except (TypeError, ValueError):
        return -1


def period_label(period: Any, zero_based: bool = True) -> str:
    """
    Viewer label for a period: slot 0 is "1h" when zero-based.
    """
    try:
        p = int(period)
    except (TypeError, ValueError):
        return _safe_str(period)
    return f"{p + 1 if zero_based else p}h"


def filter_changes(
    changes: Iterable[dict[str, Any]],
    class_year: Optional[str] = None,
    date: Optional[str] = None,
) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    cy = (class_year or "").strip().upper()
    for c in changes:
        if cy and _safe_str(c.get("classYear")).upper() != cy:
            continue
        if date and _safe_str(c.get("date")) != date:
            continue
        out.append(c)
    return out


def render_changes(
    changes: Iterable[dict[str, Any]],
    console: Optional[Console] = None,
    zero_based: bool = True,
) -> int:
    """
    Print one table per date, rows sorted by class and period.
    Returns the number of rows printed.
    """
    console = console or Console()

    by_date: dict[str, list[dict[str, Any]]] = defaultdict(list)
    for c in changes:
        by_date[_safe_str(c.get("date"))].append(c)

    if not by_date:
        console.print("No changes.")
        return 0

    count = 0
    for d in sorted(by_date):
        table = Table(title=d or "(no date)", box=box.SIMPLE)
        table.add_column("Class")
        table.add_column("Period", justify="right")
        table.add_column("Subject")
        table.add_column("Source")

        rows = sorted(by_date[d], key=lambda c: (_safe_str(c.get("classYear")), _period_key(c.get("period"))))
        for c in rows:
            table.add_row(
                f"[bold cyan]{escape(_safe_str(c.get('classYear')))}[/]",
                period_label(c.get("period"), zero_based=zero_based),
                f"[yellow]{escape(_safe_str(c.get('newSubject')))}[/]",
                escape(_safe_str(c.get("description"))),
            )
            count += 1
        console.print(table)

    return count
