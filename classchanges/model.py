"""
Central data model definitions used across the project.

This module defines the canonical structure of the objects that flow through
the extraction pipeline so that:
- the extractors, the resolver and the expander share the same field names
- the JSON handed to the timetable viewer always has the same shape
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Tuple

# Literal periods are written 1-6 in announcements.
# (0,) is the "every period of the day" sentinel.
ALL_PERIODS: Tuple[int, ...] = (0,)


@dataclass(frozen=True)
class ClassInfo:
    """
    One grade/track combination, e.g. year=1, track="F" for class 1F.
    """

    year: int
    track: str

    @property
    def class_year(self) -> str:
        return f"{self.year}{self.track}"


ALL_CLASSES: Tuple[ClassInfo, ...] = tuple(ClassInfo(y, t) for y in (1, 2, 3) for t in ("F", "M"))

VALID_CLASS_YEARS = frozenset(c.class_year for c in ALL_CLASSES)


@dataclass
class Segment:
    """
    A piece of one announcement attributed to the class context that was
    active when the resolver reached it. Usually one class; markers listed
    back to back ("1F,2M") share a segment. Empty means no context.
    """

    text: str
    classes: Tuple[ClassInfo, ...]
    periods: Tuple[int, ...] = ()
    subject: str = ""


@dataclass(frozen=True)
class ResolvedChange:
    """
    Resolver output: which classes and periods one piece of text changes,
    and to what subject.
    """

    classes: Tuple[ClassInfo, ...]
    periods: Tuple[int, ...]
    subject: str
    source: str = ""


@dataclass(frozen=True)
class ChangeRecord:
    """
    One (date, class, period) schedule override as consumed by the viewer.

    `day` is always empty here; the viewer derives it from the date.
    """

    date: str
    class_year: str
    period: int
    new_subject: str
    description: str
    day: str = field(default="")

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "classYear": self.class_year,
            "period": self.period,
            "day": self.day,
            "newSubject": self.new_subject,
            "description": self.description,
        }
