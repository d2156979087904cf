"""
Configuration: period conventions, reference year, form URL and output paths.

Values can be overridden through the environment:

    FORM_URL                      form page to scrape
    OUTPUT_DIR                    where snapshots are written
    CLASSCHANGES_REFERENCE_YEAR   year combined with "<month>月<day>日"

CLI flags take precedence over the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

# ---------------------------------------------------------------------------
# Paths & URLs
# ---------------------------------------------------------------------------

PACKAGE_DIR = Path(__file__).resolve().parent

DEFAULT_FORM_URL = (
    "https://docs.google.com/forms/d/e/"
    "1FAIpQLScUd3YWWX57ZIZP1de41DH8YQKlFCJZjQAW3Vj0EpijXq8WMw/viewform"
)
DEFAULT_OUTPUT_DIR = PACKAGE_DIR / "data"
DEFAULT_REFERENCE_YEAR = 2026


# ---------------------------------------------------------------------------
# Period conventions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PeriodConvention:
    """
    How literal periods ("3h") map onto the periods written to records.

    offset            added once to every literal period (1-6)
    valid_periods     records outside this range are never emitted
    full_day_periods  what the "all periods" sentinel expands to
    """

    name: str
    offset: int
    valid_periods: Tuple[int, ...]
    full_day_periods: Tuple[int, ...]


# The viewer draws a fixed 0-6 grid and labels slot p as "{p+1}h".
ZERO_BASED = PeriodConvention(
    name="zero-based",
    offset=-1,
    valid_periods=tuple(range(0, 7)),
    full_day_periods=tuple(range(0, 7)),
)

ONE_BASED = PeriodConvention(
    name="one-based",
    offset=0,
    valid_periods=tuple(range(1, 7)),
    full_day_periods=tuple(range(1, 7)),
)

CONVENTIONS = {c.name: c for c in (ZERO_BASED, ONE_BASED)}


@dataclass(frozen=True)
class PipelineConfig:
    reference_year: int = DEFAULT_REFERENCE_YEAR
    convention: PeriodConvention = field(default=ZERO_BASED)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


def form_url() -> str:
    return os.environ.get("FORM_URL", "").strip() or DEFAULT_FORM_URL


def output_dir() -> Path:
    raw = os.environ.get("OUTPUT_DIR", "").strip()
    return Path(raw) if raw else DEFAULT_OUTPUT_DIR


def reference_year() -> int:
    """
    Reference year from the environment, falling back to the default when
    unset or not a number.
    """
    raw = os.environ.get("CLASSCHANGES_REFERENCE_YEAR", "").strip()
    if raw.isdigit():
        return int(raw)
    return DEFAULT_REFERENCE_YEAR


def load_config(year: int | None = None, convention: str | None = None) -> PipelineConfig:
    """
    Build a PipelineConfig from explicit values (CLI) or the environment.
    Raises ValueError for an unknown convention name.
    """
    conv = ZERO_BASED
    if convention:
        if convention not in CONVENTIONS:
            raise ValueError(f"Unknown period convention: {convention!r}")
        conv = CONVENTIONS[convention]
    return PipelineConfig(
        reference_year=year if year is not None else reference_year(),
        convention=conv,
    )
