"""
Field extractors (normalized text -> date / classes / periods / subject).

Every function here is total: no match means None, an empty tuple or a
fallback string, never an exception.

Expected vocabulary (after normalize_text):

    "2月18日 1F 3h 自宅学習"
    "2月20日 1F 2h 数学,2M 3h 英語"
    "2月27日 3/M 3,4h LHR"
"""

from __future__ import annotations

import re
from typing import List, Optional, Tuple

from classchanges.model import ClassInfo

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

# grade 1-3, optional "/" or one whitespace, track F|M ("13F" is not 3F)
CLASS_PATTERN = re.compile(r"(?<![0-9])([1-3])[/\s]?([FM])", re.IGNORECASE)

DATE_PATTERN = re.compile(r"([0-9]{1,2})月([0-9]{1,2})日")

# "3h", "3 h", "3,4h", "3-5h", "3~5h"
PERIOD_PATTERN = re.compile(r"(?<![0-9])([1-6](?:\s*[,~〜\-]\s*[1-6])*)\s*h", re.IGNORECASE)

_RANGE_SEPARATORS = "~〜-"

# weekday markers like "(水)"
_WEEKDAY_PATTERN = re.compile(r"[(（][月火水木金土日][)）]")

_WORD_SPLIT = re.compile(r"[\s,]+")
_WORD_STRIP = "()（）[]［］「」【】:：・.。"

# Checked in this order, so longer names come before their prefixes.
SUBJECT_KEYWORDS = ("自宅学習", "進路ガイダンス", "卒業式予行", "卒業式", "LHR")

FALLBACK_SUBJECT = "授業変更"


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------


def class_from_match(m: re.Match) -> ClassInfo:
    return ClassInfo(year=int(m.group(1)), track=m.group(2).upper())


def extract_class(text: str) -> Optional[ClassInfo]:
    """
    Return the first class marker in text, or None.
    """
    m = CLASS_PATTERN.search(text or "")
    return class_from_match(m) if m else None


def find_all_classes(text: str) -> List[ClassInfo]:
    """
    Return every class marker in text, deduplicated, in first-seen order.
    """
    out: List[ClassInfo] = []
    for m in CLASS_PATTERN.finditer(text or ""):
        info = class_from_match(m)
        if info not in out:
            out.append(info)
    return out


# ---------------------------------------------------------------------------
# Date
# ---------------------------------------------------------------------------


def extract_date(text: str, reference_year: int) -> Optional[str]:
    """
    Turn the first "<month>月<day>日" into "YYYY-MM-DD".

    Month and day are zero-padded but not validated: "13月40日" gives
    "2026-13-40".
    """
    m = DATE_PATTERN.search(text or "")
    if not m:
        return None
    month = int(m.group(1))
    day = int(m.group(2))
    return f"{reference_year}-{month:02d}-{day:02d}"


# ---------------------------------------------------------------------------
# Periods
# ---------------------------------------------------------------------------


def _periods_in_marker(marker: str) -> List[int]:
    out: List[int] = []
    for part in marker.split(","):
        digits = [int(d) for d in re.findall(r"[1-6]", part)]
        if len(digits) == 2 and any(sep in part for sep in _RANGE_SEPARATORS) and digits[0] <= digits[1]:
            out.extend(range(digits[0], digits[1] + 1))
        else:
            out.extend(digits)
    return out


def split_period_markers(text: str) -> List[Tuple[Tuple[int, ...], str]]:
    """
    Pair every period marker with the text written after it, up to the
    next marker:

        "1h 英I 3h 数学" -> [((1,), " 英I "), ((3,), " 数学")]
    """
    matches = list(PERIOD_PATTERN.finditer(text or ""))
    out: List[Tuple[Tuple[int, ...], str]] = []
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        periods = tuple(sorted(set(_periods_in_marker(m.group(1)))))
        out.append((periods, text[m.end():end]))
    return out


def extract_periods(text: str) -> Tuple[int, ...]:
    """
    All distinct periods named by markers in text, ascending.

    An empty tuple means no marker was found; deciding that this means
    "all periods" is up to the caller.
    """
    found: set[int] = set()
    for periods, _ in split_period_markers(text):
        found.update(periods)
    return tuple(sorted(found))


# ---------------------------------------------------------------------------
# Subject
# ---------------------------------------------------------------------------


def first_word(text: str) -> str:
    """
    First word of text, with brackets and list punctuation stripped.
    """
    for token in _WORD_SPLIT.split(text or ""):
        token = token.strip(_WORD_STRIP)
        if token:
            return token
    return ""


def keyword_subject(text: str) -> Optional[str]:
    upper = (text or "").upper()
    for kw in SUBJECT_KEYWORDS:
        if kw in upper:
            return kw
    return None


def residual_text(text: str) -> str:
    """
    What is left of a segment once dates, weekday markers and period
    markers are removed.
    """
    s = DATE_PATTERN.sub(" ", text or "")
    s = _WEEKDAY_PATTERN.sub(" ", s)
    s = PERIOD_PATTERN.sub(" ", s)
    return " ".join(t for t in (tok.strip(_WORD_STRIP) for tok in _WORD_SPLIT.split(s)) if t)


def extract_subject(segment: str) -> str:
    """
    Best-effort replacement subject for a segment.

    Order:
    1. a known subject keyword anywhere in the segment
    2. the first word after the last period marker
    3. the first word of whatever else remains
    4. FALLBACK_SUBJECT
    """
    kw = keyword_subject(segment)
    if kw:
        return kw

    markers = split_period_markers(segment)
    if markers:
        word = first_word(markers[-1][1])
        if word:
            return word

    word = first_word(residual_text(segment))
    return word or FALLBACK_SUBJECT
