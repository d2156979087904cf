"""
Segment resolution: which class does each period/subject belong to?

One announcement may describe several classes, each with its own periods
and subject:

    "2月20日 1F 2h 数学,2M 3h 英語"

The normalized text is cut at class markers and the pieces are folded left
to right. The fold carries the active class context; prose picks up
whatever context is active when it is reached. Markers separated only by
punctuation ("1F,2M 3h 数学") share the prose that follows them.

"Whole grade" / "whole school" keywords bypass segmentation entirely.
"""

from __future__ import annotations

from typing import List, NamedTuple, Tuple, Union

from classchanges.extract import (
    CLASS_PATTERN,
    class_from_match,
    extract_periods,
    extract_subject,
    find_all_classes,
    first_word,
    keyword_subject,
    residual_text,
    split_period_markers,
)
from classchanges.model import ALL_CLASSES, ALL_PERIODS, ClassInfo, ResolvedChange, Segment

WHOLE_GRADE_KEYWORDS = ("全学年", "全校")

# Only used when the text names no class at all.
EVENT_KEYWORDS = ("進路", "式典", "行事", "卒業式")

HOME_STUDY_SUBJECT = "自宅学習"
EVENT_SUBJECT = "行事等"

Token = Union[ClassInfo, str]


class _Context(NamedTuple):
    active: Tuple[ClassInfo, ...]
    # True while no prose has been attributed to `active` yet
    open: bool


# ---------------------------------------------------------------------------
# Tokenizing & folding
# ---------------------------------------------------------------------------


def tokenize(text: str) -> List[Token]:
    """
    Split text into prose strings and ClassInfo markers, in order.

        "2月20日 1F 2h 数学" -> ["2月20日 ", ClassInfo(1, "F"), " 2h 数学"]
    """
    tokens: List[Token] = []
    pos = 0
    for m in CLASS_PATTERN.finditer(text):
        if m.start() > pos:
            tokens.append(text[pos:m.start()])
        tokens.append(class_from_match(m))
        pos = m.end()
    if pos < len(text):
        tokens.append(text[pos:])
    return tokens


def _is_blank(prose: str) -> bool:
    return not extract_periods(prose) and not residual_text(prose)


def _step(ctx: _Context, token: Token) -> Tuple[_Context, Segment | None]:
    if isinstance(token, ClassInfo):
        if ctx.open and token not in ctx.active:
            return _Context(ctx.active + (token,), True), None
        if ctx.open:
            return ctx, None
        return _Context((token,), True), None

    if _is_blank(token):
        return ctx, None

    segment = Segment(
        text=token,
        classes=ctx.active,
        periods=extract_periods(token),
        subject=extract_subject(token),
    )
    return _Context(ctx.active, False), segment


def segment(text: str) -> List[Segment]:
    """
    Fold the token sequence into segments.

    Segments reached before any class marker come back with an empty
    `classes` tuple; resolve() drops them.
    """
    ctx = _Context(active=(), open=False)
    out: List[Segment] = []
    for token in tokenize(text):
        ctx, seg = _step(ctx, token)
        if seg is not None:
            out.append(seg)
    return out


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def is_whole_grade(text: str) -> bool:
    return any(kw in text for kw in WHOLE_GRADE_KEYWORDS)


def _whole_grade(text: str) -> ResolvedChange:
    if HOME_STUDY_SUBJECT in text:
        return ResolvedChange(ALL_CLASSES, ALL_PERIODS, HOME_STUDY_SUBJECT, text)
    return ResolvedChange(ALL_CLASSES, extract_periods(text) or ALL_PERIODS, EVENT_SUBJECT, text)


def _school_event(text: str) -> ResolvedChange:
    subject = keyword_subject(text) or EVENT_SUBJECT
    return ResolvedChange(ALL_CLASSES, extract_periods(text) or ALL_PERIODS, subject, text)


def _resolve_segment(seg: Segment) -> List[ResolvedChange]:
    if not seg.classes:
        return []

    markers = split_period_markers(seg.text)
    if not markers:
        # class named, no period written: assume the whole day
        return [ResolvedChange(seg.classes, ALL_PERIODS, seg.subject, seg.text)]

    # a keyword elsewhere in the segment only fills markers with no text of their own
    kw = keyword_subject(seg.text)
    out: List[ResolvedChange] = []
    for periods, tail in markers:
        subject = keyword_subject(tail) or first_word(tail) or kw or seg.subject
        out.append(ResolvedChange(seg.classes, periods, subject, seg.text))
    return out


def resolve(text: str) -> List[ResolvedChange]:
    """
    Resolve one normalized announcement into (classes, periods, subject)
    groups. An empty list means nothing could be attributed to a class.

    Whole-grade keywords win over explicit class markers.
    """
    if is_whole_grade(text):
        return [_whole_grade(text)]

    if not find_all_classes(text) and any(kw in text for kw in EVENT_KEYWORDS):
        return [_school_event(text)]

    out: List[ResolvedChange] = []
    for seg in segment(text):
        out.extend(_resolve_segment(seg))
    return out
