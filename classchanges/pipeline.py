"""
Pipeline driver (announcement texts -> ChangeRecords).

For every announcement, in source order:

    normalize -> date (skip if missing) -> resolve -> expand

Important rules:
- One bad announcement never aborts the run; it just yields no records
- Only a failure to get the announcements at all is an error for the run
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence

from classchanges.config import PipelineConfig
from classchanges.expand import expand
from classchanges.extract import extract_date
from classchanges.model import ChangeRecord
from classchanges.normalize import normalize_text
from classchanges.resolve import resolve


def coerce_announcements(items: Iterable[Any]) -> List[str]:
    """
    Accept plain strings or form items shaped like {"title": "..."} and
    return plain strings. Empty and unrecognized items are dropped.
    """
    out: List[str] = []
    for item in items:
        if isinstance(item, Mapping):
            item = item.get("title")
        if isinstance(item, str) and item.strip():
            out.append(item)
    return out


def process_announcement(text: str, config: Optional[PipelineConfig] = None) -> List[ChangeRecord]:
    """
    Turn one raw announcement into its change records.
    Returns [] when no date or no class can be found.
    """
    config = config or PipelineConfig()
    normalized = normalize_text(text)

    date = extract_date(normalized, config.reference_year)
    if not date:
        return []

    return expand(date, resolve(normalized), text, config.convention)


def _skip_reason(text: str, config: PipelineConfig) -> str:
    if not extract_date(normalize_text(text), config.reference_year):
        return "no date"
    return "no class"


def run(
    announcements: Sequence[str],
    config: Optional[PipelineConfig] = None,
    verbose: bool = False,
) -> List[ChangeRecord]:
    config = config or PipelineConfig()
    records: List[ChangeRecord] = []
    for text in announcements:
        found = process_announcement(text, config)
        if not found and verbose:
            print(f"SKIP  ({_skip_reason(text, config)}) {text[:50]}")
        records.extend(found)
    return records


def records_to_json(records: Iterable[ChangeRecord]) -> List[dict[str, Any]]:
    return [r.to_dict() for r in records]


def build_response(
    source: Callable[[], Iterable[Any]],
    config: Optional[PipelineConfig] = None,
) -> tuple[int, Any]:
    """
    Fetch announcements from `source` and run the pipeline.

    Returns (200, [record dicts]) on success, or (500, {"error": message})
    when the source cannot be fetched or parsed. The payload is always
    JSON-serializable.
    """
    try:
        announcements = coerce_announcements(source())
    except Exception as e:
        return 500, {"error": str(e) or e.__class__.__name__}

    return 200, records_to_json(run(announcements, config))
