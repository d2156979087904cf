"""
Snapshot storage for extracted change records.

This module manages two files inside the output directory:

    form_data_<YYYY-MM-DD>.json   one file per fetch day (history)
    latest.json                   replaced on every run, read by the viewer

Both share one schema:

    {"title": "...", "fetchedAt": "<ISO timestamp>", "changes": [ ... ]}
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from classchanges.config import output_dir
from classchanges.model import ChangeRecord

LATEST_NAME = "latest.json"


def _default_latest_path() -> Path:
    return output_dir() / LATEST_NAME


def _write_replace(path: Path, text: str) -> None:
    # readers never see a half-written file
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(path)
    finally:
        if tmp.exists():
            tmp.unlink()


def save_snapshot(
    records: Iterable[ChangeRecord],
    title: str,
    out_dir: str | Path | None = None,
    fetched_at: datetime | None = None,
) -> Path:
    """
    Write the dated snapshot and replace latest.json. Returns the path of
    latest.json.

    Creates the output directory if needed. Each file is written next to
    its target and swapped in whole.
    """
    base = Path(out_dir) if out_dir is not None else output_dir()
    base.mkdir(parents=True, exist_ok=True)

    when = fetched_at or datetime.now(timezone.utc)
    payload = {
        "title": title,
        "fetchedAt": when.isoformat(),
        "changes": [r.to_dict() for r in records],
    }
    text = json.dumps(payload, indent=2, ensure_ascii=False)

    _write_replace(base / f"form_data_{when.date().isoformat()}.json", text)
    latest = base / LATEST_NAME
    _write_replace(latest, text)
    return latest


def load_snapshot(path: str | Path | None = None) -> dict[str, Any]:
    """
    Load a snapshot file.

    Returns {} if the file does not exist or is not a JSON object. The
    viewer keeps working on an empty schedule rather than crashing.
    """
    snap_path = Path(path) if path is not None else _default_latest_path()
    if not snap_path.exists():
        return {}
    try:
        data = json.loads(snap_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_latest_changes(path: str | Path | None = None) -> list[dict[str, Any]]:
    """
    Change record dicts from latest.json, or [] if missing or corrupt.
    """
    changes = load_snapshot(path).get("changes", [])
    if not isinstance(changes, list):
        return []
    return [c for c in changes if isinstance(c, dict)]
