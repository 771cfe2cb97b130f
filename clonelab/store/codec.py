"""JSON encoding of the per-clone analysis payload."""
from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from clonelab.types import CLONE_EDITING, ProgressRecord, ReviewComment


def now_timestamp() -> str:
    return datetime.now(tz=UTC).strftime("%Y-%m-%d %H:%M:%S")


def dump_analysis_data(data: dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False)


def load_analysis_data(blob: str) -> dict[str, Any]:
    """Parse a stored analysis payload. Raises ValueError when malformed."""
    data = json.loads(blob)  # JSONDecodeError is a ValueError
    if not isinstance(data, dict):
        raise ValueError(f"analysis data must be a JSON object, got {type(data).__name__}")
    return data


def record_from_analysis_data(data: dict[str, Any], status: str | None = None, progress: int = 0) -> ProgressRecord:
    comments = data.get("review_comments") or []
    return ProgressRecord(
        status=status,
        progress=progress,
        answers=dict(data.get("answers") or {}),
        current_step=data.get("current_step") or CLONE_EDITING,
        review_comments=[ReviewComment.from_dict(c) for c in comments if isinstance(c, dict)],
        last_saved=data.get("last_saved"),
        submitted_at=data.get("submitted_at"),
    )


def decode_record(record: ProgressRecord) -> ProgressRecord:
    """Expand a record whose payload is still serialized. Raises ValueError."""
    if record.analysis_data is None:
        return record
    data = load_analysis_data(record.analysis_data)
    return record_from_analysis_data(data, status=record.status, progress=record.progress)
