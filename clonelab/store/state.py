"""SQLite-backed clone progress persistence."""
from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING, Any

from clonelab.engine.transitions import require_legal_transition
from clonelab.errors import InvalidStatusError, ProgressNotFoundError
from clonelab.logging_utils import get_logger
from clonelab.statuses import Status, is_valid_status
from clonelab.store.codec import dump_analysis_data, load_analysis_data, now_timestamp, record_from_analysis_data
from clonelab.types import ASSIGNED, CLONE_EDITING, CloneRef, ProgressRecord

if TYPE_CHECKING:
    from pathlib import Path

logger = get_logger(__name__)

INIT_SQL = """
CREATE TABLE IF NOT EXISTS clone_progress (
    kind TEXT NOT NULL,
    student_id TEXT NOT NULL,
    clone_id TEXT NOT NULL,
    status TEXT,
    progress INTEGER NOT NULL DEFAULT 0,
    analysis_data TEXT,
    updated_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (kind, student_id, clone_id)
);

CREATE TABLE IF NOT EXISTS status_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    kind TEXT NOT NULL,
    student_id TEXT NOT NULL,
    clone_id TEXT NOT NULL,
    from_status TEXT,
    to_status TEXT NOT NULL,
    actor TEXT NOT NULL DEFAULT 'student',
    timestamp TEXT NOT NULL DEFAULT (datetime('now'))
);
"""

# A plain save moves these into the working state. NeedsReanalysis keeps
# its status so the resubmission lands in CorrectedWaitingReview.
_STARTABLE = frozenset({None, "", Status.UNASSIGNED, Status.AVAILABLE, Status.NEEDS_CORRECTIONS})


class StateManager:
    """Progress store for assigned and practice clones.

    Assigned clones come back with their analysis payload still
    serialized (``ProgressRecord.analysis_data``); practice clones come
    back parsed. Both shapes are accepted by SubmissionWorkflow.
    """

    def __init__(self, db_path: str | Path, *, enforce_transitions: bool = True):
        self.db = sqlite3.connect(str(db_path))
        self.db.execute("PRAGMA journal_mode = WAL")
        self.db.executescript(INIT_SQL)
        self.enforce_transitions = enforce_transitions

    # ─── ProgressStore protocol ───

    async def fetch_progress(self, ref: CloneRef) -> ProgressRecord | None:
        row = self._row(ref)
        if not row:
            return None
        status, progress, blob = row
        if ref.kind == ASSIGNED:
            return ProgressRecord(status=status, progress=progress, analysis_data=blob)
        try:
            data = load_analysis_data(blob) if blob else {}
        except ValueError as e:
            # status still gates editing; payload falls back to empty
            logger.error("analysis_data_unparseable", clone=ref.key, error=str(e))
            data = {}
        return record_from_analysis_data(data, status=status, progress=progress)

    async def save_progress(self, ref: CloneRef, partial: dict[str, Any]) -> ProgressRecord:
        row = self._row(ref)
        current_status = row[0] if row else None
        existing: dict[str, Any] = {}
        if row and row[2]:
            try:
                existing = load_analysis_data(row[2])
            except ValueError as e:
                logger.error("stored_analysis_data_unparseable", clone=ref.key, error=str(e))

        requested = partial.get("status")
        if requested:
            new_status = self._check_status_change(current_status, requested)
        elif current_status in _STARTABLE:
            new_status = Status.BEING_WORKED_ON.value
        else:
            new_status = current_status

        # Merge over the stored payload so review data survives student saves
        data = {
            **existing,
            "answers": partial.get("answers") or existing.get("answers") or {},
            "current_step": partial.get("current_step") or existing.get("current_step") or CLONE_EDITING,
            "last_saved": now_timestamp(),
            "review_comments": (
                partial["review_comments"] if partial.get("review_comments") is not None
                else existing.get("review_comments") or []
            ),
            "submitted_at": partial.get("submitted_at") or existing.get("submitted_at"),
        }
        for key in ("review_score", "last_reviewed", "reviewed_by"):
            if partial.get(key) is not None:
                data[key] = partial[key]

        progress = int(partial.get("progress") or 0)
        self.db.execute(
            """INSERT OR REPLACE INTO clone_progress
               (kind, student_id, clone_id, status, progress, analysis_data, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, datetime('now'))""",
            (ref.kind, ref.student_id, ref.clone_id, new_status, progress, dump_analysis_data(data)),
        )
        if new_status != current_status:
            self._add_history(ref, current_status, new_status, partial.get("actor", "student"))
        self.db.commit()
        return record_from_analysis_data(data, status=new_status, progress=progress)

    # ─── Staff operations ───

    async def assign(self, ref: CloneRef, status: str = Status.BEING_WORKED_ON, actor: str = "director") -> None:
        """Create (or reset the status of) a clone's progress record."""
        row = self._row(ref)
        current_status = row[0] if row else None
        new_status = self._check_status_change(current_status, status) if row else str(status)
        if not is_valid_status(new_status):
            raise InvalidStatusError(new_status)
        self.db.execute(
            """INSERT INTO clone_progress (kind, student_id, clone_id, status)
               VALUES (?, ?, ?, ?)
               ON CONFLICT (kind, student_id, clone_id) DO UPDATE SET
                 status = excluded.status, updated_at = datetime('now')""",
            (ref.kind, ref.student_id, ref.clone_id, new_status),
        )
        if new_status != current_status:
            self._add_history(ref, current_status, new_status, actor)
        self.db.commit()

    async def set_status(self, ref: CloneRef, status: str, actor: str = "director") -> str | None:
        """Change only the status. Returns the previous status."""
        row = self._row(ref)
        if not row:
            raise ProgressNotFoundError(ref.key)
        current_status = row[0]
        new_status = self._check_status_change(current_status, status)
        self.db.execute(
            """UPDATE clone_progress SET status = ?, updated_at = datetime('now')
               WHERE kind = ? AND student_id = ? AND clone_id = ?""",
            (new_status, ref.kind, ref.student_id, ref.clone_id),
        )
        if new_status != current_status:
            self._add_history(ref, current_status, new_status, actor)
        self.db.commit()
        return current_status

    def get_history(self, ref: CloneRef, limit: int = 20) -> list[dict]:
        rows = self.db.execute(
            "SELECT id, from_status, to_status, actor, timestamp FROM status_history "
            "WHERE kind = ? AND student_id = ? AND clone_id = ? ORDER BY id DESC LIMIT ?",
            (ref.kind, ref.student_id, ref.clone_id, limit),
        ).fetchall()
        return [
            {"id": r[0], "from_status": r[1], "to_status": r[2], "actor": r[3], "timestamp": r[4]}
            for r in rows
        ]

    def count_by_status(self, kind: str | None = None) -> dict[str, int]:
        if kind:
            rows = self.db.execute(
                "SELECT status, COUNT(*) FROM clone_progress WHERE kind = ? GROUP BY status", (kind,)
            ).fetchall()
        else:
            rows = self.db.execute(
                "SELECT status, COUNT(*) FROM clone_progress GROUP BY status"
            ).fetchall()
        return {r[0] or "": r[1] for r in rows}

    def list_refs(self, status: str | None = None) -> list[CloneRef]:
        if status:
            rows = self.db.execute(
                "SELECT student_id, clone_id, kind FROM clone_progress WHERE status = ? ORDER BY updated_at",
                (status,),
            ).fetchall()
        else:
            rows = self.db.execute(
                "SELECT student_id, clone_id, kind FROM clone_progress ORDER BY updated_at"
            ).fetchall()
        return [CloneRef(student_id=r[0], clone_id=r[1], kind=r[2]) for r in rows]

    def reset(self) -> None:
        self.db.execute("DELETE FROM clone_progress")
        self.db.execute("DELETE FROM status_history")
        self.db.commit()

    def close(self) -> None:
        self.db.close()

    # ─── Private ───

    def _row(self, ref: CloneRef) -> tuple | None:
        return self.db.execute(
            "SELECT status, progress, analysis_data FROM clone_progress "
            "WHERE kind = ? AND student_id = ? AND clone_id = ?",
            (ref.kind, ref.student_id, ref.clone_id),
        ).fetchone()

    def _check_status_change(self, current: str | None, requested: str) -> str:
        if not is_valid_status(requested):
            logger.warning("invalid_status_rejected", status=requested)
            raise InvalidStatusError(requested)
        if self.enforce_transitions and requested != current:
            require_legal_transition(current, requested)
        return str(requested)

    def _add_history(self, ref: CloneRef, from_status: str | None, to_status: str, actor: str) -> None:
        self.db.execute(
            "INSERT INTO status_history (kind, student_id, clone_id, from_status, to_status, actor) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (ref.kind, ref.student_id, ref.clone_id, from_status, to_status, actor),
        )
