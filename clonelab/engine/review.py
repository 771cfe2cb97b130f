"""Staff side of the review pipeline: instructor decisions and director status changes.

Unlike the student workflow, every status change made here is checked
against the transition graph before it is persisted.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from clonelab.engine.policy import is_director_review_ready, is_review_ready
from clonelab.engine.transitions import require_legal_transition
from clonelab.errors import InvalidStatusError, ProgressNotFoundError
from clonelab.logging_utils import get_logger
from clonelab.statuses import REVIEW_ACTIONS, Status, is_valid_status
from clonelab.store.codec import decode_record, now_timestamp

if TYPE_CHECKING:
    from clonelab.store.state import StateManager
    from clonelab.types import CloneRef, ReviewComment

logger = get_logger(__name__)


class ReviewDesk:
    def __init__(self, store: StateManager, reviewer: str = "instructor"):
        self.store = store
        self.reviewer = reviewer

    async def submit_review(
        self,
        ref: CloneRef,
        decision: str,
        comments: list[ReviewComment] | None = None,
        score: int | None = None,
    ) -> Status:
        """Record an instructor decision ("approved" or "rejected") with per-question feedback."""
        if decision not in REVIEW_ACTIONS:
            raise ValueError(f'Unknown review decision "{decision}". Use: {", ".join(REVIEW_ACTIONS)}')
        record = await self.store.fetch_progress(ref)
        if record is None:
            raise ProgressNotFoundError(ref.key)
        if not is_review_ready(record.status) and not is_director_review_ready(record.status):
            logger.warning("review_of_unsubmitted_clone", clone=ref.key, status=record.status)

        new_status = REVIEW_ACTIONS[decision]
        require_legal_transition(record.status, new_status)

        record = decode_record(record)
        partial = {
            "progress": record.progress,
            "answers": record.answers,
            "current_step": record.current_step,
            "status": new_status.value,
            "review_comments": [c.to_dict() for c in (comments if comments is not None else record.review_comments)],
            "review_score": score,
            "last_reviewed": now_timestamp(),
            "reviewed_by": self.reviewer,
            "actor": self.reviewer,
        }
        await self.store.save_progress(ref, partial)
        logger.info("review_recorded", clone=ref.key, decision=decision, status=new_status.value)
        return new_status

    async def change_status(self, ref: CloneRef, status: str) -> str | None:
        """Director's manual status change. Returns the previous status."""
        if not is_valid_status(status) or not status:
            raise InvalidStatusError(status)
        previous = await self.store.set_status(ref, status, actor=self.reviewer)
        logger.info("status_changed", clone=ref.key, previous=previous, status=status)
        return previous

    def review_stats(self) -> dict[str, int]:
        counts = self.store.count_by_status()
        return {
            "pending": counts.get(Status.COMPLETED_WAITING_REVIEW, 0),
            "resubmitted": counts.get(Status.CORRECTED_WAITING_REVIEW, 0),
            "teacher_reviewed": counts.get(Status.REVIEWED_BY_TEACHER, 0),
            "approved": counts.get(Status.REVIEWED_CORRECT, 0),
            "rejected": counts.get(Status.NEEDS_REANALYSIS, 0),
            "total": sum(counts.values()),
        }
