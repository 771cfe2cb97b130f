"""Student-side analysis workflow, the controller behind one clone's analysis form.

Holds an in-memory working copy (answers, current step, dirty flag) for a
single (student, clone) session and synchronizes it with a ProgressStore.

Guards:
  1. Dirty:     load_progress never overwrites unsaved edits.
  2. In-flight: one save/submit at a time; overlapping calls fail fast.
  3. Identity:  responses that arrive after switch_clone() are discarded.
"""
from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any

from clonelab.engine import progress as calc
from clonelab.engine.policy import can_edit, is_read_only, should_show_feedback
from clonelab.engine.transitions import require_legal_transition
from clonelab.logging_utils import get_logger
from clonelab.protocols import NullSink
from clonelab.statuses import Status, metadata_for
from clonelab.store.codec import decode_record, now_timestamp
from clonelab.types import CLONE_EDITING, STEPS, ProgressRecord

if TYPE_CHECKING:
    from collections.abc import Callable

    from clonelab.protocols import NotificationSink, ProgressStore, QuestionBank
    from clonelab.statuses import StatusMetadata
    from clonelab.types import CloneRef, HelpTopic, Question, ReviewComment

logger = get_logger(__name__)

SAVE_LABELS = {
    "saving": "Saving...",
    "saved": "Saved!",
    "error": "Error",
}


def next_review_status(status: str | None) -> Status:
    """Status a submission moves to. Resubmissions after reanalysis are 'corrected'."""
    if status == Status.NEEDS_REANALYSIS:
        return Status.CORRECTED_WAITING_REVIEW
    return Status.COMPLETED_WAITING_REVIEW


# ─── Result type ───

class WorkflowResult:
    def __init__(self, success: bool, message: str, new_status: str | None = None):
        self.success = success
        self.message = message
        self.new_status = new_status

    def __bool__(self) -> bool:
        return self.success

    def __repr__(self) -> str:
        return f"WorkflowResult(success={self.success!r}, message={self.message!r})"

    def to_dict(self) -> dict:
        return {"success": self.success, "message": self.message, "new_status": self.new_status}


class _Flight:
    def __init__(self, action: str):
        self.action = action


# ─── Workflow ───

class SubmissionWorkflow:
    def __init__(
        self,
        clone: CloneRef,
        question_bank: QuestionBank,
        store: ProgressStore,
        sink: NotificationSink | None = None,
    ):
        self.clone = clone
        self.question_bank = question_bank
        self.store = store
        self.sink = sink or NullSink()
        self.questions: list[Question] = []
        self.help_topics: dict[str, HelpTopic] = {}
        self._reset_session()

    def _reset_session(self) -> None:
        self.status: str | None = None
        self.answers: dict[str, Any] = {}
        self.current_step = CLONE_EDITING
        self.current_group: str | None = None
        self.review_comments: list[ReviewComment] = []
        self.last_saved: str | None = None
        self.submitted_at: str | None = None
        self.dirty = False
        self.save_status = "idle"
        self._revision = 0
        self._flight: _Flight | None = None
        self._seed_sequence_ranges(self.answers)
        self._saved_answers: dict[str, Any] = copy.deepcopy(self.answers)

    # ─── Loading ───

    async def load_questions(self) -> bool:
        try:
            questions = await self.question_bank.fetch_questions()
        except Exception as e:
            logger.error("load_questions_failed", error=str(e))
            return False
        self.questions = list(questions)
        self._seed_sequence_ranges(self.answers)
        self._seed_sequence_ranges(self._saved_answers)
        return True

    async def load_help_topics(self) -> bool:
        try:
            topics = await self.question_bank.fetch_help_topics()
        except Exception as e:
            logger.error("load_help_topics_failed", error=str(e))
            return False
        self.help_topics = {t.question_id: t for t in topics}
        return True

    def help_topic_for(self, question_id: str) -> HelpTopic | None:
        return self.help_topics.get(question_id)

    async def load_progress(self) -> bool:
        if self.dirty:
            logger.info("load_progress_skipped", clone=self.clone.key, reason="unsaved_changes")
            return False

        key = self.clone.key
        try:
            record = await self.store.fetch_progress(self.clone)
        except Exception as e:
            logger.error("load_progress_failed", clone=key, error=str(e))
            return False

        if self.clone.key != key:
            logger.info("stale_response_discarded", clone=key, operation="load_progress")
            return False
        if self.dirty:
            # edits landed while the fetch was pending
            logger.info("load_progress_skipped", clone=key, reason="unsaved_changes")
            return False

        self._apply_record(record or ProgressRecord())
        return True

    async def refresh_status(self) -> bool:
        """Re-read only the status. Safe while there are unsaved edits."""
        key = self.clone.key
        try:
            record = await self.store.fetch_progress(self.clone)
        except Exception as e:
            logger.error("refresh_status_failed", clone=key, error=str(e))
            return False
        if self.clone.key != key:
            logger.info("stale_response_discarded", clone=key, operation="refresh_status")
            return False
        if record and record.status:
            self.status = record.status
        return True

    def switch_clone(self, clone: CloneRef) -> None:
        """Point this session at another clone. Pending responses for the old one are dropped."""
        if clone.key == self.clone.key:
            return
        self.clone = clone
        self._reset_session()

    def _apply_record(self, record: ProgressRecord) -> None:
        self.status = record.status
        try:
            record = decode_record(record)
        except ValueError as e:
            logger.error("analysis_data_unparseable", clone=self.clone.key, error=str(e))
            record = ProgressRecord(status=record.status, progress=record.progress)

        self.review_comments = list(record.review_comments)
        answers = copy.deepcopy(record.answers)
        self._seed_sequence_ranges(answers)
        self.answers = answers
        self._saved_answers = copy.deepcopy(answers)
        if record.current_step:
            self.current_step = record.current_step
        if record.last_saved:
            self.last_saved = record.last_saved
        self.submitted_at = record.submitted_at

    def _seed_sequence_ranges(self, answers: dict[str, Any]) -> None:
        for q in self.questions:
            if q.type == "sequence_range" and not answers.get(q.id):
                answers[q.id] = {"value1": "", "value2": ""}

    # ─── Editing ───

    def set_answer(self, question_id: str, value: Any) -> bool:
        if is_read_only(self.status):
            logger.debug("answer_rejected_read_only", clone=self.clone.key, status=self.status)
            return False
        self.answers[question_id] = value
        self._revision += 1
        self.dirty = True
        self.sink.on_dirty_change(True)
        return True

    async def save(self) -> WorkflowResult:
        flight = self._begin("save")
        if flight is None:
            return self._busy()
        try:
            return await self._persist("save", {})
        finally:
            self._end(flight)

    async def submit_for_review(self, *, enforce_transitions: bool = False) -> WorkflowResult:
        """Save pending edits, then move the clone into the review queue.

        With ``enforce_transitions`` the move is checked against the
        transition graph first and IllegalTransitionError is raised.
        """
        if not can_edit(self.status):
            return WorkflowResult(
                False,
                f'Cannot submit: status "{self.status}" does not allow student edits.',
            )
        if self._flight is not None:
            return self._busy()

        if self.dirty:
            saved = await self.save()
            if not saved:
                return WorkflowResult(False, f"Submission aborted: {saved.message}")

        new_status = next_review_status(self.status)
        if enforce_transitions:
            require_legal_transition(self.status, new_status)

        flight = self._begin("submit")
        if flight is None:
            return self._busy()
        submitted_at = now_timestamp()

        def apply() -> None:
            self.status = new_status
            self.submitted_at = submitted_at

        try:
            result = await self._persist(
                "submit",
                {"status": new_status.value, "submitted_at": submitted_at},
                on_success=apply,
            )
        finally:
            self._end(flight)
        if result:
            logger.info("submitted_for_review", clone=self.clone.key, status=new_status.value)
            return WorkflowResult(True, f"Submitted for review: {new_status.value}", new_status.value)
        return result

    async def _persist(
        self,
        action: str,
        extra: dict[str, Any],
        on_success: Callable[[], None] | None = None,
    ) -> WorkflowResult:
        key = self.clone.key
        revision = self._revision
        progress = self.overall_progress()
        partial = {
            "progress": progress,
            "answers": copy.deepcopy(self.answers),
            "current_step": self.current_step,
            "review_comments": [c.to_dict() for c in self.review_comments],
            **extra,
        }
        self._set_save_status("saving")
        try:
            saved = await self.store.save_progress(self.clone, partial)
        except Exception as e:
            logger.error(f"{action}_failed", clone=key, error=str(e))
            if self.clone.key == key:
                self._set_save_status("error")
            return WorkflowResult(False, f"{action.capitalize()} failed: {e}")

        if self.clone.key != key:
            logger.info("stale_response_discarded", clone=key, operation=action)
            return WorkflowResult(True, f"{action.capitalize()} stored for {key}; session has moved on.")

        if saved is not None and saved.status:
            # the store may have started the clone (Unassigned -> BeingWorkedOn)
            self.status = saved.status
        if on_success:
            on_success()
        self.last_saved = now_timestamp()
        self._saved_answers = copy.deepcopy(partial["answers"])
        if self._revision == revision:
            self.dirty = False
            self.sink.on_dirty_change(False)
        self._set_save_status("saved")
        self.sink.on_progress_change(progress)
        return WorkflowResult(True, "Progress saved.", self.status)

    def _begin(self, action: str) -> _Flight | None:
        if self._flight is not None:
            return None
        self._flight = _Flight(action)
        return self._flight

    def _end(self, flight: _Flight) -> None:
        if self._flight is flight:
            self._flight = None

    def _busy(self) -> WorkflowResult:
        action = self._flight.action if self._flight else "another operation"
        return WorkflowResult(False, f"Cannot start: {action} is already in progress.")

    def _set_save_status(self, status: str) -> None:
        self.save_status = status
        self.sink.on_save_status(status)

    # ─── Derived reads ───

    def overall_progress(self) -> int:
        return calc.overall_progress(self.questions, self.answers)

    def step_progress(self, step: str) -> int:
        return calc.step_progress(step, self.questions, self.answers)

    def group_progress(self, step: str, group: str) -> int:
        return calc.group_progress(step, group, self.questions, self.answers)

    def question_comments(self, question_id: str) -> list[ReviewComment]:
        return [
            c for c in self.review_comments
            if c.question_id == question_id and c.feedback_visible is True
        ]

    def is_question_correct(self, question_id: str) -> bool:
        return any(c.question_id == question_id and c.is_correct is True for c in self.review_comments)

    def is_answered(self, question: Question) -> bool:
        return calc.is_answered(question, self.answers)

    @property
    def metadata(self) -> StatusMetadata:
        return metadata_for(self.status)

    def can_edit(self) -> bool:
        return can_edit(self.status)

    def is_read_only(self) -> bool:
        return is_read_only(self.status)

    def should_show_feedback(self) -> bool:
        return should_show_feedback(self.status)

    def unsaved_answer_count(self) -> int:
        """Answers that differ from what was last loaded or saved."""
        keys = self.answers.keys() | self._saved_answers.keys()
        return sum(1 for k in keys if self.answers.get(k) != self._saved_answers.get(k))

    def save_label(self) -> str:
        if self.save_status in SAVE_LABELS:
            return SAVE_LABELS[self.save_status]
        return "Save Progress" if self.dirty else "All Saved"

    # ─── Navigation ───

    def groups_for_step(self, step: str) -> list[calc.QuestionGroup]:
        return calc.groups_for_step(step, self.questions, self.answers)

    def current_step_questions(self) -> list[Question]:
        questions = calc.visible_questions(self.questions, self.answers, self.current_step, self.current_group)
        return calc.sort_questions(questions)

    def change_step(self, step: str) -> None:
        if step not in STEPS:
            raise ValueError(f'Unknown step "{step}". Steps: {", ".join(STEPS)}')
        self.current_step = step
        groups = self.groups_for_step(step)
        self.current_group = groups[0].name if groups else None

    def toggle_group(self, group: str) -> None:
        self.current_group = None if self.current_group == group else group

    def group_sequence(self) -> list[tuple[str, str | None]]:
        """Every (step, group) position in order. Steps without groups appear once with None."""
        sequence: list[tuple[str, str | None]] = []
        for step in STEPS:
            groups = self.groups_for_step(step)
            if groups:
                sequence.extend((step, g.name) for g in groups)
            else:
                sequence.append((step, None))
        return sequence

    def navigate_group(self, direction: str) -> bool:
        sequence = self.group_sequence()
        try:
            idx = sequence.index((self.current_step, self.current_group))
        except ValueError:
            return False
        new_idx = min(idx + 1, len(sequence) - 1) if direction == "next" else max(idx - 1, 0)
        if new_idx == idx:
            return False
        self.current_step, self.current_group = sequence[new_idx]
        return True

    # ─── Summary ───

    def get_status(self) -> dict[str, Any]:
        meta = self.metadata
        allowed: list[str] = []
        if not self.is_read_only():
            allowed.extend(["set_answer", "save"])
        if self.can_edit():
            allowed.append("submit")

        result: dict[str, Any] = {
            "clone": self.clone.key,
            "status": self.status,
            "title": meta.title,
            "message": meta.message,
            "icon": meta.icon.value,
            "can_edit": self.can_edit(),
            "read_only": self.is_read_only(),
            "show_feedback": self.should_show_feedback(),
            "current_step": self.current_step,
            "progress": self.overall_progress(),
            "steps": {step: self.step_progress(step) for step in STEPS},
            "dirty": self.dirty,
            "last_saved": self.last_saved,
            "submitted_at": self.submitted_at,
            "allowed_actions": allowed,
        }
        parts = [f"{self.clone.key} > {meta.title}", f"{result['progress']}% complete"]
        if self.dirty:
            parts.append("unsaved changes")
        if self.last_saved:
            parts.append(f"last saved {self.last_saved}")
        result["summary"] = ", ".join(parts)
        return result
