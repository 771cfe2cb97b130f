"""Contracts for the collaborators a SubmissionWorkflow talks to."""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from clonelab.types import CloneRef, HelpTopic, ProgressRecord, Question


class QuestionBank(Protocol):
    async def fetch_questions(self) -> list[Question]: ...

    async def fetch_help_topics(self) -> list[HelpTopic]: ...


class ProgressStore(Protocol):
    """Per (student, clone) progress persistence. Last write wins."""

    async def fetch_progress(self, ref: CloneRef) -> ProgressRecord | None: ...

    async def save_progress(self, ref: CloneRef, partial: dict[str, Any]) -> ProgressRecord: ...


class NotificationSink(Protocol):
    """UI callbacks. Fire-and-forget; return values are ignored."""

    def on_dirty_change(self, dirty: bool) -> None: ...

    def on_progress_change(self, progress: int) -> None: ...

    def on_save_status(self, status: str) -> None: ...


class NullSink:
    def on_dirty_change(self, dirty: bool) -> None:
        pass

    def on_progress_change(self, progress: int) -> None:
        pass

    def on_save_status(self, status: str) -> None:
        pass
