"""Wiring shared by the CLI commands and the MCP server."""
from __future__ import annotations

from typing import TYPE_CHECKING

from clonelab.engine.workflow import SubmissionWorkflow
from clonelab.statuses import Status
from clonelab.store.questions import YamlQuestionBank
from clonelab.store.state import StateManager
from clonelab.types import ASSIGNED, PRACTICE, CloneRef

if TYPE_CHECKING:
    from clonelab.protocols import NotificationSink
    from clonelab.settings import Settings


def make_ref(student_id: str, clone_id: str, practice: bool = False) -> CloneRef:
    return CloneRef(student_id=student_id, clone_id=clone_id, kind=PRACTICE if practice else ASSIGNED)


def parse_status(raw: str) -> str:
    """Accept a status by value ("Submitted to NCBI") or by name (SUBMITTED_TO_NCBI)."""
    key = raw.strip().upper().replace("-", "_").replace(" ", "_")
    if key in Status.__members__:
        return Status[key].value
    return raw


def open_store(settings: Settings) -> StateManager:
    settings.root.mkdir(parents=True, exist_ok=True)
    return StateManager(settings.database_path, enforce_transitions=settings.enforce_transitions)


async def open_workflow(
    ref: CloneRef,
    settings: Settings,
    store: StateManager,
    sink: NotificationSink | None = None,
) -> SubmissionWorkflow:
    """Build a workflow for one clone with questions, help topics and saved progress loaded."""
    workflow = SubmissionWorkflow(ref, YamlQuestionBank(settings.questions_path), store, sink)
    await workflow.load_questions()
    await workflow.load_help_topics()
    await workflow.load_progress()
    return workflow
