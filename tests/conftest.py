"""Shared fixtures for clonelab scenario tests."""
from __future__ import annotations

import asyncio
import shutil
import tempfile
from pathlib import Path
from typing import Any

import pytest
import structlog

from clonelab.engine.review import ReviewDesk
from clonelab.engine.workflow import SubmissionWorkflow, WorkflowResult
from clonelab.store.codec import dump_analysis_data
from clonelab.store.questions import YamlQuestionBank
from clonelab.store.state import StateManager
from clonelab.types import ASSIGNED, CloneRef, ProgressRecord

BANK_FILE = Path(__file__).parent / ".clonelab" / "questions.yaml"

# Answers that complete every countable question in the test bank
FULL_ANSWERS: dict[str, Any] = {
    "ce-quality": "yes",
    "ce-range": {"value1": "12", "value2": "418"},
    "ce-sequence": "ATGGCGTACGTTAGC",
    "bl-results": {"accession_0": "NM_001101", "organism_0": "Homo sapiens"},
    "bl-identity": 98,
    "as-family": "kinase",
    "rv-notes": "Trimming the vector changes the top hit.",
}


class RecordingSink:
    """NotificationSink that remembers every callback."""

    def __init__(self):
        self.dirty: list[bool] = []
        self.progress: list[int] = []
        self.save_statuses: list[str] = []

    def on_dirty_change(self, dirty: bool) -> None:
        self.dirty.append(dirty)

    def on_progress_change(self, progress: int) -> None:
        self.progress.append(progress)

    def on_save_status(self, status: str) -> None:
        self.save_statuses.append(status)


class FlakyStore:
    """Wraps a store and raises ConnectionError for the next N fetches/saves."""

    def __init__(self, inner: StateManager):
        self.inner = inner
        self.fail_fetches = 0
        self.fail_saves = 0

    async def fetch_progress(self, ref: CloneRef) -> ProgressRecord | None:
        if self.fail_fetches:
            self.fail_fetches -= 1
            raise ConnectionError("progress service unreachable")
        return await self.inner.fetch_progress(ref)

    async def save_progress(self, ref: CloneRef, partial: dict) -> ProgressRecord:
        if self.fail_saves:
            self.fail_saves -= 1
            raise ConnectionError("progress service unreachable")
        return await self.inner.save_progress(ref, partial)


class GatedStore:
    """Wraps a store and holds every call until the gate is opened.

    Lets a test interleave work while a fetch or save is in flight.
    """

    def __init__(self, inner: StateManager):
        self.inner = inner
        self.gate = asyncio.Event()
        self.gate.set()
        self.waiting = 0

    def close_gate(self) -> None:
        self.gate.clear()

    def open_gate(self) -> None:
        self.gate.set()

    async def _wait(self) -> None:
        self.waiting += 1
        try:
            await self.gate.wait()
        finally:
            self.waiting -= 1

    async def fetch_progress(self, ref: CloneRef) -> ProgressRecord | None:
        await self._wait()
        return await self.inner.fetch_progress(ref)

    async def save_progress(self, ref: CloneRef, partial: dict) -> ProgressRecord:
        await self._wait()
        return await self.inner.save_progress(ref, partial)


class WorkflowHarness:
    """Test harness for driving one clone through SubmissionWorkflow.

    Provides a clean temp .clonelab directory per test with the test
    question bank, a SQLite store, a recording sink, and a ReviewDesk for
    the staff side. Async methods delegate to the workflow public API.
    """

    def __init__(
        self,
        student_id: str = "stu-001",
        clone_id: str = "clone-A7",
        kind: str = ASSIGNED,
        *,
        enforce_transitions: bool = True,
        wrapper: type | None = None,
    ):
        self.tmp = Path(tempfile.mkdtemp())
        self.root = self.tmp / ".clonelab"
        self.root.mkdir()
        shutil.copy2(BANK_FILE, self.root / "questions.yaml")

        self.state = StateManager(self.root / "state.db", enforce_transitions=enforce_transitions)
        self.store = wrapper(self.state) if wrapper else self.state
        self.bank = YamlQuestionBank(self.root / "questions.yaml")
        self.sink = RecordingSink()
        self.ref = CloneRef(student_id=student_id, clone_id=clone_id, kind=kind)
        self.workflow = SubmissionWorkflow(self.ref, self.bank, self.store, self.sink)
        self.desk = ReviewDesk(self.state)

    async def open(self) -> SubmissionWorkflow:
        """Load questions, help topics and saved progress, as a UI does on mount."""
        await self.workflow.load_questions()
        await self.workflow.load_help_topics()
        await self.workflow.load_progress()
        return self.workflow

    async def reopen(self) -> SubmissionWorkflow:
        """Fresh workflow over the same database, simulating a new browser session."""
        self.sink = RecordingSink()
        self.workflow = SubmissionWorkflow(self.ref, self.bank, self.store, self.sink)
        return await self.open()

    def seed(
        self,
        status: str | None,
        answers: dict | None = None,
        review_comments: list[dict] | None = None,
        *,
        blob: str | None = None,
        ref: CloneRef | None = None,
    ) -> None:
        """Write a progress row directly, bypassing transition checks."""
        ref = ref or self.ref
        if blob is None:
            blob = dump_analysis_data({
                "answers": answers or {},
                "current_step": "clone-editing",
                "review_comments": review_comments or [],
            })
        self.state.db.execute(
            "INSERT OR REPLACE INTO clone_progress (kind, student_id, clone_id, status, progress, analysis_data) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            (ref.kind, ref.student_id, ref.clone_id, status, 0, blob),
        )
        self.state.db.commit()

    @property
    def status(self) -> str | None:
        return self.workflow.status

    def stored_status(self, ref: CloneRef | None = None) -> str | None:
        ref = ref or self.ref
        row = self.state.db.execute(
            "SELECT status FROM clone_progress WHERE kind = ? AND student_id = ? AND clone_id = ?",
            (ref.kind, ref.student_id, ref.clone_id),
        ).fetchone()
        return row[0] if row else None

    def answer_all(self) -> None:
        for qid, value in FULL_ANSWERS.items():
            self.workflow.set_answer(qid, value)

    async def save(self) -> WorkflowResult:
        return await self.workflow.save()

    async def submit(self, **kwargs) -> WorkflowResult:
        return await self.workflow.submit_for_review(**kwargs)

    def get_history(self, limit: int = 50) -> list[dict]:
        return self.state.get_history(self.ref, limit)

    def close(self):
        self.state.close()
        shutil.rmtree(self.tmp, ignore_errors=True)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


@pytest.fixture
def harness_factory():
    """Factory fixture that creates WorkflowHarness instances and cleans up after test."""
    created: list[WorkflowHarness] = []

    def _make(*args, **kwargs) -> WorkflowHarness:
        h = WorkflowHarness(*args, **kwargs)
        created.append(h)
        return h

    yield _make

    for h in created:
        h.close()


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI tests configure structlog globally; restore defaults afterwards."""
    yield
    structlog.reset_defaults()
