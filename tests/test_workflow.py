"""Scenario tests for the student analysis workflow.

Each scenario drives one (student, clone) session through
SubmissionWorkflow against a real SQLite store and the test question
bank (tests/.clonelab/questions.yaml):

  clone-editing        Quality: ce-header, ce-quality, ce-reason (if ce-quality == "no")
                       Trimming: ce-range (sequence_range), ce-sequence
  blast                bl-results, bl-identity, bl-compare (display only)
  analysis-submission  as-family, as-confirm (if bl-identity == 100)
  review               rv-notes

Dimensions tested:
  - Status flow (fresh -> working -> waiting review -> corrected)
  - Permission gating (read-only statuses reject edits and submission)
  - Dirty guard, in-flight guard, identity guard
  - Failure handling (load degrades, save/submit surfaces errors)
  - Derived reads (progress, feedback, navigation)
"""
from __future__ import annotations

import asyncio

import pytest
from structlog.testing import capture_logs

from conftest import FULL_ANSWERS, FlakyStore, GatedStore
from clonelab.errors import IllegalTransitionError
from clonelab.statuses import Status
from clonelab.store.questions import YamlQuestionBank
from clonelab.types import ANALYSIS_SUBMISSION, BLAST, CLONE_EDITING, PRACTICE, REVIEW, CloneRef

pytestmark = pytest.mark.asyncio

EMPTY_RANGE = {"value1": "", "value2": ""}

FEEDBACK = [
    {"question_id": "ce-quality", "feedback": "Look again at the trace", "is_correct": False, "feedback_visible": True},
    {"question_id": "ce-quality", "feedback": "internal note", "feedback_visible": False},
    {"question_id": "ce-quality", "feedback": "Better now", "is_correct": True, "feedback_visible": True},
    {"question_id": "bl-identity", "feedback": "", "is_correct": False, "feedback_visible": True},
]


# ═══════════════════════════════════════════════════════
# Scenario 1: first analysis, fresh clone to review queue
# ═══════════════════════════════════════════════════════

async def test_s1_happy_path(harness_factory):
    """A student analyzes a newly assigned clone and submits it."""
    h = harness_factory()
    wf = await h.open()

    # Nothing stored yet: editable, nothing answered
    assert wf.status is None
    assert wf.can_edit()
    assert wf.overall_progress() == 0
    assert wf.save_label() == "All Saved"
    assert wf.get_status()["allowed_actions"] == ["set_answer", "save", "submit"]

    # Student fills in every question
    h.answer_all()
    assert wf.dirty
    assert h.sink.dirty[0] is True
    assert wf.save_label() == "Save Progress"
    assert wf.overall_progress() == 100
    assert wf.unsaved_answer_count() == len(FULL_ANSWERS)

    # Save: the store starts the clone
    r = await h.save()
    assert r
    assert not wf.dirty
    assert wf.status == Status.BEING_WORKED_ON
    assert wf.last_saved
    assert wf.save_label() == "Saved!"
    assert h.sink.save_statuses == ["saving", "saved"]
    assert h.sink.progress == [100]
    assert h.sink.dirty[-1] is False
    assert wf.unsaved_answer_count() == 0

    # Submit for review
    r = await h.submit()
    assert r
    assert r.new_status == Status.COMPLETED_WAITING_REVIEW
    assert wf.status == Status.COMPLETED_WAITING_REVIEW
    assert wf.submitted_at
    assert h.stored_status() == Status.COMPLETED_WAITING_REVIEW

    # Now locked
    assert wf.is_read_only()
    assert not wf.can_edit()
    assert wf.set_answer("rv-notes", "one more thought") is False
    assert wf.get_status()["allowed_actions"] == []
    assert wf.metadata.title == "Waiting for Review"

    # Audit trail: newest first
    history = h.get_history()
    assert [(x["from_status"], x["to_status"]) for x in history] == [
        (Status.BEING_WORKED_ON, Status.COMPLETED_WAITING_REVIEW),
        (None, Status.BEING_WORKED_ON),
    ]


async def test_s1_submit_with_unsaved_edits_saves_first(harness_factory):
    """Submitting straight after editing saves the answers before moving status."""
    h = harness_factory()
    h.seed(Status.BEING_WORKED_ON)
    wf = await h.open()

    h.answer_all()
    r = await h.submit()
    assert r
    assert not wf.dirty
    assert h.sink.save_statuses == ["saving", "saved", "saving", "saved"]

    wf2 = await h.reopen()
    assert wf2.answers == FULL_ANSWERS
    assert wf2.status == Status.COMPLETED_WAITING_REVIEW


async def test_s1_submit_without_any_status(harness_factory):
    """A clone with no status yet may go straight to the review queue."""
    h = harness_factory()
    await h.open()
    r = await h.submit()
    assert r
    assert h.stored_status() == Status.COMPLETED_WAITING_REVIEW


async def test_s1_round_trip(harness_factory):
    """Closing the browser and coming back restores answers and step."""
    h = harness_factory()
    wf = await h.open()
    h.answer_all()
    wf.change_step(BLAST)
    assert await h.save()

    wf2 = await h.reopen()
    assert wf2 is not wf
    assert wf2.answers == FULL_ANSWERS
    assert wf2.current_step == BLAST
    assert wf2.status == Status.BEING_WORKED_ON
    assert not wf2.dirty


async def test_s1_practice_clone(harness_factory):
    """Practice clones start Available and follow the same flow."""
    h = harness_factory(kind=PRACTICE)
    h.seed(Status.AVAILABLE)
    wf = await h.open()
    assert wf.metadata.title == "Available"
    assert wf.can_edit()

    wf.set_answer("ce-quality", "yes")
    assert await h.save()
    assert wf.status == Status.BEING_WORKED_ON

    assert await h.submit()
    wf2 = await h.reopen()
    assert wf2.answers["ce-quality"] == "yes"
    assert wf2.status == Status.COMPLETED_WAITING_REVIEW


# ═══════════════════════════════════════════════════════
# Scenario 2: instructor sends it back
# ═══════════════════════════════════════════════════════

async def test_s2_resubmission_after_reanalysis(harness_factory):
    """Reviewed, needs to be reanalyzed -> student corrects -> Corrected, waiting review."""
    h = harness_factory()
    h.seed(Status.NEEDS_REANALYSIS, dict(FULL_ANSWERS), FEEDBACK)
    wf = await h.open()

    assert wf.can_edit()
    assert wf.should_show_feedback()
    assert wf.metadata.title == "Needs Reanalysis"

    wf.set_answer("ce-quality", "no")
    wf.set_answer("ce-reason", "Noisy peaks after base 600")
    r = await h.submit()
    assert r
    assert r.new_status == Status.CORRECTED_WAITING_REVIEW
    assert h.stored_status() == Status.CORRECTED_WAITING_REVIEW

    # The save before submission did not move the status on its own
    assert [x["to_status"] for x in h.get_history()] == [Status.CORRECTED_WAITING_REVIEW]

    # Feedback survives the student's saves
    wf2 = await h.reopen()
    assert [c.feedback for c in wf2.question_comments("ce-quality")] == ["Look again at the trace", "Better now"]


async def test_s2_feedback_reads(harness_factory):
    h = harness_factory()
    h.seed(Status.NEEDS_REANALYSIS, {}, FEEDBACK)
    wf = await h.open()

    # Only visible comments, in stored order
    comments = wf.question_comments("ce-quality")
    assert [c.feedback for c in comments] == ["Look again at the trace", "Better now"]

    # Any correct comment marks the question correct
    assert wf.is_question_correct("ce-quality")
    assert not wf.is_question_correct("bl-identity")
    assert not wf.is_question_correct("rv-notes")
    assert wf.question_comments("rv-notes") == []


async def test_s2_needs_corrections_resubmission(harness_factory):
    """Needs corrections -> student edits -> back to work -> Completed, waiting review."""
    h = harness_factory()
    h.seed(Status.NEEDS_CORRECTIONS, dict(FULL_ANSWERS), FEEDBACK)
    wf = await h.open()
    assert wf.can_edit()
    assert wf.should_show_feedback()

    wf.set_answer("ce-quality", "no")
    wf.set_answer("ce-reason", "Mixed trace past base 550")
    r = await h.submit()
    assert r
    assert r.new_status == Status.COMPLETED_WAITING_REVIEW
    assert wf.status == Status.COMPLETED_WAITING_REVIEW
    assert h.stored_status() == Status.COMPLETED_WAITING_REVIEW

    # the save reopened the clone, then submission queued it
    history = list(reversed(h.get_history()))
    assert [(x["from_status"], x["to_status"]) for x in history] == [
        (Status.NEEDS_CORRECTIONS, Status.BEING_WORKED_ON),
        (Status.BEING_WORKED_ON, Status.COMPLETED_WAITING_REVIEW),
    ]


async def test_s2_needs_corrections_without_edits_is_checked_by_store(harness_factory):
    """Nothing to save, so the direct move to Completed is refused and nothing changes."""
    h = harness_factory()
    h.seed(Status.NEEDS_CORRECTIONS, dict(FULL_ANSWERS))
    wf = await h.open()

    r = await h.submit()
    assert not r
    assert "Cannot change status" in r.message
    assert wf.status == Status.NEEDS_CORRECTIONS
    assert h.stored_status() == Status.NEEDS_CORRECTIONS


async def test_s2_enforced_submission_raises_before_persisting(harness_factory):
    h = harness_factory()
    h.seed(Status.NEEDS_CORRECTIONS, dict(FULL_ANSWERS))
    await h.open()

    with pytest.raises(IllegalTransitionError) as exc:
        await h.submit(enforce_transitions=True)
    assert exc.value.source == Status.NEEDS_CORRECTIONS
    assert exc.value.target == Status.COMPLETED_WAITING_REVIEW
    assert h.sink.save_statuses == []


async def test_s2_unenforced_store_accepts_reference_behavior(harness_factory):
    h = harness_factory(enforce_transitions=False)
    h.seed(Status.REVIEWED_CORRECT, dict(FULL_ANSWERS))
    wf = await h.open()

    # Reviewed and Correct stays student-editable
    assert wf.can_edit()
    assert not wf.is_read_only()
    assert await h.submit()
    assert h.stored_status() == Status.COMPLETED_WAITING_REVIEW


# ═══════════════════════════════════════════════════════
# Scenario 3: permission gating
# ═══════════════════════════════════════════════════════

@pytest.mark.parametrize("status", [
    Status.COMPLETED_WAITING_REVIEW,
    Status.CORRECTED_WAITING_REVIEW,
    Status.REVIEWED_BY_TEACHER,
    Status.TO_BE_SUBMITTED_NCBI,
    Status.SUBMITTED_TO_NCBI,
    Status.UNREADABLE,
])
async def test_s3_read_only_blocks_edits(harness_factory, status):
    h = harness_factory()
    h.seed(status, {"ce-quality": "yes"})
    wf = await h.open()

    assert wf.set_answer("ce-quality", "no") is False
    assert wf.answers["ce-quality"] == "yes"
    assert not wf.dirty
    assert h.sink.dirty == []

    r = await h.submit()
    assert not r
    assert "does not allow student edits" in r.message
    assert h.stored_status() == status


async def test_s3_unknown_status_blocks_submission_and_warns(harness_factory):
    h = harness_factory()
    h.seed("Archived")
    wf = await h.open()

    assert wf.metadata.title == "Unknown Status"
    # not read-only, so answers are accepted locally
    assert wf.set_answer("ce-quality", "yes")
    with capture_logs() as logs:
        r = await h.submit()
    assert not r
    assert any(e["event"] == "invalid_status" and e["status"] == "Archived" for e in logs)


# ═══════════════════════════════════════════════════════
# Scenario 4: dirty guard
# ═══════════════════════════════════════════════════════

async def test_s4_dirty_blocks_reload(harness_factory):
    """A background refresh must not wipe answers the student has not saved."""
    h = harness_factory()
    h.seed(Status.BEING_WORKED_ON, {"ce-quality": "yes"})
    wf = await h.open()

    wf.set_answer("ce-sequence", "ATGC")
    # another tab saves different answers
    await h.state.save_progress(h.ref, {"answers": {"ce-quality": "no"}})

    with capture_logs() as logs:
        assert await wf.load_progress() is False
    assert wf.answers["ce-quality"] == "yes"
    assert wf.answers["ce-sequence"] == "ATGC"
    assert wf.dirty
    assert logs[0]["event"] == "load_progress_skipped"


async def test_s4_clean_session_reloads(harness_factory):
    h = harness_factory()
    h.seed(Status.BEING_WORKED_ON, {"ce-quality": "yes"})
    wf = await h.open()
    await h.state.save_progress(h.ref, {"answers": {"ce-quality": "no"}})
    assert await wf.load_progress()
    assert wf.answers["ce-quality"] == "no"


async def test_s4_unsaved_count_tracks_changes_since_save(harness_factory):
    h = harness_factory()
    h.seed(Status.BEING_WORKED_ON, {"ce-quality": "yes", "bl-identity": 98})
    wf = await h.open()
    assert wf.unsaved_answer_count() == 0

    # re-entering the stored value is not a change
    wf.set_answer("ce-quality", "yes")
    assert wf.dirty
    assert wf.unsaved_answer_count() == 0

    wf.set_answer("ce-sequence", "ATGC")
    wf.set_answer("bl-identity", 100)
    assert wf.unsaved_answer_count() == 2

    assert await h.save()
    assert wf.unsaved_answer_count() == 0


async def test_s4_reload_clears_a_status_reset_to_null(harness_factory):
    """Staff clear the status: the reloaded session is back to unassigned-like."""
    h = harness_factory()
    h.seed(Status.COMPLETED_WAITING_REVIEW, {"ce-quality": "yes"})
    wf = await h.open()
    assert wf.is_read_only()

    h.seed(None, {"ce-quality": "yes"})
    assert await wf.load_progress()
    assert wf.status is None
    assert wf.can_edit()
    assert wf.set_answer("ce-quality", "no")


async def test_s4_refresh_status_keeps_edits(harness_factory):
    """Staff change the status while the student is typing."""
    h = harness_factory()
    h.seed(Status.COMPLETED_WAITING_REVIEW, {"ce-quality": "yes"})
    wf = await h.open()
    assert wf.is_read_only()

    await h.state.set_status(h.ref, Status.NEEDS_REANALYSIS, actor="instructor")
    assert await wf.refresh_status()
    assert wf.status == Status.NEEDS_REANALYSIS
    assert wf.set_answer("ce-quality", "no")

    await h.state.set_status(h.ref, Status.CORRECTED_WAITING_REVIEW)
    assert await wf.refresh_status()
    assert wf.answers["ce-quality"] == "no"
    assert wf.dirty


# ═══════════════════════════════════════════════════════
# Scenario 5: overlapping saves
# ═══════════════════════════════════════════════════════

async def test_s5_second_save_while_in_flight_fails_fast(harness_factory):
    h = harness_factory(wrapper=GatedStore)
    wf = await h.open()
    wf.set_answer("ce-quality", "yes")

    h.store.close_gate()
    first = asyncio.create_task(h.save())
    await asyncio.sleep(0)
    assert h.store.waiting == 1

    second = await h.save()
    assert not second
    assert "save is already in progress" in second.message
    busy_submit = await h.submit()
    assert not busy_submit

    h.store.open_gate()
    assert await first
    assert not wf.dirty

    # the guard is released afterwards
    wf.set_answer("ce-quality", "no")
    assert await h.save()


async def test_s5_edit_during_save_stays_dirty(harness_factory):
    h = harness_factory(wrapper=GatedStore)
    wf = await h.open()
    wf.set_answer("ce-quality", "yes")

    h.store.close_gate()
    pending = asyncio.create_task(h.save())
    await asyncio.sleep(0)
    wf.set_answer("ce-sequence", "ATGC")
    h.store.open_gate()

    assert await pending
    assert wf.dirty
    assert False not in h.sink.dirty
    assert wf.save_label() == "Saved!"

    # what was stored is the snapshot taken when the save began
    wf2 = await h.reopen()
    assert "ce-sequence" not in wf2.answers


# ═══════════════════════════════════════════════════════
# Scenario 6: switching clones mid-request
# ═══════════════════════════════════════════════════════

async def test_s6_stale_load_is_discarded(harness_factory):
    h = harness_factory(wrapper=GatedStore)
    h.seed(Status.NEEDS_REANALYSIS, {"ce-quality": "yes"}, FEEDBACK)
    wf = await h.open()
    other = CloneRef("stu-001", "clone-B2")

    h.store.close_gate()
    pending = asyncio.create_task(wf.load_progress())
    await asyncio.sleep(0)
    wf.switch_clone(other)
    h.store.open_gate()

    with capture_logs() as logs:
        assert await pending is False
    assert wf.clone == other
    assert wf.status is None
    assert "ce-quality" not in wf.answers
    assert wf.review_comments == []
    assert logs[0]["event"] == "stale_response_discarded"


async def test_s6_stale_save_leaves_new_session_alone(harness_factory):
    h = harness_factory(wrapper=GatedStore)
    wf = await h.open()
    wf.set_answer("ce-quality", "yes")

    h.store.close_gate()
    pending = asyncio.create_task(h.save())
    await asyncio.sleep(0)
    wf.switch_clone(CloneRef("stu-001", "clone-B2"))
    h.store.open_gate()

    r = await pending
    assert r
    assert "moved on" in r.message
    assert not wf.dirty
    assert wf.last_saved is None
    assert wf.save_status == "idle"
    # the old clone's answers were still stored
    assert h.stored_status() == Status.BEING_WORKED_ON

    # and the new session is free to save
    wf.set_answer("ce-quality", "no")
    assert await h.save()


async def test_s6_switch_to_same_clone_keeps_session(harness_factory):
    h = harness_factory()
    wf = await h.open()
    wf.set_answer("ce-quality", "yes")
    wf.switch_clone(CloneRef(h.ref.student_id, h.ref.clone_id))
    assert wf.dirty
    assert wf.answers["ce-quality"] == "yes"


# ═══════════════════════════════════════════════════════
# Scenario 7: failures
# ═══════════════════════════════════════════════════════

async def test_s7_failed_save_keeps_edits(harness_factory):
    h = harness_factory(wrapper=FlakyStore)
    wf = await h.open()
    wf.set_answer("ce-quality", "yes")

    h.store.fail_saves = 1
    with capture_logs() as logs:
        r = await h.save()
    assert not r
    assert r.message == "Save failed: progress service unreachable"
    assert wf.dirty
    assert wf.answers["ce-quality"] == "yes"
    assert h.sink.save_statuses == ["saving", "error"]
    assert wf.save_label() == "Error"
    assert logs[0]["event"] == "save_failed"
    assert logs[0]["log_level"] == "error"

    # no automatic retry: the caller saves again
    assert h.stored_status() is None
    assert await h.save()
    assert not wf.dirty


async def test_s7_failed_save_aborts_submission(harness_factory):
    h = harness_factory(wrapper=FlakyStore)
    h.seed(Status.BEING_WORKED_ON)
    wf = await h.open()
    wf.set_answer("ce-quality", "yes")

    h.store.fail_saves = 1
    r = await h.submit()
    assert not r
    assert r.message.startswith("Submission aborted: Save failed")
    assert wf.status == Status.BEING_WORKED_ON
    assert h.stored_status() == Status.BEING_WORKED_ON
    assert wf.dirty


async def test_s7_failed_fetch_keeps_state(harness_factory):
    h = harness_factory(wrapper=FlakyStore)
    h.seed(Status.NEEDS_REANALYSIS, {"ce-quality": "yes"})
    h.store.fail_fetches = 1

    with capture_logs() as logs:
        wf = await h.open()
    assert wf.status is None
    assert wf.answers == {"ce-range": EMPTY_RANGE}
    assert "load_progress_failed" in [e["event"] for e in logs]

    # next load works
    assert await wf.load_progress()
    assert wf.status == Status.NEEDS_REANALYSIS


async def test_s7_failed_question_load(harness_factory):
    h = harness_factory()
    h.workflow.question_bank = YamlQuestionBank(h.root / "missing.yaml")
    with capture_logs() as logs:
        assert await h.workflow.load_questions() is False
        assert await h.workflow.load_help_topics() is False
    assert h.workflow.questions == []
    assert [e["event"] for e in logs] == ["load_questions_failed", "load_help_topics_failed"]


async def test_s7_unparseable_answers_fall_back_to_empty(harness_factory):
    h = harness_factory()
    h.seed(Status.BEING_WORKED_ON, blob="{not json")
    with capture_logs() as logs:
        wf = await h.open()
    assert wf.status == Status.BEING_WORKED_ON
    assert wf.answers == {"ce-range": EMPTY_RANGE}
    assert "analysis_data_unparseable" in [e["event"] for e in logs]


async def test_s7_unparseable_practice_clone_stays_read_only(harness_factory):
    """A broken payload on a practice clone still reports its status, so edits stay locked."""
    h = harness_factory(kind=PRACTICE)
    h.seed(Status.COMPLETED_WAITING_REVIEW, blob="{not json")
    with capture_logs() as logs:
        wf = await h.open()
    assert wf.status == Status.COMPLETED_WAITING_REVIEW
    assert wf.answers == {"ce-range": EMPTY_RANGE}
    assert "analysis_data_unparseable" in [e["event"] for e in logs]

    assert wf.set_answer("ce-quality", "no") is False
    assert not wf.dirty
    assert h.sink.dirty == []


# ═══════════════════════════════════════════════════════
# Scenario 8: progress, navigation and help
# ═══════════════════════════════════════════════════════

async def test_s8_sequence_ranges_are_seeded(harness_factory):
    h = harness_factory()
    wf = await h.open()
    assert wf.answers == {"ce-range": EMPTY_RANGE}
    assert not wf.dirty
    assert h.sink.dirty == []
    assert wf.unsaved_answer_count() == 0


async def test_s8_progress_by_step_and_group(harness_factory):
    h = harness_factory()
    wf = await h.open()

    wf.set_answer("ce-quality", "yes")
    wf.set_answer("ce-sequence", "ATGC")
    assert wf.step_progress(CLONE_EDITING) == 67
    assert wf.group_progress(CLONE_EDITING, "Quality") == 100
    assert wf.group_progress(CLONE_EDITING, "Trimming") == 50
    assert wf.overall_progress() == 17

    # a "no" reveals the follow-up question
    wf.set_answer("ce-quality", "no")
    assert wf.group_progress(CLONE_EDITING, "Quality") == 50

    # a range needs one end
    wf.set_answer("ce-range", {"value1": "", "value2": "418"})
    assert wf.group_progress(CLONE_EDITING, "Trimming") == 100


async def test_s8_conditional_on_number_is_strict(harness_factory):
    h = harness_factory()
    wf = await h.open()
    wf.set_answer("as-family", "kinase")

    wf.set_answer("bl-identity", 100)
    assert wf.step_progress(ANALYSIS_SUBMISSION) == 50

    wf.set_answer("bl-identity", "100")
    assert wf.step_progress(ANALYSIS_SUBMISSION) == 100


async def test_s8_navigation(harness_factory):
    h = harness_factory()
    wf = await h.open()

    assert wf.group_sequence() == [
        (CLONE_EDITING, "Quality"),
        (CLONE_EDITING, "Trimming"),
        (BLAST, "General"),
        (ANALYSIS_SUBMISSION, "General"),
        (REVIEW, "General"),
    ]

    # whole step, in group then question order
    assert [q.id for q in wf.current_step_questions()] == ["ce-header", "ce-quality", "ce-range", "ce-sequence"]

    wf.change_step(CLONE_EDITING)
    assert wf.current_group == "Quality"
    assert [q.id for q in wf.current_step_questions()] == ["ce-header", "ce-quality"]
    wf.set_answer("ce-quality", "no")
    assert [q.id for q in wf.current_step_questions()] == ["ce-header", "ce-quality", "ce-reason"]

    assert wf.navigate_group("next")
    assert (wf.current_step, wf.current_group) == (CLONE_EDITING, "Trimming")
    assert wf.navigate_group("next")
    assert (wf.current_step, wf.current_group) == (BLAST, "General")
    assert wf.navigate_group("previous")
    assert (wf.current_step, wf.current_group) == (CLONE_EDITING, "Trimming")

    wf.change_step(REVIEW)
    assert wf.navigate_group("next") is False

    wf.toggle_group("General")
    assert wf.current_group is None
    wf.toggle_group("General")
    assert wf.current_group == "General"

    with pytest.raises(ValueError):
        wf.change_step("sequencing")


async def test_s8_help_topics(harness_factory):
    h = harness_factory()
    wf = await h.open()
    assert wf.help_topic_for("ce-range").title == "Finding the vector boundaries"
    assert wf.help_topic_for("ce-quality") is None


async def test_s8_status_summary(harness_factory):
    h = harness_factory()
    h.seed(Status.BEING_WORKED_ON)
    wf = await h.open()
    wf.set_answer("ce-quality", "yes")

    st = wf.get_status()
    assert st["clone"] == "assigned-clone-A7:stu-001"
    assert st["status"] == Status.BEING_WORKED_ON
    assert st["title"] == "Being Worked On"
    assert st["icon"] == "settings"
    assert st["can_edit"] is True
    assert st["read_only"] is False
    assert st["steps"] == {CLONE_EDITING: 33, BLAST: 0, ANALYSIS_SUBMISSION: 0, REVIEW: 0}
    assert st["progress"] == 8
    assert st["summary"] == "assigned-clone-A7:stu-001 > Being Worked On, 8% complete, unsaved changes"
