"""Clone status registry: the single shared table of statuses and their metadata.

Every consumer (permission policy, transition graph, review desk, CLI)
imports from here; nothing recomputes these tables at runtime.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType

from clonelab.logging_utils import get_logger

logger = get_logger(__name__)


class Status(StrEnum):
    # Student working states
    UNASSIGNED = "Unassigned"
    AVAILABLE = "Available"  # practice clones
    BEING_WORKED_ON = "Being worked on by student"

    # Submission states
    COMPLETED_WAITING_REVIEW = "Completed, waiting review by staff"
    CORRECTED_WAITING_REVIEW = "Corrected by student, waiting review"

    # Instructor review states
    NEEDS_REANALYSIS = "Reviewed, needs to be reanalyzed"
    NEEDS_CORRECTIONS = "Needs corrections from student"
    REVIEWED_BY_TEACHER = "Reviewed by teacher"

    # Director review states
    REVIEWED_CORRECT = "Reviewed and Correct"
    TO_BE_SUBMITTED_NCBI = "To be submitted to NCBI"
    SUBMITTED_TO_NCBI = "Submitted to NCBI"
    UNREADABLE = "Unreadable"


ALL_STATUSES: tuple[Status, ...] = tuple(Status)


class Icon(StrEnum):
    """Symbolic icon names handed to the presentation layer."""

    SETTINGS = "settings"
    CLOCK = "clock"
    ALERT_CIRCLE = "alert-circle"
    ROTATE_CCW = "rotate-ccw"
    CHECK_CIRCLE = "check-circle"
    CHECK_CIRCLE_2 = "check-circle-2"
    UPLOAD = "upload"
    X_CIRCLE = "x-circle"


@dataclass(frozen=True)
class StatusMetadata:
    title: str
    message: str
    show_refresh: bool = False
    show_feedback: bool = False
    icon: Icon = Icon.ALERT_CIRCLE


# ─── Display metadata ───

_METADATA: dict[Status, StatusMetadata] = {
    Status.BEING_WORKED_ON: StatusMetadata(
        "Being Worked On",
        "Student is currently working on this assignment.",
        show_refresh=True,
        icon=Icon.SETTINGS,
    ),
    Status.COMPLETED_WAITING_REVIEW: StatusMetadata(
        "Waiting for Review",
        "Your submission is complete and waiting for instructor review.",
        icon=Icon.CLOCK,
    ),
    Status.NEEDS_REANALYSIS: StatusMetadata(
        "Needs Reanalysis",
        "Your instructor has reviewed your work and it needs to be reanalyzed.",
        show_feedback=True,
        icon=Icon.ALERT_CIRCLE,
    ),
    Status.NEEDS_CORRECTIONS: StatusMetadata(
        "Needs Corrections",
        "Your instructor has reviewed your work and some corrections are needed.",
        show_feedback=True,
        icon=Icon.ALERT_CIRCLE,
    ),
    Status.CORRECTED_WAITING_REVIEW: StatusMetadata(
        "Resubmitted for Review",
        "Your corrections have been submitted and are waiting for review.",
        icon=Icon.ROTATE_CCW,
    ),
    Status.REVIEWED_BY_TEACHER: StatusMetadata(
        "Reviewed by Teacher",
        "Your work has been reviewed and approved by your instructor. "
        "Awaiting final director review.",
        show_feedback=True,
        icon=Icon.CHECK_CIRCLE,
    ),
    Status.REVIEWED_CORRECT: StatusMetadata(
        "Reviewed and Correct",
        "Great work! Your analysis has been reviewed and is correct.",
        show_feedback=True,
        icon=Icon.CHECK_CIRCLE,
    ),
    Status.TO_BE_SUBMITTED_NCBI: StatusMetadata(
        "To be Submitted to NCBI",
        "This analysis is ready for submission to NCBI.",
        icon=Icon.UPLOAD,
    ),
    Status.SUBMITTED_TO_NCBI: StatusMetadata(
        "Submitted to NCBI",
        "This analysis has been successfully submitted to NCBI.",
        icon=Icon.CHECK_CIRCLE_2,
    ),
    Status.UNREADABLE: StatusMetadata(
        "Unreadable",
        "This sequence data is unreadable and cannot be processed.",
        icon=Icon.X_CIRCLE,
    ),
    Status.UNASSIGNED: StatusMetadata(
        "Unassigned",
        "This clone is not yet assigned to a student.",
        icon=Icon.ALERT_CIRCLE,
    ),
    Status.AVAILABLE: StatusMetadata(
        "Available",
        "This practice clone is available for student analysis.",
        icon=Icon.ALERT_CIRCLE,
    ),
}

STATUS_METADATA = MappingProxyType(_METADATA)


def metadata_for(status: str | None) -> StatusMetadata:
    """Display metadata for a status. Total: unknown values get a generic record."""
    if isinstance(status, str) and status in STATUS_METADATA:
        return STATUS_METADATA[status]
    return StatusMetadata(
        title="Unknown Status",
        message=f"Status: {status}",
        icon=Icon.ALERT_CIRCLE,
    )


# ─── Validation ───

def is_valid_status(status: object) -> bool:
    if status is None or status == "":
        return True
    return isinstance(status, str) and status in STATUS_METADATA


def coerce_status(status: str | None) -> Status | None:
    """Map a raw persisted string onto the enum; empty and unknown give None."""
    if isinstance(status, str) and status in STATUS_METADATA:
        return Status(status)
    return None


def validate_and_warn(status: object, component: str = "unknown") -> object:
    """Log a warning for unrecognised statuses. Never raises, returns the input."""
    if not is_valid_status(status):
        logger.warning(
            "invalid_status",
            status=status,
            component=component,
            valid_statuses=[s.value for s in ALL_STATUSES],
        )
    return status


# ─── Status groups ───

STUDENT_EDITABLE: frozenset[Status | str | None] = frozenset({
    Status.BEING_WORKED_ON,
    Status.NEEDS_REANALYSIS,
    Status.NEEDS_CORRECTIONS,
    Status.UNASSIGNED,
    Status.AVAILABLE,
    Status.REVIEWED_CORRECT,  # students may keep editing after approval
    None,
    "",
})

READ_ONLY: frozenset[Status] = frozenset({
    Status.COMPLETED_WAITING_REVIEW,
    Status.CORRECTED_WAITING_REVIEW,
    Status.REVIEWED_BY_TEACHER,
    Status.TO_BE_SUBMITTED_NCBI,
    Status.SUBMITTED_TO_NCBI,
    Status.UNREADABLE,
})

REVIEW_READY: frozenset[Status] = frozenset({
    Status.COMPLETED_WAITING_REVIEW,
    Status.CORRECTED_WAITING_REVIEW,
})

DIRECTOR_REVIEW_READY: frozenset[Status] = frozenset({Status.REVIEWED_BY_TEACHER})

SHOW_FEEDBACK: frozenset[Status] = frozenset({
    Status.NEEDS_REANALYSIS,
    Status.NEEDS_CORRECTIONS,
    Status.REVIEWED_CORRECT,
    Status.REVIEWED_BY_TEACHER,
})


# ─── Review mappings ───

REVIEW_QUEUE = MappingProxyType({
    Status.COMPLETED_WAITING_REVIEW: "pending",
    Status.CORRECTED_WAITING_REVIEW: "resubmitted",
    Status.REVIEWED_BY_TEACHER: "teacher_reviewed",
})

REVIEW_ACTIONS = MappingProxyType({
    "approved": Status.REVIEWED_BY_TEACHER,
    "rejected": Status.NEEDS_REANALYSIS,
})


def review_queue_status(status: str | None) -> str | None:
    if not isinstance(status, str):
        return None
    return REVIEW_QUEUE.get(status)


STATUS_OPTIONS: tuple[tuple[Status, str], ...] = (
    (Status.BEING_WORKED_ON, "Being worked on by student"),
    (Status.COMPLETED_WAITING_REVIEW, "Completed, waiting review by staff"),
    (Status.NEEDS_REANALYSIS, "Reviewed, needs to be reanalyzed"),
    (Status.NEEDS_CORRECTIONS, "Needs corrections from student"),
    (Status.CORRECTED_WAITING_REVIEW, "Corrected by student, waiting review"),
    (Status.REVIEWED_BY_TEACHER, "Reviewed by teacher"),
    (Status.REVIEWED_CORRECT, "Reviewed and Correct"),
)

DIRECTOR_STATUS_OPTIONS: tuple[tuple[Status, str], ...] = (
    (Status.TO_BE_SUBMITTED_NCBI, "To be submitted to NCBI"),
    (Status.SUBMITTED_TO_NCBI, "Submitted to NCBI"),
    (Status.UNREADABLE, "Unreadable"),
    (Status.NEEDS_REANALYSIS, "Send back for reanalysis"),
)


# ─── Pipeline position ───

_PROGRESS_WEIGHTS = MappingProxyType({
    Status.UNASSIGNED: 0.0,
    Status.AVAILABLE: 0.0,
    Status.BEING_WORKED_ON: 0.25,
    Status.NEEDS_REANALYSIS: 0.5,
    Status.NEEDS_CORRECTIONS: 0.5,
    Status.COMPLETED_WAITING_REVIEW: 0.75,
    Status.CORRECTED_WAITING_REVIEW: 0.75,
    Status.REVIEWED_BY_TEACHER: 0.9,
    Status.REVIEWED_CORRECT: 1.0,
    Status.TO_BE_SUBMITTED_NCBI: 1.0,
    Status.SUBMITTED_TO_NCBI: 1.0,
    Status.UNREADABLE: 0.1,
})


def progress_weight(status: str | None) -> float:
    if not isinstance(status, str):
        return 0.0
    return _PROGRESS_WEIGHTS.get(status, 0.0)
