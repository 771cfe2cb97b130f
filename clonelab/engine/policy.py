"""Edit permission checks derived from a clone's status."""
from __future__ import annotations

from clonelab.statuses import (
    DIRECTOR_REVIEW_READY,
    READ_ONLY,
    REVIEW_READY,
    SHOW_FEEDBACK,
    STUDENT_EDITABLE,
    validate_and_warn,
)

# STUDENT_EDITABLE and READ_ONLY are not complements: a status may be in
# neither (unknown values) and ReviewedCorrect is editable while also
# showing feedback. Callers check each predicate they care about.


def _member(status: object, group: frozenset) -> bool:
    try:
        return status in group
    except TypeError:  # unhashable garbage
        return False


def can_edit(status: str | None, component: str = "SubmissionWorkflow") -> bool:
    validate_and_warn(status, component)
    return _member(status, STUDENT_EDITABLE)


def is_read_only(status: str | None) -> bool:
    return _member(status, READ_ONLY)


def should_show_feedback(status: str | None) -> bool:
    return _member(status, SHOW_FEEDBACK)


def is_review_ready(status: str | None) -> bool:
    return _member(status, REVIEW_READY)


def is_director_review_ready(status: str | None) -> bool:
    return _member(status, DIRECTOR_REVIEW_READY)
