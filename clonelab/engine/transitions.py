"""Status transition graph: which status may move to which."""
from __future__ import annotations

from types import MappingProxyType

from clonelab.errors import IllegalTransitionError
from clonelab.statuses import Status

_REVIEW_OUTCOMES = frozenset({
    Status.REVIEWED_BY_TEACHER,  # instructor approves
    Status.NEEDS_REANALYSIS,
    Status.NEEDS_CORRECTIONS,
})

_RESUBMIT = frozenset({Status.BEING_WORKED_ON, Status.CORRECTED_WAITING_REVIEW})

TRANSITIONS: MappingProxyType[Status, frozenset[Status]] = MappingProxyType({
    Status.UNASSIGNED: frozenset({Status.BEING_WORKED_ON}),
    Status.AVAILABLE: frozenset({Status.BEING_WORKED_ON}),
    Status.BEING_WORKED_ON: frozenset({
        Status.COMPLETED_WAITING_REVIEW,
        Status.CORRECTED_WAITING_REVIEW,
        Status.UNASSIGNED,
    }),
    Status.COMPLETED_WAITING_REVIEW: _REVIEW_OUTCOMES,
    Status.CORRECTED_WAITING_REVIEW: _REVIEW_OUTCOMES,
    Status.NEEDS_REANALYSIS: _RESUBMIT,
    Status.NEEDS_CORRECTIONS: _RESUBMIT,
    # Director decisions
    Status.REVIEWED_BY_TEACHER: frozenset({
        Status.TO_BE_SUBMITTED_NCBI,
        Status.SUBMITTED_TO_NCBI,
        Status.UNREADABLE,
        Status.NEEDS_REANALYSIS,
    }),
    Status.TO_BE_SUBMITTED_NCBI: frozenset({Status.SUBMITTED_TO_NCBI, Status.UNREADABLE}),
    Status.SUBMITTED_TO_NCBI: frozenset({Status.TO_BE_SUBMITTED_NCBI}),
    Status.UNREADABLE: frozenset({Status.NEEDS_REANALYSIS}),
})


def allowed_targets(source: str | None) -> frozenset[Status]:
    """Destinations reachable in one move. A null source may go anywhere."""
    if not source:
        return frozenset(Status)
    return TRANSITIONS.get(source, frozenset())


def is_legal_transition(source: str | None, target: str) -> bool:
    if not source:
        return True
    return target in TRANSITIONS.get(source, frozenset())


def require_legal_transition(source: str | None, target: str) -> None:
    if not is_legal_transition(source, target):
        raise IllegalTransitionError(source, target)
