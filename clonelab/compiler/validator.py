"""Static analysis for question banks and the status graph."""
from __future__ import annotations

from typing import TYPE_CHECKING

from clonelab.engine.transitions import TRANSITIONS
from clonelab.statuses import ALL_STATUSES, Status
from clonelab.types import DISPLAY_ONLY_TYPES, QUESTION_TYPES, STEPS

if TYPE_CHECKING:
    from collections.abc import Mapping

    from clonelab.types import HelpTopic, Question


class ValidationError:
    def __init__(self, level: str, message: str, subject: str | None = None):
        self.level = level  # "error" | "warning"
        self.message = message
        self.subject = subject

    def __str__(self):
        prefix = f"[{self.subject}] " if self.subject else ""
        return f"{self.level.upper()}: {prefix}{self.message}"


def validate_questions(
    questions: list[Question], help_topics: list[HelpTopic] | None = None
) -> list[ValidationError]:
    """Run all static checks on a question bank."""
    errors: list[ValidationError] = []

    if not questions:
        errors.append(ValidationError("error", "Question bank has no questions"))
        return errors

    errors.extend(_check_duplicates(questions))
    errors.extend(_check_steps_and_types(questions))
    errors.extend(_check_conditions(questions))
    errors.extend(_check_empty_steps(questions))
    if help_topics:
        errors.extend(_check_help_topics(questions, help_topics))
    return errors


def validate_status_graph(
    transitions: Mapping[Status, frozenset[Status]] = TRANSITIONS,
) -> list[ValidationError]:
    """Every target must be a known status and every status reachable from Unassigned."""
    errors: list[ValidationError] = []
    for source, targets in transitions.items():
        for t in targets:
            if t not in ALL_STATUSES:
                errors.append(ValidationError("error", f"Unknown target status: '{t}'", source))

    reachable: set[str] = set()
    queue: list[str] = [Status.UNASSIGNED, Status.AVAILABLE]
    while queue:
        current = queue.pop(0)
        if current in reachable:
            continue
        reachable.add(current)
        queue.extend(t for t in transitions.get(current, ()) if t not in reachable)

    for status in ALL_STATUSES:
        if status not in reachable:
            errors.append(ValidationError("warning", "Status is only reachable by direct assignment", status))
        if status not in transitions:
            errors.append(ValidationError("warning", "Status has no outgoing transitions", status))
    return errors


def format_errors(errors: list[ValidationError]) -> str:
    if not errors:
        return ""
    lines = []
    errs = [e for e in errors if e.level == "error"]
    warns = [e for e in errors if e.level == "warning"]
    if errs:
        lines.append(f"  {len(errs)} error(s):")
        for e in errs:
            lines.append(f"    ✗ {e}")
    if warns:
        lines.append(f"  {len(warns)} warning(s):")
        for e in warns:
            lines.append(f"    ⚠ {e}")
    return "\n".join(lines)


# ─── Checks ───

def _check_duplicates(questions: list[Question]) -> list[ValidationError]:
    seen: dict[str, int] = {}
    for q in questions:
        seen[q.id] = seen.get(q.id, 0) + 1
    return [
        ValidationError("error", f"Duplicate question id (x{count})", qid)
        for qid, count in seen.items() if count > 1
    ]


def _check_steps_and_types(questions: list[Question]) -> list[ValidationError]:
    errors: list[ValidationError] = []
    for q in questions:
        if q.step not in STEPS:
            errors.append(ValidationError("error", f"Unknown step: '{q.step}'", q.id))
        if q.type not in QUESTION_TYPES:
            errors.append(ValidationError("error", f"Unknown question type: '{q.type}'", q.id))
        elif q.type in DISPLAY_ONLY_TYPES and q.required:
            errors.append(ValidationError("warning", "Display-only question marked required", q.id))
    return errors


def _check_conditions(questions: list[Question]) -> list[ValidationError]:
    """show_if must point at an existing, earlier-or-same-step question that is not itself."""
    errors: list[ValidationError] = []
    by_id = {q.id: q for q in questions}
    for q in questions:
        if q.show_if is None:
            continue
        target = by_id.get(q.show_if.question_id)
        if target is None:
            errors.append(ValidationError(
                "error", f"Condition depends on unknown question: '{q.show_if.question_id}'", q.id
            ))
        elif target.id == q.id:
            errors.append(ValidationError("error", "Condition depends on itself", q.id))
        elif target.type in DISPLAY_ONLY_TYPES:
            errors.append(ValidationError(
                "warning", f"Condition depends on display-only question '{target.id}' (never answered)", q.id
            ))
        elif target.step in STEPS and q.step in STEPS and STEPS.index(target.step) > STEPS.index(q.step):
            errors.append(ValidationError(
                "warning", f"Condition depends on a question in a later step ('{target.step}')", q.id
            ))
    return errors


def _check_empty_steps(questions: list[Question]) -> list[ValidationError]:
    """Steps without answerable questions score 0 and cap overall progress below 100."""
    answerable_steps = {q.step for q in questions if q.type not in DISPLAY_ONLY_TYPES}
    return [
        ValidationError("warning", "Step has no answerable questions; overall progress cannot reach 100%", step)
        for step in STEPS if step not in answerable_steps
    ]


def _check_help_topics(questions: list[Question], help_topics: list[HelpTopic]) -> list[ValidationError]:
    ids = {q.id for q in questions}
    return [
        ValidationError("warning", f"Help topic for unknown question: '{t.question_id}'", t.id)
        for t in help_topics if t.question_id not in ids
    ]
