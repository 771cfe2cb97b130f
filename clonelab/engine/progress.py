"""Completion percentages over a question bank and an answer map.

Each step counts only questions that are visible (conditional logic
satisfied) and answerable (not display-only). Overall progress weights
the four steps equally, so an empty step pulls the average down.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from clonelab.types import DEFAULT_GROUP, DISPLAY_ONLY_TYPES, STEPS

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from clonelab.types import Question

STEP_WEIGHT = 0.25


@dataclass
class QuestionGroup:
    name: str
    group_order: int = 0
    questions: list[Question] = field(default_factory=list)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion (True != 1, "1" != 1)."""
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def should_show(question: Question, answers: Mapping[str, Any]) -> bool:
    cond = question.show_if
    if cond is None:
        return True
    if cond.question_id not in answers:
        return False
    return strict_equals(answers[cond.question_id], cond.answer)


def is_answered(question: Question, answers: Mapping[str, Any]) -> bool:
    answer = answers.get(question.id)
    if question.type == "sequence_range":
        return isinstance(answer, dict) and bool(answer.get("value1") or answer.get("value2"))
    return answer is not None and answer != ""


def visible_questions(
    questions: Iterable[Question],
    answers: Mapping[str, Any],
    step: str | None = None,
    group: str | None = None,
) -> list[Question]:
    return [
        q for q in questions
        if (step is None or q.step == step)
        and (group is None or q.group == group)
        and should_show(q, answers)
    ]


def _countable(questions: Iterable[Question], answers: Mapping[str, Any], step: str, group: str | None = None):
    return [
        q for q in visible_questions(questions, answers, step, group)
        if q.type not in DISPLAY_ONLY_TYPES
    ]


def step_progress(step: str, questions: Iterable[Question], answers: Mapping[str, Any]) -> int:
    counted = _countable(questions, answers, step)
    if not counted:
        return 0
    answered = sum(1 for q in counted if is_answered(q, answers))
    return round_half_up(answered / len(counted) * 100)


def group_progress(
    step: str, group: str, questions: Iterable[Question], answers: Mapping[str, Any]
) -> int:
    counted = _countable(questions, answers, step, group or DEFAULT_GROUP)
    if not counted:
        return 100  # nothing to answer means nothing left to do
    answered = sum(1 for q in counted if is_answered(q, answers))
    return round_half_up(answered / len(counted) * 100)


def overall_progress(questions: Iterable[Question], answers: Mapping[str, Any]) -> int:
    questions = list(questions)
    total = sum(step_progress(step, questions, answers) * STEP_WEIGHT for step in STEPS)
    return round_half_up(total)


# ─── Ordering ───

def sort_questions(questions: Iterable[Question]) -> list[Question]:
    return sorted(questions, key=lambda q: (q.group_order, q.order))


def groups_for_step(step: str, questions: Iterable[Question], answers: Mapping[str, Any]) -> list[QuestionGroup]:
    """Visible questions of a step, bucketed by group and ordered by group_order."""
    groups: dict[str, QuestionGroup] = {}
    for q in visible_questions(questions, answers, step):
        grp = groups.get(q.group)
        if grp is None:
            grp = groups[q.group] = QuestionGroup(name=q.group, group_order=q.group_order)
        grp.questions.append(q)
    return sorted(groups.values(), key=lambda g: g.group_order)
