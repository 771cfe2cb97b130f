"""Parse YAML question banks into Question definitions."""
from __future__ import annotations

from typing import Any

import yaml

from clonelab.errors import QuestionBankError
from clonelab.types import DEFAULT_GROUP, HelpTopic, Question, ShowIf

# camelCase keys exported by the web editor -> internal key
KEYWORD_MAP = {
    "questionGroup": "question_group",
    "groupOrder": "group_order",
    "conditionalLogic": "conditional_logic",
    "showIf": "show_if",
    "questionId": "question_id",
    "questionText": "text",
    "analysisQuestionId": "question_id",
    "helpTopics": "help_topics",
}

# Step labels as an editor may write them -> step id
STEP_ALIASES = {
    "CloneEditing": "clone-editing",
    "Blast": "blast",
    "AnalysisSubmission": "analysis-submission",
    "Review": "review",
}

# Keys consumed by the parser, not forwarded to options
_CONSUMED_KEYS = frozenset({
    "id", "step", "type", "text", "required", "order",
    "question_group", "group_order", "conditional_logic", "show_if",
})


def _normalize_key(key: str) -> str:
    return KEYWORD_MAP.get(key, key)


def _normalize(obj):
    if isinstance(obj, dict):
        return {_normalize_key(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_normalize(item) for item in obj]
    return obj


def _parse_show_if(body: dict[str, Any], qid: str) -> ShowIf | None:
    cond = body.get("conditional_logic")
    show_if = cond.get("show_if") if isinstance(cond, dict) else body.get("show_if")
    if show_if is None:
        return None
    if not isinstance(show_if, dict) or "question_id" not in show_if or "answer" not in show_if:
        raise QuestionBankError(f'Question "{qid}": show_if needs question_id and answer')
    return ShowIf(question_id=str(show_if["question_id"]), answer=show_if["answer"])


def _parse_question(raw: Any, index: int) -> Question:
    if not isinstance(raw, dict):
        raise QuestionBankError(f"Question #{index + 1} is not a mapping")
    body = _normalize(raw)
    if "id" not in body:
        raise QuestionBankError(f"Question #{index + 1} has no id")
    qid = str(body["id"])
    for key in ("step", "type"):
        if not body.get(key):
            raise QuestionBankError(f'Question "{qid}" has no {key}')

    step = STEP_ALIASES.get(body["step"], body["step"])
    try:
        order = int(body.get("order", index))
        group_order = int(body.get("group_order", 0))
    except (TypeError, ValueError) as e:
        raise QuestionBankError(f'Question "{qid}": order fields must be integers') from e

    options = {k: v for k, v in body.items() if k not in _CONSUMED_KEYS}
    return Question(
        id=qid,
        step=step,
        type=body["type"],
        text=body.get("text", ""),
        required=bool(body.get("required", False)),
        order=order,
        question_group=body.get("question_group") or DEFAULT_GROUP,
        group_order=group_order,
        show_if=_parse_show_if(body, qid),
        options=options,
    )


def _parse_help_topic(raw: Any) -> HelpTopic:
    if not isinstance(raw, dict) or "id" not in raw or "question_id" not in raw:
        raise QuestionBankError("Help topic needs id and question_id")
    return HelpTopic(id=str(raw["id"]), question_id=str(raw["question_id"]), title=raw.get("title", ""))


def parse_question_bank_yaml(content: str) -> tuple[list[Question], list[HelpTopic]]:
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise QuestionBankError(f"Invalid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise QuestionBankError("Invalid YAML: expected a mapping")

    normalized = _normalize(raw)
    raw_questions = normalized.get("questions")
    if not isinstance(raw_questions, list):
        raise QuestionBankError('Invalid question bank: missing "questions" list')

    questions = [_parse_question(q, i) for i, q in enumerate(raw_questions)]
    topics = [_parse_help_topic(t) for t in normalized.get("help_topics") or []]
    return questions, topics
