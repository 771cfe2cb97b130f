from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ─── Steps ───

CLONE_EDITING = "clone-editing"
BLAST = "blast"
ANALYSIS_SUBMISSION = "analysis-submission"
REVIEW = "review"

STEPS: tuple[str, ...] = (CLONE_EDITING, BLAST, ANALYSIS_SUBMISSION, REVIEW)

STEP_NAMES = {
    CLONE_EDITING: "Clone Editing",
    BLAST: "BLAST Analysis",
    ANALYSIS_SUBMISSION: "Analysis & Submission",
    REVIEW: "Review",
}

DEFAULT_GROUP = "General"

# ─── Question types ───

ANSWER_TYPES = frozenset({
    "yes_no", "select", "text", "textarea", "number",
    "dna_sequence", "protein_sequence", "blast", "sequence_range",
})

# Rendered for context only, never answered
DISPLAY_ONLY_TYPES = frozenset({
    "text_header", "section_divider", "info_text", "blast_comparison", "sequence_display",
})

QUESTION_TYPES = ANSWER_TYPES | DISPLAY_ONLY_TYPES


# ─── Question bank ───

@dataclass(frozen=True)
class ShowIf:
    question_id: str
    answer: Any


@dataclass
class Question:
    id: str
    step: str
    type: str
    text: str = ""
    required: bool = False
    order: int = 0
    question_group: str = DEFAULT_GROUP
    group_order: int = 0
    show_if: ShowIf | None = None  # conditionalLogic.showIf
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def group(self) -> str:
        return self.question_group or DEFAULT_GROUP


@dataclass
class HelpTopic:
    id: str
    question_id: str
    title: str = ""


# ─── Review feedback ───

@dataclass
class ReviewComment:
    question_id: str
    feedback: str = ""
    is_correct: bool | None = None
    feedback_visible: bool = False
    timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        return dict(self.__dict__)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ReviewComment:
        return cls(
            question_id=str(raw.get("question_id", "")),
            feedback=raw.get("feedback") or "",
            is_correct=raw.get("is_correct"),
            feedback_visible=raw.get("feedback_visible", False),
            timestamp=raw.get("timestamp") or "",
        )


# ─── Progress ───

ASSIGNED = "assigned"
PRACTICE = "practice"


@dataclass(frozen=True)
class CloneRef:
    """Identifies one (student, clone) working session."""

    student_id: str
    clone_id: str
    kind: str = ASSIGNED  # assigned | practice

    @property
    def key(self) -> str:
        return f"{self.kind}-{self.clone_id}:{self.student_id}"


@dataclass
class ProgressRecord:
    status: str | None = None
    progress: int = 0
    answers: dict[str, Any] = field(default_factory=dict)
    current_step: str = CLONE_EDITING
    review_comments: list[ReviewComment] = field(default_factory=list)
    last_saved: str | None = None
    submitted_at: str | None = None
    # Serialized analysis payload, when the store hands it over unparsed
    analysis_data: str | None = None
