"""QuestionBank backed by a YAML file in the project directory."""
from __future__ import annotations

from pathlib import Path

from clonelab.compiler.parser import parse_question_bank_yaml
from clonelab.types import HelpTopic, Question


class YamlQuestionBank:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._cache: tuple[list[Question], list[HelpTopic]] | None = None

    def _load(self) -> tuple[list[Question], list[HelpTopic]]:
        if self._cache is None:
            self._cache = parse_question_bank_yaml(self.path.read_text(encoding="utf-8"))
        return self._cache

    def reload(self) -> None:
        self._cache = None

    async def fetch_questions(self) -> list[Question]:
        return list(self._load()[0])

    async def fetch_help_topics(self) -> list[HelpTopic]:
        return list(self._load()[1])
