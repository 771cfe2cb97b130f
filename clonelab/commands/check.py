"""clonelab check: parse and validate the question bank, output the status diagram."""
from __future__ import annotations

import sys

from clonelab.compiler import (
    format_errors,
    generate_mermaid,
    parse_question_bank_yaml,
    validate_questions,
    validate_status_graph,
)
from clonelab.errors import QuestionBankError
from clonelab.settings import load_settings
from clonelab.types import STEP_NAMES, STEPS


def cmd_check(cwd: str):
    settings = load_settings(cwd)
    path = settings.questions_path
    if not path.exists():
        print(f"Question bank not found: {path}", file=sys.stderr)
        sys.exit(1)

    try:
        questions, topics = parse_question_bank_yaml(path.read_text(encoding="utf-8"))
    except QuestionBankError as e:
        print(f"✗ Parse error: {e}", file=sys.stderr)
        sys.exit(1)

    errors = validate_questions(questions, topics)
    if any(e.level == "error" for e in errors):
        print(f"✗ Question bank {path.name} failed validation:")
        print(format_errors(errors))
        sys.exit(1)

    print(f"✓ Question bank {path.name} loaded ({len(questions)} questions, {len(topics)} help topics)")
    for step in STEPS:
        count = sum(1 for q in questions if q.step == step)
        print(f"  {STEP_NAMES[step]}: {count}")
    if errors:
        print(format_errors(errors))
    print()

    graph_errors = validate_status_graph()
    if graph_errors:
        print("Status graph:")
        print(format_errors(graph_errors))
        print()

    print("```mermaid")
    print(generate_mermaid())
    print("```")
