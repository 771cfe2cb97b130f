"""clonelab answer: record one answer and save."""
from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

from clonelab.session import make_ref, open_store, open_workflow
from clonelab.settings import load_settings


def parse_value(raw: str) -> Any:
    """JSON values pass through ({"value1": ..}, 42); anything else is a plain string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


async def _answer(workflow, question_id: str, value: Any):
    if not workflow.set_answer(question_id, value):
        return None
    return await workflow.save()


def cmd_answer(student_id: str, clone_id: str, question_id: str, raw_value: str, cwd: str, practice: bool = False):
    settings = load_settings(cwd)
    store = open_store(settings)
    try:
        workflow = asyncio.run(open_workflow(make_ref(student_id, clone_id, practice), settings, store))
        if question_id not in {q.id for q in workflow.questions}:
            print(f"Unknown question: {question_id}", file=sys.stderr)
            sys.exit(1)
        result = asyncio.run(_answer(workflow, question_id, parse_value(raw_value)))
        if result is None:
            print(f'Read-only: "{workflow.status}" does not accept answers.', file=sys.stderr)
            sys.exit(1)
        if not result:
            print(result.message, file=sys.stderr)
            sys.exit(1)
        print(f"{result.message} Overall progress: {workflow.overall_progress()}%")
    finally:
        store.close()
