"""clonelab status: show a clone's status, progress and visible feedback."""
from __future__ import annotations

import asyncio

from clonelab.session import make_ref, open_store, open_workflow
from clonelab.settings import load_settings
from clonelab.types import STEP_NAMES


def cmd_status(student_id: str, clone_id: str, cwd: str, practice: bool = False):
    settings = load_settings(cwd)
    store = open_store(settings)
    try:
        workflow = asyncio.run(open_workflow(make_ref(student_id, clone_id, practice), settings, store))
        st = workflow.get_status()
        print(st["summary"])
        print(st["message"])
        for step, pct in st["steps"].items():
            marker = ">" if step == st["current_step"] else " "
            print(f" {marker} {STEP_NAMES[step]}: {pct}%")

        if workflow.should_show_feedback():
            for q in workflow.questions:
                comments = workflow.question_comments(q.id)
                if not comments:
                    continue
                badge = "✓" if workflow.is_question_correct(q.id) else "✗"
                print(f"  {badge} {q.id}")
                for c in comments:
                    print(f"      {c.feedback}")
    finally:
        store.close()
