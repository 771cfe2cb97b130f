"""clonelab submit: send a clone to the review queue."""
from __future__ import annotations

import asyncio
import sys

from clonelab.errors import IllegalTransitionError
from clonelab.session import make_ref, open_store, open_workflow
from clonelab.settings import load_settings


def cmd_submit(student_id: str, clone_id: str, cwd: str, practice: bool = False):
    settings = load_settings(cwd)
    store = open_store(settings)
    try:
        workflow = asyncio.run(open_workflow(make_ref(student_id, clone_id, practice), settings, store))
        try:
            result = asyncio.run(workflow.submit_for_review(enforce_transitions=settings.enforce_transitions))
        except IllegalTransitionError as e:
            print(f"Submit failed: {e}", file=sys.stderr)
            sys.exit(1)
        if not result:
            print(result.message, file=sys.stderr)
            sys.exit(1)
        print(result.message)
    finally:
        store.close()
