"""clonelab assign: open a clone for a student."""
from __future__ import annotations

import asyncio
import sys

from clonelab.errors import CloneLabError
from clonelab.session import make_ref, open_store
from clonelab.settings import load_settings
from clonelab.statuses import Status
from clonelab.types import PRACTICE


def cmd_assign(student_id: str, clone_id: str, cwd: str, practice: bool = False):
    ref = make_ref(student_id, clone_id, practice)
    status = Status.AVAILABLE if ref.kind == PRACTICE else Status.BEING_WORKED_ON
    store = open_store(load_settings(cwd))
    try:
        asyncio.run(store.assign(ref, status))
        print(f'Assigned {ref.key}: "{status}"')
    except CloneLabError as e:
        print(f"Assign failed: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()
