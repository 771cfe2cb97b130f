"""clonelab set-status: director status change."""
from __future__ import annotations

import asyncio
import sys

from clonelab.engine.review import ReviewDesk
from clonelab.errors import CloneLabError
from clonelab.session import make_ref, open_store, parse_status
from clonelab.settings import load_settings


def cmd_set_status(student_id: str, clone_id: str, raw_status: str, cwd: str, practice: bool = False):
    ref = make_ref(student_id, clone_id, practice)
    status = parse_status(raw_status)
    store = open_store(load_settings(cwd))
    try:
        previous = asyncio.run(ReviewDesk(store, reviewer="director").change_status(ref, status))
        print(f'{ref.key}: "{previous}" -> "{status}"')
    except CloneLabError as e:
        print(f"Status change failed: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()
