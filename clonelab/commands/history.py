"""clonelab history: status changes for one clone, newest first."""
from __future__ import annotations

from clonelab.session import make_ref, open_store
from clonelab.settings import load_settings


def cmd_history(student_id: str, clone_id: str, cwd: str, practice: bool = False, limit: int = 20):
    ref = make_ref(student_id, clone_id, practice)
    store = open_store(load_settings(cwd))
    try:
        history = store.get_history(ref, limit)
        if not history:
            print(f"No history for {ref.key}.")
            return
        for h in history:
            source = h["from_status"] or "(none)"
            print(f'{h["timestamp"]}  {h["actor"]:<10} {source} -> {h["to_status"]}')
    finally:
        store.close()
