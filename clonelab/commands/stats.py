"""clonelab stats: review queue counts and clones per status."""
from __future__ import annotations

from clonelab.engine.review import ReviewDesk
from clonelab.session import open_store
from clonelab.settings import load_settings
from clonelab.statuses import ALL_STATUSES


def cmd_stats(cwd: str):
    store = open_store(load_settings(cwd))
    try:
        stats = ReviewDesk(store).review_stats()
        print(
            f'Review queue: {stats["pending"]} pending, {stats["resubmitted"]} resubmitted, '
            f'{stats["teacher_reviewed"]} awaiting director'
        )
        counts = store.count_by_status()
        for status in ALL_STATUSES:
            if counts.get(status):
                print(f"  {status}: {counts[status]}")
        if counts.get(""):
            print(f'  (no status): {counts[""]}')
        print(f'Total: {stats["total"]}')
    finally:
        store.close()
