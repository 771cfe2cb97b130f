"""clonelab review: record an instructor decision with optional per-question feedback."""
from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import yaml

from clonelab.engine.review import ReviewDesk
from clonelab.errors import CloneLabError
from clonelab.session import make_ref, open_store
from clonelab.settings import load_settings
from clonelab.store.codec import now_timestamp
from clonelab.types import ReviewComment


def load_comments(path: Path) -> list[ReviewComment]:
    """Read a YAML list of {question_id, feedback, is_correct, feedback_visible}."""
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or []
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a list of comments")
    stamp = now_timestamp()
    comments = []
    for item in raw:
        if not isinstance(item, dict) or "question_id" not in item:
            raise ValueError(f"{path}: every comment needs a question_id")
        comment = ReviewComment.from_dict(item)
        comment.timestamp = comment.timestamp or stamp
        comments.append(comment)
    return comments


def cmd_review(
    student_id: str,
    clone_id: str,
    decision: str,
    cwd: str,
    comments_file: str | None = None,
    practice: bool = False,
):
    comments = None
    if comments_file:
        try:
            comments = load_comments(Path(cwd) / comments_file)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"Cannot read comments: {e}", file=sys.stderr)
            sys.exit(1)

    ref = make_ref(student_id, clone_id, practice)
    store = open_store(load_settings(cwd))
    try:
        desk = ReviewDesk(store)
        status = asyncio.run(desk.submit_review(ref, decision, comments))
        print(f'Review recorded for {ref.key}: "{status}"')
    except (CloneLabError, ValueError) as e:
        print(f"Review failed: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        store.close()
