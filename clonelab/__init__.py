"""clonelab: clone analysis workflow engine for DNA sequence coursework."""
from __future__ import annotations

from clonelab.statuses import Status, metadata_for
from clonelab.types import CloneRef, ProgressRecord, Question, ReviewComment

__all__ = ["CloneRef", "ProgressRecord", "Question", "ReviewComment", "Status", "metadata_for"]
