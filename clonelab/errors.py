"""Exception types raised by the engine and stores."""
from __future__ import annotations


class CloneLabError(Exception):
    pass


class InvalidStatusError(CloneLabError):
    def __init__(self, status: object):
        self.status = status
        super().__init__(f'Invalid status: "{status}"')


class IllegalTransitionError(CloneLabError):
    def __init__(self, source: str | None, target: str):
        self.source = source
        self.target = target
        super().__init__(f'Cannot change status from "{source}" to "{target}"')


class QuestionBankError(CloneLabError):
    pass


class ProgressNotFoundError(CloneLabError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No progress record for clone {key}")
