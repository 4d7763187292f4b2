"""Errors raised while generating a quiz.

Only ``EmptyInputError`` and ``InsufficientContentError`` ever reach the
caller of ``generate_quiz``; everything under ``RemoteError``,
``MalformedResponseError`` and ``SemanticallyEmptyResultError`` is caught
by the orchestrator and turned into an offline attempt.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cloze_quizzer.models import QuizResult


class QuizError(Exception):
    pass


class EmptyInputError(QuizError):
    def __init__(self, message: str = "No text provided"):
        super().__init__(message)


class RemoteError(QuizError):
    pass


class TransportError(RemoteError):
    """The generation service could not be reached."""


class ServiceError(RemoteError):
    """The generation service answered with a failure status or an unusable body."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(QuizError):
    def __init__(self, message: str, raw: str):
        super().__init__(message)
        self.raw = raw


class SemanticallyEmptyResultError(QuizError):
    def __init__(self, message: str, result: QuizResult):
        super().__init__(message)
        self.result = result


class MisalignedResultError(SemanticallyEmptyResultError):
    """Blank markers and answers disagree in number."""


class InsufficientContentError(QuizError):
    pass
