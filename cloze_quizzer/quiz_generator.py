"""Generate a fill-in-the-blank quiz: LLM first, offline fallback second."""
from __future__ import annotations

import asyncio
import json
import logging
import random
import re
from typing import TYPE_CHECKING

from cloze_quizzer.errors import (
    EmptyInputError,
    MalformedResponseError,
    MisalignedResultError,
    RemoteError,
    SemanticallyEmptyResultError,
)
from cloze_quizzer.fallback import generate_offline
from cloze_quizzer.models import QuizResult
from cloze_quizzer.prompts import build_quiz_prompt
from cloze_quizzer.stopwords import STOP_WORDS

if TYPE_CHECKING:
    from cloze_quizzer.providers.base import LLMProvider

_log = logging.getLogger("cloze_quizzer.qgen")

_LEADING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")


async def generate_remote(llm: LLMProvider, text: str, temperature: float = 0.7) -> str:
    """Ask the LLM for a quiz and return its raw answer.

    One call, no retries. ``TransportError`` / ``ServiceError`` from the
    provider propagate unchanged.
    """
    prompt = build_quiz_prompt(text)
    return await llm.generate(prompt, temperature=temperature)


def _strip_fences(text: str) -> str:
    """Trim, then drop a code fence at the very start and one at the very end."""
    text = text.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def _shape_error(data: object) -> str | None:
    """Return ``None`` if *data* looks like a quiz, or a reason string."""
    if not isinstance(data, dict):
        return f"expected a JSON object, got {type(data).__name__}"
    if not isinstance(data.get("quizText"), str):
        return "'quizText' missing or not a string"
    answers = data.get("answers")
    if not isinstance(answers, list):
        return "'answers' missing or not an array"
    if not all(isinstance(a, str) for a in answers):
        return "'answers' contains non-string items"
    return None


def extract_quiz(raw: str) -> QuizResult:
    """Recover ``{quizText, answers}`` from free-form LLM output.

    Tries the whole fence-stripped text as JSON, then the greedy span from
    the first ``{`` to the last ``}``. Raises ``MalformedResponseError``
    (carrying *raw*) when neither yields a quiz-shaped object.
    """
    cleaned = _strip_fences(raw)

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        reason = f"not valid JSON: {e}"
    else:
        reason = _shape_error(data)
        if reason is None:
            return QuizResult(quiz_text=data["quizText"], answers=data["answers"])

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end < start:
        raise MalformedResponseError(f"no JSON object in response ({reason})", raw)

    try:
        data = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"extracted JSON is invalid: {e}", raw) from e
    reason = _shape_error(data)
    if reason:
        raise MalformedResponseError(f"unexpected JSON shape: {reason}", raw)
    return QuizResult(quiz_text=data["quizText"], answers=data["answers"])


def _check_result(result: QuizResult) -> None:
    """Reject results that parse but cannot be used as a quiz."""
    if not result.answers:
        raise SemanticallyEmptyResultError("no answers", result)
    blanks = result.blank_count
    if blanks == 0:
        raise SemanticallyEmptyResultError("quizText contains no blanks", result)
    if blanks != len(result.answers):
        raise MisalignedResultError(
            f"{blanks} blanks but {len(result.answers)} answers", result,
        )


async def _remote_quiz(llm: LLMProvider, text: str, temperature: float) -> QuizResult:
    response = await generate_remote(llm, text, temperature=temperature)
    result = extract_quiz(response)
    _check_result(result)
    return result


async def generate_quiz(
    text: str | None,
    llm: LLMProvider | None,
    stop_words: frozenset[str] = STOP_WORDS,
    rng: random.Random | None = None,
    timeout: float | None = None,
    temperature: float = 0.7,
) -> QuizResult:
    """Turn *text* into a quiz.

    With an *llm*, asks it once and falls back to the offline generator on
    any remote, parsing or validation failure. Without one, goes straight
    to the offline generator. *timeout* (seconds) bounds the remote call
    and extraction together.

    Raises ``EmptyInputError`` for blank input and
    ``InsufficientContentError`` when the offline generator finds nothing.
    """
    if text is None or not text.strip():
        raise EmptyInputError()

    if llm is None:
        _log.info("No LLM configured — generating offline")
    else:
        _log.info("Generate quiz with %s (%d chars)", llm.name(), len(text))
        try:
            result = await asyncio.wait_for(_remote_quiz(llm, text, temperature), timeout)
        except RemoteError as e:
            _log.warning("Remote generation failed: %s — falling back", e)
        except asyncio.TimeoutError:
            _log.warning("Remote generation timed out after %ss — falling back", timeout)
        except MalformedResponseError as e:
            _log.warning("Could not extract a quiz: %s — falling back", e)
            _log.debug("  Raw response: %.300s", e.raw)
        except SemanticallyEmptyResultError as e:
            _log.warning("Unusable quiz from LLM: %s — falling back", e)
        else:
            _log.info("  Remote OK — %d blanks", len(result.answers))
            return result

    result = generate_offline(text, stop_words=stop_words, rng=rng)
    _log.info("  Offline OK — %d blanks", len(result.answers))
    return result
