"""Offline quiz generation: blank out random salient words without any LLM."""
from __future__ import annotations

import logging
import random
import re
from collections.abc import Iterator

from cloze_quizzer.errors import InsufficientContentError
from cloze_quizzer.models import BLANK_MARKER, QuizResult, WordCandidate
from cloze_quizzer.stopwords import STOP_WORDS

_log = logging.getLogger("cloze_quizzer.fallback")

MIN_BLANKS = 5
MAX_BLANKS = 10
MIN_WORD_LENGTH = 3
WORDS_PER_BLANK = 5

_NON_LETTER = re.compile(r"[^a-z\s]")
_TOKEN = re.compile(r"\S+")


def _normalize(token: str) -> str:
    return _NON_LETTER.sub("", token.lower())


def word_candidates(text: str) -> Iterator[WordCandidate]:
    """Yield every whitespace-delimited token of *text* with its comparison key.

    Tokens made only of punctuation or digits get an empty key.
    """
    for m in _TOKEN.finditer(text):
        yield WordCandidate(key=_normalize(m.group(0)), surface=m.group(0), position=m.start())


def candidate_words(text: str, stop_words: frozenset[str] = STOP_WORDS) -> set[str]:
    """Distinct candidate keys: at least three letters and not a stop word."""
    return {
        c.key for c in word_candidates(text)
        if len(c.key) >= MIN_WORD_LENGTH and c.key not in stop_words
    }


def blank_count_for(unique_count: int) -> int:
    """Number of blanks to aim for, one per five candidates, clamped to 5-10."""
    return max(MIN_BLANKS, min(MAX_BLANKS, unique_count // WORDS_PER_BLANK))


def build_pattern(words: list[str]) -> re.Pattern:
    """Match any of *words* starting at a word boundary and not followed by a letter.

    The right side is looser than ``\\b``: "energy" must match in
    "energy," and "energy." but never inside "energetic". Any Unicode
    letter counts, so "caf" never matches inside "café".
    """
    # Longest first, then alphabetical
    ordered = sorted(words, key=lambda w: (-len(w), w))
    alternation = "|".join(re.escape(w) for w in ordered)
    return re.compile(rf"\b(?:{alternation})(?![^\W\d_])", re.IGNORECASE)


def generate_offline(
    text: str,
    stop_words: frozenset[str] = STOP_WORDS,
    rng: random.Random | None = None,
) -> QuizResult:
    """Build a quiz from *text* alone.

    Picks random candidate words, then blanks every whole-word occurrence in
    one left-to-right pass. Answers come from that pass, so they always line
    up with the blanks and keep the original casing.

    Raises ``InsufficientContentError`` when there is nothing to blank, or
    when *text* already contains the blank marker.
    """
    if BLANK_MARKER in text:
        # Blanks and answers must stay one-to-one
        raise InsufficientContentError(f"Text already contains the blank marker {BLANK_MARKER}")
    if rng is None:
        rng = random.Random()

    unique = candidate_words(text, stop_words)
    if not unique:
        raise InsufficientContentError("No candidate words found in the text")

    k = min(blank_count_for(len(unique)), len(unique))
    # sorted() so that a seeded rng picks the same words in every process
    selected = rng.sample(sorted(unique), k)
    _log.info("Fallback: %d candidates, selecting %d", len(unique), k)

    answers: list[str] = []

    def _blank(m: re.Match) -> str:
        answers.append(m.group(0))
        return BLANK_MARKER

    quiz_text = build_pattern(selected).sub(_blank, text)

    if not answers:
        raise InsufficientContentError(
            f"None of the selected words could be matched in the text: {', '.join(sorted(selected))}"
        )

    return QuizResult(quiz_text=quiz_text, answers=answers, source="offline")
