from __future__ import annotations

from dataclasses import dataclass, field

BLANK_MARKER = "[_____]"


@dataclass
class QuizResult:
    quiz_text: str
    answers: list[str] = field(default_factory=list)
    source: str = "remote"  # remote | offline

    @property
    def blank_count(self) -> int:
        return self.quiz_text.count(BLANK_MARKER)

    def to_dict(self) -> dict:
        return {
            "quizText": self.quiz_text,
            "answers": list(self.answers),
        }


@dataclass(frozen=True)
class WordCandidate:
    key: str  # lowercase, a-z only
    surface: str
    position: int


def split_quiz(quiz_text: str) -> list[str]:
    """Split quiz text into the segments around each blank.

    "The [_____] is the [_____]." -> ["The ", " is the ", "."]
    """
    return quiz_text.split(BLANK_MARKER)


def fill_blanks(quiz_text: str, answers: list[str]) -> str:
    """Put answers back into the blanks, left to right."""
    parts = split_quiz(quiz_text)
    out = [parts[0]]
    for i, part in enumerate(parts[1:]):
        out.append(answers[i] if i < len(answers) else BLANK_MARKER)
        out.append(part)
    return "".join(out)


def check_answers(answers: list[str], responses: list[str | None]) -> list[bool]:
    """Per-blank correctness: trimmed, case-insensitive exact match."""
    results = []
    for i, correct in enumerate(answers):
        given = responses[i] if i < len(responses) else None
        results.append((given or "").strip().lower() == correct.lower())
    return results


def score_answers(answers: list[str], responses: list[str | None]) -> int:
    return sum(check_answers(answers, responses))
