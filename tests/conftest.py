"""Shared test fixtures."""
from __future__ import annotations

import json

import pytest

from cloze_quizzer.errors import TransportError

MITOCHONDRIA_TEXT = "The mitochondria is the powerhouse of the cell."


class FakeLLM:
    """Simple fake LLM that avoids AsyncMock's `name` attribute issue."""

    def __init__(self, responses=None):
        self._responses = responses or []
        self._call_count = 0
        self.prompts: list[str] = []

    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        self.prompts.append(prompt)
        idx = min(self._call_count, len(self._responses) - 1)
        self._call_count += 1
        return self._responses[idx]

    def name(self) -> str:
        return "fake-llm"

    @property
    def call_count(self):
        return self._call_count


class FailingLLM(FakeLLM):
    """Fake LLM whose every call raises the given error."""

    def __init__(self, error: Exception | None = None):
        super().__init__()
        self._error = error or TransportError("connection refused")

    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        self._call_count += 1
        raise self._error


@pytest.fixture
def mitochondria_text():
    return MITOCHONDRIA_TEXT


@pytest.fixture
def mitochondria_quiz():
    """The quiz an LLM should produce for the mitochondria sentence."""
    return {
        "quizText": "The [_____] is the [_____] of the [_____].",
        "answers": ["mitochondria", "powerhouse", "cell"],
    }


@pytest.fixture
def fenced_response(mitochondria_quiz):
    return "```json\n" + json.dumps(mitochondria_quiz) + "\n```"


@pytest.fixture
def long_text():
    """A paragraph with plenty of candidate words."""
    return (
        "Photosynthesis is the process by which green plants convert light energy "
        "into chemical energy. Chlorophyll, the pigment found in chloroplasts, absorbs "
        "sunlight most strongly in the blue and red wavelengths. During the light-dependent "
        "reactions, water molecules are split, releasing oxygen as a byproduct. The Calvin "
        "cycle then uses carbon dioxide from the atmosphere, together with ATP and NADPH, "
        "to build glucose. Energetic electrons travel along the thylakoid membrane, "
        "pumping protons and driving the synthesis of ATP. Without photosynthesis, "
        "nearly every food chain on Earth would collapse."
    )
