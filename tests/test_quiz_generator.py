"""Tests for quiz generation (JSON extraction, validation, LLM orchestration)."""
from __future__ import annotations

import asyncio
import json
import random

import pytest

from cloze_quizzer.errors import (
    EmptyInputError,
    InsufficientContentError,
    MalformedResponseError,
    MisalignedResultError,
    SemanticallyEmptyResultError,
    ServiceError,
)
from cloze_quizzer.models import QuizResult, fill_blanks
from cloze_quizzer.quiz_generator import (
    _check_result,
    _strip_fences,
    extract_quiz,
    generate_quiz,
    generate_remote,
)
from tests.conftest import FailingLLM, FakeLLM


class SlowLLM(FakeLLM):
    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        self._call_count += 1
        await asyncio.sleep(5)
        return "{}"


class TestStripFences:
    def test_json_fence(self):
        assert _strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_bare_fence(self):
        assert _strip_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_surrounding_whitespace(self):
        assert _strip_fences('  \n```JSON\n{"a": 1}\n```  \n') == '{"a": 1}'

    def test_interior_fences_untouched(self):
        text = 'Here:\n```json\n{"a": 1}\n```\nDone.'
        assert _strip_fences(text) == text

    def test_no_fences(self):
        assert _strip_fences('{"a": 1}') == '{"a": 1}'


class TestExtractQuiz:
    def test_bare_json(self, mitochondria_quiz):
        result = extract_quiz(json.dumps(mitochondria_quiz))
        assert result.to_dict() == mitochondria_quiz

    def test_code_fence_json(self, fenced_response, mitochondria_quiz):
        assert extract_quiz(fenced_response).to_dict() == mitochondria_quiz

    def test_fence_with_prose_around(self, mitochondria_quiz):
        text = (
            "Sure! Here is your quiz:\n\n```json\n"
            + json.dumps(mitochondria_quiz, indent=2)
            + "\n```\n\nLet me know if you need anything else."
        )
        assert extract_quiz(text).to_dict() == mitochondria_quiz

    def test_json_with_surrounding_text(self, mitochondria_quiz):
        text = "The quiz: " + json.dumps(mitochondria_quiz) + " Hope that helps!"
        assert extract_quiz(text).to_dict() == mitochondria_quiz

    def test_braces_inside_quiz_text(self):
        quiz = {"quizText": "A set {x} holds [_____].", "answers": ["elements"]}
        text = "Answer: " + json.dumps(quiz)
        assert extract_quiz(text).to_dict() == quiz

    def test_no_braces(self):
        raw = "I'm sorry, I can't help with that."
        with pytest.raises(MalformedResponseError) as exc_info:
            extract_quiz(raw)
        assert exc_info.value.raw == raw

    def test_malformed_json(self):
        raw = 'Quiz: {"quizText": "The [_____].", "answers": ["cell"],, }'
        with pytest.raises(MalformedResponseError):
            extract_quiz(raw)

    def test_missing_quiz_text(self):
        with pytest.raises(MalformedResponseError):
            extract_quiz('{"text": "The [_____].", "answers": ["cell"]}')

    def test_answers_not_a_list(self):
        with pytest.raises(MalformedResponseError):
            extract_quiz('{"quizText": "The [_____].", "answers": "cell"}')

    def test_non_string_answers(self):
        with pytest.raises(MalformedResponseError):
            extract_quiz('{"quizText": "The [_____].", "answers": [1]}')

    def test_array_response_uses_inner_object(self):
        raw = '[{"quizText": "The [_____].", "answers": ["cell"]}]'
        assert extract_quiz(raw).answers == ["cell"]

    def test_empty_answers_still_parses(self):
        result = extract_quiz('{"quizText": "Nothing here.", "answers": []}')
        assert result.answers == []


class TestCheckResult:
    def test_valid(self):
        _check_result(QuizResult("The [_____].", ["cell"]))

    def test_empty_answers(self):
        with pytest.raises(SemanticallyEmptyResultError):
            _check_result(QuizResult("The [_____].", []))

    def test_no_blanks(self):
        with pytest.raises(SemanticallyEmptyResultError):
            _check_result(QuizResult("The cell.", ["cell"]))

    def test_count_mismatch(self):
        with pytest.raises(MisalignedResultError):
            _check_result(QuizResult("The [_____] and [_____].", ["cell"]))


class TestGenerateRemote:
    @pytest.mark.asyncio
    async def test_single_call_with_prompt(self, mitochondria_text):
        llm = FakeLLM(responses=["raw output"])
        out = await generate_remote(llm, mitochondria_text)
        assert out == "raw output"
        assert llm.call_count == 1
        assert mitochondria_text in llm.prompts[0]
        assert "[_____]" in llm.prompts[0]

    @pytest.mark.asyncio
    async def test_errors_propagate(self, mitochondria_text):
        llm = FailingLLM(ServiceError("HTTP 503", status_code=503))
        with pytest.raises(ServiceError):
            await generate_remote(llm, mitochondria_text)


class TestGenerateQuiz:
    @pytest.mark.asyncio
    async def test_remote_fenced_json(self, mitochondria_text, fenced_response, mitochondria_quiz):
        llm = FakeLLM(responses=[fenced_response])
        result = await generate_quiz(mitochondria_text, llm)
        assert result.to_dict() == mitochondria_quiz
        assert result.source == "remote"
        assert llm.call_count == 1

    @pytest.mark.asyncio
    async def test_transport_error_falls_back(self, mitochondria_text):
        llm = FailingLLM()
        result = await generate_quiz(mitochondria_text, llm, rng=random.Random(0))
        assert result.source == "offline"
        assert 1 <= len(result.answers) <= 3
        for answer in result.answers:
            assert answer.lower() in mitochondria_text.lower()
        assert llm.call_count == 1

    @pytest.mark.asyncio
    async def test_service_error_falls_back(self, mitochondria_text):
        llm = FailingLLM(ServiceError("HTTP 500", status_code=500))
        result = await generate_quiz(mitochondria_text, llm)
        assert result.answers == ["mitochondria", "powerhouse", "cell"]

    @pytest.mark.asyncio
    async def test_malformed_response_falls_back_without_retry(self, mitochondria_text):
        llm = FakeLLM(responses=["Not valid JSON"])
        result = await generate_quiz(mitochondria_text, llm)
        assert result.source == "offline"
        assert llm.call_count == 1

    @pytest.mark.asyncio
    async def test_empty_result_falls_back(self, mitochondria_text):
        llm = FakeLLM(responses=['{"quizText": "The mitochondria is the powerhouse of the cell.", "answers": []}'])
        result = await generate_quiz(mitochondria_text, llm)
        assert result.source == "offline"

    @pytest.mark.asyncio
    async def test_misaligned_result_falls_back(self, mitochondria_text):
        llm = FakeLLM(responses=[json.dumps({
            "quizText": "The [_____] is the [_____] of the cell.",
            "answers": ["mitochondria"],
        })])
        result = await generate_quiz(mitochondria_text, llm)
        assert result.source == "offline"
        assert result.blank_count == len(result.answers)

    @pytest.mark.asyncio
    async def test_single_blank_accepted(self, mitochondria_text):
        quiz = {"quizText": "The [_____] is the powerhouse of the cell.", "answers": ["mitochondria"]}
        llm = FakeLLM(responses=[json.dumps(quiz)])
        result = await generate_quiz(mitochondria_text, llm)
        assert result.to_dict() == quiz
        assert result.source == "remote"

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, mitochondria_text):
        llm = SlowLLM()
        result = await generate_quiz(mitochondria_text, llm, timeout=0.05)
        assert result.source == "offline"
        assert llm.call_count == 1

    @pytest.mark.asyncio
    async def test_no_llm_goes_offline(self, long_text):
        result = await generate_quiz(long_text, None, rng=random.Random(7))
        assert result.source == "offline"
        assert fill_blanks(result.quiz_text, result.answers) == long_text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t ", None])
    async def test_empty_input(self, text):
        llm = FakeLLM(responses=["{}"])
        with pytest.raises(EmptyInputError):
            await generate_quiz(text, llm)
        assert llm.call_count == 0

    @pytest.mark.asyncio
    async def test_both_strategies_fail(self):
        llm = FailingLLM()
        with pytest.raises(InsufficientContentError):
            await generate_quiz("a an the is", llm)
        assert llm.call_count == 1

    @pytest.mark.asyncio
    async def test_custom_stop_words_reach_fallback(self):
        llm = FailingLLM()
        result = await generate_quiz(
            "Quantum physics rocks.", llm, stop_words=frozenset({"quantum", "physics"}),
        )
        assert result.answers == ["rocks"]
