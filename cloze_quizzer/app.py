"""FastAPI application with all routes."""
from __future__ import annotations

import logging

logging.basicConfig(level=logging.INFO, format="%(name)s | %(message)s")

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cloze_quizzer.config import Settings, load_settings
from cloze_quizzer.errors import EmptyInputError, InsufficientContentError
from cloze_quizzer.models import check_answers, score_answers
from cloze_quizzer.quiz_generator import generate_quiz
from cloze_quizzer.stopwords import load_stop_words

app = FastAPI(title="Cloze Quizzer")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

_log = logging.getLogger("cloze_quizzer.api")

# Global state (initialized in startup)
_settings: Settings | None = None
_stop_words: frozenset[str] | None = None


def get_settings() -> Settings:
    assert _settings is not None
    return _settings


def get_stop_words() -> frozenset[str]:
    assert _stop_words is not None
    return _stop_words


def _get_llm(settings: Settings | None = None):
    s = settings or get_settings()
    if s.llm_provider == "offline":
        return None
    elif s.llm_provider == "gemini":
        from cloze_quizzer.providers.llm_gemini import GeminiProvider
        return GeminiProvider(model=s.llm_model)
    elif s.llm_provider == "ollama":
        from cloze_quizzer.providers.llm_ollama import OllamaProvider
        return OllamaProvider(base_url=s.ollama_url, model=s.llm_model)
    elif s.llm_provider == "anthropic":
        from cloze_quizzer.providers.llm_anthropic import AnthropicProvider
        return AnthropicProvider()
    elif s.llm_provider == "openai":
        from cloze_quizzer.providers.llm_openai import OpenAIProvider
        return OpenAIProvider()
    raise ValueError(f"Unknown LLM provider: {s.llm_provider}")


def _error(status: int, error: str, details: str | None = None) -> JSONResponse:
    body = {"error": error}
    if details:
        body["details"] = details
    return JSONResponse(body, status_code=status)


async def _json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@app.on_event("startup")
async def startup():
    global _settings, _stop_words
    if _settings is not None:
        return  # Already initialized (e.g. by tests)
    _settings = load_settings()
    _stop_words = load_stop_words(_settings.stop_words_path)
    _log.info("Provider: %s, %d stop words", _settings.llm_provider, len(_stop_words))


# ── API: Generate quiz ────────────────────────────────────────────────────

@app.post("/generate-quiz")
async def api_generate_quiz(request: Request):
    body = await _json_body(request)
    text = body.get("textToQuiz")
    if not isinstance(text, str):
        return _error(400, "No text provided")

    s = get_settings()
    try:
        result = await generate_quiz(
            text,
            _get_llm(),
            stop_words=get_stop_words(),
            timeout=s.timeout,
            temperature=s.temperature,
        )
    except EmptyInputError:
        return _error(400, "No text provided")
    except InsufficientContentError as e:
        _log.warning("Quiz generation failed: %s", e)
        return _error(422, "Could not generate a quiz from this text", str(e))

    _log.info("Quiz ready (%s, %d blanks)", result.source, len(result.answers))
    return result.to_dict()


# ── API: Check answers ────────────────────────────────────────────────────

@app.post("/check-answers")
async def api_check_answers(request: Request):
    body = await _json_body(request)
    answers = body.get("answers")
    responses = body.get("responses", [])
    if not isinstance(answers, list) or not all(isinstance(a, str) for a in answers):
        return _error(400, "'answers' must be a list of strings")
    if not isinstance(responses, list):
        return _error(400, "'responses' must be a list")

    responses = [r if isinstance(r, str) else None for r in responses]
    correct = check_answers(answers, responses)
    return {
        "score": score_answers(answers, responses),
        "total": len(answers),
        "correct": correct,
    }


# ── API: Settings ─────────────────────────────────────────────────────────

@app.get("/api/settings")
async def api_get_settings():
    return get_settings().to_dict()
