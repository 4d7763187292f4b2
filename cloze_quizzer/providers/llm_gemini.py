from __future__ import annotations

import logging
import os
import time

import httpx

from cloze_quizzer.errors import ServiceError, TransportError
from cloze_quizzer.providers.base import LLMProvider

log = logging.getLogger("cloze_quizzer.llm")

GEMINI_API_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider(LLMProvider):
    """Google Gemini through the Generative Language REST API."""

    def __init__(
        self,
        model: str = "gemini-2.0-flash",
        api_key: str | None = None,
        base_url: str = GEMINI_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.model = model
        self.api_key = api_key if api_key is not None else os.environ.get("GEMINI_API_KEY", "")
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        if not self.api_key:
            raise ServiceError("GEMINI_API_KEY not set")
        log.info("── PROMPT (%s) ──\n%s", self.model, prompt)
        t0 = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=120.0, transport=self._transport) as client:
                resp = await client.post(
                    f"{self.base_url}/models/{self.model}:generateContent",
                    headers={"x-goog-api-key": self.api_key},
                    json={
                        "contents": [{"parts": [{"text": prompt}]}],
                        "generationConfig": {"temperature": temperature},
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ServiceError(
                f"Gemini returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise TransportError(f"Gemini unreachable: {e}") from e
        except ValueError as e:
            raise ServiceError(f"Gemini returned a non-JSON body: {e}") from e

        try:
            parts = data["candidates"][0]["content"]["parts"]
        except (KeyError, IndexError, TypeError) as e:
            # Blocked prompts come back with no candidates
            reason = data.get("promptFeedback", {}).get("blockReason") if isinstance(data, dict) else None
            raise ServiceError(f"Gemini response has no candidates (block reason: {reason})") from e
        response = "".join(p.get("text", "") for p in parts if isinstance(p, dict))

        elapsed = time.monotonic() - t0
        log.info("── RESPONSE (%.1fs) ──\n%s", elapsed, response)
        return response

    def name(self) -> str:
        return f"gemini/{self.model}"
