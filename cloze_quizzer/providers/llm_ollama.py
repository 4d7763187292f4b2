from __future__ import annotations

import logging
import time

import httpx

from cloze_quizzer.errors import ServiceError, TransportError
from cloze_quizzer.providers.base import LLMProvider

log = logging.getLogger("cloze_quizzer.llm")


class OllamaProvider(LLMProvider):
    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "qwen3:8b",
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._transport = transport

    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        log.info("── PROMPT (%s) ──\n%s", self.model, prompt)
        t0 = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=120.0, transport=self._transport) as client:
                resp = await client.post(
                    f"{self.base_url}/api/generate",
                    json={
                        "model": self.model,
                        "prompt": prompt,
                        "temperature": temperature,
                        "stream": False,
                        "think": False,
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            raise ServiceError(
                f"Ollama returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise TransportError(f"Ollama unreachable at {self.base_url}: {e}") from e
        except ValueError as e:
            raise ServiceError(f"Ollama returned a non-JSON body: {e}") from e

        response = data.get("response")
        if not isinstance(response, str):
            raise ServiceError("Ollama response has no 'response' text")
        elapsed = time.monotonic() - t0
        tokens = data.get("eval_count", "?")
        log.info("── RESPONSE (%.1fs, %s tokens) ──\n%s", elapsed, tokens, response)
        return response

    def name(self) -> str:
        return f"ollama/{self.model}"
