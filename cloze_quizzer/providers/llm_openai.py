from __future__ import annotations

import os

from cloze_quizzer.errors import ServiceError, TransportError
from cloze_quizzer.providers.base import LLMProvider


class OpenAIProvider(LLMProvider):
    def __init__(self, model: str = "gpt-4o-mini"):
        import openai
        self._openai = openai
        self.client = None  # created on first generate()
        self.model = model

    def _get_client(self):
        if self.client is None:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise ServiceError("OPENAI_API_KEY not set")
            self.client = self._openai.AsyncOpenAI(api_key=api_key)
        return self.client

    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        openai = self._openai
        try:
            resp = await self._get_client().chat.completions.create(
                model=self.model,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APIConnectionError as e:
            raise TransportError(f"OpenAI unreachable: {e}") from e
        except openai.APIStatusError as e:
            raise ServiceError(f"OpenAI returned HTTP {e.status_code}", status_code=e.status_code) from e
        except openai.OpenAIError as e:
            raise ServiceError(f"OpenAI client error: {e}") from e
        return resp.choices[0].message.content or ""

    def name(self) -> str:
        return f"openai/{self.model}"
