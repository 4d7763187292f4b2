from __future__ import annotations

import os

from cloze_quizzer.errors import ServiceError, TransportError
from cloze_quizzer.providers.base import LLMProvider


class AnthropicProvider(LLMProvider):
    def __init__(self, model: str = "claude-sonnet-4-20250514"):
        import anthropic
        self._anthropic = anthropic
        self.client = None  # created on first generate()
        self.model = model

    def _get_client(self):
        if self.client is None:
            api_key = os.environ.get("ANTHROPIC_API_KEY")
            if not api_key:
                raise ServiceError("ANTHROPIC_API_KEY not set")
            self.client = self._anthropic.AsyncAnthropic(api_key=api_key)
        return self.client

    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        anthropic = self._anthropic
        try:
            message = await self._get_client().messages.create(
                model=self.model,
                max_tokens=2048,
                temperature=temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIConnectionError as e:
            raise TransportError(f"Anthropic unreachable: {e}") from e
        except anthropic.APIStatusError as e:
            raise ServiceError(f"Anthropic returned HTTP {e.status_code}", status_code=e.status_code) from e
        except anthropic.AnthropicError as e:
            raise ServiceError(f"Anthropic client error: {e}") from e
        return "".join(block.text for block in message.content if block.type == "text")

    def name(self) -> str:
        return f"anthropic/{self.model}"
