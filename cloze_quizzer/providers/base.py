from __future__ import annotations

from abc import ABC, abstractmethod


class LLMProvider(ABC):
    """A text-generation service: submit a prompt, receive text.

    Implementations raise ``TransportError`` when the service cannot be
    reached and ``ServiceError`` when it answers with a failure.
    """

    @abstractmethod
    async def generate(self, prompt: str, temperature: float = 0.7) -> str:
        ...

    @abstractmethod
    def name(self) -> str:
        ...
