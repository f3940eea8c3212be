"""LLM provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from namer.models import LLMResponse


class LLMProvider(ABC):
    """Abstract chat-completions backend used by the chat gateway."""

    @abstractmethod
    async def generate(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str = "auto",
        temperature: float | None = None,
    ) -> LLMResponse:
        """Generate a model response."""
