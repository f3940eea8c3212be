"""Mistral implementation of LLMProvider."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from namer.config import Settings
from namer.errors import ConfigurationError, GatewayError
from namer.history import parse_tool_calls
from namer.llm.base import LLMProvider
from namer.models import LLMResponse

_LOGGER = logging.getLogger(__name__)

_DEFAULT_MODEL = "mistral-small-latest"


class MistralProvider(LLMProvider):
    """LLM provider using Mistral's chat completions endpoint.

    Any non-2xx response, rate limits included, is raised as a GatewayError
    so the caller's round and wall-time budgets stay in control.
    """

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def generate(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        tool_choice: str = "auto",
        temperature: float | None = None,
    ) -> LLMResponse:
        api_key = self._settings.mistral_api_key
        if not api_key:
            raise ConfigurationError("Server configuration error: Missing MISTRAL_API_KEY")

        payload: dict[str, Any] = {
            "model": self._settings.mistral_model or _DEFAULT_MODEL,
            "messages": messages,
        }
        if tools:
            payload["tools"] = tools
            payload["tool_choice"] = tool_choice
        if temperature is not None:
            payload["temperature"] = temperature

        timeout = httpx.Timeout(self._settings.request_timeout_seconds)
        async with httpx.AsyncClient(base_url=self._settings.mistral_base_url, timeout=timeout) as client:
            response = await client.post(
                "/chat/completions",
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                json=payload,
            )
            if response.status_code >= 400:
                _LOGGER.warning("Mistral returned %d", response.status_code)
                raise GatewayError(response.status_code, _error_message(response))
            data = response.json()

        choice = _first_choice(data)
        choice_message = choice["message"]
        content = choice_message.get("content") or ""
        _LOGGER.info(
            "LLM response: finish_reason=%r content=%r tool_calls=%d",
            choice.get("finish_reason"),
            content[:200],
            len(choice_message.get("tool_calls") or []),
        )

        return LLMResponse(content=content, tool_calls=parse_tool_calls(choice_message.get("tool_calls")), raw=data)


def _first_choice(data: Any) -> dict[str, Any]:
    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list) or not choices:
        raise GatewayError(502, "Mistral API returned no choices")
    choice = choices[0]
    if not isinstance(choice, dict) or not isinstance(choice.get("message"), dict):
        raise GatewayError(502, "Mistral API returned a malformed choice")
    return choice


def _error_message(response: httpx.Response) -> str:
    if response.status_code in (401, 403):
        return "Mistral authentication failed. Check MISTRAL_API_KEY."
    return f"Mistral API error ({response.status_code}). {response.text or ''}".strip()
