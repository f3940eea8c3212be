"""Translation between application messages and chat-completions turns.

The gateway is strict about ordering: every ``tool`` turn must answer a
``tool_calls`` entry introduced by an earlier assistant turn, assistant turns
need text or tool calls, and the final turn must come from the user or a tool.
"""

from __future__ import annotations

import json
import logging
import secrets
import string
from typing import Any

from namer.errors import ProtocolError
from namer.models import LLMToolCall, Message, Role

LOGGER = logging.getLogger(__name__)

TOOL_CALL_ID_LENGTH = 9
_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_tool_call_id() -> str:
    """Return an id accepted by the gateway: exactly 9 characters of [a-z0-9]."""

    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(TOOL_CALL_ID_LENGTH))


def to_gateway_format(messages: list[Message], system_instruction: str | None = None) -> list[dict[str, Any]]:
    """Map internal messages to the ordered turns the gateway expects."""

    turns: list[dict[str, Any]] = []
    if system_instruction and system_instruction.strip():
        turns.append({"role": "system", "content": system_instruction.strip()})

    introduced_ids: set[str] = set()
    for message in messages or []:
        if message.is_error or message.is_pending or message.role is Role.SYSTEM:
            continue

        if message.role is Role.USER:
            content = (message.text or "").strip()
            if content:
                turns.append({"role": "user", "content": content})
            continue

        if message.tool_calls:
            turns.append(
                {
                    "role": "assistant",
                    "content": message.text or "",
                    "tool_calls": [
                        {
                            "id": call.id,
                            "type": "function",
                            "function": {"name": call.name, "arguments": json.dumps(call.arguments or {})},
                        }
                        for call in message.tool_calls
                    ],
                }
            )
            introduced_ids.update(call.id for call in message.tool_calls)
        elif (message.text or "").strip():
            turns.append({"role": "assistant", "content": message.text.strip()})

        for result in message.tool_results:
            if result.id not in introduced_ids:
                LOGGER.debug("Dropping orphaned tool result %s", result.id)
                continue
            turns.append(
                {
                    "role": "tool",
                    "tool_call_id": result.id,
                    "name": result.name,
                    "content": json.dumps(result.payload()),
                }
            )

    while turns and turns[-1]["role"] == "assistant":
        turns.pop()
    return turns


def validate_turns(turns: list[dict[str, Any]]) -> None:
    """Raise ProtocolError when the sequence cannot be sent to the gateway."""

    conversational = [t for t in turns if t.get("role") != "system"]
    if not conversational:
        raise ProtocolError("No messages to send after filtering the conversation")
    last_role = conversational[-1].get("role")
    if last_role not in ("user", "tool"):
        raise ProtocolError(f"Last turn must come from the user or a tool, got {last_role!r}")


def parse_tool_calls(raw_calls: list[dict[str, Any]] | None) -> list[LLMToolCall]:
    """Rebuild tool calls from a gateway response, skipping malformed entries."""

    parsed: list[LLMToolCall] = []
    for raw in raw_calls or []:
        if not isinstance(raw, dict) or raw.get("type", "function") != "function":
            continue
        function_data = raw.get("function") or {}
        call_id = str(raw.get("id") or "")
        name = str(function_data.get("name") or "")
        if not call_id or not name:
            continue
        parsed.append(
            LLMToolCall(
                name=name,
                arguments=_safe_json_loads(function_data.get("arguments")),
                call_id=call_id,
            )
        )
    return parsed


def _safe_json_loads(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return {}
    return parsed if isinstance(parsed, dict) else {}
