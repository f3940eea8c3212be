"""One model round-trip: translate history, call the provider, read tool calls."""

from __future__ import annotations

import logging
from typing import Sequence

from namer.domain_tooling import should_auto_call_domain_tool
from namer.history import generate_tool_call_id, to_gateway_format, validate_turns
from namer.llm.base import LLMProvider
from namer.models import AVAILABLE_TLDS, CHECK_DOMAINS_TOOL, ChatReply, Message, ToolInvocation
from namer.tools.registry import ToolRegistry

LOGGER = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.9
RETRY_TEMPERATURE = 0.3
RETRY_TOOL_CHOICE = "any"


class ChatGateway:
    """Server side of the chat endpoint: messages + system instruction in, text + calls out."""

    def __init__(
        self,
        llm: LLMProvider,
        tool_registry: ToolRegistry,
        tld_universe: Sequence[str] = AVAILABLE_TLDS,
    ) -> None:
        self._llm = llm
        self._tool_registry = tool_registry
        self._tld_universe = tuple(tld_universe)

    async def send(
        self,
        messages: list[Message],
        system_instruction: str | None = None,
        auto_tool_call: bool = True,
    ) -> ChatReply:
        """Run one round-trip.

        Raises ProtocolError before contacting the model when the history
        translates to an invalid turn sequence. An empty reply without tool
        calls is retried once with forced tool use and a lower temperature.
        """
        turns = to_gateway_format(messages, system_instruction)
        validate_turns(turns)
        tools = self._tool_registry.list_tool_specs()

        response = await self._llm.generate(turns, tools=tools, tool_choice="auto", temperature=DEFAULT_TEMPERATURE)
        if not response.content.strip() and not response.tool_calls:
            LOGGER.warning("Empty model reply without tool calls; retrying with tool_choice=%r", RETRY_TOOL_CHOICE)
            response = await self._llm.generate(
                turns,
                tools=tools,
                tool_choice=RETRY_TOOL_CHOICE,
                temperature=RETRY_TEMPERATURE,
            )

        calls = [
            ToolInvocation(id=tc.call_id or generate_tool_call_id(), name=tc.name, arguments=tc.arguments)
            for tc in response.tool_calls
        ]
        if not calls and auto_tool_call:
            request = should_auto_call_domain_tool(messages, response.content, self._tld_universe)
            if request is not None and request.names:
                LOGGER.info("Model skipped the tool call; synthesizing checkDomains for %s", request.names)
                calls.append(
                    ToolInvocation(
                        id=generate_tool_call_id(),
                        name=CHECK_DOMAINS_TOOL,
                        arguments=request.as_arguments(),
                    )
                )
        return ChatReply(text=response.content, function_calls=calls)
