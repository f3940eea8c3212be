"""Per-user chat session."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from namer.brainstorm import (
    DEFAULT_TARGET_COUNT,
    BrainstormEngine,
    BrainstormRequest,
    compose_brainstorm_reply,
)
from namer.chat import ChatGateway
from namer.domain_tooling import as_str_list, extract_domain_request
from namer.errors import NamerError
from namer.intent import Mode, TldConstraint, interpret_turn, is_probably_french
from namer.models import CHECK_DOMAINS_TOOL, Message, Role, ToolDisplayMode, ToolInvocation, ToolResult
from namer.prompts import ERROR_MESSAGE, PENDING_MESSAGE, SYSTEM_INSTRUCTION, WELCOME_MESSAGE
from namer.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from namer.commands import CommandDispatcher

LOGGER = logging.getLogger(__name__)


class ChatSession:
    """One user's conversation: routes each utterance to CHECK or BRAINSTORM."""

    def __init__(
        self,
        gateway: ChatGateway,
        tool_registry: ToolRegistry,
        engine: BrainstormEngine,
        selected_tlds: list[str],
        system_prompt: str = SYSTEM_INSTRUCTION,
        command_dispatcher: CommandDispatcher | None = None,
    ) -> None:
        self._gateway = gateway
        self._tool_registry = tool_registry
        self._engine = engine
        self._system_prompt = system_prompt
        self._command_dispatcher = command_dispatcher
        self.selected_tlds = list(selected_tlds)
        self.messages: list[Message] = []
        self.reset()

    @property
    def last_mode(self) -> Mode:
        return self._last_mode

    @property
    def last_constraint(self) -> TldConstraint | None:
        return self._last_constraint

    def reset(self) -> None:
        self.messages = [Message(role=Role.ASSISTANT, text=WELCOME_MESSAGE, id="init")]
        self._last_mode = Mode.BRAINSTORM
        self._last_constraint: TldConstraint | None = None

    async def handle_message(self, text: str) -> Message:
        """Handle one user utterance and return the assistant message it produced."""

        text = (text or "").strip()
        if self._command_dispatcher and text.startswith("@"):
            cmd_reply = await self._command_dispatcher.dispatch(text, self)
            if cmd_reply is not None:
                return Message(role=Role.ASSISTANT, text=cmd_reply)

        intent = interpret_turn(text, self._last_mode, self._last_constraint)
        self._last_mode = intent.mode
        LOGGER.info("User message mode=%s text=%r", intent.mode.value, text[:80])

        user_message = Message(role=Role.USER, text=text)
        self.messages.append(user_message)

        pending: Message | None = None
        if intent.mode is Mode.BRAINSTORM:
            pending = Message(
                role=Role.ASSISTANT,
                text=PENDING_MESSAGE,
                is_pending=True,
                tool_display_mode=ToolDisplayMode.AVAILABLE_ONLY,
            )
            self.messages.append(pending)

        try:
            if intent.mode is Mode.CHECK:
                self._last_constraint = None
                reply = await self._run_check(text)
            else:
                self._last_constraint = intent.constraint
                requested = intent.requested_count
                outcome = await self._engine.run(
                    BrainstormRequest(
                        history=[m for m in self.messages if m is not pending],
                        selected_tlds=self.selected_tlds,
                        target_count=requested or DEFAULT_TARGET_COUNT,
                        hard_cap=requested,
                        forced_tlds=intent.constraint.forced_tlds,
                    )
                )
                reply = compose_brainstorm_reply(
                    outcome,
                    requested or DEFAULT_TARGET_COUNT,
                    french=is_probably_french(text),
                    forced_tlds=intent.constraint.forced_tlds,
                )
        except (NamerError, httpx.HTTPError, ValueError) as exc:
            LOGGER.exception("Error in chat loop: %s", exc)
            reply = Message(role=Role.ASSISTANT, text=ERROR_MESSAGE, is_error=True)

        self._place_reply(reply, pending)
        return reply

    def _place_reply(self, reply: Message, pending: Message | None) -> None:
        if pending is None:
            self.messages.append(reply)
            return
        self.messages = [reply if m is pending else m for m in self.messages]

    async def _run_check(self, user_text: str) -> Message:
        reply = await self._gateway.send(self.messages, self._system_prompt)
        if not reply.function_calls:
            return Message(role=Role.ASSISTANT, text=reply.text)

        # Full domains typed by the user ("check foo.io") pin the TLDs.
        request = extract_domain_request(user_text)
        user_tlds = request.tlds if request is not None else []
        results = list(
            await asyncio.gather(*(self._check_call(call, user_tlds) for call in reply.function_calls))
        )
        tool_message = Message(
            role=Role.ASSISTANT,
            text=reply.text,
            tool_calls=list(reply.function_calls),
            tool_results=results,
            tool_display_mode=ToolDisplayMode.ALL,
        )

        follow_up = await self._gateway.send([*self.messages, tool_message], self._system_prompt, auto_tool_call=False)
        text = reply.text
        if follow_up.text and follow_up.text != reply.text:
            text = f"{text}\n\n{follow_up.text}" if text else follow_up.text
        tool_message.text = text
        return tool_message

    async def _check_call(self, call: ToolInvocation, user_tlds: list[str]) -> ToolResult:
        if call.name != CHECK_DOMAINS_TOOL or not self._tool_registry.has(call.name):
            return ToolResult(id=call.id, name=call.name, result={"error": "Unknown tool"})

        tlds = list(user_tlds) or as_str_list(call.arguments.get("tlds")) or self.selected_tlds
        names = as_str_list(call.arguments.get("names"))
        LOGGER.info("Tool call (CHECK) %s: names=%s tlds=%s", call.id, names, tlds)
        result: Any = await self._tool_registry.execute(call.name, {"names": names, "tlds": tlds})
        return ToolResult(id=call.id, name=call.name, result=result)
