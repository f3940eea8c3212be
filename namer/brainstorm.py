"""Brainstorm loop: keep asking the model for names until enough domains are free.

Each round renders a fresh instruction from the loop state, sends the working
history through the chat gateway, checks every name the model proposes and
records the available domains. The loop ends when the target is reached, the
hard cap is reached, or the round/wall-time budget runs out.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from namer.chat import ChatGateway
from namer.domain_tooling import as_str_list
from namer.history import generate_tool_call_id
from namer.models import (
    CHECK_DOMAINS_TOOL,
    DomainCheckResult,
    Message,
    Role,
    ToolDisplayMode,
    ToolInvocation,
    ToolResult,
)
from namer.name_parser import parse_json_name_list
from namer.oracle import normalize_base_name
from namer.prompts import CHECKING_MESSAGE
from namer.tools.registry import ToolRegistry

LOGGER = logging.getLogger(__name__)

DEFAULT_TARGET_COUNT = 3
MAX_FOUND_IN_INSTRUCTION = 25
MAX_CHECKED_IN_INSTRUCTION = 40
JSON_NUDGE_STREAK = 2


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass(frozen=True, slots=True)
class BrainstormLimits:
    """Tuning knobs for batch sizes and budgets.

    All values are empirical defaults; a forced TLD lowers the hit-rate, so
    batches and the wall-time budget grow when one is in effect.
    """

    min_batch: int = 10
    max_batch: int = 25
    constrained_min_batch: int = 20
    constrained_max_batch: int = 40
    multiplier: float = 6.0
    constrained_multiplier: float = 10.0
    hard_cap_bonus: float = 2.0
    rounds_per_target: int = 12
    min_rounds: int = 14
    max_rounds: int = 90
    max_wall_seconds: float = 25.0
    constrained_max_wall_seconds: float = 35.0

    def round_budget(self, target_count: int) -> int:
        return int(clamp(target_count * self.rounds_per_target, self.min_rounds, self.max_rounds))

    def wall_budget(self, constrained: bool) -> float:
        return self.constrained_max_wall_seconds if constrained else self.max_wall_seconds

    def desired_batch(self, remaining: int, constrained: bool, hard_cap: bool) -> int:
        low = self.constrained_min_batch if constrained else self.min_batch
        high = self.constrained_max_batch if constrained else self.max_batch
        multiplier = self.constrained_multiplier if constrained else self.multiplier
        if hard_cap:
            multiplier += self.hard_cap_bonus
        return int(clamp(math.ceil(max(low, remaining * multiplier)), low, high))


@dataclass(frozen=True, slots=True)
class BrainstormInstruction:
    """Per-round instruction appended to the base system prompt."""

    target_count: int
    hard_cap: int | None
    forced_tlds: tuple[str, ...]
    remaining: int
    desired_batch: int
    found: tuple[str, ...] = ()
    checked: tuple[str, ...] = ()
    json_only: bool = False

    def render(self, base_prompt: str) -> str:
        parts = [base_prompt]
        if self.hard_cap is not None:
            parts.append(f"\nHard requirement: return EXACTLY {self.hard_cap} AVAILABLE domains in your final answer.")
        else:
            parts.append(
                f"\nRequirement: find at least {self.target_count} AVAILABLE domains "
                f"({self.remaining} still needed)."
            )
        if self.forced_tlds:
            parts.append(f"\nTLD constraint: ONLY use these TLDs: {', '.join(self.forced_tlds)}.")
        if self.json_only:
            parts.append(
                f"\nOutput format: tool calls are not working. Reply with ONLY a JSON array of "
                f"{self.desired_batch} NEW base names (strings, no TLDs), no prose."
            )
        else:
            parts.append(
                f"\nEfficiency requirement: On your NEXT checkDomains tool call, include {self.desired_batch} "
                "NEW, unique base names (no TLDs). Avoid repeats. Do not write a final answer yet."
            )
        if self.found:
            parts.append(
                f"\nAlready found available (do not repeat, just count them): "
                f"{', '.join(self.found[:MAX_FOUND_IN_INSTRUCTION])}"
            )
        if self.checked:
            parts.append(f"\nAvoid rechecking these base names: {', '.join(self.checked[:MAX_CHECKED_IN_INSTRUCTION])}")
        return "\n".join(parts)


def render_nudge(remaining: int, desired_batch: int, streak: int) -> str:
    """Synthetic user turn pushing a non-compliant model back onto the tool path."""

    if streak >= JSON_NUDGE_STREAK:
        return (
            "Internal instruction: Tool calls are not working. Output ONLY a valid JSON array (no prose) "
            f"with {desired_batch} NEW base names (strings), no TLDs, no dots, no spaces. "
            'Example: ["nova", "cloudly"].'
        )
    return (
        f"Internal instruction: We still need {remaining} more AVAILABLE domains. Generate {desired_batch} "
        "NEW candidate base names (no TLDs) and CALL checkDomains immediately. Do not output a final answer yet."
    )


@dataclass(slots=True)
class BrainstormRequest:
    history: list[Message]
    selected_tlds: list[str]
    target_count: int = DEFAULT_TARGET_COUNT
    hard_cap: int | None = None
    forced_tlds: list[str] | None = None

    @property
    def constrained(self) -> bool:
        return bool(self.forced_tlds)


@dataclass(slots=True)
class BrainstormOutcome:
    available: list[DomainCheckResult]
    rounds: int
    max_rounds: int
    elapsed_seconds: float
    working_history: list[Message] = field(default_factory=list)


@dataclass(slots=True)
class _RunState:
    history: list[Message]
    started_at: float
    checked: dict[str, None] = field(default_factory=dict)
    available: dict[str, DomainCheckResult] = field(default_factory=dict)
    rounds: int = 0
    no_tool_streak: int = 0
    nudged: bool = False


class BrainstormEngine:
    """Drives model round-trips and availability checks for one brainstorm turn."""

    def __init__(
        self,
        gateway: ChatGateway,
        tool_registry: ToolRegistry,
        system_prompt: str,
        limits: BrainstormLimits | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._gateway = gateway
        self._tool_registry = tool_registry
        self._system_prompt = system_prompt
        self._limits = limits or BrainstormLimits()
        self._clock = clock

    async def run(self, request: BrainstormRequest) -> BrainstormOutcome:
        target = request.hard_cap or request.target_count
        max_rounds = self._limits.round_budget(target)
        max_wall = self._limits.wall_budget(request.constrained)
        state = _RunState(history=list(request.history), started_at=self._clock())

        while (
            len(state.available) < target
            and state.rounds < max_rounds
            and self._clock() - state.started_at < max_wall
        ):
            LOGGER.info(
                "Brainstorm round %d: available=%d/%d checked=%d forced_tlds=%s",
                state.rounds,
                len(state.available),
                target,
                len(state.checked),
                request.forced_tlds,
            )
            instruction = self._instruction(request, state, target)
            reply = await self._gateway.send(
                state.history,
                instruction.render(self._system_prompt),
                auto_tool_call=not state.nudged,
            )
            state.nudged = False

            if reply.function_calls:
                state.no_tool_streak = 0
                await self._check_invocations(request, state, reply.function_calls)
            else:
                names = parse_json_name_list(reply.text, exclude=state.checked)
                if names:
                    LOGGER.info("Parsed %d names from a JSON reply", len(names))
                    invocation = ToolInvocation(
                        id=generate_tool_call_id(),
                        name=CHECK_DOMAINS_TOOL,
                        arguments={"names": names},
                    )
                    await self._check_invocations(request, state, [invocation])
                else:
                    state.no_tool_streak += 1
                    LOGGER.warning(
                        "No tool call in round %d (streak=%d); nudging model",
                        state.rounds,
                        state.no_tool_streak,
                    )
                    state.history.append(Message(role=Role.ASSISTANT, text=reply.text))
                    state.history.append(
                        Message(
                            role=Role.USER,
                            text=render_nudge(
                                max(1, instruction.remaining),
                                instruction.desired_batch,
                                state.no_tool_streak,
                            ),
                        )
                    )
                    state.nudged = True

            state.rounds += 1
            if request.hard_cap is not None and len(state.available) >= request.hard_cap:
                break

        found = list(state.available.values())
        if request.hard_cap is not None:
            found = found[: request.hard_cap]
        elapsed = self._clock() - state.started_at
        LOGGER.info(
            "Brainstorm finished: found=%d target=%d rounds=%d/%d elapsed=%.1fs",
            len(found),
            target,
            state.rounds,
            max_rounds,
            elapsed,
        )
        return BrainstormOutcome(
            available=found,
            rounds=state.rounds,
            max_rounds=max_rounds,
            elapsed_seconds=elapsed,
            working_history=state.history,
        )

    def _instruction(self, request: BrainstormRequest, state: _RunState, target: int) -> BrainstormInstruction:
        remaining = max(0, target - len(state.available))
        return BrainstormInstruction(
            target_count=request.target_count,
            hard_cap=request.hard_cap,
            forced_tlds=tuple(request.forced_tlds or ()),
            remaining=remaining,
            desired_batch=self._limits.desired_batch(
                remaining,
                constrained=request.constrained,
                hard_cap=request.hard_cap is not None,
            ),
            found=tuple(state.available),
            checked=tuple(state.checked),
            json_only=state.no_tool_streak >= JSON_NUDGE_STREAK,
        )

    async def _check_invocations(
        self,
        request: BrainstormRequest,
        state: _RunState,
        invocations: list[ToolInvocation],
    ) -> None:
        # Reserve names for every invocation first so two calls in one round
        # never check the same base name.
        planned: list[tuple[ToolInvocation, dict[str, Any] | None]] = []
        for invocation in invocations:
            if invocation.name != CHECK_DOMAINS_TOOL or not self._tool_registry.has(invocation.name):
                planned.append((invocation, None))
                continue
            fresh = self._fresh_names(invocation.arguments.get("names"), state)
            tlds = request.forced_tlds or as_str_list(invocation.arguments.get("tlds")) or request.selected_tlds
            LOGGER.info("Tool call %s: %d new names, tlds=%s", invocation.id, len(fresh), tlds)
            planned.append((invocation, {"names": fresh, "tlds": list(tlds)}))

        outputs = await asyncio.gather(
            *(self._execute(invocation, arguments) for invocation, arguments in planned)
        )

        results: list[ToolResult] = []
        for (invocation, _), output in zip(planned, outputs):
            if isinstance(output, list):
                self._record_available(request, state, output)
            results.append(ToolResult(id=invocation.id, name=invocation.name, result=output))

        state.history.append(
            Message(
                role=Role.ASSISTANT,
                text=CHECKING_MESSAGE,
                tool_calls=list(invocations),
                tool_results=results,
                tool_display_mode=ToolDisplayMode.AVAILABLE_ONLY,
            )
        )

    async def _execute(self, invocation: ToolInvocation, arguments: dict[str, Any] | None) -> Any:
        if arguments is None:
            return {"error": "Unknown tool"}
        if not arguments["names"]:
            return []
        return await self._tool_registry.execute(invocation.name, arguments)

    @staticmethod
    def _fresh_names(raw_names: Any, state: _RunState) -> list[str]:
        fresh: list[str] = []
        for raw in as_str_list(raw_names):
            base = normalize_base_name(raw)
            if not base or base in fresh or base in state.checked:
                continue
            fresh.append(base)
        for base in fresh:
            state.checked[base] = None
        return fresh

    @staticmethod
    def _record_available(request: BrainstormRequest, state: _RunState, results: list[DomainCheckResult]) -> None:
        for result in results:
            if not isinstance(result, DomainCheckResult) or not result.is_available:
                continue
            if request.hard_cap is not None and len(state.available) >= request.hard_cap:
                return
            if result.domain not in state.available:
                state.available[result.domain] = result


def compose_brainstorm_reply(
    outcome: BrainstormOutcome,
    requested_count: int,
    french: bool,
    forced_tlds: list[str] | None = None,
) -> Message:
    """Final assistant message for a brainstorm turn, listing every domain found."""

    found = outcome.available
    n = len(found)
    label = ", ".join(forced_tlds or [])
    if french:
        header = f"Voici {n} nom{'s' if n > 1 else ''} de domaine disponible{'s' if n > 1 else ''}"
        header += f" (en {label}) :" if label else " :"
    else:
        header = f"Here are {n} available domain{'s' if n != 1 else ''}"
        header += f" ({label} only):" if label else ":"

    if found:
        text = header + "\n" + "\n".join(f"- {r.domain}" for r in found)
        if n < requested_count:
            if french:
                text += (
                    f"\n\nJe n'ai pas réussi à trouver {requested_count} domaines disponibles avec ces contraintes. "
                    "Essaie un brief plus large (mots-clés, style) ou autorise d'autres extensions."
                )
            else:
                text += (
                    f"\n\nI couldn't reach {requested_count} available domains with the current constraints. "
                    "Try broadening the brief or allowing more TLDs."
                )
    else:
        seconds = round(outcome.elapsed_seconds)
        if french:
            text = (
                f"Je n'ai pas trouvé de domaine disponible dans la limite de sécurité "
                f"({outcome.rounds}/{outcome.max_rounds} appels, ~{seconds}s). Soit on augmente la limite, "
                "soit on change la stratégie (noms plus inventés/courts), soit on autorise d'autres extensions."
            )
        else:
            text = (
                f"I couldn't find an available domain within the safety limit "
                f"({outcome.rounds}/{outcome.max_rounds} calls, ~{seconds}s). We can increase the limit, "
                "generate more invented/shorter names, or allow more TLDs."
            )

    message = Message(role=Role.ASSISTANT, text=text, tool_display_mode=ToolDisplayMode.AVAILABLE_ONLY)
    if found:
        call_id = generate_tool_call_id()
        message.tool_calls = [
            ToolInvocation(
                id=call_id,
                name=CHECK_DOMAINS_TOOL,
                arguments={
                    "names": list(dict.fromkeys(r.base_name for r in found)),
                    "tlds": list(dict.fromkeys(r.tld for r in found)),
                },
            )
        ]
        message.tool_results = [ToolResult(id=call_id, name=CHECK_DOMAINS_TOOL, result=list(found))]
    return message
