"""Object graph construction from settings."""

from __future__ import annotations

from namer.brainstorm import BrainstormEngine, BrainstormLimits
from namer.chat import ChatGateway
from namer.commands import CommandDispatcher
from namer.config import Settings, selected_tlds
from namer.llm.base import LLMProvider
from namer.llm.mistral import MistralProvider
from namer.oracle import AvailabilityOracle, DnsAvailabilityOracle
from namer.prompts import SYSTEM_INSTRUCTION
from namer.session import ChatSession
from namer.tools.check_domains_tool import CheckDomainsTool
from namer.tools.registry import ToolRegistry


def build_tool_registry(settings: Settings, oracle: AvailabilityOracle | None = None) -> ToolRegistry:
    oracle = oracle or DnsAvailabilityOracle(
        resolver_url=settings.dns_resolver_url,
        timeout_seconds=settings.dns_timeout_seconds,
        max_concurrency=settings.dns_max_concurrency,
    )
    registry = ToolRegistry()
    registry.register(CheckDomainsTool(oracle, default_tlds=selected_tlds(settings)))
    return registry


def build_gateway(
    settings: Settings,
    llm: LLMProvider | None = None,
    registry: ToolRegistry | None = None,
) -> ChatGateway:
    return ChatGateway(llm or MistralProvider(settings), registry or build_tool_registry(settings))


def build_session(
    settings: Settings,
    llm: LLMProvider | None = None,
    oracle: AvailabilityOracle | None = None,
) -> ChatSession:
    """Wire a ChatSession with the Mistral provider and the DNS oracle by default."""

    registry = build_tool_registry(settings, oracle)
    gateway = build_gateway(settings, llm, registry)
    limits = BrainstormLimits(
        max_wall_seconds=settings.brainstorm_max_wall_seconds,
        constrained_max_wall_seconds=settings.brainstorm_rare_tld_max_wall_seconds,
    )
    engine = BrainstormEngine(gateway, registry, SYSTEM_INSTRUCTION, limits=limits)
    return ChatSession(
        gateway=gateway,
        tool_registry=registry,
        engine=engine,
        selected_tlds=selected_tlds(settings),
        command_dispatcher=CommandDispatcher(),
    )
