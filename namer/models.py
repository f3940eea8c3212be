"""Core domain models used across layers."""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

CHECK_DOMAINS_TOOL = "checkDomains"

AVAILABLE_TLDS: tuple[str, ...] = (
    ".com",
    ".io",
    ".ai",
    ".co",
    ".net",
    ".org",
    ".app",
    ".dev",
    ".me",
    ".so",
    ".xyz",
    ".fr",
    ".de",
    ".uk",
)

_ids = itertools.count(1)


def new_message_id() -> str:
    """Return a process-unique message id."""

    return f"{int(time.time() * 1000):x}-{next(_ids)}"


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class DomainStatus(str, Enum):
    AVAILABLE = "available"
    TAKEN = "taken"
    UNKNOWN = "unknown"


class ToolDisplayMode(str, Enum):
    """Which checked domains the presentation layer should show."""

    ALL = "all"
    AVAILABLE_ONLY = "available_only"


@dataclass(slots=True, frozen=True)
class DomainCheckResult:
    """Availability of one (base name, TLD) pair."""

    base_name: str
    tld: str
    domain: str
    status: DomainStatus

    @property
    def is_available(self) -> bool:
        return self.status is DomainStatus.AVAILABLE

    def to_dict(self) -> dict[str, str]:
        return {
            "domain": self.domain,
            "status": self.status.value,
            "tld": self.tld,
            "baseName": self.base_name,
        }


@dataclass(slots=True)
class ToolInvocation:
    """Tool call issued by the assistant, correlated with its result by id."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class ToolResult:
    """Result of a ToolInvocation, tagged with the invocation id."""

    id: str
    name: str
    result: Any

    def payload(self) -> Any:
        """JSON-serializable form of the result."""

        if isinstance(self.result, list):
            return [r.to_dict() if isinstance(r, DomainCheckResult) else r for r in self.result]
        return self.result


@dataclass(slots=True)
class Message:
    """One conversation turn as the application sees it."""

    role: Role
    text: str
    id: str = field(default_factory=new_message_id)
    tool_calls: list[ToolInvocation] = field(default_factory=list)
    tool_results: list[ToolResult] = field(default_factory=list)
    is_error: bool = False
    is_pending: bool = False
    tool_display_mode: ToolDisplayMode = ToolDisplayMode.ALL

    def domain_results(self) -> list[DomainCheckResult]:
        """All DomainCheckResult entries carried by this message's tool results."""

        return [
            r
            for tr in self.tool_results
            if isinstance(tr.result, list)
            for r in tr.result
            if isinstance(r, DomainCheckResult)
        ]


@dataclass(slots=True)
class LLMToolCall:
    """Tool invocation returned by an LLM provider."""

    name: str
    arguments: dict[str, Any]
    call_id: str | None = None


@dataclass(slots=True)
class LLMResponse:
    """Result from an LLM generation request."""

    content: str
    tool_calls: list[LLMToolCall] = field(default_factory=list)
    raw: dict[str, Any] | None = None


@dataclass(slots=True)
class ChatReply:
    """What one chat-gateway round-trip hands back to the session."""

    text: str
    function_calls: list[ToolInvocation] = field(default_factory=list)
