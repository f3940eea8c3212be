"""Helpers that turn free text and past results into ``checkDomains`` arguments."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from namer.models import AVAILABLE_TLDS, Message, Role
from namer.oracle import normalize_base_name

MAX_EXTRACTED_NAMES = 16
MAX_QUOTED_NAMES = 8
MAX_INFERRED_NAMES = 6
TLD_TIERS = (8, 12, 16)

_STOP_WORDS = frozenset({"the", "a", "an", "name", "domain", "again", "please"})

_DOMAIN = re.compile(r"\b([a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?)\.([a-z]{2,})\b", re.IGNORECASE)
_LIST_ITEM = re.compile(r"^\s*(?:[-*]|\d+\.|\d+\))\s*([^\s,;:()]{2,80})")
_QUOTED = re.compile(r"\"([^\"\n]{2,64})\"|'([^'\n]{2,64})'")
_LABEL = r"([a-z0-9](?:[a-z0-9-]{1,61}[a-z0-9])?)"
_CHECK_AGAIN = re.compile(rf"\bcheck\s+again\s+{_LABEL}\b", re.IGNORECASE)
_CHECK_NAME_PHRASE = re.compile(rf"\bcheck\s+(?:the\s+)?(?:name|domain)\s+{_LABEL}\b", re.IGNORECASE)
_CHECK_BARE = re.compile(rf"\bcheck\s+{_LABEL}\b", re.IGNORECASE)

_USER_ASKS_CHECK = re.compile(r"(\bcheck\b|\bavailable\b|\bavailability\b|\bopen\b|\bdomain\b)", re.IGNORECASE)
_RETRY = re.compile(r"^(?:again|check\s+again|recheck|retry|more)\b", re.IGNORECASE)
_ASSISTANT_WILL_CHECK = re.compile(r"(let me check|i will check|i\s*'?ll check|i can check|checking)", re.IGNORECASE)


@dataclass(slots=True)
class DomainRequest:
    """Arguments for a ``checkDomains`` call."""

    names: list[str]
    tlds: list[str] = field(default_factory=list)

    def as_arguments(self) -> dict[str, Any]:
        args: dict[str, Any] = {"names": list(self.names)}
        if self.tlds:
            args["tlds"] = list(self.tlds)
        return args


def as_str_list(value: Any) -> list[str]:
    """Coerce a model-supplied argument into a list of non-blank strings."""

    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(v).strip() for v in value if v is not None and str(v).strip()]


def _usable(base: str | None, seen: Sequence[str]) -> bool:
    return bool(base) and base not in _STOP_WORDS and base not in seen


def _extract_candidates(text: str) -> tuple[list[str], list[str]]:
    names: list[str] = []
    tlds: list[str] = []

    for match in _DOMAIN.finditer(text):
        base = normalize_base_name(match.group(1))
        tld = f".{match.group(2).lower()}"
        if _usable(base, names):
            names.append(base)
        if tld not in tlds:
            tlds.append(tld)
        if len(names) >= MAX_EXTRACTED_NAMES:
            return names, tlds

    for line in text.splitlines():
        match = _LIST_ITEM.match(line)
        if not match:
            continue
        token = match.group(1).strip()
        # Full domains were already captured above.
        base = normalize_base_name(token.split(".")[0])
        if _usable(base, names):
            names.append(base)
        if len(names) >= MAX_EXTRACTED_NAMES:
            break

    return names, tlds


def extract_domain_request(text: str) -> DomainRequest | None:
    """Find the names (and TLDs) a message asks to check, most explicit form first."""

    t = (text or "").strip()
    if not t:
        return None

    names, tlds = _extract_candidates(t)
    if names:
        return DomainRequest(names=names, tlds=tlds)

    quoted: list[str] = []
    for match in _QUOTED.finditer(t):
        base = normalize_base_name(match.group(1) or match.group(2) or "")
        if _usable(base, quoted):
            quoted.append(base)
        if len(quoted) >= MAX_QUOTED_NAMES:
            break
    if quoted:
        return DomainRequest(names=quoted)

    for pattern in (_CHECK_AGAIN, _CHECK_NAME_PHRASE, _CHECK_BARE):
        match = pattern.search(t)
        if match:
            base = normalize_base_name(match.group(1))
            if _usable(base, ()):
                return DomainRequest(names=[base])
    return None


def expand_tlds_progressively(
    previous_tlds: Iterable[str] | None,
    universe: Sequence[str] = AVAILABLE_TLDS,
) -> list[str]:
    """Grow the TLD set for a re-check: 8, then 12, then 16, then everything.

    Previously checked TLDs stay first so results read in a stable order.
    """
    previous = list(dict.fromkeys(t.lower() for t in previous_tlds or [] if t))
    pool = list(dict.fromkeys(t.lower() for t in universe if t))
    next_size = next((n for n in (*TLD_TIERS, len(pool)) if n > len(previous)), len(pool))

    out = list(previous)
    for tld in pool:
        if len(out) >= next_size:
            break
        if tld not in out:
            out.append(tld)
    return out


def infer_last_checked_from_history(messages: Sequence[Message]) -> DomainRequest | None:
    """Names and TLDs of the most recent availability check in the conversation."""

    for message in reversed(messages or []):
        for tool_result in reversed(message.tool_results):
            if not isinstance(tool_result.result, list) or not tool_result.result:
                continue
            names: list[str] = []
            tlds: list[str] = []
            for item in tool_result.result:
                base = getattr(item, "base_name", "")
                tld = getattr(item, "tld", "").lower()
                if base and base not in names:
                    names.append(base)
                if tld and tld not in tlds:
                    tlds.append(tld)
            if names:
                return DomainRequest(names=names[:MAX_INFERRED_NAMES], tlds=tlds)
    return None


def should_auto_call_domain_tool(
    messages: Sequence[Message],
    assistant_text: str,
    universe: Sequence[str] = AVAILABLE_TLDS,
) -> DomainRequest | None:
    """Synthesize a check when the model forgot to call the tool.

    Triggers when the latest user message asks to check (or says "again"),
    or when the assistant announces a check without emitting the call.
    """
    last_user = next(
        (m for m in reversed(messages or []) if m.role is Role.USER and not m.is_error),
        None,
    )
    user_text = (last_user.text if last_user else "").strip()

    if _RETRY.match(user_text):
        last = infer_last_checked_from_history(messages)
        if last is not None:
            return DomainRequest(names=last.names, tlds=expand_tlds_progressively(last.tlds, universe))

    if not _USER_ASKS_CHECK.search(user_text) and not _ASSISTANT_WILL_CHECK.search(assistant_text or ""):
        return None
    return extract_domain_request(user_text) or extract_domain_request(assistant_text or "")
