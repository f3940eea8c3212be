"""Domain availability tool exposed to the model as ``checkDomains``."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any

from namer.models import CHECK_DOMAINS_TOOL, DomainCheckResult
from namer.oracle import AvailabilityOracle
from namer.tools.base import Tool

LOGGER = logging.getLogger(__name__)


class CheckDomainsTool(Tool):
    """Check availability of base names across a set of TLDs."""

    name = CHECK_DOMAINS_TOOL
    description = (
        "Check the availability of domain names for specific base brand names. "
        "Use this whenever the user asks to check availability or when you "
        "generate a list of potential brand names."
    )
    parameters_schema: dict[str, Any] = {
        "type": "object",
        "properties": {
            "names": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "A list of base brand names to check (e.g. ['Spotify', 'Google']). "
                    "Do not include the extension/TLD."
                ),
            },
            "tlds": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    "Optional: a list of TLDs to check (e.g. ['.com', '.io']). "
                    "If omitted, the app will use the user-selected extensions."
                ),
            },
        },
        "required": ["names"],
    }

    def __init__(self, oracle: AvailabilityOracle, default_tlds: list[str]) -> None:
        self._oracle = oracle
        self._default_tlds = list(default_tlds)

    async def run(self, **kwargs: Any) -> list[DomainCheckResult]:
        names = [str(n) for n in kwargs.get("names") or []]
        tlds = [str(t) for t in kwargs.get("tlds") or []] or self._default_tlds
        if not names:
            return []

        results = await self._oracle.check_multiple_domains(names, tlds)
        counts = Counter(r.status.value for r in results)
        LOGGER.info(
            "checkDomains: %d names x %d tlds -> available=%d taken=%d unknown=%d",
            len(names),
            len(tlds),
            counts["available"],
            counts["taken"],
            counts["unknown"],
        )
        return results
