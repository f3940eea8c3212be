"""Domain availability oracle backed by DNS-over-HTTPS.

An NXDOMAIN answer is treated as "likely available" and NOERROR as "taken".
This is a heuristic: a registered domain without DNS records also answers
NXDOMAIN, so a registrar/RDAP lookup is the only authoritative source.
"""

from __future__ import annotations

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import Iterable

import httpx

from namer.models import DomainCheckResult, DomainStatus

LOGGER = logging.getLogger(__name__)

DEFAULT_RESOLVER_URL = "https://dns.google/resolve"
DNS_STATUS_NOERROR = 0
DNS_STATUS_NXDOMAIN = 3
MAX_LABEL_LENGTH = 63

_INVALID_NAME_CHARS = re.compile(r"[^a-z0-9-]")
_INVALID_TLD_CHARS = re.compile(r"[^a-z0-9.-]")


def normalize_base_name(raw: str) -> str | None:
    """Lowercase a candidate and keep only characters valid in a DNS label."""

    cleaned = _INVALID_NAME_CHARS.sub("", re.sub(r"\s+", "", str(raw or "").lower()))
    cleaned = cleaned.strip("-")[:MAX_LABEL_LENGTH].strip("-")
    return cleaned or None


def normalize_tld(raw: str) -> str | None:
    """Return the TLD lowercased with exactly one leading dot."""

    cleaned = _INVALID_TLD_CHARS.sub("", str(raw or "").strip().lower()).strip(".-")
    return f".{cleaned}" if cleaned else None


def _unique(values: Iterable[str | None]) -> list[str]:
    out: list[str] = []
    for value in values:
        if value and value not in out:
            out.append(value)
    return out


class AvailabilityOracle(ABC):
    """Answers availability for every (base name, TLD) pair."""

    @abstractmethod
    async def check_multiple_domains(self, base_names: list[str], tlds: list[str]) -> list[DomainCheckResult]:
        """Return one result per pair, names outer loop and TLDs inner loop."""


class DnsAvailabilityOracle(AvailabilityOracle):
    """Checks availability with concurrent DNS-over-HTTPS A-record lookups."""

    def __init__(
        self,
        resolver_url: str = DEFAULT_RESOLVER_URL,
        timeout_seconds: float = 5.0,
        max_concurrency: int = 16,
    ) -> None:
        self._resolver_url = resolver_url
        self._timeout_seconds = timeout_seconds
        self._max_concurrency = max(1, max_concurrency)

    async def check_multiple_domains(self, base_names: list[str], tlds: list[str]) -> list[DomainCheckResult]:
        names = _unique(normalize_base_name(n) for n in base_names or [])
        clean_tlds = _unique(normalize_tld(t) for t in tlds or [])
        if not names or not clean_tlds:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)
        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:

            async def bounded(name: str, tld: str) -> DomainCheckResult:
                async with semaphore:
                    return await self._check_domain(client, name, tld)

            return list(
                await asyncio.gather(*(bounded(name, tld) for name in names for tld in clean_tlds))
            )

    async def _check_domain(self, client: httpx.AsyncClient, base_name: str, tld: str) -> DomainCheckResult:
        domain = f"{base_name}{tld}"
        try:
            resp = await client.get(self._resolver_url, params={"name": domain, "type": "A"})
            resp.raise_for_status()
            status = _status_from_payload(resp.json())
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Availability lookup failed for %s: %s", domain, exc)
            status = DomainStatus.UNKNOWN
        LOGGER.debug("Tested %s: %s", domain, status.value)
        return DomainCheckResult(base_name=base_name, tld=tld, domain=domain, status=status)


def _status_from_payload(data: object) -> DomainStatus:
    code = data.get("Status") if isinstance(data, dict) else None
    if code == DNS_STATUS_NXDOMAIN:
        return DomainStatus.AVAILABLE
    if code == DNS_STATUS_NOERROR:
        return DomainStatus.TAKEN
    return DomainStatus.UNKNOWN
