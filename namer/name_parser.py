"""Fallback parser for models that answer with a JSON list instead of a tool call."""

from __future__ import annotations

import json
import re
from collections.abc import Collection

from namer.oracle import normalize_base_name

MAX_PARSED_NAMES = 80

_SCHEME = re.compile(r"^https?://")


def _slice_array(text: str) -> str:
    start = text.find("[")
    end = text.rfind("]")
    return text[start : end + 1] if start >= 0 and end > start else text


def _sanitize_entry(value: object) -> str | None:
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    entry = _SCHEME.sub("", str(value).strip().lower())
    return normalize_base_name(entry.split(".")[0])


def parse_json_name_list(
    raw: str,
    exclude: Collection[str] = (),
    limit: int = MAX_PARSED_NAMES,
) -> list[str] | None:
    """Extract base names from a JSON array, tolerating prose around it.

    Entries are sanitized to DNS labels ("Nova.ai" -> "nova"), de-duplicated,
    and dropped when already in ``exclude``. Returns None unless at least one
    usable name remains.
    """
    text = (raw or "").strip()
    if not text:
        return None
    try:
        parsed = json.loads(_slice_array(text))
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, list):
        return None

    names: list[str] = []
    for value in parsed:
        name = _sanitize_entry(value)
        if not name or name in names or name in exclude:
            continue
        names.append(name)
        if len(names) >= limit:
            break
    return names or None
