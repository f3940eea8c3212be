"""Intent classification for user utterances.

Decides whether a turn is a single-shot availability CHECK or an iterative
BRAINSTORM, and extracts the constraints the brainstorm loop runs under:
the requested count and the TLD constraint. Everything here is a pure
function of the utterance and the previous turn's state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

MAX_REQUESTED_COUNT = 50
MAX_EXPLICIT_TLDS = 8
CONSTRAINED_TLD = ".ai"


class Mode(str, Enum):
    CHECK = "check"
    BRAINSTORM = "brainstorm"


class ConstraintKind(str, Enum):
    EXPLICIT = "explicit"
    CLEARED = "cleared"
    CARRIED = "carried"
    FORCED = "forced"
    UNCONSTRAINED = "unconstrained"


@dataclass(frozen=True, slots=True)
class TldConstraint:
    """TLD restriction for one brainstorm turn and where it came from."""

    kind: ConstraintKind
    tlds: tuple[str, ...] = ()

    @property
    def forced_tlds(self) -> list[str] | None:
        return list(self.tlds) if self.tlds else None

    @property
    def is_constrained(self) -> bool:
        return bool(self.tlds)


UNCONSTRAINED = TldConstraint(ConstraintKind.UNCONSTRAINED)


@dataclass(frozen=True, slots=True)
class TurnIntent:
    mode: Mode
    requested_count: int | None
    constraint: TldConstraint


_DOMAIN_TOKEN = re.compile(r"\b[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.[a-z]{2,}\b", re.IGNORECASE)
_CHECK_VERB = re.compile(r"\b(check|recheck|verify|availability|available|is)\b", re.IGNORECASE)
_QUOTED_TOKEN = re.compile(r"(\"[^\"\n]{2,64}\"|'[^'\n]{2,64}')")
_CHECK_TOKEN = re.compile(r"\bcheck\s+([a-z0-9](?:[a-z0-9-]{1,61}[a-z0-9])?)\b", re.IGNORECASE)
_IS_AVAILABLE = re.compile(
    r"\bis\s+([a-z0-9](?:[a-z0-9-]{1,61}[a-z0-9])?)\s+(?:available|taken|free)\b",
    re.IGNORECASE,
)
_BARE_TOKEN = re.compile(r"^([a-z0-9](?:[a-z0-9-]{1,61}[a-z0-9])?)$", re.IGNORECASE)
_BRAINSTORM_CUE = re.compile(
    r"(brainstorm|ideas|suggest|generate|names|name ideas|brand name|startup name"
    r"|for my|my app|my project|tool for|website for)",
    re.IGNORECASE,
)
_MODE_KEEPING_CUE = re.compile(
    r"^(?:again|check\s+again|recheck|retry|more|encore|plus|recommence)\b",
    re.IGNORECASE,
)

_COUNT_PATTERNS = (
    re.compile(r"\b(?:give|suggest|generate|find|need|want|provide|show)\s+(\d{1,2})\b", re.IGNORECASE),
    re.compile(r"\b(\d{1,2})\s+(?:names|name|domains|domain|options|ideas|suggestions)\b", re.IGNORECASE),
    re.compile(
        r"\b(?:je\s*veux|j\s*en\s*veux|donne(?:-moi)?|propose(?:-moi)?|genere|g[ée]n[ée]re|trouve|il\s*me\s*faut)"
        r"\s+(\d{1,2})\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(\d{1,2})\s+(?:noms|nom|domaines|domaine|options|id[ée]es|suggestions)\b", re.IGNORECASE),
)

_EXPLICIT_TLD = re.compile(r"(?:^|[^a-z0-9])\.([a-z]{2,})(?=[^a-z0-9]|$)")

_CONTINUATION_PREFIX = re.compile(r"^(?:more|again|retry|recheck|continue)\b", re.IGNORECASE)
_CONTINUATION_WORD = re.compile(r"\b(?:more|again|continue)\b", re.IGNORECASE)
_CONTINUATION_PREFIX_FR = re.compile(r"^(?:encore|plus|recommence|refais)\b", re.IGNORECASE)
_CONTINUATION_WORD_FR = re.compile(r"\b(?:de\s+plus|encore|plus)\b", re.IGNORECASE)

_CLEAR_ANY_TLD = re.compile(
    r"\b(?:peu\s+importe|n'?importe\s+quelle|toutes?\s+les?\s+extensions|tous\s+les\s+tlds|any\s+tld|all\s+tlds)\b",
    re.IGNORECASE,
)
_CLEAR_NOT_ONLY = re.compile(r"\b(?:pas\s+seulement|not\s+only)\b\s*\.[a-z]{2,}\b", re.IGNORECASE)
_CLEAR_REMOVE = re.compile(r"\b(?:enl[èe]ve|retire|remove|drop)\b[^\n]{0,30}\.[a-z]{2,}\b", re.IGNORECASE)
_CLEAR_CONSTRAINT = re.compile(r"\b(?:remove|drop|clear)\s+(?:the\s+)?(?:tld\s+)?constraints?\b", re.IGNORECASE)

_FRENCH_HINT = re.compile(
    r"\b(je|mon|ma|mes|une|un|des|domaine|nom|disponibilit[ée]|v[ée]rifi(?:er|cation)|temps\s*r[ée]el)\b",
    re.IGNORECASE,
)


def _word_count(text: str) -> int:
    return len(text.split())


def looks_like_explicit_name_check(text: str) -> bool:
    """True for a full domain, a check verb applied to a token, or a bare token."""

    t = (text or "").strip()
    if not t:
        return False
    if _DOMAIN_TOKEN.search(t):
        return True
    if _CHECK_VERB.search(t):
        if _QUOTED_TOKEN.search(t) or _CHECK_TOKEN.search(t) or _IS_AVAILABLE.search(t):
            return True
    return bool(_BARE_TOKEN.match(t))


def looks_like_brainstorm_request(text: str) -> bool:
    t = (text or "").strip()
    if not t:
        return False
    return bool(_BRAINSTORM_CUE.search(t)) or _word_count(t) >= 10


def classify(user_text: str, previous_mode: Mode) -> Mode:
    """Pick the operating mode for this utterance."""

    t = (user_text or "").strip()
    if not t or _MODE_KEEPING_CUE.match(t):
        return previous_mode

    explicit = looks_like_explicit_name_check(t)
    brainstorm = looks_like_brainstorm_request(t)
    if explicit and not brainstorm:
        return Mode.CHECK
    if brainstorm and not explicit:
        return Mode.BRAINSTORM
    # Both or neither: an explicit check signal wins.
    return Mode.CHECK if explicit else Mode.BRAINSTORM


def extract_requested_count(text: str) -> int | None:
    """Parse "give me 10", "10 names", "je veux 5", "4 noms"... clamped to [1, 50]."""

    t = (text or "").lower()
    for pattern in _COUNT_PATTERNS:
        match = pattern.search(t)
        if match:
            n = int(match.group(1))
            if n > 0:
                return min(n, MAX_REQUESTED_COUNT)
    return None


def extract_explicit_tlds(text: str) -> list[str] | None:
    """Collect standalone ".xxx" tokens such as "only .ai" or "en .cloud"."""

    t = (text or "").lower()
    if not t.strip():
        return None
    found: list[str] = []
    for match in _EXPLICIT_TLD.finditer(t):
        tld = f".{match.group(1)}"
        if 3 <= len(tld) <= 15 and tld not in found:
            found.append(tld)
        if len(found) >= MAX_EXPLICIT_TLDS:
            break
    return found or None


def is_continuation_request(text: str) -> bool:
    """Short follow-ups that mean "keep going with the same constraints"."""

    t = (text or "").strip().lower()
    if not t:
        return False
    if _CONTINUATION_PREFIX.match(t):
        return True
    if _CONTINUATION_WORD.search(t) and _word_count(t) <= 6:
        return True
    if _CONTINUATION_PREFIX_FR.match(t):
        return True
    return bool(_CONTINUATION_WORD_FR.search(t)) and _word_count(t) <= 10


def user_clears_tld_constraint(text: str) -> bool:
    t = (text or "").strip().lower()
    if not t:
        return False
    return any(
        pattern.search(t)
        for pattern in (_CLEAR_ANY_TLD, _CLEAR_NOT_ONLY, _CLEAR_REMOVE, _CLEAR_CONSTRAINT)
    )


def user_forces_specific_tld(text: str, tld: str = CONSTRAINED_TLD) -> bool:
    """True when the utterance mentions ``tld`` as an extension ("en .ai", "extension .ai")."""

    t = (text or "").lower()
    if not t.strip():
        return False
    escaped = re.escape(tld.lower())
    return bool(
        re.search(rf"(^|\W){escaped}(\W|$)", t)
        or re.search(rf"\bextension\b[^\n]{{0,32}}{escaped}\b", t)
    )


def is_probably_french(text: str) -> bool:
    return bool(_FRENCH_HINT.search((text or "").lower()))


def resolve_tld_constraint(text: str, previous: TldConstraint | None = None) -> TldConstraint:
    """Apply the TLD precedence rules for one brainstorm turn.

    explicit TLDs this turn > cleared > carried over on a continuation >
    newly forced constrained TLD > unconstrained.
    """
    explicit = extract_explicit_tlds(text)
    if explicit:
        return TldConstraint(ConstraintKind.EXPLICIT, tuple(explicit))
    if user_clears_tld_constraint(text):
        return TldConstraint(ConstraintKind.CLEARED)
    if previous is not None and previous.is_constrained and is_continuation_request(text):
        return TldConstraint(ConstraintKind.CARRIED, previous.tlds)
    if user_forces_specific_tld(text):
        return TldConstraint(ConstraintKind.FORCED, (CONSTRAINED_TLD,))
    return UNCONSTRAINED


def interpret_turn(
    text: str,
    previous_mode: Mode,
    previous_constraint: TldConstraint | None = None,
) -> TurnIntent:
    """Classify a turn and resolve its constraints.

    The TLD constraint only survives consecutive BRAINSTORM turns: a CHECK
    turn yields UNCONSTRAINED and a previous CHECK turn carries nothing.
    """
    mode = classify(text, previous_mode)
    if mode is Mode.CHECK:
        return TurnIntent(mode=mode, requested_count=None, constraint=UNCONSTRAINED)
    carried = previous_constraint if previous_mode is Mode.BRAINSTORM else None
    return TurnIntent(
        mode=mode,
        requested_count=extract_requested_count(text),
        constraint=resolve_tld_constraint(text, carried),
    )
