"""Command dispatcher for @-prefixed messages.

Commands change session settings without calling the model.
An unrecognised @command returns None, letting it fall through to the model.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Sequence

from namer.models import AVAILABLE_TLDS
from namer.oracle import normalize_tld

if TYPE_CHECKING:
    from namer.session import ChatSession

LOGGER = logging.getLogger(__name__)

_TLDS_USAGE = "Usage: @tlds [.com .io ...]"


def parse_command(text: str) -> tuple[str, list[str]] | None:
    """Split an @-prefixed message into (command, args).

    Returns:
        A (command, args) tuple where command is lowercased, or None if text
        is not a valid @command.
    """
    text = text.strip()
    if not text.startswith("@"):
        return None
    parts = text[1:].split()
    if not parts:
        return None
    return parts[0].lower(), parts[1:]


class CommandDispatcher:
    """Routes @-prefixed messages to session handlers, bypassing the model."""

    def __init__(self, tld_universe: Sequence[str] = AVAILABLE_TLDS) -> None:
        self._tld_universe = tuple(tld_universe)

    async def dispatch(self, text: str, session: ChatSession) -> str | None:
        """Dispatch a message to a command handler.

        Returns:
            A reply string for recognised commands, or None for unknown ones.
        """
        parsed = parse_command(text)
        if parsed is None:
            return None
        command, args = parsed
        LOGGER.info("Command dispatch: command=%r args=%r", command, args)
        if command == "tlds":
            return self._handle_tlds(args, session)
        if command == "clear":
            session.reset()
            return "Conversation history cleared."
        if command == "help":
            return self._handle_help()
        return None

    def _handle_tlds(self, args: list[str], session: ChatSession) -> str:
        if not args:
            return f"Checking: {', '.join(session.selected_tlds)}\nAvailable: {', '.join(self._tld_universe)}"

        tlds: list[str] = []
        for raw in args:
            for piece in raw.split(","):
                tld = normalize_tld(piece)
                if tld and tld not in tlds:
                    tlds.append(tld)
        if not tlds:
            return _TLDS_USAGE
        session.selected_tlds = tlds
        return f"Checking: {', '.join(tlds)}"

    @staticmethod
    def _handle_help() -> str:
        return "\n".join(
            [
                "Describe your project to brainstorm names, or ask to check a name (e.g. check foo.io).",
                f"{_TLDS_USAGE}: show or replace the extensions checked by default.",
                "@clear: start a new conversation.",
            ]
        )
