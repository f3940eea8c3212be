"""Console entrypoint."""

from __future__ import annotations

import asyncio
import logging

from namer.config import load_settings
from namer.factory import build_session
from namer.models import DomainStatus, Message, ToolDisplayMode
from namer.prompts import WELCOME_MESSAGE

LOGGER = logging.getLogger(__name__)

_EXIT_WORDS = frozenset({"exit", "quit", ":q"})


def format_reply(message: Message) -> str:
    """Render an assistant message and its domain results as plain text."""

    lines = [message.text]
    # Available-only replies already list their domains in the text.
    if message.tool_display_mode is ToolDisplayMode.ALL:
        for result in message.domain_results():
            marker = "+" if result.status is DomainStatus.AVAILABLE else "-"
            lines.append(f"  {marker} {result.domain:<32} {result.status.value}")
    return "\n".join(lines).strip()


async def run() -> None:
    """Read utterances from stdin until EOF or an exit word."""

    settings = load_settings()
    logging.basicConfig(level=settings.log_level.upper())
    if not settings.has_api_key:
        LOGGER.warning("MISTRAL_API_KEY is not set; model calls will fail")

    session = build_session(settings)
    print(WELCOME_MESSAGE)
    while True:
        try:
            text = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        if text.strip().lower() in _EXIT_WORDS:
            break
        if not text.strip():
            continue
        reply = await session.handle_message(text)
        print(format_reply(reply))
    LOGGER.info("Namer shutdown complete")


def main() -> None:
    """Synchronous wrapper for asyncio entrypoint."""

    asyncio.run(run())


if __name__ == "__main__":
    main()
