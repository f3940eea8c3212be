from namer.main import format_reply
from namer.models import (
    DomainCheckResult,
    DomainStatus,
    Message,
    Role,
    ToolDisplayMode,
    ToolInvocation,
    ToolResult,
)


def _message(mode: ToolDisplayMode) -> Message:
    results = [
        DomainCheckResult(base_name="foo", tld=".io", domain="foo.io", status=DomainStatus.TAKEN),
        DomainCheckResult(base_name="bar", tld=".io", domain="bar.io", status=DomainStatus.AVAILABLE),
    ]
    return Message(
        role=Role.ASSISTANT,
        text="Results:",
        tool_calls=[ToolInvocation(id="abc123xyz", name="checkDomains")],
        tool_results=[ToolResult(id="abc123xyz", name="checkDomains", result=results)],
        tool_display_mode=mode,
    )


def test_format_reply_lists_every_status_for_checks():
    lines = format_reply(_message(ToolDisplayMode.ALL)).splitlines()

    assert lines[0] == "Results:"
    assert lines[1].split() == ["-", "foo.io", "taken"]
    assert lines[2].split() == ["+", "bar.io", "available"]


def test_format_reply_keeps_brainstorm_text_only():
    assert format_reply(_message(ToolDisplayMode.AVAILABLE_ONLY)) == "Results:"
