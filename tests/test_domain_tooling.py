"""Tests for domain-request extraction and automatic tool-call synthesis."""

from __future__ import annotations

from namer.domain_tooling import (
    DomainRequest,
    as_str_list,
    expand_tlds_progressively,
    extract_domain_request,
    infer_last_checked_from_history,
    should_auto_call_domain_tool,
)
from namer.models import AVAILABLE_TLDS, DomainCheckResult, DomainStatus, Message, Role, ToolInvocation, ToolResult


def _checked_message(names: list[str], tlds: list[str]) -> Message:
    results = [
        DomainCheckResult(base_name=n, tld=t, domain=f"{n}{t}", status=DomainStatus.TAKEN) for n in names for t in tlds
    ]
    call = ToolInvocation(id="abcdefghi", name="checkDomains", arguments={"names": names, "tlds": tlds})
    return Message(
        role=Role.ASSISTANT,
        text="",
        tool_calls=[call],
        tool_results=[ToolResult(id="abcdefghi", name="checkDomains", result=results)],
    )


def test_extracts_full_domains():
    assert extract_domain_request("check foo.io") == DomainRequest(names=["foo"], tlds=[".io"])


def test_extracts_list_items_after_domains():
    request = extract_domain_request("1. Nova\n2. Zeta.ai\n- Cloudly")
    assert request.names == ["zeta", "nova", "cloudly"]
    assert request.tlds == [".ai"]


def test_extracts_quoted_names():
    assert extract_domain_request('check "Namer" please') == DomainRequest(names=["namer"])


def test_extracts_check_phrases():
    assert extract_domain_request("check the name namer").names == ["namer"]
    assert extract_domain_request("check again namer").names == ["namer"]
    assert extract_domain_request("please check zentro").names == ["zentro"]


def test_stop_words_are_not_names():
    assert extract_domain_request("check the") is None
    assert extract_domain_request("hello") is None
    assert extract_domain_request("") is None


def test_domain_request_arguments():
    assert DomainRequest(names=["a"]).as_arguments() == {"names": ["a"]}
    assert DomainRequest(names=["a"], tlds=[".io"]).as_arguments() == {"names": ["a"], "tlds": [".io"]}


def test_as_str_list():
    assert as_str_list("nova") == ["nova"]
    assert as_str_list(["a", " ", None, 3]) == ["a", "3"]
    assert as_str_list({"x": 1}) == []


def test_expand_tlds_progressively_grows_by_tier():
    first = expand_tlds_progressively([".com", ".io", ".ai"])
    assert first == [".com", ".io", ".ai", ".co", ".net", ".org", ".app", ".dev"]

    second = expand_tlds_progressively(first)
    assert len(second) == 12
    assert second[:8] == first

    third = expand_tlds_progressively(second)
    assert third == list(dict.fromkeys([*second, *AVAILABLE_TLDS]))

    assert expand_tlds_progressively(third) == third


def test_expand_tlds_from_nothing():
    assert expand_tlds_progressively(None) == list(AVAILABLE_TLDS[:8])


def test_infer_last_checked_from_history():
    messages = [
        _checked_message(["old"], [".com"]),
        Message(role=Role.USER, text="again"),
        _checked_message(["a", "b", "c", "d", "e", "f", "g"], [".io", ".ai"]),
    ]

    last = infer_last_checked_from_history(messages)

    assert last.names == ["a", "b", "c", "d", "e", "f"]
    assert last.tlds == [".io", ".ai"]


def test_infer_last_checked_without_results():
    assert infer_last_checked_from_history([Message(role=Role.USER, text="hi")]) is None


def test_auto_call_from_user_check_request():
    messages = [Message(role=Role.USER, text="check foo.io")]
    assert should_auto_call_domain_tool(messages, "") == DomainRequest(names=["foo"], tlds=[".io"])


def test_auto_call_retry_expands_tlds():
    messages = [
        Message(role=Role.USER, text="check foo.io"),
        _checked_message(["foo"], [".io"]),
        Message(role=Role.USER, text="again"),
    ]

    request = should_auto_call_domain_tool(messages, "")

    assert request.names == ["foo"]
    assert request.tlds == [".io", ".com", ".ai", ".co", ".net", ".org", ".app", ".dev"]


def test_auto_call_when_assistant_announces_check():
    messages = [Message(role=Role.USER, text="hello")]
    request = should_auto_call_domain_tool(messages, "Let me check nova.ai for you")
    assert request == DomainRequest(names=["nova"], tlds=[".ai"])


def test_no_auto_call_without_trigger():
    assert should_auto_call_domain_tool([Message(role=Role.USER, text="hello")], "hi there") is None


def test_no_auto_call_when_nothing_to_extract():
    messages = [Message(role=Role.USER, text="I need a domain for my bakery")]
    assert should_auto_call_domain_tool(messages, "Sure! What vibe are you going for?") is None
