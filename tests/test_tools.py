import pytest

from namer.models import DomainCheckResult, DomainStatus
from namer.oracle import AvailabilityOracle
from namer.tools.check_domains_tool import CheckDomainsTool
from namer.tools.registry import ToolRegistry


class FakeOracle(AvailabilityOracle):
    def __init__(self, available: set[str] | None = None) -> None:
        self.available = available or set()
        self.calls: list[tuple[list[str], list[str]]] = []

    async def check_multiple_domains(self, base_names, tlds):
        self.calls.append((list(base_names), list(tlds)))
        return [
            DomainCheckResult(
                base_name=n,
                tld=t,
                domain=f"{n}{t}",
                status=DomainStatus.AVAILABLE if f"{n}{t}" in self.available else DomainStatus.TAKEN,
            )
            for n in base_names
            for t in tlds
        ]


@pytest.mark.asyncio
async def test_tool_registry_validates_and_executes():
    oracle = FakeOracle({"nova.io"})
    registry = ToolRegistry()
    registry.register(CheckDomainsTool(oracle, default_tlds=[".com"]))

    results = await registry.execute("checkDomains", {"names": ["nova"], "tlds": [".com", ".io"]})

    assert [r.domain for r in results] == ["nova.com", "nova.io"]
    assert [r.is_available for r in results] == [False, True]
    assert oracle.calls == [(["nova"], [".com", ".io"])]


@pytest.mark.asyncio
async def test_check_domains_uses_default_tlds():
    oracle = FakeOracle()
    registry = ToolRegistry()
    registry.register(CheckDomainsTool(oracle, default_tlds=[".com", ".ai"]))

    await registry.execute("checkDomains", {"names": ["zeta"]})

    assert oracle.calls == [(["zeta"], [".com", ".ai"])]


@pytest.mark.asyncio
async def test_check_domains_with_no_names_skips_oracle():
    oracle = FakeOracle()
    tool = CheckDomainsTool(oracle, default_tlds=[".com"])

    assert await tool.run(names=[]) == []
    assert oracle.calls == []


@pytest.mark.asyncio
async def test_tool_registry_rejects_invalid_input():
    registry = ToolRegistry()
    registry.register(CheckDomainsTool(FakeOracle(), default_tlds=[".com"]))

    with pytest.raises(ValueError):
        await registry.execute("checkDomains", {"tlds": [".com"]})

    with pytest.raises(ValueError):
        await registry.execute("checkDomains", {"names": "not-a-list"})


@pytest.mark.asyncio
async def test_tool_registry_rejects_unknown_tool():
    registry = ToolRegistry()

    with pytest.raises(KeyError):
        await registry.execute("searchWeb", {})


@pytest.mark.asyncio
async def test_tool_registry_propagates_tool_failure():
    class BrokenOracle(AvailabilityOracle):
        async def check_multiple_domains(self, base_names, tlds):
            raise RuntimeError("resolver exploded")

    registry = ToolRegistry()
    registry.register(CheckDomainsTool(BrokenOracle(), default_tlds=[".com"]))

    with pytest.raises(RuntimeError):
        await registry.execute("checkDomains", {"names": ["nova"]})


def test_tool_specs_use_function_format():
    registry = ToolRegistry()
    registry.register(CheckDomainsTool(FakeOracle(), default_tlds=[".com"]))

    specs = registry.list_tool_specs()

    assert registry.has("checkDomains")
    assert specs[0]["type"] == "function"
    assert specs[0]["function"]["name"] == "checkDomains"
    assert specs[0]["function"]["parameters"]["required"] == ["names"]
