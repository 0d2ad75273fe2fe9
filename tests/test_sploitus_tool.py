import httpx
import pytest

from sploitbot.agent.search_log import InMemorySearchLogProvider, SearchLog
from sploitbot.agent.tools.factory import build_tool_registry
from sploitbot.agent.tools.sploitus import SploitusTool, ToolContext
from sploitbot.config.schema import Config, SploitusToolConfig


def _payload(n: int, total: int | None = None) -> dict:
    return {
        "exploits": [
            {
                "id": f"EDB-ID:{i}",
                "title": f"Exploit {i}",
                "type": "exploitdb",
                "href": f"https://example.com/{i}",
                "score": 6.5,
            }
            for i in range(n)
        ],
        "exploits_total": n if total is None else total,
    }


def _make_config() -> SploitusToolConfig:
    return SploitusToolConfig(base_url="https://sploitus.example/search", timeout=5.0)


def _stub_client(monkeypatch, calls: dict, response_factory) -> None:
    class StubClient:
        def __init__(self, **kwargs):
            calls["client_kwargs"] = kwargs

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def post(self, url, json=None, headers=None, timeout=None):
            calls["url"] = url
            calls["json"] = json
            calls["headers"] = headers
            calls["timeout"] = timeout
            return response_factory(httpx.Request("POST", url))

    monkeypatch.setattr("sploitbot.agent.tools.sploitus.client.httpx.AsyncClient", StubClient)


@pytest.mark.asyncio
async def test_sploitus_search_success(monkeypatch) -> None:
    calls: dict = {}
    _stub_client(monkeypatch, calls, lambda req: httpx.Response(200, json=_payload(2, 77), request=req))

    tool = SploitusTool(_make_config())
    result = await tool.execute(query="nginx", exploit_type="exploits", sort="date", max_results=5)

    assert "**Query:** `nginx`" in result
    assert "**Total matches on Sploitus:** 77" in result
    assert "## Exploits (showing up to 2)" in result
    assert "### 2. Exploit 1" in result
    assert calls["url"] == "https://sploitus.example/search"
    assert calls["json"] == {
        "type": "exploits",
        "sort": "date",
        "query": "nginx",
        "title": False,
        "offset": 0,
    }
    assert calls["headers"]["Origin"] == "https://sploitus.example"
    assert calls["headers"]["Referer"] == "https://sploitus.example/"
    assert calls["timeout"] == 5.0
    assert calls["client_kwargs"] == {"proxy": None}


@pytest.mark.asyncio
async def test_sploitus_search_defaults(monkeypatch) -> None:
    calls: dict = {}
    _stub_client(monkeypatch, calls, lambda req: httpx.Response(200, json=_payload(15), request=req))

    tool = SploitusTool(_make_config())
    result = await tool.execute(query="  test  ")

    assert calls["json"]["type"] == "exploits"
    assert calls["json"]["sort"] == "default"
    assert calls["json"]["query"] == "test"
    assert result.count("### ") == 10


@pytest.mark.asyncio
async def test_sploitus_non_positive_max_results_uses_default(monkeypatch) -> None:
    calls: dict = {}
    _stub_client(monkeypatch, calls, lambda req: httpx.Response(200, json=_payload(12), request=req))

    tool = SploitusTool(_make_config())
    result = await tool.execute(query="test", max_results=0)

    assert result.count("### ") == 10


@pytest.mark.asyncio
async def test_sploitus_tools_search(monkeypatch) -> None:
    calls: dict = {}
    payload = {
        "exploits": [
            {
                "id": "T-1",
                "title": "Metasploit Framework",
                "type": "kitploit",
                "href": "https://example.com/msf",
                "download": "https://github.com/rapid7/metasploit-framework",
            }
        ],
        "exploits_total": 1,
    }
    _stub_client(monkeypatch, calls, lambda req: httpx.Response(200, json=payload, request=req))

    tool = SploitusTool(_make_config())
    result = await tool.execute(query="metasploit", exploit_type="tools")

    assert calls["json"]["type"] == "tools"
    assert "## Security Tools (showing up to 1)" in result
    assert "**Download:** https://github.com/rapid7/metasploit-framework" in result


@pytest.mark.asyncio
async def test_sploitus_uses_configured_proxy(monkeypatch) -> None:
    calls: dict = {}
    _stub_client(monkeypatch, calls, lambda req: httpx.Response(200, json=_payload(0), request=req))

    cfg = _make_config()
    cfg.proxy_url = "http://127.0.0.1:8080"
    await SploitusTool(cfg).execute(query="x")

    assert calls["client_kwargs"] == {"proxy": "http://127.0.0.1:8080"}


@pytest.mark.asyncio
async def test_sploitus_empty_results(monkeypatch) -> None:
    calls: dict = {}
    _stub_client(monkeypatch, calls, lambda req: httpx.Response(200, json=_payload(0), request=req))

    result = await SploitusTool(_make_config()).execute(query="nothing")

    assert "No exploits were found" in result


@pytest.mark.asyncio
async def test_sploitus_status_error(monkeypatch) -> None:
    calls: dict = {}
    _stub_client(monkeypatch, calls, lambda req: httpx.Response(429, request=req))

    result = await SploitusTool(_make_config()).execute(query="nginx")

    assert result == "Error: sploitus search failed: status code 429"


@pytest.mark.asyncio
async def test_sploitus_transport_error(monkeypatch) -> None:
    def boom(req):
        raise httpx.ConnectError("boom", request=req)

    _stub_client(monkeypatch, {}, boom)

    result = await SploitusTool(_make_config()).execute(query="nginx")

    assert result == "Error: sploitus search failed: request failed: boom"


@pytest.mark.asyncio
async def test_sploitus_invalid_json(monkeypatch) -> None:
    _stub_client(monkeypatch, {}, lambda req: httpx.Response(200, content=b"<html>", request=req))

    result = await SploitusTool(_make_config()).execute(query="nginx")

    assert result.startswith("Error: sploitus search failed: invalid JSON response")


@pytest.mark.asyncio
async def test_sploitus_unexpected_payload(monkeypatch) -> None:
    _stub_client(monkeypatch, {}, lambda req: httpx.Response(200, json={"exploits": "x"}, request=req))

    result = await SploitusTool(_make_config()).execute(query="nginx")

    assert result == (
        "Error: sploitus search failed: unexpected response: "
        "search response field 'exploits' must be a list"
    )


@pytest.mark.asyncio
async def test_sploitus_disabled() -> None:
    tool = SploitusTool(SploitusToolConfig(enabled=False))

    assert tool.is_available is False
    assert await tool.execute(query="nginx") == "Error: sploitus search is disabled"


@pytest.mark.asyncio
async def test_sploitus_records_search_log(monkeypatch) -> None:
    _stub_client(monkeypatch, {}, lambda req: httpx.Response(200, json=_payload(1), request=req))
    provider = InMemorySearchLogProvider()

    tool = SploitusTool(
        _make_config(),
        search_log_provider=provider,
        context=ToolContext(flow_id=1, task_id=2, subtask_id=3),
    )
    result = await tool.execute(query="CVE-2026")

    assert len(provider.entries) == 1
    entry = provider.entries[0]
    assert entry.engine == "sploitus"
    assert entry.query == "CVE-2026"
    assert entry.result == result
    assert (entry.flow_id, entry.task_id, entry.subtask_id) == (1, 2, 3)


@pytest.mark.asyncio
async def test_sploitus_failed_search_is_not_logged(monkeypatch) -> None:
    _stub_client(monkeypatch, {}, lambda req: httpx.Response(500, request=req))
    provider = InMemorySearchLogProvider()

    await SploitusTool(_make_config(), search_log_provider=provider).execute(query="x")

    assert provider.entries == []


@pytest.mark.asyncio
async def test_sploitus_log_failure_keeps_result(monkeypatch) -> None:
    _stub_client(monkeypatch, {}, lambda req: httpx.Response(200, json=_payload(1), request=req))

    class BrokenProvider:
        async def put_log(self, entry: SearchLog) -> int:
            raise RuntimeError("database unavailable")

    result = await SploitusTool(_make_config(), search_log_provider=BrokenProvider()).execute(query="x")

    assert "### 1. Exploit 0" in result


@pytest.mark.asyncio
async def test_registry_rejects_invalid_json_arguments() -> None:
    registry = build_tool_registry(Config())

    result = await registry.execute_json("sploitus_search", "{invalid json}")

    assert result.startswith("Error: invalid JSON arguments for tool 'sploitus_search'")


@pytest.mark.asyncio
async def test_registry_validates_sploitus_parameters() -> None:
    registry = build_tool_registry(Config())

    missing = await registry.execute("sploitus_search", {})
    bad_type = await registry.execute("sploitus_search", {"query": "x", "exploit_type": "papers"})

    assert "missing required query" in missing
    assert "exploit_type must be one of" in bad_type


@pytest.mark.asyncio
async def test_registry_executes_json_arguments(monkeypatch) -> None:
    calls: dict = {}
    _stub_client(monkeypatch, calls, lambda req: httpx.Response(200, json=_payload(3), request=req))

    registry = build_tool_registry(Config())
    result = await registry.execute_json(
        "sploitus_search",
        '{"query": "nginx", "exploit_type": "exploits", "max_results": 2}',
    )

    assert result.count("### ") == 2
    assert calls["url"] == "https://sploitus.com/search"
    assert calls["headers"]["Origin"] == "https://sploitus.com"


def test_factory_skips_disabled_sploitus() -> None:
    config = Config()
    config.tools.sploitus.enabled = False

    assert "sploitus_search" not in build_tool_registry(config)
    assert build_tool_registry(Config()).tool_names == ["sploitus_search"]


def test_sploitus_tool_schema() -> None:
    schema = SploitusTool().to_schema()

    assert schema["type"] == "function"
    assert schema["function"]["name"] == "sploitus_search"
    assert schema["function"]["parameters"]["required"] == ["query"]
