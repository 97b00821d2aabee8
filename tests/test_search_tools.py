"""Tests for the Serper search client and the search tools.

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from research_ai.tools.search import (
    DEEP_MISSING_KEY_ERROR,
    DEEP_MISSING_KEY_HINT,
    MISSING_KEY_ERROR,
    SerperSearchClient,
    create_search_tools,
    deep_research,
    internet_search,
)


def _organic(count: int, prefix: str = "Result"):
    return {
        "organic": [
            {"title": f"{prefix} {i}", "link": f"https://example.com/{i}", "snippet": f"Snippet {i}"}
            for i in range(count)
        ]
    }


def _http_response(status_code: int = 200, payload=None, text: str = "", reason: str = "OK"):
    return MagicMock(
        status_code=status_code,
        text=text,
        reason_phrase=reason,
        json=MagicMock(return_value=payload if payload is not None else {}),
    )


class TestSerperSearchClient:
    """Test the HTTP client wrapper."""

    @pytest.fixture
    def client(self):
        return SerperSearchClient(api_key="test-key")

    @pytest.mark.unit
    def test_headers(self, client):
        headers = client._get_headers()
        assert headers["X-API-KEY"] == "test-key"
        assert headers["Content-Type"] == "application/json"

    @pytest.mark.unit
    def test_is_configured(self):
        assert SerperSearchClient(api_key="  ").is_configured is False
        assert SerperSearchClient(api_key="k").is_configured is True

    @pytest.mark.asyncio
    async def test_search_success_caps_results(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=_http_response(payload=_organic(8)))
            mock_get_client.return_value = mock_http

            response = await client.search("b2b onboarding pricing", num_results=3)

        assert response.success is True
        assert len(response.results) == 3
        assert response.results[0].title == "Result 0"
        _args, kwargs = mock_http.post.call_args
        assert kwargs["json"] == {"q": "b2b onboarding pricing", "num": 3}

    @pytest.mark.asyncio
    async def test_search_missing_fields_become_empty_strings(self, client):
        payload = {"organic": [{"title": "Only title"}, "junk"]}
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=_http_response(payload=payload))
            mock_get_client.return_value = mock_http

            response = await client.search("q")

        assert response.success is True
        assert response.results[0].to_dict() == {"title": "Only title", "link": "", "snippet": ""}
        assert len(response.results) == 1

    @pytest.mark.asyncio
    async def test_search_non_2xx_uses_body_then_reason(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(side_effect=[
                _http_response(status_code=403, text="Unauthorized.", reason="Forbidden"),
                _http_response(status_code=500, text="", reason="Internal Server Error"),
            ])
            mock_get_client.return_value = mock_http

            first = await client.search("q")
            second = await client.search("q")

        assert first.success is False and first.error == "Unauthorized."
        assert second.success is False and second.error == "Internal Server Error"
        assert first.results == []

    @pytest.mark.asyncio
    async def test_search_transport_error(self, client):
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
            mock_get_client.return_value = mock_http

            response = await client.search("q")

        assert response.success is False
        assert "connection refused" in response.error

    @pytest.mark.asyncio
    async def test_search_invalid_json(self, client):
        bad = _http_response()
        bad.json = MagicMock(side_effect=ValueError("Expecting value"))
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=bad)
            mock_get_client.return_value = mock_http

            response = await client.search("q")

        assert response.success is False
        assert "Invalid JSON" in response.error


class TestInternetSearch:
    """Test the internet-search operation."""

    @pytest.mark.asyncio
    async def test_missing_key(self):
        client = SerperSearchClient(api_key="")
        result = await internet_search("anything", client=client)

        assert result == {"success": False, "query": "anything", "results": [], "error": MISSING_KEY_ERROR}

    @pytest.mark.asyncio
    async def test_missing_key_from_environment(self, monkeypatch):
        monkeypatch.delenv("SERPER_API_KEY", raising=False)
        result = await internet_search("anything")

        assert result["success"] is False
        assert result["results"] == []
        assert result["error"]

    @pytest.mark.asyncio
    async def test_success_shape(self):
        client = SerperSearchClient(api_key="k")
        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(return_value=_http_response(payload=_organic(2)))
            mock_get_client.return_value = mock_http

            result = await internet_search("q", num_results=5, client=client)

        assert result["success"] is True
        assert result["query"] == "q"
        assert len(result["results"]) == 2
        assert "error" not in result


class TestDeepResearch:
    """Test the deep-research operation."""

    @pytest.mark.asyncio
    async def test_missing_key(self):
        result = await deep_research("why", ["a", "b"], client=SerperSearchClient(api_key=""))

        assert result["success"] is False
        assert result["findings"] == []
        assert result["synthesisHint"] == DEEP_MISSING_KEY_HINT
        assert result["error"] == DEEP_MISSING_KEY_ERROR

    @pytest.mark.asyncio
    async def test_one_failed_query_yields_empty_findings(self):
        client = SerperSearchClient(api_key="k")

        async def _post(url, json):
            if json["q"] == "broken":
                raise httpx.ReadTimeout("timed out")
            return _http_response(payload=_organic(5, prefix=json["q"]))

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(side_effect=_post)
            mock_get_client.return_value = mock_http

            result = await deep_research("validate demand", ["alpha", "broken", "gamma"], client=client)

        assert result["success"] is True
        assert [f["query"] for f in result["findings"]] == ["alpha", "broken", "gamma"]
        assert result["findings"][1]["results"] == []
        assert len(result["findings"][0]["results"]) == 3
        assert len(result["findings"][2]["results"]) == 3
        assert result["synthesisHint"] == (
            "Synthesize the above findings with respect to: validate demand. "
            "Cite sources; note conflicts or gaps."
        )

    @pytest.mark.asyncio
    async def test_unexpected_query_exception_yields_empty_findings(self):
        client = SerperSearchClient(api_key="k")

        async def _post(url, json):
            if json["q"] == "broken":
                raise RuntimeError("Cannot send a request, as the client has been closed.")
            return _http_response(payload=_organic(5, prefix=json["q"]))

        with patch.object(client, "_get_client") as mock_get_client:
            mock_http = AsyncMock()
            mock_http.post = AsyncMock(side_effect=_post)
            mock_get_client.return_value = mock_http

            result = await deep_research("r", ["a", "broken", "c"], client=client)

        assert result["success"] is True
        assert [f["query"] for f in result["findings"]] == ["a", "broken", "c"]
        assert result["findings"][1]["results"] == []
        assert len(result["findings"][0]["results"]) == 3
        assert len(result["findings"][2]["results"]) == 3


class TestSearchTools:
    """Test the tool wrappers exposed to agents."""

    @pytest.mark.unit
    def test_tool_ids_and_definitions(self):
        tools = create_search_tools(SerperSearchClient(api_key=""))

        assert set(tools) == {"internet-search", "deep-research"}
        definition = tools["internet-search"].to_anthropic()
        assert definition["name"] == "internet-search"
        assert definition["input_schema"]["required"] == ["query"]

    @pytest.mark.asyncio
    async def test_invalid_arguments_return_unsuccessful_result(self):
        tools = create_search_tools(SerperSearchClient(api_key="k"))

        too_many = await tools["deep-research"].invoke({"reasoning": "r", "queries": ["q"] * 6})
        too_long = await tools["internet-search"].invoke({"query": "x" * 301})
        not_object = await tools["internet-search"].invoke("just a string")

        for result in (too_many, too_long, not_object):
            assert result["success"] is False
            assert result["error"]

    @pytest.mark.asyncio
    async def test_default_num_results_applied(self):
        client = SerperSearchClient(api_key="k")
        tools = create_search_tools(client)

        with patch.object(client, "search", AsyncMock()) as mock_search:
            mock_search.return_value = MagicMock(to_dict=MagicMock(return_value={"success": True}))
            await tools["internet-search"].invoke({"query": "q"}, run_context=None)

        mock_search.assert_awaited_once_with("q", num_results=5)

    @pytest.mark.asyncio
    async def test_internet_search_accepts_num_results(self):
        client = SerperSearchClient(api_key="k")

        with patch.object(client, "search", AsyncMock()) as mock_search:
            mock_search.return_value = MagicMock(to_dict=MagicMock(return_value={"success": True}))
            await internet_search("q", num_results=3, client=client)

        mock_search.assert_awaited_once_with("q", num_results=3)

    @pytest.mark.asyncio
    async def test_unexpected_exception_in_tool_becomes_unsuccessful_result(self):
        client = SerperSearchClient(api_key="k")
        tools = create_search_tools(client)

        with patch.object(client, "search", AsyncMock(side_effect=RuntimeError("client has been closed"))):
            result = await tools["internet-search"].invoke({"query": "q"}, run_context=None)

        assert result["success"] is False
        assert "client has been closed" in result["error"]

    @pytest.mark.asyncio
    async def test_argument_named_like_context_does_not_collide(self):
        client = SerperSearchClient(api_key="k")
        tools = create_search_tools(client)

        with patch.object(client, "search", AsyncMock()) as mock_search:
            mock_search.return_value = MagicMock(to_dict=MagicMock(return_value={"success": True}))
            result = await tools["internet-search"].invoke(
                {"query": "q", "run_context": "from the model"}, run_context=None
            )

        assert result == {"success": True}
        mock_search.assert_awaited_once_with("q", num_results=5)
