"""
Web Search Tools
================
Serper (Google) search wrapped as two agent tools:

- internet-search: one query, up to 10 ranked results
- deep-research: 1-5 queries run independently, plus a synthesis hint

Both are plain request/response wrappers. They never cache, retry, or
rate-limit, and they never raise: a missing SERPER_API_KEY or an HTTP
failure is reported through `success: false` and an `error` string so the
calling phase can continue without live search data.

API Documentation: https://serper.dev

Author: Gia Tenica*
*Gia Tenica is an anagram for Agentic AI. Gia is a fully autonomous AI researcher,
for more information see: https://giatenica.com
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from research_ai.config import SEARCH, TIMEOUTS, get_serper_api_key
from research_ai.tools.base import Tool

DEFAULT_TIMEOUT = httpx.Timeout(float(TIMEOUTS.SEARCH_API), connect=10.0)

MISSING_KEY_ERROR = "SERPER_API_KEY not set. Add it to .env for live web search."
DEEP_MISSING_KEY_ERROR = "SERPER_API_KEY not set."
DEEP_MISSING_KEY_HINT = "Add SERPER_API_KEY to .env for live deep research."


@dataclass
class SearchHit:
    """One organic search result."""

    title: str = ""
    link: str = ""
    snippet: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"title": self.title, "link": self.link, "snippet": self.snippet}


@dataclass
class SearchResponse:
    """Outcome of a single search request."""

    query: str
    success: bool
    results: List[SearchHit] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "query": self.query,
            "results": [hit.to_dict() for hit in self.results],
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


class SerperSearchClient:
    """Async client for the Serper search endpoint.

    Usage:
        client = SerperSearchClient()
        response = await client.search("B2B onboarding tools pricing", num_results=5)
        for hit in response.results:
            print(hit.title, hit.link)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: str = SEARCH.API_URL,
        timeout: Optional[httpx.Timeout] = None,
    ):
        """Initialize the search client.

        Args:
            api_key: Serper API key (defaults to SERPER_API_KEY env var)
            api_url: Search endpoint
            timeout: Optional custom timeout configuration
        """
        self.api_key = (api_key if api_key is not None else get_serper_api_key()).strip()
        self.api_url = api_url
        self.timeout = timeout or DEFAULT_TIMEOUT
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _get_headers(self) -> Dict[str, str]:
        """Get request headers, including the API key."""
        return {
            "Content-Type": "application/json",
            "X-API-KEY": self.api_key,
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self._get_headers(),
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _parse_organic(data: Any, limit: int) -> List[SearchHit]:
        """Parse the `organic` list of a Serper response, capped at `limit`."""
        if not isinstance(data, dict):
            return []
        organic = data.get("organic") or []
        hits: List[SearchHit] = []
        for item in organic:
            if not isinstance(item, dict):
                continue
            hits.append(SearchHit(
                title=str(item.get("title") or ""),
                link=str(item.get("link") or ""),
                snippet=str(item.get("snippet") or ""),
            ))
            if len(hits) >= limit:
                break
        return hits

    async def search(self, query: str, num_results: int = SEARCH.DEFAULT_NUM_RESULTS) -> SearchResponse:
        """Run one search request.

        Args:
            query: Search query
            num_results: Number of results to request and keep

        Returns:
            SearchResponse; failures are reported in `error`, never raised
        """
        if not self.is_configured:
            return SearchResponse(query=query, success=False, error=MISSING_KEY_ERROR)

        client = await self._get_client()
        logger.debug(f"Serper search: {query[:60]} (num={num_results})")

        try:
            response = await client.post(self.api_url, json={"q": query, "num": num_results})
        except httpx.HTTPError as e:
            logger.warning(f"Serper request failed for '{query[:60]}': {e}")
            return SearchResponse(query=query, success=False, error=str(e) or type(e).__name__)

        if response.status_code < 200 or response.status_code >= 300:
            error = response.text or response.reason_phrase or f"HTTP {response.status_code}"
            logger.warning(f"Serper returned {response.status_code} for '{query[:60]}'")
            return SearchResponse(query=query, success=False, error=error)

        try:
            data = response.json()
        except ValueError as e:
            return SearchResponse(query=query, success=False, error=f"Invalid JSON from search API: {e}")

        return SearchResponse(query=query, success=True, results=self._parse_organic(data, num_results))


async def internet_search(
    query: str,
    num_results: int = SEARCH.DEFAULT_NUM_RESULTS,
    client: Optional[SerperSearchClient] = None,
) -> Dict[str, Any]:
    """Single-query web search.

    Returns:
        {success, query, results: [{title, link, snippet}], error?}
    """
    own_client = client is None
    client = client or SerperSearchClient()
    try:
        if not client.is_configured:
            logger.warning("internet-search called without SERPER_API_KEY")
            return SearchResponse(query=query, success=False, error=MISSING_KEY_ERROR).to_dict()
        response = await client.search(query, num_results=num_results)
        return response.to_dict()
    finally:
        if own_client:
            await client.close()


async def deep_research(
    reasoning: str,
    queries: List[str],
    client: Optional[SerperSearchClient] = None,
) -> Dict[str, Any]:
    """Multi-query research.

    Every query runs independently. A query that fails contributes an empty
    result list; it never fails the whole call.

    Returns:
        {success, reasoning, findings: [{query, results}], synthesisHint, error?}
    """
    own_client = client is None
    client = client or SerperSearchClient()
    try:
        if not client.is_configured:
            logger.warning("deep-research called without SERPER_API_KEY")
            return {
                "success": False,
                "reasoning": reasoning,
                "findings": [],
                "synthesisHint": DEEP_MISSING_KEY_HINT,
                "error": DEEP_MISSING_KEY_ERROR,
            }

        per_query = SEARCH.DEEP_RESULTS_PER_QUERY
        responses = await asyncio.gather(
            *(client.search(query, num_results=per_query) for query in queries),
            return_exceptions=True,
        )

        findings = []
        failed = 0
        for query, response in zip(queries, responses):
            if isinstance(response, BaseException):
                logger.warning(f"deep-research query '{query[:60]}' raised {type(response).__name__}: {response}")
                response = SearchResponse(query=query, success=False, error=str(response))
            if not response.success:
                failed += 1
            hits = response.results if response.success else []
            findings.append({"query": query, "results": [hit.to_dict() for hit in hits]})

        logger.info(f"deep-research ran {len(queries)} queries ({failed} failed)")

        return {
            "success": True,
            "reasoning": reasoning,
            "findings": findings,
            "synthesisHint": (
                f"Synthesize the above findings with respect to: {reasoning}. "
                "Cite sources; note conflicts or gaps."
            ),
        }
    finally:
        if own_client:
            await client.close()


SEARCH_HIT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "link": {"type": "string"},
        "snippet": {"type": "string"},
    },
    "required": ["title", "link", "snippet"],
}


def create_internet_search_tool(client: Optional[SerperSearchClient] = None) -> Tool:
    """Build the internet-search tool, optionally bound to a shared client."""

    async def _execute(query: str, numResults: int = SEARCH.DEFAULT_NUM_RESULTS, **_: Any) -> Dict[str, Any]:
        return await internet_search(query, num_results=numResults, client=client)

    return Tool(
        id="internet-search",
        description=(
            "Search the web for current information. Use for market data, company info, "
            "news, or validating claims. Prefer specific queries."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "query": {"type": "string", "minLength": 1, "maxLength": 300, "description": "Search query"},
                "numResults": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": SEARCH.MAX_NUM_RESULTS,
                    "default": SEARCH.DEFAULT_NUM_RESULTS,
                },
            },
            "required": ["query"],
        },
        output_schema={
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "query": {"type": "string"},
                "results": {"type": "array", "items": SEARCH_HIT_SCHEMA},
                "error": {"type": "string"},
            },
            "required": ["success", "query", "results"],
        },
        execute=_execute,
    )


def create_deep_research_tool(client: Optional[SerperSearchClient] = None) -> Tool:
    """Build the deep-research tool, optionally bound to a shared client."""

    async def _execute(reasoning: str, queries: List[str], **_: Any) -> Dict[str, Any]:
        return await deep_research(reasoning, queries, client=client)

    return Tool(
        id="deep-research",
        description=(
            "Perform multi-query research with reasoning. Use when you need to validate hypotheses, "
            "compare sources, or synthesize evidence. Provide 1-5 sub-queries and your reasoning; "
            "returns search results per query plus a synthesis prompt."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "reasoning": {
                    "type": "string",
                    "description": "Brief reasoning: what you are trying to verify or find",
                },
                "queries": {
                    "type": "array",
                    "items": {"type": "string", "minLength": 1, "maxLength": 200},
                    "minItems": 1,
                    "maxItems": SEARCH.MAX_DEEP_QUERIES,
                    "description": "1-5 search queries to run (e.g. different angles or keywords)",
                },
            },
            "required": ["reasoning", "queries"],
        },
        output_schema={
            "type": "object",
            "properties": {
                "success": {"type": "boolean"},
                "reasoning": {"type": "string"},
                "findings": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "query": {"type": "string"},
                            "results": {"type": "array", "items": SEARCH_HIT_SCHEMA},
                        },
                        "required": ["query", "results"],
                    },
                },
                "synthesisHint": {"type": "string"},
                "error": {"type": "string"},
            },
            "required": ["success", "reasoning", "findings", "synthesisHint"],
        },
        execute=_execute,
    )


def create_search_tools(client: Optional[SerperSearchClient] = None) -> Dict[str, Tool]:
    """The shared tool set every phase agent receives."""
    internet = create_internet_search_tool(client)
    deep = create_deep_research_tool(client)
    return {internet.id: internet, deep.id: deep}
