"""
Web search provider interface and implementations.

Providers return ranked title/snippet/link hits for a query, or None when the
search could not be performed. They never raise: transient failures and
malformed responses are retried under the configured policy and then logged
and reported as "no result".
"""
import time
import logging
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import httpx

from ace.core.config import AppConfig
from ace.observability.logger import log_warning
from ace.research.retry import RetryError, RetryPolicy, call_with_retry
from ace.research.types import SearchHit

logger = logging.getLogger(__name__)

GOOGLE_CSE_URL = "https://www.googleapis.com/customsearch/v1"


def _text(item: dict, key: str) -> str:
    value = item.get(key)
    return value.strip() if isinstance(value, str) else ""


class SearchUnavailable(Exception):
    """Search backend unreachable, returned a non-success status, or sent an unreadable body."""


class SearchProvider(ABC):
    """Base interface for web search providers."""

    @abstractmethod
    def search(self, query: str) -> Optional[List[SearchHit]]:
        """
        Run a web search.

        Args:
            query: Free-text query

        Returns:
            Ranked hits (possibly empty), or None if the search failed
        """
        ...


class StubSearchProvider(SearchProvider):
    """
    Deterministic provider for local runs and tests.

    Returns canned hits for known queries and an empty list otherwise.
    Every query is recorded in `queries`.
    """

    def __init__(self, canned: Optional[Dict[str, List[SearchHit]]] = None):
        self.canned = {k.lower(): v for k, v in (canned or {}).items()}
        self.queries: List[str] = []

    def search(self, query: str) -> Optional[List[SearchHit]]:
        self.queries.append(query)
        return list(self.canned.get(query.lower(), []))


class GoogleSearchProvider(SearchProvider):
    """Google Custom Search JSON API provider."""

    def __init__(
        self,
        api_key: str,
        engine_id: str,
        num_results: int = 5,
        timeout: float = 10.0,
        retry_policy: Optional[RetryPolicy] = None,
        http_client: Optional[httpx.Client] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the provider.

        Args:
            api_key: Custom Search API key
            engine_id: Programmable search engine id (cx)
            num_results: Results requested per query (API maximum is 10)
            timeout: Request timeout in seconds
            retry_policy: Attempts and delay between them
            http_client: Optional shared client (tests pass one with a mock transport)
            sleep: Sleep function used between attempts
        """
        self.api_key = api_key
        self.engine_id = engine_id
        self.num_results = max(1, min(10, num_results))
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self._client = http_client
        self._sleep = sleep

    def _fetch(self, query: str) -> List[SearchHit]:
        params = {
            "key": self.api_key,
            "cx": self.engine_id,
            "q": query,
            "num": str(self.num_results),
        }
        try:
            if self._client is not None:
                response = self._client.get(GOOGLE_CSE_URL, params=params, timeout=self.timeout)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.get(GOOGLE_CSE_URL, params=params)
        except httpx.HTTPError as e:
            raise SearchUnavailable(f"request failed: {type(e).__name__}") from e

        if response.status_code != 200:
            raise SearchUnavailable(f"status {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise SearchUnavailable("unreadable response body") from e

        return self._parse_items(data)

    def _parse_items(self, data) -> List[SearchHit]:
        if not isinstance(data, dict):
            raise SearchUnavailable("unexpected response shape")

        # The API omits "items" entirely when nothing matched
        items = data.get("items") or []
        if not isinstance(items, list):
            raise SearchUnavailable("unexpected items shape")

        hits = []
        for item in items:
            if not isinstance(item, dict):
                continue
            title = _text(item, "title")
            link = _text(item, "link")
            if not title or not link:
                continue
            hits.append(SearchHit(title=title, snippet=_text(item, "snippet"), link=link))
        return hits

    def search(self, query: str) -> Optional[List[SearchHit]]:
        if not query or not query.strip():
            return []

        start = time.perf_counter()
        try:
            hits = call_with_retry(
                lambda: self._fetch(query),
                self.retry_policy,
                retry_on=(SearchUnavailable,),
                sleep=self._sleep,
            )
        except RetryError as e:
            duration_ms = int((time.perf_counter() - start) * 1000)
            log_warning(
                "Search failed",
                {
                    "query": query,
                    "error": str(e.__cause__ or e),
                    "attempts": e.attempts,
                    "duration_ms": duration_ms,
                },
            )
            return None

        logger.debug(f"Search '{query}': {len(hits)} results")
        return hits


def select_search_provider(config: AppConfig) -> SearchProvider:
    """
    Return the Google provider when credentials are configured,
    otherwise a StubSearchProvider (no network calls).
    """
    if not config.google_search_api_key or not config.google_search_engine_id:
        logger.warning(
            "GOOGLE_SEARCH_API_KEY/GOOGLE_SEARCH_ENGINE_ID not configured. "
            "Using StubSearchProvider."
        )
        return StubSearchProvider()

    return GoogleSearchProvider(
        api_key=config.google_search_api_key,
        engine_id=config.google_search_engine_id,
        num_results=config.search_results_per_query,
        timeout=config.search_timeout_seconds,
        retry_policy=RetryPolicy(
            max_attempts=config.search_max_attempts,
            delay_seconds=config.search_retry_delay_seconds,
        ),
    )
