"""Sploitus search API client."""

import httpx

from sploitbot.agent.tools.sploitus.models import ResultCategory, SearchResultSet, SortOrder

DEFAULT_BASE_URL = "https://sploitus.com/search"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class SploitusError(Exception):
    """Raised when a Sploitus request fails or returns an unusable payload."""


class SploitusClient:
    """Thin async client for the Sploitus search endpoint."""

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        proxy_url: str = "",
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.base_url = base_url or DEFAULT_BASE_URL
        self.timeout = timeout
        self.proxy_url = proxy_url or None
        self.user_agent = user_agent or DEFAULT_USER_AGENT

    def _headers(self) -> dict[str, str]:
        url = httpx.URL(self.base_url)
        origin = f"{url.scheme}://{url.netloc.decode('ascii')}"
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Origin": origin,
            "Referer": origin + "/",
            "User-Agent": self.user_agent,
        }

    async def search(
        self,
        *,
        query: str,
        category: ResultCategory = "exploits",
        sort: SortOrder = "default",
        offset: int = 0,
    ) -> SearchResultSet:
        """Run one search and parse the first page of results."""
        payload = {
            "type": category,
            "sort": sort,
            "query": query,
            "title": False,
            "offset": offset,
        }
        try:
            async with httpx.AsyncClient(proxy=self.proxy_url) as client:
                response = await client.post(
                    self.base_url,
                    json=payload,
                    headers=self._headers(),
                    timeout=self.timeout,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SploitusError(f"status code {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SploitusError(f"request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise SploitusError(f"invalid JSON response: {e}") from e

        try:
            return SearchResultSet.from_dict(data)
        except ValueError as e:
            raise SploitusError(f"unexpected response: {e}") from e
