"""HTTP client for fetching HiBid listing pages."""

from __future__ import annotations

import logging

import httpx

from ..config import settings

logger = logging.getLogger(__name__)


class ListingFetchError(Exception):
    """Raised when a listing page cannot be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class ListingGoneError(ListingFetchError):
    """Raised when a listing page returns 404/410 (removed or expired)."""

    def __init__(self, url: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(url, f"HTTP {status_code}")


_HEADERS = {
    "User-Agent": settings.scraper_user_agent,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}


class HiBidClient:
    """Async HTTP client with a lazily created connection pool."""

    def __init__(self, timeout: float | None = None) -> None:
        self._client: httpx.AsyncClient | None = None
        self._timeout = timeout or settings.scraper_request_timeout

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers=_HEADERS,
                timeout=self._timeout,
                follow_redirects=True,
            )
        return self._client

    async def fetch_page(self, url: str) -> str:
        """Fetch a listing page. Raises ListingFetchError on any failure."""
        client = await self._get_client()
        try:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.text
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.warning("HTTP %s for %s", status_code, url)
            if status_code in (404, 410):
                raise ListingGoneError(url, status_code) from e
            raise ListingFetchError(url, f"HTTP {status_code}") from e
        except httpx.RequestError as e:
            logger.warning("Request error for %s: %s", url, e)
            raise ListingFetchError(url, type(e).__name__) from e

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
