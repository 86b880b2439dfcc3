"""HiBid listing metadata fetcher."""

from __future__ import annotations

import logging

from ..schemas import ListingData
from .client import HiBidClient
from .parser import ListingPageParser

logger = logging.getLogger(__name__)


class HiBidScraper:
    """High-level scraping orchestrator."""

    def __init__(self, client: HiBidClient | None = None) -> None:
        self.client = client or HiBidClient()
        self._parser = ListingPageParser()

    async def fetch_listing(self, url: str) -> ListingData | None:
        """Fetch and parse one listing page.

        Raises ListingFetchError when the page cannot be retrieved; returns
        None when it was retrieved but could not be parsed.
        """
        html = await self.client.fetch_page(url)
        listing = self._parser.parse(html, url)
        if listing is not None:
            logger.debug("Parsed %s: %s", url, listing)
        return listing

    async def close(self) -> None:
        await self.client.close()
