"""Parser for HiBid listing pages.

Lot pages (``/lot/<id>``) expose title, location, auctioneer and auction
name but no lot count. Catalog pages (``/catalog/<id>``) expose the lot count
in the paging header and the auctioneer address.
"""

from __future__ import annotations

import logging
import re

from bs4 import BeautifulSoup

from ..schemas import ListingData

logger = logging.getLogger(__name__)

_ZIP_RE = re.compile(r"\b\d{5}\b")
_PAGING_RE = re.compile(r"of\s+([\d,]+)\s+lots", re.IGNORECASE)
_LOTS_BUTTON_RE = re.compile(r"(\d+)\s+Lots", re.IGNORECASE)
_WS_RE = re.compile(r"\s+")


class ListingPageParser:
    """Parse a HiBid lot or catalog page into ListingData."""

    def parse(self, html: str, url: str) -> ListingData | None:
        if not html or not html.strip():
            return None
        soup = BeautifulSoup(html, "lxml")
        if "/lot/" in url.lower():
            return self._parse_lot(soup)
        return self._parse_catalog(soup)

    def _parse_lot(self, soup: BeautifulSoup) -> ListingData:
        title = None
        if soup.title and soup.title.string:
            # "<lot title> | Live and Online Auctions on HiBid.com"
            title = soup.title.string.split("|")[0].strip() or None
        if not title:
            title = _first_text(soup, "h1")

        location = _first_text(soup, "app-city-state-zip-link a")
        if location:
            location = _WS_RE.sub(" ", location)
        zip_code = None
        if location:
            m = _ZIP_RE.search(location)
            zip_code = m.group(0) if m else None

        auction_name = None
        for row in soup.select("app-auction-info-panel tr"):
            th = row.find("th")
            td = row.find("td")
            if th and td and th.get_text(strip=True) == "Name":
                auction_name = td.get_text(strip=True)

        return ListingData(
            title=title,
            item_count=None,  # not shown on lot pages
            zip_code=zip_code,
            location=location,
            auctioneer=_first_text(soup, "app-company-page-link a"),
            auction_name=auction_name,
        )

    def _parse_catalog(self, soup: BeautifulSoup) -> ListingData:
        item_count = None
        paging = " ".join(el.get_text(" ", strip=True) for el in soup.select(".paging-item-count"))
        m = _PAGING_RE.search(paging)
        if m:
            item_count = int(m.group(1).replace(",", ""))
        else:
            buttons = " ".join(el.get_text(" ", strip=True) for el in soup.select(".auction-btn"))
            m = _LOTS_BUTTON_RE.search(buttons)
            if m:
                item_count = int(m.group(1))

        zip_code = None
        address = " ".join(el.get_text(" ", strip=True) for el in soup.select(".company-address"))
        m = _ZIP_RE.search(address)
        if m:
            zip_code = m.group(0)

        lines = [el.get_text(strip=True) for el in soup.select(".company-address strong div")]
        location = ", ".join(line for line in lines if line) or None

        title = _first_text(soup, "h1") or _first_text(soup, ".auction-header")

        return ListingData(
            title=title,
            item_count=item_count,
            zip_code=zip_code,
            location=location,
        )


def _first_text(soup: BeautifulSoup, selector: str) -> str | None:
    el = soup.select_one(selector)
    if el is None:
        return None
    return el.get_text(" ", strip=True) or None
