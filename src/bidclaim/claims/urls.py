"""Auction listing URL handling: allow-list, identifier extraction, canonical form."""

from __future__ import annotations

import logging
import re
from urllib.parse import parse_qs, urlsplit

logger = logging.getLogger(__name__)

LISTING_MARKERS = ("catalog", "auction", "lot")
ID_QUERY_KEYS = ("id", "auctionId")

# Trusted sources. A URL must match one of these before anything is fetched.
#   https://hibid.com/catalog/697243/auction-name
#   https://hibid.com/lot/12345/item-name
#   https://subdomain.hibid.com/catalog/12345/auction-name
#   https://hibid.com/florida/catalog/12345/auction-name
ALLOWED_URL_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"^https?://(?:[\w-]+\.)*hibid\.com(?::\d+)?/(?:[^?#]*/)?(?:catalog|auction|lot)/\d+(?:[/?#]|$)",
        re.IGNORECASE,
    ),
]


def is_allowed_url(url: str | None) -> bool:
    """True when *url* matches at least one trusted source pattern."""
    if not url:
        return False
    return any(pattern.match(url.strip()) for pattern in ALLOWED_URL_PATTERNS)


def extract_auction_id(url: str | None) -> str | None:
    """Extract the external listing id from a listing URL.

    Looks for a ``catalog``/``auction``/``lot`` path segment followed by a
    numeric segment, then falls back to an ``id`` or ``auctionId`` query
    parameter. Returns None when neither is present.
    """
    if not url:
        return None
    try:
        parts = urlsplit(url.strip())
    except ValueError as e:
        logger.warning("Unparseable listing URL %r: %s", url, e)
        return None

    segments = [s for s in parts.path.split("/") if s]
    for marker, value in zip(segments, segments[1:]):
        if marker.lower() in LISTING_MARKERS and value.isdigit():
            return value

    query = parse_qs(parts.query)
    for key in ID_QUERY_KEYS:
        values = query.get(key)
        if values and values[0]:
            return values[0]

    logger.info("No auction id found in %s", url)
    return None


def canonicalize_url(url: str) -> str:
    """Drop the query string and trailing slashes.

    Idempotent: ``canonicalize_url(canonicalize_url(u)) == canonicalize_url(u)``.
    """
    return url.strip().split("?", 1)[0].rstrip("/")
