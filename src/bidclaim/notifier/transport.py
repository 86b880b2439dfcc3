"""Outbound JSON POST with retry, shared by the HTTP-based notifiers."""

from __future__ import annotations

import asyncio
import logging

import httpx

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
RETRY_BACKOFF = (1, 3, 5)  # seconds


async def post_json(
    url: str,
    payload: dict,
    *,
    headers: dict | None = None,
    max_retries: int = MAX_RETRIES,
) -> httpx.Response | None:
    """POST *payload* as JSON, retrying transport and 5xx errors.

    Returns the successful response, or None once every attempt has failed.
    4xx responses are not retried.
    """
    for attempt in range(max_retries):
        try:
            async with httpx.AsyncClient(timeout=10) as client:
                resp = await client.post(url, json=payload, headers=headers or {})
                resp.raise_for_status()
            return resp
        except httpx.HTTPStatusError as e:
            if e.response.status_code < 500:
                logger.warning("POST %s rejected (%s): %s", url, e.response.status_code, e.response.text[:200])
                return None
            err: Exception = e
        except Exception as e:
            err = e
        wait = RETRY_BACKOFF[attempt] if attempt < len(RETRY_BACKOFF) else RETRY_BACKOFF[-1]
        if attempt < max_retries - 1:
            logger.warning("POST %s attempt %d/%d failed: %s (retry in %ds)", url, attempt + 1, max_retries, err, wait)
            await asyncio.sleep(wait)
        else:
            logger.warning("POST %s failed after %d attempts: %s", url, max_retries, err)
    return None
