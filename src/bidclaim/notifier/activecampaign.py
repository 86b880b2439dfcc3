"""ActiveCampaign marketing tags for trial claimants (API v3)."""

from __future__ import annotations

import logging
from urllib.parse import quote

import httpx

from ..config import settings
from .base import BaseNotifier, ClaimEvent

logger = logging.getLogger(__name__)


class ActiveCampaignError(Exception):
    pass


class ActiveCampaignClient:
    def __init__(self, api_url: str | None = None, api_key: str | None = None) -> None:
        self.api_url = (api_url or settings.activecampaign_api_url).rstrip("/")
        self.api_key = api_key or settings.activecampaign_api_key

    async def _request(self, method: str, endpoint: str, body: dict | None = None) -> dict:
        url = f"{self.api_url}/api/3/{endpoint}"
        headers = {"Api-Token": self.api_key, "Accept": "application/json"}
        async with httpx.AsyncClient(timeout=10) as client:
            resp = await client.request(method, url, headers=headers, json=body)
        if resp.is_error:
            raise ActiveCampaignError(f"AC API {method} {endpoint} failed ({resp.status_code}): {resp.text[:200]}")
        return resp.json()

    async def sync_contact(self, email: str, first_name: str | None, last_name: str | None) -> str:
        """Create or update a contact by email; returns the contact id."""
        data = await self._request("POST", "contact/sync", {
            "contact": {"email": email, "firstName": first_name or "", "lastName": last_name or ""},
        })
        contact = data.get("contact")
        if not contact:
            raise ActiveCampaignError("contact/sync returned no contact")
        logger.info("ActiveCampaign contact synced: %s (id %s)", email, contact["id"])
        return str(contact["id"])

    async def find_tag(self, name: str) -> str | None:
        data = await self._request("GET", f"tags?search={quote(name)}")
        tags = data.get("tags") or []
        if not tags:
            return None
        for tag in tags:
            if tag.get("tag", "").lower() == name.lower():
                return str(tag["id"])
        return str(tags[0]["id"])

    async def add_tag(self, contact_id: str, tag_id: str) -> None:
        await self._request("POST", "contactTags", {"contactTag": {"contact": contact_id, "tag": tag_id}})


class ActiveCampaignNotifier(BaseNotifier):
    """Tags trial claimants; paid claims are ignored."""

    name = "activecampaign"

    def __init__(self, client: ActiveCampaignClient | None = None, tag_name: str | None = None) -> None:
        self.client = client or ActiveCampaignClient()
        self.tag_name = tag_name or settings.activecampaign_trial_tag

    async def notify(self, event: ClaimEvent) -> bool:
        if not event.is_free:
            return True
        try:
            contact_id = await self.client.sync_contact(event.email, event.first_name, event.last_name)
            tag_id = await self.client.find_tag(self.tag_name)
            if not tag_id:
                logger.error("ActiveCampaign tag %r not found; contact %s left untagged", self.tag_name, event.email)
                return False
            await self.client.add_tag(contact_id, tag_id)
        except (ActiveCampaignError, httpx.HTTPError) as e:
            logger.warning("ActiveCampaign sync failed for %s: %s", event.email, e)
            return False
        logger.info("ActiveCampaign: %s tagged %r", event.email, self.tag_name)
        return True
