"""Push committed trial claims to the main analysis application."""

from __future__ import annotations

import logging

from ..config import settings
from .base import BaseNotifier, ClaimEvent
from .transport import post_json

logger = logging.getLogger(__name__)

PROVISION_PATH = "/api/internal/provision-trial"


class ProvisioningNotifier(BaseNotifier):
    name = "provisioning"

    def __init__(self, base_url: str | None = None, secret: str | None = None) -> None:
        self.base_url = (base_url or settings.main_app_url).rstrip("/")
        self.secret = secret or settings.cross_app_secret

    def build_payload(self, event: ClaimEvent) -> dict:
        listing = event.listing
        return {
            "secret": self.secret,
            "email": event.email,
            "name": event.full_name,
            "credits": event.credits,
            "auction": {
                "url": event.url,
                "title": listing.title,
                "itemCount": listing.item_count,
                "zipCode": listing.zip_code,
                "location": listing.location,
                "auctioneer": listing.auctioneer,
                "auctionName": listing.auction_name,
            },
        }

    async def notify(self, event: ClaimEvent) -> bool:
        if not event.is_free:
            return True
        resp = await post_json(self.base_url + PROVISION_PATH, self.build_payload(event))
        if resp is None:
            logger.error("Failed to provision claim %s on main app", event.claim_id)
            return False
        logger.info("Provisioned claim %s for %s on main app", event.claim_id, event.email)
        return True
