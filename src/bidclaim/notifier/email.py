"""Claim confirmation and account activation emails.

Mail goes through the Resend HTTP API when ``RESEND_API_KEY`` is set. Without
it the notifier runs in console mode and writes the rendered mail to the log.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import settings
from .base import BaseNotifier, ClaimEvent
from .transport import post_json

logger = logging.getLogger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    text: str


def render_claim_email(event: ClaimEvent) -> EmailMessage:
    headline = "Free Trial Claim Confirmed!" if event.is_free else "Auction Claim Confirmed!"
    prefix = "Free Trial Claim Confirmed: " if event.is_free else "Auction Claim Confirmed: "
    dashboard = f"{(settings.main_app_url or 'https://app.bidsquire.com').rstrip('/')}/dashboard"
    text = (
        f"Hi {event.first_name or 'there'},\n\n"
        f"{headline}\n\n"
        "You have successfully claimed exclusivity for the following auction:\n"
        f"{event.title}\n{event.url}\n\n"
        "This auction is now locked for other users on our platform. Good luck with your bidding!\n\n"
        f"View Dashboard: {dashboard}\n\n"
        "---\nThis email was sent from BidSquire"
    )
    return EmailMessage(to=event.email, subject=prefix + event.title, text=text)


def render_activation_email(event: ClaimEvent) -> EmailMessage:
    text = (
        f"Hi {event.display_name},\n\n"
        f"Your BidSquire account is ready with {event.credits} credits.\n"
        "Set your password and activate your account here (valid for "
        f"{settings.activation_token_ttl_hours} hours):\n\n"
        f"{event.activation_url}\n\n"
        "---\nThis email was sent from BidSquire"
    )
    return EmailMessage(to=event.email, subject="Activate Your BidSquire Account", text=text)


class EmailNotifier(BaseNotifier):
    name = "email"

    def __init__(self, api_key: str | None = None, sender: str | None = None) -> None:
        self.api_key = api_key if api_key is not None else settings.resend_api_key
        self.sender = sender or settings.email_from

    @property
    def provider(self) -> str:
        return "resend" if self.api_key else "console"

    async def notify(self, event: ClaimEvent) -> bool:
        ok = await self.send(render_claim_email(event))
        if event.activation_url:
            ok = await self.send(render_activation_email(event)) and ok
        return ok

    async def send(self, message: EmailMessage) -> bool:
        logger.info("EMAIL to=%s subject=%r provider=%s", message.to, message.subject, self.provider)
        if not self.api_key:
            logger.debug("Console email body:\n%s", message.text)
            return True

        resp = await post_json(
            RESEND_API_URL,
            {
                "from": self.sender,
                "to": [message.to],
                "subject": message.subject,
                "text": message.text,
            },
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        return resp is not None
