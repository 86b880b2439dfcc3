"""Notification interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from ..schemas import ListingData


@dataclass(frozen=True)
class ClaimEvent:
    """A committed claim, detached from the database session."""

    claim_id: int
    external_id: str
    url: str
    title: str
    price_paid: Decimal
    is_free: bool
    email: str
    first_name: str | None
    last_name: str | None
    new_user: bool
    credits: int
    listing: ListingData
    activation_url: str | None = None

    @property
    def display_name(self) -> str:
        return self.first_name or "User"

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip() or "User"


class BaseNotifier(ABC):
    """Abstract base for post-claim side effects."""

    name = "base"

    @abstractmethod
    async def notify(self, event: ClaimEvent) -> bool:
        """Handle a committed claim. Return True on success."""
        ...

    def format_message(self, event: ClaimEvent) -> str:
        kind = "trial claim" if event.is_free else "claim"
        lines = [f"[{kind}] {event.title}"]
        lines.append(f"Auction: {event.external_id}")
        lines.append(f"Claimant: {event.email}")
        lines.append(f"Price: ${event.price_paid:.2f}")
        if event.listing.item_count is not None:
            lines.append(f"Items: {event.listing.item_count:,}")
        lines.append(f"URL: {event.url}")
        return "\n".join(lines)
