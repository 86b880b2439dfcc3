"""Lookup of existing claims by external auction id."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session, contains_eager

from ..models import Auction, ClaimedAuction


def find_active_claim(db: Session, external_id: str) -> ClaimedAuction | None:
    """Return the claim on the auction with *external_id*, if any.

    Used both as the cheap pre-check before scraping and as the re-check
    inside the claim transaction.
    """
    stmt = (
        select(ClaimedAuction)
        .join(ClaimedAuction.auction)
        .options(contains_eager(ClaimedAuction.auction))
        .where(Auction.external_id == external_id)
    )
    return db.scalars(stmt).first()
