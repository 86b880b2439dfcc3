"""County auction listings and the operator bulk-add endpoint."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_, select
from sqlalchemy.orm import Session, selectinload

from .. import crud
from ..claims.urls import canonicalize_url, extract_auction_id, is_allowed_url
from ..database import get_db
from ..models import Auction, County
from ..schemas import (
    AuctionBulkCreate,
    AuctionBulkResponse,
    AuctionUpsertResult,
    CountyAuction,
    CountyAuctionsResponse,
    CountyInfo,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/counties", tags=["counties"])


def _get_county(db: Session, county_id: int) -> County:
    county = db.get(County, county_id)
    if county is None:
        raise HTTPException(status_code=404, detail="County not found")
    return county


@router.get("/{county_id}/auctions", response_model=CountyAuctionsResponse)
def list_county_auctions(county_id: int, db: Session = Depends(get_db)):
    county = _get_county(db, county_id)
    now = datetime.now(timezone.utc).replace(tzinfo=None)

    rows = db.scalars(
        select(Auction)
        .where(Auction.county_id == county_id)
        .where(or_(Auction.auction_date >= now, Auction.auction_date.is_(None)))
        .options(selectinload(Auction.claim))
        .order_by(Auction.auction_date.asc(), Auction.id)
    ).all()

    # availability only; the claimant is never exposed here
    auctions = [
        CountyAuction(
            id=a.id,
            url=a.url,
            title=a.title,
            auction_date=a.auction_date,
            available=a.claim is None,
            created_at=a.created_at,
        )
        for a in rows
    ]
    return CountyAuctionsResponse(
        county=CountyInfo(
            id=county.id,
            name=county.name,
            state=county.state.abbreviation if county.state else None,
            state_name=county.state.name if county.state else None,
        ),
        auctions=auctions,
        total=len(auctions),
        available=sum(1 for a in auctions if a.available),
    )


@router.post("/{county_id}/auctions", response_model=AuctionBulkResponse, status_code=201)
def add_county_auctions(county_id: int, body: AuctionBulkCreate, db: Session = Depends(get_db)):
    _get_county(db, county_id)

    results: list[AuctionUpsertResult] = []
    for item in body.auctions:
        canonical = canonicalize_url(item.url)
        external_id = extract_auction_id(canonical) if is_allowed_url(canonical) else None
        if external_id is None:
            results.append(AuctionUpsertResult(url=item.url, status="error", error="Invalid HiBid URL"))
            continue

        refresh = [name for name in ("title", "auction_date") if getattr(item, name) is not None]
        auction = crud.upsert_auction(
            db,
            {
                "external_id": external_id,
                "canonical_url": canonical,
                "url": canonical,
                "title": item.title,
                "auction_date": item.auction_date,
                "county_id": county_id,
            },
            refresh=refresh,
        )
        results.append(AuctionUpsertResult(url=canonical, status="success", id=auction.id))

    db.commit()
    ok = sum(1 for r in results if r.status == "success")
    logger.info("County %d: added/updated %d of %d auctions", county_id, ok, len(body.auctions))
    return AuctionBulkResponse(message=f"Added/updated {ok} of {len(body.auctions)} auctions", results=results)
