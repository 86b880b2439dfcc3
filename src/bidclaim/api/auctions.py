"""Claimant endpoints: availability check, paid claim and trial claim."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..claims.service import ClaimResult, ClaimService
from ..database import get_db
from ..schemas import (
    CheckRequest,
    CheckResponse,
    ClaimData,
    ClaimRequest,
    ClaimResponse,
    FreeClaimRequest,
)

router = APIRouter(prefix="/api/auctions", tags=["auctions"])


def _get_service() -> ClaimService:
    from ..main import app_state
    return app_state["claim_service"]


def _claim_data(result: ClaimResult) -> ClaimData:
    return ClaimData(
        auction_id=result.auction.external_id,
        user_email=result.user.email,
        price_paid=float(result.claim.price_paid),
    )


@router.post("/check", response_model=CheckResponse)
async def check_auction(body: CheckRequest, db: Session = Depends(get_db)):
    return await _get_service().check(db, body.url)


@router.post("/claim", response_model=ClaimResponse)
async def claim_auction(body: ClaimRequest, db: Session = Depends(get_db)):
    result = await _get_service().claim(db, body)
    return ClaimResponse(message="Auction claimed successfully!", data=_claim_data(result))


@router.post("/claim-free", response_model=ClaimResponse)
async def claim_auction_free(body: FreeClaimRequest, db: Session = Depends(get_db)):
    result = await _get_service().claim_free(db, body)
    return ClaimResponse(
        message="Free trial auction claimed successfully!",
        data=_claim_data(result),
        url=f"/checkout/success?session_id=free_claim_{result.claim.id}&free=true",
    )
