"""Claimant credit balance and spending."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import credits
from ..database import get_db
from ..schemas import (
    AuctionSummary,
    ClaimedAuctionSummary,
    CreditBalanceResponse,
    CreditUseRequest,
    CreditUseResponse,
)

router = APIRouter(prefix="/api/users", tags=["credits"])


@router.get("/{email}/credits", response_model=CreditBalanceResponse)
def get_credit_balance(email: str, db: Session = Depends(get_db)):
    user = credits.get_user_with_claims(db, email)
    return CreditBalanceResponse(
        credits=user.credits,
        user_type=user.user_type,
        claimed_auctions=[
            ClaimedAuctionSummary(
                claim_id=c.id,
                auction=AuctionSummary.model_validate(c.auction),
                claimed_at=c.claimed_at,
            )
            for c in user.claims
        ],
    )


@router.post("/{email}/credits/use", response_model=CreditUseResponse)
def use_credits(email: str, body: CreditUseRequest, db: Session = Depends(get_db)):
    remaining, txn = credits.use_credits(db, email, body.amount, body.reason, body.auction_id)
    return CreditUseResponse(
        message=f"{body.amount} credits used successfully",
        remaining_credits=remaining,
        transaction_id=txn.id,
    )
