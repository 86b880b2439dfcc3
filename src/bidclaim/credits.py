"""Credit balance and spending for claimants."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from . import crud
from .claims.errors import ClaimError
from .models import ClaimedAuction, CreditTransaction, User

logger = logging.getLogger(__name__)


class CreditError(ClaimError):
    default_message = "Failed to use credits"

    def __init__(self, message: str | None = None, **extra) -> None:
        self.extra = extra
        super().__init__(message)

    def payload(self) -> dict:
        return {**super().payload(), **self.extra}


class UserNotFound(CreditError):
    status_code = 404
    default_message = "User not found"


class InsufficientCredits(CreditError):
    default_message = "Insufficient credits"


class UpgradeRequired(CreditError):
    status_code = 403
    default_message = "You can only analyze items from your claimed auction"

    def __init__(self) -> None:
        super().__init__(upgradeRequired=True)


def get_user_with_claims(db: Session, email: str) -> User:
    user = db.scalars(
        select(User)
        .where(User.email == email.strip().lower())
        .options(selectinload(User.claims).selectinload(ClaimedAuction.auction))
    ).first()
    if user is None:
        raise UserNotFound()
    return user


def use_credits(
    db: Session, email: str, amount: int, reason: str, auction_id: int | None = None,
) -> tuple[int, CreditTransaction]:
    """Spend *amount* credits. Returns (remaining balance, ledger row)."""
    user = get_user_with_claims(db, email)

    if user.credits < amount:
        raise InsufficientCredits(currentCredits=user.credits, required=amount)

    # Trial accounts may only spend against the auction they claimed
    if user.user_type == "free_claim" and auction_id is not None:
        if not any(c.auction_id == auction_id for c in user.claims):
            raise UpgradeRequired()

    remaining = crud.decrement_credits(db, user.id, amount)
    if remaining is None:
        # balance dropped between the read and the guarded update
        db.rollback()
        raise InsufficientCredits(currentCredits=user.credits, required=amount)

    txn = CreditTransaction(user_id=user.id, amount=-amount, reason=reason, auction_id=auction_id)
    db.add(txn)
    db.commit()
    logger.info("User %s used %d credits (%s), %d remaining", user.id, amount, reason, remaining)
    return remaining, txn
