"""Auction claim workflow.

A claim runs in five steps:

1. resolve: validate the URL against the allow-list and extract the id
2. fetch: scrape listing metadata (outside any transaction, bounded)
3. price: compute the price from the item count
4. commit: in one transaction, find-or-create the claimant, upsert the
   auction, re-check availability, insert the claim row and the credit grant
5. notify: run the notifiers in a background task once the claim is committed

The unique constraint on ``claimed_auctions.auction_id`` is what guarantees
a single claim per auction; the in-transaction re-check only turns the common
case into a clean ``AlreadyClaimed`` before the insert is attempted.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import secrets
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .. import crud
from ..config import settings
from ..models import Auction, ClaimedAuction, CreditTransaction, User
from ..notifier.base import BaseNotifier, ClaimEvent
from ..schemas import (
    AvailableAuction,
    CheckResponse,
    ClaimRequest,
    FreeClaimRequest,
    ListingData,
    LockedAuction,
)
from ..tokens import sign_activation_token
from .availability import find_active_claim
from .errors import (
    AlreadyClaimed,
    FetchFailed,
    IdentifierExtractionFailed,
    InvalidUrl,
    NotTrialEligible,
    PersistenceError,
    PhoneInUse,
)
from .pricing import compute_price, is_trial_eligible, price_breakdown
from .urls import canonicalize_url, extract_auction_id, is_allowed_url

logger = logging.getLogger(__name__)

FREE_PRICE = Decimal("0.00")


@dataclass
class ClaimResult:
    user: User
    claim: ClaimedAuction
    auction: Auction
    created_user: bool


def _placeholder_password_hash() -> str:
    """Hash of a random secret nobody knows; replaced during account activation."""
    salt = secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac("sha256", secrets.token_bytes(32), salt, 100_000)
    return f"pbkdf2_sha256$100000${salt.hex()}${digest.hex()}"


class ClaimService:
    """Claims auctions for claimants. One instance is shared by all requests."""

    def __init__(
        self,
        scraper,
        notifiers: list[BaseNotifier] | None = None,
        fetch_timeout: float | None = None,
    ) -> None:
        self.scraper = scraper
        self.notifiers = notifiers or []
        self.fetch_timeout = fetch_timeout or settings.listing_fetch_timeout
        self._pending: set[asyncio.Task] = set()

    # --- steps -----------------------------------------------------------

    @staticmethod
    def resolve(url: str) -> str:
        if not is_allowed_url(url):
            raise InvalidUrl()
        external_id = extract_auction_id(url)
        if not external_id:
            raise IdentifierExtractionFailed()
        return external_id

    async def fetch_listing(self, url: str) -> ListingData:
        try:
            listing = await asyncio.wait_for(self.scraper.fetch_listing(url), timeout=self.fetch_timeout)
        except asyncio.TimeoutError:
            logger.warning("Listing fetch timed out after %ss: %s", self.fetch_timeout, url)
            raise FetchFailed() from None
        except Exception as e:
            logger.warning("Listing fetch failed for %s: %s", url, e)
            raise FetchFailed() from e
        if listing is None:
            logger.warning("Listing page could not be parsed: %s", url)
            raise FetchFailed()
        return listing

    @staticmethod
    def _precheck(db: Session, external_id: str) -> None:
        try:
            existing = find_active_claim(db, external_id)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Availability lookup failed for %s", external_id)
            raise PersistenceError(e) from e
        # release the connection before the network fetch
        db.rollback()
        if existing is not None:
            raise AlreadyClaimed()

    # --- operations ------------------------------------------------------

    async def check(self, db: Session, url: str) -> CheckResponse:
        """Quote an auction without creating any records."""
        external_id = self.resolve(url)
        try:
            existing = find_active_claim(db, external_id)
            locked = None
            if existing is not None:
                locked = LockedAuction(
                    auction_id=external_id,
                    title=existing.auction.title,
                    claimed_at=existing.claimed_at,
                )
        except SQLAlchemyError as e:
            logger.exception("Availability lookup failed for %s", external_id)
            raise PersistenceError(e) from e
        finally:
            db.rollback()

        if locked is not None:
            return CheckResponse(status="LOCKED", message="This auction has already been claimed.", data=locked)

        listing = await self.fetch_listing(url)
        return CheckResponse(
            status="AVAILABLE",
            message="Auction is available for claiming.",
            data=AvailableAuction(
                auction_id=external_id,
                title=listing.title,
                item_count=listing.item_count,
                zip_code=listing.zip_code,
                location=listing.location,
                auctioneer=listing.auctioneer,
                auction_name=listing.auction_name,
                price=float(compute_price(listing.item_count)),
                is_trial_eligible=is_trial_eligible(listing.item_count),
                breakdown=price_breakdown(listing.item_count),
            ),
        )

    async def claim(self, db: Session, request: ClaimRequest) -> ClaimResult:
        """Paid claim: reserve the auction at the computed price."""
        external_id = self.resolve(request.url)
        self._precheck(db, external_id)
        listing = await self.fetch_listing(request.url)
        price = compute_price(listing.item_count)

        result = self.commit_claim(db, external_id, request, listing, price)
        logger.info(
            "Auction %s claimed by user %s for $%s", external_id, result.user.id, result.claim.price_paid,
        )
        self.dispatch(self._build_event(result, request.url, listing, is_free=False))
        return result

    async def claim_free(self, db: Session, request: FreeClaimRequest) -> ClaimResult:
        """Trial claim: zero price, limited to trial-eligible auctions."""
        external_id = self.resolve(request.url)
        self._precheck(db, external_id)
        listing = await self.fetch_listing(request.url)

        if not is_trial_eligible(listing.item_count):
            raise NotTrialEligible()
        try:
            taken = crud.phone_taken_by_other(db, request.phone, request.email)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Phone lookup failed")
            raise PersistenceError(e) from e
        if taken:
            db.rollback()
            raise PhoneInUse()

        result = self.commit_claim(db, external_id, request, listing, FREE_PRICE, free=True)
        logger.info("Auction %s trial-claimed by user %s", external_id, result.user.id)
        self.dispatch(self._build_event(result, request.url, listing, is_free=True))
        return result

    def commit_claim(
        self,
        db: Session,
        external_id: str,
        request: ClaimRequest,
        listing: ListingData,
        price: Decimal,
        *,
        free: bool = False,
    ) -> ClaimResult:
        """Write claimant, auction, claim and credit grant as one transaction."""
        try:
            user, created = self._find_or_create_user(db, request, free=free)
            auction = self._upsert_auction(db, external_id, request.url, listing, free=free)

            if find_active_claim(db, external_id) is not None:
                raise AlreadyClaimed()

            claim = ClaimedAuction(user_id=user.id, auction_id=auction.id, price_paid=price)
            db.add(claim)
            try:
                db.flush()
            except IntegrityError as e:
                # another transaction inserted the claim after our re-check
                raise AlreadyClaimed() from e

            if not free:
                # Recorded on every paid claim, new claimant or not
                db.add(CreditTransaction(
                    user_id=user.id,
                    amount=settings.signup_bonus_credits,
                    reason="signup_bonus",
                    auction_id=auction.id,
                ))
            db.commit()
        except AlreadyClaimed:
            db.rollback()
            logger.info("Auction %s is already claimed", external_id)
            raise
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("Claim transaction failed for auction %s", external_id)
            raise PersistenceError(e) from e

        return ClaimResult(user=user, claim=claim, auction=auction, created_user=created)

    # --- helpers ---------------------------------------------------------

    @staticmethod
    def _find_or_create_user(db: Session, request: ClaimRequest, *, free: bool) -> tuple[User, bool]:
        existing = crud.get_user_by_email(db, request.email)
        if existing is not None:
            if free and not existing.phone:
                existing.phone = request.phone
            return existing, False

        if free:
            data = {
                "first_name": "Trial",
                "last_name": "User",
                "user_type": "free_claim",
                "credits": settings.trial_credits,
                "has_used_free_trial": True,
            }
        else:
            data = {
                "first_name": request.first_name,
                "last_name": request.last_name,
                "user_type": "standard",
                "credits": settings.signup_bonus_credits,
                "has_used_free_trial": False,
            }
        data.update(email=request.email, phone=request.phone, password_hash=_placeholder_password_hash())
        return crud.insert_user_if_absent(db, data)

    @staticmethod
    def _upsert_auction(db: Session, external_id: str, url: str, listing: ListingData, *, free: bool) -> Auction:
        metadata = {
            "title": listing.title[:495] if listing.title else None,
            "item_count": listing.item_count,
            "zip_code": listing.zip_code[:20] if listing.zip_code else None,
            "location": listing.location,
            "auctioneer": listing.auctioneer,
            "auction_name": listing.auction_name,
        }
        refresh = [name for name, value in metadata.items() if value is not None]
        data = {
            **metadata,
            "title": metadata["title"] or "Untitled Auction",
            "external_id": external_id,
            "canonical_url": canonicalize_url(url),
            "url": url[:495],
            "is_free_claim": free,
            "county_id": crud.provisional_county_id(db),
        }
        return crud.upsert_auction(db, data, refresh=refresh)

    def _build_event(self, result: ClaimResult, url: str, listing: ListingData, *, is_free: bool) -> ClaimEvent:
        user = result.user
        activation_url = None
        # activation links are only issued to new trial accounts
        if is_free and result.created_user and settings.provisioning_enabled:
            token = sign_activation_token(
                settings.cross_app_secret,
                uid=user.id,
                email=user.email,
                name=user.first_name,
                credits=user.credits,
                ttl_hours=settings.activation_token_ttl_hours,
                extra={
                    "hibid_url": url,
                    "hibid_title": listing.title,
                    "trial_auction_item_count": listing.item_count,
                },
            )
            activation_url = f"{settings.main_app_url.rstrip('/')}/auth/activate?token={token}"

        return ClaimEvent(
            claim_id=result.claim.id,
            external_id=result.auction.external_id,
            url=url,
            title=result.auction.title or "Auction",
            price_paid=result.claim.price_paid,
            is_free=is_free,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            new_user=result.created_user,
            credits=user.credits,
            listing=listing,
            activation_url=activation_url,
        )

    def dispatch(self, event: ClaimEvent) -> asyncio.Task | None:
        """Run the notifiers for a committed claim without delaying the caller."""
        if not self.notifiers:
            return None
        task = asyncio.create_task(self._notify(event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every dispatched notification to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    async def _notify(self, event: ClaimEvent) -> None:
        for notifier in self.notifiers:
            try:
                await notifier.notify(event)
            except Exception as e:
                logger.warning("Notifier %s failed for claim %s: %s", notifier.name, event.claim_id, e)
