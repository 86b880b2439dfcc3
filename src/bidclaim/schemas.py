import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class CamelModel(BaseModel):
    """Wire models: camelCase on the wire, snake_case in Python."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


# --- Scraped listing (internal) ---

class ListingData(BaseModel):
    title: str | None = None
    item_count: int | None = None
    zip_code: str | None = None
    location: str | None = None
    auctioneer: str | None = None
    auction_name: str | None = None


# --- Check ---

class CheckRequest(CamelModel):
    url: str = Field(..., min_length=1)


class PriceBreakdown(CamelModel):
    base_price: float
    included_items: int
    extra_items: int
    extra_cost: float


class AvailableAuction(CamelModel):
    auction_id: str
    title: str | None
    item_count: int | None
    zip_code: str | None
    location: str | None
    auctioneer: str | None
    auction_name: str | None
    price: float
    is_trial_eligible: bool
    breakdown: PriceBreakdown | None


class LockedAuction(CamelModel):
    auction_id: str
    title: str | None
    claimed_at: datetime


class CheckResponse(CamelModel):
    success: bool = True
    status: str  # AVAILABLE / LOCKED
    message: str
    data: AvailableAuction | LockedAuction


# --- Claim ---

class ClaimRequest(CamelModel):
    url: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str | None = None
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not _EMAIL_RE.match(v):
            raise ValueError("invalid email address")
        return v

    @field_validator("phone")
    @classmethod
    def _strip_phone(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class FreeClaimRequest(ClaimRequest):
    phone: str = Field(..., min_length=1)

    @field_validator("phone")
    @classmethod
    def _strip_phone(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("phone is required")
        return v


class ClaimData(CamelModel):
    auction_id: str
    user_email: str
    price_paid: float


class ClaimResponse(CamelModel):
    success: bool = True
    message: str
    data: ClaimData
    url: str | None = None


# --- County auctions ---

class CountyInfo(CamelModel):
    id: int
    name: str
    state: str | None = None
    state_name: str | None = None


class CountyAuction(CamelModel):
    id: int
    url: str
    title: str | None
    auction_date: datetime | None
    available: bool
    created_at: datetime


class CountyAuctionsResponse(CamelModel):
    success: bool = True
    county: CountyInfo
    auctions: list[CountyAuction]
    total: int
    available: int


class AuctionIn(CamelModel):
    url: str = Field(..., min_length=1)
    title: str | None = None
    auction_date: datetime | None = None


class AuctionBulkCreate(CamelModel):
    auctions: list[AuctionIn]


class AuctionUpsertResult(CamelModel):
    url: str
    status: str  # success / error
    id: int | None = None
    error: str | None = None


class AuctionBulkResponse(CamelModel):
    success: bool = True
    message: str
    results: list[AuctionUpsertResult]


# --- Credits ---

class AuctionSummary(CamelModel):
    id: int
    url: str
    title: str | None
    auction_date: datetime | None

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


class ClaimedAuctionSummary(CamelModel):
    claim_id: int
    auction: AuctionSummary
    claimed_at: datetime


class CreditBalanceResponse(CamelModel):
    success: bool = True
    credits: int
    user_type: str
    claimed_auctions: list[ClaimedAuctionSummary]


class CreditUseRequest(CamelModel):
    amount: int = Field(..., gt=0)
    reason: str = Field(..., min_length=1)
    auction_id: int | None = None


class CreditUseResponse(CamelModel):
    success: bool = True
    message: str
    remaining_credits: int
    transaction_id: int


# --- System ---

class ServiceStatus(BaseModel):
    name: str
    status: str  # "ok" / "degraded" / "unavailable"
    detail: str = ""


class HealthResponse(BaseModel):
    status: str = "ok"  # "ok" / "degraded"
    auction_count: int = 0
    claimed_count: int = 0
    services: list[ServiceStatus] = []
