from datetime import datetime, timezone
from decimal import Decimal


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


class State(Base):
    __tablename__ = "states"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(Text, unique=True)
    abbreviation: Mapped[str] = mapped_column(Text, unique=True)

    counties: Mapped[list["County"]] = relationship(back_populates="state")


class County(Base):
    __tablename__ = "counties"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    state_id: Mapped[int] = mapped_column(Integer, ForeignKey("states.id"))
    name: Mapped[str] = mapped_column(Text)
    status: Mapped[str] = mapped_column(Text, default="available")  # available / partially_locked / locked

    state: Mapped["State"] = relationship(back_populates="counties")
    auctions: Mapped[list["Auction"]] = relationship(back_populates="county")


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(Text, unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    first_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    password_hash: Mapped[str] = mapped_column(Text)
    user_type: Mapped[str] = mapped_column(Text, default="standard")  # standard / free_claim
    credits: Mapped[int] = mapped_column(Integer, default=0)
    has_used_free_trial: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    claims: Mapped[list["ClaimedAuction"]] = relationship(back_populates="user")
    credit_transactions: Mapped[list["CreditTransaction"]] = relationship(back_populates="user")


class Auction(Base):
    __tablename__ = "auctions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    external_id: Mapped[str] = mapped_column(Text, unique=True, index=True)
    canonical_url: Mapped[str] = mapped_column(Text, unique=True)
    url: Mapped[str] = mapped_column(Text, default="")
    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    item_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    zip_code: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    auctioneer: Mapped[str | None] = mapped_column(Text, nullable=True)
    auction_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    auction_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    is_free_claim: Mapped[bool] = mapped_column(Boolean, default=False)

    # Provisional: auctions are not geo-mapped at claim time
    county_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("counties.id"), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, onupdate=_utcnow)

    county: Mapped["County"] = relationship(back_populates="auctions")
    claim: Mapped["ClaimedAuction"] = relationship(back_populates="auction", uselist=False)


class ClaimedAuction(Base):
    __tablename__ = "claimed_auctions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    # One claim per auction, ever
    auction_id: Mapped[int] = mapped_column(Integer, ForeignKey("auctions.id"), unique=True)
    price_paid: Mapped[Decimal] = mapped_column(Numeric(10, 2, asdecimal=True))
    claimed_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    user: Mapped["User"] = relationship(back_populates="claims")
    auction: Mapped["Auction"] = relationship(back_populates="claim")


class CreditTransaction(Base):
    __tablename__ = "credit_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), index=True)
    amount: Mapped[int] = mapped_column(Integer)
    reason: Mapped[str] = mapped_column(Text)  # signup_bonus / analysis / ...
    auction_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("auctions.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)

    user: Mapped["User"] = relationship(back_populates="credit_transactions")
