"""Upsert helpers shared by the claim workflow and the operator endpoints.

Both PostgreSQL and SQLite support ``INSERT ... ON CONFLICT``; the statement
is built with the dialect-specific ``insert`` so the conflict is resolved by
the database rather than by a read-then-write in Python.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Iterable

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from .models import Auction, County, User


def dialect_insert(db: Session, model):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert(model)
    if dialect == "sqlite":
        return sqlite_insert(model)
    raise NotImplementedError(f"upsert not supported for dialect {dialect!r}")


def upsert_auction(db: Session, data: dict[str, Any], refresh: Iterable[str] = ()) -> Auction:
    """Insert an auction keyed by ``external_id`` or refresh the listed columns.

    Columns not named in *refresh* (``is_free_claim``, ``county_id``, ...) keep
    their stored values when the row already exists.
    """
    stmt = dialect_insert(db, Auction).values(**data)
    set_ = {name: stmt.excluded[name] for name in refresh}
    set_["updated_at"] = datetime.now(timezone.utc)
    stmt = stmt.on_conflict_do_update(index_elements=["external_id"], set_=set_)
    db.execute(stmt)
    return db.scalars(
        select(Auction)
        .where(Auction.external_id == data["external_id"])
        .execution_options(populate_existing=True)
    ).one()


def insert_user_if_absent(db: Session, data: dict[str, Any]) -> tuple[User, bool]:
    """Find-or-create a user by email. Returns (user, created)."""
    stmt = (
        dialect_insert(db, User)
        .values(**data)
        .on_conflict_do_nothing(index_elements=["email"])
        .returning(User.id)
    )
    created_id = db.execute(stmt).scalar()
    user = db.scalars(
        select(User).where(User.email == data["email"]).execution_options(populate_existing=True)
    ).one()
    return user, created_id is not None


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == email.strip().lower())).first()


def phone_taken_by_other(db: Session, phone: str, email: str) -> bool:
    stmt = select(User.id).where(User.phone == phone.strip(), User.email != email.strip().lower())
    return db.scalars(stmt).first() is not None


def provisional_county_id(db: Session) -> int | None:
    # TODO: map the listing zip code to its county instead of the first county on file
    return db.scalar(select(County.id).order_by(County.id).limit(1))


def decrement_credits(db: Session, user_id: int, amount: int) -> int | None:
    """Atomically subtract *amount*; None when the balance is insufficient."""
    stmt = (
        update(User)
        .where(User.id == user_id, User.credits >= amount)
        .values(credits=User.credits - amount)
        .returning(User.credits)
    )
    return db.execute(stmt).scalar()
