"""Test fixtures: in-memory DB, sample HTML and a claim service with a mocked fetcher."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from bidclaim.claims.service import ClaimService
from bidclaim.database import Base
from bidclaim.models import County, State
from bidclaim.schemas import ListingData

SAMPLES_DIR = Path(__file__).resolve().parent.parent / "samples"

LISTING_300 = ListingData(
    title="Estate Tools & Equipment Auction",
    item_count=300,
    zip_code="62701",
    location="Miller Auction Co., 1200 Market St, Springfield, IL 62701",
)


@pytest.fixture()
def db():
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autoflush=False)()
    yield session
    session.close()


@pytest.fixture()
def county(db) -> County:
    state = State(name="Illinois", abbreviation="IL")
    db.add(state)
    db.flush()
    county = County(state_id=state.id, name="Sangamon")
    db.add(county)
    db.commit()
    return county


@pytest.fixture()
def listing() -> ListingData:
    return LISTING_300


@pytest.fixture()
def scraper(listing):
    scraper = AsyncMock()
    scraper.fetch_listing.return_value = listing
    return scraper


@pytest.fixture()
def service(scraper) -> ClaimService:
    return ClaimService(scraper, notifiers=[])


@pytest.fixture()
def catalog_html() -> str:
    return (SAMPLES_DIR / "hibid_catalog.html").read_text(encoding="utf-8")


@pytest.fixture()
def lot_html() -> str:
    return (SAMPLES_DIR / "hibid_lot.html").read_text(encoding="utf-8")
