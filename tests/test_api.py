"""Tests for API endpoints using FastAPI TestClient."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bidclaim.auth import ApiKeyMiddleware
from bidclaim.claims.service import ClaimService
from bidclaim.database import Base, get_db
from bidclaim.main import app, app_state
from bidclaim.models import Auction, County, State
from bidclaim.schemas import ListingData

CATALOG_URL = "https://hibid.com/catalog/42000/estate-tools"


def _now():
    return datetime.now(timezone.utc).replace(tzinfo=None)


MOCK_LISTING = ListingData(
    title="Estate Tools & Equipment Auction",
    item_count=300,
    zip_code="62701",
    location="Springfield, IL 62701",
)


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine, autoflush=False)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestSession
    app.dependency_overrides.clear()


@pytest.fixture()
def mock_scraper():
    scraper = AsyncMock()
    scraper.fetch_listing.return_value = MOCK_LISTING
    app_state["scraper"] = scraper
    app_state["claim_service"] = ClaimService(scraper)
    yield scraper
    app_state.clear()


@pytest.fixture()
def client(session_factory, mock_scraper):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def county_id(session_factory):
    with session_factory() as db:
        state = State(name="Illinois", abbreviation="IL")
        db.add(state)
        db.flush()
        county = County(state_id=state.id, name="Sangamon")
        db.add(county)
        db.commit()
        return county.id


class TestHealthEndpoint:
    def test_health(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        names = {s["name"] for s in data["services"]}
        assert names == {"database", "email", "activecampaign", "provisioning"}


class TestCheckEndpoint:
    def test_available(self, client):
        resp = client.post("/api/auctions/check", json={"url": CATALOG_URL})
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "AVAILABLE"
        assert body["data"]["auctionId"] == "42000"
        assert body["data"]["price"] == 49.95
        assert body["data"]["isTrialEligible"] is True
        assert body["data"]["breakdown"] == {
            "basePrice": 29.95, "includedItems": 100, "extraItems": 200, "extraCost": 20.0,
        }

    def test_locked(self, client):
        client.post("/api/auctions/claim", json={"url": CATALOG_URL, "email": "a@example.com"})
        resp = client.post("/api/auctions/check", json={"url": CATALOG_URL})
        assert resp.status_code == 200
        assert resp.json()["status"] == "LOCKED"
        assert "claimedAt" in resp.json()["data"]

    def test_invalid_url(self, client):
        resp = client.post("/api/auctions/check", json={"url": "https://example.com/catalog/1"})
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Invalid HiBid URL provided"}

    def test_missing_url(self, client):
        resp = client.post("/api/auctions/check", json={})
        assert resp.status_code == 400
        assert resp.json()["message"] == "Missing required fields"

    def test_fetch_failure(self, client, mock_scraper):
        mock_scraper.fetch_listing.return_value = None
        resp = client.post("/api/auctions/check", json={"url": CATALOG_URL})
        assert resp.status_code == 400
        assert resp.json()["success"] is False


class TestClaimEndpoint:
    def test_claim(self, client):
        resp = client.post("/api/auctions/claim", json={
            "url": CATALOG_URL, "email": " Buyer@Example.com ", "firstName": "Pat", "lastName": "Lee",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["data"] == {"auctionId": "42000", "userEmail": "buyer@example.com", "pricePaid": 49.95}

    def test_second_claim_conflicts(self, client):
        client.post("/api/auctions/claim", json={"url": CATALOG_URL, "email": "a@example.com"})
        resp = client.post("/api/auctions/claim", json={"url": CATALOG_URL + "/?x=1", "email": "b@example.com"})
        assert resp.status_code == 409
        assert resp.json()["message"] == "This auction has already been claimed."

    def test_missing_email(self, client):
        resp = client.post("/api/auctions/claim", json={"url": CATALOG_URL})
        assert resp.status_code == 400

    def test_bad_email(self, client):
        resp = client.post("/api/auctions/claim", json={"url": CATALOG_URL, "email": "nope"})
        assert resp.status_code == 400

    def test_persistence_error_hides_details(self, client):
        with patch("bidclaim.claims.service.crud.upsert_auction", side_effect=_db_error()):
            resp = client.post("/api/auctions/claim", json={"url": CATALOG_URL, "email": "a@example.com"})
        assert resp.status_code == 500
        assert resp.json() == {"success": False, "message": "Internal server error"}


def _db_error():
    from sqlalchemy.exc import OperationalError
    return OperationalError("INSERT", {}, Exception("database is locked"))


class TestFreeClaimEndpoint:
    def test_free_claim(self, client):
        resp = client.post("/api/auctions/claim-free", json={
            "url": CATALOG_URL, "email": "trial@example.com", "phone": "555-0100",
        })
        assert resp.status_code == 200
        body = resp.json()
        assert body["data"]["pricePaid"] == 0.0
        assert body["url"].startswith("/checkout/success?session_id=free_claim_")
        assert body["url"].endswith("&free=true")

    def test_phone_required(self, client):
        resp = client.post("/api/auctions/claim-free", json={"url": CATALOG_URL, "email": "t@example.com"})
        assert resp.status_code == 400

    def test_not_eligible(self, client, mock_scraper):
        mock_scraper.fetch_listing.return_value = ListingData(title="Huge", item_count=20_000)
        resp = client.post("/api/auctions/claim-free", json={
            "url": CATALOG_URL, "email": "t@example.com", "phone": "1",
        })
        assert resp.status_code == 400
        assert "contact support" in resp.json()["message"]


class TestCountyAuctions:
    def test_bulk_add_and_list(self, client, county_id):
        resp = client.post(f"/api/counties/{county_id}/auctions", json={"auctions": [
            {"url": "https://hibid.com/catalog/100/a/?utm=1", "title": "A"},
            {"url": "https://hibid.com/catalog/100/a", "auctionDate": (_now() + timedelta(days=3)).isoformat()},
            {"url": "https://example.com/catalog/5"},
        ]})
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Added/updated 2 of 3 auctions"
        assert [r["status"] for r in body["results"]] == ["success", "success", "error"]
        assert body["results"][0]["id"] == body["results"][1]["id"]
        assert body["results"][0]["url"] == "https://hibid.com/catalog/100/a"

        resp = client.get(f"/api/counties/{county_id}/auctions")
        assert resp.status_code == 200
        body = resp.json()
        assert body["county"] == {"id": county_id, "name": "Sangamon", "state": "IL", "stateName": "Illinois"}
        assert body["total"] == 1
        assert body["available"] == 1
        assert body["auctions"][0]["title"] == "A"

    def test_claimed_auction_not_available(self, client, county_id):
        client.post(f"/api/counties/{county_id}/auctions", json={"auctions": [{"url": CATALOG_URL}]})
        client.post("/api/auctions/claim", json={"url": CATALOG_URL, "email": "a@example.com"})

        body = client.get(f"/api/counties/{county_id}/auctions").json()
        assert body["total"] == 1
        assert body["available"] == 0
        assert "email" not in str(body)

    def test_past_auctions_hidden(self, client, county_id, session_factory):
        with session_factory() as db:
            db.add(Auction(
                external_id="7", canonical_url="https://hibid.com/catalog/7", url="https://hibid.com/catalog/7",
                auction_date=_now() - timedelta(days=1), county_id=county_id,
            ))
            db.commit()
        assert client.get(f"/api/counties/{county_id}/auctions").json()["total"] == 0

    def test_unknown_county(self, client):
        assert client.get("/api/counties/999/auctions").status_code == 404


class TestApiKeyMiddleware:
    @pytest.fixture()
    def guarded(self):
        mini = FastAPI()
        mini.add_middleware(ApiKeyMiddleware)

        @mini.get("/api/users/{email}/credits")
        def credits(email: str):
            return {"ok": True}

        @mini.post("/api/auctions/claim")
        def claim():
            return {"ok": True}

        @mini.get("/api/counties/{county_id}/auctions")
        def county_get(county_id: int):
            return {"ok": True}

        @mini.post("/api/counties/{county_id}/auctions")
        def county_post(county_id: int):
            return {"ok": True}

        with patch("bidclaim.auth.settings.api_key", "k3y"):
            yield TestClient(mini)

    def test_operator_endpoint_requires_key(self, guarded):
        assert guarded.get("/api/users/a@example.com/credits").status_code == 401
        assert guarded.post("/api/counties/1/auctions").status_code == 401
        assert guarded.get("/api/users/a@example.com/credits", headers={"X-API-Key": "k3y"}).status_code == 200
        assert guarded.post("/api/counties/1/auctions?api_key=k3y").status_code == 200

    def test_public_endpoints(self, guarded):
        assert guarded.post("/api/auctions/claim").status_code == 200
        assert guarded.get("/api/counties/1/auctions").status_code == 200
