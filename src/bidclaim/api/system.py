"""Health check endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..models import Auction, ClaimedAuction
from ..schemas import HealthResponse, ServiceStatus

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    services: list[ServiceStatus] = []
    overall = "ok"

    # Database
    try:
        auctions = db.scalar(select(func.count(Auction.id))) or 0
        claimed = db.scalar(select(func.count(ClaimedAuction.id))) or 0
        services.append(ServiceStatus(name="database", status="ok"))
    except Exception as e:
        logger.warning("Health check: DB error: %s", e)
        auctions = claimed = 0
        services.append(ServiceStatus(name="database", status="degraded", detail=str(e)))
        overall = "degraded"

    # Email
    if settings.email_enabled:
        services.append(ServiceStatus(name="email", status="ok", detail="resend"))
    else:
        services.append(ServiceStatus(name="email", status="unavailable", detail="console mode"))

    # ActiveCampaign
    if settings.activecampaign_enabled:
        services.append(ServiceStatus(name="activecampaign", status="ok"))
    else:
        services.append(ServiceStatus(name="activecampaign", status="unavailable", detail="not configured"))

    # Main app provisioning
    if settings.provisioning_enabled:
        services.append(ServiceStatus(name="provisioning", status="ok"))
    else:
        services.append(ServiceStatus(name="provisioning", status="unavailable", detail="not configured"))

    return HealthResponse(
        status=overall,
        auction_count=auctions,
        claimed_count=claimed,
        services=services,
    )
