"""FastAPI application with a lifespan-managed scraper and claim service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.router import api_router
from .claims.errors import ClaimError, PersistenceError
from .claims.service import ClaimService
from .config import settings
from .database import run_migrations
from .notifier.email import EmailNotifier
from .notifier.log_notifier import LogNotifier
from .scraper.hibid import HiBidScraper

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Shared state accessible by API endpoints
app_state: dict = {}


def build_notifiers() -> list:
    notifiers = [LogNotifier(), EmailNotifier()]
    if not settings.email_enabled:
        logger.warning("RESEND_API_KEY not set: emails will be logged, not sent")

    if settings.activecampaign_enabled:
        from .notifier.activecampaign import ActiveCampaignNotifier

        notifiers.append(ActiveCampaignNotifier())
        logger.info("ActiveCampaign integration enabled")
    else:
        logger.warning("ActiveCampaign not configured: trial claimants will not be tagged")

    if settings.provisioning_enabled:
        from .notifier.provisioning import ProvisioningNotifier

        notifiers.append(ProvisioningNotifier())
        logger.info("Main app provisioning enabled (%s)", settings.main_app_url)
    else:
        logger.warning("MAIN_APP_URL/CROSS_APP_SECRET not set: claims will not be provisioned")
    return notifiers


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Running database migrations...")
    run_migrations()

    scraper = HiBidScraper()
    app_state["scraper"] = scraper
    app_state["claim_service"] = ClaimService(scraper, build_notifiers())
    logger.info("BidClaim started")

    yield

    # Shutdown
    await app_state["claim_service"].drain()
    await scraper.close()
    app_state.clear()
    logger.info("BidClaim stopped")


app = FastAPI(
    title="BidClaim",
    description="Exclusive claims on HiBid auctions",
    version="0.1.0",
    lifespan=lifespan,
)
if settings.api_key:
    from .auth import ApiKeyMiddleware
    app.add_middleware(ApiKeyMiddleware)


@app.exception_handler(ClaimError)
async def claim_error_handler(request: Request, exc: ClaimError):
    content = exc.payload()
    if isinstance(exc, PersistenceError):
        logger.error("%s %s failed: %r", request.method, request.url.path, exc.cause)
        if settings.expose_internal_errors and exc.cause is not None:
            content["error"] = str(exc.cause)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Missing required fields",
            "errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()],
        },
    )


app.include_router(api_router)
