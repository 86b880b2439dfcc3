"""Aggregate all API routers."""

from fastapi import APIRouter

from . import auctions, counties, credits, system

api_router = APIRouter()
api_router.include_router(auctions.router)
api_router.include_router(counties.router)
api_router.include_router(credits.router)
api_router.include_router(system.router)
