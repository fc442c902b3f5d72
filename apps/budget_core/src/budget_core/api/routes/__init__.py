"""API v1 router registration."""

from fastapi import APIRouter

from budget_core.api.routes import conversions, obligations, periods, rates, summary

v1_router = APIRouter(prefix="/v1")
v1_router.include_router(obligations.router)
v1_router.include_router(rates.router)
v1_router.include_router(conversions.router)
v1_router.include_router(periods.router)
v1_router.include_router(summary.router)
