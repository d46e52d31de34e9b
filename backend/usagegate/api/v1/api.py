"""API routes for the FastAPI application."""

from fastapi import APIRouter

from usagegate.api.v1.endpoints import health, rate_limit

api_router = APIRouter()
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(rate_limit.router, prefix="/rate-limit", tags=["rate-limit"])
