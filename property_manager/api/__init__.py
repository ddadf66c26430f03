"""API router definitions."""

from fastapi import APIRouter

from .routes import health_router, logs_router
from .schema import build_graphql_router, schema

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(logs_router)

__all__ = ["api_router", "build_graphql_router", "schema"]
