"""FastAPI application serving the property GraphQL API."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from .api import api_router, build_graphql_router
from .core.config import settings
from .core.logging_config import setup_logging
from .db.session import engine as default_engine
from .db.session import init_db
from .services import WeatherstackClient, build_weather_client

logger = logging.getLogger(__name__)


def create_app(
    engine: Engine | None = None,
    weather_client: WeatherstackClient | None = None,
) -> FastAPI:
    setup_logging()

    app = FastAPI(title=settings.app_name, version=settings.app_version)
    # Shared for the process lifetime; sessions are opened per request.
    app.state.engine = engine or default_engine
    app.state.weather_client = weather_client or build_weather_client()

    app.include_router(api_router, prefix=settings.api_prefix)
    app.include_router(build_graphql_router(), prefix=settings.graphql_path)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, str]:
        """Point the bare hostname at the GraphQL endpoint."""

        return {
            "message": (
                f"{settings.app_name} API is online. POST GraphQL queries to "
                f"{settings.graphql_path} or GET {settings.api_prefix}/health."
            )
        }

    @app.on_event("startup")
    def _startup() -> None:
        init_db(app.state.engine)
        client = app.state.weather_client
        logger.info(
            "Property Manager API ready (weather mode: %s)", "mock" if client.is_mock else "live"
        )

    @app.on_event("shutdown")
    def _shutdown() -> None:
        app.state.weather_client.close()

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("property_manager.main:app", host=settings.host, port=settings.port, reload=False)


if __name__ == "__main__":
    run()
