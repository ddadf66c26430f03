"""API dependencies."""

from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request
from sqlmodel import Session

from property_manager.db.session import get_session
from property_manager.services import PropertyService, WeatherstackClient


def get_db(request: Request) -> Generator[Session, None, None]:
    with get_session(request.app.state.engine) as session:
        yield session


def get_weather_client(request: Request) -> WeatherstackClient:
    return request.app.state.weather_client


def get_property_service(
    session: Session = Depends(get_db),
    weather: WeatherstackClient = Depends(get_weather_client),
) -> PropertyService:
    return PropertyService(session, weather)
