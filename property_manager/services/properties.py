"""Creating, listing and deleting properties."""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, func, select

from property_manager.core.config import settings
from property_manager.core.errors import (
    NotFoundError,
    PropertyError,
    StorageError,
    ValidationError,
    WeatherErrorKind,
    WeatherFetchError,
)
from property_manager.models import (
    Property,
    PropertyFilters,
    PropertyInput,
    SortField,
    SortOrder,
    WeatherSnapshot,
)

from .validation import sanitize_input, validate_property_input
from .weather import WeatherstackClient

logger = logging.getLogger(__name__)

_SORT_COLUMNS = {
    SortField.CREATED_AT: Property.created_at,
    SortField.CITY: Property.city,
    SortField.STATE: Property.state,
}


class PropertyService:
    """Validate, enrich and persist properties; read them back.

    The service holds no state between calls. Each method works against the
    session it was given and the shared weather client.
    """

    def __init__(
        self,
        session: Session,
        weather: WeatherstackClient,
        default_page_size: int | None = None,
        max_page_size: int | None = None,
    ) -> None:
        self.session = session
        self.weather = weather
        self.default_page_size = default_page_size or settings.default_page_size
        self.max_page_size = max_page_size or settings.max_page_size

    def create_property(self, data: PropertyInput) -> Property:
        """Validate, fetch weather, then insert. Nothing is written unless every step succeeds."""

        clean = sanitize_input(data)
        validation = validate_property_input(clean)
        if not validation.is_valid:
            raise ValidationError(
                f"Validation failed: {', '.join(validation.errors)}", errors=validation.errors
            )

        try:
            snapshot = self._fetch_weather(clean)
            lat, lon = snapshot.coordinates()
            row = Property(
                city=clean.city,
                street=clean.street,
                state=clean.state,
                zip_code=clean.zip_code,
                lat=lat,
                long=lon,
                weather_data=snapshot.to_storage(),
            )
            self._insert(row)
        except PropertyError as exc:
            logger.warning(
                "Property creation failed: %s",
                exc,
                extra={"error_kind": exc.kind.value, "query": f"{clean.city}, {clean.state} {clean.zip_code}"},
            )
            raise exc.with_prefix("Failed to create property") from exc

        logger.info("Created property in %s, %s", row.city, row.state, extra={"property_id": row.id})
        return row

    def _fetch_weather(self, clean: PropertyInput) -> WeatherSnapshot:
        try:
            return self.weather.get_current_weather(clean.city, clean.state, clean.zip_code)
        except PropertyError:
            raise
        except Exception as exc:
            logger.error("Unexpected weather lookup failure", exc_info=True)
            raise WeatherFetchError(
                f"Weatherstack service error: {exc}", WeatherErrorKind.UNEXPECTED
            ) from exc

    def _insert(self, row: Property) -> None:
        try:
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
        except Exception as exc:
            self.session.rollback()
            logger.error("Property insert failed", exc_info=True)
            raise StorageError(f"Database error: {exc}") from exc

    def get_properties(self, filters: PropertyFilters | None = None) -> list[Property]:
        filters = filters or PropertyFilters()
        column = _SORT_COLUMNS[SortField(filters.sort_by)]
        if SortOrder(filters.sort_order) is SortOrder.ASC:
            order = (column.asc(), Property.id.asc())
        else:
            order = (column.desc(), Property.id.desc())

        stmt = (
            self._filtered(select(Property), filters)
            .order_by(*order)
            .offset(self._offset(filters.offset))
            .limit(self._limit(filters.limit))
        )
        try:
            return list(self.session.exec(stmt).all())
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to fetch properties: {exc}") from exc

    def get_property_by_id(self, property_id: Optional[str]) -> Property | None:
        """Return the property, or None when no row has this id."""

        key = self._require_id(property_id)
        try:
            return self.session.get(Property, key, populate_existing=True)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to fetch property: {exc}") from exc

    def delete_property(self, property_id: Optional[str]) -> bool:
        """Delete by id, raising NotFoundError when the row does not exist.

        The existence check and the delete are separate statements, so two
        concurrent deletes of one id can both pass the check.
        """

        key = self._require_id(property_id)
        try:
            row = self.session.get(Property, key, populate_existing=True)
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to delete property: {exc}") from exc
        if row is None:
            raise NotFoundError("Property not found")

        try:
            self.session.delete(row)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Failed to delete property: {exc}") from exc

        logger.info("Deleted property", extra={"property_id": key})
        return True

    def get_properties_count(self, filters: PropertyFilters | None = None) -> int:
        stmt = self._filtered(select(func.count()).select_from(Property), filters or PropertyFilters())
        try:
            return int(self.session.exec(stmt).one())
        except SQLAlchemyError as exc:
            raise StorageError(f"Failed to count properties: {exc}") from exc

    def _filtered(self, stmt: Any, filters: PropertyFilters) -> Any:
        if filters.city:
            stmt = stmt.where(Property.city.icontains(filters.city, autoescape=True))
        if filters.state:
            stmt = stmt.where(Property.state == filters.state.upper())
        if filters.zip_code:
            stmt = stmt.where(Property.zip_code == filters.zip_code)
        return stmt

    def _limit(self, limit: Optional[int]) -> int:
        if limit is None:
            limit = self.default_page_size
        return max(0, min(limit, self.max_page_size))

    @staticmethod
    def _offset(offset: Optional[int]) -> int:
        return max(0, offset or 0)

    @staticmethod
    def _require_id(property_id: Optional[str]) -> str:
        key = (property_id or "").strip()
        if not key:
            raise ValidationError("Property ID is required", errors=["Property ID is required"])
        return key


__all__ = ["PropertyService"]
