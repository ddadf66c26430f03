"""GraphQL schema: property queries and mutations on top of PropertyService."""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import strawberry
from fastapi import Depends
from fastapi.concurrency import run_in_threadpool
from graphql import GraphQLError
from strawberry.fastapi import BaseContext, GraphQLRouter
from strawberry.scalars import JSON
from strawberry.types import Info

from property_manager.core.errors import ErrorKind, PropertyError, WeatherFetchError
from property_manager.models import Property, PropertyFilters, PropertyInput, SortField, SortOrder
from property_manager.services import PropertyService

from .deps import get_property_service

logger = logging.getLogger(__name__)


@strawberry.enum
class SortOption(Enum):
    CREATED_AT = "created_at"
    CITY = "city"
    STATE = "state"


@strawberry.enum(name="SortOrder")
class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


@strawberry.type(name="Property")
class PropertyType:
    id: str
    city: str
    street: str
    state: str
    zip_code: str
    lat: float
    long: float
    weather_data: JSON
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, row: Property) -> "PropertyType":
        return cls(
            id=row.id,
            city=row.city,
            street=row.street,
            state=row.state,
            zip_code=row.zip_code,
            lat=row.lat,
            long=row.long,
            weather_data=row.weather_data,
            created_at=_as_utc(row.created_at),
            updated_at=_as_utc(row.updated_at),
        )


def _as_utc(value: datetime) -> datetime:
    # rows hold naive UTC; SQLite drops tzinfo on read
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@strawberry.input
class CreatePropertyInput:
    city: str
    street: str
    state: str
    zip_code: str


class GraphQLContext(BaseContext):
    def __init__(self, service: PropertyService) -> None:
        super().__init__()
        self.service = service


def _api_error(exc: PropertyError, code: str, message: Optional[str] = None) -> GraphQLError:
    extensions: dict[str, Any] = {"code": code, "kind": exc.kind.value}
    if isinstance(exc, WeatherFetchError):
        extensions["reason"] = exc.subkind.value
    return GraphQLError(message or exc.message, extensions=extensions, original_error=exc)


def _internal_error(exc: Exception, code: str) -> GraphQLError:
    logger.error("Unhandled error in GraphQL resolver (%s)", code, exc_info=exc)
    return GraphQLError(str(exc) or code, extensions={"code": code, "kind": "internal"}, original_error=exc)


def _filters(
    city: Optional[str],
    state: Optional[str],
    zip_code: Optional[str],
    sort_by: SortOption = SortOption.CREATED_AT,
    sort_order: SortDirection = SortDirection.DESC,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> PropertyFilters:
    return PropertyFilters(
        city=city,
        state=state,
        zip_code=zip_code,
        sort_by=SortField(sort_by.value),
        sort_order=SortOrder(sort_order.value),
        limit=limit,
        offset=offset,
    )


@strawberry.type
class Query:
    @strawberry.field
    async def properties(
        self,
        info: Info[GraphQLContext, None],
        city: Optional[str] = None,
        state: Optional[str] = None,
        zip_code: Optional[str] = None,
        sort_by: SortOption = SortOption.CREATED_AT,
        sort_order: SortDirection = SortDirection.DESC,
        limit: Optional[int] = 50,
        offset: Optional[int] = 0,
    ) -> list[PropertyType]:
        filters = _filters(city, state, zip_code, sort_by, sort_order, limit, offset)
        try:
            rows = await run_in_threadpool(info.context.service.get_properties, filters)
        except PropertyError as exc:
            raise _api_error(exc, "PROPERTIES_FETCH_ERROR") from exc
        except Exception as exc:
            raise _internal_error(exc, "PROPERTIES_FETCH_ERROR") from exc
        return [PropertyType.from_model(row) for row in rows]

    @strawberry.field
    async def property(self, info: Info[GraphQLContext, None], id: str) -> Optional[PropertyType]:
        try:
            row = await run_in_threadpool(info.context.service.get_property_by_id, id)
        except PropertyError as exc:
            raise _api_error(exc, "PROPERTY_FETCH_ERROR") from exc
        except Exception as exc:
            raise _internal_error(exc, "PROPERTY_FETCH_ERROR") from exc
        if row is None:
            raise GraphQLError(
                "Property not found",
                extensions={"code": "PROPERTY_NOT_FOUND", "kind": ErrorKind.NOT_FOUND.value},
            )
        return PropertyType.from_model(row)

    @strawberry.field
    async def properties_count(
        self,
        info: Info[GraphQLContext, None],
        city: Optional[str] = None,
        state: Optional[str] = None,
        zip_code: Optional[str] = None,
    ) -> int:
        try:
            return await run_in_threadpool(
                info.context.service.get_properties_count, _filters(city, state, zip_code)
            )
        except PropertyError as exc:
            raise _api_error(exc, "PROPERTIES_FETCH_ERROR") from exc
        except Exception as exc:
            raise _internal_error(exc, "PROPERTIES_FETCH_ERROR") from exc

    @strawberry.field
    def health(self) -> str:
        return "OK"


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_property(
        self, info: Info[GraphQLContext, None], input: CreatePropertyInput
    ) -> PropertyType:
        data = PropertyInput(
            city=input.city, street=input.street, state=input.state, zip_code=input.zip_code
        )
        try:
            row = await run_in_threadpool(info.context.service.create_property, data)
        except PropertyError as exc:
            raise _api_error(exc, "PROPERTY_CREATE_ERROR") from exc
        except Exception as exc:
            raise _internal_error(exc, "PROPERTY_CREATE_ERROR") from exc
        return PropertyType.from_model(row)

    @strawberry.mutation
    async def delete_property(self, info: Info[GraphQLContext, None], id: str) -> bool:
        try:
            return await run_in_threadpool(info.context.service.delete_property, id)
        except PropertyError as exc:
            if exc.kind is ErrorKind.NOT_FOUND:
                raise _api_error(exc, "PROPERTY_NOT_FOUND") from exc
            raise _api_error(exc, "PROPERTY_DELETE_ERROR") from exc
        except Exception as exc:
            raise _internal_error(exc, "PROPERTY_DELETE_ERROR") from exc


schema = strawberry.Schema(query=Query, mutation=Mutation)


async def get_context(service: PropertyService = Depends(get_property_service)) -> GraphQLContext:
    return GraphQLContext(service)


def build_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(schema, context_getter=get_context)


__all__ = ["schema", "build_graphql_router", "GraphQLContext", "PropertyType"]
