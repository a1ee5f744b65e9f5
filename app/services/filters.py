"""
Listing filters.

Raw query-string parameters are turned into an explicit list of typed predicates
once, and the list is then applied to a SQLAlchemy query in one pass. The status
scope predicate always comes from the caller's scope, never from the parameters.
"""
import math
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from sqlalchemy import and_, cast, exists, func, literal, select
from sqlalchemy.dialects.postgresql import JSONB

from app.models import Property

logger = logging.getLogger(__name__)


class ListingScope(str, Enum):
    PUBLIC = "public"
    ADMIN = "admin"


SCOPE_STATUSES = {
    ListingScope.PUBLIC: ("published",),
    ListingScope.ADMIN: ("draft", "published"),
}


def _column(name: str):
    return getattr(Property, name)


@dataclass(frozen=True)
class EqualityFilter:
    field: str
    value: Any

    def clause(self, dialect_name: str):
        return _column(self.field) == self.value


@dataclass(frozen=True)
class InFilter:
    field: str
    values: Tuple[Any, ...]

    def clause(self, dialect_name: str):
        return _column(self.field).in_(self.values)


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive range; a missing bound leaves that side open"""
    field: str
    lower: Optional[float] = None
    upper: Optional[float] = None

    def clause(self, dialect_name: str):
        column = _column(self.field)
        conditions = []
        if self.lower is not None:
            conditions.append(column >= self.lower)
        if self.upper is not None:
            conditions.append(column <= self.upper)
        return and_(*conditions)


@dataclass(frozen=True)
class ContainsFilter:
    """
    Literal membership in a JSON array column.
    Only top-level elements are compared, nested keys are not searched.
    """
    field: str
    value: str

    def clause(self, dialect_name: str):
        column = _column(self.field)
        if dialect_name == "postgresql":
            return cast(column, JSONB).contains([self.value])
        elements = func.json_each(column).table_valued("value")
        return exists(
            select(literal(1)).select_from(elements).where(elements.c.value == self.value)
        )


Predicate = Union[EqualityFilter, InFilter, RangeFilter, ContainsFilter]


def _first(params: Mapping[str, Any], key: str) -> Optional[str]:
    """First value of a possibly repeated query parameter"""
    if hasattr(params, "getlist"):
        values = params.getlist(key)
        value = values[0] if values else None
    else:
        value = params.get(key)
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None
    if value is None or value == "":
        return None
    return str(value)


def _parse_number(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    try:
        number = float(raw.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _parse_count(raw: Optional[str]) -> Optional[int]:
    """Bedrooms/bathrooms: "any" and anything that is not a whole number mean no filter"""
    if raw is None or raw == "any":
        return None
    number = _parse_number(raw)
    if number is None or not number.is_integer():
        return None
    return int(number)


@dataclass
class ListingFilterParams:
    availability_type: Optional[str] = None
    property_type: Optional[str] = None
    location_id: Optional[str] = None
    min_price: Optional[str] = None
    max_price: Optional[str] = None
    bedrooms: Optional[str] = None
    bathrooms: Optional[str] = None
    featured: Optional[str] = None
    q: Optional[str] = None

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "ListingFilterParams":
        """
        Read filters from a query string mapping.

        camelCase price keys win over snake_case ones, repeated keys keep their
        first value, and any caller-supplied status is ignored.
        """
        return cls(
            availability_type=_first(params, "availability_type"),
            property_type=_first(params, "property_type"),
            location_id=_first(params, "locationId"),
            min_price=_first(params, "minPrice") or _first(params, "min_price"),
            max_price=_first(params, "maxPrice") or _first(params, "max_price"),
            bedrooms=_first(params, "bedrooms"),
            bathrooms=_first(params, "bathrooms"),
            featured=_first(params, "featured"),
            q=_first(params, "q"),
        )


def build_predicates(params: ListingFilterParams, scope: ListingScope) -> List[Predicate]:
    predicates: List[Predicate] = [InFilter("status", SCOPE_STATUSES[scope])]

    if params.availability_type:
        predicates.append(EqualityFilter("availability_type", params.availability_type))

    if params.featured == "true":
        predicates.append(EqualityFilter("featured", True))
    elif params.featured == "false":
        predicates.append(EqualityFilter("featured", False))

    if params.location_id:
        predicates.append(EqualityFilter("location_id", params.location_id))

    if params.property_type:
        predicates.append(EqualityFilter("property_type", params.property_type))

    min_price = _parse_number(params.min_price)
    max_price = _parse_number(params.max_price)
    if min_price is not None or max_price is not None:
        predicates.append(RangeFilter("price", lower=min_price, upper=max_price))
    elif params.min_price or params.max_price:
        logger.debug(f"Ignoring non-numeric price bounds: {params.min_price!r}, {params.max_price!r}")

    bedrooms = _parse_count(params.bedrooms)
    if bedrooms is not None:
        predicates.append(EqualityFilter("bedrooms", bedrooms))

    bathrooms = _parse_count(params.bathrooms)
    if bathrooms is not None:
        predicates.append(EqualityFilter("bathrooms", bathrooms))

    if params.q:
        predicates.append(ContainsFilter("amenities", params.q))

    return predicates


def apply_predicates(query, predicates: Sequence[Predicate]):
    dialect_name = query.session.get_bind().dialect.name
    for predicate in predicates:
        query = query.filter(predicate.clause(dialect_name))
    return query
