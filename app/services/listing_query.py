import logging
from dataclasses import dataclass, field
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.models import Property
from app.services.filters import ListingFilterParams, ListingScope, apply_predicates, build_predicates
from app.services.pagination import DEFAULT_PAGE_SIZE, Pagination, total_pages

logger = logging.getLogger(__name__)


@dataclass
class ListingPage:
    """One page of listings plus the count for the whole filtered set"""
    page: int
    page_size: int
    total: int = 0
    rows: List[Property] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)


def list_properties(
    db: Session,
    params: ListingFilterParams,
    scope: ListingScope,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> ListingPage:
    """
    Filtered, newest-first page of properties with their location.

    Store errors are logged and turned into an empty page so listing pages
    keep rendering.
    """
    pagination = Pagination.for_page(page, page_size)
    predicates = build_predicates(params, scope)

    try:
        query = apply_predicates(db.query(Property), predicates)
        total = query.count()
        rows = query.options(joinedload(Property.location))\
            .order_by(Property.created_at.desc())\
            .offset(pagination.offset)\
            .limit(pagination.limit)\
            .all()
    except SQLAlchemyError as e:
        logger.error(f"Properties query error ({scope.value}): {e}")
        db.rollback()
        return ListingPage(page=page, page_size=page_size)

    return ListingPage(page=page, page_size=page_size, total=total, rows=rows)
