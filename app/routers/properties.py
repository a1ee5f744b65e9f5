from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session, joinedload

from app.config import Settings, get_settings
from app.database import get_db
from app.models import Property
from app.schemas.property import PropertyResponse, PropertyListResponse
from app.services.filters import ListingFilterParams, ListingScope
from app.services.listing_query import ListingPage, list_properties
from app.services.pagination import parse_page

router = APIRouter(prefix="/api/properties", tags=["properties"])


def listing_filters(request: Request) -> ListingFilterParams:
    """availability_type, property_type, locationId, minPrice/min_price, maxPrice/max_price,
    bedrooms, bathrooms, featured, q"""
    return ListingFilterParams.from_query_params(request.query_params)


def to_list_response(result: ListingPage) -> PropertyListResponse:
    return PropertyListResponse(
        items=result.rows,
        total=result.total,
        page=result.page,
        per_page=result.page_size,
        pages=result.total_pages
    )


@router.get("", response_model=PropertyListResponse)
def get_properties(
    page: Optional[str] = None,
    filters: ListingFilterParams = Depends(listing_filters),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Published properties, newest first, with filters and pagination"""
    result = list_properties(
        db, filters, ListingScope.PUBLIC,
        page=parse_page(page),
        page_size=settings.page_size
    )
    return to_list_response(result)


@router.get("/{slug}", response_model=PropertyResponse)
def get_property(slug: str, db: Session = Depends(get_db)):
    """Published property by slug"""
    property_obj = db.query(Property)\
        .options(joinedload(Property.location))\
        .filter(Property.slug == slug)\
        .first()
    if not property_obj or property_obj.status != "published":
        raise HTTPException(status_code=404, detail="Property not found")
    return property_obj
