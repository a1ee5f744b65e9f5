import logging
from typing import Literal, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.config import Settings, get_settings
from app.database import get_db
from app.models import Location, Property
from app.schemas.geocode import GeocodeResult
from app.schemas.location import LocationCreate, LocationResponse
from app.schemas.property import PropertyCreate, PropertyListResponse, PropertyResponse, PropertySave
from app.routers.properties import listing_filters, to_list_response
from app.security import require_admin
from app.services.amenities import merge_amenities
from app.services.filters import ListingFilterParams, ListingScope
from app.services.geocoder import GeocodingError, NominatimGeocoder
from app.services.listing_query import list_properties
from app.services.pagination import parse_page
from app.services.property_editor import (
    PropertyNotFound, PropertySaveError, PropertyValidationError, create_draft, save_property
)
from app.services.slugs import SlugResolutionError, slugify

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


def get_geocoder(settings: Settings = Depends(get_settings)):
    geocoder = NominatimGeocoder.from_settings(settings)
    try:
        yield geocoder
    finally:
        geocoder.client.close()


def _edit_response(property_obj: Property) -> PropertyResponse:
    response = PropertyResponse.model_validate(property_obj)
    return response.model_copy(update={"amenities": merge_amenities(property_obj.amenities)})


@router.get("/properties", response_model=PropertyListResponse)
def get_admin_properties(
    page: Optional[str] = None,
    filters: ListingFilterParams = Depends(listing_filters),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Drafts and published properties, newest first"""
    result = list_properties(
        db, filters, ListingScope.ADMIN,
        page=parse_page(page),
        page_size=settings.page_size
    )
    return to_list_response(result)


@router.post("/properties", response_model=PropertyResponse, status_code=201)
def create_property(payload: PropertyCreate, db: Session = Depends(get_db)):
    """Create an empty draft"""
    try:
        property_obj = create_draft(db, payload.title)
    except (SlugResolutionError, PropertySaveError) as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _edit_response(property_obj)


@router.get("/properties/{property_id}", response_model=PropertyResponse)
def get_admin_property(property_id: str, db: Session = Depends(get_db)):
    """Property for the edit form, amenities merged over the template"""
    property_obj = db.query(Property)\
        .options(joinedload(Property.location))\
        .filter(Property.id == property_id)\
        .first()
    if not property_obj:
        raise HTTPException(status_code=404, detail="Property not found")
    return _edit_response(property_obj)


@router.put("/properties/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: str,
    payload: PropertySave,
    status: Literal["draft", "published"] = Query("draft", description="draft or published"),
    db: Session = Depends(get_db)
):
    """Save the edit form; publishing runs the full validation first"""
    try:
        property_obj = save_property(db, property_id, payload, status)
    except PropertyNotFound:
        raise HTTPException(status_code=404, detail="Property not found")
    except PropertyValidationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "errors": e.errors})
    except (SlugResolutionError, PropertySaveError) as e:
        raise HTTPException(status_code=500, detail=str(e))
    return _edit_response(property_obj)


@router.post("/locations", response_model=LocationResponse, status_code=201)
def create_location(payload: LocationCreate, db: Session = Depends(get_db)):
    """Add a location"""
    location = Location(name=payload.name.strip(), slug=slugify(payload.slug or payload.name) or None)
    db.add(location)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail="Location already exists")
    db.refresh(location)
    return location


@router.get("/geocode", response_model=GeocodeResult)
def geocode_address(
    q: str = Query(..., min_length=1, description="Address to look up"),
    geocoder: NominatimGeocoder = Depends(get_geocoder)
):
    """Coordinates and address lines for the edit form"""
    if not q.strip():
        raise HTTPException(status_code=400, detail="Please enter an address")
    try:
        result = geocoder.search(q.strip())
    except GeocodingError:
        raise HTTPException(status_code=502, detail="Failed to search address. Please try again.")
    if result is None:
        raise HTTPException(status_code=404, detail="Address not found. Please try a different search.")
    return result


@router.get("/stats")
def get_stats(db: Session = Depends(get_db)):
    """Dashboard counters"""
    by_status = dict(
        db.query(Property.status, func.count(Property.id)).group_by(Property.status).all()
    )
    featured = db.query(Property).filter(Property.featured == True).count()
    return {
        "total": sum(by_status.values()),
        "drafts": by_status.get("draft", 0),
        "published": by_status.get("published", 0),
        "featured": featured,
        "locations": db.query(Location).count()
    }
