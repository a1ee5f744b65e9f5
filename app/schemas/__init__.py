from app.schemas.property import (
    PropertyCreate, PropertySave, PropertyCardResponse, PropertyResponse, PropertyListResponse
)
from app.schemas.location import LocationCreate, LocationResponse
from app.schemas.enquiry import EnquiryRequest, EnquiryResponse
from app.schemas.geocode import GeocodeResult

__all__ = [
    "PropertyCreate", "PropertySave", "PropertyCardResponse", "PropertyResponse", "PropertyListResponse",
    "LocationCreate", "LocationResponse",
    "EnquiryRequest", "EnquiryResponse",
    "GeocodeResult"
]
