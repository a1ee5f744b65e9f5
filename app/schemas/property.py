from typing import Any, Dict, List, Literal, Optional, Union
from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

AvailabilityType = Literal["sale", "rent"]
PropertyType = Literal["house", "riad", "apartment", "villa", "terrain"]
PropertyStatus = Literal["new", "under_offer", "sold"]
PublicationStatus = Literal["draft", "published"]


class PropertyCreate(BaseModel):
    """New draft; everything else is defaulted"""
    title: Optional[str] = None


class PropertySave(BaseModel):
    """Full edit form payload, saved as draft or published"""
    title: str = ""
    slug: str = ""
    availability_type: AvailabilityType = "sale"
    property_type: PropertyType = "riad"
    property_status: PropertyStatus = "new"
    price: Optional[Decimal] = None
    currency: Optional[str] = None
    cover_image_url: str = ""
    floor_plan_image_url: str = ""
    gallery: List[str] = Field(default_factory=list, description="Ordered image URLs")
    description: str = Field("", description="HTML from the rich text editor")
    excerpt: str = ""
    amenities: Dict[str, Dict[str, Union[bool, int]]] = Field(default_factory=dict)
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    area_sqm: Optional[Decimal] = Field(None, ge=0)
    area_sqft: Optional[Decimal] = Field(None, ge=0)
    address_line1: str = ""
    address_line2: str = ""
    latitude: Optional[Decimal] = Field(None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(None, ge=-180, le=180)
    location_id: Optional[str] = None
    featured: bool = False
    seo_title: str = ""
    seo_description: str = ""
    seo_canonical: str = ""
    seo_robots: str = ""


class PropertyCardResponse(BaseModel):
    """Listing row for the public grid and the admin strips"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str
    status: PublicationStatus
    price: Optional[float] = None
    currency: Optional[str] = None
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    cover_image_url: Optional[str] = None
    property_type: str
    availability_type: str
    address_line1: Optional[str] = None
    area_sqm: Optional[float] = None
    featured: bool = False
    location_name: Optional[str] = None


class PropertyResponse(PropertyCardResponse):
    """Full property record"""
    property_status: str
    floor_plan_image_url: Optional[str] = None
    gallery: List[Any] = []
    description: Optional[str] = None
    excerpt: Optional[str] = None
    amenities: Any = None
    area_sqft: Optional[float] = None
    address_line2: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    location_id: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_canonical: Optional[str] = None
    seo_robots: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PropertyListResponse(BaseModel):
    """Paginated list of properties"""
    items: List[PropertyCardResponse]
    total: int
    page: int
    per_page: int
    pages: int

