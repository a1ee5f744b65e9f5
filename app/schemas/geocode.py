from pydantic import BaseModel, Field


class GeocodeResult(BaseModel):
    """Best match for an address search"""
    lat: float
    lng: float
    formatted_address: str = Field(description="Full display name from the geocoder")
    address_line1: str = Field(description="House number and street")
    address_line2: str = Field(description="Neighbourhood, city, region, postcode")
