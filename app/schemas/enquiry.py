from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class EnquiryRequest(BaseModel):
    """Contact form / property enquiry submission"""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Amina",
                "email": "amina@example.com",
                "message": "Is the riad still available?",
                "phone": "+212 600 000 000",
                "enquiryType": "sale",
                "source": "property-page",
                "propertySlug": "riad-azzedine",
            }
        },
    )

    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None
    phone: Optional[str] = None
    enquiry_type: Optional[str] = Field(None, alias="enquiryType")
    source: Optional[str] = None
    subject: Optional[str] = None
    property_title: Optional[str] = Field(None, alias="propertyTitle")
    property_id: Optional[str] = Field(None, alias="propertyId")
    property_slug: Optional[str] = Field(None, alias="propertySlug")
    property_url: Optional[str] = Field(None, alias="propertyUrl")


class EnquiryResponse(BaseModel):
    ok: bool = True
    message: str
