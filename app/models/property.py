import uuid

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, ForeignKey, Boolean, JSON, CheckConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.database import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


class Property(Base):
    """
    Property listing managed from the CMS.
    Public pages only ever see rows with status = published.
    """
    __tablename__ = "properties"
    __table_args__ = (
        CheckConstraint("status <> 'published' OR price > 0", name="ck_properties_published_price"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    location_id = Column(String(36), ForeignKey("locations.id"), nullable=True, index=True)

    title = Column(String(500), nullable=False)
    slug = Column(String(255), unique=True, index=True, nullable=False)
    excerpt = Column(Text, nullable=True)
    description = Column(Text, nullable=True)

    availability_type = Column(String(20), nullable=False, default="sale", index=True)
    property_type = Column(String(20), nullable=False, default="riad", index=True)
    property_status = Column(String(20), nullable=False, default="new")
    status = Column(String(20), nullable=False, default="draft", index=True)
    featured = Column(Boolean, nullable=False, default=False)

    price = Column(Numeric(14, 2), nullable=True)
    currency = Column(String(10), nullable=True)

    cover_image_url = Column(String(1000), nullable=True)
    floor_plan_image_url = Column(String(1000), nullable=True)
    gallery = Column(JSONType, nullable=False, default=list)  # [{"url": ...}, ...]

    # One snapshot wrapped in an array: [{"category": {"key": bool | int}}]
    amenities = Column(JSONType, nullable=False, default=list)

    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)
    area_sqm = Column(Numeric(12, 2), nullable=True)
    area_sqft = Column(Numeric(12, 2), nullable=True)

    address_line1 = Column(String(500), nullable=True)
    address_line2 = Column(String(500), nullable=True)
    latitude = Column(Numeric(9, 6), nullable=True)
    longitude = Column(Numeric(9, 6), nullable=True)

    seo_title = Column(String(500), nullable=True)
    seo_description = Column(Text, nullable=True)
    seo_canonical = Column(String(1000), nullable=True)
    seo_robots = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    location = relationship("Location", back_populates="properties")

    @property
    def location_name(self):
        return self.location.name if self.location else None

    def __repr__(self):
        return f"<Property(id={self.id}, slug={self.slug}, status={self.status})>"
