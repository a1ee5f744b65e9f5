"""
CMS writes for properties: create a draft, save as draft or publish.

Drafts only need a title. Publishing runs the full check set first. Every write
picks a unique slug right before the commit; if the UNIQUE index on
properties.slug still rejects it (concurrent writer), the slug is recomputed
and the write retried once.
"""
import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Callable, Dict, Optional

from bs4 import BeautifulSoup
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.models import Location, Property
from app.schemas.property import PropertySave
from app.services.amenities import empty_amenities, to_stored
from app.services.slugs import is_valid_slug, resolve_unique_slug, slugify

logger = logging.getLogger(__name__)
settings = get_settings()

DEFAULT_TITLE = "Untitled property"
FALLBACK_SLUG = "property"
SLUG_CONSTRAINTS = {"ix_properties_slug", "properties_slug_key"}
CENT = Decimal("0.01")


class PropertyNotFound(Exception):
    pass


class PropertyValidationError(Exception):
    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__("Please fix the validation errors before saving")


class PropertySaveError(Exception):
    """The store rejected or failed the write"""


def stored_price(price: Optional[Decimal]) -> Optional[Decimal]:
    """Price as the Numeric(14, 2) column will hold it, None when it cannot be stored"""
    if price is None or not price.is_finite():
        return None
    try:
        return price.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return None


def description_text(html: Optional[str]) -> str:
    return BeautifulSoup(html or "", "html.parser").get_text(" ", strip=True)


def validate_for_status(db: Session, data: PropertySave, next_status: str) -> Dict[str, str]:
    """Field -> message. Empty dict means the payload may be saved with next_status"""
    errors: Dict[str, str] = {}

    if not data.title.strip():
        errors["title"] = "Title is required"
    if next_status == "draft":
        return errors

    if not data.slug.strip():
        errors["slug"] = "Slug is required"
    elif not is_valid_slug(data.slug):
        errors["slug"] = "Use lowercase letters, numbers, and hyphens only"

    price = stored_price(data.price)
    if price is None or price <= 0:
        errors["price"] = "Price must be greater than 0"

    if not data.cover_image_url.strip():
        errors["cover"] = "Cover image is required"

    if not description_text(data.description):
        errors["description"] = "Description is required"

    if not data.location_id:
        errors["location_id"] = "Location is required"
    elif db.get(Location, data.location_id) is None:
        errors["location_id"] = "Location not found"

    return errors


def _is_slug_conflict(error: IntegrityError) -> bool:
    diag = getattr(error.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name:
        return constraint_name in SLUG_CONSTRAINTS
    # SQLite only reports the column: "UNIQUE constraint failed: properties.slug"
    return "properties.slug" in str(error.orig)


def _commit_with_unique_slug(
    db: Session,
    base_slug: str,
    exclude_id: Optional[str],
    write: Callable[[str], Property],
) -> Property:
    for attempt in (1, 2):
        slug = resolve_unique_slug(db, base_slug, exclude_id=exclude_id)
        property_obj = write(slug)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            if attempt == 1 and _is_slug_conflict(e):
                logger.warning(f"Slug '{slug}' was taken by a concurrent write, retrying")
                continue
            logger.error(f"Property write rejected: {e.orig}")
            raise PropertySaveError(f"Update failed: {e.orig}") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Property write failed: {e}")
            raise PropertySaveError(f"Update failed: {e}") from e

        db.refresh(property_obj)
        return property_obj


def create_draft(db: Session, title: Optional[str] = None) -> Property:
    """Empty draft with form defaults, ready for the edit form"""
    title = (title or "").strip() or DEFAULT_TITLE

    def write(slug: str) -> Property:
        property_obj = Property(
            title=title,
            slug=slug,
            status="draft",
            availability_type="sale",
            property_type="riad",
            property_status="new",
            currency=settings.default_currency,
            featured=False,
            gallery=[],
            amenities=to_stored(empty_amenities()),
        )
        db.add(property_obj)
        return property_obj

    property_obj = _commit_with_unique_slug(db, slugify(title) or FALLBACK_SLUG, None, write)
    logger.info(f"Created draft property {property_obj.id} ({property_obj.slug})")
    return property_obj


def _apply(property_obj: Property, data: PropertySave, slug: str, next_status: str):
    property_obj.title = data.title.strip()
    property_obj.slug = slug
    property_obj.status = next_status
    property_obj.availability_type = data.availability_type
    property_obj.property_type = data.property_type
    property_obj.property_status = data.property_status
    property_obj.price = stored_price(data.price)
    property_obj.currency = data.currency or property_obj.currency or settings.default_currency
    property_obj.cover_image_url = data.cover_image_url
    property_obj.floor_plan_image_url = data.floor_plan_image_url
    property_obj.gallery = [{"url": url} for url in data.gallery if url]
    property_obj.description = data.description
    property_obj.excerpt = data.excerpt
    property_obj.amenities = to_stored(data.amenities)
    property_obj.bedrooms = data.bedrooms
    property_obj.bathrooms = data.bathrooms
    property_obj.area_sqm = data.area_sqm
    property_obj.area_sqft = data.area_sqft
    property_obj.address_line1 = data.address_line1
    property_obj.address_line2 = data.address_line2
    property_obj.latitude = data.latitude
    property_obj.longitude = data.longitude
    property_obj.location_id = data.location_id or None
    property_obj.featured = data.featured
    property_obj.seo_title = data.seo_title
    property_obj.seo_description = data.seo_description
    property_obj.seo_canonical = data.seo_canonical
    property_obj.seo_robots = data.seo_robots


def save_property(db: Session, property_id: str, data: PropertySave, next_status: str) -> Property:
    """
    Save the edit form as draft or published.

    Raises:
        PropertyNotFound: no property with this id
        PropertyValidationError: per-field messages, nothing written
        SlugResolutionError: existing slugs could not be read, nothing written
        PropertySaveError: the store failed the write
    """
    try:
        property_obj = db.query(Property).filter(Property.id == property_id).first()
        if not property_obj:
            raise PropertyNotFound(property_id)
        errors = validate_for_status(db, data, next_status)
    except SQLAlchemyError as e:
        db.rollback()
        raise PropertySaveError(f"Update failed: {e}") from e

    if errors:
        raise PropertyValidationError(errors)

    base_slug = slugify(data.slug or data.title) or FALLBACK_SLUG

    def write(slug: str) -> Property:
        _apply(property_obj, data, slug, next_status)
        return property_obj

    property_obj = _commit_with_unique_slug(db, base_slug, property_id, write)
    logger.info(f"Saved property {property_id} as {next_status} ({property_obj.slug})")
    return property_obj
