import re
import logging
import unicodedata
from typing import Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Property

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


class SlugResolutionError(Exception):
    """Existing slugs could not be read, so uniqueness cannot be guaranteed"""


def slugify(text: Optional[str]) -> str:
    """'Riad Azzédine, Fès' -> 'riad-azzedine-fes'"""
    text = unicodedata.normalize("NFKD", text or "").encode("ascii", "ignore").decode("ascii")
    text = re.sub(r"[^a-z0-9]+", "-", text.strip().lower())
    return text.strip("-")


def is_valid_slug(slug: Optional[str]) -> bool:
    return bool(slug) and SLUG_PATTERN.match(slug) is not None


def _taken_slugs(db: Session, base_slug: str, exclude_id: Optional[str]) -> Set[str]:
    query = db.query(Property.id, Property.slug).filter(Property.slug.like(f"{base_slug}%"))
    return {slug for row_id, slug in query.all() if row_id != exclude_id}


def resolve_unique_slug(db: Session, base_slug: str, exclude_id: Optional[str] = None) -> str:
    """
    Return base_slug, or the first free base_slug-2, base_slug-3, ...

    Args:
        db: Session
        base_slug: Already normalized slug
        exclude_id: Property being updated; its own slug does not count as taken

    Raises:
        SlugResolutionError: existing slugs could not be read

    Not race-free: two writers can pick the same slug between the read and
    the commit. The UNIQUE index on properties.slug catches that case.
    """
    try:
        taken = _taken_slugs(db, base_slug, exclude_id)
    except SQLAlchemyError as e:
        logger.error(f"Slug lookup failed for '{base_slug}': {e}")
        raise SlugResolutionError(f"Could not check slug availability: {e}") from e

    if base_slug not in taken:
        return base_slug

    suffix = 2
    while f"{base_slug}-{suffix}" in taken:
        suffix += 1
    return f"{base_slug}-{suffix}"
