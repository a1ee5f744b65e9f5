import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings
from app.models import Property

logger = logging.getLogger(__name__)

ROBOTS_DISALLOW = ["/admin", "/auth", "/unauthorized"]


@dataclass
class SitemapEntry:
    loc: str
    lastmod: datetime


def base_url(settings: Settings) -> str:
    return (settings.site_url or "http://localhost:3000").rstrip("/")


def sitemap_entries(db: Session, settings: Settings) -> List[SitemapEntry]:
    """Static pages plus one URL per published property"""
    base = base_url(settings)
    now = datetime.now(timezone.utc)
    entries = [SitemapEntry(loc=f"{base}{path or '/'}", lastmod=now) for path in settings.sitemap_static_paths]

    try:
        rows = db.query(Property.slug, Property.updated_at)\
            .filter(Property.status == "published")\
            .all()
    except SQLAlchemyError as e:
        logger.error(f"Sitemap query error: {e}")
        db.rollback()
        return entries

    for slug, updated_at in rows:
        if not slug:
            continue
        entries.append(SitemapEntry(loc=f"{base}/properties/{slug}", lastmod=updated_at or now))
    return entries


def robots_txt(settings: Settings) -> str:
    lines = ["User-agent: *", "Allow: /", ""]
    lines.append("User-agent: *")
    lines.extend(f"Disallow: {path}" for path in ROBOTS_DISALLOW)
    lines.extend(["", f"Sitemap: {base_url(settings)}/sitemap.xml", ""])
    return "\n".join(lines)
