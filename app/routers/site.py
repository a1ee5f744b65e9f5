from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from app.config import Settings, get_settings
from app.database import get_db
from app.services.sitemap import robots_txt, sitemap_entries
from app.templating import templates

router = APIRouter(tags=["site"])


@router.get("/sitemap.xml")
def sitemap(request: Request, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    entries = sitemap_entries(db, settings)
    return templates.TemplateResponse(
        request, "sitemap.xml", {"entries": entries}, media_type="application/xml"
    )


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots(settings: Settings = Depends(get_settings)):
    return robots_txt(settings)
