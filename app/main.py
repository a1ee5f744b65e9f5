import logging
from fastapi import FastAPI

from app.config import get_settings
from app.database import engine, Base
from app.routers import properties_router, locations_router, enquiry_router, admin_router, site_router

settings = get_settings()

log_level = logging.DEBUG if settings.debug else logging.INFO
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.app_name,
    description="Property listings and CMS for Real Estate InMedina",
    version="1.0.0"
)

app.include_router(properties_router)
app.include_router(locations_router)
app.include_router(enquiry_router)
app.include_router(admin_router)
app.include_router(site_router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
