from app.routers.properties import router as properties_router
from app.routers.locations import router as locations_router
from app.routers.enquiry import router as enquiry_router
from app.routers.admin import router as admin_router
from app.routers.site import router as site_router

__all__ = ["properties_router", "locations_router", "enquiry_router", "admin_router", "site_router"]
