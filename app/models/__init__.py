from app.models.location import Location
from app.models.property import Property

__all__ = ["Location", "Property"]
