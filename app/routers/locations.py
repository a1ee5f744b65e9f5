from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Location
from app.schemas.location import LocationResponse

router = APIRouter(prefix="/api/locations", tags=["locations"])


@router.get("", response_model=List[LocationResponse])
def get_locations(db: Session = Depends(get_db)):
    """Locations for the search bar and the edit form, by name"""
    return db.query(Location).order_by(Location.name.asc()).all()
