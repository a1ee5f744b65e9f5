import os
import itertools
from datetime import datetime, timedelta

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_API_TOKEN"] = "test-admin-token"
os.environ["SITE_URL"] = "https://realestate.inmedina.com"
os.environ["RESEND_API_KEY"] = ""
os.environ["ENQUIRY_TO_EMAIL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database import Base, get_db
from app.main import app
from app.models import Location, Property

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_headers():
    return {"Authorization": "Bearer test-admin-token"}


@pytest.fixture()
def make_location(db):
    def _make(name="Marrakech", slug=None):
        location = Location(name=name, slug=slug)
        db.add(location)
        db.commit()
        db.refresh(location)
        return location

    return _make


@pytest.fixture()
def make_property(db):
    """Insert a property; each call is one minute newer than the previous one"""
    counter = itertools.count()

    def _make(**overrides):
        n = next(counter)
        values = {
            "title": f"Property {n}",
            "slug": f"property-{n}",
            "status": "published",
            "availability_type": "sale",
            "property_type": "riad",
            "property_status": "new",
            "price": 1_000_000,
            "currency": "MAD",
            "featured": False,
            "gallery": [],
            "amenities": [],
            "created_at": BASE_TIME + timedelta(minutes=n),
        }
        values.update(overrides)
        property_obj = Property(**values)
        db.add(property_obj)
        db.commit()
        db.refresh(property_obj)
        return property_obj

    return _make
