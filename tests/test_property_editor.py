from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.models import Property
from app.schemas.property import PropertySave
from app.services import property_editor, slugs
from app.services.amenities import AMENITIES_TEMPLATE, merge_amenities
from app.services.property_editor import (
    PropertyNotFound, PropertySaveError, PropertyValidationError, create_draft, save_property,
    stored_price, validate_for_status
)
from app.services.slugs import SlugResolutionError


def publishable(location_id, **overrides):
    values = {
        "title": "Riad Azzedine",
        "slug": "riad-azzedine",
        "price": Decimal("2500000"),
        "cover_image_url": "https://cdn.example.com/riad/cover.jpg",
        "description": "<p>Restored riad in the heart of the medina.</p>",
        "location_id": location_id,
        "bedrooms": 5,
        "bathrooms": 4,
        "gallery": ["https://cdn.example.com/riad/1.jpg", "", "https://cdn.example.com/riad/2.jpg"],
        "amenities": {"exterior": {"plunge_pool": True}, "rooms": {"salons": 2}},
    }
    values.update(overrides)
    return PropertySave(**values)


def test_draft_only_needs_title(db):
    assert validate_for_status(db, PropertySave(title="Riad"), "draft") == {}
    assert validate_for_status(db, PropertySave(), "draft") == {"title": "Title is required"}


def test_publish_requires_full_set(db):
    errors = validate_for_status(db, PropertySave(description="<p>  </p>"), "published")

    assert errors == {
        "title": "Title is required",
        "slug": "Slug is required",
        "price": "Price must be greater than 0",
        "cover": "Cover image is required",
        "description": "Description is required",
        "location_id": "Location is required",
    }


def test_publish_rejects_bad_slug_and_price(db, make_location):
    location = make_location()
    errors = validate_for_status(
        db, publishable(location.id, slug="Riad Azzedine", price=Decimal("0")), "published"
    )

    assert errors == {
        "slug": "Use lowercase letters, numbers, and hyphens only",
        "price": "Price must be greater than 0",
    }


def test_publish_rejects_unknown_location(db):
    errors = validate_for_status(db, publishable("no-such-location"), "published")
    assert errors == {"location_id": "Location not found"}


def test_create_draft_defaults(db):
    draft = create_draft(db)

    assert draft.status == "draft"
    assert draft.title == "Untitled property"
    assert draft.slug == "untitled-property"
    assert draft.availability_type == "sale"
    assert draft.property_type == "riad"
    assert draft.property_status == "new"
    assert draft.currency == "MAD"
    assert draft.amenities == [AMENITIES_TEMPLATE]


def test_create_draft_slug_is_unique(db):
    create_draft(db, "Villa Palmeraie")
    second = create_draft(db, "Villa Palmeraie")

    assert second.slug == "villa-palmeraie-2"


def test_save_draft_derives_slug_from_title(db):
    draft = create_draft(db)

    saved = save_property(db, draft.id, PropertySave(title="Dar Fès Jdid"), "draft")

    assert saved.status == "draft"
    assert saved.slug == "dar-fes-jdid"
    assert saved.price is None


def test_save_draft_without_title_is_rejected(db):
    draft = create_draft(db)

    with pytest.raises(PropertyValidationError) as exc_info:
        save_property(db, draft.id, PropertySave(title="  "), "draft")

    assert exc_info.value.errors == {"title": "Title is required"}


def test_publish(db, make_location):
    location = make_location()
    draft = create_draft(db)

    saved = save_property(db, draft.id, publishable(location.id), "published")

    assert saved.status == "published"
    assert saved.slug == "riad-azzedine"
    assert saved.location_name == "Marrakech"
    assert saved.gallery == [
        {"url": "https://cdn.example.com/riad/1.jpg"},
        {"url": "https://cdn.example.com/riad/2.jpg"},
    ]
    assert len(saved.amenities) == 1
    assert saved.amenities[0]["exterior"]["plunge_pool"] is True
    assert saved.amenities[0]["rooms"]["salons"] == 2
    assert saved.amenities[0]["interior"] == AMENITIES_TEMPLATE["interior"]


def test_publish_with_taken_slug_gets_suffix(db, make_location, make_property):
    location = make_location()
    make_property(slug="riad-azzedine")
    draft = create_draft(db)

    saved = save_property(db, draft.id, publishable(location.id), "published")

    assert saved.slug == "riad-azzedine-2"


def test_resave_keeps_own_slug(db, make_location):
    location = make_location()
    draft = create_draft(db)
    save_property(db, draft.id, publishable(location.id), "published")

    saved = save_property(db, draft.id, publishable(location.id, excerpt="Updated"), "published")

    assert saved.slug == "riad-azzedine"
    assert saved.excerpt == "Updated"


def test_missing_property(db):
    with pytest.raises(PropertyNotFound):
        save_property(db, "missing", PropertySave(title="Riad"), "draft")


def test_slug_conflict_on_commit_is_retried_once(db, make_property, monkeypatch):
    make_property(slug="riad")
    draft = create_draft(db)
    real_resolve = property_editor.resolve_unique_slug
    calls = []

    def racing_resolve(session, base_slug, exclude_id=None):
        calls.append(base_slug)
        if len(calls) == 1:
            return "riad"  # another writer got there first
        return real_resolve(session, base_slug, exclude_id=exclude_id)

    monkeypatch.setattr(property_editor, "resolve_unique_slug", racing_resolve)

    saved = save_property(db, draft.id, PropertySave(title="Riad"), "draft")

    assert len(calls) == 2
    assert saved.slug == "riad-2"


def test_second_slug_conflict_fails_the_save(db, make_property, monkeypatch):
    make_property(slug="riad")
    draft = create_draft(db)
    monkeypatch.setattr(property_editor, "resolve_unique_slug", lambda *args, **kwargs: "riad")

    with pytest.raises(PropertySaveError):
        save_property(db, draft.id, PropertySave(title="Riad"), "draft")


def test_merge_amenities_accepts_both_stored_forms():
    snapshot = {"exterior": {"swimming_pool": True}, "extra": {"elevator": True}}

    for stored in (snapshot, [snapshot]):
        merged = merge_amenities(stored)
        assert merged["exterior"]["swimming_pool"] is True
        assert merged["exterior"]["garden"] is False
        assert merged["extra"] == {"elevator": True}

    assert merge_amenities(None) == AMENITIES_TEMPLATE


def test_sub_cent_price_is_not_publishable(db, make_location):
    location = make_location()
    errors = validate_for_status(db, publishable(location.id, price=Decimal("0.001")), "published")
    assert errors == {"price": "Price must be greater than 0"}
    assert stored_price(Decimal("0.005")) == Decimal("0.01")


def test_failed_slug_lookup_aborts_the_save(db, monkeypatch):
    draft = create_draft(db, "Riad Azzedine")

    def broken_lookup(*args, **kwargs):
        raise OperationalError("SELECT properties.slug", {}, Exception("database is locked"))

    monkeypatch.setattr(slugs, "_taken_slugs", broken_lookup)

    with pytest.raises(SlugResolutionError):
        save_property(db, draft.id, PropertySave(title="Dar Bahia"), "draft")

    db.expire_all()
    stored = db.get(Property, draft.id)
    assert stored.title == "Riad Azzedine"
    assert stored.slug == "riad-azzedine"


def test_slug_conflict_detected_by_constraint_name():
    class PostgresError(Exception):
        diag = SimpleNamespace(constraint_name="ix_properties_slug")

    class OtherPostgresError(Exception):
        diag = SimpleNamespace(constraint_name="ck_properties_published_price")

    assert property_editor._is_slug_conflict(IntegrityError("UPDATE", {}, PostgresError("duplicate key")))
    assert not property_editor._is_slug_conflict(
        IntegrityError("UPDATE", {}, OtherPostgresError("violates check constraint"))
    )
    assert property_editor._is_slug_conflict(
        IntegrityError("UPDATE", {}, Exception("UNIQUE constraint failed: properties.slug"))
    )
