"""
Amenities snapshot: category -> key -> bool (has it) or int (how many).
"""
import copy
from typing import Any, Dict, Union

Amenities = Dict[str, Dict[str, Union[bool, int]]]

AMENITIES_TEMPLATE: Amenities = {
    "interior": {
        "furnished": False,
        "air_conditioning": False,
        "central_heating": False,
        "fireplace": False,
        "hammam": False,
        "equipped_kitchen": False,
    },
    "exterior": {
        "swimming_pool": False,
        "plunge_pool": False,
        "garden": False,
        "patio": False,
        "terrace": False,
        "rooftop_terrace": False,
        "parking": False,
    },
    "rooms": {
        "salons": 0,
        "kitchens": 0,
        "terraces": 0,
        "storage_rooms": 0,
    },
    "services": {
        "wifi": False,
        "security": False,
        "housekeeping": False,
        "car_access": False,
    },
}


def empty_amenities() -> Amenities:
    return copy.deepcopy(AMENITIES_TEMPLATE)


def merge_amenities(saved: Any) -> Amenities:
    """
    Overlay a stored snapshot on the template so new template keys show up
    for old records. Accepts the stored array form ([snapshot]) or a bare dict.
    """
    if isinstance(saved, list):
        saved = saved[0] if saved else {}
    merged = empty_amenities()
    if not isinstance(saved, dict):
        return merged
    for category, values in saved.items():
        if isinstance(values, dict):
            merged.setdefault(category, {}).update(values)
    return merged


def to_stored(snapshot: Amenities) -> list:
    """Stored form: the single snapshot wrapped in an array"""
    return [merge_amenities(snapshot)]
