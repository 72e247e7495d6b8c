from datetime import datetime, timezone

import pytest

from core.models import Advice, Baby, EntityKind, ResolvedCategory, UnresolvedCategory
from infrastructure.codec import (
    decode_fields,
    decode_record,
    encode_changes,
    parse_datetime,
    to_attr,
    to_wire,
)


def test_key_mapping():
    assert to_attr("createdAt") == "created_at"
    assert to_attr("_id") == "id"
    assert to_attr("userId") == "user"
    assert to_wire("scheduled_at") == "scheduledAt"
    assert to_wire("is_active") == "isActive"
    assert to_wire("id") == "_id"


def test_advice_with_populated_category():
    payload = {
        "_id": "a1",
        "title": "Sommeil",
        "category": {"_id": "c1", "name": "Nuit", "contentTypes": ["advice"]},
        "day": "200",
        "viewers": ["u1", {"_id": "u2"}],
        "createdAt": "2024-03-01T10:00:00.000Z",
        "__v": 0,
    }

    advice = decode_record(EntityKind.ADVICES, payload)

    assert isinstance(advice, Advice)
    assert isinstance(advice.category, ResolvedCategory)
    assert advice.category.name == "Nuit"
    assert advice.day == 200
    assert advice.viewers == ["u1", "u2"]
    assert advice.created_at == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)
    assert advice.is_active is None


def test_category_id_decodes_unresolved():
    advice = decode_record(EntityKind.ADVICES, {"_id": "a1", "category": "c1"})

    assert advice.category == UnresolvedCategory("c1")


def test_null_lists_fall_back_to_empty():
    advice = decode_record(EntityKind.ADVICES, {"_id": "a1", "likes": None, "description": None})

    assert advice.likes == []
    assert advice.description == []


def test_baby_gender_and_owner():
    baby = decode_record(
        EntityKind.BABIES,
        {"_id": "b1", "gender": "female", "userId": {"_id": "u1", "name": "Claire"}, "autorisation": True},
    )

    assert isinstance(baby, Baby)
    assert baby.gender == "Female"
    assert baby.user.name == "Claire"
    assert baby.autorisation is True


def test_missing_id_is_rejected():
    with pytest.raises(ValueError):
        decode_record(EntityKind.DOCTORS, {"name": "Dr Martin"})


def test_partial_payload_decodes_only_present_fields():
    assert decode_fields(EntityKind.ADVICES, {"_id": "a1", "title": "B"}) == {"id": "a1", "title": "B"}


def test_invalid_datetime_becomes_none():
    assert parse_datetime("pas une date") is None


def test_encode_changes_drops_id_and_converts_values():
    changes = {
        "id": "a1",
        "category": UnresolvedCategory("c1"),
        "scheduled_at": datetime(2024, 3, 1, 10, tzinfo=timezone.utc),
        "min_day": None,
    }

    assert encode_changes(changes) == {
        "category": "c1",
        "scheduledAt": "2024-03-01T10:00:00.000Z",
        "minDay": None,
    }
