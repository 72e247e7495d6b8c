"""JSON payload conversion for back-office records.

Decoding is best-effort: unknown keys are dropped, malformed values become
None and a warning is logged. Partial payloads decode to partial field maps
so that updates can be merged over the existing record.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from enum import Enum
import re
from typing import Any

from loguru import logger

from core.models import (
    RECORD_TYPES,
    AgeRange,
    Baby,
    EntityKind,
    Ingredient,
    PopulatedUser,
    ResolvedCategory,
    UnresolvedCategory,
)

_WIRE_TO_ATTR = {
    "_id": "id",
    "userId": "user",
    "lastheadsizeUpdate": "last_head_size_update",
    "headSize": "head_size",
}
_ATTR_TO_WIRE = {v: k for k, v in _WIRE_TO_ATTR.items()}

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def to_attr(wire_key: str) -> str:
    """`createdAt` -> `created_at`; aliases such as `_id` -> `id` first."""
    if wire_key in _WIRE_TO_ATTR:
        return _WIRE_TO_ATTR[wire_key]
    return _CAMEL_RE.sub("_", wire_key).lower()


def to_wire(attr_name: str) -> str:
    if attr_name in _ATTR_TO_WIRE:
        return _ATTR_TO_WIRE[attr_name]
    head, *rest = attr_name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Returns None if the value is empty or invalid.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Invalid datetime: {}", value)
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_int(value: Any) -> int | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        logger.warning("Invalid integer: {}", value)
        return None


def _to_float(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid number: {}", value)
        return None


def _to_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def _to_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) if not isinstance(v, Mapping) else str(v.get("_id", "")) for v in value]


def _to_category(value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, Mapping):
        return ResolvedCategory(decode_record(EntityKind.CATEGORIES, value))
    return UnresolvedCategory(str(value))


def _to_owner(value: Any) -> PopulatedUser | None:
    if isinstance(value, Mapping):
        return PopulatedUser(
            id=str(value.get("_id", "")),
            name=value.get("name") or "",
            email=value.get("email") or "",
            phone=value.get("phone") or "",
        )
    if isinstance(value, str) and value:
        return PopulatedUser(id=value)
    return None


def _to_ingredients(value: Any) -> list[Ingredient]:
    if not isinstance(value, list):
        return []
    return [
        Ingredient(
            name=str(item.get("name") or ""),
            quantity=_to_float(item.get("quantity")) or 0,
            unit=str(item.get("unit") or ""),
        )
        for item in value
        if isinstance(item, Mapping)
    ]


def _to_age_ranges(value: Any) -> list[AgeRange]:
    if not isinstance(value, list):
        return []
    ranges: list[AgeRange] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        low, high = _to_int(item.get("minDay")), _to_int(item.get("maxDay"))
        if low is not None and high is not None:
            ranges.append(AgeRange(min_day=low, max_day=high))
    return ranges


def _to_babies(value: Any) -> list[Baby]:
    if not isinstance(value, list):
        return []
    return [decode_record(EntityKind.BABIES, b) for b in value if isinstance(b, Mapping) and b.get("_id")]


def _baby_gender(value: Any) -> str | None:
    lowered = str(value or "").lower()
    if lowered == "male":
        return "Male"
    if lowered == "female":
        return "Female"
    return None


def _to_text(value: Any) -> str | None:
    return None if value is None else str(value)


_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "id": str,
    "created_at": parse_datetime,
    "updated_at": parse_datetime,
    "scheduled_at": parse_datetime,
    "birthday": parse_datetime,
    "last_head_size_update": parse_datetime,
    "day": _to_int,
    "min_day": _to_int,
    "max_day": _to_int,
    "rating": _to_float,
    "head_size": _to_float,
    "height": _to_float,
    "weight": _to_float,
    "quantity": _to_float,
    "is_active": _to_bool,
    "autorisation": _to_bool,
    "category": _to_category,
    "user": _to_owner,
    "ingredients": _to_ingredients,
    "age_ranges": _to_age_ranges,
    "babies": _to_babies,
    "likes": _to_str_list,
    "dislikes": _to_str_list,
    "viewers": _to_str_list,
    "sources": _to_str_list,
    "content_types": _to_str_list,
    "instructions": _to_str_list,
}

_LIST_FIELDS = {"description", "image_url", "sources", "likes", "dislikes", "viewers", "ingredients", "instructions"}

_KIND_CONVERTERS: dict[EntityKind, dict[str, Callable[[Any], Any]]] = {
    EntityKind.BABIES: {"gender": _baby_gender},
    EntityKind.ADVICES: {"description": _to_str_list, "image_url": _to_str_list},
    EntityKind.ARTICLES: {"description": _to_str_list, "image_url": _to_str_list},
}


def decode_fields(kind: EntityKind, payload: Mapping[str, Any]) -> dict[str, Any]:
    """Attribute values for the keys present in `payload`."""
    names = {f.name for f in fields(RECORD_TYPES[kind])}
    overrides = _KIND_CONVERTERS.get(kind, {})
    decoded: dict[str, Any] = {}
    for wire_key, value in payload.items():
        name = to_attr(wire_key)
        if name not in names:
            continue
        convert = overrides.get(name) or _CONVERTERS.get(name, _to_text)
        decoded[name] = convert(value)
    return decoded


def decode_record(kind: EntityKind, payload: Mapping[str, Any]) -> Any:
    """Build a full record from `payload`.

    Raises:
        ValueError: if the payload has no id.
    """
    decoded = decode_fields(kind, payload)
    if not decoded.get("id"):
        raise ValueError(f"{kind.value} payload without _id")
    # Omit None for fields whose model default is a list.
    decoded = {k: v for k, v in decoded.items() if v is not None or k not in _LIST_FIELDS}
    return RECORD_TYPES[kind](**decoded)


def encode_value(value: Any) -> Any:
    if isinstance(value, (ResolvedCategory, UnresolvedCategory)):
        return value.id
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value) and not isinstance(value, type):
        return {to_wire(f.name): encode_value(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def encode_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Wire payload for attribute changes; the id never travels in the body."""
    return {to_wire(k): encode_value(v) for k, v in changes.items() if k != "id"}
