"""Per-entity list configuration.

Every list page in the console follows the same search/filter/sort/tab
pattern; an `EntityProfile` captures what differs between entity types.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from core.models import EntityKind, SortDirection, SortKey, effective_active
from core.services.comparators import (
    SortField,
    SortTable,
    ValueKind,
    attr,
    count_of,
    effective_start,
    full_name,
    owner_name,
)
from core.services.predicates import (
    BooleanFilter,
    EqualityFilter,
    Filter,
    MembershipFilter,
    TabSpec,
    in_day_window,
    outside_day_window,
)

STATUS_FILTER = "status"
CATEGORY_FILTER = "category"
GENDER_FILTER = "gender"
AUTHORIZATION_FILTER = "autorisation"
HEALTH_FILTER = "health"
CITY_FILTER = "city"
SPECIALTY_FILTER = "specialty"
TYPE_FILTER = "type"

TAB_REST = "rest"
TAB_SIX_TO_NINE = "6-9"


@dataclass(frozen=True)
class EntityProfile:
    """What a list page of one entity type can search, filter, sort and tab on."""

    kind: EntityKind
    search_fields: tuple[Callable[[Any], str | None], ...]
    sort_fields: SortTable
    default_sort: tuple[SortKey, SortDirection]
    filters: tuple[Filter, ...] = ()
    tabs: tuple[TabSpec, ...] = ()
    default_tab: str | None = None
    content_type: str | None = None
    supports_create: bool = True
    supports_status: bool = False
    schedules_days: bool = False

    def __post_init__(self) -> None:
        if self.default_sort[0] not in self.sort_fields:
            raise ValueError(f"{self.kind.value}: default sort {self.default_sort[0]} unsupported")

    @property
    def filter_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.filters)

    def supports_sort(self, sort_key: SortKey) -> bool:
        return sort_key in self.sort_fields

    def tab(self, tab_id: str) -> TabSpec | None:
        for tab in self.tabs:
            if tab.id == tab_id:
                return tab
        return None


def parse_sort_option(option: str) -> tuple[SortKey, SortDirection]:
    """Split an option such as ``"createdAt-desc"`` into key and direction.

    Raises:
        ValueError: on an unknown key or direction.
    """
    key, sep, direction = option.rpartition("-")
    if not sep:
        raise ValueError(f"Invalid sort option: {option!r}")
    return SortKey(key), SortDirection(direction)


def _category_id(record: Any) -> str | None:
    ref = getattr(record, "category", None)
    return ref.id if ref is not None else None


def _owner_field(name: str) -> Callable[[Any], str | None]:
    def _read(record: Any) -> str | None:
        owner = getattr(record, "user", None)
        return getattr(owner, name, None) if owner is not None else None

    return _read


_CREATED = SortField(attr("created_at"), ValueKind.DATETIME)
_UPDATED = SortField(attr("updated_at"), ValueKind.DATETIME)
_TITLE = SortField(attr("title"), ValueKind.TEXT)
_NAME = SortField(attr("name"), ValueKind.TEXT)
_VIEWERS = SortField(count_of("viewers"), ValueKind.NUMBER)
_LIKES = SortField(count_of("likes"), ValueKind.NUMBER)
_RATING = SortField(attr("rating"), ValueKind.NUMBER)

_STATUS = BooleanFilter(STATUS_FILTER, lambda r: effective_active(r))
_CATEGORY = EqualityFilter(CATEGORY_FILTER, _category_id)

USERS = EntityProfile(
    kind=EntityKind.USERS,
    search_fields=(full_name, attr("email")),
    sort_fields={
        SortKey.CREATED_AT: _CREATED,
        SortKey.NAME: SortField(full_name, ValueKind.TEXT),
    },
    default_sort=(SortKey.CREATED_AT, SortDirection.DESC),
    filters=(EqualityFilter(GENDER_FILTER, attr("gender")),),
)

BABIES = EntityProfile(
    kind=EntityKind.BABIES,
    search_fields=(attr("name"), _owner_field("name"), _owner_field("email")),
    sort_fields={
        SortKey.CREATED_AT: _CREATED,
        SortKey.NAME: _NAME,
        SortKey.OWNER_NAME: SortField(owner_name, ValueKind.TEXT),
    },
    default_sort=(SortKey.CREATED_AT, SortDirection.DESC),
    filters=(
        BooleanFilter(AUTHORIZATION_FILTER, attr("autorisation"), true_value="true", false_value="false"),
        EqualityFilter(GENDER_FILTER, attr("gender")),
        MembershipFilter(HEALTH_FILTER, (attr("allergy"), attr("disease"))),
    ),
    supports_create=False,
)

DOCTORS = EntityProfile(
    kind=EntityKind.DOCTORS,
    search_fields=(attr("name"), attr("specialty"), attr("city")),
    sort_fields={
        SortKey.NAME: _NAME,
        SortKey.RATING: _RATING,
        SortKey.CITY: SortField(attr("city"), ValueKind.TEXT),
    },
    default_sort=(SortKey.NAME, SortDirection.ASC),
    filters=(
        EqualityFilter(CITY_FILTER, attr("city"), strip=True),
        EqualityFilter(SPECIALTY_FILTER, attr("specialty"), strip=True),
    ),
)

CATEGORIES = EntityProfile(
    kind=EntityKind.CATEGORIES,
    search_fields=(attr("name"),),
    sort_fields={SortKey.NAME: _NAME, SortKey.CREATED_AT: _CREATED},
    default_sort=(SortKey.NAME, SortDirection.ASC),
    filters=(_STATUS,),
)

ADVICES = EntityProfile(
    kind=EntityKind.ADVICES,
    search_fields=(attr("title"),),
    sort_fields={
        SortKey.DAY: SortField(effective_start, ValueKind.NUMBER),
        SortKey.TITLE: _TITLE,
        SortKey.CREATED_AT: _CREATED,
        SortKey.VIEWERS: _VIEWERS,
        SortKey.LIKES: _LIKES,
    },
    default_sort=(SortKey.DAY, SortDirection.ASC),
    filters=(_CATEGORY, _STATUS),
    tabs=(
        TabSpec(TAB_REST, "Les restes", outside_day_window),
        TabSpec(TAB_SIX_TO_NINE, "6 - 9 mois (180 - 270 j)", in_day_window),
    ),
    default_tab=TAB_REST,
    content_type="advice",
    supports_status=True,
    schedules_days=True,
)

ARTICLES = EntityProfile(
    kind=EntityKind.ARTICLES,
    search_fields=(attr("title"),),
    sort_fields={
        SortKey.CREATED_AT: _CREATED,
        SortKey.UPDATED_AT: _UPDATED,
        SortKey.SCHEDULED_AT: SortField(attr("scheduled_at"), ValueKind.DATETIME),
        SortKey.TITLE: _TITLE,
        SortKey.VIEWERS: _VIEWERS,
        SortKey.LIKES: _LIKES,
    },
    default_sort=(SortKey.CREATED_AT, SortDirection.DESC),
    filters=(_CATEGORY, _STATUS),
    content_type="article",
    supports_status=True,
)

RECIPES = EntityProfile(
    kind=EntityKind.RECIPES,
    search_fields=(attr("title"), attr("city")),
    sort_fields={
        SortKey.CREATED_AT: _CREATED,
        SortKey.TITLE: _TITLE,
        SortKey.RATING: _RATING,
        SortKey.VIEWERS: _VIEWERS,
        SortKey.LIKES: _LIKES,
    },
    default_sort=(SortKey.CREATED_AT, SortDirection.DESC),
    filters=(_CATEGORY,),
    content_type="recipe",
)

AVATARS = EntityProfile(
    kind=EntityKind.AVATARS,
    search_fields=(),
    sort_fields={SortKey.CREATED_AT: _CREATED},
    default_sort=(SortKey.CREATED_AT, SortDirection.DESC),
    filters=(
        EqualityFilter(TYPE_FILTER, attr("type")),
        EqualityFilter(GENDER_FILTER, attr("gender")),
    ),
)

PROFILES: dict[EntityKind, EntityProfile] = {
    p.kind: p for p in (USERS, BABIES, DOCTORS, CATEGORIES, ADVICES, ARTICLES, RECIPES, AVATARS)
}


def get_profile(kind: EntityKind | str) -> EntityProfile:
    return PROFILES[EntityKind(kind)]
