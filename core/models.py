"""Core domain models for back-office records and list query state."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
import math
from typing import Union

ALL = "all"


class EntityKind(str, Enum):
    """Entity collections managed by the console."""

    USERS = "users"
    BABIES = "babies"
    DOCTORS = "doctors"
    CATEGORIES = "categories"
    ADVICES = "advices"
    ARTICLES = "articles"
    RECIPES = "recipes"
    AVATARS = "avatars"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortKey(str, Enum):
    """Sortable columns; values match the option strings used in settings."""

    TITLE = "title"
    NAME = "name"
    OWNER_NAME = "userId.name"
    CITY = "city"
    RATING = "rating"
    CREATED_AT = "createdAt"
    UPDATED_AT = "updatedAt"
    SCHEDULED_AT = "scheduledAt"
    VIEWERS = "viewers"
    LIKES = "likes"
    DAY = "day"


@dataclass
class AgeRange:
    min_day: int
    max_day: int


@dataclass
class Category:
    id: str
    name: str = ""
    content_types: list[str] = field(default_factory=list)
    age_ranges: list[AgeRange] = field(default_factory=list)
    is_active: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class UnresolvedCategory:
    """Category reference holding only the id."""

    id: str

    @property
    def name(self) -> str | None:
        return None


@dataclass(frozen=True)
class ResolvedCategory:
    """Category reference holding the full populated category."""

    category: Category

    @property
    def id(self) -> str:
        return self.category.id

    @property
    def name(self) -> str | None:
        return self.category.name


CategoryRef = Union[UnresolvedCategory, ResolvedCategory]


@dataclass
class PopulatedUser:
    id: str
    name: str = ""
    email: str = ""
    phone: str = ""


@dataclass
class Baby:
    id: str
    name: str = ""
    gender: str | None = None
    birthday: datetime | None = None
    disease: str | None = None
    allergy: str | None = None
    autorisation: bool | None = None
    head_size: float | None = None
    height: float | None = None
    weight: float | None = None
    last_head_size_update: datetime | None = None
    user: PopulatedUser | None = None
    created_at: datetime | None = None


@dataclass
class User:
    id: str
    name: str = ""
    lastname: str = ""
    email: str = ""
    phone: str = ""
    avatar: str | None = None
    gender: str | None = None
    birthday: datetime | None = None
    role: str | None = None
    created_at: datetime | None = None
    babies: list[Baby] = field(default_factory=list)


@dataclass
class Doctor:
    id: str
    name: str = ""
    specialty: str = ""
    rating: float | None = None
    city: str = ""
    image_url: str | None = None
    description: str | None = None
    work_time: str | None = None
    phone: str | None = None
    google_map_link: str | None = None
    app_store_link: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Advice:
    id: str
    title: str = ""
    description: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    image_url: list[str] = field(default_factory=list)
    category: CategoryRef | None = None
    day: int | None = None
    min_day: int | None = None
    max_day: int | None = None
    likes: list[str] = field(default_factory=list)
    dislikes: list[str] = field(default_factory=list)
    viewers: list[str] = field(default_factory=list)
    is_active: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Article:
    id: str
    title: str = ""
    description: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    image_url: list[str] = field(default_factory=list)
    category: CategoryRef | None = None
    likes: list[str] = field(default_factory=list)
    dislikes: list[str] = field(default_factory=list)
    viewers: list[str] = field(default_factory=list)
    is_active: bool | None = None
    scheduled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Ingredient:
    name: str
    quantity: float = 0
    unit: str = ""


@dataclass
class Recipe:
    id: str
    title: str = ""
    description: str = ""
    ingredients: list[Ingredient] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    image_url: str = ""
    video_url: str | None = None
    category: CategoryRef | None = None
    city: str | None = None
    sources: list[str] = field(default_factory=list)
    rating: float | None = None
    min_day: int | None = None
    max_day: int | None = None
    likes: list[str] = field(default_factory=list)
    dislikes: list[str] = field(default_factory=list)
    viewers: list[str] = field(default_factory=list)
    is_active: bool | None = None
    scheduled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Avatar:
    id: str
    url: str = ""
    type: str = ""
    gender: str = ""
    created_at: datetime | None = None


Record = Union[User, Baby, Doctor, Category, Advice, Article, Recipe, Avatar]

RECORD_TYPES: dict[EntityKind, type] = {
    EntityKind.USERS: User,
    EntityKind.BABIES: Baby,
    EntityKind.DOCTORS: Doctor,
    EntityKind.CATEGORIES: Category,
    EntityKind.ADVICES: Advice,
    EntityKind.ARTICLES: Article,
    EntityKind.RECIPES: Recipe,
    EntityKind.AVATARS: Avatar,
}


def effective_active(record: object) -> bool:
    """Activity flag with legacy records (no flag stored) read as active."""
    value = getattr(record, "is_active", None)
    return True if value is None else bool(value)


@dataclass(frozen=True)
class QueryState:
    """Operator selection for one list page.

    Changing the search term, a filter or the tab returns a state back on
    page 1; changing the sort keeps the current page.
    """

    search_term: str = ""
    filters: tuple[tuple[str, str], ...] = ()
    sort_key: SortKey | None = None
    sort_direction: SortDirection = SortDirection.ASC
    active_tab: str | None = None
    page: int = 1

    def filter_value(self, name: str) -> str:
        for key, value in self.filters:
            if key == name:
                return value
        return ALL

    def with_search_term(self, term: str) -> QueryState:
        return replace(self, search_term=term, page=1)

    def with_filter(self, name: str, value: str) -> QueryState:
        kept = tuple((k, v) for k, v in self.filters if k != name)
        if value != ALL:
            kept = kept + ((name, value),)
        return replace(self, filters=kept, page=1)

    def with_tab(self, tab: str | None) -> QueryState:
        return replace(self, active_tab=tab, page=1)

    def with_sort(self, key: SortKey | None, direction: SortDirection) -> QueryState:
        return replace(self, sort_key=key, sort_direction=direction)

    def with_page(self, page: int) -> QueryState:
        return replace(self, page=max(1, int(page)))


@dataclass(frozen=True)
class VisibleRows:
    """One derived page of a collection plus the filtered total."""

    rows: tuple[Record, ...]
    total_count: int
    page: int = 1
    page_size: int = 10

    @property
    def page_count(self) -> int:
        """Number of pages, never less than 1 so an empty list reads as page 1 of 1."""
        if self.total_count <= 0:
            return 1
        return math.ceil(self.total_count / self.page_size)

    @property
    def first_index(self) -> int:
        """1-based position of the first row shown, 0 when nothing is shown."""
        if not self.rows:
            return 0
        return (self.page - 1) * self.page_size + 1

    @property
    def last_index(self) -> int:
        if not self.rows:
            return 0
        return self.first_index + len(self.rows) - 1
