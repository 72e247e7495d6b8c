"""
UI/view constants centralized for reuse across view modules.

Column order and headers per entity list, plus item data roles.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from PySide6.QtCore import Qt

from app.viewmodels.record_vm import RecordVM
from core.models import EntityKind


@dataclass(frozen=True)
class Column:
    header: str
    text: Callable[[RecordVM], str]


def _attr(name: str) -> Callable[[RecordVM], str]:
    return lambda vm: vm.text(name)


_TITLE = Column("Titre", lambda vm: vm.title)
_CATEGORY = Column("Catégorie", lambda vm: vm.category_label)
_STATUS = Column("Statut", lambda vm: vm.status_label)
_STATS = Column("Statistiques", lambda vm: vm.stats_label)
_CREATED = Column("Créé le", lambda vm: vm.created_label)

COLUMNS: dict[EntityKind, list[Column]] = {
    EntityKind.USERS: [
        Column("Nom", lambda vm: vm.title),
        Column("Email", _attr("email")),
        Column("Téléphone", _attr("phone")),
        Column("Genre", _attr("gender")),
        _CREATED,
    ],
    EntityKind.BABIES: [
        Column("Nom", _attr("name")),
        Column("Parent", lambda vm: vm.owner_label),
        Column("Genre", _attr("gender")),
        Column("Autorisation", _attr("autorisation")),
        Column("Allergie", _attr("allergy")),
        Column("Maladie", _attr("disease")),
        _CREATED,
    ],
    EntityKind.DOCTORS: [
        Column("Nom", _attr("name")),
        Column("Spécialité", _attr("specialty")),
        Column("Ville", _attr("city")),
        Column("Note", _attr("rating")),
    ],
    EntityKind.CATEGORIES: [
        Column("Nom", _attr("name")),
        Column("Types de contenu", lambda vm: ", ".join(vm.record.content_types) or "-"),
        _STATUS,
        _CREATED,
    ],
    EntityKind.ADVICES: [
        _TITLE,
        _CATEGORY,
        Column("Ciblage", lambda vm: vm.targeting_label),
        _STATS,
        _STATUS,
    ],
    EntityKind.ARTICLES: [
        _TITLE,
        _CATEGORY,
        Column("Planifié le", lambda vm: vm.scheduled_label),
        _STATS,
        _STATUS,
    ],
    EntityKind.RECIPES: [
        _TITLE,
        _CATEGORY,
        Column("Ville", _attr("city")),
        Column("Note", _attr("rating")),
        _STATS,
        _STATUS,
    ],
    EntityKind.AVATARS: [
        Column("URL", _attr("url")),
        Column("Type", _attr("type")),
        Column("Genre", _attr("gender")),
        _CREATED,
    ],
}


# Data roles
ID_ROLE: int = Qt.UserRole  # record id on the first item of a row
ACTIVE_ROLE: int = Qt.UserRole + 1  # effective active flag


def headers(kind: EntityKind) -> list[str]:
    return [c.header for c in COLUMNS[kind]]
