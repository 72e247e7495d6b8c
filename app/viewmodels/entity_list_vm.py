"""ViewModel for one entity list page: loading, query state and mutations."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from loguru import logger

from app.viewmodels.record_vm import RecordVM
from app.viewmodels.tab_vm import TabVM
from core.errors import SessionExpired, ValidationError, normalize_error
from core.models import ALL, Category, EntityKind, QueryState, SortDirection, SortKey, VisibleRows
from core.profiles import (
    AUTHORIZATION_FILTER,
    CATEGORY_FILTER,
    CITY_FILTER,
    GENDER_FILTER,
    HEALTH_FILTER,
    SPECIALTY_FILTER,
    STATUS_FILTER,
    TYPE_FILTER,
    EntityProfile,
    parse_sort_option,
)
from core.services.interfaces import IEntityGateway, MutationKind, MutationOutcome, Notice
from core.services.options import (
    categories_in_use,
    category_options,
    city_options,
    health_issue_options,
    ingredient_options,
    source_options,
    specialty_options,
)
from core.services.reconciler import MutationReconciler
from core.services.scheduling import ActivationDraft, utc_now
from core.services.slot_allocator import DaySelection, SlotAllocator
from core.services.view_reducer import DEFAULT_PAGE_SIZE, ViewReducer, clamp_page

Option = tuple[str, str]

# (noun, feminine) used to build notices.
_NOUNS: dict[EntityKind, tuple[str, bool]] = {
    EntityKind.USERS: ("Utilisateur", False),
    EntityKind.BABIES: ("Bébé", False),
    EntityKind.DOCTORS: ("Docteur", False),
    EntityKind.CATEGORIES: ("Catégorie", True),
    EntityKind.ADVICES: ("Conseil", False),
    EntityKind.ARTICLES: ("Article", False),
    EntityKind.RECIPES: ("Recette", True),
    EntityKind.AVATARS: ("Avatar", False),
}

_FIXED_OPTIONS: dict[tuple[EntityKind | None, str], list[Option]] = {
    (None, STATUS_FILTER): [(ALL, "Tous les statuts"), ("active", "Actif"), ("inactive", "Inactif")],
    (EntityKind.USERS, GENDER_FILTER): [(ALL, "Tous"), ("Male", "Homme"), ("Female", "Femme"), ("Other", "Autre")],
    (EntityKind.BABIES, GENDER_FILTER): [(ALL, "Tous"), ("Male", "Garçon"), ("Female", "Fille")],
    (EntityKind.BABIES, AUTHORIZATION_FILTER): [(ALL, "Toutes"), ("true", "Oui"), ("false", "Non")],
    (EntityKind.AVATARS, GENDER_FILTER): [(ALL, "Tous"), ("male", "Masculin"), ("female", "Féminin")],
    (EntityKind.AVATARS, TYPE_FILTER): [(ALL, "Tous"), ("parent", "Parent"), ("baby", "Bébé")],
}

_DERIVED_OPTIONS: dict[str, tuple[str, Callable[[list[Any]], list[str]]]] = {
    CITY_FILTER: ("Toutes les villes", city_options),
    SPECIALTY_FILTER: ("Toutes les spécialités", specialty_options),
    HEALTH_FILTER: ("Toutes", health_issue_options),
}

# Edit-form suggestions: field -> (entity kinds carrying it, derivation).
_SUGGESTIONS: dict[str, tuple[frozenset[EntityKind], Callable[[list[Any]], list[str]]]] = {
    "sources": (frozenset({EntityKind.ADVICES, EntityKind.ARTICLES, EntityKind.RECIPES}), source_options),
    "ingredients": (frozenset({EntityKind.RECIPES}), ingredient_options),
}


def _message(kind: EntityKind, verb: str) -> str:
    noun, feminine = _NOUNS[kind]
    if verb == "mis à jour":
        verb = "mise à jour" if feminine else verb
    elif feminine and verb.endswith("é"):
        verb += "e"
    return f"{noun} {verb}"


class EntityListVM:
    """List page view-model.

    Owns one collection and the operator's `QueryState`, calls the gateway
    for fetches and mutations, folds confirmed results back with the
    reconciler and routes every failure: session expiry to `on_logout`,
    validation errors inline, everything else to a dismissible notice.
    """

    def __init__(
        self,
        profile: EntityProfile,
        gateway: IEntityGateway,
        token: str,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        default_sort: tuple[SortKey, SortDirection] | None = None,
        on_logout: Callable[[], None] | None = None,
        categories_gateway: IEntityGateway | None = None,
        slot_allocator: SlotAllocator | None = None,
        reconciler: MutationReconciler | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Create an EntityListVM.

        Args:
            profile: Entity profile of the page.
            gateway: Fetch and mutation collaborator for the entity type.
            token: Bearer token of the signed-in operator.
            page_size: Rows per page.
            default_sort: Initial sort, defaults to the profile's.
            on_logout: Called once the session is found expired.
            categories_gateway: Loads categories for pages with a content type.
            slot_allocator: Day allocator for advice scheduling.
            reconciler: Folds mutation outcomes into the collection.
            clock: Current time source for scheduled activation.
        """
        self.profile = profile
        self._gateway = gateway
        self._token = token
        self._on_logout = on_logout
        self._categories_gateway = categories_gateway
        self._reducer = ViewReducer(profile, page_size)
        self._reconciler = reconciler or MutationReconciler()
        self._clock = clock
        self.slot_allocator = slot_allocator or SlotAllocator()

        sort_key, direction = default_sort or profile.default_sort
        self.query = QueryState(sort_key=sort_key, sort_direction=direction, active_tab=profile.default_tab)
        self.collection: list[Any] = []
        self.categories: list[Category] = []
        self.notices: list[Notice] = []
        self.error: str | None = None
        self.form_error: str | None = None
        self.loading = False
        self.logged_out = False

        self._version = 0
        self._cache: tuple[tuple[int, QueryState], VisibleRows] | None = None

    @property
    def kind(self) -> EntityKind:
        return self.profile.kind

    @property
    def page_size(self) -> int:
        return self._reducer.page_size

    # Loading

    def load(self) -> bool:
        """Fetch the collection (and categories where relevant).

        Returns:
            True on success. On failure the page error is set and the prior
            collection is kept.
        """
        self.loading = True
        self.error = None
        try:
            records = self._gateway.fetch_collection(self._token)
            if self.profile.content_type and self._categories_gateway is not None:
                self.categories = list(self._categories_gateway.fetch_collection(self._token))
                self._reconciler.set_categories(self.categories)
        except Exception as exc:  # noqa: BLE001
            self._route_error(exc, page=True)
            return False
        finally:
            self.loading = False
        self._set_collection(records)
        logger.info("Loaded {} {}", len(records), self.kind.value)
        return True

    def _set_collection(self, records: list[Any]) -> None:
        self.collection = records
        self._version += 1
        total = len(self._reducer.filter(self.collection, self.query))
        self.query = clamp_page(self.query, total, self.page_size)

    # Derived state

    @property
    def visible(self) -> VisibleRows:
        """Current page; recomputed only when the collection or query changed."""
        key = (self._version, self.query)
        if self._cache is None or self._cache[0] != key:
            self._cache = (key, self._reducer.derive(self.collection, self.query))
        return self._cache[1]

    @property
    def rows(self) -> list[RecordVM]:
        return [RecordVM(r) for r in self.visible.rows]

    @property
    def summary(self) -> str:
        view = self.visible
        if view.total_count == 0:
            return "Aucun résultat trouvé."
        return f"Montrant {view.first_index} à {view.last_index} sur {view.total_count} résultats"

    def tabs(self) -> list[TabVM]:
        counts = self._reducer.tab_counts(self.collection, self.query)
        return [
            TabVM(id=t.id, label=t.label, count=counts.get(t.id, 0), is_active=t.id == self.query.active_tab)
            for t in self.profile.tabs
        ]

    def category_choices(self) -> list[Option]:
        """Categories selectable in the edit form for this page's content type."""
        if not self.profile.content_type:
            return []
        return category_options(self.categories, self.profile.content_type)

    def suggestions(self, field_name: str) -> list[str]:
        """Values already used in the collection, offered while editing `field_name`.

        Raises:
            KeyError: if `field_name` has no suggestions.
        """
        kinds, derive = _SUGGESTIONS[field_name]
        if self.kind not in kinds:
            return []
        return derive(self.collection)

    def options(self, filter_name: str) -> list[Option]:
        """(value, label) pairs for a filter dropdown, "all" first.

        Raises:
            KeyError: if the page has no such filter.
        """
        if filter_name not in self.profile.filter_names:
            raise KeyError(filter_name)
        fixed = _FIXED_OPTIONS.get((self.kind, filter_name)) or _FIXED_OPTIONS.get((None, filter_name))
        if fixed is not None:
            return list(fixed)
        if filter_name == CATEGORY_FILTER:
            choices = self.category_choices() if self.categories else categories_in_use(self.collection)
            return [(ALL, "Toutes les catégories"), *choices]
        label, derive = _DERIVED_OPTIONS[filter_name]
        return [(ALL, label), *((v, v) for v in derive(self.collection))]

    # Query changes

    def set_search_term(self, term: str) -> None:
        self.query = self.query.with_search_term(term)

    def set_filter(self, name: str, value: str) -> None:
        if name not in self.profile.filter_names:
            raise KeyError(name)
        self.query = self.query.with_filter(name, value)

    def set_sort(self, sort_key: SortKey, direction: SortDirection) -> None:
        if not self.profile.supports_sort(sort_key):
            logger.warning("{} cannot be sorted by {}", self.kind.value, sort_key.value)
            return
        self.query = self.query.with_sort(sort_key, direction)

    def set_sort_option(self, option: str) -> None:
        """Apply a "<key>-<direction>" option string."""
        self.set_sort(*parse_sort_option(option))

    def set_tab(self, tab_id: str) -> None:
        if self.profile.tab(tab_id) is None:
            raise KeyError(tab_id)
        self.query = self.query.with_tab(tab_id)

    def set_page(self, page: int) -> None:
        total = self.visible.total_count
        self.query = clamp_page(self.query.with_page(page), total, self.page_size)

    def next_page(self) -> None:
        self.set_page(self.query.page + 1)

    def prev_page(self) -> None:
        self.set_page(self.query.page - 1)

    # Mutations

    def find(self, record_id: str) -> Any | None:
        for record in self.collection:
            if record.id == record_id:
                return record
        return None

    def save(
        self,
        record_id: str | None,
        changes: Mapping[str, Any],
        selection: DaySelection | None = None,
        draft: ActivationDraft | None = None,
    ) -> bool:
        """Create (`record_id` None) or update a record.

        Args:
            record_id: Record to update, or None to create one.
            changes: Attribute values from the edit form.
            selection: Day targeting for advices; validated against the
                collection before any call is made.
            draft: Activation flag and schedule for articles and recipes.

        Returns:
            True once the collection reflects the saved record.
        """
        self.form_error = None
        try:
            payload = dict(changes)
            if selection is not None and self.profile.schedules_days:
                if record_id is not None and selection.record_id != record_id:
                    selection = replace(selection, record_id=record_id)
                payload.update(self.slot_allocator.commit(selection, self.collection))
            if draft is not None:
                payload.update(draft.to_changes(self._clock()))
            if record_id is None:
                if not self.profile.supports_create:
                    raise ValidationError("La création n'est pas disponible pour cette liste.")
                record = self._gateway.create(self._token, payload)
                outcome = MutationOutcome(MutationKind.CREATE, record.id, record=record)
                verb = "ajouté"
            else:
                returned = self._gateway.update(self._token, record_id, payload)
                outcome = MutationOutcome(MutationKind.UPDATE, record_id, changes=returned or payload)
                verb = "mis à jour"
        except Exception as exc:  # noqa: BLE001
            self._route_error(exc, inline=True)
            return False
        self._apply(outcome)
        self._notify(f"{_message(self.kind, verb)} avec succès.")
        return True

    def delete(self, record_id: str) -> bool:
        try:
            self._gateway.remove(self._token, record_id)
        except Exception as exc:  # noqa: BLE001
            self._route_error(exc)
            return False
        self._apply(MutationOutcome(MutationKind.DELETE, record_id))
        self._notify(f"{_message(self.kind, 'supprimé')} avec succès.")
        return True

    def toggle_status(self, record_id: str) -> bool:
        """Flip the effective active flag of a record."""
        record = self.find(record_id)
        if record is None:
            logger.warning("Status toggle for unknown record {}", record_id)
            return False
        active = not RecordVM(record).is_active
        try:
            returned = self._gateway.set_status(self._token, record_id, active)
        except Exception as exc:  # noqa: BLE001
            self._route_error(exc)
            return False
        self._apply(MutationOutcome(MutationKind.STATUS, record_id, changes=returned))
        self._notify(f"{_message(self.kind, 'activé' if active else 'désactivé')}.")
        return True

    def _apply(self, outcome: MutationOutcome) -> None:
        self._set_collection(self._reconciler.apply(self.collection, outcome))
        logger.info("{} {} {}", self.kind.value, outcome.kind.value, outcome.record_id)

    # Notices and errors

    def _notify(self, message: str, level: str = "success") -> None:
        self.notices.append(Notice(message, level))

    def dismiss_notice(self, notice: Notice | None = None) -> None:
        """Drop `notice`, or the oldest one."""
        if not self.notices:
            return
        if notice is None:
            self.notices.pop(0)
        elif notice in self.notices:
            self.notices.remove(notice)

    def _route_error(self, exc: BaseException, inline: bool = False, page: bool = False) -> None:
        """Send a failure where the operator will see it.

        Args:
            exc: The failure.
            inline: Show validation errors on the edit form.
            page: Show the error in place of the list (load failures).
        """
        err = normalize_error(exc)
        if err is not exc:
            logger.exception("Unexpected failure on {}", self.kind.value)
        if isinstance(err, SessionExpired):
            logger.warning("Session expired on {}", self.kind.value)
            self.logged_out = True
            if self._on_logout is not None:
                self._on_logout()
            return
        if page:
            self.error = err.message
        elif isinstance(err, ValidationError) and inline:
            self.form_error = err.message
        else:
            self._notify(err.message, "error")
