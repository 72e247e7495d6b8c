"""HTTP-backed fetch and mutation collaborators, one per entity type."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from loguru import logger

from core.errors import ServerError
from core.models import EntityKind
from core.services.interfaces import IEntityGateway
from infrastructure.api_client import ApiClient
from infrastructure.codec import decode_fields, decode_record, encode_changes


@dataclass(frozen=True)
class ResourceSpec:
    """Where an entity type lives on the API and how its payloads are wrapped.

    Attributes:
        kind: Entity type.
        path: Collection path, e.g. "/admin/advices".
        collection_key: Envelope key of the list response.
        item_key: Envelope key of a single-record response.
        status_endpoints: Whether activation uses the dedicated
            `/{id}/activate` and `/{id}/deactivate` routes instead of a PUT.
    """

    kind: EntityKind
    path: str
    collection_key: str
    item_key: str
    status_endpoints: bool = False


RESOURCES: dict[EntityKind, ResourceSpec] = {
    resource.kind: resource
    for resource in (
        ResourceSpec(EntityKind.USERS, "/admin/users", "users", "user"),
        ResourceSpec(EntityKind.BABIES, "/admin/babies", "babies", "baby"),
        ResourceSpec(EntityKind.DOCTORS, "/admin/doctors", "doctors", "doctor"),
        ResourceSpec(EntityKind.CATEGORIES, "/admin/categories", "categories", "category"),
        ResourceSpec(EntityKind.ADVICES, "/admin/advices", "advices", "advice", status_endpoints=True),
        ResourceSpec(EntityKind.ARTICLES, "/admin/articles", "articles", "article"),
        ResourceSpec(EntityKind.RECIPES, "/admin/recipes", "recipes", "recipe"),
        ResourceSpec(EntityKind.AVATARS, "/admin/avatars", "avatars", "avatar"),
    )
}


class HttpEntityGateway(IEntityGateway):
    """`IEntityGateway` over the REST API for one resource."""

    def __init__(self, client: ApiClient, resource: ResourceSpec) -> None:
        self._client = client
        self.resource = resource

    @classmethod
    def for_kind(cls, client: ApiClient, kind: EntityKind) -> HttpEntityGateway:
        return cls(client, RESOURCES[kind])

    def _item_path(self, record_id: str) -> str:
        return f"{self.resource.path}/{record_id}"

    def _unwrap_item(self, data: Any) -> Any:
        if isinstance(data, Mapping):
            return data.get(self.resource.item_key) or data
        return data

    def _unwrap_collection(self, data: Any) -> list[Any]:
        if isinstance(data, list):
            return data
        if isinstance(data, Mapping):
            items = data.get(self.resource.collection_key)
            if isinstance(items, list):
                return items
        return []

    def _decode(self, payload: Any) -> Any:
        if not isinstance(payload, Mapping):
            raise ServerError(None, "Réponse inattendue du serveur.")
        try:
            return decode_record(self.resource.kind, payload)
        except ValueError as e:
            logger.error("Undecodable {} payload: {}", self.resource.kind.value, e)
            raise ServerError(None, "Réponse inattendue du serveur.") from e

    def _decode_changes(self, data: Any) -> dict[str, Any]:
        payload = self._unwrap_item(data)
        if not isinstance(payload, Mapping):
            return {}
        return decode_fields(self.resource.kind, payload)

    def fetch_collection(self, token: str) -> list[Any]:
        data = self._client.get(self.resource.path, token)
        records = []
        for payload in self._unwrap_collection(data):
            if not isinstance(payload, Mapping):
                continue
            try:
                records.append(decode_record(self.resource.kind, payload))
            except ValueError as e:
                logger.warning("Skipped {} payload: {}", self.resource.kind.value, e)
        logger.debug("Decoded {} {}", len(records), self.resource.kind.value)
        return records

    def create(self, token: str, changes: Mapping[str, Any]) -> Any:
        data = self._client.post(self.resource.path, token, json=encode_changes(changes))
        return self._decode(self._unwrap_item(data))

    def update(self, token: str, record_id: str, changes: Mapping[str, Any]) -> dict[str, Any]:
        data = self._client.put(self._item_path(record_id), token, json=encode_changes(changes))
        return self._decode_changes(data)

    def remove(self, token: str, record_id: str) -> None:
        self._client.delete(self._item_path(record_id), token)

    def set_status(self, token: str, record_id: str, active: bool) -> dict[str, Any]:
        if self.resource.status_endpoints:
            action = "activate" if active else "deactivate"
            data = self._client.patch(f"{self._item_path(record_id)}/{action}", token)
        else:
            data = self._client.put(self._item_path(record_id), token, json={"isActive": active})
        changes = self._decode_changes(data)
        # Empty or partial responses still carry the requested flag.
        changes.setdefault("is_active", active)
        return changes
