"""Core service interfaces and shared data structures.

This module defines the collaborator contract the list pages call for
fetches and mutations, and the outcome records the reconciler folds back
into a collection.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MutationKind(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    STATUS = "status"


@dataclass
class MutationOutcome:
    """Result of a successful mutation call.

    Attributes:
        kind: Which mutation ran.
        record_id: Target record id (the new id for creates).
        record: Full record returned by a create.
        changes: Decoded fields returned by an update or status change.
            Fields absent here are kept from the prior record.
    """

    kind: MutationKind
    record_id: str
    record: Any | None = None
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class Notice:
    """Dismissible message shown after an action.

    Attributes:
        message: User-facing text.
        level: "success" or "error".
    """

    message: str
    level: str = "success"


class IEntityGateway:
    """Interface for the fetch and mutation collaborators of one entity type.

    Every method may raise `SessionExpired` or `ServerError`.
    """

    def fetch_collection(self, token: str) -> list[Any]:
        """Return every record of the entity type."""
        raise NotImplementedError

    def create(self, token: str, changes: Mapping[str, Any]) -> Any:
        """Create a record from attribute values and return it."""
        raise NotImplementedError

    def update(self, token: str, record_id: str, changes: Mapping[str, Any]) -> dict[str, Any]:
        """Update a record and return the decoded fields of the response."""
        raise NotImplementedError

    def remove(self, token: str, record_id: str) -> None:
        """Delete a record."""
        raise NotImplementedError

    def set_status(self, token: str, record_id: str, active: bool) -> dict[str, Any]:
        """Activate or deactivate a record and return the decoded response fields."""
        raise NotImplementedError
