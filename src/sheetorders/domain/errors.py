"""Exceptions raised by the ingestion domain and its record store ports."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class IngestError(RuntimeError):
    """Base class for failures that abort processing of a row."""


class ConnectionNotFoundError(IngestError):
    def __init__(self, connection_id: UUID | str) -> None:
        super().__init__(f"Platform connection {connection_id} not found")
        self.connection_id = connection_id


class StoreNotFoundError(IngestError):
    def __init__(self, organization_id: UUID) -> None:
        super().__init__(f"No active store found for organization {organization_id}")
        self.organization_id = organization_id


class RecordStoreError(IngestError):
    """Raised by repositories when the backing store fails."""


class DuplicateEntityError(RecordStoreError):
    """A uniqueness constraint rejected a write; another writer got there first."""


__all__ = [
    "ConnectionNotFoundError",
    "DuplicateEntityError",
    "IngestError",
    "RecordStoreError",
    "StoreNotFoundError",
]
