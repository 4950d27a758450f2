"""
Identity, provenance and voiding for persisted workflow records.

Appointments are referenced by ``uuid`` everywhere outside the database;
``id`` is the storage key and stays ``None`` until the first save.
"""

from abc import ABC
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Generic, TypeVar
from uuid import uuid4

TId = TypeVar("TId")


def generate_uuid_str() -> str:
    """Fresh external identifier."""
    return str(uuid4())


@dataclass
class Entity(ABC, Generic[TId]):
    """
    Base class for all domain entities.

    Besides the storage identifier (``id``) every entity carries a stable
    external identifier (``uuid``) that survives persistence round-trips and
    is what collaborators use to reference it.

    Type Parameters:
        TId: Type of storage identifier (int, str, UUID)
    """

    id: TId | None = field(default=None)
    uuid: str = field(default_factory=generate_uuid_str)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return False
        return self.uuid == other.uuid

    def __hash__(self) -> int:
        return hash(self.uuid)

    def is_new(self) -> bool:
        """True until the record has been stored."""
        return self.id is None


@dataclass(eq=False)
class AuditableEntity(Entity[TId], Generic[TId]):
    """
    Entity with provenance metadata.

    Tracks who created and last changed the entity, and when.
    """

    created_at: datetime | None = field(default=None)
    created_by: str | None = field(default=None)
    updated_at: datetime | None = field(default=None)
    updated_by: str | None = field(default=None)

    def set_created_by(self, user_id: str | None) -> None:
        """Stamp creation metadata if the entity has none yet."""
        if self.created_at is None:
            self.created_at = datetime.now(UTC)
            self.created_by = user_id

    def set_updated_by(self, user_id: str | None) -> None:
        """Record who changed the entity last."""
        self.updated_by = user_id
        self.touch()

    def touch(self) -> None:
        self.updated_at = datetime.now(UTC)

    def clear_provenance(self) -> None:
        """Drop identity and provenance so the entity is treated as brand new."""
        self.id = None
        self.uuid = generate_uuid_str()
        self.created_at = None
        self.created_by = None
        self.updated_at = None
        self.updated_by = None


@dataclass(eq=False)
class VoidableEntity(AuditableEntity[TId], Generic[TId]):
    """
    Entity that is never hard-deleted.

    Voided records stay in storage and are hidden from default queries.
    """

    voided: bool = field(default=False)
    voided_at: datetime | None = field(default=None)
    void_reason: str | None = field(default=None)

    def void(self, reason: str | None = None) -> None:
        self.voided = True
        self.voided_at = datetime.now(UTC)
        self.void_reason = reason
        self.touch()

    def unvoid(self) -> None:
        self.voided = False
        self.voided_at = None
        self.void_reason = None
        self.touch()
