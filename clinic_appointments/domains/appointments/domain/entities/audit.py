"""
Appointment audit record.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from clinic_appointments.core.domain import generate_uuid_str

from ..value_objects.appointment_status import AppointmentStatus


@dataclass(frozen=True)
class AppointmentAudit:
    """
    Immutable snapshot of an appointment status transition or field change.

    ``notes`` holds either a JSON snapshot of the appointment or a
    human-readable description of what changed.
    """

    appointment_uuid: str
    status: AppointmentStatus
    notes: str | None = None
    actor: str | None = None
    recorded_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    uuid: str = field(default_factory=generate_uuid_str)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "uuid": self.uuid,
            "appointment_uuid": self.appointment_uuid,
            "status": self.status.value,
            "notes": self.notes,
            "actor": self.actor,
            "recorded_at": self.recorded_at.isoformat(),
        }
