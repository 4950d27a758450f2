"""
Conflict value objects.

A conflict is computed on demand and never persisted.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from clinic_appointments.core.domain import StatusEnum

if TYPE_CHECKING:
    from ..entities.appointment import Appointment


class AppointmentConflictType(StatusEnum):
    """Why a set of appointments conflict."""

    PATIENT_DOUBLE_BOOKING = "PATIENT_DOUBLE_BOOKING"
    PROVIDER_DOUBLE_BOOKING = "PROVIDER_DOUBLE_BOOKING"


@dataclass
class AppointmentConflict:
    """Conflict kind plus the appointments found to conflict under it."""

    conflict_type: AppointmentConflictType
    appointments: list["Appointment"] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "type": self.conflict_type.value,
            "appointments": [a.uuid for a in self.appointments],
        }
