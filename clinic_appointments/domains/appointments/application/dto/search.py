"""
Structured appointment search criteria.
"""

from dataclasses import dataclass, field
from datetime import datetime

from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus


@dataclass
class AppointmentSearchRequest:
    """Search by date window plus optional filters."""

    start_date: datetime | None = None
    end_date: datetime | None = None
    patient_uuid: str | None = None
    provider_uuid: str | None = None
    service_uuid: str | None = None
    location_uuid: str | None = None
    statuses: list[AppointmentStatus] = field(default_factory=list)
    include_voided: bool = False
    limit: int | None = None

    def is_searchable(self) -> bool:
        """A search without a start date is not executed."""
        return self.start_date is not None
