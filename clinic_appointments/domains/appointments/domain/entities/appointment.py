"""
Appointment Entity for the clinical appointment workflow

Represents "who is seeing whom, when", together with provider
assignments and the append-only audit trail.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from clinic_appointments.core.domain import (
    BusinessRuleViolationException,
    VoidableEntity,
)

from ..value_objects.appointment_status import (
    AppointmentKind,
    AppointmentStatus,
    PatientRef,
    ProviderRef,
    ProviderResponse,
    ServiceRef,
)
from .audit import AppointmentAudit


@dataclass
class AppointmentProvider:
    """A provider assigned to an appointment, with their response."""

    provider: ProviderRef
    response: ProviderResponse = ProviderResponse.AWAITING
    comments: str | None = None

    @property
    def person_uuid(self) -> str:
        return self.provider.person_uuid

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "provider_uuid": self.provider.uuid,
            "person_uuid": self.provider.person_uuid,
            "name": self.provider.name,
            "response": self.response.value,
            "comments": self.comments,
        }


@dataclass(eq=False)
class Appointment(VoidableEntity[int]):
    """
    Appointment aggregate root.

    Example:
        ```python
        appointment = Appointment(
            patient=PatientRef(uuid="patient-1"),
            service=ServiceRef(uuid="service-1", name="Cardiology"),
            start_datetime=datetime(2026, 1, 15, 10, 0, tzinfo=UTC),
            end_datetime=datetime(2026, 1, 15, 10, 30, tzinfo=UTC),
            status=AppointmentStatus.REQUESTED,
        )
        appointment.add_provider(ProviderRef(uuid="prov-1", person_uuid="person-1"))
        ```
    """

    appointment_number: str | None = None

    # References
    patient: PatientRef | None = None
    service: ServiceRef | None = None
    service_type: ServiceRef | None = None
    location_uuid: str | None = None
    providers: list[AppointmentProvider] = field(default_factory=list)

    # Scheduling
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    appointment_kind: AppointmentKind = AppointmentKind.SCHEDULED

    # Teleconsultation
    teleconsultation: bool = False
    tele_health_video_link: str | None = None
    email_sent: bool = False

    comments: str | None = None

    _audits: list[AppointmentAudit] = field(default_factory=list, repr=False)

    # Providers

    def add_provider(
        self,
        provider: ProviderRef,
        response: ProviderResponse = ProviderResponse.AWAITING,
    ) -> AppointmentProvider:
        """Assign a provider; at most one entry per provider."""
        if self.find_provider(provider.uuid) is not None:
            raise BusinessRuleViolationException(
                rule="unique_provider_per_appointment",
                message=f"Provider {provider.uuid} is already assigned to appointment {self.uuid}",
            )
        entry = AppointmentProvider(provider=provider, response=response)
        self.providers.append(entry)
        return entry

    def find_provider(self, provider_uuid: str) -> AppointmentProvider | None:
        """Find the provider entry for a provider uuid."""
        for entry in self.providers:
            if entry.provider.uuid == provider_uuid:
                return entry
        return None

    def providers_with_response(self, response: ProviderResponse) -> list[AppointmentProvider]:
        return [p for p in self.providers if p.response == response]

    def is_unassigned(self) -> bool:
        """True when no provider has accepted or is awaiting."""
        return not any(p.response.is_assigned() for p in self.providers)

    def has_provider_person(self, person_uuid: str | None) -> bool:
        if person_uuid is None:
            return False
        return any(p.person_uuid == person_uuid for p in self.providers)

    # Audit trail

    @property
    def audits(self) -> tuple[AppointmentAudit, ...]:
        """Audit records in the order they were appended."""
        return tuple(self._audits)

    def add_audit(self, audit: AppointmentAudit) -> None:
        """Append an audit record. Records are never removed or replaced."""
        if audit.appointment_uuid != self.uuid:
            raise BusinessRuleViolationException(
                rule="audit_belongs_to_appointment",
                message=f"Audit for {audit.appointment_uuid} cannot be attached to {self.uuid}",
            )
        self._audits.append(audit)

    def clear_provenance(self) -> None:
        """Treat the appointment as brand new: new identity, no history."""
        super().clear_provenance()
        self._audits = []
        self.email_sent = False

    # Queries

    def is_service_or_service_type_voided(self) -> bool:
        return bool((self.service and self.service.voided) or (self.service_type and self.service_type.voided))

    def is_visible(self) -> bool:
        """Check if appointment belongs in active query results."""
        return not self.voided and not self.is_service_or_service_type_voided()

    def starts_before(self, moment: datetime) -> bool:
        if self.start_datetime is None:
            return False
        return self.start_datetime < moment

    def overlaps_with(self, other: "Appointment") -> bool:
        """Check if the two appointments' time windows overlap."""
        if None in (self.start_datetime, self.end_datetime, other.start_datetime, other.end_datetime):
            return False
        return not (self.end_datetime <= other.start_datetime or self.start_datetime >= other.end_datetime)

    # Teleconsultation

    def setup_teleconsultation(self, video_link: str) -> None:
        self.teleconsultation = True
        self.tele_health_video_link = video_link

    # Serialization

    def to_summary_dict(self) -> dict[str, Any]:
        """Convert to summary dictionary."""
        return {
            "uuid": self.uuid,
            "appointment_number": self.appointment_number,
            "patient_uuid": self.patient.uuid if self.patient else None,
            "service_uuid": self.service.uuid if self.service else None,
            "start_datetime": self.start_datetime.isoformat() if self.start_datetime else None,
            "end_datetime": self.end_datetime.isoformat() if self.end_datetime else None,
            "status": self.status.value,
            "appointment_kind": self.appointment_kind.value,
            "voided": self.voided,
        }

    def __repr__(self) -> str:
        return f"Appointment(uuid={self.uuid!r}, status={self.status.value!r}, start={self.start_datetime!r})"
