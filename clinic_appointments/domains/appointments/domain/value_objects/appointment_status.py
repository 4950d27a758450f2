"""
Appointment Domain Value Objects

Status enums and reference value objects for the appointment workflow.
"""

from dataclasses import dataclass

from clinic_appointments.core.domain import StatusEnum, ValueObject


class AppointmentStatus(StatusEnum):
    """
    Appointment lifecycle states.

    Which transitions are legal is not encoded here: it is configured on
    ``StatusTransitionPolicy`` so the set of states stays open.
    """

    REQUESTED = "Requested"
    SCHEDULED = "Scheduled"
    CHECKED_IN = "CheckedIn"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    MISSED = "Missed"
    CHECKED_OUT = "CheckedOut"

    def is_terminal(self) -> bool:
        """Check if this is a terminal state."""
        return self in TERMINAL_STATUSES

    def is_active(self) -> bool:
        """Check if appointment is still pending attendance."""
        return self in (AppointmentStatus.REQUESTED, AppointmentStatus.SCHEDULED, AppointmentStatus.CHECKED_IN)


TERMINAL_STATUSES = frozenset(
    {
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.MISSED,
        AppointmentStatus.CHECKED_OUT,
    }
)


class AppointmentKind(StatusEnum):
    """Scheduling category of an appointment."""

    SCHEDULED = "Scheduled"
    WALK_IN = "WalkIn"
    VIRTUAL = "Virtual"


class ProviderResponse(StatusEnum):
    """A provider's answer to being assigned to an appointment."""

    AWAITING = "AWAITING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"
    CANCELLED = "CANCELLED"

    def is_assigned(self) -> bool:
        """Check if the provider still counts as assigned to the appointment."""
        return self in (ProviderResponse.AWAITING, ProviderResponse.ACCEPTED)


@dataclass(frozen=True)
class PatientRef(ValueObject):
    """Reference to the patient an appointment is for."""

    uuid: str
    name: str | None = None

    def _validate(self) -> None:
        if not self.uuid:
            raise ValueError("Patient uuid is required")


@dataclass(frozen=True)
class ServiceRef(ValueObject):
    """
    Reference to an appointment service or service type.

    The catalogue itself lives outside this bounded context; only the
    fields the workflow needs (identity and voided flag) are carried.
    """

    uuid: str
    name: str | None = None
    voided: bool = False

    def _validate(self) -> None:
        if not self.uuid:
            raise ValueError("Service uuid is required")


@dataclass(frozen=True)
class ProviderRef(ValueObject):
    """
    Reference to a provider.

    ``person_uuid`` identifies the natural person behind the provider record;
    it is what identity checks compare against the acting user.
    """

    uuid: str
    person_uuid: str
    name: str | None = None

    def _validate(self) -> None:
        if not self.uuid:
            raise ValueError("Provider uuid is required")
        if not self.person_uuid:
            raise ValueError("Provider person uuid is required")
