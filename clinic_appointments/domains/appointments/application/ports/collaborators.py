"""
Ports for the smaller workflow collaborators.

Teleconsultation links, appointment numbering, snapshot serialization and
the acting identity.
"""

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment


@runtime_checkable
class ITeleconsultationLinkGenerator(Protocol):
    """Generates an opaque video-consultation URL for an appointment."""

    def generate_link(self, appointment: "Appointment") -> str: ...


@runtime_checkable
class IAppointmentNumberGenerator(Protocol):
    """Appointment-number assignment strategy."""

    def generate(self, appointment: "Appointment") -> str: ...


@runtime_checkable
class IAppointmentSerializer(Protocol):
    """Encodes an appointment as a JSON snapshot for audit notes."""

    def to_json_snapshot(self, appointment: "Appointment") -> str:
        """
        Raises:
            SerializationException: If the snapshot cannot be encoded.
        """
        ...


@runtime_checkable
class IActorContext(Protocol):
    """
    Identity/authorization capability.

    ``Actor`` implements it; any other object exposing the same surface can
    be threaded through the workflow instead.
    """

    @property
    def person_uuid(self) -> str | None: ...

    def has_privilege(self, name: str) -> bool: ...
