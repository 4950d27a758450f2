"""
Notification Service Port.

Outbound notification delivery (email, SMS, video link). Delivery is
best-effort: results are reported per channel and never roll back the
appointment write.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment


@dataclass(frozen=True)
class NotificationResult:
    """Outcome of sending one notification over one medium."""

    SUCCESS_STATUS = 0

    medium: str
    status: int
    message: str | None = None
    uuid: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == self.SUCCESS_STATUS


@runtime_checkable
class IAppointmentNotifier(Protocol):
    """Interface for appointment notification dispatch.

    Implementations: LoggingAppointmentNotifier
    """

    async def notify_all(self, appointment: "Appointment") -> list[NotificationResult]:
        """Notify the patient through every configured medium.

        Args:
            appointment: Appointment the notification is about.

        Returns:
            One result per medium.
        """
        ...
