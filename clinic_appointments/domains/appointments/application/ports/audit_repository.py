"""
Appointment Audit Repository Port
"""

from typing import Protocol, runtime_checkable

from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.entities.audit import AppointmentAudit


@runtime_checkable
class IAppointmentAuditRepository(Protocol):
    """
    Append-only store of appointment audit records.
    """

    async def save_audit(self, audit: AppointmentAudit) -> AppointmentAudit:
        """
        Append an audit record.

        Args:
            audit: Record to append

        Returns:
            The stored record
        """
        ...

    async def get_prior_status_change_event(self, appointment: Appointment) -> AppointmentAudit | None:
        """
        Find the most recent audit record whose status differs from the
        appointment's current status.

        Args:
            appointment: Appointment whose history is inspected

        Returns:
            The prior status-change record, or None when there is nothing to undo
        """
        ...
