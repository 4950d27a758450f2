"""
Audit Trail Writer

Appends immutable audit records to an appointment's history.
"""

import logging

from clinic_appointments.domains.appointments.application.ports.audit_repository import IAppointmentAuditRepository
from clinic_appointments.domains.appointments.application.ports.collaborators import IAppointmentSerializer
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.entities.audit import AppointmentAudit
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor

logger = logging.getLogger(__name__)


class AppointmentAuditTrail:
    """
    Writes audit records through the audit repository and attaches them
    to the in-memory aggregate.

    The recorded status is always the appointment's status at the time of
    the call, so callers record after mutating.
    """

    def __init__(self, audit_repository: IAppointmentAuditRepository, serializer: IAppointmentSerializer):
        self.audit_repo = audit_repository
        self.serializer = serializer

    async def record(self, appointment: Appointment, actor: Actor | None, notes: str | None = None) -> AppointmentAudit:
        """
        Append one audit record for the appointment's current status.

        Args:
            appointment: Appointment the record belongs to
            actor: Acting user, if any
            notes: Free text or JSON snapshot

        Returns:
            The stored audit record
        """
        audit = AppointmentAudit(
            appointment_uuid=appointment.uuid,
            status=appointment.status,
            notes=notes,
            actor=actor.audit_name if actor else None,
        )
        appointment.add_audit(audit)
        saved = await self.audit_repo.save_audit(audit)
        logger.debug(f"Audit {audit.uuid} recorded for appointment {appointment.uuid} ({audit.status.value})")
        return saved

    async def record_snapshot(self, appointment: Appointment, actor: Actor | None) -> AppointmentAudit:
        """
        Append an audit record whose notes are a JSON snapshot of the appointment.

        Raises:
            SerializationException: If the snapshot cannot be encoded
        """
        snapshot = self.serializer.to_json_snapshot(appointment)
        return await self.record(appointment, actor, snapshot)
