"""
Appointment Audit Repository Implementation

SQLAlchemy implementation of IAppointmentAuditRepository.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_appointments.domains.appointments.application.ports.audit_repository import IAppointmentAuditRepository
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.entities.audit import AppointmentAudit
from clinic_appointments.domains.appointments.infrastructure.persistence.sqlalchemy.models import AppointmentAuditModel

logger = logging.getLogger(__name__)


def audit_to_entity(model: AppointmentAuditModel) -> AppointmentAudit:
    """Convert audit model to entity."""
    return AppointmentAudit(
        uuid=model.uuid,  # type: ignore[arg-type]
        appointment_uuid=model.appointment_uuid,  # type: ignore[arg-type]
        status=model.status,  # type: ignore[arg-type]
        notes=model.notes,  # type: ignore[arg-type]
        actor=model.actor,  # type: ignore[arg-type]
        recorded_at=model.recorded_at,  # type: ignore[arg-type]
    )


class SQLAlchemyAppointmentAuditRepository(IAppointmentAuditRepository):
    """Append-only audit storage. Rows are inserted, never updated or deleted."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def save_audit(self, audit: AppointmentAudit) -> AppointmentAudit:
        model = AppointmentAuditModel(
            uuid=audit.uuid,
            appointment_uuid=audit.appointment_uuid,
            status=audit.status,
            notes=audit.notes,
            actor=audit.actor,
            recorded_at=audit.recorded_at,
        )
        self.session.add(model)
        await self.session.flush()
        return audit

    async def get_prior_status_change_event(self, appointment: Appointment) -> AppointmentAudit | None:
        """Most recent audit whose status differs from the appointment's current one."""
        result = await self.session.execute(
            select(AppointmentAuditModel)
            .where(
                AppointmentAuditModel.appointment_uuid == appointment.uuid,
                AppointmentAuditModel.status != appointment.status,
            )
            .order_by(AppointmentAuditModel.recorded_at.desc(), AppointmentAuditModel.id.desc())
            .limit(1)
        )
        model = result.scalar_one_or_none()
        if model is None:
            logger.debug(f"No prior status change for appointment {appointment.uuid}")
            return None
        return audit_to_entity(model)

    async def find_by_appointment(self, appointment_uuid: str) -> list[AppointmentAudit]:
        """Full audit trail of an appointment, oldest first."""
        result = await self.session.execute(
            select(AppointmentAuditModel)
            .where(AppointmentAuditModel.appointment_uuid == appointment_uuid)
            .order_by(AppointmentAuditModel.recorded_at, AppointmentAuditModel.id)
        )
        return [audit_to_entity(m) for m in result.scalars().all()]
