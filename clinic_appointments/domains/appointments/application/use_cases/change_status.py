"""
Change Appointment Status Use Cases

Status transition and undo of the last transition.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from clinic_appointments.core.domain import DomainException
from clinic_appointments.domains.appointments.application.services.workflow_service import AppointmentWorkflowService
from clinic_appointments.domains.appointments.application.use_cases.results import INTERNAL_ERROR, error_fields
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus

logger = logging.getLogger(__name__)


@dataclass
class ChangeStatusRequest:
    """Request for changing an appointment's status."""

    appointment_uuid: str
    target_status: AppointmentStatus
    actor: Actor
    on_date: datetime | None = None


@dataclass
class UndoStatusChangeRequest:
    """Request for undoing the last status change."""

    appointment_uuid: str
    actor: Actor


@dataclass
class ChangeStatusResponse:
    """Response from a status change or undo."""

    success: bool
    appointment: Appointment | None = None
    status: AppointmentStatus | None = None
    error: str | None = None
    error_code: str | None = None
    violations: list[str] = field(default_factory=list)


class ChangeAppointmentStatusUseCase:
    """Use case for moving an appointment to another status."""

    def __init__(self, workflow_service: AppointmentWorkflowService):
        self.workflow = workflow_service

    async def execute(self, request: ChangeStatusRequest) -> ChangeStatusResponse:
        try:
            appointment = await self.workflow.change_status(
                request.appointment_uuid,
                request.target_status,
                request.actor,
                on_date=request.on_date,
            )
            return ChangeStatusResponse(success=True, appointment=appointment, status=appointment.status)

        except DomainException as e:
            logger.warning(
                f"Status change of {request.appointment_uuid} to {request.target_status} rejected: {e.code}"
            )
            return ChangeStatusResponse(success=False, **error_fields(e))
        except Exception as e:
            logger.error(f"Error changing status of {request.appointment_uuid}: {e}", exc_info=True)
            return ChangeStatusResponse(
                success=False,
                error=f"Failed to change appointment status: {str(e)}",
                error_code=INTERNAL_ERROR,
            )


class UndoStatusChangeUseCase:
    """Use case for reverting an appointment to its prior status."""

    def __init__(self, workflow_service: AppointmentWorkflowService):
        self.workflow = workflow_service

    async def execute(self, request: UndoStatusChangeRequest) -> ChangeStatusResponse:
        try:
            appointment = await self.workflow.undo_status_change(request.appointment_uuid, request.actor)
            return ChangeStatusResponse(success=True, appointment=appointment, status=appointment.status)

        except DomainException as e:
            logger.warning(f"Undo on {request.appointment_uuid} rejected: {e.message}")
            return ChangeStatusResponse(success=False, **error_fields(e))
        except Exception as e:
            logger.error(f"Error undoing status change of {request.appointment_uuid}: {e}", exc_info=True)
            return ChangeStatusResponse(
                success=False,
                error=f"Failed to undo status change: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
