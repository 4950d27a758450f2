"""
Save Appointment Use Case

Create-or-update of an appointment through the workflow service.
"""

import logging
from dataclasses import dataclass, field

from clinic_appointments.core.domain import DomainException
from clinic_appointments.domains.appointments.application.services.workflow_service import AppointmentWorkflowService
from clinic_appointments.domains.appointments.application.use_cases.results import INTERNAL_ERROR, error_fields
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor

logger = logging.getLogger(__name__)


@dataclass
class SaveAppointmentRequest:
    """Request for saving an appointment."""

    appointment: Appointment
    actor: Actor


@dataclass
class SaveAppointmentResponse:
    """Response from saving an appointment."""

    success: bool
    appointment: Appointment | None = None
    error: str | None = None
    error_code: str | None = None
    violations: list[str] = field(default_factory=list)


class SaveAppointmentUseCase:
    """
    Use case for creating or updating appointments.

    Returns an explicit result instead of raising.
    """

    def __init__(self, workflow_service: AppointmentWorkflowService):
        self.workflow = workflow_service

    async def execute(self, request: SaveAppointmentRequest) -> SaveAppointmentResponse:
        """
        Execute save.

        Args:
            request: Appointment and acting user

        Returns:
            Response with the saved appointment, or the error
        """
        try:
            saved = await self.workflow.validate_and_save(request.appointment, request.actor)
            return SaveAppointmentResponse(success=True, appointment=saved)

        except DomainException as e:
            logger.warning(f"Appointment {request.appointment.uuid} not saved: {e.code} {e.message}")
            return SaveAppointmentResponse(success=False, **error_fields(e))
        except Exception as e:
            logger.error(f"Error saving appointment {request.appointment.uuid}: {e}", exc_info=True)
            return SaveAppointmentResponse(
                success=False,
                error=f"Failed to save appointment: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
