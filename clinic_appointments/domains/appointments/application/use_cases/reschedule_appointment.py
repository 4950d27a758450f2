"""
Reschedule Appointment Use Case
"""

import logging
from dataclasses import dataclass, field

from clinic_appointments.core.domain import DomainException
from clinic_appointments.domains.appointments.application.services.workflow_service import AppointmentWorkflowService
from clinic_appointments.domains.appointments.application.use_cases.results import INTERNAL_ERROR, error_fields
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus

logger = logging.getLogger(__name__)


@dataclass
class RescheduleAppointmentRequest:
    """Request for rescheduling an appointment."""

    original_uuid: str
    draft: Appointment
    actor: Actor
    retain_appointment_number: bool = False


@dataclass
class RescheduleAppointmentResponse:
    """
    Response from a reschedule.

    A failed response does not imply the original is untouched: when
    ``original_cancelled`` is set, the cancellation was committed before
    booking the replacement failed.
    """

    success: bool
    appointment: Appointment | None = None
    original_cancelled: bool = False
    error: str | None = None
    error_code: str | None = None
    violations: list[str] = field(default_factory=list)


class RescheduleAppointmentUseCase:
    """Use case for moving an appointment to a new slot."""

    def __init__(self, workflow_service: AppointmentWorkflowService):
        self.workflow = workflow_service

    async def execute(self, request: RescheduleAppointmentRequest) -> RescheduleAppointmentResponse:
        try:
            appointment = await self.workflow.reschedule(
                request.original_uuid,
                request.draft,
                request.actor,
                retain_appointment_number=request.retain_appointment_number,
            )
            return RescheduleAppointmentResponse(success=True, appointment=appointment, original_cancelled=True)

        except DomainException as e:
            logger.warning(f"Reschedule of {request.original_uuid} failed: {e.code} {e.message}")
            return RescheduleAppointmentResponse(
                success=False,
                original_cancelled=await self._is_cancelled(request.original_uuid),
                **error_fields(e),
            )
        except Exception as e:
            logger.error(f"Error rescheduling appointment {request.original_uuid}: {e}", exc_info=True)
            return RescheduleAppointmentResponse(
                success=False,
                error=f"Failed to reschedule appointment: {str(e)}",
                error_code=INTERNAL_ERROR,
            )

    async def _is_cancelled(self, original_uuid: str) -> bool:
        original = await self.workflow.get_appointment_by_uuid(original_uuid)
        return original is not None and original.status == AppointmentStatus.CANCELLED
