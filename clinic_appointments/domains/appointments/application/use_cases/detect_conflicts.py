"""
Detect Appointment Conflicts Use Case
"""

import logging
from dataclasses import dataclass, field

from clinic_appointments.core.domain import DomainException
from clinic_appointments.domains.appointments.application.services.workflow_service import AppointmentWorkflowService
from clinic_appointments.domains.appointments.application.use_cases.results import INTERNAL_ERROR
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.value_objects.conflict import AppointmentConflict

logger = logging.getLogger(__name__)


@dataclass
class DetectConflictsRequest:
    """
    Appointments to check.

    A single appointment is checked as-is; a batch is first reduced to
    non-voided appointments starting today or later.
    """

    appointments: list[Appointment]


@dataclass
class DetectConflictsResponse:
    success: bool
    conflicts: list[AppointmentConflict] = field(default_factory=list)
    error: str | None = None
    error_code: str | None = None

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


class DetectConflictsUseCase:
    """Use case for advisory conflict detection."""

    def __init__(self, workflow_service: AppointmentWorkflowService):
        self.workflow = workflow_service

    async def execute(self, request: DetectConflictsRequest) -> DetectConflictsResponse:
        try:
            if len(request.appointments) == 1:
                conflict_map = await self.workflow.get_appointment_conflicts(request.appointments[0])
            else:
                conflict_map = await self.workflow.get_appointments_conflicts(request.appointments)

            conflicts = [
                AppointmentConflict(conflict_type=kind, appointments=appointments)
                for kind, appointments in conflict_map.items()
            ]
            if conflicts:
                logger.info(f"Conflicts found: {[c.to_dict() for c in conflicts]}")
            return DetectConflictsResponse(success=True, conflicts=conflicts)

        except DomainException as e:
            logger.warning(f"Conflict detection failed: {e.message}")
            return DetectConflictsResponse(success=False, error=e.message, error_code=e.code)
        except Exception as e:
            logger.error(f"Error detecting conflicts: {e}", exc_info=True)
            return DetectConflictsResponse(
                success=False,
                error=f"Failed to detect conflicts: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
