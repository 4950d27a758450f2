"""
Record Provider Response Use Case
"""

import logging
from dataclasses import dataclass

from clinic_appointments.core.domain import DomainException
from clinic_appointments.domains.appointments.application.services.workflow_service import AppointmentWorkflowService
from clinic_appointments.domains.appointments.application.use_cases.results import INTERNAL_ERROR, error_fields
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import ProviderResponse

logger = logging.getLogger(__name__)


@dataclass
class RecordProviderResponseRequest:
    """A provider answering their own assignment."""

    appointment_uuid: str
    provider_uuid: str
    response: ProviderResponse
    actor: Actor


@dataclass
class RecordProviderResponseResponse:
    success: bool
    appointment: Appointment | None = None
    error: str | None = None
    error_code: str | None = None


class RecordProviderResponseUseCase:
    """Use case for accepting or declining an appointment as a provider."""

    def __init__(self, workflow_service: AppointmentWorkflowService):
        self.workflow = workflow_service

    async def execute(self, request: RecordProviderResponseRequest) -> RecordProviderResponseResponse:
        try:
            appointment = await self.workflow.record_provider_response(
                request.appointment_uuid,
                request.provider_uuid,
                request.response,
                request.actor,
            )
            return RecordProviderResponseResponse(success=True, appointment=appointment)

        except DomainException as e:
            logger.warning(
                f"Response {request.response} from provider {request.provider_uuid} rejected: {e.message}"
            )
            fields = error_fields(e)
            return RecordProviderResponseResponse(success=False, error=fields["error"], error_code=fields["error_code"])
        except Exception as e:
            logger.error(f"Error recording provider response: {e}", exc_info=True)
            return RecordProviderResponseResponse(
                success=False,
                error=f"Failed to record provider response: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
