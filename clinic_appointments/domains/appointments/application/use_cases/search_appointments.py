"""
Search Appointments Use Case

Date, date-range and structured searches over active appointments.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime

from clinic_appointments.domains.appointments.application.dto.search import AppointmentSearchRequest
from clinic_appointments.domains.appointments.application.services.workflow_service import AppointmentWorkflowService
from clinic_appointments.domains.appointments.application.use_cases.results import INTERNAL_ERROR
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment

logger = logging.getLogger(__name__)


@dataclass
class SearchAppointmentsRequest:
    """
    Exactly one search mode is used, checked in this order:

    - criteria: structured search (requires a start date)
    - start/end: date range
    - for_date: a single day (all appointments when omitted)
    """

    criteria: AppointmentSearchRequest | None = None
    start: datetime | None = None
    end: datetime | None = None
    for_date: date | None = None


@dataclass
class SearchAppointmentsResponse:
    success: bool
    appointments: list[Appointment] = field(default_factory=list)
    total: int = 0
    error: str | None = None
    error_code: str | None = None


class SearchAppointmentsUseCase:
    """Use case for appointment lookups."""

    def __init__(self, workflow_service: AppointmentWorkflowService):
        self.workflow = workflow_service

    async def execute(self, request: SearchAppointmentsRequest) -> SearchAppointmentsResponse:
        try:
            if request.criteria is not None:
                appointments = await self.workflow.search(request.criteria)
            elif request.start is not None and request.end is not None:
                appointments = await self.workflow.get_all_appointments_in_date_range(request.start, request.end)
            else:
                appointments = await self.workflow.get_all_appointments(request.for_date)

            return SearchAppointmentsResponse(success=True, appointments=appointments, total=len(appointments))

        except Exception as e:
            logger.error(f"Error searching appointments: {e}", exc_info=True)
            return SearchAppointmentsResponse(
                success=False,
                error=f"Failed to search appointments: {str(e)}",
                error_code=INTERNAL_ERROR,
            )
