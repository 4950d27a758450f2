"""
Reschedule Orchestrator

Cancels the original appointment and books its replacement.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from clinic_appointments.core.domain import EntityNotFoundException
from clinic_appointments.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from clinic_appointments.domains.appointments.application.ports.collaborators import IAppointmentNumberGenerator
from clinic_appointments.domains.appointments.application.services.audit_trail import AppointmentAuditTrail
from clinic_appointments.domains.appointments.application.services.status_machine import AppointmentStatusMachine
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus

logger = logging.getLogger(__name__)

SaveAppointment = Callable[[Appointment, Actor], Awaitable[Appointment]]


class RescheduleOrchestrator:
    """
    Two-step reschedule.

    Step 1 cancels the original and writes two audit records on it (the
    status change and a JSON snapshot). Step 2 turns the draft into a brand
    new appointment and books it through the normal create path.

    The steps are meant to run in separate transactions. A failure in
    step 2 leaves the original cancelled with no replacement; it is not
    compensated.
    """

    def __init__(
        self,
        repository: IAppointmentRepository,
        status_machine: AppointmentStatusMachine,
        audit_trail: AppointmentAuditTrail,
        number_generator: IAppointmentNumberGenerator,
        save_appointment: SaveAppointment,
        allow_number_retention: bool = False,
    ):
        self.repository = repository
        self.status_machine = status_machine
        self.audit_trail = audit_trail
        self.number_generator = number_generator
        self.save_appointment = save_appointment
        self.allow_number_retention = allow_number_retention

    async def cancel_original(self, original_uuid: str, actor: Actor) -> Appointment:
        """
        Step 1: cancel the original appointment.

        Raises:
            EntityNotFoundException: Original appointment does not exist
        """
        original = await self.repository.find_by_uuid(original_uuid)
        if original is None:
            message = f"Can not identify appointment for rescheduling with {original_uuid}"
            logger.error(message)
            raise EntityNotFoundException(entity_type="Appointment", entity_id=original_uuid, message=message)

        await self.status_machine.change_status(original, AppointmentStatus.CANCELLED, actor, on_date=datetime.now(UTC))
        await self.audit_trail.record_snapshot(original, actor)
        logger.info(f"Appointment {original.uuid} cancelled for reschedule")
        return original

    async def book_replacement(
        self,
        original: Appointment,
        draft: Appointment,
        actor: Actor,
        retain_appointment_number: bool = False,
    ) -> Appointment:
        """Step 2: strip identity from the draft and create it as a new appointment."""
        draft.clear_provenance()

        if retain_appointment_number and self.allow_number_retention:
            draft.appointment_number = original.appointment_number
        else:
            draft.appointment_number = self.number_generator.generate(draft)

        draft.status = AppointmentStatus.SCHEDULED
        saved = await self.save_appointment(draft, actor)
        logger.info(f"Appointment {original.uuid} rescheduled as {saved.uuid}")
        return saved
