"""
Provider Response Coordinator

Records a provider's accept/decline on an appointment and promotes a
requested appointment to scheduled on the first acceptance.
"""

import logging
from datetime import UTC, datetime

from clinic_appointments.core.domain import AuthorizationException, EntityNotFoundException
from clinic_appointments.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from clinic_appointments.domains.appointments.application.services.audit_trail import AppointmentAuditTrail
from clinic_appointments.domains.appointments.application.services.status_machine import AppointmentStatusMachine
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment, AppointmentProvider
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import (
    AppointmentStatus,
    ProviderResponse,
)

logger = logging.getLogger(__name__)

PROVIDER_RESPONSE_AUDIT_NOTES = (
    "Changed Provider Response to {response} for provider with UUID {provider_uuid} "
    "in appointment with UUID {appointment_uuid}"
)


class ProviderResponseCoordinator:
    """Sole mutator of ``AppointmentProvider.response``."""

    def __init__(
        self,
        repository: IAppointmentRepository,
        status_machine: AppointmentStatusMachine,
        audit_trail: AppointmentAuditTrail,
    ):
        self.repository = repository
        self.status_machine = status_machine
        self.audit_trail = audit_trail

    async def record_provider_response(
        self,
        appointment: Appointment,
        provider_uuid: str,
        response: ProviderResponse,
        actor: Actor,
    ) -> Appointment:
        """
        Record one provider's response.

        Exactly one audit record is appended per call. When the response
        promotes the appointment, that record carries the new status.

        Raises:
            EntityNotFoundException: No providers, or provider not assigned
            AuthorizationException: Actor is not the responding provider
        """
        entry = self._find_entry(appointment, provider_uuid)
        if not actor.is_same_person(entry.person_uuid):
            raise AuthorizationException(
                operation="record_provider_response",
                resource=f"appointment {appointment.uuid}",
                message="Cannot change Provider Response for other providers",
            )

        promote = self._is_first_accept_for_requested(appointment, response)
        previous_response = entry.response
        entry.response = response

        if promote:
            try:
                await self.status_machine.change_status(
                    appointment,
                    AppointmentStatus.SCHEDULED,
                    actor,
                    on_date=datetime.now(UTC),
                    record_audit=False,
                )
            except Exception:
                entry.response = previous_response
                raise
        else:
            appointment.set_updated_by(actor.audit_name)
            await self.repository.save(appointment)

        notes = PROVIDER_RESPONSE_AUDIT_NOTES.format(
            response=response.value,
            provider_uuid=entry.provider.uuid,
            appointment_uuid=appointment.uuid,
        )
        await self.audit_trail.record(appointment, actor, notes)

        logger.info(
            f"Provider {entry.provider.uuid} responded {response.value} on appointment {appointment.uuid}"
            + (" (promoted to Scheduled)" if promote else "")
        )
        return appointment

    @staticmethod
    def _find_entry(appointment: Appointment, provider_uuid: str) -> AppointmentProvider:
        if not appointment.providers:
            raise EntityNotFoundException(
                entity_type="AppointmentProvider",
                entity_id=provider_uuid,
                message="No providers present in Appointment",
            )
        entry = appointment.find_provider(provider_uuid)
        if entry is None:
            raise EntityNotFoundException(
                entity_type="AppointmentProvider",
                entity_id=provider_uuid,
                message="Provider is not part of Appointment",
            )
        return entry

    @staticmethod
    def _is_first_accept_for_requested(appointment: Appointment, response: ProviderResponse) -> bool:
        return appointment.status == AppointmentStatus.REQUESTED and response == ProviderResponse.ACCEPTED
