"""
Status State Machine

Applies the access and transition rules, runs the status-change validators,
then mutates, persists and audits. Never opens a transaction itself.
"""

import logging
from datetime import UTC, datetime

from clinic_appointments.core.domain import ConflictStateException
from clinic_appointments.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from clinic_appointments.domains.appointments.application.services.audit_trail import AppointmentAuditTrail
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.services.status_policy import (
    AppointmentAccessPolicy,
    StatusTransitionPolicy,
)
from clinic_appointments.domains.appointments.domain.services.validation import ValidationPipeline, ValidatorRegistry
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus

logger = logging.getLogger(__name__)


def format_instant(moment: datetime) -> str:
    """ISO-8601 UTC instant used as audit notes for a dated status change."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC).isoformat().replace("+00:00", "Z")


class AppointmentStatusMachine:
    """
    Enforces legal status transitions.

    Check order is access rule, then transition rule, then validators.
    The appointment is only mutated once every check has passed.
    """

    def __init__(
        self,
        repository: IAppointmentRepository,
        audit_trail: AppointmentAuditTrail,
        validators: ValidatorRegistry,
        pipeline: ValidationPipeline | None = None,
        access_policy: AppointmentAccessPolicy | None = None,
        transition_policy: StatusTransitionPolicy | None = None,
    ):
        self.repository = repository
        self.audit_trail = audit_trail
        self.validators = validators
        self.pipeline = pipeline or ValidationPipeline()
        self.access_policy = access_policy or AppointmentAccessPolicy()
        self.transition_policy = transition_policy or StatusTransitionPolicy()

    async def change_status(
        self,
        appointment: Appointment,
        target_status: AppointmentStatus,
        actor: Actor,
        on_date: datetime | None = None,
        record_audit: bool = True,
    ) -> Appointment:
        """
        Move the appointment to ``target_status``.

        Args:
            appointment: Appointment to transition
            target_status: Desired status
            actor: Acting user
            on_date: Effective date, recorded as the audit notes
            record_audit: Whether to append the status-change audit record.
                The provider response coordinator writes its own record instead.

        Returns:
            The saved appointment

        Raises:
            AuthorizationException: Actor fails the self-or-all-access rule
            IllegalTransitionException: Reset rule or transition table rejects the move
            ValidationException: A status-change validator reported violations
        """
        self.access_policy.ensure_can_act_on(appointment, actor, "change_status")
        self.transition_policy.ensure_can_transition(appointment, target_status, actor)
        self.pipeline.validate_status_change(appointment, target_status, self.validators.status_change)

        previous = appointment.status
        appointment.status = target_status
        appointment.set_updated_by(actor.audit_name)
        await self.repository.save(appointment)

        if record_audit:
            notes = format_instant(on_date) if on_date is not None else None
            await self.audit_trail.record(appointment, actor, notes)

        logger.info(f"Appointment {appointment.uuid} status changed: {previous.value} -> {target_status.value}")
        return appointment

    async def undo_status_change(self, appointment: Appointment, actor: Actor) -> Appointment:
        """
        Restore the status recorded by the prior status-change audit.

        Raises:
            AuthorizationException: Actor fails the self-or-all-access rule
            ConflictStateException: There is no prior status change to undo
        """
        self.access_policy.ensure_can_act_on(appointment, actor, "undo_status_change")

        prior = await self.audit_trail.audit_repo.get_prior_status_change_event(appointment)
        if prior is None:
            raise ConflictStateException(
                "No status change actions to undo",
                operation="undo_status_change",
                current_state=appointment.status.value,
            )

        previous = appointment.status
        appointment.status = prior.status
        appointment.set_updated_by(actor.audit_name)
        await self.repository.save(appointment)
        await self.audit_trail.record(appointment, actor, prior.notes)

        logger.info(f"Appointment {appointment.uuid} status change undone: {previous.value} -> {prior.status.value}")
        return appointment
