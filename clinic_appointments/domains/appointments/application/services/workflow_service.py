"""
Appointment Workflow Service

Façade composing validation, the status machine, conflict detection,
provider responses, reschedule and the audit trail into the public
operations of the appointment workflow engine.
"""

from collections.abc import Callable, Iterable
from contextlib import AbstractAsyncContextManager, nullcontext
from datetime import date, datetime

from clinic_appointments.core.domain import EntityNotFoundException
from clinic_appointments.core.shared.logger import get_workflow_logger
from clinic_appointments.domains.appointments.application.dto.search import AppointmentSearchRequest
from clinic_appointments.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from clinic_appointments.domains.appointments.application.ports.audit_repository import IAppointmentAuditRepository
from clinic_appointments.domains.appointments.application.ports.collaborators import (
    IAppointmentNumberGenerator,
    IAppointmentSerializer,
    ITeleconsultationLinkGenerator,
)
from clinic_appointments.domains.appointments.application.ports.notification_port import IAppointmentNotifier
from clinic_appointments.domains.appointments.application.services.audit_trail import AppointmentAuditTrail
from clinic_appointments.domains.appointments.application.services.provider_response import (
    ProviderResponseCoordinator,
)
from clinic_appointments.domains.appointments.application.services.reschedule import RescheduleOrchestrator
from clinic_appointments.domains.appointments.application.services.status_machine import AppointmentStatusMachine
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.services.conflict_detection import (
    ConflictDetectorRegistry,
    ConflictMap,
)
from clinic_appointments.domains.appointments.domain.services.status_policy import (
    AppointmentAccessPolicy,
    StatusTransitionPolicy,
)
from clinic_appointments.domains.appointments.domain.services.validation import ValidationPipeline, ValidatorRegistry
from clinic_appointments.domains.appointments.domain.value_objects.actor import Actor
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import (
    AppointmentStatus,
    ProviderResponse,
)

TransactionFactory = Callable[[], AbstractAsyncContextManager]


class AppointmentWorkflowService:
    """
    Public operations of the appointment workflow engine.

    Every operation runs inside one transaction obtained from
    ``transaction_factory`` (for SQLAlchemy, ``session.begin``). Reschedule
    is the exception: it uses two, one per step.

    Concurrency: there is no in-process locking. Concurrent
    ``change_status`` or ``record_provider_response`` calls against the same
    appointment are only as safe as the isolation level of the backing
    store. Conflict detection reads without locking and is advisory.

    Errors propagate unchanged. Only notification failures are logged and
    swallowed; they never roll back the appointment write.

    Example:
        ```python
        service = AppointmentWorkflowService(
            repository=SQLAlchemyAppointmentRepository(session),
            audit_repository=SQLAlchemyAppointmentAuditRepository(session),
            notifier=LoggingAppointmentNotifier(),
            link_generator=TeleconsultationLinkService(base_url),
            number_generator=DefaultAppointmentNumberGenerator(),
            serializer=JsonAppointmentSerializer(),
            validators=ValidatorRegistry.default(),
            conflict_registry=ConflictDetectorRegistry([...]),
            transaction_factory=session.begin,
        )
        saved = await service.validate_and_save(appointment, actor)
        ```
    """

    def __init__(
        self,
        repository: IAppointmentRepository,
        audit_repository: IAppointmentAuditRepository,
        notifier: IAppointmentNotifier,
        link_generator: ITeleconsultationLinkGenerator,
        number_generator: IAppointmentNumberGenerator,
        serializer: IAppointmentSerializer,
        validators: ValidatorRegistry | None = None,
        conflict_registry: ConflictDetectorRegistry | None = None,
        transition_policy: StatusTransitionPolicy | None = None,
        access_policy: AppointmentAccessPolicy | None = None,
        transaction_factory: TransactionFactory | None = None,
        allow_number_retention: bool = False,
    ):
        self.repository = repository
        self.notifier = notifier
        self.link_generator = link_generator
        self.number_generator = number_generator
        self.validators = validators or ValidatorRegistry.default()
        self.conflict_registry = conflict_registry or ConflictDetectorRegistry()
        self.access_policy = access_policy or AppointmentAccessPolicy()
        self.pipeline = ValidationPipeline()
        self._transaction = transaction_factory or nullcontext

        self.audit_trail = AppointmentAuditTrail(audit_repository, serializer)
        self.status_machine = AppointmentStatusMachine(
            repository=repository,
            audit_trail=self.audit_trail,
            validators=self.validators,
            pipeline=self.pipeline,
            access_policy=self.access_policy,
            transition_policy=transition_policy,
        )
        self.provider_responses = ProviderResponseCoordinator(repository, self.status_machine, self.audit_trail)
        self.rescheduler = RescheduleOrchestrator(
            repository=repository,
            status_machine=self.status_machine,
            audit_trail=self.audit_trail,
            number_generator=number_generator,
            save_appointment=self._validate_and_save,
            allow_number_retention=allow_number_retention,
        )

    # ==================== Commands ====================

    async def validate_and_save(self, appointment: Appointment, actor: Actor) -> Appointment:
        """
        Create or update an appointment.

        Raises:
            AuthorizationException: Actor fails the self-or-all-access rule
            ValidationException: Any validator reported violations
            SerializationException: Snapshot audit could not be encoded
        """
        async with self._transaction():
            return await self._validate_and_save(appointment, actor)

    async def change_status(
        self,
        appointment: Appointment | str,
        target_status: AppointmentStatus | str,
        actor: Actor,
        on_date: datetime | None = None,
    ) -> Appointment:
        """
        Transition an appointment, given as entity or uuid.

        Raises:
            EntityNotFoundException: Unknown appointment uuid
            AuthorizationException: Actor fails the self-or-all-access rule
            IllegalTransitionException: Target not reachable for this actor
            ValidationException: A status-change validator reported violations
        """
        target_status = AppointmentStatus.coerce(target_status)

        async with self._transaction():
            if isinstance(appointment, str):
                appointment = await self._require(appointment)
            log = get_workflow_logger("change_status").with_context(
                appointment_uuid=appointment.uuid,
                actor=actor.audit_name,
                target_status=target_status.value,
            )
            log.debug("Changing appointment status")
            return await self.status_machine.change_status(appointment, target_status, actor, on_date)

    async def undo_status_change(self, appointment_uuid: str, actor: Actor) -> Appointment:
        """
        Revert the last status change.

        Raises:
            EntityNotFoundException: Unknown appointment uuid
            ConflictStateException: No status change actions to undo
        """
        async with self._transaction():
            appointment = await self._require(appointment_uuid)
            return await self.status_machine.undo_status_change(appointment, actor)

    async def record_provider_response(
        self,
        appointment_uuid: str,
        provider_uuid: str,
        response: ProviderResponse,
        actor: Actor,
    ) -> Appointment:
        """Record a provider's accept/decline on an appointment."""
        async with self._transaction():
            appointment = await self._require(appointment_uuid)
            return await self.provider_responses.record_provider_response(
                appointment, provider_uuid, response, actor
            )

    async def reschedule(
        self,
        original_uuid: str,
        draft: Appointment,
        actor: Actor,
        retain_appointment_number: bool = False,
    ) -> Appointment:
        """
        Cancel the original appointment and book the draft in its place.

        The cancellation is committed before the replacement is validated.
        If booking the replacement fails, the original stays cancelled and
        the error is re-raised unchanged.
        """
        log = get_workflow_logger("reschedule").with_context(original_uuid=original_uuid, actor=actor.audit_name)

        async with self._transaction():
            original = await self.rescheduler.cancel_original(original_uuid, actor)

        try:
            async with self._transaction():
                return await self.rescheduler.book_replacement(original, draft, actor, retain_appointment_number)
        except Exception:
            log.error("Replacement booking failed; original appointment remains cancelled")
            raise

    # ==================== Conflicts ====================

    async def get_appointment_conflicts(self, appointment: Appointment) -> ConflictMap:
        """Conflicts for a single appointment. No candidate filtering is applied."""
        async with self._transaction():
            return await self.conflict_registry.detect([appointment])

    async def get_appointments_conflicts(self, appointments: list[Appointment]) -> ConflictMap:
        """
        Conflicts for a batch.

        Every appointment gets a number if it has none; voided and past
        appointments are then dropped before any detector runs.
        """
        for appointment in appointments:
            self._assign_number_if_absent(appointment)
        async with self._transaction():
            return await self.conflict_registry.detect_for_batch(appointments)

    # ==================== Queries ====================

    async def get_appointment_by_uuid(self, uuid: str) -> Appointment | None:
        async with self._transaction():
            return await self.repository.find_by_uuid(uuid)

    async def get_all_appointments(self, for_date: date | None = None) -> list[Appointment]:
        async with self._transaction():
            return self._visible(await self.repository.find_all_for_date(for_date))

    async def get_all_appointments_in_date_range(self, start: datetime, end: datetime) -> list[Appointment]:
        async with self._transaction():
            return self._visible(await self.repository.find_all_in_range(start, end))

    async def search(self, request: AppointmentSearchRequest) -> list[Appointment]:
        """Structured search. Returns an empty list when no start date is given."""
        if not request.is_searchable():
            return []
        async with self._transaction():
            return self._visible(await self.repository.search(request), include_voided=request.include_voided)

    async def get_all_future_appointments_for_service(self, service_uuid: str) -> list[Appointment]:
        async with self._transaction():
            return self._visible(await self.repository.find_future_for_service(service_uuid))

    async def get_all_future_appointments_for_service_type(self, service_type_uuid: str) -> list[Appointment]:
        async with self._transaction():
            return self._visible(await self.repository.find_future_for_service_type(service_type_uuid))

    async def get_appointments_for_service(
        self,
        service_uuid: str,
        start: datetime | None = None,
        end: datetime | None = None,
        statuses: list[AppointmentStatus] | None = None,
    ) -> list[Appointment]:
        async with self._transaction():
            return self._visible(await self.repository.find_for_service(service_uuid, start, end, statuses))

    # ==================== Internals ====================

    async def _validate_and_save(self, appointment: Appointment, actor: Actor) -> Appointment:
        """Create path shared by validate_and_save and reschedule. Runs in the caller's transaction."""
        log = get_workflow_logger("validate_and_save").with_context(
            appointment_uuid=appointment.uuid,
            actor=actor.audit_name,
        )
        self.access_policy.ensure_can_act_on(appointment, actor, "validate_and_save")

        existing = await self.repository.find_by_uuid(appointment.uuid)
        validators = list(self.validators.appointment)
        if existing is not None:
            validators.extend(self.validators.edit)
        self.pipeline.validate(appointment, validators)

        self._assign_number_if_absent(appointment)
        if appointment.teleconsultation:
            appointment.setup_teleconsultation(self.link_generator.generate_link(appointment))

        if existing is None:
            appointment.set_created_by(actor.audit_name)
        else:
            appointment.set_updated_by(actor.audit_name)

        await self.repository.save(appointment)
        await self.audit_trail.record_snapshot(appointment, actor)
        log.info("Appointment saved", created=existing is None, status=appointment.status.value)

        if appointment.teleconsultation and await self._notify(appointment):
            await self.repository.save(appointment)
        return appointment

    async def _notify(self, appointment: Appointment) -> bool:
        """
        Best-effort notification. Returns True when ``email_sent`` was flipped.

        Any successful medium marks the appointment as sent; failed media
        are logged. A notifier error never fails the enclosing operation.
        """
        log = get_workflow_logger("notify").with_context(appointment_uuid=appointment.uuid)
        try:
            results = await self.notifier.notify_all(appointment)
        except Exception as e:
            log.exception(f"Notification dispatch failed: {e}")
            return False

        for result in results:
            if not result.is_success:
                log.error(
                    f"Could not send notification for medium: {result.medium}, uuid: {result.uuid}, "
                    f"status: {result.status}, errMsg: {result.message}"
                )

        if any(r.is_success for r in results) and not appointment.email_sent:
            appointment.email_sent = True
            return True
        return False

    def _assign_number_if_absent(self, appointment: Appointment) -> None:
        if not appointment.appointment_number:
            appointment.appointment_number = self.number_generator.generate(appointment)

    async def _require(self, appointment_uuid: str) -> Appointment:
        appointment = await self.repository.find_by_uuid(appointment_uuid)
        if appointment is None:
            raise EntityNotFoundException(entity_type="Appointment", entity_id=appointment_uuid)
        return appointment

    @staticmethod
    def _visible(appointments: Iterable[Appointment], include_voided: bool = False) -> list[Appointment]:
        """Drop appointments whose service or service type is voided (and voided ones unless asked)."""
        return [
            a
            for a in appointments
            if not a.is_service_or_service_type_voided() and (include_voided or not a.voided)
        ]
