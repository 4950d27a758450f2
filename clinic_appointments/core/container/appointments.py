"""
Appointments Domain Container.

Single Responsibility: Wire all appointment workflow dependencies.
"""

import logging
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession, AsyncSessionTransaction

from clinic_appointments.config.settings import Settings, get_settings
from clinic_appointments.domains.appointments.application.services import AppointmentWorkflowService
from clinic_appointments.domains.appointments.application.use_cases import (
    ChangeAppointmentStatusUseCase,
    DetectConflictsUseCase,
    RecordProviderResponseUseCase,
    RescheduleAppointmentUseCase,
    SaveAppointmentUseCase,
    SearchAppointmentsUseCase,
    UndoStatusChangeUseCase,
)
from clinic_appointments.domains.appointments.domain.services import (
    ConflictDetectorRegistry,
    PatientDoubleBookingDetector,
    ProviderDoubleBookingDetector,
    StatusTransitionPolicy,
    ValidatorRegistry,
)
from clinic_appointments.domains.appointments.infrastructure.repositories import (
    SQLAlchemyAppointmentAuditRepository,
    SQLAlchemyAppointmentRepository,
)
from clinic_appointments.domains.appointments.infrastructure.services import (
    DefaultAppointmentNumberGenerator,
    JsonAppointmentSerializer,
    LoggingAppointmentNotifier,
    TeleconsultationLinkService,
)

logger = logging.getLogger(__name__)


def session_transaction_factory(db: AsyncSession) -> Callable[[], AsyncSessionTransaction]:
    """
    Per-operation transactions on ``db``.

    A session that already has a transaction open (autobegun by an earlier
    query) gets a SAVEPOINT instead; committing the outer transaction is
    then left to whoever opened it.
    """

    def begin() -> AsyncSessionTransaction:
        if db.in_transaction():
            return db.begin_nested()
        return db.begin()

    return begin


class AppointmentsContainer:
    """
    Appointments domain container.

    Stateless collaborators are shared; everything bound to a session is
    created per call.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize appointments container.

        Args:
            settings: Application settings (defaults to the cached settings)
        """
        self.settings = settings or get_settings()
        self._notifier = LoggingAppointmentNotifier()
        self._serializer = JsonAppointmentSerializer()
        self._link_generator = TeleconsultationLinkService(self.settings.TELECONSULTATION_BASE_URL)
        self._number_generator = DefaultAppointmentNumberGenerator(self.settings.APPOINTMENT_DEFAULT_NUMBER)
        self._transition_policy = StatusTransitionPolicy.from_names(self.settings.APPOINTMENT_STATUS_TRANSITIONS)

    # ==================== REPOSITORIES ====================

    def create_appointment_repository(self, db: AsyncSession) -> SQLAlchemyAppointmentRepository:
        """Create Appointment Repository."""
        return SQLAlchemyAppointmentRepository(session=db)

    def create_audit_repository(self, db: AsyncSession) -> SQLAlchemyAppointmentAuditRepository:
        """Create Appointment Audit Repository."""
        return SQLAlchemyAppointmentAuditRepository(session=db)

    # ==================== REGISTRIES ====================

    def create_validator_registry(self) -> ValidatorRegistry:
        return ValidatorRegistry.default()

    def create_conflict_registry(self, repository: SQLAlchemyAppointmentRepository) -> ConflictDetectorRegistry:
        return ConflictDetectorRegistry(
            [
                PatientDoubleBookingDetector(repository),
                ProviderDoubleBookingDetector(repository),
            ]
        )

    # ==================== SERVICES ====================

    def create_workflow_service(self, db: AsyncSession) -> AppointmentWorkflowService:
        """Create the workflow façade bound to one session; one transaction per operation."""
        repository = self.create_appointment_repository(db)
        return AppointmentWorkflowService(
            repository=repository,
            audit_repository=self.create_audit_repository(db),
            notifier=self._notifier,
            link_generator=self._link_generator,
            number_generator=self._number_generator,
            serializer=self._serializer,
            validators=self.create_validator_registry(),
            conflict_registry=self.create_conflict_registry(repository),
            transition_policy=self._transition_policy,
            transaction_factory=session_transaction_factory(db),
            allow_number_retention=self.settings.APPOINTMENT_RETAIN_NUMBER_ON_RESCHEDULE,
        )

    # ==================== USE CASES ====================

    def create_save_appointment_use_case(self, db: AsyncSession) -> SaveAppointmentUseCase:
        return SaveAppointmentUseCase(self.create_workflow_service(db))

    def create_change_status_use_case(self, db: AsyncSession) -> ChangeAppointmentStatusUseCase:
        return ChangeAppointmentStatusUseCase(self.create_workflow_service(db))

    def create_undo_status_change_use_case(self, db: AsyncSession) -> UndoStatusChangeUseCase:
        return UndoStatusChangeUseCase(self.create_workflow_service(db))

    def create_record_provider_response_use_case(self, db: AsyncSession) -> RecordProviderResponseUseCase:
        return RecordProviderResponseUseCase(self.create_workflow_service(db))

    def create_reschedule_use_case(self, db: AsyncSession) -> RescheduleAppointmentUseCase:
        return RescheduleAppointmentUseCase(self.create_workflow_service(db))

    def create_detect_conflicts_use_case(self, db: AsyncSession) -> DetectConflictsUseCase:
        return DetectConflictsUseCase(self.create_workflow_service(db))

    def create_search_appointments_use_case(self, db: AsyncSession) -> SearchAppointmentsUseCase:
        return SearchAppointmentsUseCase(self.create_workflow_service(db))
