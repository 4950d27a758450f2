"""
Shared pytest fixtures for all tests.

This module provides actors, appointment builders and mocked workflow
collaborators (repositories, notifier, link and number generators).
"""

import os
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from clinic_appointments.domains.appointments.application.ports import (
    IAppointmentAuditRepository,
    IAppointmentNotifier,
    IAppointmentRepository,
)
from clinic_appointments.domains.appointments.application.services import AppointmentWorkflowService
from clinic_appointments.domains.appointments.domain.entities import Appointment
from clinic_appointments.domains.appointments.domain.services import ConflictDetectorRegistry, ValidatorRegistry
from clinic_appointments.domains.appointments.domain.value_objects import (
    MANAGE_APPOINTMENTS,
    RESET_APPOINTMENT_STATUS,
    Actor,
    AppointmentStatus,
    PatientRef,
    ProviderRef,
    ServiceRef,
)
from clinic_appointments.domains.appointments.infrastructure.services import (
    DefaultAppointmentNumberGenerator,
    JsonAppointmentSerializer,
    TeleconsultationLinkService,
)

# Ensure test environment
os.environ["ENVIRONMENT"] = "test"


# ============================================================================
# ACTORS
# ============================================================================


@pytest.fixture
def manager() -> Actor:
    """Actor allowed to manage every appointment."""
    return Actor(person_uuid="person-manager", username="manager", privileges=frozenset({MANAGE_APPOINTMENTS}))


@pytest.fixture
def supervisor() -> Actor:
    """Actor with both manage and reset privileges."""
    return Actor(
        person_uuid="person-supervisor",
        username="supervisor",
        privileges=frozenset({MANAGE_APPOINTMENTS, RESET_APPOINTMENT_STATUS}),
    )


@pytest.fixture
def doctor_one() -> Actor:
    """Person behind provider prov-1."""
    return Actor(person_uuid="person-1", username="doctor1")


@pytest.fixture
def doctor_two() -> Actor:
    """Person behind provider prov-2."""
    return Actor(person_uuid="person-2", username="doctor2")


@pytest.fixture
def outsider() -> Actor:
    """Actor with no privileges and no assignment."""
    return Actor(person_uuid="person-9", username="outsider")


# ============================================================================
# APPOINTMENTS
# ============================================================================


@pytest.fixture
def tomorrow_at_ten() -> datetime:
    tomorrow = datetime.now(UTC) + timedelta(days=1)
    return tomorrow.replace(hour=10, minute=0, second=0, microsecond=0)


@pytest.fixture
def make_appointment(tomorrow_at_ten):
    """Factory for appointments starting tomorrow at 10:00 UTC."""

    def _make(
        status: AppointmentStatus = AppointmentStatus.SCHEDULED,
        providers: list[str] | None = None,
        patient_uuid: str = "patient-1",
        start: datetime | None = None,
        minutes: int = 30,
        **kwargs,
    ) -> Appointment:
        start = start or tomorrow_at_ten
        appointment = Appointment(
            patient=PatientRef(uuid=patient_uuid, name="Jane Doe"),
            service=ServiceRef(uuid="service-1", name="Cardiology"),
            start_datetime=start,
            end_datetime=start + timedelta(minutes=minutes),
            status=status,
            **kwargs,
        )
        for index in providers or []:
            appointment.add_provider(ProviderRef(uuid=f"prov-{index}", person_uuid=f"person-{index}"))
        return appointment

    return _make


# ============================================================================
# COLLABORATORS
# ============================================================================


@pytest.fixture
def mock_appointment_repository():
    """Appointment repository whose save returns the appointment it was given."""
    repository = AsyncMock(spec=IAppointmentRepository)
    repository.find_by_uuid.return_value = None
    repository.save.side_effect = lambda appointment: appointment
    repository.search.return_value = []
    repository.find_overlapping.return_value = []
    return repository


@pytest.fixture
def mock_audit_repository():
    """Audit repository that stores nothing."""
    repository = AsyncMock(spec=IAppointmentAuditRepository)
    repository.save_audit.side_effect = lambda audit: audit
    repository.get_prior_status_change_event.return_value = None
    return repository


@pytest.fixture
def mock_notifier():
    notifier = AsyncMock(spec=IAppointmentNotifier)
    notifier.notify_all.return_value = []
    return notifier


@pytest.fixture
def transaction_factory():
    """Records every transaction opened by the workflow service."""
    factory = MagicMock()
    factory.return_value.__aenter__ = AsyncMock(return_value=None)
    factory.return_value.__aexit__ = AsyncMock(return_value=False)
    return factory


@pytest.fixture
def workflow_service(
    mock_appointment_repository,
    mock_audit_repository,
    mock_notifier,
    transaction_factory,
) -> AppointmentWorkflowService:
    """Workflow service wired with mocks and the default validators."""
    return AppointmentWorkflowService(
        repository=mock_appointment_repository,
        audit_repository=mock_audit_repository,
        notifier=mock_notifier,
        link_generator=TeleconsultationLinkService("https://meet.example.org"),
        number_generator=DefaultAppointmentNumberGenerator("0000"),
        serializer=JsonAppointmentSerializer(),
        validators=ValidatorRegistry.default(),
        conflict_registry=ConflictDetectorRegistry(),
        transaction_factory=transaction_factory,
    )
