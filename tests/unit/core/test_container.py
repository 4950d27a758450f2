"""
Unit tests for the appointments container wiring.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_appointments.config.settings import Settings
from clinic_appointments.core.container import AppointmentsContainer
from clinic_appointments.core.container.appointments import session_transaction_factory
from clinic_appointments.domains.appointments.application.use_cases import RescheduleAppointmentUseCase
from clinic_appointments.domains.appointments.domain.value_objects import AppointmentStatus
from clinic_appointments.domains.appointments.infrastructure.repositories import SQLAlchemyAppointmentRepository


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        APPOINTMENT_RETAIN_NUMBER_ON_RESCHEDULE=True,
        APPOINTMENT_STATUS_TRANSITIONS={"Scheduled": ["Cancelled"]},
        TELECONSULTATION_BASE_URL="https://video.example.org",
    )


@pytest.mark.unit
def test_workflow_service_is_bound_to_session(settings):
    # Arrange
    db = MagicMock(spec=AsyncSession)
    container = AppointmentsContainer(settings)

    # Act
    service = container.create_workflow_service(db)

    # Assert
    assert isinstance(service.repository, SQLAlchemyAppointmentRepository)
    assert service.repository.session is db
    assert service.rescheduler.allow_number_retention is True
    assert service.link_generator.base_url == "https://video.example.org"
    assert len(service.conflict_registry.detectors) == 2
    assert not service.status_machine.transition_policy.is_reachable(
        AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED
    )


@pytest.mark.unit
def test_use_cases_get_fresh_services(settings):
    container = AppointmentsContainer(settings)
    db = MagicMock(spec=AsyncSession)

    first = container.create_reschedule_use_case(db)
    second = container.create_reschedule_use_case(db)

    assert isinstance(first, RescheduleAppointmentUseCase)
    assert first.workflow is not second.workflow


@pytest.mark.unit
def test_transaction_begins_on_fresh_session():
    db = MagicMock(spec=AsyncSession)
    db.in_transaction.return_value = False

    transaction = session_transaction_factory(db)()

    assert transaction is db.begin.return_value
    db.begin_nested.assert_not_called()


@pytest.mark.unit
def test_transaction_uses_savepoint_on_session_already_in_use(settings):
    # Arrange
    db = MagicMock(spec=AsyncSession)
    db.in_transaction.return_value = True
    service = AppointmentsContainer(settings).create_workflow_service(db)

    # Act
    transaction = service._transaction()

    # Assert
    assert transaction is db.begin_nested.return_value
    db.begin.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_shared_notifier_stays_stateless(settings, make_appointment):
    # Arrange
    container = AppointmentsContainer(settings)
    first = container.create_workflow_service(MagicMock(spec=AsyncSession))
    second = container.create_workflow_service(MagicMock(spec=AsyncSession))
    state_before = dict(vars(first.notifier))

    # Act
    for _ in range(100):
        await first.notifier.notify_all(make_appointment(teleconsultation=True))

    # Assert
    assert first.notifier is second.notifier
    assert vars(first.notifier) == state_before
