"""
Unit tests for the appointment status state machine.

Tests:
- change_status check order and audit notes
- undo_status_change
"""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from clinic_appointments.core.domain import (
    AuthorizationException,
    ConflictStateException,
    IllegalTransitionException,
    ValidationException,
)
from clinic_appointments.domains.appointments.application.services import (
    AppointmentAuditTrail,
    AppointmentStatusMachine,
)
from clinic_appointments.domains.appointments.application.services.status_machine import format_instant
from clinic_appointments.domains.appointments.domain.entities import AppointmentAudit
from clinic_appointments.domains.appointments.domain.services import CheckInTimeValidator, ValidatorRegistry
from clinic_appointments.domains.appointments.domain.value_objects import AppointmentStatus
from clinic_appointments.domains.appointments.infrastructure.services import JsonAppointmentSerializer


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def audit_trail(mock_audit_repository):
    return AppointmentAuditTrail(mock_audit_repository, JsonAppointmentSerializer())


@pytest.fixture
def status_machine(mock_appointment_repository, audit_trail):
    return AppointmentStatusMachine(
        repository=mock_appointment_repository,
        audit_trail=audit_trail,
        validators=ValidatorRegistry.default(),
    )


# ============================================================================
# format_instant
# ============================================================================


@pytest.mark.unit
def test_format_instant_normalizes_to_utc():
    moment = datetime(2026, 1, 15, 12, 30, tzinfo=timezone(timedelta(hours=2)))

    assert format_instant(moment) == "2026-01-15T10:30:00Z"


@pytest.mark.unit
def test_format_instant_treats_naive_as_utc():
    assert format_instant(datetime(2026, 1, 15, 9, 0)) == "2026-01-15T09:00:00Z"


# ============================================================================
# change_status
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_change_status_saves_and_audits_with_date_notes(
    status_machine, mock_appointment_repository, mock_audit_repository, make_appointment, manager
):
    """Test a dated transition is persisted and audited with an ISO instant."""
    # Arrange
    appointment = make_appointment(providers=[1])
    on_date = datetime(2026, 1, 15, 10, 0, tzinfo=UTC)

    # Act
    result = await status_machine.change_status(appointment, AppointmentStatus.CANCELLED, manager, on_date)

    # Assert
    assert result.status == AppointmentStatus.CANCELLED
    assert result.updated_by == "manager"
    mock_appointment_repository.save.assert_awaited_once_with(appointment)
    audit = mock_audit_repository.save_audit.await_args.args[0]
    assert audit.status == AppointmentStatus.CANCELLED
    assert audit.notes == "2026-01-15T10:00:00Z"
    assert audit.actor == "manager"
    assert appointment.audits == (audit,)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_change_status_without_date_has_no_notes(status_machine, mock_audit_repository, make_appointment, manager):
    # Arrange
    appointment = make_appointment()

    # Act
    await status_machine.change_status(appointment, AppointmentStatus.MISSED, manager)

    # Assert
    assert mock_audit_repository.save_audit.await_args.args[0].notes is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_change_status_can_skip_audit(status_machine, mock_audit_repository, make_appointment, manager):
    appointment = make_appointment(status=AppointmentStatus.REQUESTED)

    await status_machine.change_status(appointment, AppointmentStatus.SCHEDULED, manager, record_audit=False)

    assert appointment.status == AppointmentStatus.SCHEDULED
    mock_audit_repository.save_audit.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_outsider_cannot_change_assigned_appointment(
    status_machine, mock_appointment_repository, mock_audit_repository, make_appointment, outsider
):
    """Test the access rule fails before anything is mutated."""
    # Arrange
    appointment = make_appointment(providers=[1])

    # Act & Assert
    with pytest.raises(AuthorizationException):
        await status_machine.change_status(appointment, AppointmentStatus.CANCELLED, outsider)
    assert appointment.status == AppointmentStatus.SCHEDULED
    assert appointment.audits == ()
    mock_appointment_repository.save.assert_not_called()
    mock_audit_repository.save_audit.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_assigned_provider_can_change_own_appointment(status_machine, make_appointment, doctor_one):
    appointment = make_appointment(providers=[1])

    await status_machine.change_status(appointment, AppointmentStatus.CANCELLED, doctor_one)

    assert appointment.status == AppointmentStatus.CANCELLED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_reset_to_scheduled_requires_privilege(
    status_machine, mock_appointment_repository, make_appointment, manager, supervisor
):
    # Arrange
    appointment = make_appointment(status=AppointmentStatus.CHECKED_IN)

    # Act & Assert
    with pytest.raises(IllegalTransitionException):
        await status_machine.change_status(appointment, AppointmentStatus.SCHEDULED, manager)
    assert appointment.status == AppointmentStatus.CHECKED_IN
    mock_appointment_repository.save.assert_not_called()

    await status_machine.change_status(appointment, AppointmentStatus.SCHEDULED, supervisor)
    assert appointment.status == AppointmentStatus.SCHEDULED


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validation_failure_leaves_appointment_unchanged(
    mock_appointment_repository, audit_trail, make_appointment, manager, tomorrow_at_ten
):
    # Arrange
    validators = ValidatorRegistry(
        status_change=[CheckInTimeValidator(clock=lambda: tomorrow_at_ten - timedelta(days=2))]
    )
    machine = AppointmentStatusMachine(mock_appointment_repository, audit_trail, validators)
    appointment = make_appointment()

    # Act & Assert
    with pytest.raises(ValidationException) as exc_info:
        await machine.change_status(appointment, AppointmentStatus.CHECKED_IN, manager)
    assert exc_info.value.violations == ["Appointment cannot be checked in before its scheduled day"]
    assert appointment.status == AppointmentStatus.SCHEDULED
    mock_appointment_repository.save.assert_not_called()


# ============================================================================
# undo_status_change
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_undo_restores_prior_status_and_notes(
    status_machine, mock_audit_repository, make_appointment, manager
):
    # Arrange
    appointment = make_appointment(status=AppointmentStatus.CANCELLED)
    mock_audit_repository.get_prior_status_change_event.return_value = AppointmentAudit(
        appointment_uuid=appointment.uuid,
        status=AppointmentStatus.SCHEDULED,
        notes="2026-01-10T08:00:00Z",
    )

    # Act
    result = await status_machine.undo_status_change(appointment, manager)

    # Assert
    assert result.status == AppointmentStatus.SCHEDULED
    audit = mock_audit_repository.save_audit.await_args.args[0]
    assert audit.status == AppointmentStatus.SCHEDULED
    assert audit.notes == "2026-01-10T08:00:00Z"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_undo_without_prior_change_raises_conflict_state(
    status_machine, mock_appointment_repository, make_appointment, manager
):
    # Arrange
    appointment = make_appointment(status=AppointmentStatus.CANCELLED)

    # Act & Assert
    with pytest.raises(ConflictStateException) as exc_info:
        await status_machine.undo_status_change(appointment, manager)
    assert exc_info.value.message == "No status change actions to undo"
    assert appointment.status == AppointmentStatus.CANCELLED
    mock_appointment_repository.save.assert_not_called()
