"""
Unit tests for AppointmentWorkflowService.

Tests:
- validate_and_save create and edit paths
- best-effort notification
- change_status / undo_status_change by uuid
- queries and visibility
- conflict entry points
"""

import json
import logging
from datetime import date, timedelta

import pytest

from clinic_appointments.core.domain import (
    AuthorizationException,
    ConflictStateException,
    EntityNotFoundException,
    ValidationException,
)
from clinic_appointments.domains.appointments.application.dto import AppointmentSearchRequest
from clinic_appointments.domains.appointments.application.ports import NotificationResult
from clinic_appointments.domains.appointments.domain.value_objects import (
    AppointmentStatus,
    ProviderResponse,
    ServiceRef,
)


# ============================================================================
# validate_and_save
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_assigns_number_and_writes_snapshot(
    workflow_service, mock_appointment_repository, mock_audit_repository, transaction_factory, make_appointment, manager
):
    """Test a new appointment gets a number, provenance and one snapshot audit."""
    # Arrange
    appointment = make_appointment(providers=[1])

    # Act
    saved = await workflow_service.validate_and_save(appointment, manager)

    # Assert
    assert saved.appointment_number == "0000"
    assert saved.created_by == "manager"
    assert saved.created_at is not None
    mock_appointment_repository.save.assert_awaited_once_with(appointment)
    audit = mock_audit_repository.save_audit.await_args.args[0]
    snapshot = json.loads(audit.notes)
    assert snapshot["uuid"] == appointment.uuid
    assert snapshot["appointment_number"] == "0000"
    assert snapshot["providers"][0]["provider_uuid"] == "prov-1"
    assert transaction_factory.call_count == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_existing_number_is_kept(workflow_service, make_appointment, manager):
    appointment = make_appointment(appointment_number="B-2")

    saved = await workflow_service.validate_and_save(appointment, manager)

    assert saved.appointment_number == "B-2"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_teleconsultation_gets_link_and_email_sent(
    workflow_service, mock_appointment_repository, mock_notifier, make_appointment, manager
):
    # Arrange
    appointment = make_appointment(teleconsultation=True)
    mock_notifier.notify_all.return_value = [
        NotificationResult(medium="SMS", status=3, message="no phone number"),
        NotificationResult(medium="EMAIL", status=NotificationResult.SUCCESS_STATUS),
    ]

    # Act
    saved = await workflow_service.validate_and_save(appointment, manager)

    # Assert
    assert saved.tele_health_video_link == f"https://meet.example.org/{appointment.uuid}"
    assert saved.email_sent is True
    assert mock_appointment_repository.save.await_count == 2


@pytest.mark.unit
@pytest.mark.asyncio
async def test_notifier_failure_does_not_fail_save(
    workflow_service, mock_appointment_repository, mock_notifier, make_appointment, manager
):
    """Test a crashing notifier is logged and swallowed."""
    # Arrange
    appointment = make_appointment(teleconsultation=True)
    mock_notifier.notify_all.side_effect = RuntimeError("smtp down")

    # Act
    saved = await workflow_service.validate_and_save(appointment, manager)

    # Assert
    assert saved.email_sent is False
    mock_appointment_repository.save.assert_awaited_once_with(appointment)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_medium_is_logged(workflow_service, mock_notifier, make_appointment, manager, caplog):
    # Arrange
    appointment = make_appointment(teleconsultation=True)
    mock_notifier.notify_all.return_value = [
        NotificationResult(medium="SMS", status=2, message="bounced", uuid=appointment.uuid)
    ]

    # Act
    with caplog.at_level(logging.ERROR):
        saved = await workflow_service.validate_and_save(appointment, manager)

    # Assert
    assert saved.email_sent is False
    assert (
        f"Could not send notification for medium: SMS, uuid: {appointment.uuid}, status: 2, errMsg: bounced"
        in caplog.text
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_non_teleconsultation_is_not_notified(workflow_service, mock_notifier, make_appointment, manager):
    await workflow_service.validate_and_save(make_appointment(), manager)

    mock_notifier.notify_all.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_validation_failure_saves_nothing(
    workflow_service, mock_appointment_repository, mock_audit_repository, make_appointment, manager
):
    # Arrange
    appointment = make_appointment()
    appointment.service = None

    # Act & Assert
    with pytest.raises(ValidationException) as exc_info:
        await workflow_service.validate_and_save(appointment, manager)
    assert exc_info.value.violations == ["Appointment cannot be created without Service"]
    mock_appointment_repository.save.assert_not_called()
    mock_audit_repository.save_audit.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_edit_runs_edit_validators(workflow_service, mock_appointment_repository, make_appointment, manager):
    # Arrange
    appointment = make_appointment(status=AppointmentStatus.COMPLETED)
    mock_appointment_repository.find_by_uuid.return_value = appointment

    # Act & Assert
    with pytest.raises(ValidationException) as exc_info:
        await workflow_service.validate_and_save(appointment, manager)
    assert exc_info.value.violations == ["Appointment with status Completed cannot be edited"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_edit_stamps_updated_by(workflow_service, mock_appointment_repository, make_appointment, manager):
    # Arrange
    appointment = make_appointment()
    mock_appointment_repository.find_by_uuid.return_value = appointment

    # Act
    saved = await workflow_service.validate_and_save(appointment, manager)

    # Assert
    assert saved.updated_by == "manager"
    assert saved.created_by is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_save_rejects_outsider_on_assigned_appointment(workflow_service, make_appointment, outsider):
    with pytest.raises(AuthorizationException):
        await workflow_service.validate_and_save(make_appointment(providers=[1]), outsider)


# ============================================================================
# Status operations
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_change_status_by_uuid_and_status_name(
    workflow_service, mock_appointment_repository, make_appointment, manager
):
    # Arrange
    appointment = make_appointment()
    mock_appointment_repository.find_by_uuid.return_value = appointment

    # Act
    result = await workflow_service.change_status(appointment.uuid, "Cancelled", manager)

    # Assert
    assert result.status == AppointmentStatus.CANCELLED
    mock_appointment_repository.find_by_uuid.assert_awaited_once_with(appointment.uuid)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_change_status_of_unknown_appointment(workflow_service, manager):
    with pytest.raises(EntityNotFoundException):
        await workflow_service.change_status("missing", AppointmentStatus.CANCELLED, manager)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_undo_without_history(workflow_service, mock_appointment_repository, make_appointment, manager):
    mock_appointment_repository.find_by_uuid.return_value = make_appointment()

    with pytest.raises(ConflictStateException):
        await workflow_service.undo_status_change("any", manager)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_record_provider_response_by_uuid(
    workflow_service, mock_appointment_repository, make_appointment, doctor_one
):
    # Arrange
    appointment = make_appointment(status=AppointmentStatus.REQUESTED, providers=[1])
    mock_appointment_repository.find_by_uuid.return_value = appointment

    # Act
    result = await workflow_service.record_provider_response(
        appointment.uuid, "prov-1", ProviderResponse.ACCEPTED, doctor_one
    )

    # Assert
    assert result.status == AppointmentStatus.SCHEDULED
    assert len(result.audits) == 1


# ============================================================================
# Queries
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_without_start_date_returns_nothing(
    workflow_service, mock_appointment_repository, transaction_factory
):
    result = await workflow_service.search(AppointmentSearchRequest(patient_uuid="patient-1"))

    assert result == []
    mock_appointment_repository.search.assert_not_called()
    transaction_factory.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_search_respects_include_voided(
    workflow_service, mock_appointment_repository, make_appointment, tomorrow_at_ten
):
    # Arrange
    active = make_appointment()
    voided = make_appointment()
    voided.void()
    mock_appointment_repository.search.return_value = [active, voided]

    # Act
    default = await workflow_service.search(AppointmentSearchRequest(start_date=tomorrow_at_ten))
    with_voided = await workflow_service.search(
        AppointmentSearchRequest(start_date=tomorrow_at_ten, include_voided=True)
    )

    # Assert
    assert default == [active]
    assert with_voided == [active, voided]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_queries_hide_appointments_for_voided_services(
    workflow_service, mock_appointment_repository, make_appointment
):
    # Arrange
    visible = make_appointment()
    hidden = make_appointment()
    hidden.service_type = ServiceRef(uuid="type-1", voided=True)
    mock_appointment_repository.find_all_for_date.return_value = [visible, hidden]

    # Act
    result = await workflow_service.get_all_appointments(date.today())

    # Assert
    assert result == [visible]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_appointments_for_service_passes_filters(
    workflow_service, mock_appointment_repository, tomorrow_at_ten
):
    # Arrange
    mock_appointment_repository.find_for_service.return_value = []
    end = tomorrow_at_ten + timedelta(days=7)

    # Act
    await workflow_service.get_appointments_for_service(
        "service-1", tomorrow_at_ten, end, [AppointmentStatus.SCHEDULED]
    )

    # Assert
    mock_appointment_repository.find_for_service.assert_awaited_once_with(
        "service-1", tomorrow_at_ten, end, [AppointmentStatus.SCHEDULED]
    )


# ============================================================================
# Conflicts
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_batch_conflicts_assign_numbers_first(workflow_service, make_appointment):
    # Arrange
    appointments = [make_appointment(), make_appointment(appointment_number="C-9")]

    # Act
    result = await workflow_service.get_appointments_conflicts(appointments)

    # Assert
    assert result == {}
    assert [a.appointment_number for a in appointments] == ["0000", "C-9"]
