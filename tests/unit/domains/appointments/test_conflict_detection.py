"""
Unit tests for conflict detection.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from clinic_appointments.domains.appointments.domain.services import (
    ConflictDetectorRegistry,
    PatientDoubleBookingDetector,
    ProviderDoubleBookingDetector,
)
from clinic_appointments.domains.appointments.domain.services.conflict_detection import _OverlapDetector
from clinic_appointments.domains.appointments.domain.value_objects import (
    AppointmentConflictType,
    AppointmentStatus,
    ProviderResponse,
)


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def lookup():
    """Booked-appointment lookup with nothing booked."""
    mock = AsyncMock()
    mock.find_overlapping.return_value = []
    return mock


@pytest.fixture
def counting_detector():
    detector = AsyncMock()
    detector.conflict_type = AppointmentConflictType.PATIENT_DOUBLE_BOOKING
    detector.get_conflicts.return_value = []
    return detector


# ============================================================================
# Registry Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_empty_batch_never_reaches_a_detector(counting_detector):
    # Arrange
    registry = ConflictDetectorRegistry([counting_detector])

    # Act
    result = await registry.detect_for_batch([])

    # Assert
    assert result == {}
    counting_detector.get_conflicts.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_voided_and_past_appointments_are_filtered_out(counting_detector, make_appointment):
    """When every candidate is filtered out, no detector runs."""
    # Arrange
    voided = make_appointment()
    voided.void()
    past = make_appointment(start=datetime.now(UTC) - timedelta(days=3))
    registry = ConflictDetectorRegistry([counting_detector])

    # Act
    result = await registry.detect_for_batch([voided, past])

    # Assert
    assert result == {}
    counting_detector.get_conflicts.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_earlier_today_is_still_a_candidate(counting_detector, make_appointment):
    # Arrange
    now = datetime(2026, 3, 10, 15, 0, tzinfo=UTC)
    this_morning = make_appointment(start=now.replace(hour=8))
    registry = ConflictDetectorRegistry([counting_detector], clock=lambda: now)

    # Act
    await registry.detect_for_batch([this_morning])

    # Assert
    counting_detector.get_conflicts.assert_awaited_once_with([this_morning])


@pytest.mark.unit
@pytest.mark.asyncio
async def test_kinds_without_conflicts_are_omitted(lookup, make_appointment):
    # Arrange
    registry = ConflictDetectorRegistry([PatientDoubleBookingDetector(lookup), ProviderDoubleBookingDetector(lookup)])

    # Act
    result = await registry.detect([make_appointment(providers=[1])])

    # Assert
    assert result == {}


# ============================================================================
# Detector Tests
# ============================================================================


@pytest.mark.unit
@pytest.mark.asyncio
async def test_patient_double_booking_within_batch(lookup, make_appointment, tomorrow_at_ten):
    # Arrange
    first = make_appointment()
    second = make_appointment(start=tomorrow_at_ten + timedelta(minutes=10))
    other_patient = make_appointment(patient_uuid="patient-2")
    registry = ConflictDetectorRegistry([PatientDoubleBookingDetector(lookup)])

    # Act
    result = await registry.detect_for_batch([first, second, other_patient])

    # Assert
    assert list(result) == [AppointmentConflictType.PATIENT_DOUBLE_BOOKING]
    assert result[AppointmentConflictType.PATIENT_DOUBLE_BOOKING] == [first, second]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_provider_double_booking_against_booked(lookup, make_appointment):
    # Arrange
    booked = make_appointment(patient_uuid="patient-2", providers=[1])
    lookup.find_overlapping.return_value = [booked]
    candidate = make_appointment(providers=[1])
    detector = ProviderDoubleBookingDetector(lookup)

    # Act
    conflicts = await detector.get_conflicts([candidate])

    # Assert
    assert conflicts == [candidate]
    lookup.find_overlapping.assert_awaited_once_with(
        candidate.start_datetime, candidate.end_datetime, provider_uuid="prov-1"
    )


@pytest.mark.unit
@pytest.mark.asyncio
async def test_declined_provider_is_not_double_booked(lookup, make_appointment):
    # Arrange
    booked = make_appointment(patient_uuid="patient-2", providers=[1])
    candidate = make_appointment(providers=[1])
    candidate.providers[0].response = ProviderResponse.DECLINED

    # Act
    conflicts = await ProviderDoubleBookingDetector(lookup).get_conflicts([candidate, booked])

    # Assert
    assert conflicts == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cancelled_appointment_never_blocks(lookup, make_appointment):
    # Arrange
    cancelled = make_appointment(status=AppointmentStatus.CANCELLED)
    lookup.find_overlapping.return_value = [cancelled]
    candidate = make_appointment()

    # Act
    conflicts = await PatientDoubleBookingDetector(lookup).get_conflicts([candidate])

    # Assert
    assert conflicts == []


@pytest.mark.unit
def test_overlap_detector_requires_both_hooks(lookup):
    class KeysOnly(_OverlapDetector):
        conflict_type = AppointmentConflictType.PATIENT_DOUBLE_BOOKING

        def _keys(self, appointment):
            return set()

    with pytest.raises(TypeError):
        KeysOnly(lookup)

    assert PatientDoubleBookingDetector(lookup)._lookup is lookup
