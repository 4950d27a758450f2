"""
Conflict detection for appointments.

Each detector is an independent strategy: given a batch of candidate
appointments it returns the subset it considers conflicting under its own
rule. The registry aggregates them by conflict type.

Detection is advisory. It reads without locking, so a conflict reported now
may already be stale when the caller acts on it.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from ..entities.appointment import Appointment
from ..value_objects.appointment_status import AppointmentStatus
from ..value_objects.conflict import AppointmentConflictType

logger = logging.getLogger(__name__)

ConflictMap = dict[AppointmentConflictType, list[Appointment]]


@runtime_checkable
class AppointmentConflictDetector(Protocol):
    """Strategy that finds conflicting appointments in a batch."""

    conflict_type: AppointmentConflictType

    async def get_conflicts(self, appointments: list[Appointment]) -> list[Appointment]: ...


@runtime_checkable
class OverlappingAppointmentLookup(Protocol):
    """Read access to already-booked appointments, used by the reference detectors."""

    async def find_overlapping(
        self,
        start: datetime,
        end: datetime,
        patient_uuid: str | None = None,
        provider_uuid: str | None = None,
    ) -> list[Appointment]: ...


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class ConflictDetectorRegistry:
    """
    Ordered, explicit set of conflict detectors.

    Example:
        ```python
        registry = ConflictDetectorRegistry([
            PatientDoubleBookingDetector(repository),
            ProviderDoubleBookingDetector(repository),
        ])
        conflicts = await registry.detect_for_batch(appointments)
        ```
    """

    def __init__(
        self,
        detectors: Iterable[AppointmentConflictDetector] | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self._detectors = list(detectors or [])
        self._clock = clock or (lambda: datetime.now(UTC))

    @property
    def detectors(self) -> list[AppointmentConflictDetector]:
        return list(self._detectors)

    def register(self, detector: AppointmentConflictDetector) -> None:
        self._detectors.append(detector)

    async def detect(self, appointments: list[Appointment]) -> ConflictMap:
        """
        Run every detector over the full batch.

        A conflict type is present in the result only if its detector
        found something.
        """
        conflicts: ConflictMap = {}
        for detector in self._detectors:
            found = await detector.get_conflicts(appointments)
            if found:
                conflicts[detector.conflict_type] = found
        return conflicts

    def filter_candidates(self, appointments: Iterable[Appointment]) -> list[Appointment]:
        """Keep non-voided appointments that start today or later."""
        today = start_of_day(self._clock())
        candidates = []
        for appointment in appointments:
            if appointment.voided or appointment.start_datetime is None:
                continue
            boundary = today if appointment.start_datetime.tzinfo else today.replace(tzinfo=None)
            if appointment.start_datetime < boundary:
                continue
            candidates.append(appointment)
        return candidates

    async def detect_for_batch(self, appointments: list[Appointment]) -> ConflictMap:
        """Filter to current candidates, then detect; empty input never reaches a detector."""
        candidates = self.filter_candidates(appointments)
        if not candidates:
            return {}
        return await self.detect(candidates)


class _OverlapDetector(ABC):
    """Shared logic: compare each candidate to booked appointments and to the rest of the batch."""

    conflict_type: AppointmentConflictType

    def __init__(self, lookup: OverlappingAppointmentLookup):
        self._lookup = lookup

    @abstractmethod
    def _keys(self, appointment: Appointment) -> set[str]:
        """Patient or provider uuids this detector double-books on."""

    @abstractmethod
    async def _existing_for(self, appointment: Appointment, key: str) -> list[Appointment]:
        """Booked appointments overlapping ``appointment`` for ``key``."""

    @staticmethod
    def _is_blocking(appointment: Appointment) -> bool:
        return not appointment.voided and appointment.status != AppointmentStatus.CANCELLED

    async def get_conflicts(self, appointments: list[Appointment]) -> list[Appointment]:
        conflicting: list[Appointment] = []
        for appointment in appointments:
            if appointment.start_datetime is None or appointment.end_datetime is None:
                continue
            if self._conflicts(appointment, appointments) or await self._conflicts_with_booked(appointment):
                conflicting.append(appointment)
        if conflicting:
            logger.debug(f"{self.conflict_type.value}: {[a.uuid for a in conflicting]}")
        return conflicting

    def _conflicts(self, appointment: Appointment, others: Iterable[Appointment]) -> bool:
        keys = self._keys(appointment)
        for other in others:
            if other.uuid == appointment.uuid or not self._is_blocking(other):
                continue
            if keys & self._keys(other) and appointment.overlaps_with(other):
                return True
        return False

    async def _conflicts_with_booked(self, appointment: Appointment) -> bool:
        for key in self._keys(appointment):
            existing = await self._existing_for(appointment, key)
            if self._conflicts(appointment, existing):
                return True
        return False


class PatientDoubleBookingDetector(_OverlapDetector):
    """The same patient booked into overlapping appointments."""

    conflict_type = AppointmentConflictType.PATIENT_DOUBLE_BOOKING

    def _keys(self, appointment: Appointment) -> set[str]:
        return {appointment.patient.uuid} if appointment.patient else set()

    async def _existing_for(self, appointment: Appointment, key: str) -> list[Appointment]:
        return await self._lookup.find_overlapping(
            appointment.start_datetime, appointment.end_datetime, patient_uuid=key
        )


class ProviderDoubleBookingDetector(_OverlapDetector):
    """A provider who accepted or is awaiting overlapping appointments."""

    conflict_type = AppointmentConflictType.PROVIDER_DOUBLE_BOOKING

    def _keys(self, appointment: Appointment) -> set[str]:
        return {p.provider.uuid for p in appointment.providers if p.response.is_assigned()}

    async def _existing_for(self, appointment: Appointment, key: str) -> list[Appointment]:
        return await self._lookup.find_overlapping(
            appointment.start_datetime, appointment.end_datetime, provider_uuid=key
        )
