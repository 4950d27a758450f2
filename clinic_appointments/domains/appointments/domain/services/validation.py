"""
Validation pipeline for appointments.

Validators inspect the whole appointment and append violation messages to
a shared list. The pipeline runs every validator of the selected set in
registration order and raises a single ``ValidationException`` carrying all
messages.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, runtime_checkable

from clinic_appointments.core.domain import ValidationException

from ..entities.appointment import Appointment
from ..value_objects.appointment_status import AppointmentStatus

logger = logging.getLogger(__name__)


@runtime_checkable
class AppointmentValidator(Protocol):
    """Validator run on create/update (and edit-only) paths."""

    def validate(self, appointment: Appointment, errors: list[str]) -> None: ...


@runtime_checkable
class AppointmentStatusChangeValidator(Protocol):
    """Validator run before a status transition."""

    def validate(self, appointment: Appointment, target_status: AppointmentStatus, errors: list[str]) -> None: ...


@dataclass
class ValidatorRegistry:
    """
    Ordered validator sets, passed to the workflow service at construction.

    - appointment: general create/update validators
    - edit: extra validators when updating an existing appointment
    - status_change: validators run before any status transition
    """

    appointment: list[AppointmentValidator] = field(default_factory=list)
    edit: list[AppointmentValidator] = field(default_factory=list)
    status_change: list[AppointmentStatusChangeValidator] = field(default_factory=list)

    @classmethod
    def default(cls, clock: Callable[[], datetime] | None = None) -> "ValidatorRegistry":
        return cls(
            appointment=[RequiredFieldsValidator(), TimeRangeValidator(), VoidedServiceValidator()],
            edit=[EditableStatusValidator()],
            status_change=[VoidedAppointmentStatusValidator(), CheckInTimeValidator(clock=clock)],
        )


class ValidationPipeline:
    """Runs a validator set without short-circuiting."""

    def validate(self, appointment: Appointment, validators: Iterable[AppointmentValidator]) -> None:
        """
        Run all validators against the appointment.

        Raises:
            ValidationException: If any validator reported a violation.
        """
        errors: list[str] = []
        for validator in validators:
            validator.validate(appointment, errors)
        self._raise_if_any(appointment, errors)

    def validate_status_change(
        self,
        appointment: Appointment,
        target_status: AppointmentStatus,
        validators: Iterable[AppointmentStatusChangeValidator],
    ) -> None:
        """
        Run all status-change validators for a transition to ``target_status``.

        Raises:
            ValidationException: If any validator reported a violation.
        """
        errors: list[str] = []
        for validator in validators:
            validator.validate(appointment, target_status, errors)
        self._raise_if_any(appointment, errors)

    def _raise_if_any(self, appointment: Appointment, errors: list[str]) -> None:
        if errors:
            logger.info(f"Appointment {appointment.uuid} failed validation: {errors}")
            raise ValidationException(errors)


# ==================== Reference validators ====================


class RequiredFieldsValidator:
    """Patient, service and the time window are mandatory."""

    def validate(self, appointment: Appointment, errors: list[str]) -> None:
        if appointment.patient is None:
            errors.append("Appointment cannot be created without Patient")
        if appointment.service is None:
            errors.append("Appointment cannot be created without Service")
        if appointment.start_datetime is None or appointment.end_datetime is None:
            errors.append("Appointment cannot be created without start and end time")


class TimeRangeValidator:
    def validate(self, appointment: Appointment, errors: list[str]) -> None:
        if appointment.start_datetime is None or appointment.end_datetime is None:
            return
        if appointment.start_datetime >= appointment.end_datetime:
            errors.append("Appointment start time must be before end time")


class VoidedServiceValidator:
    def validate(self, appointment: Appointment, errors: list[str]) -> None:
        if appointment.service is not None and appointment.service.voided:
            errors.append("Appointment cannot be booked for a voided service")
        if appointment.service_type is not None and appointment.service_type.voided:
            errors.append("Appointment cannot be booked for a voided service type")


class EditableStatusValidator:
    """Appointments in a terminal status, or voided ones, cannot be edited."""

    def validate(self, appointment: Appointment, errors: list[str]) -> None:
        if appointment.voided:
            errors.append("Voided appointment cannot be edited")
        if appointment.status.is_terminal():
            errors.append(f"Appointment with status {appointment.status.value} cannot be edited")


class VoidedAppointmentStatusValidator:
    def validate(self, appointment: Appointment, target_status: AppointmentStatus, errors: list[str]) -> None:
        if appointment.voided:
            errors.append("Status of a voided appointment cannot be changed")


class CheckInTimeValidator:
    """A patient cannot be checked in before the day of the appointment."""

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._clock = clock or (lambda: datetime.now(UTC))

    def validate(self, appointment: Appointment, target_status: AppointmentStatus, errors: list[str]) -> None:
        if target_status != AppointmentStatus.CHECKED_IN or appointment.start_datetime is None:
            return
        now = self._clock()
        if appointment.start_datetime.tzinfo is None:
            now = now.replace(tzinfo=None)
        start_of_appointment_day = appointment.start_datetime.replace(hour=0, minute=0, second=0, microsecond=0)
        if now < start_of_appointment_day:
            errors.append("Appointment cannot be checked in before its scheduled day")
