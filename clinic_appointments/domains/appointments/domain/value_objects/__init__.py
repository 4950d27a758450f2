"""
Appointment Domain Value Objects
"""

from .actor import (
    MANAGE_APPOINTMENTS,
    MANAGE_OWN_APPOINTMENTS,
    RESET_APPOINTMENT_STATUS,
    Actor,
)
from .appointment_status import (
    TERMINAL_STATUSES,
    AppointmentKind,
    AppointmentStatus,
    PatientRef,
    ProviderRef,
    ProviderResponse,
    ServiceRef,
)
from .conflict import AppointmentConflict, AppointmentConflictType

__all__ = [
    "Actor",
    "MANAGE_APPOINTMENTS",
    "MANAGE_OWN_APPOINTMENTS",
    "RESET_APPOINTMENT_STATUS",
    "AppointmentStatus",
    "AppointmentKind",
    "ProviderResponse",
    "TERMINAL_STATUSES",
    "PatientRef",
    "ServiceRef",
    "ProviderRef",
    "AppointmentConflict",
    "AppointmentConflictType",
]
