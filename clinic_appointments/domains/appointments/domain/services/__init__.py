"""
Appointment Domain Services
"""

from .conflict_detection import (
    AppointmentConflictDetector,
    ConflictDetectorRegistry,
    ConflictMap,
    OverlappingAppointmentLookup,
    PatientDoubleBookingDetector,
    ProviderDoubleBookingDetector,
)
from .status_policy import AppointmentAccessPolicy, StatusTransitionPolicy
from .validation import (
    AppointmentStatusChangeValidator,
    AppointmentValidator,
    CheckInTimeValidator,
    EditableStatusValidator,
    RequiredFieldsValidator,
    TimeRangeValidator,
    ValidationPipeline,
    ValidatorRegistry,
    VoidedAppointmentStatusValidator,
    VoidedServiceValidator,
)

__all__ = [
    # Conflicts
    "AppointmentConflictDetector",
    "OverlappingAppointmentLookup",
    "ConflictDetectorRegistry",
    "ConflictMap",
    "PatientDoubleBookingDetector",
    "ProviderDoubleBookingDetector",
    # Status rules
    "AppointmentAccessPolicy",
    "StatusTransitionPolicy",
    # Validation
    "AppointmentValidator",
    "AppointmentStatusChangeValidator",
    "ValidatorRegistry",
    "ValidationPipeline",
    "RequiredFieldsValidator",
    "TimeRangeValidator",
    "VoidedServiceValidator",
    "EditableStatusValidator",
    "VoidedAppointmentStatusValidator",
    "CheckInTimeValidator",
]
