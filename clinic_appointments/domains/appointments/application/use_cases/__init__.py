"""
Appointment Workflow Use Cases

Application layer use cases returning explicit results instead of raising.
"""

from clinic_appointments.domains.appointments.application.use_cases.change_status import (
    ChangeAppointmentStatusUseCase,
    ChangeStatusRequest,
    ChangeStatusResponse,
    UndoStatusChangeRequest,
    UndoStatusChangeUseCase,
)
from clinic_appointments.domains.appointments.application.use_cases.detect_conflicts import (
    DetectConflictsRequest,
    DetectConflictsResponse,
    DetectConflictsUseCase,
)
from clinic_appointments.domains.appointments.application.use_cases.record_provider_response import (
    RecordProviderResponseRequest,
    RecordProviderResponseResponse,
    RecordProviderResponseUseCase,
)
from clinic_appointments.domains.appointments.application.use_cases.reschedule_appointment import (
    RescheduleAppointmentRequest,
    RescheduleAppointmentResponse,
    RescheduleAppointmentUseCase,
)
from clinic_appointments.domains.appointments.application.use_cases.save_appointment import (
    SaveAppointmentRequest,
    SaveAppointmentResponse,
    SaveAppointmentUseCase,
)
from clinic_appointments.domains.appointments.application.use_cases.search_appointments import (
    SearchAppointmentsRequest,
    SearchAppointmentsResponse,
    SearchAppointmentsUseCase,
)

__all__ = [
    # Save
    "SaveAppointmentRequest",
    "SaveAppointmentResponse",
    "SaveAppointmentUseCase",
    # Status
    "ChangeStatusRequest",
    "ChangeStatusResponse",
    "ChangeAppointmentStatusUseCase",
    "UndoStatusChangeRequest",
    "UndoStatusChangeUseCase",
    # Provider response
    "RecordProviderResponseRequest",
    "RecordProviderResponseResponse",
    "RecordProviderResponseUseCase",
    # Reschedule
    "RescheduleAppointmentRequest",
    "RescheduleAppointmentResponse",
    "RescheduleAppointmentUseCase",
    # Conflicts
    "DetectConflictsRequest",
    "DetectConflictsResponse",
    "DetectConflictsUseCase",
    # Search
    "SearchAppointmentsRequest",
    "SearchAppointmentsResponse",
    "SearchAppointmentsUseCase",
]
