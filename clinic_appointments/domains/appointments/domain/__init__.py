"""
Appointments Domain Layer

Core business logic for the appointment workflow bounded context.

Components:
- Entities: Appointment (aggregate root), AppointmentProvider, AppointmentAudit
- Value Objects: AppointmentStatus, ProviderResponse, Actor, references, conflicts
- Domain Services: status/access policies, validation pipeline, conflict detection
"""

from clinic_appointments.domains.appointments.domain.entities import (
    Appointment,
    AppointmentAudit,
    AppointmentProvider,
)
from clinic_appointments.domains.appointments.domain.services import (
    AppointmentAccessPolicy,
    ConflictDetectorRegistry,
    StatusTransitionPolicy,
    ValidationPipeline,
    ValidatorRegistry,
)
from clinic_appointments.domains.appointments.domain.value_objects import (
    Actor,
    AppointmentConflictType,
    AppointmentKind,
    AppointmentStatus,
    PatientRef,
    ProviderRef,
    ProviderResponse,
    ServiceRef,
)

__all__ = [
    # Entities
    "Appointment",
    "AppointmentProvider",
    "AppointmentAudit",
    # Value Objects
    "Actor",
    "AppointmentStatus",
    "AppointmentKind",
    "ProviderResponse",
    "AppointmentConflictType",
    "PatientRef",
    "ProviderRef",
    "ServiceRef",
    # Services
    "AppointmentAccessPolicy",
    "StatusTransitionPolicy",
    "ValidationPipeline",
    "ValidatorRegistry",
    "ConflictDetectorRegistry",
]
