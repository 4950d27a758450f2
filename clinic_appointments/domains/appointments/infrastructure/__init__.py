"""
Appointments Infrastructure Layer

SQLAlchemy repositories and adapters for the workflow ports.
"""

from clinic_appointments.domains.appointments.infrastructure.repositories import (
    SQLAlchemyAppointmentAuditRepository,
    SQLAlchemyAppointmentRepository,
)
from clinic_appointments.domains.appointments.infrastructure.services import (
    DefaultAppointmentNumberGenerator,
    JsonAppointmentSerializer,
    LoggingAppointmentNotifier,
    TeleconsultationLinkService,
)

__all__ = [
    "SQLAlchemyAppointmentRepository",
    "SQLAlchemyAppointmentAuditRepository",
    "DefaultAppointmentNumberGenerator",
    "JsonAppointmentSerializer",
    "LoggingAppointmentNotifier",
    "TeleconsultationLinkService",
]
