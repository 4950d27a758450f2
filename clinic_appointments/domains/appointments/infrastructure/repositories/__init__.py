"""
Appointment Repository Implementations
"""

from .appointment_repository import SQLAlchemyAppointmentRepository
from .audit_repository import SQLAlchemyAppointmentAuditRepository

__all__ = ["SQLAlchemyAppointmentRepository", "SQLAlchemyAppointmentAuditRepository"]
