"""Appointment Workflow Application Ports.

Interface definitions (ports) for everything the workflow engine treats as
an external collaborator.
"""

from .appointment_repository import IAppointmentRepository
from .audit_repository import IAppointmentAuditRepository
from .collaborators import (
    IActorContext,
    IAppointmentNumberGenerator,
    IAppointmentSerializer,
    ITeleconsultationLinkGenerator,
)
from .notification_port import IAppointmentNotifier, NotificationResult

__all__ = [
    "IAppointmentRepository",
    "IAppointmentAuditRepository",
    "IAppointmentNotifier",
    "NotificationResult",
    "ITeleconsultationLinkGenerator",
    "IAppointmentNumberGenerator",
    "IAppointmentSerializer",
    "IActorContext",
]
