"""
Appointment Workflow Application Services
"""

from .audit_trail import AppointmentAuditTrail
from .provider_response import ProviderResponseCoordinator
from .reschedule import RescheduleOrchestrator
from .status_machine import AppointmentStatusMachine
from .workflow_service import AppointmentWorkflowService

__all__ = [
    "AppointmentAuditTrail",
    "AppointmentStatusMachine",
    "ProviderResponseCoordinator",
    "RescheduleOrchestrator",
    "AppointmentWorkflowService",
]
