"""
Appointments Application Layer

Ports, DTOs, workflow services and use cases.
"""

from clinic_appointments.domains.appointments.application.services import AppointmentWorkflowService

__all__ = ["AppointmentWorkflowService"]
