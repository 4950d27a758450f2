"""
Appointment Domain Entities
"""

from .appointment import Appointment, AppointmentProvider
from .audit import AppointmentAudit

__all__ = [
    "Appointment",
    "AppointmentProvider",
    "AppointmentAudit",
]
