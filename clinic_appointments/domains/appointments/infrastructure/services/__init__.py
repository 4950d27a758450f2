"""
Appointment infrastructure adapters for the smaller collaborators.
"""

from .notifier import LoggingAppointmentNotifier
from .number_generator import DefaultAppointmentNumberGenerator
from .snapshot_serializer import JsonAppointmentSerializer
from .teleconsultation import TeleconsultationLinkService

__all__ = [
    "LoggingAppointmentNotifier",
    "DefaultAppointmentNumberGenerator",
    "JsonAppointmentSerializer",
    "TeleconsultationLinkService",
]
