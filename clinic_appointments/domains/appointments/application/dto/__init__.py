"""
Appointment Workflow Application DTOs
"""

from .search import AppointmentSearchRequest
from .snapshot import AppointmentSnapshot, ProviderSnapshot

__all__ = [
    "AppointmentSearchRequest",
    "AppointmentSnapshot",
    "ProviderSnapshot",
]
