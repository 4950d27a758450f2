"""
Dependency Injection Containers
"""

from clinic_appointments.core.container.appointments import AppointmentsContainer

__all__ = ["AppointmentsContainer"]
