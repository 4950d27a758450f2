"""
Default appointment-number assignment.
"""

from clinic_appointments.domains.appointments.application.ports.collaborators import IAppointmentNumberGenerator
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment


class DefaultAppointmentNumberGenerator(IAppointmentNumberGenerator):
    """Gives every appointment the same configured number."""

    def __init__(self, default_number: str = "0000"):
        self.default_number = default_number

    def generate(self, appointment: Appointment) -> str:
        return self.default_number
