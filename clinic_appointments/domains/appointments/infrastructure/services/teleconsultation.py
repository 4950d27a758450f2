"""
Teleconsultation link generation.
"""

from clinic_appointments.domains.appointments.application.ports.collaborators import ITeleconsultationLinkGenerator
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment


class TeleconsultationLinkService(ITeleconsultationLinkGenerator):
    """Builds ``{base_url}/{appointment uuid}`` video-consultation links."""

    def __init__(self, base_url: str):
        self.base_url = base_url.rstrip("/")

    def generate_link(self, appointment: Appointment) -> str:
        return f"{self.base_url}/{appointment.uuid}"
