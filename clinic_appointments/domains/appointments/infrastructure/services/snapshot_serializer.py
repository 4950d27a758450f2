"""
JSON snapshot serializer for appointment audit notes.
"""

import logging

from pydantic import ValidationError

from clinic_appointments.core.domain import SerializationException
from clinic_appointments.domains.appointments.application.dto.snapshot import AppointmentSnapshot
from clinic_appointments.domains.appointments.application.ports.collaborators import IAppointmentSerializer
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment

logger = logging.getLogger(__name__)


class JsonAppointmentSerializer(IAppointmentSerializer):
    """Encodes appointments with the ``AppointmentSnapshot`` pydantic schema."""

    def to_json_snapshot(self, appointment: Appointment) -> str:
        try:
            return AppointmentSnapshot.from_entity(appointment).model_dump_json()
        except (ValidationError, ValueError, TypeError) as e:
            logger.error(f"Could not serialize appointment {appointment.uuid}: {e}")
            raise SerializationException(f"Could not serialize appointment {appointment.uuid}", original_error=e) from e

    @staticmethod
    def from_json_snapshot(data: str) -> AppointmentSnapshot:
        """Parse audit notes written by ``to_json_snapshot``."""
        try:
            return AppointmentSnapshot.model_validate_json(data)
        except ValidationError as e:
            raise SerializationException("Audit notes are not an appointment snapshot", original_error=e) from e
