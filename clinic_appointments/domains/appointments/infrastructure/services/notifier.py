"""
Logging notifier.

Stands in for real email/SMS delivery: returns one result per configured
medium and logs what would have been sent. Nothing is kept between calls.
"""

import logging

from clinic_appointments.domains.appointments.application.ports.notification_port import (
    IAppointmentNotifier,
    NotificationResult,
)
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment

logger = logging.getLogger(__name__)

MISSING_PATIENT_STATUS = 1


class LoggingAppointmentNotifier(IAppointmentNotifier):
    """Notifier that only logs. Useful in development and tests."""

    def __init__(self, mediums: list[str] | None = None):
        self.mediums = mediums or ["EMAIL"]

    async def notify_all(self, appointment: Appointment) -> list[NotificationResult]:
        results = []
        for medium in self.mediums:
            if appointment.patient is None:
                results.append(
                    NotificationResult(
                        medium=medium,
                        status=MISSING_PATIENT_STATUS,
                        message="Appointment has no patient to notify",
                        uuid=appointment.uuid,
                    )
                )
                continue

            logger.info(
                f"[{medium}] Appointment {appointment.uuid} for patient {appointment.patient.uuid}: "
                f"{appointment.tele_health_video_link or 'no video link'}"
            )
            results.append(
                NotificationResult(medium=medium, status=NotificationResult.SUCCESS_STATUS, uuid=appointment.uuid)
            )
        return results
