"""
Appointment snapshot schema.

The JSON form of this model is what gets written to audit notes when an
appointment is saved or cancelled by a reschedule.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment


class ProviderSnapshot(BaseModel):
    """Provider entry as captured in a snapshot."""

    model_config = ConfigDict(frozen=True)

    provider_uuid: str
    person_uuid: str
    name: str | None = None
    response: str


class AppointmentSnapshot(BaseModel):
    """Serializable view of an appointment at one point in time."""

    model_config = ConfigDict(frozen=True)

    uuid: str
    appointment_number: str | None = None
    patient_uuid: str | None = None
    service_uuid: str | None = None
    service_type_uuid: str | None = None
    location_uuid: str | None = None
    providers: list[ProviderSnapshot] = Field(default_factory=list)
    start_datetime: datetime | None = None
    end_datetime: datetime | None = None
    status: str
    appointment_kind: str
    teleconsultation: bool = False
    tele_health_video_link: str | None = None
    comments: str | None = None
    voided: bool = False

    @classmethod
    def from_entity(cls, appointment: Appointment) -> "AppointmentSnapshot":
        return cls(
            uuid=appointment.uuid,
            appointment_number=appointment.appointment_number,
            patient_uuid=appointment.patient.uuid if appointment.patient else None,
            service_uuid=appointment.service.uuid if appointment.service else None,
            service_type_uuid=appointment.service_type.uuid if appointment.service_type else None,
            location_uuid=appointment.location_uuid,
            providers=[
                ProviderSnapshot(
                    provider_uuid=p.provider.uuid,
                    person_uuid=p.provider.person_uuid,
                    name=p.provider.name,
                    response=p.response.value,
                )
                for p in appointment.providers
            ],
            start_datetime=appointment.start_datetime,
            end_datetime=appointment.end_datetime,
            status=appointment.status.value,
            appointment_kind=appointment.appointment_kind.value,
            teleconsultation=appointment.teleconsultation,
            tele_health_video_link=appointment.tele_health_video_link,
            comments=appointment.comments,
            voided=appointment.voided,
        )
