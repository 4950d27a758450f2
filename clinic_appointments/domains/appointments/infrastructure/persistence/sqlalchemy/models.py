"""
Appointment SQLAlchemy Models

Database models for appointment workflow persistence.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from clinic_appointments.database.base import Base
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import (
    AppointmentKind,
    AppointmentStatus,
    ProviderResponse,
)


def _enum_values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class AppointmentModel(Base):
    """SQLAlchemy model for Appointment entity."""

    __tablename__ = "appointment"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(38), unique=True, nullable=False, index=True)
    appointment_number = Column(String(50), nullable=True)

    # References to external catalogues
    patient_uuid = Column(String(38), nullable=True, index=True)
    patient_name = Column(String(255), nullable=True)
    service_uuid = Column(String(38), nullable=True, index=True)
    service_name = Column(String(255), nullable=True)
    service_voided = Column(Boolean, default=False, nullable=False)
    service_type_uuid = Column(String(38), nullable=True, index=True)
    service_type_name = Column(String(255), nullable=True)
    service_type_voided = Column(Boolean, default=False, nullable=False)
    location_uuid = Column(String(38), nullable=True)

    # Scheduling
    start_datetime = Column(DateTime(timezone=True), nullable=True, index=True)
    end_datetime = Column(DateTime(timezone=True), nullable=True)
    status = Column(
        SQLEnum(AppointmentStatus, values_callable=_enum_values, native_enum=False, length=32),
        default=AppointmentStatus.SCHEDULED,
        nullable=False,
    )
    appointment_kind = Column(
        SQLEnum(AppointmentKind, values_callable=_enum_values, native_enum=False, length=32),
        default=AppointmentKind.SCHEDULED,
        nullable=False,
    )

    # Teleconsultation
    teleconsultation = Column(Boolean, default=False, nullable=False)
    tele_health_video_link = Column(String(500), nullable=True)
    email_sent = Column(Boolean, default=False, nullable=False)

    comments = Column(Text, nullable=True)

    # Voiding
    voided = Column(Boolean, default=False, nullable=False)
    voided_at = Column(DateTime(timezone=True), nullable=True)
    void_reason = Column(String(255), nullable=True)

    # Provenance
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)
    created_by = Column(String(100), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(100), nullable=True)

    # Relationships
    providers = relationship(
        "AppointmentProviderModel",
        back_populates="appointment",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "uuid": self.uuid,
            "appointment_number": self.appointment_number,
            "patient_uuid": self.patient_uuid,
            "service_uuid": self.service_uuid,
            "start_datetime": self.start_datetime.isoformat() if self.start_datetime else None,
            "end_datetime": self.end_datetime.isoformat() if self.end_datetime else None,
            "status": self.status.value if self.status else None,
            "voided": self.voided,
        }


class AppointmentProviderModel(Base):
    """SQLAlchemy model for a provider assigned to an appointment."""

    __tablename__ = "appointment_provider"
    __table_args__ = (UniqueConstraint("appointment_id", "provider_uuid", name="uq_appointment_provider"),)

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointment.id", ondelete="CASCADE"), nullable=False, index=True)
    provider_uuid = Column(String(38), nullable=False, index=True)
    person_uuid = Column(String(38), nullable=False)
    provider_name = Column(String(255), nullable=True)
    response = Column(
        SQLEnum(ProviderResponse, values_callable=_enum_values, native_enum=False, length=16),
        default=ProviderResponse.AWAITING,
        nullable=False,
    )
    comments = Column(Text, nullable=True)

    appointment = relationship("AppointmentModel", back_populates="providers")


class AppointmentAuditModel(Base):
    """SQLAlchemy model for the append-only audit trail."""

    __tablename__ = "appointment_audit"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(38), unique=True, nullable=False)
    appointment_uuid = Column(String(38), ForeignKey("appointment.uuid"), nullable=False, index=True)
    status = Column(
        SQLEnum(AppointmentStatus, values_callable=_enum_values, native_enum=False, length=32),
        nullable=False,
    )
    notes = Column(Text, nullable=True)
    actor = Column(String(100), nullable=True)
    recorded_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False, index=True)
