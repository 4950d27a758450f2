"""
Appointment Repository Implementation

SQLAlchemy implementation of IAppointmentRepository.
"""

import logging
from datetime import UTC, date, datetime, time, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from clinic_appointments.domains.appointments.application.dto.search import AppointmentSearchRequest
from clinic_appointments.domains.appointments.application.ports.appointment_repository import IAppointmentRepository
from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment, AppointmentProvider
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import (
    AppointmentStatus,
    PatientRef,
    ProviderRef,
    ServiceRef,
)
from clinic_appointments.domains.appointments.infrastructure.persistence.sqlalchemy.models import (
    AppointmentAuditModel,
    AppointmentModel,
    AppointmentProviderModel,
)
from clinic_appointments.domains.appointments.infrastructure.repositories.audit_repository import audit_to_entity

logger = logging.getLogger(__name__)


def _start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


class SQLAlchemyAppointmentRepository(IAppointmentRepository):
    """
    SQLAlchemy implementation of appointment repository.

    Only flushes; committing is left to the transaction opened by the
    workflow service.
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_uuid(self, uuid: str) -> Appointment | None:
        """Find appointment by uuid, with its audit trail."""
        model = await self._find_model(uuid)
        if model is None:
            return None

        appointment = self._to_entity(model)
        result = await self.session.execute(
            select(AppointmentAuditModel)
            .where(AppointmentAuditModel.appointment_uuid == uuid)
            .order_by(AppointmentAuditModel.recorded_at, AppointmentAuditModel.id)
        )
        for audit_model in result.scalars().all():
            appointment.add_audit(audit_to_entity(audit_model))
        return appointment

    async def save(self, appointment: Appointment) -> Appointment:
        """Insert or update by uuid, then flush so the row id is known."""
        model = await self._find_model(appointment.uuid)
        if model is None:
            model = self._to_model(appointment)
            self.session.add(model)
        else:
            self._update_model(model, appointment)

        await self.session.flush()
        appointment.id = model.id
        logger.debug(f"Appointment {appointment.uuid} flushed with id {model.id}")
        return appointment

    async def search(self, request: AppointmentSearchRequest) -> list[Appointment]:
        """Structured search; start_date is required."""
        if request.start_date is None:
            return []

        query = select(AppointmentModel).where(AppointmentModel.start_datetime >= request.start_date)

        if request.end_date is not None:
            query = query.where(AppointmentModel.start_datetime <= request.end_date)
        if request.patient_uuid:
            query = query.where(AppointmentModel.patient_uuid == request.patient_uuid)
        if request.provider_uuid:
            query = query.where(
                AppointmentModel.providers.any(AppointmentProviderModel.provider_uuid == request.provider_uuid)
            )
        if request.service_uuid:
            query = query.where(AppointmentModel.service_uuid == request.service_uuid)
        if request.location_uuid:
            query = query.where(AppointmentModel.location_uuid == request.location_uuid)
        if request.statuses:
            query = query.where(AppointmentModel.status.in_(request.statuses))
        if not request.include_voided:
            query = query.where(AppointmentModel.voided.is_(False))

        query = query.order_by(AppointmentModel.start_datetime)
        if request.limit:
            query = query.limit(request.limit)

        return await self._fetch(query)

    async def find_all_for_date(self, for_date: date | None = None) -> list[Appointment]:
        query = select(AppointmentModel).where(AppointmentModel.voided.is_(False))
        if for_date is not None:
            day_start = _start_of_day(for_date)
            query = query.where(
                AppointmentModel.start_datetime >= day_start,
                AppointmentModel.start_datetime < day_start + timedelta(days=1),
            )
        return await self._fetch(query.order_by(AppointmentModel.start_datetime))

    async def find_all_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        query = select(AppointmentModel).where(
            AppointmentModel.voided.is_(False),
            AppointmentModel.start_datetime >= start,
            AppointmentModel.start_datetime <= end,
        )
        return await self._fetch(query.order_by(AppointmentModel.start_datetime))

    async def find_future_for_service(self, service_uuid: str) -> list[Appointment]:
        query = select(AppointmentModel).where(
            AppointmentModel.service_uuid == service_uuid,
            AppointmentModel.voided.is_(False),
            AppointmentModel.start_datetime >= _start_of_day(datetime.now(UTC).date()),
        )
        return await self._fetch(query.order_by(AppointmentModel.start_datetime))

    async def find_future_for_service_type(self, service_type_uuid: str) -> list[Appointment]:
        query = select(AppointmentModel).where(
            AppointmentModel.service_type_uuid == service_type_uuid,
            AppointmentModel.voided.is_(False),
            AppointmentModel.start_datetime >= _start_of_day(datetime.now(UTC).date()),
        )
        return await self._fetch(query.order_by(AppointmentModel.start_datetime))

    async def find_for_service(
        self,
        service_uuid: str,
        start: datetime | None = None,
        end: datetime | None = None,
        statuses: list[AppointmentStatus] | None = None,
    ) -> list[Appointment]:
        query = select(AppointmentModel).where(
            AppointmentModel.service_uuid == service_uuid,
            AppointmentModel.voided.is_(False),
        )
        if start is not None:
            query = query.where(AppointmentModel.start_datetime >= start)
        if end is not None:
            query = query.where(AppointmentModel.start_datetime <= end)
        if statuses:
            query = query.where(AppointmentModel.status.in_(statuses))
        return await self._fetch(query.order_by(AppointmentModel.start_datetime))

    async def find_overlapping(
        self,
        start: datetime,
        end: datetime,
        patient_uuid: str | None = None,
        provider_uuid: str | None = None,
    ) -> list[Appointment]:
        """Booked (non-voided, non-cancelled) appointments overlapping [start, end)."""
        query = select(AppointmentModel).where(
            AppointmentModel.voided.is_(False),
            AppointmentModel.status != AppointmentStatus.CANCELLED,
            AppointmentModel.start_datetime < end,
            AppointmentModel.end_datetime > start,
        )
        if patient_uuid:
            query = query.where(AppointmentModel.patient_uuid == patient_uuid)
        if provider_uuid:
            query = query.where(
                AppointmentModel.providers.any(AppointmentProviderModel.provider_uuid == provider_uuid)
            )
        return await self._fetch(query)

    # Helpers

    async def _find_model(self, uuid: str) -> AppointmentModel | None:
        result = await self.session.execute(select(AppointmentModel).where(AppointmentModel.uuid == uuid))
        return result.scalar_one_or_none()

    async def _fetch(self, query) -> list[Appointment]:
        result = await self.session.execute(query)
        models = result.scalars().all()
        return [self._to_entity(m) for m in models]

    # Mapping methods

    def _to_entity(self, model: AppointmentModel) -> Appointment:
        """Convert model to entity."""
        return Appointment(
            id=model.id,  # type: ignore[arg-type]
            uuid=model.uuid,  # type: ignore[arg-type]
            appointment_number=model.appointment_number,  # type: ignore[arg-type]
            patient=PatientRef(uuid=model.patient_uuid, name=model.patient_name) if model.patient_uuid else None,  # type: ignore[arg-type]
            service=(
                ServiceRef(uuid=model.service_uuid, name=model.service_name, voided=model.service_voided)  # type: ignore[arg-type]
                if model.service_uuid
                else None
            ),
            service_type=(
                ServiceRef(
                    uuid=model.service_type_uuid,  # type: ignore[arg-type]
                    name=model.service_type_name,  # type: ignore[arg-type]
                    voided=model.service_type_voided,  # type: ignore[arg-type]
                )
                if model.service_type_uuid
                else None
            ),
            location_uuid=model.location_uuid,  # type: ignore[arg-type]
            providers=[
                AppointmentProvider(
                    provider=ProviderRef(uuid=p.provider_uuid, person_uuid=p.person_uuid, name=p.provider_name),
                    response=p.response,
                    comments=p.comments,
                )
                for p in model.providers
            ],
            start_datetime=model.start_datetime,  # type: ignore[arg-type]
            end_datetime=model.end_datetime,  # type: ignore[arg-type]
            status=model.status or AppointmentStatus.SCHEDULED,  # type: ignore[arg-type]
            appointment_kind=model.appointment_kind,  # type: ignore[arg-type]
            teleconsultation=model.teleconsultation or False,  # type: ignore[arg-type]
            tele_health_video_link=model.tele_health_video_link,  # type: ignore[arg-type]
            email_sent=model.email_sent or False,  # type: ignore[arg-type]
            comments=model.comments,  # type: ignore[arg-type]
            voided=model.voided or False,  # type: ignore[arg-type]
            voided_at=model.voided_at,  # type: ignore[arg-type]
            void_reason=model.void_reason,  # type: ignore[arg-type]
            created_at=model.created_at,  # type: ignore[arg-type]
            created_by=model.created_by,  # type: ignore[arg-type]
            updated_at=model.updated_at,  # type: ignore[arg-type]
            updated_by=model.updated_by,  # type: ignore[arg-type]
        )

    def _to_model(self, appointment: Appointment) -> AppointmentModel:
        """Convert entity to model."""
        model = AppointmentModel(uuid=appointment.uuid)
        self._update_model(model, appointment)
        return model

    def _update_model(self, model: AppointmentModel, appointment: Appointment) -> None:
        """Update model from entity."""
        model.appointment_number = appointment.appointment_number  # type: ignore[assignment]
        model.patient_uuid = appointment.patient.uuid if appointment.patient else None  # type: ignore[assignment]
        model.patient_name = appointment.patient.name if appointment.patient else None  # type: ignore[assignment]
        self._update_service_columns(model, appointment)
        model.location_uuid = appointment.location_uuid  # type: ignore[assignment]
        model.start_datetime = appointment.start_datetime  # type: ignore[assignment]
        model.end_datetime = appointment.end_datetime  # type: ignore[assignment]
        model.status = appointment.status  # type: ignore[assignment]
        model.appointment_kind = appointment.appointment_kind  # type: ignore[assignment]
        model.teleconsultation = appointment.teleconsultation  # type: ignore[assignment]
        model.tele_health_video_link = appointment.tele_health_video_link  # type: ignore[assignment]
        model.email_sent = appointment.email_sent  # type: ignore[assignment]
        model.comments = appointment.comments  # type: ignore[assignment]
        model.voided = appointment.voided  # type: ignore[assignment]
        model.voided_at = appointment.voided_at  # type: ignore[assignment]
        model.void_reason = appointment.void_reason  # type: ignore[assignment]
        if appointment.created_at is not None:
            model.created_at = appointment.created_at  # type: ignore[assignment]
        if appointment.created_by is not None:
            model.created_by = appointment.created_by  # type: ignore[assignment]
        model.updated_at = appointment.updated_at  # type: ignore[assignment]
        model.updated_by = appointment.updated_by  # type: ignore[assignment]
        self._sync_providers(model, appointment)

    @staticmethod
    def _update_service_columns(model: AppointmentModel, appointment: Appointment) -> None:
        service, service_type = appointment.service, appointment.service_type
        model.service_uuid = service.uuid if service else None  # type: ignore[assignment]
        model.service_name = service.name if service else None  # type: ignore[assignment]
        model.service_voided = service.voided if service else False  # type: ignore[assignment]
        model.service_type_uuid = service_type.uuid if service_type else None  # type: ignore[assignment]
        model.service_type_name = service_type.name if service_type else None  # type: ignore[assignment]
        model.service_type_voided = service_type.voided if service_type else False  # type: ignore[assignment]

    @staticmethod
    def _sync_providers(model: AppointmentModel, appointment: Appointment) -> None:
        """Update existing provider rows in place, add new ones, drop removed ones."""
        existing = {p.provider_uuid: p for p in model.providers}
        wanted: list[AppointmentProviderModel] = []
        for entry in appointment.providers:
            row = existing.get(entry.provider.uuid)
            if row is None:
                row = AppointmentProviderModel(provider_uuid=entry.provider.uuid)
            row.person_uuid = entry.provider.person_uuid  # type: ignore[assignment]
            row.provider_name = entry.provider.name  # type: ignore[assignment]
            row.response = entry.response  # type: ignore[assignment]
            row.comments = entry.comments  # type: ignore[assignment]
            wanted.append(row)
        model.providers = wanted  # type: ignore[assignment]
