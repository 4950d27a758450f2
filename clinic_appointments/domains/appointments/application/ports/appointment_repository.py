"""
Appointment Repository Port

Interface for appointment data access following Clean Architecture.
"""

from datetime import date, datetime
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from clinic_appointments.domains.appointments.domain.entities.appointment import Appointment
from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus

if TYPE_CHECKING:
    from clinic_appointments.domains.appointments.application.dto.search import AppointmentSearchRequest


@runtime_checkable
class IAppointmentRepository(Protocol):
    """
    Appointment repository interface.

    Transaction boundaries are owned by the caller (the workflow service),
    never by the repository.

    Example:
        ```python
        class SQLAlchemyAppointmentRepository(IAppointmentRepository):
            async def find_by_uuid(self, uuid: str) -> Appointment | None:
                # SQLAlchemy implementation
                pass
        ```
    """

    async def find_by_uuid(self, uuid: str) -> Appointment | None:
        """
        Find appointment by its external identifier.

        Args:
            uuid: Stable external identifier

        Returns:
            Appointment if found, None otherwise
        """
        ...

    async def save(self, appointment: Appointment) -> Appointment:
        """
        Save or update appointment and its provider entries.

        Audit records are written separately through the audit repository.

        Args:
            appointment: Appointment to save

        Returns:
            Saved appointment with ID
        """
        ...

    async def search(self, request: "AppointmentSearchRequest") -> list[Appointment]:
        """
        Find appointments matching a structured query.

        Args:
            request: Search criteria; start_date is required

        Returns:
            Matching appointments ordered by start time
        """
        ...

    async def find_all_for_date(self, for_date: date | None = None) -> list[Appointment]:
        """
        Find non-voided appointments on a day, or all when no day is given.
        """
        ...

    async def find_all_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        """
        Find non-voided appointments starting within [start, end].
        """
        ...

    async def find_future_for_service(self, service_uuid: str) -> list[Appointment]:
        """
        Find non-voided appointments for a service starting today or later.
        """
        ...

    async def find_future_for_service_type(self, service_type_uuid: str) -> list[Appointment]:
        """
        Find non-voided appointments for a service type starting today or later.
        """
        ...

    async def find_for_service(
        self,
        service_uuid: str,
        start: datetime | None = None,
        end: datetime | None = None,
        statuses: list[AppointmentStatus] | None = None,
    ) -> list[Appointment]:
        """
        Find non-voided appointments for a service, optionally bounded by
        start time and restricted to some statuses.
        """
        ...

    async def find_overlapping(
        self,
        start: datetime,
        end: datetime,
        patient_uuid: str | None = None,
        provider_uuid: str | None = None,
    ) -> list[Appointment]:
        """
        Find booked appointments whose time window overlaps [start, end).

        Args:
            start: Window start
            end: Window end
            patient_uuid: Optional patient filter
            provider_uuid: Optional provider filter

        Returns:
            Overlapping, non-voided appointments
        """
        ...
