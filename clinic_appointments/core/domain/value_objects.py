"""
Value object and enum bases shared by the appointment domain.

Value objects carry no identity and are compared field by field; the
appointment references (patient, service, provider) and the acting user
are all built on ``ValueObject``.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Self


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Frozen dataclass base that runs ``_validate`` after construction.

    Example:
        ```python
        @dataclass(frozen=True)
        class RoomRef(ValueObject):
            uuid: str

            def _validate(self) -> None:
                if not self.uuid:
                    raise ValueError("Room uuid is required")
        ```
    """

    def __post_init__(self):
        self._validate()

    def _validate(self) -> None:
        """Hook for subclass invariants; raise ValueError on bad input."""


class StatusEnum(str, Enum):
    """
    String enum whose members can be looked up by value or by name.

    Status values travel as plain strings through settings and audit
    rows, so lookups ignore case.
    """

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create from string value or member name (case-insensitive)."""
        wanted = value.lower()
        for member in cls:
            if wanted in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Invalid {cls.__name__}: {value}")

    @classmethod
    def coerce(cls, value: "str | Self") -> Self:
        """Return ``value`` unchanged if it is already a member, else parse it."""
        if isinstance(value, cls):
            return value
        return cls.from_string(value)

    def __str__(self) -> str:
        return self.value
