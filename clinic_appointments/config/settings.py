from urllib.parse import quote_plus

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from clinic_appointments.domains.appointments.domain.value_objects.appointment_status import AppointmentStatus


class Settings(BaseSettings):
    """
    Configuration for the appointment workflow engine, using Pydantic BaseSettings.
    Loads environment variables (and .env) automatically.
    """

    PROJECT_NAME: str = "Clinic Appointments"
    VERSION: str = "0.1.0"

    # Application Settings
    DEBUG: bool = Field(False, description="Debug mode")
    ENVIRONMENT: str = Field("production", description="Runtime environment")

    # Logging
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    LOG_FORMAT: str = Field("colored", description="Console log format: colored, json or plain")
    LOG_FILE: str | None = Field(None, description="Optional JSON log file")

    # PostgreSQL Database Settings
    DB_HOST: str = Field("localhost", description="PostgreSQL host")
    DB_PORT: int = Field(5432, description="PostgreSQL port")
    DB_NAME: str = Field("clinic_appointments", description="Database name")
    DB_USER: str = Field("postgres", description="PostgreSQL user")
    DB_PASSWORD: str | None = Field(None, description="PostgreSQL password")
    DB_ECHO: bool = Field(False, description="Log SQL queries (debug only)")

    # Database connection pool settings
    DB_POOL_SIZE: int = Field(20, description="Connection pool size")
    DB_MAX_OVERFLOW: int = Field(30, description="Maximum pool overflow")
    DB_POOL_RECYCLE: int = Field(3600, description="Recycle connections every X seconds")
    DB_POOL_TIMEOUT: int = Field(30, description="Timeout for getting a pooled connection")

    # Appointment workflow
    APPOINTMENT_DEFAULT_NUMBER: str = Field("0000", description="Number given to appointments that have none")
    APPOINTMENT_RETAIN_NUMBER_ON_RESCHEDULE: bool = Field(
        False,
        description="Allow a rescheduled appointment to keep the original number when the caller asks for it",
    )
    APPOINTMENT_STATUS_TRANSITIONS: dict[str, list[str]] | None = Field(
        None,
        description=(
            "Optional JSON transition table, e.g. {\"Scheduled\": [\"CheckedIn\", \"Cancelled\"]}. "
            "When unset every status is reachable from every status."
        ),
    )
    TELECONSULTATION_BASE_URL: str = Field(
        "https://meet.jit.si",
        description="Base URL of generated teleconsultation links",
    )

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid LOG_LEVEL: {v}")
        return level

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v):
        if v not in ("colored", "json", "plain"):
            raise ValueError("LOG_FORMAT must be one of: colored, json, plain")
        return v

    @field_validator("DB_POOL_SIZE")
    @classmethod
    def validate_pool_size(cls, v):
        if v < 1:
            raise ValueError("DB_POOL_SIZE must be at least 1")
        if v > 100:
            raise ValueError("DB_POOL_SIZE should not exceed 100")
        return v

    @field_validator("DB_MAX_OVERFLOW")
    @classmethod
    def validate_max_overflow(cls, v):
        if v < 0:
            raise ValueError("DB_MAX_OVERFLOW must be 0 or greater")
        if v > 200:
            raise ValueError("DB_MAX_OVERFLOW should not exceed 200")
        return v

    @field_validator("APPOINTMENT_STATUS_TRANSITIONS")
    @classmethod
    def validate_transitions(cls, v):
        if v is None:
            return v
        for current, targets in v.items():
            AppointmentStatus.from_string(current)
            for target in targets:
                AppointmentStatus.from_string(target)
        return v

    @field_validator("TELECONSULTATION_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    @computed_field
    @property
    def database_url(self) -> str:
        """Async PostgreSQL connection URL."""
        credentials = quote_plus(self.DB_USER)
        if self.DB_PASSWORD:
            credentials = f"{credentials}:{quote_plus(self.DB_PASSWORD)}"
        return f"postgresql+asyncpg://{credentials}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @computed_field
    @property
    def is_development(self) -> bool:
        return self.DEBUG or self.ENVIRONMENT.lower() in ["development", "dev", "local"]


# Settings singleton
_settings_instance = None


def get_settings() -> Settings:
    """
    Return a cached Settings instance.
    Avoids loading environment variables more than once.
    """
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
