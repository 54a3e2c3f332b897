"""Typed settings loader for the forecast and climate normals services."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import AnyUrl, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError


class Settings(BaseSettings):
    """Application settings loaded from environment variables and `.env`."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: Literal["dev", "staging", "prod"] = Field(default="dev", alias="APP_ENV")

    openweather_api_key: str | None = Field(
        default=None, alias="OPENWEATHER_API_KEY", repr=False
    )
    openweather_base_url: AnyUrl = Field(
        default="https://api.openweathermap.org",
        alias="OPENWEATHER_BASE_URL",
    )
    openweather_forecast_endpoint: str = Field(
        default="/data/2.5/forecast",
        alias="OPENWEATHER_FORECAST_ENDPOINT",
    )
    normals_base_url: AnyUrl = Field(
        default="https://noaa-normals-pds.s3.amazonaws.com/normals-daily",
        alias="NORMALS_BASE_URL",
    )

    http_timeout_seconds: float = Field(default=15.0, alias="HTTP_TIMEOUT_SECONDS")
    http_user_agent: str = Field(
        default="weather-lab/0.1 (contact: research@example.com)",
        alias="HTTP_USER_AGENT",
    )

    forecast_default_days: int = Field(default=4, alias="FORECAST_DEFAULT_DAYS")
    normals_max_print: int = Field(default=10, alias="NORMALS_MAX_PRINT")

    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    @field_validator("openweather_api_key", mode="before")
    @classmethod
    def empty_string_to_none(cls, value: Any) -> Any:
        """Treat empty env-string values as an unset credential."""
        if isinstance(value, str) and value.strip() == "":
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def validate_ranges(self) -> Settings:
        """Validate numeric ranges and endpoint formats."""
        if not self.openweather_forecast_endpoint.startswith("/"):
            raise ValueError("OPENWEATHER_FORECAST_ENDPOINT must start with '/'.")
        if self.http_timeout_seconds <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be > 0.")
        if not self.http_user_agent.strip():
            raise ValueError("HTTP_USER_AGENT must not be empty.")
        if not (1 <= self.forecast_default_days <= 5):
            raise ValueError("FORECAST_DEFAULT_DAYS must be between 1 and 5.")
        if self.normals_max_print <= 0:
            raise ValueError("NORMALS_MAX_PRINT must be > 0.")
        if not (0 < self.api_port < 65536):
            raise ValueError("API_PORT must be between 1 and 65535.")
        return self

    @property
    def forecast_url(self) -> str:
        return str(self.openweather_base_url).rstrip("/") + self.openweather_forecast_endpoint

    def safe_summary(self) -> dict[str, Any]:
        """Return config summary safe for logging (no credentials)."""
        return {
            "app_env": self.app_env,
            "forecast_credential_configured": self.openweather_api_key is not None,
            "forecast_url": self.forecast_url,
            "normals_base_url": str(self.normals_base_url),
            "http_timeout_seconds": self.http_timeout_seconds,
            "forecast_default_days": self.forecast_default_days,
            "api_host": self.api_host,
            "api_port": self.api_port,
            "log_level": self.log_level,
        }


def load_settings() -> Settings:
    """Load and validate settings, raising ConfigError on failure."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed reading environment/.env: {exc}") from exc
