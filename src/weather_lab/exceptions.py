"""Application exception classes."""


class WeatherLabError(Exception):
    """Base class for errors raised by the forecast and normals pipelines."""


class ConfigError(WeatherLabError):
    """Raised when configuration is invalid or a required credential is missing."""


class InputValidationError(WeatherLabError):
    """Raised for bad or missing user input before any request is made."""


class UpstreamError(WeatherLabError):
    """Raised when a data provider answers with a non-success HTTP status."""

    def __init__(
        self,
        message: str,
        *,
        source: str = "unknown",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.status_code = status_code


class UnexpectedError(WeatherLabError):
    """Raised for transport failures and structurally invalid provider payloads."""
