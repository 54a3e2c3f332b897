"""Provider-agnostic forecast interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import ForecastEntry


class ForecastProvider(ABC):
    """Base contract for providers feeding the forecast aggregator."""

    @abstractmethod
    def fetch_entries(self, city: str, api_key: str) -> list[ForecastEntry]:
        """Fetch the provider's raw forecast entries for a city."""

    @abstractmethod
    def close(self) -> None:
        """Release provider resources."""
