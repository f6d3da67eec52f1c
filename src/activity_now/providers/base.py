"""Base weather provider abstraction.

Providers fetch a short-range hourly forecast and translate it into the
canonical ``ForecastHour`` list consumed by the weather strategy selector.
Only the precipitation probability matters downstream; the condition text is
carried along for display.

Providers are synchronous: ranking is a synchronous computation and the
caller owns any end-to-end latency budget, so the request timeout configured
here is the only bound applied.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from activity_now.models.location import Coordinates
from activity_now.models.weather import ForecastHour


class ProviderError(Exception):
    """Base exception for weather provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: int | None = None,
        response_body: str | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ProviderError):
    """Raised when provider rate limit is exceeded."""

    def __init__(
        self,
        provider: str,
        retry_after: int | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            f"Rate limit exceeded for {provider}",
            provider=provider,
            status_code=status_code,
        )
        self.retry_after = retry_after


class AuthenticationError(ProviderError):
    """Raised when the API key is missing or rejected."""

    pass


class WeatherProvider(ABC):
    """Abstract base class for forecast providers.

    Attributes:
        name: Provider name used in logs and errors
        base_url: Base URL for the API
    """

    name: str
    base_url: str

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
        base_url: str | None = None,
    ):
        """Initialize the provider.

        Args:
            api_key: API key if required by the provider
            timeout: Request timeout in seconds
            client: Pre-built HTTP client (tests pass one with a mock transport)
            base_url: Override for the API base URL
        """
        if base_url:
            self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def __enter__(self) -> WeatherProvider:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._client is not None and self._owns_client:
            self._client.close()
            self._client = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.Client(timeout=self.timeout)
            self._owns_client = True
        return self._client

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
        reraise=True,
    )
    def _fetch(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """GET with retry on timeouts and network errors.

        Raises:
            RateLimitError: On HTTP 429
            AuthenticationError: On HTTP 401/403
            ProviderError: On any other HTTP error status
        """
        response = self._get_client().get(
            url, params=params, headers={"Accept": "application/json"}
        )

        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
                status_code=429,
            )
        if response.status_code in (401, 403):
            raise AuthenticationError(
                f"Authentication failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
            )
        if response.status_code >= 400:
            raise ProviderError(
                f"API request failed: {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
                response_body=response.text,
            )
        return response

    @abstractmethod
    def get_forecast_hours(
        self,
        coordinates: Coordinates,
        now: datetime,
        window_hours: int = 8,
    ) -> list[ForecastHour]:
        """Hourly forecast strictly after ``now`` and before ``now + window_hours``.

        Raises:
            ProviderError: If the forecast cannot be retrieved or read
        """
        pass

    @abstractmethod
    def _translate_response(
        self,
        response_data: dict[str, Any],
        now: datetime,
        window_hours: int,
    ) -> list[ForecastHour]:
        """Translate a provider-specific response into ``ForecastHour`` values."""
        pass
