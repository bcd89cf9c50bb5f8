"""Client for the CWA open-data forecast API."""

import logging
import time
from typing import Optional, Tuple

import httpx
from prometheus_client import Histogram

from cwa_weather_api.config import APIConfig
from cwa_weather_api.models import RawLocationForecast

logger = logging.getLogger(__name__)

UPSTREAM_DURATION = Histogram(
    "cwa_weather_api_upstream_duration_seconds",
    "CWA upstream request duration in seconds",
    ["outcome"]
)


class CWAClientError(Exception):
    """Upstream answered with a payload we cannot use."""


class CWAClient:
    """Async client for the CWA 36-hour county forecast dataset."""

    def __init__(self, config: APIConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize CWA client.

        Args:
            config: API configuration
            transport: Transport for the HTTP client; httpx default when omitted
        """
        self.config = config
        self.http_client = httpx.AsyncClient(
            timeout=config.request_timeout,
            headers={"Accept": "application/json"},
            follow_redirects=True,
            transport=transport,
        )

    async def fetch_forecast(self, city: str) -> Tuple[Optional[RawLocationForecast], str]:
        """Fetch the forecast for one county or city.

        Args:
            city: Location name exactly as CWA expects it

        Returns:
            Tuple of (location forecast or None when CWA has no match,
            dataset description)

        Raises:
            httpx.HTTPStatusError: If CWA returns a non-2xx status
            httpx.RequestError: If the request cannot be completed
            CWAClientError: If the body is not the expected JSON document
        """
        params = {
            "Authorization": self.config.cwa_api_key,
            "locationName": city,
        }

        logger.info(f"Fetching forecast for {city} from {self.config.forecast_url}")

        start_time = time.time()
        outcome = "error"
        try:
            response = await self.http_client.get(self.config.forecast_url, params=params)
            response.raise_for_status()
            payload = self._decode(response)
            outcome = "ok"
        finally:
            UPSTREAM_DURATION.labels(outcome=outcome).observe(time.time() - start_time)

        records = payload.get("records")
        if not isinstance(records, dict) or not isinstance(records.get("location"), list):
            raise CWAClientError("CWA response is missing records.location")

        description = records.get("datasetDescription") or ""
        locations = records["location"]
        if not locations:
            logger.info(f"CWA returned no location for {city}")
            return None, description

        return RawLocationForecast.model_validate(locations[0]), description

    @staticmethod
    def _decode(response: httpx.Response) -> dict:
        try:
            payload = response.json()
        except ValueError as e:
            raise CWAClientError(f"Failed to parse CWA response as JSON: {e}") from e
        if not isinstance(payload, dict):
            raise CWAClientError("CWA response is not a JSON object")
        return payload

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self.http_client.aclose()
