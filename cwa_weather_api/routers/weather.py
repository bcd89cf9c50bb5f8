"""Weather forecast endpoint."""

import json
import logging

import httpx
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from cwa_weather_api.cwa_client import CWAClient
from cwa_weather_api.models import WeatherResponse
from cwa_weather_api.normalizer import normalize_city_name, normalize_forecast

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/weather", tags=["weather"])


def get_cwa_client(request: Request) -> CWAClient:
    """Return the upstream client owned by the application lifespan."""
    return request.app.state.cwa_client


def _upstream_error_body(response: httpx.Response):
    try:
        return response.json()
    except json.JSONDecodeError:
        return response.text


@router.get("/{city}", response_model=WeatherResponse)
async def get_weather(city: str, client: CWAClient = Depends(get_cwa_client)):
    """
    Get the 36-hour forecast for a county or city.

    Path parameters:
    - **city**: County or city name, e.g. 臺北市 (台北市 is accepted too)

    Returns:
        Normalized forecast periods for the city
    """
    location_name = normalize_city_name(city)

    try:
        location, description = await client.fetch_forecast(location_name)

        if location is None:
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={
                    "success": False,
                    "message": f"no data for '{city}'"
                }
            )

        return WeatherResponse(data=normalize_forecast(location, description))

    except httpx.HTTPStatusError as e:
        logger.error(f"Get weather error ({location_name}): {e}")
        return JSONResponse(
            status_code=e.response.status_code,
            content={"error": _upstream_error_body(e.response)}
        )

    except Exception as e:
        logger.error(f"Get weather error ({location_name}): {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e)}
        )
