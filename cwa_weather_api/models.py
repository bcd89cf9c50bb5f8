"""Pydantic schemas for the upstream CWA payload and API responses."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ============================================================================
# Upstream payload (CWA F-C0032-001, records.location[*])
# ============================================================================

class TimeSlotParameter(BaseModel):
    """Value of one element for one time slot."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    parameter_name: str = Field(alias="parameterName")


class TimeSlot(BaseModel):
    """One forecast time window of a weather element."""
    model_config = ConfigDict(extra="ignore")

    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    parameter: TimeSlotParameter


class WeatherElement(BaseModel):
    """A weather attribute (Wx, PoP, MinT, ...) across all time slots."""
    model_config = ConfigDict(extra="ignore")

    element_name: str = Field(alias="elementName")
    time: List[TimeSlot]


class RawLocationForecast(BaseModel):
    """Forecast for one administrative area as returned by CWA."""
    model_config = ConfigDict(extra="ignore")

    location_name: str = Field(alias="locationName")
    weather_element: List[WeatherElement] = Field(alias="weatherElement")


# ============================================================================
# API responses
# ============================================================================

class CamelModel(BaseModel):
    """Base for response models serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ForecastPeriod(CamelModel):
    """Normalized forecast for a single time window."""
    start_time: str
    end_time: str
    weather: str = ""
    rain: str = ""
    min_temp: str = ""
    max_temp: str = ""
    comfort: str = ""
    wind_speed: str = ""


class NormalizedForecast(CamelModel):
    """Normalized forecast for one city."""
    city: str
    update_time: str
    forecasts: List[ForecastPeriod] = []


class WeatherResponse(BaseModel):
    """Successful weather lookup."""
    success: bool = True
    data: NormalizedForecast


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: str
