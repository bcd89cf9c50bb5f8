"""Forecast normalization for CWA location payloads."""

import logging
from typing import Dict, List, Tuple

from cwa_weather_api.models import (
    ForecastPeriod,
    NormalizedForecast,
    RawLocationForecast,
    WeatherElement,
)

logger = logging.getLogger(__name__)

# CWA only accepts the traditional form of "tai" in county names (臺北市, 臺中市, ...)
VARIANT_GLYPH = "台"
CANONICAL_GLYPH = "臺"

# CWA element name -> (ForecastPeriod field, value suffix)
ELEMENT_FIELDS: Dict[str, Tuple[str, str]] = {
    "Wx": ("weather", ""),
    "PoP": ("rain", "%"),
    "MinT": ("min_temp", "°C"),
    "MaxT": ("max_temp", "°C"),
    "CI": ("comfort", ""),
    "WS": ("wind_speed", ""),
}


class EmptyForecastError(LookupError):
    """Location payload carries no weather elements."""


class MisalignedForecastError(ValueError):
    """Weather elements disagree on their time slots."""


def normalize_city_name(city: str) -> str:
    """Convert a user-supplied city name into the form CWA expects."""
    return city.replace(VARIANT_GLYPH, CANONICAL_GLYPH)


def _check_alignment(elements: List[WeatherElement]) -> None:
    reference = [(slot.start_time, slot.end_time) for slot in elements[0].time]

    for element in elements[1:]:
        slots = [(slot.start_time, slot.end_time) for slot in element.time]
        if len(slots) != len(reference):
            raise MisalignedForecastError(
                f"element {element.element_name} has {len(slots)} time slots, "
                f"{elements[0].element_name} has {len(reference)}"
            )
        if slots != reference:
            raise MisalignedForecastError(
                f"element {element.element_name} time slots are not in the same "
                f"order as {elements[0].element_name}"
            )


def normalize_forecast(
    location: RawLocationForecast,
    dataset_description: str,
) -> NormalizedForecast:
    """
    Flatten a CWA location forecast into per-period records.

    The first weather element defines the time periods. Every element
    must share its time slots; recognized elements fill the matching
    field of each period and unknown element names are skipped.

    Args:
        location: Validated ``records.location[i]`` payload
        dataset_description: ``records.datasetDescription``

    Returns:
        Normalized forecast with one entry per time period

    Raises:
        EmptyForecastError: If the location has no weather elements
        MisalignedForecastError: If element time slots differ
    """
    elements = location.weather_element
    if not elements:
        raise EmptyForecastError(f"no weather elements for {location.location_name}")

    _check_alignment(elements)

    forecasts: List[ForecastPeriod] = []
    for i, slot in enumerate(elements[0].time):
        values = {}
        for element in elements:
            mapping = ELEMENT_FIELDS.get(element.element_name)
            if mapping is None:
                continue
            field, suffix = mapping
            values[field] = element.time[i].parameter.parameter_name + suffix

        forecasts.append(
            ForecastPeriod(start_time=slot.start_time, end_time=slot.end_time, **values)
        )

    logger.debug(f"Normalized {len(forecasts)} periods for {location.location_name}")

    return NormalizedForecast(
        city=location.location_name,
        update_time=dataset_description,
        forecasts=forecasts,
    )
