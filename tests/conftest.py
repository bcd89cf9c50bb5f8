"""Test configuration and fixtures."""

import asyncio
import copy

import httpx
import pytest
from fastapi.testclient import TestClient

from cwa_weather_api.config import APIConfig
from cwa_weather_api.cwa_client import CWAClient
from cwa_weather_api.main import create_app
from cwa_weather_api.routers.weather import get_cwa_client

TIME_WINDOWS = [
    ("2024-01-15 18:00:00", "2024-01-16 06:00:00"),
    ("2024-01-16 06:00:00", "2024-01-16 18:00:00"),
    ("2024-01-16 18:00:00", "2024-01-17 06:00:00"),
]

DATASET_DESCRIPTION = "三十六小時天氣預報"


def make_element(name, values, windows=TIME_WINDOWS):
    """Build a CWA weatherElement with one value per time window."""
    return {
        "elementName": name,
        "time": [
            {
                "startTime": start,
                "endTime": end,
                "parameter": {"parameterName": value, "parameterValue": "1"},
            }
            for (start, end), value in zip(windows, values)
        ],
    }


SAMPLE_LOCATION = {
    "locationName": "臺北市",
    "weatherElement": [
        make_element("Wx", ["多雲時陰", "陰短暫雨", "多雲"]),
        make_element("PoP", ["20", "60", "10"]),
        make_element("MinT", ["14", "13", "12"]),
        make_element("CI", ["寒冷", "寒冷至稍有寒意", "寒冷"]),
        make_element("MaxT", ["17", "16", "18"]),
    ],
}


def make_payload(locations):
    """Wrap locations in the CWA F-C0032-001 response envelope."""
    return {
        "success": "true",
        "result": {"resource_id": "F-C0032-001"},
        "records": {
            "datasetDescription": DATASET_DESCRIPTION,
            "location": locations,
        },
    }


class FakeCWA:
    """httpx.MockTransport handler standing in for the CWA API."""

    def __init__(self):
        self.requests = []
        self.response = httpx.Response(200, json=make_payload([SAMPLE_LOCATION]))
        self.error = None
        self.redirect_to = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise httpx.ConnectError(self.error, request=request)
        if self.redirect_to is not None and request.url.host != httpx.URL(self.redirect_to).host:
            return httpx.Response(301, headers={"Location": self.redirect_to})
        return self.response


@pytest.fixture
def sample_location():
    """Copy of the sample Taipei location payload."""
    return copy.deepcopy(SAMPLE_LOCATION)


@pytest.fixture
def api_config():
    """Configuration independent of the host environment."""
    return APIConfig(
        _env_file=None,
        cwa_api_key="CWA-TEST-KEY",
        cwa_api_base_url="https://cwa.test/api",
        port=3000,
    )


@pytest.fixture
def fake_cwa():
    """Fake upstream recording every request."""
    return FakeCWA()


@pytest.fixture
def cwa_client(api_config, fake_cwa):
    """CWA client wired to the fake upstream."""
    client = CWAClient(api_config, transport=httpx.MockTransport(fake_cwa))
    yield client
    asyncio.run(client.aclose())


@pytest.fixture
def app(api_config, cwa_client):
    """Application with the upstream client overridden."""
    application = create_app(api_config)
    application.dependency_overrides[get_cwa_client] = lambda: cwa_client
    return application


@pytest.fixture
def client(app):
    """Create a test client."""
    with TestClient(app) as test_client:
        yield test_client
