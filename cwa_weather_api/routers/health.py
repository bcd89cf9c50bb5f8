"""Health check and usage endpoints."""

from datetime import datetime, timezone

from fastapi import APIRouter

from cwa_weather_api.models import HealthResponse

router = APIRouter(tags=["health"])

# Example lookups for every county and city CWA publishes, grouped by region
CITY_ENDPOINTS = {
    # North
    "keelung_y": "/api/weather/基隆市",
    "taipei_y": "/api/weather/臺北市",
    "new_taipei_y": "/api/weather/新北市",
    "taoyuan_y": "/api/weather/桃園市",
    "hsinchu_y": "/api/weather/新竹市",
    "hsinchu_x": "/api/weather/新竹縣",
    "yilan_x": "/api/weather/宜蘭縣",
    # Central
    "miaoli_x": "/api/weather/苗栗縣",
    "taichung_y": "/api/weather/臺中市",
    "changhua_x": "/api/weather/彰化縣",
    "nantou_x": "/api/weather/南投縣",
    "yunlin_x": "/api/weather/雲林縣",
    # South
    "chiayi_y": "/api/weather/嘉義市",
    "chiayi_x": "/api/weather/嘉義縣",
    "tainan_y": "/api/weather/臺南市",
    "kaohsiung_y": "/api/weather/高雄市",
    "pingtung_x": "/api/weather/屏東縣",
    # East
    "hualien_x": "/api/weather/花蓮縣",
    "taitung_x": "/api/weather/臺東縣",
    # Outlying islands
    "penghu_x": "/api/weather/澎湖縣",
    "kinmen_x": "/api/weather/金門縣",
    "lienchiang_x": "/api/weather/連江縣",  # Matsu
}


@router.get("/api/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        Liveness status with the current UTC time
    """
    return HealthResponse(
        status="OK",
        timestamp=datetime.now(timezone.utc).isoformat()
    )


@router.get("/")
async def root() -> dict:
    """
    Root endpoint with usage information.

    Returns:
        Usage string and an example lookup for each county and city
    """
    return {
        "message": "Welcome to the CWA weather forecast API",
        "usage": "GET /api/weather/{city}",
        "endpoints": CITY_ENDPOINTS,
        "health": "/api/health"
    }
