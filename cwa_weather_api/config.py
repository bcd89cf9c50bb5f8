"""Configuration management for the CWA Weather API."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class APIConfig(BaseSettings):
    """API configuration, read once at startup and never mutated."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    environment: str = "development"

    # Upstream CWA open-data API
    cwa_api_key: str = ""
    cwa_api_base_url: str = "https://opendata.cwa.gov.tw/api"
    cwa_dataset_id: str = "F-C0032-001"
    request_timeout: float = 10.0

    # API settings
    api_title: str = "CWA Weather API"
    api_version: str = "1.0.0"
    api_description: str = "JSON proxy for the Central Weather Administration 36-hour county forecast"

    # CORS settings
    cors_origins: list[str] = ["*"]
    cors_allow_credentials: bool = False
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Logging
    log_level: str = "INFO"

    @property
    def forecast_url(self) -> str:
        """Construct the upstream forecast dataset URL."""
        return f"{self.cwa_api_base_url.rstrip('/')}/v1/rest/datastore/{self.cwa_dataset_id}"


def load_config() -> APIConfig:
    """Load configuration from the environment and ``.env``."""
    return APIConfig()
