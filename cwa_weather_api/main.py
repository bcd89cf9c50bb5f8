"""FastAPI application entry point."""

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from cwa_weather_api.config import APIConfig, load_config
from cwa_weather_api.cwa_client import CWAClient
from cwa_weather_api.routers import health, weather

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "cwa_weather_api_requests_total",
    "Total API requests",
    ["method", "endpoint", "status"]
)
REQUEST_DURATION = Histogram(
    "cwa_weather_api_request_duration_seconds",
    "API request duration in seconds",
    ["method", "endpoint"]
)

# Not logged or counted by the request middleware
UNTRACKED_PATHS = {"/api/health", "/metrics"}

UNMATCHED_ENDPOINT = "unmatched"


def configure_logging(config: APIConfig) -> None:
    """Configure root logging from the API configuration."""
    logging.basicConfig(level=config.log_level.upper(), format=LOG_FORMAT)


def _endpoint_label(request: Request) -> str:
    # Route template so every city shares one label; unknown paths share one too
    route = request.scope.get("route")
    return getattr(route, "path", UNMATCHED_ENDPOINT)


def create_app(config: Optional[APIConfig] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: API configuration; loaded from the environment when omitted

    Returns:
        Configured application
    """
    if config is None:
        config = load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """
        Lifespan context manager for startup and shutdown events.

        Startup:
        - Create the CWA client
        - Log configuration

        Shutdown:
        - Close the CWA client
        """
        logger.info(f"Starting {config.api_title} on port {config.port}")
        logger.info(f"Environment: {config.environment}")
        logger.info(f"CWA endpoint: {config.forecast_url}")
        if not config.cwa_api_key:
            logger.warning("CWA_API_KEY is not set - upstream requests will be rejected")

        app.state.cwa_client = CWAClient(config)

        yield

        logger.info(f"Shutting down {config.api_title}")
        await app.state.cwa_client.aclose()

    app = FastAPI(
        title=config.api_title,
        version=config.api_version,
        description=config.api_description,
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=config.cors_allow_credentials,
        allow_methods=config.cors_allow_methods,
        allow_headers=config.cors_allow_headers,
    )

    @app.middleware("http")
    async def logging_and_metrics_middleware(request: Request, call_next):
        """
        Middleware to log requests and collect Prometheus metrics.

        Tracks:
        - Request count by method, endpoint, and status
        - Request duration by method and endpoint
        """
        if request.url.path in UNTRACKED_PATHS:
            return await call_next(request)

        start_time = time.time()
        request_id = f"{int(start_time * 1000)}-{id(request)}"

        logger.info(
            f"Request started: {request.method} {request.url.path} "
            f"[{request_id}]"
        )

        response = await call_next(request)

        duration = time.time() - start_time
        endpoint = _endpoint_label(request)

        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code
        ).inc()

        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint
        ).observe(duration)

        logger.info(
            f"Request completed: {request.method} {request.url.path} "
            f"[{request_id}] - {response.status_code} - {duration:.3f}s"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """
        Render routing and HTTP errors as JSON.

        Unknown paths and unsupported methods both answer 404.
        """
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content={"error": "path not found"}
            )

        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Global exception handler for unhandled errors.

        Returns:
            500 error carrying the exception message
        """
        logger.error(
            f"Unhandled exception: {request.method} {request.url.path} - {str(exc)}",
            exc_info=True
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "internal server error",
                "message": str(exc)
            }
        )

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """
        Prometheus metrics endpoint.

        Returns:
            Prometheus metrics in text format
        """
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST
        )

    app.include_router(health.router)
    app.include_router(weather.router)

    return app


def main() -> None:
    """Run the API with uvicorn on the configured host and port."""
    import uvicorn

    config = load_config()
    configure_logging(config)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower()
    )


if __name__ == "__main__":
    main()
