import uuid
from typing import Any

from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator


def expose_metrics(app: FastAPI, endpoint: str = "/metrics") -> None:
    Instrumentator(excluded_handlers=[endpoint]).instrument(app).expose(app, endpoint=endpoint, include_in_schema=False)


def propagate_correlation_id(app: FastAPI, header_name: str = "X-Request-ID") -> None:
    # The gateway usually sets the header; requests without one get a fresh id.
    app.add_middleware(
        CorrelationIdMiddleware,
        header_name=header_name,
        generator=lambda: str(uuid.uuid4()),
        update_request_header=True,
    )


def add_health_route(app: FastAPI, path: str = "/health") -> None:
    @app.get(path, include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}


def create_service_app(
    *,
    title: str,
    version: str = "0.1.0",
    metrics_endpoint: str | None = "/metrics",
    health_path: str | None = "/health",
    correlation_header_name: str = "X-Request-ID",
    **fastapi_kwargs: Any,
) -> FastAPI:
    """FastAPI app for a service that sits behind the gateway.

    CORS is the gateway's concern, so it is not configured here.
    """
    app = FastAPI(title=title, version=version, **fastapi_kwargs)

    if metrics_endpoint:
        expose_metrics(app, metrics_endpoint)
    propagate_correlation_id(app, correlation_header_name)
    if health_path:
        add_health_route(app, health_path)

    return app
