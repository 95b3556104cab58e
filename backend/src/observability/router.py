"""Observability API endpoints.

Provides Prometheus metrics and the health check.
"""

from fastapi import APIRouter, Depends, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from dependencies import ServiceContainer, get_container
from .health import (
    HealthStatus,
    check_broker_health,
    check_database_health,
    check_object_storage_health,
    get_overall_health,
)

router = APIRouter(tags=["Observability"])


@router.get(
    "/metrics",
    summary="Prometheus metrics endpoint",
    include_in_schema=False,  # Hide from OpenAPI docs
)
def metrics():
    """Expose Prometheus metrics in the text exposition format."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


@router.get(
    "/health",
    summary="Health check endpoint",
    description="Returns health status of the database, object storage and broker",
)
async def health_check(services: ServiceContainer = Depends(get_container)):
    """Check health of all system components.

    Returns 200 unless a component is unhealthy (503).
    """
    components = {}
    if services.session_factory is not None:
        components["database"] = await run_in_threadpool(check_database_health, services.session_factory)
    components["object_storage"] = await check_object_storage_health(services.storage)
    components["broker"] = check_broker_health(services.broker)

    overall_status = get_overall_health(components)

    response_data = {
        "status": overall_status.value,
        "components": {
            name: {
                "status": comp.status.value,
                "message": comp.message,
                "latency_ms": comp.latency_ms,
            }
            for name, comp in components.items()
        }
    }

    status_code = 200 if overall_status != HealthStatus.UNHEALTHY else 503
    return JSONResponse(content=response_data, status_code=status_code)
