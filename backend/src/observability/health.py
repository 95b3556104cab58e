"""Health check utilities.

Provides health checks for the database, object storage and broker.
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from sqlalchemy import text
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Health check status enum."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


@dataclass
class ComponentHealth:
    """Health status for a single component."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None


def check_database_health(session_factory: Callable[[], Session]) -> ComponentHealth:
    """Check database connectivity with SELECT 1."""
    start = time.time()
    session = session_factory()
    try:
        session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return ComponentHealth(status=HealthStatus.UNHEALTHY, message=f"Database error: {e}")
    finally:
        session.close()

    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message="Database connection OK",
        latency_ms=round((time.time() - start) * 1000, 2),
    )


async def check_object_storage_health(storage) -> ComponentHealth:
    """Check that the configured bucket is reachable."""
    start = time.time()
    try:
        await storage.verify_bucket_exists()
    except Exception as e:
        logger.error(f"Object storage health check failed: {e}")
        return ComponentHealth(status=HealthStatus.UNHEALTHY, message=f"Object storage error: {e}")

    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message="Object storage connection OK",
        latency_ms=round((time.time() - start) * 1000, 2),
    )


def check_broker_health(broker) -> ComponentHealth:
    """Report whether the shared broker connection is open.

    Publishing still works after a reconnect, so a closed connection is
    reported as degraded rather than unhealthy.
    """
    if broker is not None and broker.connected:
        return ComponentHealth(status=HealthStatus.HEALTHY, message="Broker connection OK")
    return ComponentHealth(status=HealthStatus.DEGRADED, message="Broker not connected")


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    """Determine overall health from component statuses.

    Args:
        components: Dictionary of component health statuses

    Returns:
        HealthStatus: Overall system health
    """
    if all(c.status == HealthStatus.HEALTHY for c in components.values()):
        return HealthStatus.HEALTHY

    if any(c.status == HealthStatus.UNHEALTHY for c in components.values()):
        return HealthStatus.UNHEALTHY

    return HealthStatus.DEGRADED
