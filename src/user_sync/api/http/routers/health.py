"""Health check endpoints router for monitoring service availability."""

from typing import Any

from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

from src.user_sync.api.http.app_data import ApplicationDependencies
from src.user_sync.runtime.context import get_config

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health() -> dict[str, str]:
    """Liveness probe: 200 OK as long as the process is running."""
    return {"status": "healthy", "service": "user-sync"}


@router.get("/ready", response_model=None)
async def readiness(request: Request) -> dict[str, Any] | JSONResponse:
    """Readiness probe.

    Returns 200 if the database is reachable, 503 otherwise. A missing webhook
    signing secret is reported but does not fail readiness: deliveries are
    rejected with 500 and retried by the provider once the secret is set.
    """
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    checks: dict[str, Any] = {}
    all_healthy = True

    try:
        db_healthy = app_deps.database_service.health_check()
        checks["database"] = {
            "status": "healthy" if db_healthy else "unhealthy",
            "type": "sqlite" if config.database.is_sqlite else "postgresql",
        }
        if not db_healthy:
            all_healthy = False
    except Exception as e:
        checks["database"] = {
            "status": "unhealthy",
            "error": str(e),
        }
        all_healthy = False

    checks["webhook_secret"] = {
        "status": "configured" if config.webhooks.clerk.is_configured else "missing",
    }

    response = {
        "status": "ready" if all_healthy else "not_ready",
        "environment": config.app.environment,
        "checks": checks,
    }

    if not all_healthy:
        return JSONResponse(status_code=503, content=response)

    return response


@router.get("/database", response_model=None)
async def health_database(request: Request) -> dict[str, Any] | JSONResponse:
    """Database-specific health check with connection pool status."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    config = get_config()

    try:
        healthy = app_deps.database_service.health_check()
        pool_status = app_deps.database_service.get_pool_status()

        return {
            "status": "healthy" if healthy else "unhealthy",
            "type": "sqlite" if config.database.is_sqlite else "postgresql",
            "pool": pool_status,
        }
    except Exception as e:
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
