import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from llmstxt.core.config import get_settings
from llmstxt.db import ping_db, ping_redis

logger = structlog.get_logger(__name__)

router = APIRouter()

SERVICE_NAME = "llmstxt"


@router.get("/health")
async def health_check(request: Request):
    """Liveness probe; 503 once SIGTERM was received so traffic drains."""
    if getattr(request.app.state, "shutting_down", False):
        return JSONResponse(status_code=503, content={"status": "shutting_down", "service": SERVICE_NAME})
    return {"status": "healthy", "service": SERVICE_NAME}


@router.get("/ready")
async def readiness_check():
    """Readiness probe: the cache database, plus Redis when upserts are locked."""
    probes = {"database": ping_db}
    if get_settings().cache_upsert_lock_enabled:
        probes["redis"] = ping_redis

    checks: dict[str, bool] = {}
    for name, probe in probes.items():
        try:
            await probe()
            checks[name] = True
        except Exception as e:
            logger.error("readiness_probe_failed", dependency=name, error=str(e), error_type=type(e).__name__)
            checks[name] = False

    ready = all(checks.values())
    return JSONResponse(
        status_code=200 if ready else 503,
        content={"status": "ready" if ready else "degraded", "checks": checks},
    )
