"""Health check endpoints.

- /health: liveness, always 200
- /healthz: DB and Redis connectivity plus classifier mode, 503 when degraded
"""

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from docsense.api.deps import ServicesDep
from docsense.llm.client import OpenAIClassifier
from docsense.services import Services

router = APIRouter()


async def check_db(services: Services) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    if services.engine is None:
        return (True, "in_memory")

    try:
        async with services.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_redis(services: Services) -> tuple[bool, str]:
    """Check Redis connectivity.

    Returns:
        (is_ok, status_message)
    """
    if services.redis is None:
        return (True, "not_configured")

    try:
        await services.redis.ping()
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


def classifier_status(services: Services) -> str:
    return "llm" if isinstance(services.classifier, OpenAIClassifier) else "heuristic"


@router.get("/health")
async def health() -> dict[str, str]:
    """Simple liveness check."""
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(services: ServicesDep) -> dict[str, Any] | JSONResponse:
    """Component health.

    Returns:
        200 with component status if core systems ok
        503 if the database or Redis is unreachable
    """
    db_ok, db_status = await check_db(services)
    redis_ok, redis_status = await check_redis(services)

    core_ok = db_ok and redis_ok
    body = {
        "status": "ok" if core_ok else "degraded",
        "components": {
            "db": db_status,
            "redis": redis_status,
            "classifier": classifier_status(services),
        },
    }

    if not core_ok:
        return JSONResponse(content=body, status_code=503)

    return body
