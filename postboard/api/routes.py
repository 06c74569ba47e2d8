"""Service-level routes."""

from fastapi import APIRouter

from postboard.database import health_check

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health() -> dict:
    """Report liveness and database reachability."""
    database_ok = await health_check()
    return {"status": "ok" if database_ok else "degraded", "database": database_ok}
