"""Health check endpoint — database connectivity and reference currency."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.persistence.database import get_session
from app.adapters.persistence.repositories import SqlCurrencyLookup
from app.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(session: AsyncSession = Depends(get_session)):
    """Report whether searches can run: database reachable, reference currency present."""
    reference_status = "unknown"
    try:
        await session.execute(text("SELECT 1"))
        db_status = "connected"
        lookup = SqlCurrencyLookup(session, reference_code=settings.reference_currency_code)
        reference = await lookup.get_reference_currency()
        reference_status = reference.code if reference else "missing"
    except Exception as e:
        db_status = f"error: {e}"

    healthy = db_status == "connected" and reference_status not in ("missing", "unknown")
    return {
        "status": "ok" if healthy else "degraded",
        "database": db_status,
        "reference_currency": reference_status,
        "service": "ExchanGo nearby office search",
    }
