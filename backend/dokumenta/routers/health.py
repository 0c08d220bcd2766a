"""Health check router."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dokumenta.database import get_db, ping_db

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@router.get("/ready")
async def readiness_check(db: Session = Depends(get_db)):
    """Readiness check (DB connectivity)."""
    ping_db(db)
    return {"status": "ready", "checks": {"database": "ok"}}
