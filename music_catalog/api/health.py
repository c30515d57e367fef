"""Health check endpoint."""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..core.settings import app_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)) -> dict:
    """Report service status and database reachability."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok", "version": app_settings.app_version}
