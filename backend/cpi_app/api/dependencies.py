"""
Shared FastAPI dependencies.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cpi_app.config import settings
from cpi_app.database import get_db
from cpi_app.services.prosperity_service import ProsperityService
from cpi_app.services.record_store import SqlAlchemyRecordStore


def get_prosperity_service(db: AsyncSession = Depends(get_db)) -> ProsperityService:
    """A ProsperityService bound to the request's database session."""
    return ProsperityService(
        SqlAlchemyRecordStore(db),
        precision=settings.score_precision,
        calculation_log_dir=settings.calculation_log_dir,
    )
