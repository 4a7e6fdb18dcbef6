"""
Calculation history API endpoints.

Each record holds everything computed so far for one of the user's cities.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict

from cpi_app.api.auth import get_user_id
from cpi_app.api.dependencies import get_prosperity_service
from cpi_app.services.prosperity_service import ProsperityService


router = APIRouter()


# ----- Pydantic Schemas -----


class RecordResponse(BaseModel):
    """Schema for a stored city record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    city: str
    country: str
    city_name: Optional[str] = None
    fields: Dict[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RecordFieldsRequest(BaseModel):
    """Already-computed fields to merge into a city record."""

    city: str
    country: str
    city_name: Optional[str] = None
    fields: Dict[str, Any]


# ----- API Endpoints -----


@router.get("", response_model=List[RecordResponse])
async def list_records(
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """List the user's city records, most recently updated first."""
    return await service.list_cities(user_id)


@router.post("", response_model=RecordResponse)
async def upsert_record_fields(
    request: RecordFieldsRequest,
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """
    Merge raw record fields into a city record, creating it if needed.

    Field names must be `{indicator}`, `{indicator}_standardized` or
    `{indicator}_comment` for an indicator in the CPI hierarchy.
    """
    return await service.submit_record_fields(
        user_id=user_id,
        city=request.city,
        country=request.country,
        fields=request.fields,
        city_name=request.city_name,
    )


@router.get("/{record_id}", response_model=RecordResponse)
async def get_record(
    record_id: int,
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """Get a single record. Records of other users are forbidden."""
    record = await service.get_record(record_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Record not found")
    if record.user_id != user_id:
        raise HTTPException(status_code=403, detail="Access denied")
    return record


@router.delete("/{record_id}")
async def delete_record(
    record_id: int,
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """Delete one of the user's records and everything computed for that city."""
    deleted = await service.delete_record(user_id, record_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Record not found")
    return {"status": "deleted", "id": record_id}
