"""
City comparison API endpoints.

Side-by-side records with their aggregated views, and named comparisons the
user can save and reopen.
"""

from datetime import datetime
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, ConfigDict

from cpi_app.api.aggregates import composite_to_dict
from cpi_app.api.auth import get_user_id
from cpi_app.api.dependencies import get_prosperity_service
from cpi_app.api.history import RecordResponse
from cpi_app.config import settings
from cpi_app.services.prosperity_service import (
    ProsperityService,
    parse_city_keys,
    score_deltas,
)
from cpi_engine.aggregator import aggregate


router = APIRouter()


# ----- Pydantic Schemas -----


class CityKeySchema(BaseModel):
    city: str
    country: str


class ComparisonCreate(BaseModel):
    """Schema for saving a named comparison."""

    name: str
    cities: List[CityKeySchema]


class ComparisonResponse(BaseModel):
    """Schema for a saved comparison."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    cities: List[Dict[str, str]]
    created_at: Optional[datetime] = None


# ----- API Endpoints -----


@router.get("/compare")
async def compare_cities(
    cities: str = Query(..., description="Comma-separated city:country pairs"),
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """
    Fetch several city records for side-by-side display.

    Records come back unmodified, each with its aggregated view. Deltas are
    given for every city against the first one found.
    """
    records = await service.compare_cities(user_id, parse_city_keys(cities))
    views = [aggregate(r.fields) for r in records]

    comparisons = []
    for record, view in zip(records, views):
        comparisons.append({
            "record": RecordResponse.model_validate(record).model_dump(mode="json"),
            "aggregate": composite_to_dict(view, settings.score_precision),
            "deltas": score_deltas(views[0], view),
        })

    return {"count": len(records), "cities": comparisons}


@router.get("", response_model=List[ComparisonResponse])
async def list_comparisons(
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """List the user's saved comparisons."""
    return await service.list_comparisons(user_id)


@router.post("", response_model=ComparisonResponse)
async def save_comparison(
    request: ComparisonCreate,
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """Save a named set of cities."""
    keys = [(c.city, c.country) for c in request.cities]
    return await service.save_comparison(user_id, request.name, keys)


@router.delete("/{comparison_id}")
async def delete_comparison(
    comparison_id: int,
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """Delete one of the user's saved comparisons."""
    deleted = await service.delete_comparison(user_id, comparison_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Comparison not found")
    return {"status": "deleted", "id": comparison_id}
