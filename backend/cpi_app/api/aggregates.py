"""
Aggregated view API endpoints.

The City Prosperity Index and its dimensions are recomputed from the stored
record on every request; levels without data are reported as "no data".
"""

from typing import Any, Dict, Union

from fastapi import APIRouter, Depends, Query

from cpi_app.api.auth import get_user_id
from cpi_app.api.dependencies import get_prosperity_service
from cpi_app.config import settings
from cpi_app.services.prosperity_service import ProsperityService
from cpi_engine.aggregator import (
    Absent,
    CompositeResult,
    DimensionResult,
    IndicatorScore,
    SubDimensionResult,
)
from cpi_engine.hierarchy import CPI_HIERARCHY


router = APIRouter()


def _absent(level: Absent) -> Dict[str, Any]:
    return {"key": level.key, "name": level.name, "status": level.status}


def _indicator(level: Union[IndicatorScore, Absent]) -> Dict[str, Any]:
    if isinstance(level, Absent):
        return _absent(level)
    return {
        "key": level.key,
        "status": "ok",
        "standardized": level.standardized,
        "comment": level.comment,
    }


def _sub_dimension(level: Union[SubDimensionResult, Absent], precision: int) -> Dict[str, Any]:
    if isinstance(level, Absent):
        return _absent(level)
    return {
        "key": level.key,
        "name": level.name,
        "status": "ok",
        "average": round(level.average, precision),
        "comment": level.comment,
        "indicators": [_indicator(i) for i in level.indicators],
    }


def _dimension(level: Union[DimensionResult, Absent], precision: int) -> Dict[str, Any]:
    if isinstance(level, Absent):
        return _absent(level)
    return {
        "key": level.key,
        "name": level.name,
        "status": "ok",
        "average": round(level.average, precision),
        "comment": level.comment,
        "sub_dimensions": [_sub_dimension(s, precision) for s in level.sub_dimensions],
    }


def composite_to_dict(result: CompositeResult, precision: int = 2) -> Dict[str, Any]:
    """Serialize an aggregated view; averages are rounded for display only."""
    if isinstance(result.index, Absent):
        index = _absent(result.index)
    else:
        index = {
            "key": "cpi",
            "name": "City Prosperity Index",
            "status": "ok",
            "average": round(result.index.average, precision),
            "comment": result.index.comment,
        }
    return {
        "index": index,
        "dimensions": [_dimension(d, precision) for d in result.dimensions],
    }


# ----- API Endpoints -----


@router.get("/aggregates")
async def get_aggregated_view(
    city: str = Query(..., description="City identifier"),
    country: str = Query(..., description="Country identifier"),
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """Recompute the CPI tree for one of the user's cities."""
    result = await service.get_aggregated_view(city, country, user_id)
    return {
        "city": city,
        "country": country,
        **composite_to_dict(result, settings.score_precision),
    }


@router.get("/hierarchy")
async def get_hierarchy():
    """The fixed Dimension -> Sub-Dimension -> indicator tree."""
    return CPI_HIERARCHY.to_dict()
