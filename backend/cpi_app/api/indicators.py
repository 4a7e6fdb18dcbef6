"""
Indicator API endpoints.

Catalog of indicator definitions, plus preview (standardize only) and submit
(standardize and save into the city record).
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from cpi_app.api.auth import get_user_id
from cpi_app.api.dependencies import get_prosperity_service
from cpi_app.services.prosperity_service import ProsperityService
from cpi_engine.hierarchy import CPI_HIERARCHY
from cpi_engine.indicators import INDICATORS, IndicatorDefinition, get_indicator


router = APIRouter()


# ----- Pydantic Schemas -----


class InputFieldResponse(BaseModel):
    """One input of an indicator form."""

    name: str
    label: str
    kind: str
    positive: bool
    choices: List[str] = []


class IndicatorResponse(BaseModel):
    """Schema for an indicator definition."""

    key: str
    name: str
    unit: str
    shape: str
    banding: str
    sub_dimension: Optional[str] = None
    inputs: List[InputFieldResponse]
    params: Optional[Dict[str, Any]] = None  # None when benchmarks depend on the inputs


class PreviewRequest(BaseModel):
    """Raw inputs to standardize."""

    inputs: Dict[str, Any]


class SubmitRequest(BaseModel):
    """Raw inputs for one indicator of one city."""

    city: str
    country: str
    city_name: Optional[str] = None
    inputs: Dict[str, Any]


class IndicatorResultResponse(BaseModel):
    """Schema for a standardized indicator."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    raw: float
    standardized: float
    comment: str


def _describe(definition: IndicatorDefinition) -> IndicatorResponse:
    sub_dimension = CPI_HIERARCHY.sub_dimension_for(definition.key)
    return IndicatorResponse(
        key=definition.key,
        name=definition.name,
        unit=definition.unit,
        shape=definition.shape,
        banding=definition.banding,
        sub_dimension=sub_dimension.key if sub_dimension else None,
        inputs=[
            InputFieldResponse(
                name=f.name,
                label=f.label,
                kind=f.kind,
                positive=f.positive,
                choices=list(f.choices),
            )
            for f in definition.inputs
        ],
        params=None if callable(definition.params) else dict(definition.params),
    )


# ----- API Endpoints -----


@router.get("", response_model=List[IndicatorResponse])
async def list_indicators():
    """List every indicator that can be standardized."""
    return [_describe(d) for d in INDICATORS.values()]


@router.get("/{key}", response_model=IndicatorResponse)
async def get_indicator_definition(key: str):
    """Get one indicator definition. Unknown keys return 404."""
    return _describe(get_indicator(key))


@router.post("/{key}/preview", response_model=IndicatorResultResponse)
async def preview_indicator(
    key: str,
    request: PreviewRequest,
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """Standardize raw inputs without saving them."""
    return service.preview_indicator(key, request.inputs)


@router.post("/{key}/submit", response_model=IndicatorResultResponse)
async def submit_indicator(
    key: str,
    request: SubmitRequest,
    user_id: str = Depends(get_user_id),
    service: ProsperityService = Depends(get_prosperity_service),
):
    """
    Standardize raw inputs and merge the result into the city's record.

    Stores `{key}`, `{key}_standardized` and `{key}_comment`; resubmitting
    overwrites the previous values for this indicator only.
    """
    return await service.submit_indicator(
        city=request.city,
        country=request.country,
        key=key,
        raw_inputs=request.inputs,
        user_id=user_id,
        city_name=request.city_name,
    )
