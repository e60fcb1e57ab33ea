"""API routes for the parts catalog and external part lookups"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from typing import Any
import logging

from api.state import AppState, get_app_state

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/parts", tags=["parts"])


class PriceUpdateRequest(BaseModel):
    price: Any


class PartCreateRequest(BaseModel):
    part_number: str
    manufacturer: str
    description: str
    price: Any
    category: str = ""


class SiteToggleRequest(BaseModel):
    enabled: bool


class PriceRefreshRequest(BaseModel):
    enabled: bool


def _part_payload(state: AppState, part) -> dict:
    return {**part.model_dump(mode="json"), "stale": state.catalog.is_stale(part)}


@router.get("")
async def search_parts(
    query: str = Query("", description="Matches part number, description or category"),
    manufacturer: str = Query("", description="Manufacturer filter"),
    state: AppState = Depends(get_app_state)
):
    parts = state.catalog.search(query, manufacturer)
    return {"count": len(parts), "parts": [_part_payload(state, p) for p in parts]}


@router.get("/stale")
async def stale_parts(state: AppState = Depends(get_app_state)):
    parts = state.catalog.stale_parts()
    return {
        "count": len(parts),
        "parts": [p.part_number for p in parts],
        "price_refresh_enabled": state.catalog.price_refresh_enabled,
    }


@router.put("/price-refresh")
async def set_price_refresh(request: PriceRefreshRequest, state: AppState = Depends(get_app_state)):
    await state.catalog.set_price_refresh_enabled(request.enabled)
    state.presentation = state.presentation.model_copy(
        update={"price_refresh_enabled": request.enabled}
    )
    return {"price_refresh_enabled": request.enabled}


@router.post("", status_code=201)
async def add_part(request: PartCreateRequest, state: AppState = Depends(get_app_state)):
    part = await state.catalog.add_part(
        part_number=request.part_number,
        manufacturer=request.manufacturer,
        description=request.description,
        price=request.price,
        category=request.category,
    )
    return {"message": "Part added", "part": _part_payload(state, part)}


@router.get("/lookup-sites")
async def list_lookup_sites(state: AppState = Depends(get_app_state)):
    return {"sites": [s.model_dump(mode="json") for s in state.lookup_sites.sites]}


@router.patch("/lookup-sites/{name}")
async def toggle_lookup_site(
    name: str,
    request: SiteToggleRequest,
    state: AppState = Depends(get_app_state)
):
    site = await state.lookup_sites.set_enabled(name, request.enabled)
    return {"site": site.model_dump(mode="json")}


@router.get("/lookup-url")
async def lookup_url(
    site: str = Query(..., description="Lookup site name"),
    term: str = Query("", description="Search term"),
    state: AppState = Depends(get_app_state)
):
    """Outbound URL for a configured site; non-approved domains are a 400"""
    return {"site": site, "url": state.lookup_sites.lookup_url(site, term)}


@router.put("/{part_number:path}/price")
async def update_price(
    part_number: str,
    request: PriceUpdateRequest,
    state: AppState = Depends(get_app_state)
):
    part = await state.catalog.record_price_update(part_number, request.price)
    return {"message": "Price updated", "part": _part_payload(state, part)}
