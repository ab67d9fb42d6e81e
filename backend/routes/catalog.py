"""Furniture catalog routes (public, no login needed)."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from schemas import CatalogItemOut, SizePresetOut
from services.catalog import categories, filter_by_category, get_catalog_item, presets_for

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("", response_model=list[CatalogItemOut])
async def list_catalog(category: str = "all"):
    return [asdict(item) for item in filter_by_category(category)]


@router.get("/categories", response_model=list[str])
async def list_categories():
    return categories()


@router.get("/{furniture_type}/presets", response_model=dict[str, SizePresetOut])
async def type_presets(furniture_type: str):
    if get_catalog_item(furniture_type) is None:
        raise HTTPException(status_code=404, detail=f"Unknown furniture type '{furniture_type}'")
    return presets_for(furniture_type)
