"""Design CRUD routes, layout checks and 3D export, all scoped to the logged-in user."""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from config import EXPORT_DIR, RECENT_DESIGNS_LIMIT
from database import get_db
from models import User
from schemas import DesignCreate, DesignOut, DesignUpdate, LayoutCheckOut
from services.auth import current_user
from services.coordinates import RoomDimensions
from services.designs import (
    create_design,
    delete_design,
    get_design_by_id,
    get_designs_by_user,
    get_recent_designs_by_user,
    update_design,
)
from services.footprint import check_layout
from services.scene3d import export_scene

router = APIRouter(prefix="/api/designs", tags=["designs"])


async def _owned_design(db: AsyncSession, raw_id: str, user: User, action: str):
    """Load a design by its path id, enforcing ownership."""
    try:
        design_id = int(raw_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid design ID")

    design = await get_design_by_id(db, design_id)
    if not design:
        raise HTTPException(status_code=404, detail="Design not found")
    if design.user_id != user.id:
        raise HTTPException(status_code=403, detail=f"You don't have permission to {action} this design")
    return design


def _room_of(design) -> RoomDimensions:
    try:
        return RoomDimensions(
            width=design.room_width,
            length=design.room_length,
            height=design.room_height,
            wall_color=design.wall_color,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=DesignOut, status_code=201)
async def post_design(req: DesignCreate, db: AsyncSession = Depends(get_db),
                      user: User = Depends(current_user)):
    """Save a new design for the current user."""
    return await create_design(db, user.id, req.model_dump())


@router.get("", response_model=list[DesignOut])
async def list_designs(db: AsyncSession = Depends(get_db), user: User = Depends(current_user)):
    return await get_designs_by_user(db, user.id)


@router.get("/recent", response_model=list[DesignOut])
async def recent_designs(limit: int = Query(RECENT_DESIGNS_LIMIT, ge=1),
                         db: AsyncSession = Depends(get_db),
                         user: User = Depends(current_user)):
    return await get_recent_designs_by_user(db, user.id, limit)


@router.get("/{design_id}", response_model=DesignOut)
async def get_design(design_id: str, db: AsyncSession = Depends(get_db),
                     user: User = Depends(current_user)):
    return await _owned_design(db, design_id, user, "view")


@router.patch("/{design_id}", response_model=DesignOut)
async def patch_design(design_id: str, req: DesignUpdate, db: AsyncSession = Depends(get_db),
                       user: User = Depends(current_user)):
    """Partially update a design; omitted fields keep their stored values."""
    design = await _owned_design(db, design_id, user, "update")
    return await update_design(db, design, req.model_dump(exclude_unset=True))


@router.delete("/{design_id}")
async def remove_design(design_id: str, db: AsyncSession = Depends(get_db),
                        user: User = Depends(current_user)):
    design = await _owned_design(db, design_id, user, "delete")
    await delete_design(db, design)
    return {"message": "Design deleted successfully"}


@router.get("/{design_id}/layout-check", response_model=LayoutCheckOut)
async def layout_check(design_id: str, db: AsyncSession = Depends(get_db),
                       user: User = Depends(current_user)):
    """Report overlapping furniture and furniture outside the room."""
    design = await _owned_design(db, design_id, user, "view")
    result = check_layout(design.furniture_items, _room_of(design))
    return LayoutCheckOut(design_id=design.id, **result)


@router.get("/{design_id}/model")
async def download_model(design_id: str, db: AsyncSession = Depends(get_db),
                         user: User = Depends(current_user)):
    """Export the design's room and furniture as a GLB file."""
    design = await _owned_design(db, design_id, user, "view")
    room = _room_of(design)
    output = str(EXPORT_DIR / f"design_{design.id}.glb")
    try:
        path = export_scene(room, design.furniture_items, output)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return FileResponse(path, media_type="model/gltf-binary", filename=f"design_{design.id}.glb")
