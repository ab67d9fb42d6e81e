"""
Editor geometry routes.

Stateless helpers for clients that do not carry their own geometry
code: new catalog items, plan ↔ world conversion, keyboard nudges,
plan drops and 3D picking against the current furniture state.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from schemas import FurnitureItem
from services.catalog import new_furniture_item
from services.coordinates import (
    CanvasRect,
    RoomDimensions,
    drop_at_pointer,
    nudge,
    pointer_to_ndc,
    to_plan,
    to_world,
)
from services.editor import EditorState
from services.scene3d import Camera, SceneSync, intersect_ground, pick

router = APIRouter(prefix="/api/editor", tags=["editor"])


# ---------- Request/Response Models ----------

class RoomIn(BaseModel):
    width: float = Field(..., gt=0)
    length: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    wall_color: str = "#808080"

    def to_room(self) -> RoomDimensions:
        try:
            return RoomDimensions(**self.model_dump())
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))


class RectIn(BaseModel):
    left: float = 0
    top: float = 0
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class NewItemRequest(BaseModel):
    type: str


class ToWorldRequest(BaseModel):
    room: RoomIn
    x: float
    y: float


class ToPlanRequest(BaseModel):
    room: RoomIn
    x: float
    z: float


class NudgeRequest(BaseModel):
    room: RoomIn
    item: FurnitureItem
    key: str


class DropRequest(BaseModel):
    item: FurnitureItem
    client_x: float
    client_y: float
    rect: RectIn


class PickRequest(BaseModel):
    room: RoomIn
    items: List[FurnitureItem] = []
    selected_id: Optional[str] = None
    client_x: float
    client_y: float
    rect: RectIn


class PickResponse(BaseModel):
    item_id: Optional[str] = None
    ground: Optional[List[float]] = None


def _item_dict(item: FurnitureItem) -> dict:
    return item.model_dump(mode="json")


# ---------- Endpoints ----------

@router.post("/items", response_model=FurnitureItem)
async def create_item(req: NewItemRequest):
    """A new furniture item of the given catalog type, centred in the room."""
    try:
        return new_furniture_item(req.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/to-world")
async def plan_to_world(req: ToWorldRequest):
    x, z = to_world(req.x, req.y, req.room.to_room())
    return {"x": x, "z": z}


@router.post("/to-plan")
async def world_to_plan(req: ToPlanRequest):
    x, y = to_plan(req.x, req.z, req.room.to_room())
    return {"x": x, "y": y}


@router.post("/nudge", response_model=FurnitureItem)
async def nudge_item(req: NudgeRequest):
    """Apply an arrow-key move or q/e rotation to an item."""
    updated = nudge(_item_dict(req.item), req.key, req.room.to_room())
    if updated is None:
        raise HTTPException(status_code=400, detail=f"Unsupported key '{req.key}'")
    return updated


@router.post("/drop", response_model=FurnitureItem)
async def drop_item(req: DropRequest):
    """Place an item where it was dropped on the plan canvas."""
    rect = CanvasRect(**req.rect.model_dump())
    return drop_at_pointer(_item_dict(req.item), req.client_x, req.client_y, rect)


@router.post("/pick", response_model=PickResponse)
async def pick_item(req: PickRequest):
    """Which furniture item is under the pointer in the 3D view."""
    room = req.room.to_room()
    editor = EditorState(room=room, furniture=[_item_dict(i) for i in req.items])
    editor.select(req.selected_id)

    rect = CanvasRect(**req.rect.model_dump())
    camera = Camera(aspect=rect.width / rect.height)
    camera.reset(room)

    sync = SceneSync(room)
    sync.sync(editor.furniture, editor.selected_id)
    ray = camera.ray_from_ndc(pointer_to_ndc(req.client_x, req.client_y, rect))
    ground = intersect_ground(ray)
    return PickResponse(
        item_id=pick(sync, ray),
        ground=[float(v) for v in ground] if ground is not None else None,
    )
