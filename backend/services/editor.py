"""
Room editor state.

Holds the room being designed, its furniture and the current selection,
and applies the editing operations offered by the design tools and
properties panels. Furniture items are plain dicts in the same shape
the API stores them in.
"""

import json
import uuid
import logging
from typing import List, Optional

from config import (
    DEFAULT_ROOM_WIDTH, DEFAULT_ROOM_LENGTH, DEFAULT_ROOM_HEIGHT, DEFAULT_WALL_COLOR,
)
from services.catalog import new_furniture_item, preset_size
from services.coordinates import RoomDimensions, clamp_drop, rotate_quarter

logger = logging.getLogger(__name__)

ZOOM_STEP = 0.1
ZOOM_MIN = 0.5
ZOOM_MAX = 2.0
DUPLICATE_OFFSET = 20
VIEW_MODES = ("2D", "3D")


class EditorState:
    def __init__(self, room: Optional[RoomDimensions] = None,
                 furniture: Optional[List[dict]] = None):
        self.room = room or RoomDimensions(
            width=DEFAULT_ROOM_WIDTH,
            length=DEFAULT_ROOM_LENGTH,
            height=DEFAULT_ROOM_HEIGHT,
            wall_color=DEFAULT_WALL_COLOR,
        )
        self.furniture: List[dict] = [dict(item) for item in (furniture or [])]
        self.selected_id: Optional[str] = None
        self.view_mode = "2D"
        self.zoom = 1.0

    # ── Lookup ────────────────────────────────────────────────────────

    def find(self, item_id: str) -> Optional[dict]:
        for item in self.furniture:
            if item["id"] == item_id:
                return item
        return None

    @property
    def selected(self) -> Optional[dict]:
        if self.selected_id is None:
            return None
        return self.find(self.selected_id)

    # ── Furniture ─────────────────────────────────────────────────────

    def add_furniture(self, furniture_type: str) -> dict:
        item = new_furniture_item(furniture_type)
        self.furniture.append(item)
        self.selected_id = item["id"]
        logger.debug(f"Added {item['name']} ({item['id']})")
        return item

    def update_furniture(self, updated: dict) -> Optional[dict]:
        """Replace the item with the same id. Unknown ids are ignored."""
        for i, item in enumerate(self.furniture):
            if item["id"] == updated["id"]:
                self.furniture[i] = dict(updated)
                return self.furniture[i]
        return None

    def remove_furniture(self, item_id: str) -> bool:
        before = len(self.furniture)
        self.furniture = [item for item in self.furniture if item["id"] != item_id]
        if self.selected_id == item_id:
            self.selected_id = None
        return len(self.furniture) < before

    def duplicate_furniture(self, item_id: str) -> Optional[dict]:
        source = self.find(item_id)
        if source is None:
            return None
        copy = {
            **source,
            "id": str(uuid.uuid4()),
            "x": source["x"] + DUPLICATE_OFFSET,
            "y": source["y"] + DUPLICATE_OFFSET,
        }
        self.furniture.append(copy)
        self.selected_id = copy["id"]
        return copy

    def select(self, item_id: Optional[str]) -> Optional[dict]:
        if item_id is None:
            self.selected_id = None
            return None
        item = self.find(item_id)
        if item is not None:
            self.selected_id = item_id
        return item

    def move_to(self, item_id: str, x: float, y: float) -> Optional[dict]:
        """Drop an item at a plan position, keeping its footprint in the room."""
        item = self.find(item_id)
        if item is None:
            return None
        return self.update_furniture(clamp_drop(item, x, y))

    def rotate_selected(self) -> Optional[dict]:
        item = self.selected
        if item is None:
            return None
        return self.update_furniture({**item, "rotation": rotate_quarter(item["rotation"])})

    # ── Properties panel ──────────────────────────────────────────────

    def set_property(self, name: str, value) -> Optional[dict]:
        item = self.selected
        if item is None:
            return None
        if name in ("width", "height", "depth") and not value > 0:
            return item
        if name in ("x", "y") and not value >= 0:
            return item
        if name == "rotation" and not 0 <= value <= 359:
            return item
        return self.update_furniture({**item, name: value})

    def apply_preset(self, preset: str) -> Optional[dict]:
        item = self.selected
        if item is None or not item.get("type"):
            return None
        return self.update_furniture({**item, **preset_size(item["type"], preset)})

    def apply_scale(self, factor: float) -> Optional[dict]:
        """Scale all dimensions of the selection, rounding and keeping each ≥ 1."""
        item = self.selected
        if item is None:
            return None
        scaled = {
            dim: max(1, round((item.get(dim) or 0) * factor))
            for dim in ("width", "height", "depth")
        }
        return self.update_furniture({**item, **scaled})

    # ── Room & view ───────────────────────────────────────────────────

    def set_dimensions(self, **changes) -> RoomDimensions:
        """
        Update room dimensions. Sizes are rounded to whole feet; sizes
        that round to zero or below and malformed colors are ignored,
        leaving the previous value in place.
        """
        accepted = {}
        for name, value in changes.items():
            if name in ("width", "length", "height"):
                if value is not None and round(value) > 0:
                    accepted[name] = int(round(value))
            elif name == "wall_color":
                try:
                    self.room.with_changes(wall_color=value)
                except ValueError:
                    continue
                accepted[name] = value
            else:
                raise ValueError(f"Unknown room dimension '{name}'")
        self.room = self.room.with_changes(**accepted)
        return self.room

    def set_view_mode(self, mode: str):
        if mode not in VIEW_MODES:
            raise ValueError(f"View mode must be one of {VIEW_MODES}")
        self.view_mode = mode

    def zoom_in(self) -> float:
        self.zoom = round(min(self.zoom + ZOOM_STEP, ZOOM_MAX), 2)
        return self.zoom

    def zoom_out(self) -> float:
        self.zoom = round(max(self.zoom - ZOOM_STEP, ZOOM_MIN), 2)
        return self.zoom

    def reset_zoom(self) -> float:
        self.zoom = 1.0
        return self.zoom

    # ── Persistence ───────────────────────────────────────────────────

    def to_design_payload(self, name: str, description: str = "") -> dict:
        return {
            "name": name,
            "description": description,
            "room_width": self.room.width,
            "room_length": self.room.length,
            "room_height": self.room.height,
            "wall_color": self.room.wall_color,
            "furniture": [dict(item) for item in self.furniture],
        }

    @classmethod
    def from_design(cls, design) -> "EditorState":
        """Open a stored design (ORM row or dict) for editing."""
        get = design.get if isinstance(design, dict) else lambda k: getattr(design, k)
        furniture = get("furniture")
        if isinstance(furniture, str):
            furniture = json.loads(furniture or "[]")
        room = RoomDimensions(
            width=get("room_width") or DEFAULT_ROOM_WIDTH,
            length=get("room_length") or DEFAULT_ROOM_LENGTH,
            height=get("room_height") or DEFAULT_ROOM_HEIGHT,
            wall_color=get("wall_color") or DEFAULT_WALL_COLOR,
        )
        return cls(room=room, furniture=furniture)
