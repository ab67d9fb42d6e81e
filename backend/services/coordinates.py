"""
Plan ↔ world coordinate mapping.

The 2D plan stores furniture positions as percentages (0-100) of the
room footprint: ``x`` runs along the room length, ``y`` along the room
width. The 3D scene works in feet with the room centred on the origin,
floor on the XZ plane and Y pointing up. Plan ``x`` maps to world X and
plan ``y`` maps to world Z.
"""

import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

MOVE_STEP = 1.0       # world units (ft) per arrow-key press
ROTATION_STEP = 5     # degrees per q / e press
QUARTER_TURN = 90


@dataclass(frozen=True)
class RoomDimensions:
    width: float
    length: float
    height: float
    wall_color: str = "#808080"

    def __post_init__(self):
        for name in ("width", "length", "height"):
            if getattr(self, name) <= 0:
                raise ValueError(f"Room {name} must be positive")
        if not HEX_COLOR.match(self.wall_color):
            raise ValueError(f"Invalid wall color '{self.wall_color}'")

    def with_changes(self, **changes) -> "RoomDimensions":
        return replace(self, **changes)


@dataclass(frozen=True)
class CanvasRect:
    """On-screen rectangle of a plan or 3D canvas, in pixels."""
    left: float
    top: float
    width: float
    height: float


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def to_world(x: float, y: float, room: RoomDimensions) -> Tuple[float, float]:
    """Plan percentages → world (X, Z)."""
    wx = (x / 100.0) * room.length - room.length / 2.0
    wz = (y / 100.0) * room.width - room.width / 2.0
    return wx, wz


def to_plan(wx: float, wz: float, room: RoomDimensions) -> Tuple[float, float]:
    """World (X, Z) → plan percentages, clamped to the room."""
    x = ((wx + room.length / 2.0) / room.length) * 100.0
    y = ((wz + room.width / 2.0) / room.width) * 100.0
    return _clamp(x, 0.0, 100.0), _clamp(y, 0.0, 100.0)


def pointer_to_percent(client_x: float, client_y: float, rect: CanvasRect) -> Tuple[float, float]:
    """Pointer position inside the plan canvas → plan percentages (unclamped)."""
    x = ((client_x - rect.left) / rect.width) * 100.0
    y = ((client_y - rect.top) / rect.height) * 100.0
    return x, y


def pointer_to_ndc(client_x: float, client_y: float, rect: CanvasRect) -> Tuple[float, float]:
    """Pointer position → normalized device coordinates (-1..1, y up)."""
    x = ((client_x - rect.left) / rect.width) * 2.0 - 1.0
    y = -((client_y - rect.top) / rect.height) * 2.0 + 1.0
    return x, y


def clamp_drop(item: dict, x: float, y: float) -> dict:
    """
    Place *item* at a dropped plan position.

    The footprint is kept inside the room: ``x`` is limited to
    ``[0, 100 - width]`` and ``y`` to ``[0, 100 - depth]``.
    """
    return {
        **item,
        "x": max(0.0, min(100.0 - item["width"], x)),
        "y": max(0.0, min(100.0 - item["depth"], y)),
    }


def drop_at_pointer(item: dict, client_x: float, client_y: float, rect: CanvasRect) -> dict:
    x, y = pointer_to_percent(client_x, client_y, rect)
    return clamp_drop(item, x, y)


def rotate_quarter(rotation: float) -> float:
    return (rotation + QUARTER_TURN) % 360


def nudge(item: dict, key: str, room: RoomDimensions) -> Optional[dict]:
    """
    Apply a keyboard nudge to *item*.

    Arrow keys move it one world unit, ``q``/``e`` rotate it
    counter-clockwise/clockwise. Returns ``None`` for any other key.
    """
    wx, wz = to_world(item["x"], item["y"], room)
    rotation = item["rotation"]

    if key == "ArrowLeft":
        wx -= MOVE_STEP
    elif key == "ArrowRight":
        wx += MOVE_STEP
    elif key == "ArrowUp":
        wz -= MOVE_STEP
    elif key == "ArrowDown":
        wz += MOVE_STEP
    elif key == "q":
        rotation = (rotation - ROTATION_STEP + 360) % 360
    elif key == "e":
        rotation = (rotation + ROTATION_STEP) % 360
    else:
        return None

    x, y = to_plan(wx, wz, room)
    return {**item, "x": x, "y": y, "rotation": rotation}
