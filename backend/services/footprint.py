"""
Furniture footprint checks.

Projects every item onto the floor as a rotated rectangle (world feet,
same sizing as the 3D models) and reports overlapping pairs, items that
stick out of the room, and how much of the floor is covered.
"""

from typing import Dict, List, Tuple

from shapely.affinity import rotate, translate
from shapely.geometry import Polygon, box
from shapely.ops import unary_union

from services.coordinates import RoomDimensions, to_world
from services.scene3d import model_size

OVERLAP_TOLERANCE = 0.01  # sq ft


def room_polygon(room: RoomDimensions) -> Polygon:
    return box(-room.length / 2, -room.width / 2, room.length / 2, room.width / 2)


def item_footprint(item: dict, room: RoomDimensions) -> Polygon:
    """
    Floor footprint of *item* in world X/Z.

    A positive rotation about +Y takes +X towards -Z, the opposite sense
    of shapely's rotation in the (X, Z) plane, so the angle is negated.
    """
    w, _, d = model_size(item)
    rect = box(-w / 2, -d / 2, w / 2, d / 2)
    rect = rotate(rect, -float(item["rotation"]), origin=(0, 0))
    wx, wz = to_world(item["x"], item["y"], room)
    return translate(rect, wx, wz)


def detect_overlaps(items: List[dict], room: RoomDimensions,
                    tolerance: float = OVERLAP_TOLERANCE) -> List[Tuple[str, str]]:
    """
    Id pairs of items whose footprints overlap.

    Items that only touch along an edge are not counted.
    """
    shapes = [(str(it["id"]), item_footprint(it, room)) for it in items]
    overlaps = []
    for i in range(len(shapes)):
        for j in range(i + 1, len(shapes)):
            if shapes[i][1].intersection(shapes[j][1]).area > tolerance:
                overlaps.append((shapes[i][0], shapes[j][0]))
    return overlaps


def items_outside_room(items: List[dict], room: RoomDimensions,
                       tolerance: float = OVERLAP_TOLERANCE) -> List[str]:
    boundary = room_polygon(room)
    outside = []
    for it in items:
        fp = item_footprint(it, room)
        if fp.difference(boundary).area > tolerance:
            outside.append(str(it["id"]))
    return outside


def coverage_ratio(items: List[dict], room: RoomDimensions) -> float:
    """Fraction of the floor covered by furniture (union, so overlaps count once)."""
    if not items:
        return 0.0
    boundary = room_polygon(room)
    merged = unary_union([item_footprint(it, room) for it in items])
    return merged.intersection(boundary).area / boundary.area


def check_layout(items: List[dict], room: RoomDimensions) -> Dict:
    overlaps = detect_overlaps(items, room)
    outside = items_outside_room(items, room)
    return {
        "overlaps": overlaps,
        "outside_room": outside,
        "coverage_ratio": round(coverage_ratio(items, room), 4),
        "is_valid": not overlaps and not outside,
    }
