"""Furniture footprint overlap / bounds checks."""
import pytest

from services.coordinates import RoomDimensions
from services.footprint import (
    check_layout,
    coverage_ratio,
    detect_overlaps,
    item_footprint,
    items_outside_room,
)

ROOM = RoomDimensions(width=12, length=15, height=8)


def _item(item_id, x=50, y=50, rotation=0, width=60, depth=30):
    # 60 x 30 → 10 ft x 5 ft on the floor
    return {"id": item_id, "type": "desk", "name": "Desk", "width": width, "height": 30,
            "depth": depth, "color": "#ec4899", "x": x, "y": y, "rotation": rotation}


def test_footprint_size_and_rotation():
    fp = item_footprint(_item("a"), ROOM)
    minx, minz, maxx, maxz = fp.bounds
    assert (maxx - minx, maxz - minz) == (pytest.approx(10), pytest.approx(5))

    fp = item_footprint(_item("a", rotation=90), ROOM)
    minx, minz, maxx, maxz = fp.bounds
    assert (maxx - minx, maxz - minz) == (pytest.approx(5), pytest.approx(10))


def test_overlapping_items_detected():
    assert detect_overlaps([_item("a"), _item("b", x=55)], ROOM) == [("a", "b")]


def test_touching_items_do_not_overlap():
    # 5 ft deep each; y step of 5/12 of the width puts them edge to edge
    items = [_item("a", y=50), _item("b", y=50 + 100 * 5 / 12)]
    assert detect_overlaps(items, ROOM) == []


def test_items_outside_room():
    items = [_item("in"), _item("out", x=100)]
    assert items_outside_room(items, ROOM) == ["out"]


def test_coverage_counts_overlap_once():
    one = coverage_ratio([_item("a")], ROOM)
    assert one == pytest.approx(50 / 180)
    assert coverage_ratio([_item("a"), _item("b")], ROOM) == pytest.approx(one)
    assert coverage_ratio([], ROOM) == 0.0


def test_check_layout_summary():
    result = check_layout([_item("a"), _item("b", x=55)], ROOM)
    assert not result["is_valid"]
    assert result["overlaps"] == [("a", "b")]
    assert result["outside_room"] == []

    assert check_layout([_item("a")], ROOM)["is_valid"]
