"""Catalog lookups and editor state operations."""
import uuid

import pytest

from schemas import DesignCreate
from services.catalog import (
    CATALOG,
    categories,
    filter_by_category,
    new_furniture_item,
    preset_size,
    presets_for,
)
from services.coordinates import RoomDimensions
from services.editor import EditorState


def test_catalog_has_all_types():
    types = {item.type for item in CATALOG}
    assert types == {"sofa", "chair", "table", "bookshelf", "coffee_table", "bed",
                     "dining_chair", "dining_table", "cabinet", "desk"}


def test_categories_in_catalog_order():
    assert categories() == ["seating", "tables", "storage", "bedroom"]


def test_filter_by_category():
    assert len(filter_by_category("all")) == len(CATALOG)
    assert {i.type for i in filter_by_category("storage")} == {"bookshelf", "cabinet"}
    assert filter_by_category("garden") == []


def test_presets_fall_back_to_table():
    assert presets_for("bed") == presets_for("table")
    assert preset_size("sofa", "medium") == {"width": 80, "height": 35, "depth": 35}
    with pytest.raises(ValueError):
        preset_size("sofa", "huge")


def test_new_item_defaults():
    item = new_furniture_item("desk")
    uuid.UUID(item["id"])
    assert item["name"] == "Desk"
    assert item["color"] == "#ec4899"
    assert (item["width"], item["height"], item["depth"]) == (4, 5, 4)
    assert (item["x"], item["y"], item["rotation"]) == (50, 50, 0)


def test_new_item_unknown_type():
    with pytest.raises(ValueError):
        new_furniture_item("piano")


def test_default_room():
    state = EditorState()
    assert (state.room.width, state.room.length, state.room.height) == (12, 15, 8)
    assert state.room.wall_color == "#808080"


def test_add_selects_new_item():
    state = EditorState()
    item = state.add_furniture("sofa")
    assert state.selected_id == item["id"]
    assert state.furniture == [item]


def test_remove_clears_selection():
    state = EditorState()
    item = state.add_furniture("chair")
    assert state.remove_furniture(item["id"])
    assert state.selected is None
    assert state.furniture == []


def test_duplicate_offsets_copy():
    state = EditorState()
    item = state.add_furniture("table")
    copy = state.duplicate_furniture(item["id"])
    assert copy["id"] != item["id"]
    assert (copy["x"], copy["y"]) == (70, 70)
    assert state.selected_id == copy["id"]
    assert len(state.furniture) == 2


def test_select_unknown_keeps_selection():
    state = EditorState()
    item = state.add_furniture("bed")
    state.select("missing")
    assert state.selected_id == item["id"]
    state.select(None)
    assert state.selected_id is None


def test_set_dimensions_ignores_non_positive():
    state = EditorState()
    state.set_dimensions(width=20, length=-3, wall_color="#ffffff")
    assert state.room.width == 20
    assert state.room.length == 15
    assert state.room.wall_color == "#ffffff"
    state.set_dimensions(wall_color="blue")
    assert state.room.wall_color == "#ffffff"


def test_zoom_limits():
    state = EditorState()
    for _ in range(20):
        state.zoom_in()
    assert state.zoom == 2.0
    for _ in range(30):
        state.zoom_out()
    assert state.zoom == 0.5
    assert state.reset_zoom() == 1.0


def test_apply_preset_and_scale():
    state = EditorState()
    state.add_furniture("bookshelf")
    item = state.apply_preset("large")
    assert (item["width"], item["height"], item["depth"]) == (42, 84, 16)

    item = state.apply_scale(0.01)
    assert (item["width"], item["height"], item["depth"]) == (1, 1, 1)


def test_properties_reject_invalid_values():
    state = EditorState()
    state.add_furniture("desk")
    assert state.set_property("width", 0)["width"] == 4
    assert state.set_property("rotation", 400)["rotation"] == 0
    assert state.set_property("rotation", 45)["rotation"] == 45


def test_move_to_clamps():
    state = EditorState()
    item = state.add_furniture("sofa")
    moved = state.move_to(item["id"], 99, 99)
    assert (moved["x"], moved["y"]) == (96, 96)


def test_payload_roundtrip_through_design():
    state = EditorState(room=RoomDimensions(width=10, length=20, height=9, wall_color="#123456"))
    state.add_furniture("cabinet")
    payload = state.to_design_payload("Den", "cosy")
    reopened = EditorState.from_design(payload)
    assert reopened.room == state.room
    assert reopened.furniture == state.furniture


def test_set_dimensions_rounds_to_whole_feet():
    state = EditorState()
    state.set_dimensions(width=12.5, length=14.4, height=0.4)
    assert (state.room.width, state.room.length, state.room.height) == (12, 14, 8)
    assert isinstance(state.room.width, int)

    payload = state.to_design_payload("Den")
    assert DesignCreate(**payload).room_length == 14
