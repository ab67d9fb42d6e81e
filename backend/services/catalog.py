"""
Furniture catalog and size presets.

The catalog lists every furniture type the editor can place, with its
category and default look. Presets give the four standard sizes offered
for each type in the properties panel.
"""

import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional

# New items always start at this size regardless of catalog defaults
NEW_ITEM_SIZE = {"width": 4, "height": 5, "depth": 4}
NEW_ITEM_POSITION = (50.0, 50.0)

PRESET_NAMES = ("small", "medium", "large", "extraLarge")
FALLBACK_PRESET_TYPE = "table"


@dataclass(frozen=True)
class CatalogItem:
    type: str
    name: str
    category: str
    default_width: float
    default_height: float
    default_depth: float
    default_color: str


CATALOG: List[CatalogItem] = [
    CatalogItem("sofa", "Sofa", "seating", 20, 32, 35, "#3b82f6"),
    CatalogItem("chair", "Chair", "seating", 10, 30, 10, "#10b981"),
    CatalogItem("table", "Table", "tables", 15, 28, 15, "#8b5cf6"),
    CatalogItem("bookshelf", "Bookshelf", "storage", 15, 60, 8, "#f59e0b"),
    CatalogItem("coffee_table", "Coffee Table", "tables", 12, 16, 8, "#6b7280"),
    CatalogItem("bed", "Bed", "bedroom", 25, 24, 35, "#ef4444"),
    CatalogItem("dining_chair", "Dining Chair", "seating", 8, 30, 8, "#0ea5e9"),
    CatalogItem("dining_table", "Dining Table", "tables", 20, 30, 15, "#14b8a6"),
    CatalogItem("cabinet", "Cabinet", "storage", 15, 36, 12, "#f43f5e"),
    CatalogItem("desk", "Desk", "tables", 18, 30, 10, "#ec4899"),
]

_SMALL = {"width": 4, "height": 5, "depth": 4}

# (width, height, depth) per preset, inches
SIZE_PRESETS: Dict[str, Dict[str, Dict[str, float]]] = {
    "sofa": {
        "small": _SMALL,
        "medium": {"width": 80, "height": 35, "depth": 35},
        "large": {"width": 100, "height": 40, "depth": 40},
        "extraLarge": {"width": 120, "height": 42, "depth": 45},
    },
    "chair": {
        "small": _SMALL,
        "medium": {"width": 24, "height": 36, "depth": 24},
        "large": {"width": 28, "height": 40, "depth": 28},
        "extraLarge": {"width": 32, "height": 44, "depth": 32},
    },
    "dining_chair": {
        "small": _SMALL,
        "medium": {"width": 22, "height": 38, "depth": 22},
        "large": {"width": 26, "height": 40, "depth": 26},
        "extraLarge": {"width": 30, "height": 44, "depth": 28},
    },
    "table": {
        "small": _SMALL,
        "medium": {"width": 48, "height": 30, "depth": 48},
        "large": {"width": 60, "height": 30, "depth": 60},
        "extraLarge": {"width": 72, "height": 32, "depth": 72},
    },
    "coffee_table": {
        "small": _SMALL,
        "medium": {"width": 48, "height": 18, "depth": 30},
        "large": {"width": 60, "height": 20, "depth": 36},
        "extraLarge": {"width": 72, "height": 22, "depth": 42},
    },
    "dining_table": {
        "small": _SMALL,
        "medium": {"width": 72, "height": 30, "depth": 42},
        "large": {"width": 84, "height": 32, "depth": 48},
        "extraLarge": {"width": 96, "height": 32, "depth": 54},
    },
    "desk": {
        "small": _SMALL,
        "medium": {"width": 60, "height": 30, "depth": 30},
        "large": {"width": 72, "height": 32, "depth": 36},
        "extraLarge": {"width": 84, "height": 32, "depth": 42},
    },
    "bookshelf": {
        "small": _SMALL,
        "medium": {"width": 36, "height": 84, "depth": 14},
        "large": {"width": 42, "height": 84, "depth": 16},
        "extraLarge": {"width": 48, "height": 96, "depth": 18},
    },
    "cabinet": {
        "small": _SMALL,
        "medium": {"width": 42, "height": 42, "depth": 20},
        "large": {"width": 48, "height": 48, "depth": 24},
        "extraLarge": {"width": 54, "height": 54, "depth": 28},
    },
}


def get_catalog_item(furniture_type: str) -> Optional[CatalogItem]:
    """Look up a catalog entry by type, or ``None`` if it is not listed."""
    for item in CATALOG:
        if item.type == furniture_type:
            return item
    return None


def categories() -> List[str]:
    """Unique categories in catalog order."""
    seen = []
    for item in CATALOG:
        if item.category not in seen:
            seen.append(item.category)
    return seen


def filter_by_category(category: str = "all") -> List[CatalogItem]:
    if category == "all":
        return list(CATALOG)
    return [item for item in CATALOG if item.category == category]


def presets_for(furniture_type: str) -> Dict[str, Dict[str, float]]:
    """Size presets for a type; types without their own fall back to tables."""
    return SIZE_PRESETS.get(furniture_type, SIZE_PRESETS[FALLBACK_PRESET_TYPE])


def preset_size(furniture_type: str, preset: str) -> Dict[str, float]:
    if preset not in PRESET_NAMES:
        raise ValueError(f"Unknown size preset '{preset}'. Expected one of {', '.join(PRESET_NAMES)}")
    return dict(presets_for(furniture_type)[preset])


def new_furniture_item(furniture_type: str) -> dict:
    """
    Build a fresh furniture item for *furniture_type*.

    The item takes its name and color from the catalog, starts at the
    small default size in the middle of the room, unrotated.
    """
    entry = get_catalog_item(furniture_type)
    if entry is None:
        raise ValueError(f"Unknown furniture type '{furniture_type}'")

    x, y = NEW_ITEM_POSITION
    return {
        "id": str(uuid.uuid4()),
        "type": entry.type,
        "name": entry.name,
        **NEW_ITEM_SIZE,
        "color": entry.default_color,
        "x": x,
        "y": y,
        "rotation": 0,
    }
