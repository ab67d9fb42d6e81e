"""
3D room scene: meshes, state sync, picking and drag interaction.

Builds the room shell and a simple box-assembled model per furniture
type with trimesh, keeps one mesh per furniture item in step with the
editor state, and implements the pointer interaction of the 3D view:
camera rays, ground-plane intersection, mesh picking and dragging.

World frame: feet, room centred on the origin, floor at y = 0, Y up.
Furniture models are built in a local frame (footprint centred on the
origin, resting on y = 0) and placed with a translation plus a rotation
about Y.

Exports as glTF/GLB (or OBJ).
"""

import math
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np
import trimesh

from services.coordinates import RoomDimensions, to_plan, to_world

logger = logging.getLogger(__name__)

# ===========================================================================
# CONSTANTS
# ===========================================================================

# Furniture dimensions → world units
WIDTH_SCALE = 6.0
HEIGHT_SCALE = 12.0
DEPTH_SCALE = 6.0

SHELL_THICK = 0.02       # ft, floor/wall/ceiling slab thickness
SELECTED_LIFT = 0.05     # ft, hover height of the selected item
HIGHLIGHT_EMISSIVE = 0x33

CEILING_COLOR = "#f8f9fa"
FLOOR_COLOR = "#b48c64"
FALLBACK_COLOR = "#808080"

CAMERA_FOV = 75.0
CAMERA_NEAR = 0.1
CAMERA_FAR = 1000.0
CAMERA_START = (0.0, 5.0, 10.0)


def hex_to_rgba(color: str, alpha: int = 255) -> List[int]:
    """'#rrggbb' → [r, g, b, a]; malformed colors fall back to grey."""
    value = (color or "").lstrip("#")
    if len(value) != 6:
        value = FALLBACK_COLOR.lstrip("#")
    try:
        r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        r, g, b = (int(FALLBACK_COLOR[i:i + 2], 16) for i in (1, 3, 5))
    return [r, g, b, alpha]


def _box(extents, center, color) -> trimesh.Trimesh:
    mesh = trimesh.creation.box(
        extents=extents,
        transform=trimesh.transformations.translation_matrix(center),
    )
    mesh.visual.face_colors = hex_to_rgba(color) if isinstance(color, str) else color
    return mesh


def _is_valid_mesh(mesh) -> bool:
    return mesh is not None and len(mesh.vertices) > 0 and len(mesh.faces) > 0


# ===========================================================================
# ROOM SHELL
# ===========================================================================

def build_room_meshes(room: RoomDimensions) -> Dict[str, trimesh.Trimesh]:
    """Floor, back/left/right walls and ceiling for *room*."""
    L, W, H = float(room.length), float(room.width), float(room.height)
    t = SHELL_THICK
    wall = room.wall_color

    return {
        "floor": _box((L, t, W), (0, -t / 2, 0), FLOOR_COLOR),
        "back_wall": _box((L, H, t), (0, H / 2, -W / 2), wall),
        "left_wall": _box((t, H, W), (-L / 2, H / 2, 0), wall),
        "right_wall": _box((t, H, W), (L / 2, H / 2, 0), wall),
        "ceiling": _box((L, t, W), (0, H + t / 2, 0), CEILING_COLOR),
    }


# ===========================================================================
# FURNITURE MODELS
# ===========================================================================

def _sofa(w, h, d, color):
    arm_w = w / 10
    return [
        _box((w, h / 4, d), (0, h / 8, 0), color),                                   # base
        _box((w - 2 * arm_w, h / 10, d / 1.5), (0, h / 4 + h / 20, d / 6), color),    # seat
        _box((w, h / 2, d / 5), (0, h / 4 + h / 4, -d / 2 + d / 10), color),          # backrest
        _box((arm_w, h / 2.5, d), (-w / 2 + arm_w / 2, h / 5, 0), color),
        _box((arm_w, h / 2.5, d), (w / 2 - arm_w / 2, h / 5, 0), color),
    ]


def _chair(w, h, d, color):
    seat_y = h / 3
    leg = (w / 10, seat_y, d / 10)
    lx, lz = w / 2 - w / 20, d / 2 - d / 20
    parts = [
        _box((w, h / 15, d * 0.8), (0, seat_y, 0), color),
        _box((w / 1.2, h / 1.5 - seat_y / 2, d / 10),
             (0, seat_y + (h / 1.5 - seat_y / 2) / 2, -d / 2 + d / 20), color),
    ]
    for sx in (-1, 1):
        for sz in (-1, 1):
            parts.append(_box(leg, (sx * lx, seat_y / 2, sz * lz), color))
    return parts


def _table(w, h, d, color):
    top_t = h / 12
    leg_h = h - top_t
    leg = (w / 12, leg_h, d / 12)
    lx, lz = w / 2 - w / 24, d / 2 - d / 24
    parts = [_box((w, top_t, d), (0, h - top_t / 2, 0), color)]
    for sx in (-1, 1):
        for sz in (-1, 1):
            parts.append(_box(leg, (sx * lx, leg_h / 2, sz * lz), color))
    return parts


def _bookshelf(w, h, d, color, shelves: int = 4):
    panel_w, panel_h = w / 20, h / 20
    parts = [
        _box((w, h, d / 20), (0, h / 2, -d / 2 + d / 40), color),            # back
        _box((panel_w, h, d), (-w / 2 + panel_w / 2, h / 2, 0), color),      # sides
        _box((panel_w, h, d), (w / 2 - panel_w / 2, h / 2, 0), color),
        _box((w, panel_h, d), (0, h - panel_h / 2, 0), color),               # top
        _box((w, panel_h, d), (0, panel_h / 2, 0), color),                   # bottom
    ]
    spacing = h / (shelves + 1)
    for i in range(1, shelves + 1):
        parts.append(_box((w - w / 10, h / 40, d - d / 20), (0, i * spacing, 0), color))
    return parts


MODEL_BUILDERS = {
    "sofa": _sofa,
    "chair": _chair,
    "dining_chair": _chair,
    "table": _table,
    "coffee_table": _table,
    "dining_table": _table,
    "desk": _table,
    "bookshelf": _bookshelf,
    "cabinet": _bookshelf,
}


def model_size(item: dict) -> Tuple[float, float, float]:
    """World-space (width, height, depth) of an item's model."""
    return (
        float(item["width"]) / WIDTH_SCALE,
        float(item["height"]) / HEIGHT_SCALE,
        float(item["depth"]) / DEPTH_SCALE,
    )


def build_furniture_mesh(item: dict) -> trimesh.Trimesh:
    """
    Build the local-frame model for *item*.

    Known types get an assembled model; anything else, or a model that
    fails to build, becomes a single box of the item's size.
    """
    w, h, d = model_size(item)
    color = item.get("color") or FALLBACK_COLOR
    builder = MODEL_BUILDERS.get(item.get("type"))

    if builder is not None:
        try:
            parts = [p for p in builder(w, h, d, color) if _is_valid_mesh(p)]
            if parts:
                return trimesh.util.concatenate(parts)
        except Exception as e:
            logger.warning(f"Model for {item.get('type')} failed ({e}), using box")

    return _box((w, h, d), (0, h / 2, 0), color)


# ===========================================================================
# STATE SYNC
# ===========================================================================

@dataclass
class FurnitureNode:
    """One furniture item in the scene: its model and placement."""
    item_id: str
    base_mesh: trimesh.Trimesh
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation_deg: float = 0.0
    highlighted: bool = False

    @property
    def transform(self) -> np.ndarray:
        rot = trimesh.transformations.rotation_matrix(math.radians(self.rotation_deg), [0, 1, 0])
        return trimesh.transformations.translation_matrix(self.position) @ rot

    @property
    def world_mesh(self) -> trimesh.Trimesh:
        mesh = self.base_mesh.copy()
        mesh.apply_transform(self.transform)
        if self.highlighted:
            colors = mesh.visual.face_colors.astype(int)
            colors[:, :3] = np.minimum(colors[:, :3] + HIGHLIGHT_EMISSIVE, 255)
            mesh.visual.face_colors = colors.astype(np.uint8)
        return mesh


class SceneSync:
    """
    Keeps one mesh per furniture item in step with the editor state.

    ``sync`` creates meshes for new items, re-places existing ones,
    lifts and highlights the selection, and drops meshes whose item is
    gone. A mesh is rebuilt when its item's type, size or color change.
    """

    def __init__(self, room: RoomDimensions):
        self.room = room
        self.nodes: Dict[str, FurnitureNode] = {}
        self._shapes: Dict[str, tuple] = {}

    @staticmethod
    def _shape_key(item: dict) -> tuple:
        return (item.get("type"), item["width"], item["height"], item["depth"], item.get("color"))

    def sync(self, items: Iterable[dict], selected_id: Optional[str] = None,
             room: Optional[RoomDimensions] = None) -> Dict[str, FurnitureNode]:
        if room is not None:
            self.room = room

        stale = set(self.nodes)
        for item in items:
            item_id = str(item["id"])
            stale.discard(item_id)

            key = self._shape_key(item)
            node = self.nodes.get(item_id)
            if node is None or self._shapes.get(item_id) != key:
                node = FurnitureNode(item_id=item_id, base_mesh=build_furniture_mesh(item))
                self.nodes[item_id] = node
                self._shapes[item_id] = key

            wx, wz = to_world(item["x"], item["y"], self.room)
            selected = item_id == selected_id
            node.position = np.array([wx, SELECTED_LIFT if selected else 0.0, wz])
            node.rotation_deg = float(item["rotation"])
            node.highlighted = selected

        for item_id in stale:
            del self.nodes[item_id]
            self._shapes.pop(item_id, None)

        return self.nodes

    def meshes(self) -> Dict[str, trimesh.Trimesh]:
        return {f"furniture-{item_id}": node.world_mesh for item_id, node in self.nodes.items()}


# ===========================================================================
# CAMERA & RAYS
# ===========================================================================

@dataclass
class Ray:
    origin: np.ndarray
    direction: np.ndarray


class Camera:
    """Perspective camera looking at a target point."""

    def __init__(self, aspect: float = 1.0, fov: float = CAMERA_FOV,
                 near: float = CAMERA_NEAR, far: float = CAMERA_FAR):
        self.aspect = aspect
        self.fov = fov
        self.near = near
        self.far = far
        self.position = np.array(CAMERA_START, dtype=float)
        self.target = np.zeros(3)
        self.up = np.array([0.0, 1.0, 0.0])

    def reset(self, room: RoomDimensions):
        """Frame the whole room from a raised corner."""
        m = float(max(room.length, room.width))
        self.position = np.array([m, m / 2, m])
        self.target = np.zeros(3)

    def look_at(self, target):
        self.target = np.asarray(target, dtype=float)

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        forward = self.target - self.position
        forward = forward / np.linalg.norm(forward)
        right = np.cross(forward, self.up)
        if np.linalg.norm(right) < 1e-9:
            right = np.array([1.0, 0.0, 0.0])
        right = right / np.linalg.norm(right)
        true_up = np.cross(right, forward)
        return forward, right, true_up

    def ray_from_ndc(self, ndc: Tuple[float, float]) -> Ray:
        forward, right, true_up = self.basis()
        half = math.tan(math.radians(self.fov) / 2)
        direction = (forward
                     + ndc[0] * half * self.aspect * right
                     + ndc[1] * half * true_up)
        return Ray(origin=self.position.copy(), direction=direction / np.linalg.norm(direction))


def intersect_ground(ray: Ray, height: float = 0.0) -> Optional[np.ndarray]:
    """Intersection of *ray* with the horizontal plane y = *height*."""
    denom = ray.direction[1]
    if abs(denom) < 1e-12:
        return None
    t = (height - ray.origin[1]) / denom
    if t < 0:
        return None
    return ray.origin + t * ray.direction


def ray_mesh_distance(ray: Ray, mesh: trimesh.Trimesh, eps: float = 1e-9) -> Optional[float]:
    """Distance along *ray* to the nearest triangle of *mesh* (Moller-Trumbore)."""
    tris = mesh.triangles
    v0, v1, v2 = tris[:, 0], tris[:, 1], tris[:, 2]
    e1, e2 = v1 - v0, v2 - v0
    p = np.cross(ray.direction, e2)
    det = np.einsum("ij,ij->i", e1, p)
    ok = np.abs(det) > eps
    inv = np.zeros_like(det)
    inv[ok] = 1.0 / det[ok]

    s = ray.origin - v0
    u = np.einsum("ij,ij->i", s, p) * inv
    q = np.cross(s, e1)
    v = np.einsum("j,ij->i", ray.direction, q) * inv
    t = np.einsum("ij,ij->i", e2, q) * inv

    hit = ok & (u >= 0) & (v >= 0) & (u + v <= 1) & (t > eps)
    if not hit.any():
        return None
    return float(t[hit].min())


def pick(sync: SceneSync, ray: Ray) -> Optional[str]:
    """Id of the nearest furniture item hit by *ray*, or ``None``."""
    best_id, best_t = None, math.inf
    for item_id, node in sync.nodes.items():
        mesh = node.world_mesh
        lo, hi = mesh.bounds
        if not _ray_hits_box(ray, lo, hi):
            continue
        t = ray_mesh_distance(ray, mesh)
        if t is not None and t < best_t:
            best_id, best_t = item_id, t
    return best_id


def _ray_hits_box(ray: Ray, lo: np.ndarray, hi: np.ndarray) -> bool:
    """Slab test against an axis-aligned box."""
    with np.errstate(divide="ignore", invalid="ignore"):
        inv = 1.0 / ray.direction
        t1 = (lo - ray.origin) * inv
        t2 = (hi - ray.origin) * inv
    t_near = np.nanmax(np.minimum(t1, t2))
    t_far = np.nanmin(np.maximum(t1, t2))
    return bool(t_far >= max(t_near, 0.0))


# ===========================================================================
# DRAG INTERACTION
# ===========================================================================

class DragController:
    """
    Pointer dragging of furniture on the floor plane.

    ``press`` picks the item under the pointer, selects it and records
    the offset between the item and the floor point under the pointer so
    the item does not jump. ``move`` slides the item keeping that offset
    and writes the new plan position back to the editor. Orbiting is
    disabled from press to release.
    """

    def __init__(self, editor, sync: SceneSync, camera: Camera):
        self.editor = editor
        self.sync = sync
        self.camera = camera
        self.orbit_enabled = True
        self.dragged_id: Optional[str] = None
        self.is_dragging = False
        self.offset = (0.0, 0.0)

    def press(self, ndc: Tuple[float, float]) -> Optional[str]:
        if not self.orbit_enabled:
            return None
        self.sync.sync(self.editor.furniture, self.editor.selected_id, self.editor.room)

        ray = self.camera.ray_from_ndc(ndc)
        hit_id = pick(self.sync, ray)
        if hit_id is None:
            return None

        self.dragged_id = hit_id
        ground = intersect_ground(ray)
        if ground is not None:
            node = self.sync.nodes[hit_id]
            self.offset = (node.position[0] - ground[0], node.position[2] - ground[2])
        else:
            self.offset = (0.0, 0.0)

        if self.editor.selected_id != hit_id:
            self.editor.select(hit_id)
        self.orbit_enabled = False
        return hit_id

    def move(self, ndc: Tuple[float, float]) -> Optional[dict]:
        if self.dragged_id is None:
            return None
        self.is_dragging = True

        ground = intersect_ground(self.camera.ray_from_ndc(ndc))
        if ground is None:
            return None

        node = self.sync.nodes.get(self.dragged_id)
        if node is None:
            return None
        new_x = ground[0] + self.offset[0]
        new_z = ground[2] + self.offset[1]
        node.position = np.array([new_x, node.position[1], new_z])

        item = self.editor.find(self.dragged_id)
        if item is None:
            return None
        x, y = to_plan(new_x, new_z, self.editor.room)
        return self.editor.update_furniture({**item, "x": x, "y": y})

    def release(self):
        if self.dragged_id is not None:
            self.dragged_id = None
            self.is_dragging = False
            self.orbit_enabled = True


# ===========================================================================
# EXPORT
# ===========================================================================

def build_scene(room: RoomDimensions, items: Iterable[dict],
                selected_id: Optional[str] = None) -> trimesh.Scene:
    scene = trimesh.Scene()
    for name, mesh in build_room_meshes(room).items():
        scene.add_geometry(mesh, node_name=name, geom_name=name)

    sync = SceneSync(room)
    sync.sync(items, selected_id)
    for name, mesh in sync.meshes().items():
        if _is_valid_mesh(mesh):
            scene.add_geometry(mesh, node_name=name, geom_name=name)
    return scene


def export_scene(room: RoomDimensions, items: Iterable[dict], output_path: str,
                 selected_id: Optional[str] = None) -> str:
    """
    Export the room and its furniture.

    Args:
        room: Room dimensions.
        items: Furniture items (plan coordinates).
        output_path: Destination; ``.glb``/``.gltf`` or ``.obj``, anything
            else gets ``.glb`` appended.

    Returns:
        Path to the generated file.
    """
    items = list(items)
    scene = build_scene(room, items, selected_id)
    logger.info(f"Exporting 3D scene: {len(items)} furniture items, "
                f"room {room.length}x{room.width}x{room.height}ft")

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)

    if output_path.endswith((".glb", ".gltf")):
        scene.export(output_path, file_type="glb")
    elif output_path.endswith(".obj"):
        scene.export(output_path, file_type="obj")
    else:
        output_path = output_path + ".glb"
        scene.export(output_path, file_type="glb")

    logger.info(f"3D scene exported: {output_path}")
    return output_path
