from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from voxgen.errors import ConfigurationError

log = logging.getLogger(__name__)

RGBA = tuple[int, int, int, int]
Dims = tuple[int, int, int]

SPHERE_SHRINK = 0.9

# Cornell box palette, indexed by insertion order.
RED: RGBA = (255, 0, 0, 255)
GREEN: RGBA = (0, 255, 0, 255)
WHITE: RGBA = (255, 255, 255, 255)
GRAY: RGBA = (128, 128, 128, 255)


def _check_dims(dims: Sequence[int]) -> Dims:
    if len(dims) != 3:
        raise ConfigurationError(f"voxel dims must have 3 entries, got {dims!r}")
    nx, ny, nz = (int(d) for d in dims)
    if nx <= 0 or ny <= 0 or nz <= 0:
        raise ConfigurationError(f"voxel dims must be > 0, got {dims!r}")
    return nx, ny, nz


def _check_index(palette_index: int) -> int:
    palette_index = int(palette_index)
    if not (0 <= palette_index <= 255):
        raise ConfigurationError(f"palette index must fit in a byte, got {palette_index}")
    return palette_index


def flat_index(dims: Sequence[int], x: int, y: int, z: int) -> int:
    nx, ny, _ = dims
    return int(x) + int(nx) * (int(y) + int(ny) * int(z))


def uniform_voxels(dims: Sequence[int], palette_index: int) -> np.ndarray:
    nx, ny, nz = _check_dims(dims)
    return np.full(nx * ny * nz, _check_index(palette_index), dtype=np.uint8)


def sphere_voxels(dims: Sequence[int], palette_index: int) -> np.ndarray:
    """Rasterize the largest centered sphere (shrunk by 0.9) into a voxel block.

    Voxels outside the sphere stay 0. The result is flat in
    `x + nx * (y + ny * z)` order.
    """

    nx, ny, nz = _check_dims(dims)
    palette_index = _check_index(palette_index)

    cx = (nx - 1) / 2.0
    cy = (ny - 1) / 2.0
    cz = (nz - 1) / 2.0
    radius = min(nx, ny, nz) * 0.5 * SPHERE_SHRINK

    # (z, y, x) axis order so that C-order raveling matches the flat index.
    z, y, x = np.indices((nz, ny, nx), dtype=np.float64)
    d2 = (x - cx) ** 2 + (y - cy) ** 2 + (z - cz) ** 2
    inside = d2 <= radius * radius

    voxels = np.zeros((nz, ny, nx), dtype=np.uint8)
    voxels[inside] = palette_index
    return voxels.reshape(-1)


def translation(position: Sequence[float]) -> np.ndarray:
    m = np.eye(4, dtype=np.float64)
    m[:3, 3] = np.asarray(position, dtype=np.float64)
    return m


def scaling(extent: Sequence[float]) -> np.ndarray:
    return np.diag([float(extent[0]), float(extent[1]), float(extent[2]), 1.0])


def model_matrix(extent: Sequence[float], position: Sequence[float]) -> np.ndarray:
    """`translate(position) @ scale(extent)`: maps the unit cube to the world box."""
    return translation(position) @ scaling(extent)


def column_major(m: np.ndarray) -> list[float]:
    return [float(v) for v in np.asarray(m, dtype=np.float32).T.reshape(-1)]


@dataclass(frozen=True, eq=False)
class SceneObject:
    id: str
    dims: Dims
    model: np.ndarray
    voxels: np.ndarray

    def __post_init__(self) -> None:
        dims = _check_dims(self.dims)
        model = np.array(self.model, dtype=np.float64)
        if model.shape != (4, 4):
            raise ConfigurationError(f"{self.id}: model must be 4x4, got {model.shape}")
        voxels = np.array(self.voxels, dtype=np.uint8).reshape(-1)
        if voxels.size != dims[0] * dims[1] * dims[2]:
            raise ConfigurationError(
                f"{self.id}: {voxels.size} voxels do not fill a {dims} block"
            )
        model.flags.writeable = False
        voxels.flags.writeable = False
        object.__setattr__(self, "dims", dims)
        object.__setattr__(self, "model", model)
        object.__setattr__(self, "voxels", voxels)

    @property
    def inv_model(self) -> np.ndarray:
        return np.linalg.inv(self.model)

    def voxel_at(self, x: int, y: int, z: int) -> int:
        return int(self.voxels[flat_index(self.dims, x, y, z)])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "model_matrix": column_major(self.model),
            "inv_model_matrix": column_major(self.inv_model),
            "dims": list(self.dims),
            "voxels": self.voxels.tolist(),
        }


@dataclass
class Scene:
    palette: list[RGBA] = field(default_factory=list)
    objects: list[SceneObject] = field(default_factory=list)

    def object(self, object_id: str) -> SceneObject:
        for obj in self.objects:
            if obj.id == object_id:
                return obj
        raise KeyError(object_id)

    def validate(self) -> None:
        for color in self.palette:
            if len(color) != 4 or not all(0 <= int(c) <= 255 for c in color):
                raise ConfigurationError(f"palette color must be 4 bytes, got {color!r}")

        seen: set[str] = set()
        for obj in self.objects:
            if obj.id in seen:
                raise ConfigurationError(f"duplicate scene object id: {obj.id!r}")
            seen.add(obj.id)
            if obj.voxels.size and int(obj.voxels.max()) >= len(self.palette):
                raise ConfigurationError(
                    f"{obj.id}: voxel index {int(obj.voxels.max())} "
                    f"outside a {len(self.palette)} color palette"
                )

    def to_dict(self) -> dict[str, Any]:
        self.validate()
        return {
            "palette": [list(color) for color in self.palette],
            "objects": [obj.to_dict() for obj in self.objects],
        }


def _box(object_id: str, dims: Dims, position: Sequence[float], index: int) -> SceneObject:
    return SceneObject(
        id=object_id,
        dims=dims,
        model=model_matrix(dims, position),
        voxels=uniform_voxels(dims, index),
    )


def build_cornell_box_scene(scene: Scene | None = None) -> Scene:
    """Cornell box of bounding-box voxel objects for checking the renderer.

    Five single-voxel-thick walls (half-extent 4 around the origin) and a 32^3
    sphere block scaled to a 3x3x3 world box at the center.
    """

    if scene is None:
        scene = Scene()

    scene.palette = [RED, GREEN, WHITE, GRAY]
    scene.objects = [
        _box("left_wall", (1, 8, 8), (-4.0, 0.0, 0.0), 0),
        _box("right_wall", (1, 8, 8), (4.0, 0.0, 0.0), 1),
        _box("floor", (8, 1, 8), (0.0, -4.0, 0.0), 2),
        _box("ceiling", (8, 1, 8), (0.0, 4.0, 0.0), 2),
        _box("back_wall", (8, 8, 1), (0.0, 0.0, -4.0), 2),
        SceneObject(
            id="sphere",
            dims=(32, 32, 32),
            model=model_matrix((3.0, 3.0, 3.0), (0.0, 0.0, 0.0)),
            voxels=sphere_voxels((32, 32, 32), 3),
        ),
    ]
    scene.validate()

    log.debug(
        "Built Cornell box scene: %d objects, %d palette colors, %d voxels",
        len(scene.objects),
        len(scene.palette),
        sum(obj.voxels.size for obj in scene.objects),
    )
    return scene
