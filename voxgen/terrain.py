from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import numpy as np

from voxgen.config import NoiseLayer, NoiseParams, TerrainConfig, validate_layers
from voxgen.errors import ConfigurationError, ResourceExhaustionError
from voxnoise.source import NoiseSource, layered2

log = logging.getLogger(__name__)

CELL_STRIDE = 4
X, HEIGHT, Z, MATERIAL = range(CELL_STRIDE)

# One color per material band, low to high |height|: sand, grass, dry grass,
# rock, bright rock, snow.
TERRAIN_MATERIALS: tuple[tuple[int, int, int, int], ...] = (
    (194, 178, 128, 255),
    (31, 112, 41, 255),
    (117, 133, 59, 255),
    (102, 97, 92, 255),
    (168, 168, 166, 255),
    (235, 240, 250, 255),
)


@dataclass(frozen=True)
class HeightmapCell:
    x: int
    z: int
    height: float
    material_id: int


@dataclass(frozen=True, eq=False)
class HeightmapBuffer:
    """Flat `float32[x_size * z_size * 4]` terrain buffer.

    Cell (x, z) occupies `data[(x * z_size + z) * 4 : ... + 4]` as
    `[x, height, z, material_id]`; z is the fast-varying index.
    """

    data: np.ndarray
    x_size: int
    z_size: int
    seed: int
    version: int = 0

    def offset(self, x: int, z: int) -> int:
        x = int(x)
        z = int(z)
        if not (0 <= x < self.x_size and 0 <= z < self.z_size):
            raise IndexError(f"cell ({x}, {z}) outside {self.x_size}x{self.z_size} grid")
        return (x * self.z_size + z) * CELL_STRIDE

    def cells(self) -> np.ndarray:
        return self.data.reshape(self.x_size, self.z_size, CELL_STRIDE)

    def heights(self) -> np.ndarray:
        """Heights as an (x_size, z_size) view."""
        return self.cells()[..., HEIGHT]

    def material_ids(self) -> np.ndarray:
        return self.cells()[..., MATERIAL].astype(np.int32)

    def cell(self, x: int, z: int) -> HeightmapCell:
        o = self.offset(x, z)
        rec = self.data[o : o + CELL_STRIDE]
        return HeightmapCell(
            x=int(rec[X]),
            z=int(rec[Z]),
            height=float(rec[HEIGHT]),
            material_id=int(rec[MATERIAL]),
        )


def material_ids(
    height: np.ndarray,
    *,
    step: float = 15.0,
    cap: int = 5,
    jitter_width: int = 0,
    rng: Optional[np.random.Generator] = None,
) -> np.ndarray:
    """Classify heights into material bands `min(floor(|h| / step), cap)`.

    With `jitter_width > 0` a random offset in `[0, jitter_width]` is added and
    the result is clamped back into `[0, cap]` to break up banding.
    """

    step = float(step)
    if not (math.isfinite(step) and step > 0.0):
        raise ConfigurationError(f"material step must be a positive finite number, got {step}")
    cap = int(cap)
    if cap < 0:
        raise ConfigurationError(f"material cap must be >= 0, got {cap}")
    jitter_width = int(jitter_width)
    if jitter_width < 0:
        raise ConfigurationError(f"jitter width must be >= 0, got {jitter_width}")

    h = np.asarray(height, dtype=np.float64)
    if not np.isfinite(h).all():
        raise ConfigurationError("heights must be finite")
    ids = np.minimum(np.floor(np.abs(h) / step), float(cap)).astype(np.int32)

    if jitter_width > 0:
        if rng is None:
            rng = np.random.default_rng()
        ids = ids + rng.integers(0, jitter_width + 1, size=ids.shape, dtype=np.int32)
        ids = np.clip(ids, 0, cap)
    return ids


def terrain_heights(
    noise: NoiseSource,
    layers: Iterable[NoiseLayer],
    *,
    x_size: int,
    z_size: int,
) -> np.ndarray:
    """Summed layer noise sampled at integer grid coordinates, shape (x_size, z_size)."""
    xs = np.arange(int(x_size), dtype=np.float64)
    zs = np.arange(int(z_size), dtype=np.float64)
    xg, zg = np.meshgrid(xs, zs, indexing="ij")
    return layered2(noise, xg, zg, [(layer.scale, layer.amplitude) for layer in layers])


def generate_terrain_map(
    params: NoiseParams | Iterable[Any],
    *,
    noise: NoiseSource,
    seed: Optional[float] = None,
    config: TerrainConfig = TerrainConfig(),
) -> HeightmapBuffer:
    """Generate a fresh heightmap buffer from the current noise parameters.

    Passing `seed` reseeds `noise` first; leaving it out keeps sampling the
    permutation `noise` already holds. Sampling runs on a private snapshot of
    `noise`, so concurrent calls sharing one source each get the permutation
    of the seed they asked for.
    """

    if isinstance(params, NoiseParams):
        version, layers = params.snapshot()
    else:
        version, layers = 0, validate_layers(params)

    x_size = int(config.x_size)
    z_size = int(config.z_size)
    if config.cell_count > int(config.max_cells):
        raise ResourceExhaustionError(
            f"{x_size}x{z_size} grid exceeds the {config.max_cells} cell limit"
        )

    source = noise.snapshot(seed)

    try:
        heights = terrain_heights(source, layers, x_size=x_size, z_size=z_size)
        rng = None
        if int(config.jitter_width) > 0:
            rng = np.random.default_rng(config.jitter_seed)
        materials = material_ids(
            heights,
            step=float(config.material_step),
            cap=int(config.material_cap),
            jitter_width=int(config.jitter_width),
            rng=rng,
        )

        cells = np.empty((x_size, z_size, CELL_STRIDE), dtype=np.float32)
        cells[..., X] = np.arange(x_size, dtype=np.float32)[:, None]
        cells[..., HEIGHT] = heights
        cells[..., Z] = np.arange(z_size, dtype=np.float32)[None, :]
        cells[..., MATERIAL] = materials
    except MemoryError as exc:
        raise ResourceExhaustionError(
            f"out of memory generating a {x_size}x{z_size} terrain"
        ) from exc

    log.debug(
        "Generated %dx%d terrain (seed=%d, layers=%d, version=%d), height range [%.2f, %.2f]",
        x_size,
        z_size,
        source.seed,
        len(layers),
        version,
        float(np.min(heights)),
        float(np.max(heights)),
    )
    return HeightmapBuffer(
        data=cells.reshape(-1),
        x_size=x_size,
        z_size=z_size,
        seed=source.seed,
        version=version,
    )


def generate_terrain(
    *,
    x_size: int,
    z_size: int,
    layers: Iterable[Any],
    seed: Optional[float] = None,
    noise: Optional[NoiseSource] = None,
    **settings: Any,
) -> HeightmapBuffer:
    """One-shot terrain generation from plain arguments.

    Without `noise` a private source is created, seeded with `seed` when given.
    Extra keyword settings go to `TerrainConfig` (material_step, jitter_width...).
    """

    config = TerrainConfig(x_size=x_size, z_size=z_size, **settings)
    layers = validate_layers(layers)
    if noise is None:
        noise = NoiseSource(seed)
        seed = None
    return generate_terrain_map(layers, noise=noise, seed=seed, config=config)
