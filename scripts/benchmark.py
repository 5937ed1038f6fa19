from __future__ import annotations

import time

from voxgen.config import NoiseParams, TerrainConfig
from voxgen.scene import build_cornell_box_scene
from voxgen.terrain import generate_terrain_map
from voxnoise.source import NoiseSource


def _timeit(label: str, fn) -> float:
    t0 = time.perf_counter()
    fn()
    t1 = time.perf_counter()
    ms = (t1 - t0) * 1000.0
    print(f"{label}: {ms:.2f} ms")
    return ms


def main() -> None:
    """Quick CPU benchmark.

    Intended targets (laptop-class CPU):
    - Terrain 1024x1024 with the four default layers: < ~1s
    - Cornell box scene: < ~20ms
    """

    params = NoiseParams()
    noise = NoiseSource(0)

    for size in (256, 512, 1024):
        config = TerrainConfig(x_size=size, z_size=size)
        _timeit(
            f"Terrain {size}x{size} ({len(params.scales)} layers)",
            lambda: generate_terrain_map(params, noise=noise, config=config),
        )

    jittered = TerrainConfig(jitter_width=2, jitter_seed=0)
    _timeit(
        "Terrain 1024x1024 with material jitter",
        lambda: generate_terrain_map(params, noise=noise, config=jittered),
    )

    _timeit("Cornell box scene", build_cornell_box_scene)


if __name__ == "__main__":
    main()
