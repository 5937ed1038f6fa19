from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np


def fade(t: np.ndarray) -> np.ndarray:
    """Quintic fade curve used by Improved Perlin Noise (2002)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def lerp(a: np.ndarray, b: np.ndarray, t: np.ndarray) -> np.ndarray:
    return a + t * (b - a)


def seed_to_int(seed: float) -> int:
    """Map a user seed to the integer fed to the permutation shuffle.

    Fractional seeds in (0, 1), as produced by a uniform random draw, are
    spread over 16 bits first so that nearby draws do not collapse to 0.
    """

    value = float(seed)
    if not math.isfinite(value):
        raise ValueError(f"seed must be finite, got {seed!r}")
    if 0.0 < abs(value) < 1.0:
        value *= 65536.0
    return abs(int(math.floor(value)))


def make_permutation(seed: int) -> np.ndarray:
    rng = np.random.default_rng(int(seed))
    p = rng.permutation(256).astype(np.int32)
    return np.concatenate([p, p])


@dataclass(frozen=True)
class Lattice2D:
    """Hashed corners and fractional offsets for a batch of 2D samples."""

    aa: np.ndarray
    ab: np.ndarray
    ba: np.ndarray
    bb: np.ndarray
    xf: np.ndarray
    yf: np.ndarray

    @classmethod
    def locate(cls, perm: np.ndarray, x: np.ndarray, y: np.ndarray) -> "Lattice2D":
        x = np.asarray(x, dtype=np.float64)
        y = np.asarray(y, dtype=np.float64)
        x_floor = np.floor(x)
        y_floor = np.floor(y)

        xi0 = x_floor.astype(np.int64) & 255
        yi0 = y_floor.astype(np.int64) & 255
        xi1 = (xi0 + 1) & 255
        yi1 = (yi0 + 1) & 255

        return cls(
            aa=perm[perm[xi0] + yi0],
            ab=perm[perm[xi0] + yi1],
            ba=perm[perm[xi1] + yi0],
            bb=perm[perm[xi1] + yi1],
            xf=x - x_floor,
            yf=y - y_floor,
        )

    def blend(
        self, c00: np.ndarray, c10: np.ndarray, c01: np.ndarray, c11: np.ndarray
    ) -> np.ndarray:
        u = fade(self.xf)
        v = fade(self.yf)
        return lerp(lerp(c00, c10, u), lerp(c01, c11, u), v)


_GRAD2_DIAG8 = np.array(
    [
        [1.0, 0.0],
        [-1.0, 0.0],
        [0.0, 1.0],
        [0.0, -1.0],
        [1.0, 1.0],
        [-1.0, 1.0],
        [1.0, -1.0],
        [-1.0, -1.0],
    ],
    dtype=np.float64,
)
_GRAD2_DIAG8 /= np.linalg.norm(_GRAD2_DIAG8, axis=1, keepdims=True)

# Classic 12-edge gradient set projected onto the xy plane (the z component is
# dropped, not renormalized). Octave output spans roughly [-1, 1].
_GRAD2_CLASSIC12 = np.array(
    [
        [1.0, 1.0],
        [-1.0, 1.0],
        [1.0, -1.0],
        [-1.0, -1.0],
        [1.0, 0.0],
        [-1.0, 0.0],
        [1.0, 0.0],
        [-1.0, 0.0],
        [0.0, 1.0],
        [0.0, -1.0],
        [0.0, 1.0],
        [0.0, -1.0],
    ],
    dtype=np.float64,
)

_GRAD2_CIRCLE16 = np.stack(
    [
        np.cos(np.linspace(0.0, 2.0 * np.pi, 16, endpoint=False, dtype=np.float64)),
        np.sin(np.linspace(0.0, 2.0 * np.pi, 16, endpoint=False, dtype=np.float64)),
    ],
    axis=1,
)

GRAD2_SETS = ("classic12", "diag8", "circle16")


def grad2_table(name: str) -> np.ndarray:
    name = str(name)
    if name in {"classic12", "default"}:
        return _GRAD2_CLASSIC12
    if name in {"diag8", "improved8"}:
        return _GRAD2_DIAG8
    if name in {"circle16"}:
        return _GRAD2_CIRCLE16
    raise ValueError(f"unknown 2D gradient set: {name}")


def grad2_dot(
    h: np.ndarray, dx: np.ndarray, dy: np.ndarray, *, grad_table: np.ndarray
) -> np.ndarray:
    """Dot product of the hashed corner gradient with the offset (dx, dy)."""
    g = grad_table[(h % grad_table.shape[0]).astype(np.int64)]
    return g[..., 0] * dx + g[..., 1] * dy
