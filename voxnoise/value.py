from __future__ import annotations

import numpy as np

from .core import Lattice2D, make_permutation


def _hash_to_unit(h: np.ndarray) -> np.ndarray:
    return (h.astype(np.float64) / 255.0) * 2.0 - 1.0


class ValueNoise2D:
    """2D value noise (lattice values + smooth interpolation)."""

    def __init__(self, *, seed: int = 0):
        self.seed = int(seed)
        self.perm = make_permutation(self.seed)

    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        cell = Lattice2D.locate(self.perm, x, y)
        return cell.blend(
            _hash_to_unit(cell.aa),
            _hash_to_unit(cell.ba),
            _hash_to_unit(cell.ab),
            _hash_to_unit(cell.bb),
        )
