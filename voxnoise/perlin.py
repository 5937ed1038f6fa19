from __future__ import annotations

from typing import Protocol

import numpy as np

from .core import Lattice2D, grad2_dot, grad2_table, make_permutation


class Noise2D(Protocol):
    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:  # pragma: no cover
        ...


class Perlin2D:
    """2D gradient noise over a 256-cell permutation lattice."""

    def __init__(self, *, seed: int = 0, grad_set: str = "classic12"):
        self.seed = int(seed)
        self.perm = make_permutation(self.seed)
        self.grad_set = str(grad_set)
        self.grad_table = grad2_table(self.grad_set)

    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        cell = Lattice2D.locate(self.perm, x, y)
        xf, yf = cell.xf, cell.yf
        g = self.grad_table

        return cell.blend(
            grad2_dot(cell.aa, xf, yf, grad_table=g),
            grad2_dot(cell.ba, xf - 1.0, yf, grad_table=g),
            grad2_dot(cell.ab, xf, yf - 1.0, grad_table=g),
            grad2_dot(cell.bb, xf - 1.0, yf - 1.0, grad_table=g),
        )
