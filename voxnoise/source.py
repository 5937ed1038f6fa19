from __future__ import annotations

import copy
import threading
from typing import Iterable, Optional

import numpy as np

from .core import seed_to_int
from .perlin import Noise2D, Perlin2D
from .value import ValueNoise2D

BASES = ("perlin", "value")


def make_noise(*, seed: int, basis: str = "perlin", grad_set: str = "classic12") -> Noise2D:
    basis = str(basis)
    if basis == "perlin":
        return Perlin2D(seed=int(seed), grad_set=grad_set)
    if basis == "value":
        return ValueNoise2D(seed=int(seed))
    raise ValueError(f"unknown basis: {basis}")


class NoiseSource:
    """Reseedable coherent noise owned by whoever generates terrain.

    The permutation only changes through `reseed`, so sampling the same
    coordinates twice without reseeding gives the same values. Code that
    samples from several threads should take a `snapshot` per job instead of
    sampling a source another thread may reseed.
    """

    def __init__(
        self,
        seed: float | None = None,
        *,
        basis: str = "perlin",
        grad_set: str = "classic12",
    ):
        self.basis = str(basis)
        self.grad_set = str(grad_set)
        self._lock = threading.Lock()
        if seed is None:
            seed = int(np.random.default_rng().integers(0, 2**31 - 1))
        self.reseed(seed)

    def reseed(self, seed: float) -> None:
        seed = seed_to_int(seed)
        noise = make_noise(seed=seed, basis=self.basis, grad_set=self.grad_set)
        with self._lock:
            self.seed, self._noise = seed, noise

    def snapshot(self, seed: Optional[float] = None) -> "NoiseSource":
        """Private copy of the current permutation, reseeding this source first if `seed` is given.

        Reseeding and copying happen under one lock, so the copy always
        carries the permutation for the seed it reports.
        """
        if seed is not None:
            seed = seed_to_int(seed)
            noise = make_noise(seed=seed, basis=self.basis, grad_set=self.grad_set)
        with self._lock:
            if seed is not None:
                self.seed, self._noise = seed, noise
            twin = copy.copy(self)
        twin._lock = threading.Lock()
        return twin

    def noise(self, x: np.ndarray, y: np.ndarray) -> np.ndarray:
        return self._noise.noise(x, y)

    def __repr__(self) -> str:
        return f"NoiseSource(seed={self.seed}, basis={self.basis!r}, grad_set={self.grad_set!r})"


def layered2(
    noise: Noise2D,
    x: np.ndarray,
    y: np.ndarray,
    layers: Iterable[tuple[float, float]],
) -> np.ndarray:
    """Sum of `noise(x * scale, y * scale) * amplitude` over (scale, amplitude) layers.

    Unlike fBm there is no normalization: the amplitudes are absolute heights.
    """

    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)

    total = np.zeros(np.broadcast(x, y).shape, dtype=np.float64)
    for scale, amplitude in layers:
        scale = float(scale)
        total += noise.noise(x * scale, y * scale) * float(amplitude)
    return total
