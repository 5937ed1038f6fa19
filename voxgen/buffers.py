"""Flat buffers handed to the renderer, and the slot that swaps them in."""
from __future__ import annotations

import threading
from typing import Generic, Optional, Sequence, TypeVar

import numpy as np

from voxgen.errors import ConfigurationError

T = TypeVar("T")


def material_buffer(palette: Sequence[Sequence[int]]) -> np.ndarray:
    """`float32[count * 4]` with each RGBA color's components, in palette order."""
    colors = np.asarray(palette, dtype=np.float32)
    if colors.size == 0:
        return np.zeros(0, dtype=np.float32)
    if colors.ndim != 2 or colors.shape[1] != 4:
        raise ConfigurationError("palette must be a sequence of RGBA colors")
    return colors.reshape(-1).copy()


def voxel_buffer(voxels: np.ndarray) -> np.ndarray:
    """`uint8[nx * ny * nz]` palette indices, copied so the caller keeps ownership."""
    return np.array(voxels, dtype=np.uint8).reshape(-1)


class BufferSlot(Generic[T]):
    """Holds the newest completed buffer.

    Producers always build a fresh buffer and `publish` it whole, so a reader
    never observes a half written one. `version` orders the producers' requests;
    a result whose version is older than the one held is dropped, even if it
    finishes later.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self._version = -1
        self._serial = 0

    @property
    def version(self) -> int:
        return self._version

    @property
    def serial(self) -> int:
        """Count of accepted publishes; changes whenever the held buffer does."""
        return self._serial

    def publish(self, value: T, *, version: int = 0) -> bool:
        with self._lock:
            if int(version) < self._version:
                return False
            self._value = value
            self._version = int(version)
            self._serial += 1
            return True

    def get(self) -> Optional[T]:
        return self._value

    def latest(self) -> tuple[int, Optional[T]]:
        with self._lock:
            return self._serial, self._value
