"""Interface of the external voxel renderer that consumes generated buffers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

import numpy as np


class Renderer(Protocol):  # pragma: no cover
    def upload_map(self, buffer: np.ndarray) -> None: ...

    def upload_materials(self, buffer: np.ndarray) -> None: ...

    def upload_scene(self, scene: Mapping[str, Any]) -> None: ...

    def render(self, mvp: np.ndarray, camera_position: np.ndarray) -> None: ...

    def resize(self, width: int, height: int) -> None: ...

    def get_gpu_info(self) -> Mapping[str, Any]: ...


@dataclass(frozen=True)
class GpuInfo:
    """Read-only adapter descriptor reported by the renderer."""

    name: str = ""
    vendor: int = 0
    device: int = 0
    device_type: str = ""
    driver: str = ""
    driver_info: str = ""
    backend: str = ""

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None = None) -> "GpuInfo":
        if not payload:
            return cls()
        return cls(
            name=str(payload.get("name", "")),
            vendor=int(float(payload.get("vendor", 0))),
            device=int(float(payload.get("device", 0))),
            device_type=str(payload.get("device_type", "")),
            driver=str(payload.get("driver", "")),
            driver_info=str(payload.get("driver_info", "")),
            backend=str(payload.get("backend", "")),
        )

    def rows(self) -> list[tuple[str, str]]:
        return [
            ("Name", self.name),
            ("Vendor", str(self.vendor)),
            ("Device", str(self.device)),
            ("Device Type", self.device_type),
            ("Driver", self.driver),
            ("Driver Info", self.driver_info),
            ("Backend", self.backend),
        ]
