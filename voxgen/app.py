"""Control layer tying the generators, the camera and the renderer together."""
from __future__ import annotations

import itertools
import logging
import threading
from concurrent.futures import Executor, Future
from dataclasses import replace
from typing import Callable, Optional

from voxgen.buffers import BufferSlot, material_buffer
from voxgen.camera import Camera
from voxgen.config import NoiseParams, TerrainConfig
from voxgen.profiler import ProfilerData
from voxgen.renderer import GpuInfo, Renderer
from voxgen.scene import Scene, build_cornell_box_scene
from voxgen.terrain import TERRAIN_MATERIALS, HeightmapBuffer, generate_terrain_map
from voxnoise.source import NoiseSource

log = logging.getLogger(__name__)

PRESENT_TARGETS = ("terrain", "scene")


class App:
    """Owns the live state the editor panels and the frame loop share.

    Terrain buffers only reach the renderer from `update_terrain_map` or from
    `frame`, never from a worker thread.
    """

    def __init__(
        self,
        renderer: Renderer,
        *,
        params: Optional[NoiseParams] = None,
        config: Optional[TerrainConfig] = None,
        noise: Optional[NoiseSource] = None,
        camera: Optional[Camera] = None,
    ):
        self.renderer = renderer
        self.params = params if params is not None else NoiseParams()
        self.config = config if config is not None else TerrainConfig()
        self.noise = noise if noise is not None else NoiseSource()
        self.camera = camera if camera is not None else Camera()
        self.profiler = ProfilerData()
        self.terrain: BufferSlot[HeightmapBuffer] = BufferSlot()
        self.scene: Optional[Scene] = None
        self.present_target = PRESENT_TARGETS[0]
        self._lock = threading.Lock()
        self._tickets = itertools.count(1)
        self._uploaded_serial = 0
        self._materials_uploaded = False

    def gpu_info(self) -> GpuInfo:
        return GpuInfo.from_mapping(self.renderer.get_gpu_info())

    def set_present_target(self, target: str) -> None:
        if target not in PRESENT_TARGETS:
            raise ValueError(f"unknown present target: {target!r}")
        self.present_target = target

    def _job(self, seed: Optional[float]) -> Callable[[], HeightmapBuffer]:
        # Ticket, params copy and noise snapshot are taken on the caller's
        # thread so the job sees the state as of the request.
        with self._lock:
            ticket = next(self._tickets)
            params = replace(
                self.params,
                scales=list(self.params.scales),
                amplitudes=list(self.params.amplitudes),
            )
            noise = self.noise.snapshot(seed)
            config = self.config

        def _work() -> HeightmapBuffer:
            buf = generate_terrain_map(params, noise=noise, config=config)
            if not self.terrain.publish(buf, version=ticket):
                log.debug("Dropped terrain request %d, a newer one is already published", ticket)
            return buf

        return _work

    def _upload_pending(self) -> bool:
        serial, buf = self.terrain.latest()
        if buf is None or serial == self._uploaded_serial:
            return False
        if not self._materials_uploaded:
            self.renderer.upload_materials(material_buffer(TERRAIN_MATERIALS))
            self._materials_uploaded = True
        self.renderer.upload_map(buf.data)
        self._uploaded_serial = serial
        log.info("Uploaded %dx%d terrain (version %d)", buf.x_size, buf.z_size, buf.version)
        return True

    def update_terrain_map(self, seed: Optional[float] = None) -> HeightmapBuffer:
        buf = self._job(seed)()
        self._upload_pending()
        return buf

    def submit_terrain_map(
        self, executor: Executor, seed: Optional[float] = None
    ) -> "Future[HeightmapBuffer]":
        """Generate on `executor`; the result is uploaded by the next `frame` call.

        Results are ordered by submission: a job that finishes after a newer
        one has been published is dropped.
        """
        return executor.submit(self._job(seed))

    def load_scene(self) -> Scene:
        self.scene = build_cornell_box_scene()
        self.renderer.upload_scene(self.scene.to_dict())
        log.info("Uploaded scene with %d objects", len(self.scene.objects))
        return self.scene

    def resize(self, width: int, height: int) -> None:
        self.renderer.resize(int(width), int(height))

    def frame(self, time_ms: float, width: int, height: int) -> None:
        self.profiler.update(time_ms)
        self._upload_pending()
        self.camera.update()
        self.renderer.render(self.camera.mvp(width, height), self.camera.position)
