from __future__ import annotations

from voxgen.app import App
from voxgen.buffers import BufferSlot, material_buffer, voxel_buffer
from voxgen.camera import Camera
from voxgen.config import NoiseLayer, NoiseParams, TerrainConfig
from voxgen.errors import ConfigurationError, ResourceExhaustionError, VoxgenError
from voxgen.profiler import ProfilerData
from voxgen.renderer import GpuInfo, Renderer
from voxgen.scene import (
    Scene,
    SceneObject,
    build_cornell_box_scene,
    model_matrix,
    sphere_voxels,
    uniform_voxels,
)
from voxgen.terrain import (
    HeightmapBuffer,
    HeightmapCell,
    generate_terrain,
    generate_terrain_map,
    material_ids,
)

__all__ = [
    "App",
    "BufferSlot",
    "Camera",
    "ConfigurationError",
    "GpuInfo",
    "HeightmapBuffer",
    "HeightmapCell",
    "NoiseLayer",
    "NoiseParams",
    "ProfilerData",
    "Renderer",
    "ResourceExhaustionError",
    "Scene",
    "SceneObject",
    "TerrainConfig",
    "VoxgenError",
    "build_cornell_box_scene",
    "generate_terrain",
    "generate_terrain_map",
    "material_buffer",
    "material_ids",
    "model_matrix",
    "sphere_voxels",
    "uniform_voxels",
    "voxel_buffer",
]
