from __future__ import annotations

import io
from typing import Sequence

import numpy as np
from PIL import Image

from voxgen.terrain import HeightmapBuffer


def heightmap_to_png_bytes(buf: HeightmapBuffer) -> bytes:
    """Heights as an 8-bit grayscale PNG, x along image rows, z along columns.

    Values are min/max normalized to [0, 255]; a flat map becomes all zeros.
    """

    h = np.asarray(buf.heights(), dtype=np.float64)
    hmin = float(np.min(h))
    hmax = float(np.max(h))
    if hmax == hmin:
        img = np.zeros(h.shape, dtype=np.uint8)
    else:
        img = np.clip((h - hmin) / (hmax - hmin) * 255.0, 0.0, 255.0).astype(np.uint8)

    out = io.BytesIO()
    Image.fromarray(img).save(out, format="PNG")
    return out.getvalue()


def materials_to_rgb(material_ids: np.ndarray, palette: Sequence[Sequence[int]]) -> np.ndarray:
    """Look material ids up in an RGBA palette; returns uint8 HxWx3."""
    ids = np.asarray(material_ids, dtype=np.int64)
    colors = np.asarray(palette, dtype=np.uint8)
    if colors.ndim != 2 or colors.shape[1] != 4:
        raise ValueError("palette must be a sequence of RGBA colors")
    return colors[np.clip(ids, 0, colors.shape[0] - 1), :3]


def materials_to_png_bytes(buf: HeightmapBuffer, palette: Sequence[Sequence[int]]) -> bytes:
    out = io.BytesIO()
    Image.fromarray(materials_to_rgb(buf.material_ids(), palette)).save(
        out, format="PNG"
    )
    return out.getvalue()


def array_to_npy_bytes(a: np.ndarray) -> bytes:
    out = io.BytesIO()
    np.save(out, np.asarray(a))
    return out.getvalue()


def heightmap_to_obj_bytes(buf: HeightmapBuffer, *, y_scale: float = 1.0) -> bytes:
    """Triangulated Wavefront OBJ of the heightmap, y up."""
    h = np.asarray(buf.heights(), dtype=np.float64)
    xs, zs = h.shape
    if xs < 2 or zs < 2:
        raise ValueError("heightmap must be at least 2x2")

    y_scale = float(y_scale)

    def vid(x: int, z: int) -> int:
        return x * zs + z + 1

    lines: list[str] = [
        "# voxgen terrain heightmap\n",
        f"# grid={xs}x{zs} seed={buf.seed}\n",
    ]
    for x in range(xs):
        for z in range(zs):
            lines.append(f"v {x:.6f} {(h[x, z] * y_scale):.6f} {z:.6f}\n")

    for x in range(xs - 1):
        for z in range(zs - 1):
            v00 = vid(x, z)
            v10 = vid(x + 1, z)
            v01 = vid(x, z + 1)
            v11 = vid(x + 1, z + 1)
            lines.append(f"f {v00} {v01} {v10}\n")
            lines.append(f"f {v10} {v01} {v11}\n")

    return "".join(lines).encode("utf-8")
