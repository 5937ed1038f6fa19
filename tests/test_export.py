import io

import numpy as np
from PIL import Image

from viz.export import (
    array_to_npy_bytes,
    heightmap_to_obj_bytes,
    heightmap_to_png_bytes,
    materials_to_png_bytes,
    materials_to_rgb,
)
from voxgen.terrain import TERRAIN_MATERIALS, generate_terrain


def _buf(x_size=4, z_size=3, amplitude=40.0):
    return generate_terrain(
        x_size=x_size, z_size=z_size, layers=[(0.37, amplitude)], seed=2
    )


def test_heightmap_png_size_follows_grid():
    data = heightmap_to_png_bytes(_buf())
    assert data[:8] == b"\x89PNG\r\n\x1a\n"

    img = Image.open(io.BytesIO(data))
    # Rows are x, columns are z.
    assert img.size == (3, 4)


def test_heightmap_png_flat_map():
    data = heightmap_to_png_bytes(_buf(amplitude=0.0))
    arr = np.array(Image.open(io.BytesIO(data)))
    assert arr.min() == 0
    assert arr.max() == 0


def test_materials_to_rgb_uses_palette():
    ids = np.array([[0, 5], [2, 9]])
    rgb = materials_to_rgb(ids, TERRAIN_MATERIALS)
    assert rgb.shape == (2, 2, 3)
    assert tuple(rgb[0, 1]) == TERRAIN_MATERIALS[5][:3]
    assert tuple(rgb[1, 1]) == TERRAIN_MATERIALS[-1][:3]


def test_materials_png_roundtrip():
    buf = _buf()
    img = Image.open(io.BytesIO(materials_to_png_bytes(buf, TERRAIN_MATERIALS)))
    assert img.mode == "RGB"
    assert img.size == (3, 4)


def test_buffer_npy_roundtrip():
    buf = _buf()
    out = np.load(io.BytesIO(array_to_npy_bytes(buf.data)))
    assert out.dtype == np.float32
    assert np.array_equal(out, buf.data)


def test_heightmap_obj_vertex_and_face_counts():
    obj = heightmap_to_obj_bytes(_buf(), y_scale=2.0).decode("utf-8")
    v_lines = [ln for ln in obj.splitlines() if ln.startswith("v ")]
    f_lines = [ln for ln in obj.splitlines() if ln.startswith("f ")]
    assert len(v_lines) == 12
    assert len(f_lines) == 12
    assert v_lines[0].split()[1] == "0.000000"
