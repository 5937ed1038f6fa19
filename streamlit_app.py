from __future__ import annotations

import logging
from typing import Any, Mapping

import numpy as np
import plotly.graph_objects as go
import streamlit as st

from ui.styles import inject_global_styles
from viz.export import (
    array_to_npy_bytes,
    heightmap_to_obj_bytes,
    heightmap_to_png_bytes,
    materials_to_png_bytes,
    materials_to_rgb,
)
from voxgen.app import PRESENT_TARGETS, App
from voxgen.config import NoiseParams, TerrainConfig
from voxgen.errors import VoxgenError
from voxgen.scene import Scene
from voxgen.terrain import TERRAIN_MATERIALS, HeightmapBuffer
from voxnoise.core import GRAD2_SETS
from voxnoise.source import BASES, NoiseSource

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

st.set_page_config(
    page_title="Voxel Content Editor",
    page_icon="#",
    layout="wide",
)

inject_global_styles()

_TARGET_LABELS = {"terrain": "Terrain", "scene": "Cornell box"}


class PreviewRenderer:
    """Keeps the last uploaded buffers so the page can draw them with plotly."""

    def __init__(self) -> None:
        self.map: np.ndarray | None = None
        self.materials: np.ndarray | None = None
        self.scene: Mapping[str, Any] | None = None
        self.size = (0, 0)

    def upload_map(self, buffer: np.ndarray) -> None:
        self.map = buffer

    def upload_materials(self, buffer: np.ndarray) -> None:
        self.materials = buffer

    def upload_scene(self, scene: Mapping[str, Any]) -> None:
        self.scene = scene

    def render(self, mvp: np.ndarray, camera_position: np.ndarray) -> None:
        pass

    def resize(self, width: int, height: int) -> None:
        self.size = (int(width), int(height))

    def get_gpu_info(self) -> Mapping[str, Any]:
        return {
            "name": "Plotly preview",
            "vendor": 0,
            "device": 0,
            "device_type": "Cpu",
            "driver": "numpy",
            "driver_info": np.__version__,
            "backend": "streamlit",
        }


def _app(basis: str, grad_set: str) -> App:
    key = ("voxgen_app", basis, grad_set)
    if st.session_state.get("voxgen_app_key") != key:
        # A basis switch keeps the slider values, seed and present target.
        previous: App | None = st.session_state.get("voxgen_app")
        params = previous.params if previous is not None else NoiseParams()
        seed = previous.noise.seed if previous is not None else 0
        app = App(
            PreviewRenderer(),
            params=params,
            noise=NoiseSource(seed, basis=basis, grad_set=grad_set),
        )
        if previous is not None:
            app.set_present_target(previous.present_target)
        st.session_state["voxgen_app"] = app
        st.session_state["voxgen_app_key"] = key
    return st.session_state["voxgen_app"]


def _heightmap_figure(buf: HeightmapBuffer, *, height: int = 520) -> go.Figure:
    fig = go.Figure(
        data=go.Heatmap(
            z=buf.heights(),
            colorscale="earth",
            hovertemplate="x=%{y} z=%{x} h=%{z:.2f}<extra></extra>",
            colorbar=dict(thickness=12),
        )
    )
    fig.update_layout(margin=dict(l=0, r=0, t=0, b=0), height=int(height))
    fig.update_yaxes(autorange="reversed", showticklabels=False, showgrid=False, zeroline=False)
    fig.update_xaxes(showticklabels=False, showgrid=False, zeroline=False)
    return fig


def _materials_figure(buf: HeightmapBuffer, *, height: int = 520) -> go.Figure:
    fig = go.Figure(data=go.Image(z=materials_to_rgb(buf.material_ids(), TERRAIN_MATERIALS)))
    fig.update_layout(margin=dict(l=0, r=0, t=0, b=0), height=int(height))
    fig.update_yaxes(showticklabels=False, showgrid=False)
    fig.update_xaxes(showticklabels=False, showgrid=False)
    return fig


def _surface_figure(buf: HeightmapBuffer, *, stride: int) -> go.Figure:
    h = np.asarray(buf.heights(), dtype=np.float64)[::stride, ::stride]
    fig = go.Figure(data=go.Surface(z=h, colorscale="earth", showscale=False))
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        height=520,
        scene=dict(
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            zaxis=dict(visible=False),
            aspectmode="manual",
            aspectratio=dict(x=1.0, y=1.0, z=0.35),
        ),
    )
    return fig


def _scene_figure(scene: Scene) -> go.Figure:
    fig = go.Figure()
    for obj in scene.objects:
        nx, ny, nz = obj.dims
        z, y, x = np.indices((nz, ny, nx), dtype=np.float64)
        voxels = obj.voxels.reshape(nz, ny, nx)
        filled = voxels > 0 if obj.id == "sphere" else np.ones_like(voxels, dtype=bool)

        # Voxel centers in unit-cube local space, then through the model matrix.
        local = np.stack(
            [
                (x[filled] + 0.5) / nx,
                (y[filled] + 0.5) / ny,
                (z[filled] + 0.5) / nz,
                np.ones(int(filled.sum())),
            ]
        )
        world = obj.model @ local
        r, g, b, _ = scene.palette[int(voxels[filled][0])]
        fig.add_trace(
            go.Scatter3d(
                x=world[0],
                y=world[2],
                z=world[1],
                mode="markers",
                name=obj.id,
                marker=dict(size=3, color=f"rgb({r},{g},{b})", opacity=0.85),
            )
        )
    fig.update_layout(
        margin=dict(l=0, r=0, t=0, b=0),
        height=520,
        scene=dict(aspectmode="data"),
        legend=dict(orientation="h"),
    )
    return fig


with st.sidebar:
    st.header("Terrain")
    basis = st.selectbox("Basis", list(BASES), index=0)
    grad_set = str(GRAD2_SETS[0])
    if basis == "perlin":
        grad_set = st.selectbox("Gradient set", list(GRAD2_SETS), index=0)

    app = _app(str(basis), str(grad_set))
    params: NoiseParams = app.params

    size = st.select_slider("Grid size", options=[64, 128, 256, 512, 1024], value=256)
    seed = st.number_input("Seed", min_value=0, max_value=2**31 - 1, value=0, step=1)
    reseed = st.button("Reseed", help="Rebuild the noise permutation from the seed.")
    jitter = st.slider("Material jitter", min_value=0, max_value=2, value=0)

    with st.expander("Noise Scales", expanded=True):
        for idx, value in enumerate(list(params.scales)):
            v = st.slider(
                f"Scale {idx + 1}",
                min_value=0.0,
                max_value=0.05,
                value=float(value),
                step=0.001,
                format="%.3f",
            )
            if v != params.scales[idx]:
                params.set_scale(idx, v)

    with st.expander("Noise Amplitudes", expanded=True):
        for idx, value in enumerate(list(params.amplitudes)):
            v = st.slider(
                f"Amplitude {idx + 1}",
                min_value=0.0,
                max_value=400.0,
                value=float(value),
                step=1.0,
            )
            if v != params.amplitudes[idx]:
                params.set_amplitude(idx, v)

    with st.expander("Renderer", expanded=False):
        target = st.selectbox(
            "Present target",
            list(PRESENT_TARGETS),
            index=PRESENT_TARGETS.index(app.present_target),
            format_func=_TARGET_LABELS.get,
        )
        app.set_present_target(str(target))
        for label, value in app.gpu_info().rows():
            st.text_input(label, value=value, disabled=True)

app.config = TerrainConfig(x_size=int(size), z_size=int(size), jitter_width=int(jitter))

st.title("Voxel content editor")

try:
    first_run = "voxgen_seeded" not in st.session_state
    buf = app.update_terrain_map(seed=int(seed) if (reseed or first_run) else None)
except VoxgenError as exc:
    st.error(str(exc))
    st.stop()
st.session_state["voxgen_seeded"] = True


def _terrain_panel(buf: HeightmapBuffer) -> None:
    st.caption(
        f"{buf.x_size}x{buf.z_size} cells, seed {buf.seed}, params version {buf.version}"
    )
    c1, c2 = st.columns(2)
    with c1:
        st.plotly_chart(_heightmap_figure(buf), width="stretch", key="terrain_height")
    with c2:
        st.plotly_chart(_materials_figure(buf), width="stretch", key="terrain_materials")
    st.plotly_chart(
        _surface_figure(buf, stride=max(1, buf.x_size // 256)),
        width="stretch",
        key="terrain_surface",
    )

    d1, d2, d3, d4 = st.columns(4)
    d1.download_button("Height PNG", heightmap_to_png_bytes(buf), "height.png", "image/png")
    d2.download_button(
        "Materials PNG",
        materials_to_png_bytes(buf, TERRAIN_MATERIALS),
        "materials.png",
        "image/png",
    )
    d3.download_button(
        "Buffer NPY", array_to_npy_bytes(buf.data), "terrain.npy", "application/octet-stream"
    )
    if buf.x_size <= 256:
        d4.download_button("Mesh OBJ", heightmap_to_obj_bytes(buf), "terrain.obj", "text/plain")


def _scene_panel(app: App) -> None:
    scene = app.scene if app.scene is not None else app.load_scene()
    st.plotly_chart(_scene_figure(scene), width="stretch", key="scene_preview")
    st.dataframe(
        [
            {"id": obj.id, "dims": "x".join(str(d) for d in obj.dims), "voxels": obj.voxels.size}
            for obj in scene.objects
        ],
        hide_index=True,
    )


# The present target's view comes first.
order = sorted(PRESENT_TARGETS, key=lambda t: t != app.present_target)
for name, tab in zip(order, st.tabs([_TARGET_LABELS[t] for t in order])):
    with tab:
        if name == "terrain":
            _terrain_panel(buf)
        else:
            _scene_panel(app)
