from __future__ import annotations

import pytest

from voxgen.config import (
    DEFAULT_AMPLITUDES,
    DEFAULT_SCALES,
    NoiseLayer,
    NoiseParams,
    TerrainConfig,
    validate_layers,
)
from voxgen.errors import ConfigurationError


def test_noise_params_defaults_pair_by_index() -> None:
    params = NoiseParams()
    layers = params.layers()
    assert len(layers) == 4
    assert layers[0] == NoiseLayer(scale=DEFAULT_SCALES[0], amplitude=DEFAULT_AMPLITUDES[0])
    assert layers[3] == NoiseLayer(scale=0.002, amplitude=200.0)


def test_noise_params_mutations_bump_version() -> None:
    params = NoiseParams()
    assert params.version == 0
    params.set_scale(1, 0.02)
    params.set_amplitude(2, 5.0)
    assert params.version == 2

    version, layers = params.snapshot()
    assert version == 2
    assert layers[1].scale == 0.02
    assert layers[2].amplitude == 5.0


def test_noise_params_snapshot_is_detached() -> None:
    params = NoiseParams()
    _, before = params.snapshot()
    params.set_scale(0, 0.5)
    assert before[0].scale == DEFAULT_SCALES[0]


def test_noise_params_rejects_mismatched_lengths() -> None:
    with pytest.raises(ConfigurationError):
        NoiseParams(scales=[0.1, 0.2], amplitudes=[1.0])


def test_noise_params_rejects_empty() -> None:
    with pytest.raises(ConfigurationError):
        NoiseParams(scales=[], amplitudes=[])


def test_validate_layers_accepts_pairs_and_mappings() -> None:
    layers = validate_layers([(0.5, 1.0), {"scale": 0.1, "amplitude": 3}, NoiseLayer(1.0, 2.0)])
    assert layers == (
        NoiseLayer(0.5, 1.0),
        NoiseLayer(0.1, 3.0),
        NoiseLayer(1.0, 2.0),
    )


@pytest.mark.parametrize(
    "layers",
    [
        [],
        [(0.5,)],
        [{"scale": 0.5}],
        [(float("nan"), 1.0)],
        [(0.5, float("inf"))],
    ],
)
def test_validate_layers_rejects_bad_input(layers) -> None:
    with pytest.raises(ConfigurationError):
        validate_layers(layers)


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(x_size=0),
        dict(z_size=-4),
        dict(material_step=0.0),
        dict(material_cap=-1),
        dict(jitter_width=-1),
        dict(max_cells=0),
    ],
)
def test_terrain_config_rejects_invalid(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        TerrainConfig(**kwargs)


def test_terrain_config_from_mapping() -> None:
    cfg = TerrainConfig.from_mapping({"x_size": 32, "z_size": 16, "material_step": 10.0})
    assert (cfg.x_size, cfg.z_size, cfg.material_step) == (32, 16, 10.0)
    assert cfg.cell_count == 512
    assert TerrainConfig.from_mapping(None) == TerrainConfig()

    with pytest.raises(ConfigurationError):
        TerrainConfig.from_mapping({"depth": 3})


def test_terrain_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VOXGEN_X_SIZE", "64")
    monkeypatch.setenv("VOXGEN_Z_SIZE", "128")
    monkeypatch.setenv("VOXGEN_JITTER_WIDTH", "2")
    monkeypatch.setenv("VOXGEN_JITTER_SEED", "9")
    cfg = TerrainConfig.from_environment()
    assert cfg.x_size == 64
    assert cfg.z_size == 128
    assert cfg.jitter_width == 2
    assert cfg.jitter_seed == 9
    assert cfg.material_cap == 5


def test_terrain_config_from_environment_bad_value(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VOXGEN_MATERIAL_STEP", "steep")
    with pytest.raises(ConfigurationError):
        TerrainConfig.from_environment()


@pytest.mark.parametrize(
    "payload",
    [
        {"x_size": 2.5},
        {"z_size": "wide"},
        {"material_cap": 1.5},
        {"max_cells": None},
        {"jitter_seed": 0.25},
        {"material_step": "steep"},
        {"x_size": True},
    ],
)
def test_terrain_config_rejects_non_integral_settings(payload) -> None:
    with pytest.raises(ConfigurationError):
        TerrainConfig.from_mapping(payload)


def test_terrain_config_normalizes_whole_numbers() -> None:
    cfg = TerrainConfig.from_mapping({"x_size": 32.0, "z_size": "16", "jitter_seed": 7.0})
    assert (cfg.x_size, cfg.z_size, cfg.jitter_seed) == (32, 16, 7)
    assert isinstance(cfg.x_size, int)
