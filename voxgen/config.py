"""Live-tunable noise parameters and terrain generation settings."""
from __future__ import annotations

import math
import numbers
import os
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from voxgen.errors import ConfigurationError

DEFAULT_SCALES = (0.001, 0.005, 0.01, 0.002)
DEFAULT_AMPLITUDES = (100.0, 10.0, 50.0, 200.0)


@dataclass(frozen=True)
class NoiseLayer:
    scale: float
    amplitude: float


def validate_layers(layers: Iterable[Any]) -> tuple[NoiseLayer, ...]:
    """Normalize layers given as NoiseLayer, (scale, amplitude) pairs or mappings."""

    out: list[NoiseLayer] = []
    for layer in layers:
        if isinstance(layer, NoiseLayer):
            scale, amplitude = layer.scale, layer.amplitude
        elif isinstance(layer, Mapping):
            try:
                scale, amplitude = layer["scale"], layer["amplitude"]
            except KeyError as exc:
                raise ConfigurationError(f"noise layer is missing {exc.args[0]!r}") from exc
        else:
            try:
                scale, amplitude = layer
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(f"invalid noise layer: {layer!r}") from exc

        scale = float(scale)
        amplitude = float(amplitude)
        if not (math.isfinite(scale) and math.isfinite(amplitude)):
            raise ConfigurationError("noise layer scale and amplitude must be finite")
        out.append(NoiseLayer(scale=scale, amplitude=amplitude))

    if not out:
        raise ConfigurationError("at least one noise layer is required")
    return tuple(out)


@dataclass
class NoiseParams:
    """Scale/amplitude arrays shared between the editor and the generator.

    Every mutation bumps `version` so a finished generation can tell whether it
    is still the newest one.
    """

    scales: list[float] = field(default_factory=lambda: list(DEFAULT_SCALES))
    amplitudes: list[float] = field(default_factory=lambda: list(DEFAULT_AMPLITUDES))
    version: int = 0

    def __post_init__(self) -> None:
        self.scales = [float(s) for s in self.scales]
        self.amplitudes = [float(a) for a in self.amplitudes]
        self.layers()

    def layers(self) -> tuple[NoiseLayer, ...]:
        if len(self.scales) != len(self.amplitudes):
            raise ConfigurationError(
                f"scales and amplitudes differ in length "
                f"({len(self.scales)} != {len(self.amplitudes)})"
            )
        return validate_layers(zip(self.scales, self.amplitudes))

    def set_scale(self, index: int, value: float) -> None:
        self.scales[int(index)] = float(value)
        self.version += 1

    def set_amplitude(self, index: int, value: float) -> None:
        self.amplitudes[int(index)] = float(value)
        self.version += 1

    def set_layers(self, layers: Iterable[Any]) -> None:
        checked = validate_layers(layers)
        self.scales = [layer.scale for layer in checked]
        self.amplitudes = [layer.amplitude for layer in checked]
        self.version += 1

    def snapshot(self) -> tuple[int, tuple[NoiseLayer, ...]]:
        """Immutable copy for handing to a worker thread."""
        return self.version, self.layers()


def _env_value(name: str, cast: type, default: Any) -> Any:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name}={raw!r} is not a valid {cast.__name__}") from exc


def _whole(name: str, value: Any) -> int:
    """`value` as an int, rejecting fractions instead of truncating them."""
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if isinstance(value, numbers.Integral):
        return int(value)
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from exc
    if not number.is_integer():
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return int(number)


@dataclass(frozen=True)
class TerrainConfig:
    """Grid extents and material classification thresholds."""

    x_size: int = 1024
    z_size: int = 1024
    material_step: float = 15.0
    material_cap: int = 5
    jitter_width: int = 0
    jitter_seed: Optional[int] = None
    max_cells: int = 1 << 26

    def __post_init__(self) -> None:
        for name in ("x_size", "z_size", "material_cap", "jitter_width", "max_cells"):
            object.__setattr__(self, name, _whole(name, getattr(self, name)))
        if self.jitter_seed is not None:
            object.__setattr__(self, "jitter_seed", _whole("jitter_seed", self.jitter_seed))
        try:
            step = float(self.material_step)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"material_step must be a number, got {self.material_step!r}"
            ) from exc
        object.__setattr__(self, "material_step", step)

        if self.x_size <= 0 or self.z_size <= 0:
            raise ConfigurationError(
                f"grid extents must be > 0, got {self.x_size}x{self.z_size}"
            )
        if not (math.isfinite(step) and step > 0.0):
            raise ConfigurationError("material_step must be a positive finite number")
        if self.material_cap < 0:
            raise ConfigurationError("material_cap must be >= 0")
        if self.jitter_width < 0:
            raise ConfigurationError("jitter_width must be >= 0")
        if self.max_cells <= 0:
            raise ConfigurationError("max_cells must be > 0")

    @property
    def cell_count(self) -> int:
        return int(self.x_size) * int(self.z_size)

    @classmethod
    def from_mapping(cls, payload: Optional[Mapping[str, Any]] = None) -> "TerrainConfig":
        if not payload:
            return cls()
        unknown = set(payload) - set(cls.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"unknown terrain settings: {sorted(unknown)}")
        return cls(**dict(payload))

    @classmethod
    def from_environment(cls, prefix: str = "VOXGEN") -> "TerrainConfig":
        defaults = cls()
        return cls(
            x_size=_env_value(f"{prefix}_X_SIZE", int, defaults.x_size),
            z_size=_env_value(f"{prefix}_Z_SIZE", int, defaults.z_size),
            material_step=_env_value(f"{prefix}_MATERIAL_STEP", float, defaults.material_step),
            material_cap=_env_value(f"{prefix}_MATERIAL_CAP", int, defaults.material_cap),
            jitter_width=_env_value(f"{prefix}_JITTER_WIDTH", int, defaults.jitter_width),
            jitter_seed=_env_value(f"{prefix}_JITTER_SEED", int, defaults.jitter_seed),
            max_cells=_env_value(f"{prefix}_MAX_CELLS", int, defaults.max_cells),
        )
