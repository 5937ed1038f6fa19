from .perlin import Perlin2D
from .source import NoiseSource, layered2, make_noise
from .value import ValueNoise2D

__all__ = ["NoiseSource", "Perlin2D", "ValueNoise2D", "layered2", "make_noise"]
