"""Perlin noise flow field with particles drifting along it."""

from .config import FieldConfig
from .errors import FlowFieldError, InvalidConfiguration, OutOfBoundsSample
from .field import ParticleField, TrailSnapshot
from .grid import VectorGrid
from .particles import Particle, ParticleState
from .perlin import NoiseField

__all__ = [
    "FieldConfig",
    "FlowFieldError",
    "InvalidConfiguration",
    "NoiseField",
    "OutOfBoundsSample",
    "Particle",
    "ParticleField",
    "ParticleState",
    "TrailSnapshot",
    "VectorGrid",
]
