"""Gradient-lattice Perlin noise used to build the flow field."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

Vector = Tuple[float, float]


@dataclass
class NoiseField:
    """Generate and memoise 2D Perlin noise values.

    Every integer lattice point owns a random unit gradient.  ``init`` fills
    the rectangle ``[0, width) x [0, height)`` up front; any other lattice
    point is created the first time a query touches it and kept from then
    on, so the field can be walked in any direction without running off a
    pre-sized table.  Seeding makes the lattice reproducible.
    """

    width: int = 0
    height: int = 0
    seed: Optional[int] = None
    gradients: Dict[Tuple[int, int], Vector] = field(default_factory=dict, init=False, repr=False)
    cache: Dict[Tuple[float, float], float] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        self.rng = np.random.default_rng(self.seed)
        self.init(self.width, self.height)

    def init(self, width: int, height: int) -> None:
        """Throw away the lattice and cache and draw fresh gradients."""

        self.width = width
        self.height = height
        self.gradients = {}
        self.cache = {}
        for x in range(width):
            for y in range(height):
                self.gradients[(x, y)] = self.random_vector()
        logger.debug("Noise lattice initialised with %d gradients", len(self.gradients))

    def random_vector(self) -> Vector:
        """Return a unit vector pointing in a uniformly random direction."""

        angle = self.rng.random() * 2 * math.pi
        return math.cos(angle), math.sin(angle)

    def gradient(self, ix: int, iy: int) -> Vector:
        """Look up the gradient at ``(ix, iy)``, creating it on first use."""

        key = (ix, iy)
        vector = self.gradients.get(key)
        if vector is None:
            vector = self.random_vector()
            self.gradients[key] = vector
        return vector

    def set_gradient(self, ix: int, iy: int, gx: float, gy: float) -> None:
        """Pin the gradient at ``(ix, iy)``.

        Cached noise values may depend on the old vector, so the cache is
        dropped.
        """

        self.gradients[(ix, iy)] = (gx, gy)
        self.cache.clear()

    @staticmethod
    def smoothstep(w: float) -> float:
        """Ease ``w`` from 0 to 1 with ``w^2 (3 - 2w)``, clamped outside [0, 1]."""

        if w <= 0.0:
            return 0.0
        if w >= 1.0:
            return 1.0
        return w * w * (3.0 - 2.0 * w)

    @classmethod
    def interpolate(cls, a0: float, a1: float, w: float) -> float:
        """Blend ``a0`` and ``a1`` using the smoothstep of ``w``."""

        return a0 + (a1 - a0) * cls.smoothstep(w)

    def dot_grid_gradient(self, ix: int, iy: int, x: float, y: float) -> float:
        """Dot product of the corner gradient with the corner-to-point vector."""

        gx, gy = self.gradient(ix, iy)
        return (x - ix) * gx + (y - iy) * gy

    def noise(self, x: float, y: float) -> float:
        """Return the noise value at ``(x, y)``."""

        key = (x, y)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        x0 = math.floor(x)
        y0 = math.floor(y)
        x1 = x0 + 1
        y1 = y0 + 1
        sx = x - x0
        sy = y - y0

        top = self.interpolate(
            self.dot_grid_gradient(x0, y0, x, y),
            self.dot_grid_gradient(x1, y0, x, y),
            sx,
        )
        bottom = self.interpolate(
            self.dot_grid_gradient(x0, y1, x, y),
            self.dot_grid_gradient(x1, y1, x, y),
            sx,
        )
        value = self.interpolate(top, bottom, sy)

        self.cache[key] = value
        return value

    __call__ = noise


__all__ = ["NoiseField"]
