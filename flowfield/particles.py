"""Particles drifting along the flow field."""

from __future__ import annotations

import math
from collections import deque
from enum import Enum
from typing import Deque, Optional, Tuple

import numpy as np

from .errors import OutOfBoundsSample
from .grid import VectorGrid

SPEED_RANGE = (1, 4)  # integers in [1, 3]
HISTORY_RANGE = (10, 210)

Point = Tuple[float, float]


class ParticleState(Enum):
    ACTIVE = "active"
    RETRACTING = "retracting"
    EXPIRED = "expired"


class Particle:
    """A point moving through the grid and remembering where it has been.

    The particle keeps following the field while its timer runs.  Once the
    timer is spent it stops and its trail shrinks from the oldest end; when
    only the head is left it respawns somewhere random with a fresh timer.
    ``speed_modifier`` and ``max_history_length`` are drawn once at creation
    and survive respawns.
    """

    def __init__(
        self,
        bounds: Tuple[float, float],
        rng: Optional[np.random.Generator] = None,
        colour: str = "#ffffff",
    ) -> None:
        self.bounds = bounds
        self.rng = rng if rng is not None else np.random.default_rng()
        self.colour = colour
        self.speed_modifier = int(self.rng.integers(*SPEED_RANGE))
        self.max_history_length = int(self.rng.integers(*HISTORY_RANGE))
        self.speed_x = 0.0
        self.speed_y = 0.0
        self.reset()

    def reset(self) -> None:
        """Respawn at a random pixel inside ``bounds`` with a fresh trail and timer."""

        width, height = self.bounds
        self.x = float(math.floor(self.rng.random() * width))
        self.y = float(math.floor(self.rng.random() * height))
        self.trail: Deque[Point] = deque([(self.x, self.y)], maxlen=self.max_history_length)
        self.timer = self.max_history_length * 2

    @property
    def state(self) -> ParticleState:
        if self.timer >= 1:
            return ParticleState.ACTIVE
        if len(self.trail) > 1:
            return ParticleState.RETRACTING
        return ParticleState.EXPIRED

    def step(self, grid: VectorGrid) -> None:
        """Advance the particle by one frame."""

        self.timer -= 1
        state = self.state
        if state is ParticleState.ACTIVE:
            try:
                vx, vy = grid.sample(self.x, self.y)
            except OutOfBoundsSample:
                # Off the grid: hold position until the timer runs out.
                return
            self.speed_x = vx * self.speed_modifier
            self.speed_y = vy * self.speed_modifier
            self.x += self.speed_x
            self.y += self.speed_y
            # ``maxlen`` drops the oldest point once the trail is full.
            self.trail.append((self.x, self.y))
        elif state is ParticleState.RETRACTING:
            self.trail.popleft()
        else:
            self.reset()

    def trail_array(self) -> np.ndarray:
        """Copy of the trail as an ``(n, 2)`` array, oldest point first."""

        return np.array(self.trail, dtype=float).reshape(-1, 2)


__all__ = ["Particle", "ParticleState"]
