"""Simulation context tying the noise, the vector grid and the particles together."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np

from .config import FieldConfig
from .errors import InvalidConfiguration
from .grid import VectorGrid, grid_shape
from .palette import palette_colours, pick_colour
from .particles import Particle
from .perlin import NoiseField

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class TrailSnapshot:
    """What a renderer needs to draw one particle for the current frame."""

    points: np.ndarray  # (n, 2) copy of the trail, oldest first
    colour: str


class ParticleField:
    """Own the flow field and every particle moving over it.

    A host calls :meth:`tick` once per frame and draws the returned
    snapshots.  Every other method changes the configuration and must only
    be called between ticks; UI callbacks that may fire at any time should
    use :meth:`request_reset`, which is applied at the start of the next
    tick.
    """

    def __init__(self, config: Optional[FieldConfig] = None) -> None:
        self.config = (config or FieldConfig()).validate()
        self.rng = np.random.default_rng(self.config.seed)
        self.noise = NoiseField(seed=int(self.rng.integers(2**32)))
        self.colours = palette_colours(self.config.palette)
        # Seed the current lattice was drawn from; a reset draws an unseeded one.
        self.lattice_seed = self.config.seed
        self.grid = self._build_grid(self.config)
        self.particles: List[Particle] = []
        self._spawn_particles()
        self._reset_pending = False
        self.frame = 0

    @classmethod
    def create(
        cls,
        width: float,
        height: float,
        cell_size: float = 10,
        number_of_particles: int = 500,
        noise_step: float = 0.05,
        **options,
    ) -> "ParticleField":
        """Convenience constructor mirroring the plain parameter list."""

        return cls(
            FieldConfig(
                width=width,
                height=height,
                cell_size=cell_size,
                number_of_particles=number_of_particles,
                noise_step=noise_step,
                **options,
            )
        )

    # ------------------------------------------------------------------ build --
    def _build_grid(self, config: FieldConfig) -> VectorGrid:
        rows, cols = grid_shape(config.width, config.height, config.cell_size)
        return VectorGrid.build(
            self.noise, rows, cols, config.cell_size, config.noise_step, seed=self.lattice_seed
        )

    def _spawn_particles(self) -> None:
        bounds = (self.config.width, self.config.height)
        self.particles = [
            Particle(bounds, self.rng, pick_colour(self.colours, self.rng))
            for _ in range(self.config.number_of_particles)
        ]
        logger.debug("Spawned %d particles", len(self.particles))

    # ------------------------------------------------------------- simulation --
    def tick(self) -> List[TrailSnapshot]:
        """Step every particle once and return the frame to draw."""

        if self._reset_pending:
            self.reset()
        for particle in self.particles:
            particle.step(self.grid)
        self.frame += 1
        return self.snapshot()

    def snapshot(self) -> List[TrailSnapshot]:
        return [TrailSnapshot(p.trail_array(), p.colour) for p in self.particles]

    # ---------------------------------------------------------- configuration --
    def request_reset(self) -> None:
        """Ask for :meth:`reset` at the next tick boundary."""

        self._reset_pending = True

    def reset(self) -> None:
        """Draw a brand-new noise lattice, rebuild the grid and respawn particles."""

        self._reset_pending = False
        self.lattice_seed = None
        self.noise.init(0, 0)
        self.grid = self._build_grid(self.config)
        self._spawn_particles()
        logger.info("Flow field reset")

    def resize(self, width: float, height: float) -> None:
        """Fit the grid and the particles to a new drawing area."""

        config = self.config.updated(width=width, height=height)
        grid = self._build_grid(config)
        self.config, self.grid = config, grid
        self._spawn_particles()
        logger.info("Resized flow field to %sx%s", width, height)

    def rebuild_field(self, step: float) -> None:
        """Rebuild the grid walking the noise with a new ``step``; particles stay."""

        config = self.config.updated(noise_step=step)
        grid = self._build_grid(config)
        self.config, self.grid = config, grid
        logger.info("Rebuilt flow field with noise step %s", step)

    def set_cell_size(self, cell_size: float) -> None:
        config = self.config.updated(cell_size=cell_size)
        grid = self._build_grid(config)
        self.config, self.grid = config, grid
        logger.info("Rebuilt flow field with cell size %s", cell_size)

    def set_particle_count(self, count: int) -> None:
        """Replace the particle set with ``count`` fresh particles."""

        self.config = self.config.updated(number_of_particles=count)
        self._spawn_particles()
        logger.info("Particle count set to %d", count)

    def set_palette(self, name: str) -> None:
        """Recolour every particle from palette ``name``; the grid is untouched."""

        colours = palette_colours(name)
        self.config = self.config.updated(palette=name)
        self.colours = colours
        for particle in self.particles:
            particle.colour = pick_colour(colours, self.rng)
        logger.info("Palette set to %s", name)

    # ------------------------------------------------------------ persistence --
    def save_grid(self, path: str | Path) -> Path:
        return self.grid.save(Path(path))

    def load_grid(self, path: str | Path) -> None:
        """Replace the grid with one saved by :meth:`save_grid`.

        The stored grid must match the current area, cell size and noise step,
        and the seed when one is configured.  Otherwise
        :class:`InvalidConfiguration` is raised and the current grid is kept;
        an unreadable file raises :class:`GridCacheError`.
        """

        grid = VectorGrid.load(Path(path))
        config = self.config
        expected = grid_shape(config.width, config.height, config.cell_size)
        if (grid.rows, grid.cols) != expected or grid.cell_size != float(config.cell_size):
            raise InvalidConfiguration(
                f"Stored grid is {grid.rows}x{grid.cols} with cell size {grid.cell_size}; "
                f"expected {expected[0]}x{expected[1]} with cell size {config.cell_size}"
            )
        if grid.step != float(config.noise_step):
            raise InvalidConfiguration(
                f"Stored grid uses noise step {grid.step}; expected {config.noise_step}"
            )
        if config.seed is not None and grid.seed != config.seed:
            raise InvalidConfiguration(
                f"Stored grid comes from seed {grid.seed}; expected {config.seed}"
            )
        self.grid = grid
        logger.info("Loaded vector grid from %s", path)


__all__ = ["ParticleField", "TrailSnapshot"]
