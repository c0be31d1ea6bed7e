"""Grid of unit direction vectors derived from Perlin noise."""

from __future__ import annotations

import logging
import math
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np

from .errors import GridCacheError, InvalidConfiguration, OutOfBoundsSample
from .perlin import NoiseField

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Cell:
    """Read-only view of one grid cell."""

    x: float  # direction vector
    y: float
    xpos: float  # pixel-space anchor
    ypos: float


def grid_shape(width: float, height: float, cell_size: float) -> Tuple[int, int]:
    """Return ``(rows, cols)`` for a surface of ``width x height`` pixels."""

    return int(height // cell_size) + 1, int(width // cell_size) + 1


class VectorGrid:
    """Lattice of directions with bilinear sampling between anchors.

    ``directions`` has shape ``(rows, cols, 2)``.  Cell ``(row, col)`` is
    anchored at ``(col * cell_size, row * cell_size)`` in pixel space.
    ``seed`` records which seeded noise lattice the grid came from, if any.
    """

    def __init__(
        self,
        directions: np.ndarray,
        cell_size: float,
        step: float,
        seed: Optional[int] = None,
    ) -> None:
        if not cell_size > 0 or not math.isfinite(cell_size):
            raise InvalidConfiguration(f"cell_size must be a positive number, got {cell_size}")
        directions = np.array(directions, dtype=float)
        if directions.ndim != 3 or directions.shape[2] != 2:
            raise InvalidConfiguration(
                f"directions must have shape (rows, cols, 2), got {directions.shape}"
            )
        # Neighbouring anchors must stay distinct or sampling divides by zero.
        last = max(directions.shape[0], directions.shape[1])
        if last * cell_size == (last - 1) * cell_size:
            raise InvalidConfiguration(f"cell_size {cell_size} produces degenerate cells")
        self.directions = directions
        self.directions.setflags(write=False)
        self.cell_size = float(cell_size)
        self.step = float(step)
        self.seed = seed

    @classmethod
    def build(
        cls,
        noise_field: NoiseField,
        rows: int,
        cols: int,
        cell_size: float,
        step: float,
        seed: Optional[int] = None,
    ) -> "VectorGrid":
        """Sample ``noise_field`` every ``step`` units and turn values into angles."""

        if rows < 1 or cols < 1:
            raise InvalidConfiguration(f"grid needs at least one cell, got {rows}x{cols}")
        directions = np.empty((rows, cols, 2), dtype=float)
        for row in range(rows):
            for col in range(cols):
                angle = noise_field.noise(col * step, row * step) * 2 * math.pi
                directions[row, col, 0] = math.cos(angle)
                directions[row, col, 1] = math.sin(angle)
        logger.debug("Built %dx%d vector grid (cell_size=%s, step=%s)", rows, cols, cell_size, step)
        return cls(directions, cell_size, step, seed)

    @property
    def rows(self) -> int:
        return self.directions.shape[0]

    @property
    def cols(self) -> int:
        return self.directions.shape[1]

    def cell(self, row: int, col: int) -> Cell:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        dx, dy = self.directions[row, col]
        return Cell(float(dx), float(dy), col * self.cell_size, row * self.cell_size)

    def _topleft(self, px: float, py: float) -> Tuple[int, int]:
        return math.floor(py / self.cell_size), math.floor(px / self.cell_size)

    def contains(self, px: float, py: float) -> bool:
        """Whether ``sample(px, py)`` has four cells to interpolate between."""

        row, col = self._topleft(px, py)
        return 0 <= row and 0 <= col and row + 1 < self.rows and col + 1 < self.cols

    def sample(self, px: float, py: float) -> Tuple[float, float]:
        """Bilinearly interpolate the direction under pixel position ``(px, py)``."""

        row, col = self._topleft(px, py)
        if row < 0 or col < 0 or row + 1 >= self.rows or col + 1 >= self.cols:
            raise OutOfBoundsSample(px, py, row, col)

        a = self.cell(row, col)
        b = self.cell(row, col + 1)
        c = self.cell(row + 1, col)
        d = self.cell(row + 1, col + 1)

        tx = (px - a.xpos) / (b.xpos - a.xpos)
        ty = (py - a.ypos) / (c.ypos - a.ypos)

        top_x = a.x + (b.x - a.x) * tx
        top_y = a.y + (b.y - a.y) * tx
        bottom_x = c.x + (d.x - c.x) * tx
        bottom_y = c.y + (d.y - c.y) * tx

        return top_x + (bottom_x - top_x) * ty, top_y + (bottom_y - top_y) * ty

    # ------------------------------------------------------------ persistence --
    def save(self, path: Path) -> Path:
        """Write the grid to ``path`` as a compressed ``.npz`` archive."""

        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("wb") as handle:
            np.savez_compressed(
                handle,
                directions=self.directions,
                cell_size=self.cell_size,
                step=self.step,
                # -1 marks a grid drawn from an unseeded lattice.
                seed=-1 if self.seed is None else self.seed,
            )
        logger.debug("Saved %dx%d vector grid to %s", self.rows, self.cols, path)
        return path

    @classmethod
    def load(cls, path: Path) -> "VectorGrid":
        """Read a grid written by :meth:`save`.

        Anything that is not a readable grid archive raises
        :class:`GridCacheError`.
        """

        path = Path(path).expanduser()
        try:
            archive = np.load(path)
            if not isinstance(archive, np.lib.npyio.NpzFile):
                raise GridCacheError(f"{path} is not a grid archive")
            with archive:
                directions = archive["directions"]
                cell_size = float(archive["cell_size"])
                step = float(archive["step"])
                seed = int(archive["seed"]) if "seed" in archive.files else -1
        except (OSError, ValueError, TypeError, KeyError, EOFError, zipfile.BadZipFile) as exc:
            raise GridCacheError(f"Could not read vector grid from {path}: {exc}") from exc
        return cls(directions, cell_size, step, None if seed < 0 else seed)


__all__ = ["Cell", "VectorGrid", "grid_shape"]
