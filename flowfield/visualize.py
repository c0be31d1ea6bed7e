"""Headless rendering of particle trails with Matplotlib."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt

from .field import ParticleField, TrailSnapshot


@dataclass
class RenderConfig:
    """Parameters controlling the appearance of the generated image."""

    frames: int = 300
    line_width: float = 1.0
    background: str = "black"
    dpi: int = 100


class TrailRenderer:
    """Run a :class:`ParticleField` for a while and draw the trails it leaves."""

    def __init__(self, field: ParticleField, config: RenderConfig | None = None) -> None:
        self.field = field
        self.config = config or RenderConfig()

    def run(self) -> Sequence[TrailSnapshot]:
        """Advance the simulation ``frames`` ticks and return the last frame."""

        snapshots = self.field.snapshot()
        for _ in range(self.config.frames):
            snapshots = self.field.tick()
        return snapshots

    def draw(self, snapshots: Sequence[TrailSnapshot], output_path: Path) -> Path:
        """Draw ``snapshots`` as a PNG image and write it to ``output_path``."""

        output_path = Path(output_path).expanduser()
        output_path.parent.mkdir(parents=True, exist_ok=True)

        width = self.field.config.width
        height = self.field.config.height
        dpi = self.config.dpi

        fig, ax = plt.subplots(figsize=(width / dpi, height / dpi), dpi=dpi)
        ax.set_facecolor(self.config.background)
        ax.set_xlim(0, width)
        # Screen coordinates: y grows downwards.
        ax.set_ylim(height, 0)
        ax.axis("off")

        for snapshot in snapshots:
            # A single point has nothing to stroke yet.
            if len(snapshot.points) < 2:
                continue
            ax.plot(
                snapshot.points[:, 0],
                snapshot.points[:, 1],
                color=snapshot.colour,
                linewidth=self.config.line_width,
            )

        fig.subplots_adjust(0, 0, 1, 1)
        fig.savefig(output_path, dpi=dpi, facecolor=self.config.background, transparent=False)
        plt.close(fig)
        return output_path

    def render(self, output_path: Path) -> Path:
        return self.draw(self.run(), output_path)


__all__ = ["RenderConfig", "TrailRenderer"]
