"""Tkinter window animating the particle flow field in real time.

The viewer is only a host: it owns a :class:`ParticleField`, calls
``tick`` roughly 30 times per second and redraws each trail as a canvas
polyline.  Controls change the simulation between frames, never during one.
Settings are remembered in a small JSON file in the home directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np
import tkinter as tk
from tkinter import messagebox

from .config import FieldConfig
from .errors import FlowFieldError
from .field import ParticleField
from .palette import PALETTES

logger = logging.getLogger(__name__)

SETTINGS_PATH = Path.home() / ".flowfield.json"
FRAME_DELAY_MS = 33


def trail_coords(points: np.ndarray) -> List[float]:
    """Flatten a trail into the ``x0, y0, x1, y1, ...`` list Tk lines expect."""

    coords = points.ravel().tolist()
    if len(coords) < 4:
        # Tk needs two points per line; repeat the head.
        coords = coords * 2
    return coords


class FlowFieldViewer:
    """Minimal viewer widget hosting the simulation loop."""

    def __init__(self, root: tk.Tk, settings_path: Path = SETTINGS_PATH) -> None:
        # Store the window handle so we can schedule animation callbacks with ``after``.
        self.root = root
        self.root.title("Flow Field")
        self.root.configure(bg="#202020")
        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self.settings_path = settings_path

        self.field = ParticleField(self._load_settings())
        # Canvas line handles, one per particle, recreated when the particle set changes.
        self.items: List[int] = []
        # Size reported by the last ``<Configure>`` event, applied at the next frame.
        self.pending_size: Optional[Tuple[int, int]] = None
        self.running = True

        self._build_controls()
        self.canvas = self._build_canvas()
        self._sync_items()
        self.root.after(0, self.update_visual)

    def _load_settings(self) -> FieldConfig:
        if not self.settings_path.exists():
            return FieldConfig()
        try:
            return FieldConfig.load(self.settings_path)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read settings from %s: %s", self.settings_path, exc)
            return FieldConfig()

    # ------------------------------------------------------------------ layout --
    def _build_controls(self) -> None:
        """Create a bar with the reset button and the parameter controls."""

        config = self.field.config
        bar = tk.Frame(self.root, bg="#202020")
        bar.pack(side=tk.TOP, fill=tk.X, padx=12, pady=12)

        reset_button = tk.Button(
            bar,
            text="Reset",
            command=self.field.request_reset,
            bg="#3a3a3a",
            fg="white",
        )
        reset_button.pack(side=tk.LEFT)

        self.particle_scale = tk.Scale(
            bar,
            label="Particles",
            from_=0,
            to=3000,
            resolution=50,
            orient=tk.HORIZONTAL,
            bg="#202020",
            fg="white",
        )
        self.particle_scale.set(config.number_of_particles)
        self.particle_scale.bind("<ButtonRelease-1>", self.on_particles_changed)
        self.particle_scale.pack(side=tk.LEFT, padx=8)

        self.step_scale = tk.Scale(
            bar,
            label="Noise step",
            from_=0.005,
            to=0.5,
            resolution=0.005,
            orient=tk.HORIZONTAL,
            bg="#202020",
            fg="white",
        )
        self.step_scale.set(config.noise_step)
        self.step_scale.bind("<ButtonRelease-1>", self.on_step_changed)
        self.step_scale.pack(side=tk.LEFT, padx=8)

        self.palette_name = tk.StringVar(value=config.palette)
        palette_menu = tk.OptionMenu(bar, self.palette_name, *sorted(PALETTES), command=self.on_palette_changed)
        palette_menu.configure(bg="#3a3a3a", fg="white", highlightthickness=0)
        palette_menu.pack(side=tk.LEFT, padx=8)

        self.status_label = tk.StringVar(value="")
        status = tk.Label(self.root, textvariable=self.status_label, bg="#202020", fg="#dddddd")
        status.pack(side=tk.TOP, fill=tk.X)

    def _build_canvas(self) -> tk.Canvas:
        """Create the drawing surface that hosts the animated flow field."""

        canvas = tk.Canvas(
            self.root,
            width=int(self.field.config.width),
            height=int(self.field.config.height),
            bg="black",
            highlightthickness=0,
        )
        canvas.pack(side=tk.TOP, fill=tk.BOTH, expand=True)
        canvas.bind("<Configure>", self.on_resize)
        return canvas

    def _sync_items(self) -> None:
        """Make sure there is exactly one canvas line per particle."""

        if len(self.items) == len(self.field.particles):
            return
        self.canvas.delete("all")
        self.items = [
            self.canvas.create_line(0, 0, 0, 0, fill=particle.colour, width=1)
            for particle in self.field.particles
        ]

    # -------------------------------------------------------------- user input --
    def _apply(self, change, *args) -> None:
        try:
            change(*args)
        except FlowFieldError as exc:
            messagebox.showerror("Invalid setting", str(exc))
            return
        self._sync_items()

    def on_particles_changed(self, _event: tk.Event) -> None:
        self._apply(self.field.set_particle_count, int(self.particle_scale.get()))

    def on_step_changed(self, _event: tk.Event) -> None:
        self._apply(self.field.rebuild_field, float(self.step_scale.get()))

    def on_palette_changed(self, name: str) -> None:
        self._apply(self.field.set_palette, name)

    def on_resize(self, event: tk.Event) -> None:
        if (event.width, event.height) != (self.field.config.width, self.field.config.height):
            self.pending_size = (event.width, event.height)

    # --------------------------------------------------------------- animation --
    def update_visual(self) -> None:
        """Advance the simulation one tick and redraw every trail."""

        if not self.running:
            return

        if self.pending_size is not None:
            width, height = self.pending_size
            self.pending_size = None
            try:
                self.field.resize(width, height)
            except FlowFieldError as exc:
                # Windows shrunk below a single cell keep the previous field.
                logger.debug("Ignoring resize to %sx%s: %s", width, height, exc)
            self._sync_items()

        snapshots = self.field.tick()
        # A reset may have replaced the particles during the tick.
        self._sync_items()

        for item_id, snapshot in zip(self.items, snapshots):
            self.canvas.coords(item_id, *trail_coords(snapshot.points))
            self.canvas.itemconfigure(item_id, fill=snapshot.colour)

        self.status_label.set(f"frame {self.field.frame}  particles {len(snapshots)}")
        self.root.after(FRAME_DELAY_MS, self.update_visual)

    def on_close(self) -> None:
        """Remember the current settings and close the window."""

        self.running = False
        try:
            self.field.config.save(self.settings_path)
        except OSError as exc:
            logger.warning("Could not save settings to %s: %s", self.settings_path, exc)
        self.root.destroy()


def run() -> None:
    """Entry point used by ``python -m flowfield.ui``."""

    logging.basicConfig(level=logging.INFO)
    root = tk.Tk()
    FlowFieldViewer(root)
    root.mainloop()


if __name__ == "__main__":  # pragma: no cover - manual interactive usage
    run()
