"""Colour palettes particles draw their trail colour from."""

from __future__ import annotations

from typing import Dict, List, Tuple

import matplotlib
import numpy as np
from matplotlib.colors import to_hex

from .errors import InvalidConfiguration

COLORMAP_PREFIX = "colormap:"

PALETTES: Dict[str, Tuple[str, ...]] = {
    "white": ("#ffffff",),
    "ocean": ("#03045e", "#0077b6", "#00b4d8", "#90e0ef", "#caf0f8"),
    "ember": ("#370617", "#9d0208", "#dc2f02", "#f48c06", "#ffba08"),
    "forest": ("#081c15", "#1b4332", "#2d6a4f", "#52b788", "#b7e4c7"),
    "neon": ("#f72585", "#7209b7", "#3a0ca3", "#4361ee", "#4cc9f0"),
}


def palette_colours(name: str, samples: int = 8) -> List[str]:
    """Return the hex colours of palette ``name``.

    Besides the fixed palettes, ``"colormap:<cmap>"`` samples ``samples``
    evenly spaced colours from a Matplotlib colormap, e.g.
    ``"colormap:viridis"``.
    """

    if name in PALETTES:
        return list(PALETTES[name])
    if name.startswith(COLORMAP_PREFIX):
        cmap_name = name[len(COLORMAP_PREFIX):]
        try:
            cmap = matplotlib.colormaps[cmap_name]
        except KeyError as exc:
            raise InvalidConfiguration(f"Unknown colormap {cmap_name!r}") from exc
        return [to_hex(cmap(level)) for level in np.linspace(0.0, 1.0, max(1, samples))]
    raise InvalidConfiguration(
        f"Unknown palette {name!r}; expected one of {sorted(PALETTES)} "
        f"or '{COLORMAP_PREFIX}<name>'"
    )


def pick_colour(colours: List[str], rng: np.random.Generator) -> str:
    return colours[int(rng.integers(len(colours)))]


__all__ = ["PALETTES", "palette_colours", "pick_colour"]
