"""Simulation settings and their JSON persistence."""

from __future__ import annotations

import json
import logging
import math
import numbers
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import InvalidConfiguration
from .palette import palette_colours

logger = logging.getLogger(__name__)


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass(frozen=True)
class FieldConfig:
    """Parameters the host or UI layer hands to :class:`ParticleField`.

    Attributes
    ----------
    width, height:
        Simulation area in pixels, normally the viewport size.  Particles
        spawn inside it.
    cell_size:
        Grid resolution in pixels.  Smaller cells follow the noise more
        closely but cost more to build.
    number_of_particles:
        How many particles drift over the field.
    noise_step:
        Distance travelled in noise space per grid cell.  Small steps give
        broad, smooth currents; larger ones a turbulent field.
    palette:
        Name of the palette particle colours are drawn from.
    seed:
        Optional seed for the noise lattice and particle placement.
    """

    width: float = 1280
    height: float = 720
    cell_size: float = 10
    number_of_particles: int = 500
    noise_step: float = 0.05
    palette: str = "white"
    seed: Optional[int] = None

    def validate(self) -> "FieldConfig":
        """Raise :class:`InvalidConfiguration` for nonsensical values."""

        for name in ("width", "height", "cell_size", "noise_step"):
            value = getattr(self, name)
            if not _is_real(value) or not math.isfinite(value) or value <= 0:
                raise InvalidConfiguration(f"{name} must be a positive number, got {value!r}")
        if self.cell_size > min(self.width, self.height):
            raise InvalidConfiguration(
                f"cell_size {self.cell_size} leaves no room for a cell in a "
                f"{self.width}x{self.height} area"
            )
        if not _is_integer(self.number_of_particles) or self.number_of_particles < 0:
            raise InvalidConfiguration(
                f"number_of_particles must be a non-negative integer, got {self.number_of_particles!r}"
            )
        if self.seed is not None and (not _is_integer(self.seed) or self.seed < 0):
            raise InvalidConfiguration(f"seed must be a non-negative integer, got {self.seed!r}")
        if not isinstance(self.palette, str):
            raise InvalidConfiguration(f"palette must be a name, got {self.palette!r}")
        palette_colours(self.palette)
        return self

    def updated(self, **changes: Any) -> "FieldConfig":
        """Return a validated copy with ``changes`` applied."""

        return replace(self, **changes).validate()

    def to_dict(self) -> Dict[str, Any]:
        # NumPy scalars are valid settings but not JSON serialisable.
        return {
            key: int(value) if _is_integer(value) else float(value) if _is_real(value) else value
            for key, value in asdict(self).items()
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "FieldConfig":
        if not isinstance(payload, dict):
            raise InvalidConfiguration(f"settings must be a JSON object, got {type(payload).__name__}")
        known = {f.name for f in fields(cls)}
        ignored = sorted(set(payload) - known)
        if ignored:
            logger.warning("Ignoring unknown settings: %s", ", ".join(ignored))
        return cls(**{k: v for k, v in payload.items() if k in known}).validate()

    def save(self, path: str | Path) -> None:
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> "FieldConfig":
        with Path(path).expanduser().open("r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


__all__ = ["FieldConfig"]
