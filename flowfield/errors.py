"""Exceptions raised by the flow field simulation."""

from __future__ import annotations


class FlowFieldError(Exception):
    """Base class for every error raised by :mod:`flowfield`."""


class InvalidConfiguration(FlowFieldError, ValueError):
    """A parameter makes no sense for the simulation (e.g. ``cell_size <= 0``).

    Raised before any state is touched, so the previous valid configuration
    stays in place.
    """


class OutOfBoundsSample(FlowFieldError, IndexError):
    """A grid sample was requested outside the interpolatable area."""

    def __init__(self, px: float, py: float, row: int, col: int) -> None:
        super().__init__(
            f"Position ({px:.3f}, {py:.3f}) maps to cell ({row}, {col}) "
            "which has no neighbouring cells to interpolate with"
        )
        self.position = (px, py)
        self.cell = (row, col)


class GridCacheError(FlowFieldError):
    """A stored vector grid could not be read."""


__all__ = ["FlowFieldError", "GridCacheError", "InvalidConfiguration", "OutOfBoundsSample"]
