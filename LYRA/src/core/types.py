"""Shared core data structures used across preprocessing, scoring and overlay."""

from __future__ import annotations

from typing import Any, NamedTuple

import numpy as np


class ParseSkip(NamedTuple):
    """A CSV row excluded from the trace."""

    line_number: int
    text: str
    reason: str


class Trace(NamedTuple):
    """Raw (mass, intensity) samples in file order."""

    masses: np.ndarray
    intensities: np.ndarray
    skipped: tuple[ParseSkip, ...] = ()

    @property
    def size(self) -> int:
        return int(self.masses.size)


class BinnedTrace(NamedTuple):
    means: np.ndarray
    midpoints: np.ndarray
    counts: np.ndarray


class CandidateResult(NamedTuple):
    """One ranked match returned by the scoring service."""

    id: Any
    name: str
    score: float
    peaks: tuple[float, ...]


class LineShape(NamedTuple):
    """Line annotation for the plot surface.

    ``yref`` is ``"data"`` for y in data units or ``"paper"`` for y as a
    fraction (0..1) of the plot height.
    """

    x0: float
    x1: float
    y0: float
    y1: float
    yref: str
    color: str
    width: float

