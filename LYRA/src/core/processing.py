"""Trace preprocessing: mass binning and standardization."""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

import numpy as np

from LYRA.config import Config
from LYRA.src.core.errors import InvalidConfig, InvalidInput
from LYRA.src.core.parsing import parse_trace_text
from LYRA.src.core.types import BinnedTrace, Trace

logger = logging.getLogger(__name__)

BIN_START = 899.9
BIN_STOP = 3500.0
BIN_RESOLUTION = 0.5
EPSILON = float(np.finfo(np.float64).eps)


def make_bin_edges(
    resolution: float = BIN_RESOLUTION, start: float = BIN_START, stop: float = BIN_STOP
) -> np.ndarray:
    """Edges from ``start`` (inclusive) to ``stop`` (exclusive) by repeated addition."""
    if not math.isfinite(resolution) or resolution <= 0:
        raise InvalidConfig(f"Bin resolution must be > 0, got {resolution!r}")
    if not (math.isfinite(start) and math.isfinite(stop)):
        raise InvalidConfig(f"Bin range must be finite, got [{start!r}, {stop!r})")

    edges: list[float] = []
    edge = float(start)
    while edge < stop:
        edges.append(edge)
        edge += resolution

    if len(edges) < 2:
        raise InvalidConfig(
            f"Bin range [{start}, {stop}) with resolution {resolution} yields fewer than 2 edges"
        )
    return np.asarray(edges, dtype=np.float64)


def bin_trace(
    masses: Sequence[float],
    intensities: Sequence[float],
    resolution: float = BIN_RESOLUTION,
    start: float = BIN_START,
    stop: float = BIN_STOP,
) -> BinnedTrace:
    """Mean intensity per mass bin.

    Samples below the first edge, at/after the last edge, or with non-finite
    values are dropped. Empty bins have a mean of 0.0.
    """
    edges = make_bin_edges(resolution, start, stop)
    n_bins = edges.size - 1

    mass_arr = np.asarray(masses, dtype=np.float64).ravel()
    inten_arr = np.asarray(intensities, dtype=np.float64).ravel()
    if mass_arr.size != inten_arr.size:
        raise InvalidInput(
            f"Got {mass_arr.size} masses but {inten_arr.size} intensities"
        )

    # First edge strictly greater than the mass; NaN sorts past the end.
    bin_idx = np.searchsorted(edges, mass_arr, side="right") - 1
    valid = (bin_idx >= 0) & (bin_idx < n_bins) & np.isfinite(inten_arr)

    # bincount accumulates left to right in input order.
    sums = np.bincount(bin_idx[valid], weights=inten_arr[valid], minlength=n_bins)
    counts = np.bincount(bin_idx[valid], minlength=n_bins)

    means = np.zeros(n_bins, dtype=np.float64)
    filled = counts > 0
    means[filled] = sums[filled] / counts[filled]

    midpoints = (edges[:-1] + edges[1:]) / 2.0

    dropped = mass_arr.size - int(np.count_nonzero(valid))
    if dropped:
        logger.debug("Dropped %d of %d samples outside the bin grid", dropped, mass_arr.size)

    return BinnedTrace(means, midpoints, counts)


def normalize(values: Sequence[float], epsilon: float = EPSILON) -> np.ndarray:
    """Standard score using the population standard deviation."""
    arr = np.asarray(values, dtype=np.float64).ravel()
    if arr.size == 0:
        raise InvalidInput("Cannot normalize an empty vector")
    if np.all(arr == arr[0]):
        # Constant input maps to exact zeros.
        return np.zeros_like(arr)
    mean = float(np.mean(arr))
    std = float(np.sqrt(np.mean((arr - mean) ** 2)))
    return (arr - mean) / (std + epsilon)


class Preprocessor:
    """Trace -> feature vector, using the bin grid from Config."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()

    def bin(self, trace: Trace) -> BinnedTrace:
        return bin_trace(
            trace.masses,
            trace.intensities,
            resolution=float(self.config.BIN_RESOLUTION),
            start=float(self.config.BIN_START),
            stop=float(self.config.BIN_STOP),
        )

    def preprocess_with_axis(self, trace: Trace) -> tuple[np.ndarray, np.ndarray]:
        """Return (features, bin_midpoints)."""
        if trace.size == 0:
            raise InvalidInput("Trace contains no numeric samples")
        binned = self.bin(trace)
        features = normalize(binned.means, float(self.config.NORMALIZE_EPSILON))
        logger.debug(
            "Preprocessed %d samples into %d features (%d bins populated)",
            trace.size,
            features.size,
            int(np.count_nonzero(binned.counts)),
        )
        return features, binned.midpoints

    def preprocess(self, trace: Trace) -> np.ndarray:
        features, _ = self.preprocess_with_axis(trace)
        return features


def preprocess(trace: Trace, config: Optional[Config] = None) -> np.ndarray:
    return Preprocessor(config).preprocess(trace)


def preprocess_with_axis(trace: Trace, config: Optional[Config] = None) -> tuple[np.ndarray, np.ndarray]:
    return Preprocessor(config).preprocess_with_axis(trace)


def preprocess_csv(text: str, config: Optional[Config] = None) -> np.ndarray:
    return preprocess(parse_trace_text(text), config)
