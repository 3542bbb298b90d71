"""CSV trace reader: header line, then ``mass,intensity`` rows."""

from __future__ import annotations

import logging
import math
from pathlib import Path

import numpy as np

from LYRA.src.core.types import ParseSkip, Trace

logger = logging.getLogger(__name__)


def _parse_field(text: str) -> float:
    val = float(text.strip())
    if not math.isfinite(val):
        raise ValueError(f"non-finite value {text.strip()!r}")
    return val


def parse_trace_text(text: str) -> Trace:
    """Parse CSV text into a Trace.

    The first line is a header and is discarded. Blank lines are ignored.
    Rows that do not yield two finite numbers are recorded as ParseSkip and
    excluded.
    """
    masses: list[float] = []
    intensities: list[float] = []
    skipped: list[ParseSkip] = []

    lines = text.splitlines()
    for line_number, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue

        parts = line.split(",")
        if len(parts) < 2:
            skipped.append(ParseSkip(line_number, line, "expected 2 columns"))
            continue

        try:
            mass = _parse_field(parts[0])
            intensity = _parse_field(parts[1])
        except ValueError as exc:
            skipped.append(ParseSkip(line_number, line, str(exc)))
            continue

        masses.append(mass)
        intensities.append(intensity)

    for skip in skipped:
        logger.debug("Skipped line %d (%s): %r", skip.line_number, skip.reason, skip.text)
    if skipped:
        logger.info("Parsed %d rows, skipped %d malformed rows", len(masses), len(skipped))

    return Trace(
        np.asarray(masses, dtype=np.float64),
        np.asarray(intensities, dtype=np.float64),
        tuple(skipped),
    )


def read_trace(path: Path) -> Trace:
    path = Path(path)
    logger.info("Reading trace: %s", path)
    return parse_trace_text(path.read_text(encoding="utf-8", errors="replace"))
