"""Save ranked results as CSV and the annotated trace as PNG."""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import matplotlib
import matplotlib.pyplot as plt

from LYRA.src.core.overlay import OverlayState
from LYRA.src.core.types import CandidateResult, Trace

matplotlib.use("Agg")

logger = logging.getLogger(__name__)


def default_export_dir() -> Path:
    project_root = Path(__file__).resolve().parents[2]
    return project_root / "exports"


def write_results_csv(results: Sequence[CandidateResult], csv_path: Path, decimals: int = 4) -> Path:
    with Path(csv_path).open("w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Rank", "Id", "Name", "Score", "Peaks"])
        for rank, res in enumerate(results, start=1):
            peaks = " ".join(f"{p:.4f}" for p in res.peaks)
            writer.writerow([rank, res.id, res.name, f"{res.score:.{decimals}f}", peaks])
    return Path(csv_path)


def render_overlay_png(trace: Trace, overlay: OverlayState, png_path: Path, title: str = "") -> Path:
    fig, ax = plt.subplots(figsize=(12, 6))
    ax.plot(trace.masses, trace.intensities, "-", color="#1f77b4", lw=1.0, label="Trace")

    labelled = set()
    for index, res in enumerate(overlay.results):
        lines = overlay.registry.get(res.id)
        if not lines or res.id in labelled:
            continue
        labelled.add(res.id)
        for i, shape in enumerate(lines):
            ax.axvline(
                shape.x0,
                color=shape.color,
                lw=shape.width,
                label=f"{index + 1}. {res.name}" if i == 0 else None,
            )

    ax.set_title(title or "Mass spectrometry data")
    ax.set_xlabel("Mass")
    ax.set_ylabel("Intensity")
    ax.grid(True, linestyle="-", alpha=0.4)
    ax.legend(loc="upper right")

    plt.tight_layout()
    plt.savefig(png_path)
    plt.close(fig)
    return Path(png_path)


def export_results(
    results: Sequence[CandidateResult],
    overlay: OverlayState,
    trace: Trace,
    out_dir: Optional[Path] = None,
    title: str = "",
    decimals: int = 4,
) -> tuple[Path, Path]:
    """Write ``results_<ts>.csv`` and ``overlay_<ts>.png``; return both paths."""
    out_dir = Path(out_dir) if out_dir else default_export_dir()
    out_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    csv_path = write_results_csv(results, out_dir / f"results_{timestamp}.csv", decimals)
    png_path = render_overlay_png(trace, overlay, out_dir / f"overlay_{timestamp}.png", title)
    logger.info("Exported %d results to %s", len(results), csv_path)
    return csv_path, png_path
