"""Peak-marker overlay state for the currently displayed result list."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, NamedTuple, Optional, Sequence

from LYRA.src.core.types import CandidateResult, LineShape

PEAK_COLORS = (
    "#ff7f0e", "#2ca02c", "#d62728", "#9467bd",
    "#8c564b", "#e377c2", "#7f7f7f", "#bcbd22", "#17becf",
)
PEAK_LINE_WIDTH = 1.0


def color_of(index: int) -> str:
    return PEAK_COLORS[index % len(PEAK_COLORS)]


def peak_shapes(peaks: Sequence[float], color: str) -> tuple[LineShape, ...]:
    """Full-height vertical markers, one per peak mass."""
    return tuple(
        LineShape(x0=float(p), x1=float(p), y0=0.0, y1=1.0, yref="paper", color=color, width=PEAK_LINE_WIDTH)
        for p in peaks
    )


class OverlayUpdate(NamedTuple):
    """Outcome of a toggle: ``shapes`` is the full replacement list for the plot."""

    candidate_id: Any
    shown: bool
    color: Optional[str]
    shapes: tuple[LineShape, ...]


@dataclass(frozen=True)
class OverlayState:
    """Immutable overlay registry bound to one ranked result list.

    ``registry`` maps candidate id -> shapes currently drawn. A key is present
    iff that candidate's markers are visible.
    """

    results: tuple[CandidateResult, ...] = ()
    registry: Mapping[Any, tuple[LineShape, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def for_results(cls, results: Sequence[CandidateResult]) -> "OverlayState":
        return cls(tuple(results), MappingProxyType({}))

    def is_shown(self, candidate_id: Any) -> bool:
        return candidate_id in self.registry

    @property
    def shown_ids(self) -> tuple[Any, ...]:
        return tuple(self.registry)

    def shapes(self) -> tuple[LineShape, ...]:
        """Concatenation of each shown candidate's shapes in registry order."""
        out: list[LineShape] = []
        for lines in self.registry.values():
            out.extend(lines)
        return tuple(out)

    def toggle(self, index: int) -> tuple["OverlayState", OverlayUpdate]:
        """Show or hide the markers of the candidate at ``index`` in ``results``."""
        if not 0 <= index < len(self.results):
            raise IndexError(f"No candidate at position {index} (have {len(self.results)})")

        candidate = self.results[index]
        registry = dict(self.registry)

        if candidate.id in registry:
            del registry[candidate.id]
            shown = False
            color = None
        else:
            color = color_of(index)
            registry[candidate.id] = peak_shapes(candidate.peaks, color)
            shown = True

        new_state = OverlayState(self.results, MappingProxyType(registry))
        return new_state, OverlayUpdate(candidate.id, shown, color, new_state.shapes())
