"""Scoring service boundary: HTTP client and an offline mock."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from numbers import Real
from typing import Any, Optional, Sequence

import numpy as np
import requests

from LYRA.config import Config
from LYRA.src.core.errors import ScoringUnavailable
from LYRA.src.core.processing import bin_trace, normalize
from LYRA.src.core.types import CandidateResult

logger = logging.getLogger(__name__)


def _as_float(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise ScoringUnavailable(f"Malformed response: {what} is not a number ({value!r})")
    return float(value)


def parse_candidates(payload: Any) -> list[CandidateResult]:
    """Validate a decoded response body; service order is kept as-is."""
    if not isinstance(payload, list):
        raise ScoringUnavailable(
            f"Malformed response: expected a list, got {type(payload).__name__}"
        )

    results: list[CandidateResult] = []
    for i, item in enumerate(payload):
        if not isinstance(item, dict):
            raise ScoringUnavailable(f"Malformed response: entry {i} is not an object")
        missing = [k for k in ("id", "name", "score", "peaks") if k not in item]
        if missing:
            raise ScoringUnavailable(f"Malformed response: entry {i} missing {', '.join(missing)}")

        peaks = item["peaks"]
        if not isinstance(peaks, list):
            raise ScoringUnavailable(f"Malformed response: entry {i} peaks is not a list")

        results.append(
            CandidateResult(
                id=item["id"],
                name=str(item["name"]),
                score=_as_float(item["score"], f"entry {i} score"),
                peaks=tuple(_as_float(p, f"entry {i} peak") for p in peaks),
            )
        )
    return results


class ScoringService(ABC):
    @abstractmethod
    def score(self, features: Sequence[float]) -> list[CandidateResult]: pass


class ScoringClient(ScoringService):
    """Single POST of ``{"data": [...]}`` to the model endpoint. No retries."""

    def __init__(
        self,
        config: Optional[Config] = None,
        session: Optional[requests.Session] = None,
        url: Optional[str] = None,
    ):
        self.config = config or Config()
        self.session = session
        # Session-only endpoint; never written back to the config.
        self.url_override = url

    @property
    def url(self) -> str:
        return self.url_override or self.config.SCORING_URL

    def score(self, features: Sequence[float]) -> list[CandidateResult]:
        data = [float(v) for v in np.asarray(features, dtype=np.float64).ravel()]
        post = self.session.post if self.session is not None else requests.post

        logger.info("Scoring %d features at %s", len(data), self.url)
        try:
            response = post(
                self.url,
                json={"data": data},
                timeout=float(self.config.SCORING_TIMEOUT_S),
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Scoring request failed: %s", exc)
            raise ScoringUnavailable(f"Scoring service unavailable: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ScoringUnavailable("Malformed response: body is not JSON") from exc

        results = parse_candidates(payload)
        logger.info("Scoring returned %d candidates", len(results))
        return results


# Reference library for offline runs: (id, name, peak masses).
MOCK_LIBRARY: tuple[tuple[str, str, tuple[float, ...]], ...] = (
    ("ref-001", "Angiotensin II", (1046.54, 1047.55, 1048.55)),
    ("ref-002", "Substance P", (1347.74, 1348.74, 1349.75)),
    ("ref-003", "Bombesin", (1619.82, 1620.82, 1621.83)),
    ("ref-004", "ACTH clip 1-17", (2093.09, 2094.09, 2095.09)),
    ("ref-005", "ACTH clip 18-39", (2465.20, 2466.20, 2467.20)),
    ("ref-006", "Somatostatin 28", (3147.47, 3148.47)),
    ("ref-007", "Glu-Fibrinopeptide B", (1570.68, 1571.68, 1572.68)),
    ("ref-008", "Renin substrate", (1759.94, 1760.94, 1761.95)),
)


class MockScoringService(ScoringService):
    """Ranks the reference library by cosine similarity of binned peak profiles."""

    def __init__(self, config: Optional[Config] = None, top_n: int = 5):
        self.config = config or Config()
        self.top_n = top_n

    def _reference_vector(self, peaks: Sequence[float], n_features: int) -> np.ndarray:
        binned = bin_trace(
            peaks,
            np.ones(len(peaks)),
            resolution=float(self.config.BIN_RESOLUTION),
            start=float(self.config.BIN_START),
            stop=float(self.config.BIN_STOP),
        )
        vec = normalize(binned.means, float(self.config.NORMALIZE_EPSILON))
        if vec.size != n_features:
            raise ScoringUnavailable(
                f"Feature length {n_features} does not match the bin grid ({vec.size})"
            )
        return vec

    def score(self, features: Sequence[float]) -> list[CandidateResult]:
        query = np.asarray(features, dtype=np.float64).ravel()
        if query.size == 0:
            raise ScoringUnavailable("Empty feature vector")

        q_norm = float(np.linalg.norm(query))
        scored = []
        for ref_id, name, peaks in MOCK_LIBRARY:
            ref = self._reference_vector(peaks, query.size)
            denom = q_norm * float(np.linalg.norm(ref))
            sim = float(np.dot(query, ref) / denom) if denom > 0 else 0.0
            if not math.isfinite(sim):
                sim = 0.0
            scored.append(CandidateResult(ref_id, name, sim, peaks))

        scored.sort(key=lambda c: c.score, reverse=True)
        return scored[: self.top_n]
