"""Background worker thread for scoring requests."""

from __future__ import annotations

import logging
import queue
from typing import Any

import numpy as np
from PyQt5 import QtCore

from LYRA.src.core.errors import ScoringUnavailable
from LYRA.src.core.scoring import ScoringService

logger = logging.getLogger(__name__)


class WorkerState:
    IDLE = "IDLE"
    SCORING = "SCORING"
    STOPPING = "STOPPING"
    ERROR = "ERROR"


class ScoringWorker(QtCore.QThread):
    results_ready = QtCore.pyqtSignal(int, object)
    scoring_failed = QtCore.pyqtSignal(int, str)
    status_msg = QtCore.pyqtSignal(str)
    state_changed = QtCore.pyqtSignal(str)

    def __init__(self, service: ScoringService):
        super().__init__()
        self.service = service
        self.running = True
        self.state = WorkerState.IDLE

        self.command_queue: queue.Queue[tuple[str, Any]] = queue.Queue()
        self.state_changed.emit(self.state)

    def _set_state(self, state: str) -> None:
        if self.state != state:
            self.state = state
            self.state_changed.emit(state)

    def _drop_pending_scores(self) -> int:
        with self.command_queue.mutex:
            kept = [cmd for cmd in self.command_queue.queue if cmd[0] != "SCORE"]
            dropped = len(self.command_queue.queue) - len(kept)
            self.command_queue.queue.clear()
            self.command_queue.queue.extend(kept)
        return dropped

    def submit(self, token: int, features: np.ndarray) -> None:
        """Queue a scoring request; requests still waiting in the queue are superseded."""
        dropped = self._drop_pending_scores()
        if dropped:
            logger.debug("Dropped %d superseded scoring request(s) before %d", dropped, token)
        self.command_queue.put(("SCORE", (token, np.array(features, dtype=np.float64, copy=True))))

    def stop(self) -> None:
        self.running = False
        self._set_state(WorkerState.STOPPING)
        self.command_queue.put(("STOP", None))
        self.wait()

    def run(self) -> None:
        while self.running:
            try:
                cmd, val = self.command_queue.get(timeout=0.1)
            except queue.Empty:
                continue

            if cmd == "STOP":
                break
            if cmd == "SCORE":
                token, features = val
                self._handle_score(token, features)

    def _handle_score(self, token: int, features: np.ndarray) -> None:
        self._set_state(WorkerState.SCORING)
        self.status_msg.emit("Running model...")
        try:
            results = self.service.score(features)
        except ScoringUnavailable as exc:
            self._set_state(WorkerState.ERROR)
            self.scoring_failed.emit(token, str(exc))
        except Exception:
            self._set_state(WorkerState.ERROR)
            logger.exception("Scoring worker crashed")
            self.scoring_failed.emit(token, "Scoring failed. Check logs for details.")
        else:
            self.results_ready.emit(token, results)
            self.status_msg.emit(f"Model returned {len(results)} candidates")
            # ERROR stays visible until the next SCORE command.
            if self.running:
                self._set_state(WorkerState.IDLE)
