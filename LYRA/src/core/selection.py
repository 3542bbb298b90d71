"""Last-selection-wins bookkeeping for asynchronous scoring."""

from __future__ import annotations

import itertools
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class SelectionTracker:
    """Issues a token per trace selection; only the newest token is current."""

    def __init__(self):
        self._counter = itertools.count(1)
        self._current: Optional[int] = None
        self._label = ""

    def begin(self, label: str = "") -> int:
        token = next(self._counter)
        if self._current is not None:
            logger.debug("Selection %d (%s) superseded by %d (%s)", self._current, self._label, token, label)
        self._current = token
        self._label = label
        return token

    def clear(self) -> None:
        self._current = None
        self._label = ""

    def is_current(self, token: int) -> bool:
        return self._current is not None and token == self._current

    @property
    def current(self) -> Optional[int]:
        return self._current

    @property
    def label(self) -> str:
        return self._label
