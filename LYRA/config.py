"""Application configuration with simple JSON persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class Config:
    # Bin grid
    BIN_START: float = 899.9
    BIN_STOP: float = 3500.0
    BIN_RESOLUTION: float = 0.5

    # Normalization
    NORMALIZE_EPSILON: float = 2.220446049250313e-16

    # Scoring service
    SCORING_URL: str = "http://127.0.0.1:5000/run_model"
    SCORING_TIMEOUT_S: float = 30.0

    # Display / export
    SCORE_DECIMALS: int = 4
    EXPORT_DIR: str = ""
    LAST_DIRECTORY: str = ""

    @staticmethod
    def default_path() -> Path:
        return Path.home() / ".lyra_config.json"

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        cfg = cls()
        cfg_path = path or cls.default_path()
        if not cfg_path.exists():
            return cfg

        try:
            data = json.loads(cfg_path.read_text())
        except Exception:
            logger.exception("Failed to read config file: %s", cfg_path)
            return cfg

        for f in fields(cfg):
            if f.name not in data:
                continue
            raw = data[f.name]
            try:
                if f.type in (bool, "bool"):
                    val = bool(raw)
                elif f.type in (int, "int"):
                    val = int(raw)
                elif f.type in (float, "float"):
                    val = float(raw)
                else:
                    val = str(raw)
                setattr(cfg, f.name, val)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid config value for %s", f.name)

        cfg.normalize()
        return cfg

    def save(self, path: Optional[Path] = None) -> None:
        cfg_path = path or self.default_path()
        cfg_path.write_text(json.dumps(asdict(self), indent=2, sort_keys=True))

    def normalize(self) -> None:
        if self.BIN_START > self.BIN_STOP:
            self.BIN_START, self.BIN_STOP = self.BIN_STOP, self.BIN_START
        if self.SCORING_TIMEOUT_S <= 0:
            self.SCORING_TIMEOUT_S = 30.0
        self.SCORE_DECIMALS = max(0, min(10, int(self.SCORE_DECIMALS)))
