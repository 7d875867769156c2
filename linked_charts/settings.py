from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "LINKED_CHARTS_"


@dataclass
class Settings:
    """
    Process-wide settings for dashboards built on linked_charts.

    Fields:

    - ui_title: title of the demo dashboard
    - default_group: chart group used when a chart is anchored without one
    - transition_duration: default transition length (ms) for new charts
    - min_width / min_height: default size floors for new charts
    - log_format: "json" or "plain"
    """

    ui_title: str = "Linked Charts"
    default_group: Optional[str] = None
    transition_duration: int = 750
    min_width: int = 200
    min_height: int = 200
    log_format: str = "json"

    def chart_defaults(self) -> Dict[str, Any]:
        """Keyword arguments for chart constructors (ChartConfig fields)."""
        return {
            "transition_duration": self.transition_duration,
            "min_width": self.min_width,
            "min_height": self.min_height,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Settings:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Ignoring unknown settings", extra={"keys": unknown})
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_env(cls, base: Optional[Settings] = None) -> Settings:
        """
        Overlay LINKED_CHARTS_<FIELD> environment variables on 'base' (or defaults).
        Integer fields are parsed as int.
        """
        settings = base or cls()
        values: Dict[str, Any] = {}
        for f in fields(cls):
            raw = os.getenv(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None:
                continue
            default = getattr(settings, f.name)
            values[f.name] = int(raw) if isinstance(default, int) else raw
        return cls(**{**settings.__dict__, **values})


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from an optional JSON file, then apply environment overrides.

    :param path: JSON file with any subset of the Settings fields
    :raises FileNotFoundError: if a path is given but does not exist
    """
    base = Settings()
    if path is not None:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"File not found at {path}")
        with path.open() as f:
            base = Settings.from_dict(json.load(f))
        logger.info("Loaded settings", extra={"settings_path": str(path)})
    return Settings.from_env(base)
