from __future__ import annotations

import logging
import os
from typing import Optional, Union

from pythonjsonlogger.json import JsonFormatter

LOG_FORMAT_ENV = "LINKED_CHARTS_LOG_FORMAT"
LOG_LEVEL_ENV = "LINKED_CHARTS_LOG_LEVEL"

LOG_FORMATS = ("json", "plain")


def _build_formatter(format_mode: str) -> logging.Formatter:
    if format_mode == "plain":
        return logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    # 'extra={...}' fields of log calls become top-level JSON keys
    return JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"levelname": "level"},
    )


def configure_logging(
        level: Union[int, str, None] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Install a single root handler for dashboards built on linked_charts.

    Format selection:
        1) force_format argument ("json" or "plain") if provided
        2) env var LINKED_CHARTS_LOG_FORMAT
        3) default = "json"

    Level selection: the 'level' argument, else LINKED_CHARTS_LOG_LEVEL, else INFO.

    :raises ValueError: on an unknown format name
    """
    format_mode = (force_format or os.getenv(LOG_FORMAT_ENV, "json")).lower()
    if format_mode not in LOG_FORMATS:
        raise ValueError(f"Unknown log format {format_mode!r}, expected one of {LOG_FORMATS}")

    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO").upper()

    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.setFormatter(_build_formatter(format_mode))

    # Replace any existing handlers to avoid duplicate logs
    root.handlers.clear()
    root.addHandler(handler)
