"""Configuration management for the force structure planner.

This module centralizes all configuration values including the template
path, allocation constants, display defaults and environment variable
overrides.
"""

from __future__ import annotations

import logging
import os
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

# Base package directory - assumes this file is in force_planner/
_PACKAGE_ROOT = Path(__file__).parent.resolve()

# Templates
TEMPLATES_DIR = _PACKAGE_ROOT / "templates"
TEMPLATE_PATH = Path(
    os.getenv("FORCE_PLANNER_TEMPLATE", TEMPLATES_DIR / "force_structure.json")
).resolve()

# Allocation limits
MAX_TOTAL_BUDGET = Decimal("1e12")  # $1 Trillion
MAX_CUSTOM_GROUPS = 50
MIN_ITEMS_PER_GROUP = 1
MAX_ITEMS_PER_GROUP = 20
DEFAULT_ITEMS_PER_GROUP = 10

# New item defaults
DEFAULT_UNIT_COST = Decimal("1000000")  # $1,000,000
DEFAULT_ITEM_MAX = Decimal("100e9")

CUSTOM_GROUP_PREFIX = "custom_group"

# Session defaults
DEFAULT_BUDGET_LIMIT = os.getenv("FORCE_PLANNER_BUDGET_LIMIT", "143e9")
DEFAULT_SCALE = os.getenv("FORCE_PLANNER_SCALE", "Billions")

LOG_LEVEL = os.getenv("FORCE_PLANNER_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_logging_configured = False


def configure_logging(level: Optional[Union[str, int]] = None) -> None:
    """Install a single stream handler for the planner's loggers.

    Repeated calls are ignored so Streamlit reruns don't stack handlers.
    """
    global _logging_configured
    if _logging_configured:
        return
    resolved = level if level is not None else LOG_LEVEL
    if isinstance(resolved, str):
        resolved = logging.getLevelName(resolved.upper())
        if not isinstance(resolved, int):
            resolved = logging.WARNING
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    _logging_configured = True
