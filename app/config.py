"""
Runtime configuration read from the environment.
"""

import logging
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    source_path: str = "tiles.csv"
    title: str = "Dashboard"
    log_level: str = "INFO"


def _log_level(value: str) -> str:
    level = value.upper()
    # getLevelName maps unknown names to "Level <name>"
    if isinstance(logging.getLevelName(level), int):
        return level
    return Settings.log_level


def get_settings() -> Settings:
    """Read settings fresh on every call; nothing is cached between requests."""
    return Settings(
        source_path=os.getenv("TILES_SOURCE") or Settings.source_path,
        title=os.getenv("DASHBOARD_TITLE") or Settings.title,
        log_level=_log_level(os.getenv("TILES_LOG_LEVEL") or Settings.log_level),
    )
