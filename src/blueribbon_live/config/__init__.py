"""Configuration package for BlueRibbon Live.

Re-exports the settings symbols so that callers can write::

    from blueribbon_live.config import get_settings
"""

from __future__ import annotations

from blueribbon_live.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
