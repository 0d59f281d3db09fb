"""
Core module initialization.
Exports configuration and logging utilities.
"""

from pickup_ordering.core.config import (
    EnvironmentMode,
    Settings,
    get_settings,
    setup_logging,
)

__all__ = ["get_settings", "setup_logging", "Settings", "EnvironmentMode"]
