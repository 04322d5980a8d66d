"""
Operations package for the Mob Violence Incident Tracker

This package centralizes operational tools:
- Configuration management
- Logging setup
- CLI entry point (ops.run_pipeline)

The Config class is exposed at the package level for convenient imports:
    from ops import Config
"""

from .config_loader import Config
from .logging_setup import setup_logging

__all__ = ["Config", "setup_logging"]
