"""
Operations package for the Turnout / Search Interest Pipeline

This package centralizes the operational tools:
- Configuration management
- Pipeline orchestration (CLI)

The Config class is exposed at the package level for convenient imports:
    from ops import Config
"""

from .config_loader import Config, load_config

__all__ = ["Config", "load_config"]
