"""
Configuration Loader for the Turnout / Search Interest Pipeline

This module provides a centralized way to load and access configuration
settings from the config.yaml file.

Usage:
    from ops import Config

    config = Config()
    voter_csv = config.get_input_path('voter_csv')
    county_column = config.get_column_name('county')
    output_dir = config.get_output_dir('charts')
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml  # type: ignore[import-untyped]
from loguru import logger

from processing.turnout import (
    DEFAULT_COUNTY_COLUMN,
    DEFAULT_REGISTERED_COLUMN,
    DEFAULT_TURNED_OUT_COLUMN,
)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


class Config:
    """Configuration manager for the correlation pipeline."""

    # Default values that can be overridden in config
    DEFAULTS: Dict[str, Any] = {
        "columns": {
            "county": DEFAULT_COUNTY_COLUMN,
            "registered": DEFAULT_REGISTERED_COLUMN,
            "turned_out": DEFAULT_TURNED_OUT_COLUMN,
        },
        "directories": {"data": "data", "output": "output", "charts": "output/charts"},
        "visualization": {
            "dpi": 150,
            "figure_width": 10,
            "figure_height": 7,
            "default_candidate": "victor_ponta",
            "strength_threshold": 0.2,
            "turnout_domain": [15, 35],
            "interest_domain": [0, 70],
        },
        "system": {"request_timeout": 30},
    }

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to config file. If None, looks for:
                        1. Environment variable PIPELINE_CONFIG_PATH
                        2. config.yaml in current directory
                        3. ops/config.yaml next to this module
            overrides: Dot-notation overrides applied on top of the file
        """
        if config_file is None:
            env_config = os.environ.get("PIPELINE_CONFIG_PATH")
            if env_config and Path(env_config).exists():
                config_file = env_config
                logger.debug(f"Using config from environment: {config_file}")
            elif Path("config.yaml").exists():
                config_file = "config.yaml"
            elif DEFAULT_CONFIG_PATH.exists():
                config_file = DEFAULT_CONFIG_PATH
                logger.debug("Using ops/config.yaml")
            else:
                raise FileNotFoundError(
                    "No config.yaml found. Check current directory or set PIPELINE_CONFIG_PATH"
                )

        self.config_path = Path(config_file).resolve()
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        self.project_root = self._find_project_root()

        logger.debug(f"Loading config from: {self.config_path}")
        logger.debug(f"Project root: {self.project_root}")

        with open(self.config_path, "r", encoding="utf-8") as f:
            self.data: Dict[str, Any] = yaml.safe_load(f) or {}

        for key, value in (overrides or {}).items():
            self.set(key, value)

    def set(self, key_path: str, value: Any) -> None:
        """Set a configuration value using dot notation."""
        keys = key_path.split(".")
        current = self.data
        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[keys[-1]] = value
        logger.debug(f"Config override: {key_path} = {value}")

    def get(self, key_path: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation with intelligent defaults.

        Args:
            key_path: Dot-separated path to the configuration value
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key_path.split(".")

        value: Any = self.data
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                value = None
                break

        if value is None:
            value = self.DEFAULTS
            for key in keys:
                if isinstance(value, dict) and key in value:
                    value = value[key]
                else:
                    return default
            value = copy.deepcopy(value)

        return value

    def get_input_path(self, filename_key: str) -> Union[Path, str]:
        """
        Get an input source. URLs are returned unchanged, file paths are
        joined with the project root.

        Args:
            filename_key: Key for the source in input_files
        """
        relative = self.data.get("input_files", {}).get(filename_key)
        if not relative:
            raise ValueError(f"Input file '{filename_key}' not found in config: input_files")

        relative = str(relative)
        if relative.startswith(("http://", "https://")):
            return relative
        path = Path(relative)
        if path.is_absolute():
            return path
        return self.project_root / path

    def get_column_name(self, column_key: str) -> str:
        """Get column name with intelligent defaults."""
        result = self.get(f"columns.{column_key}")
        if isinstance(result, str):
            return result
        raise ValueError(f"Column name not found or not a string: {column_key}")

    def get_columns(self) -> Dict[str, str]:
        """Voter-roll header names keyed by role."""
        return {key: self.get_column_name(key) for key in self.DEFAULTS["columns"]}

    def get_visualization_setting(self, setting_key: str) -> Any:
        return self.get(f"visualization.{setting_key}")

    def get_system_setting(self, setting_key: str) -> Any:
        return self.get(f"system.{setting_key}")

    def get_output_dir(self, dir_key: str) -> Path:
        """
        Get full path to an output directory.

        Args:
            dir_key: Directory key ('data', 'output' or 'charts')
        """
        relative = self.get(f"directories.{dir_key}")
        if not relative:
            raise ValueError(f"Unknown directory key: {dir_key}")
        return self.project_root / str(relative)

    def validate_input_files(self) -> Dict[str, bool]:
        """Check that local input files exist; URLs are assumed reachable."""
        results: Dict[str, bool] = {}
        for filename_key in self.data.get("input_files", {}):
            source = self.get_input_path(filename_key)
            results[filename_key] = isinstance(source, str) or source.exists()
        return results

    def print_config_summary(self) -> None:
        """Print a summary of the current configuration."""
        logger.debug("📋 Configuration Summary")
        logger.debug("=" * 50)
        logger.debug(f"Project: {self.get('project_name', 'Unknown')}")
        logger.debug(f"Description: {self.get('description', 'No description')}")
        logger.debug(f"Config file: {self.config_path}")

        logger.debug("📊 Input Files:")
        for file_key, exists in self.validate_input_files().items():
            status = "✅" if exists else "❌"
            logger.debug(f"  {status} {file_key}")

    def _find_project_root(self) -> Path:
        """Find the project root directory by looking for characteristic files/directories."""
        current = self.config_path.parent

        project_markers = ["processing", "ops", "data", "pyproject.toml", ".git"]

        for _ in range(5):
            markers_found = sum(1 for marker in project_markers if (current / marker).exists())
            if markers_found >= 2:
                return current

            parent = current.parent
            if parent == current:
                break
            current = parent

        # Fallback: if config is in ops/, project root is parent
        if self.config_path.parent.name == "ops":
            return self.config_path.parent.parent

        logger.warning(
            f"Could not reliably detect project root, using config directory: {self.config_path.parent}"
        )
        return self.config_path.parent


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Config:
    """Load configuration from file."""
    return Config(config_file, overrides=overrides)
