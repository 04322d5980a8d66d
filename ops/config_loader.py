"""
Configuration Loader for the Mob Violence Incident Tracker

This module provides a centralized way to load and access configuration
settings from the config.yaml file.

Usage:
    from ops.config_loader import Config

    config = Config()
    candidates = config.get_source_candidates('incidents')
    page_size = config.get('table.page_size')
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml  # type: ignore[import-untyped]
from loguru import logger

PACKAGED_CONFIG = Path(__file__).parent / "config.yaml"


class Config:
    """Configuration manager for the incident tracker."""

    # Default values that can be overridden in config
    DEFAULTS: Dict[str, Any] = {
        "project_name": "Mob Violence Incident Tracker",
        "description": "Recorded incidents of mob violence by district and year",
        "sources": {
            "incidents": [
                "data/mob_violence_cleaned.csv",
                "data/mob_violence_cleaned",
                "./data/mob_violence_cleaned.csv",
                "./data/mob_violence_cleaned",
            ],
            "boundaries": [
                "data/bangladesh_districts.geojson",
                "./data/bangladesh_districts.geojson",
            ],
            "timeout": 10,
        },
        "table": {"page_size": 10, "year_filters": ["all", "2023", "2025"]},
        "geo": {
            "aliases": {},
            "name_keys": ["district", "District", "DISTRICT", "ADM2_EN", "NAME_2", "shapeName", "name", "NAME"],
        },
        "map": {
            "thresholds": None,
            "palette": ["#fee5d9", "#fcae91", "#fb6a4a", "#de2d26", "#a50f15"],
            "no_data_color": "#d9d9d9",
            "max_count": 20,
            "tiles": "CartoDB Positron",
            "zoom_start": 7,
            "default_year": "2025",
        },
        "summary": {"baseline": 38, "total": 139},
        "output": {"dir": "html"},
    }

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        project_root_override: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize configuration manager.

        Args:
            config_file: Path to config file. If None, looks for:
                        1. Environment variable TRACKER_CONFIG_PATH
                        2. config.yaml in current directory
                        3. the packaged ops/config.yaml
            project_root_override: Override project root detection (useful for temp configs)
        """
        if config_file is None:
            env_config = os.environ.get("TRACKER_CONFIG_PATH")
            if env_config and Path(env_config).exists():
                config_file = env_config
                logger.debug(f"Using config from environment: {config_file}")
            elif Path("config.yaml").exists():
                config_file = "config.yaml"
            else:
                config_file = PACKAGED_CONFIG
                logger.debug("Using packaged ops/config.yaml")
        elif not Path(config_file).exists():
            raise FileNotFoundError(f"Config file not found: {config_file}")

        self.config_path = Path(config_file).resolve()

        if project_root_override:
            self.project_root = Path(project_root_override).resolve()
            logger.debug(f"Using project root override: {self.project_root}")
        elif os.environ.get("PROJECT_ROOT_OVERRIDE"):
            self.project_root = Path(os.environ["PROJECT_ROOT_OVERRIDE"]).resolve()
            logger.debug(f"Using project root from environment: {self.project_root}")
        else:
            self.project_root = self._find_project_root()

        logger.debug(f"Loading config from: {self.config_path}")
        logger.debug(f"Project root: {self.project_root}")

        with open(self.config_path, "r", encoding="utf-8") as f:
            self.data = yaml.safe_load(f) or {}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], project_root: Optional[Union[str, Path]] = None
    ) -> "Config":
        """Build a config from an in-memory mapping instead of a YAML file."""
        config = cls.__new__(cls)
        config.config_path = None
        config.project_root = Path(project_root or Path.cwd()).resolve()
        config.data = copy.deepcopy(data)
        return config

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

        return value

    def set_override(self, key_path: str, value: Any) -> None:
        """Set a value using dot notation, creating intermediate sections."""
        keys = key_path.split(".")
        current = self.data
        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[keys[-1]] = value
        logger.debug(f"Added override: {key_path} = {value}")

    def get_source_candidates(self, source_key: str) -> List[str]:
        """Ordered candidate locations for an input resource."""
        candidates = self.get(f"sources.{source_key}")
        if isinstance(candidates, str):
            return [candidates]
        if not candidates:
            raise ValueError(f"No candidate locations configured for source '{source_key}'")
        return [str(c) for c in candidates]

    def get_page_size(self) -> int:
        """Get table page size, which must be a positive integer."""
        page_size = int(self.get("table.page_size"))
        if page_size < 1:
            raise ValueError(f"table.page_size must be positive, got {page_size}")
        return page_size

    def get_year_filters(self) -> List[str]:
        """Closed set of table filters; 'all' is always present."""
        filters = [str(f).strip() for f in self.get("table.year_filters")]
        if "all" not in filters:
            filters.insert(0, "all")
        return filters

    def get_output_dir(self) -> Path:
        """Get the output directory, creating it if needed."""
        output_dir = self.project_root / self.get("output.dir")
        output_dir.mkdir(parents=True, exist_ok=True)
        return output_dir

    def print_config_summary(self) -> None:
        """Log a summary of the current configuration."""
        logger.debug("📋 Configuration Summary")
        logger.debug("=" * 50)
        logger.debug(f"Project: {self.get('project_name', 'Unknown')}")
        logger.debug(f"Description: {self.get('description', 'No description')}")
        logger.debug(f"Config file: {self.config_path}")
        logger.debug(f"Project root: {self.project_root}")
        for key in ("incidents", "boundaries"):
            logger.debug(f"  {key}: {self.get_source_candidates(key)}")

    def _find_project_root(self) -> Path:
        """Find the project root directory by looking for characteristic files/directories."""
        # The packaged config lives in ops/, so the project is one level up
        if self.config_path.parent.name == "ops":
            return self.config_path.parent.parent

        current = self.config_path.parent
        project_markers = ["data", "ops", "pyproject.toml", ".git"]

        for _ in range(5):
            markers_found = sum(1 for marker in project_markers if (current / marker).exists())
            if markers_found >= 2:
                return current

            parent = current.parent
            if parent == current:
                break
            current = parent

        logger.warning(
            f"Could not reliably detect project root, using config directory: {self.config_path.parent}"
        )
        return self.config_path.parent


def load_config(config_file: Optional[str] = None) -> Config:
    """
    Load configuration from file.

    Args:
        config_file: Path to configuration file

    Returns:
        Config instance
    """
    return Config(config_file)
