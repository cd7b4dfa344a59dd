"""
Configuration management for staadmesh.

Loads plan defaults, export settings and material constants from JSON files.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "data" / "staad_defaults.json"


class Config:
    """Configuration manager for geometry defaults, export settings and material."""

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_path: Path to JSON config file. If None, uses the bundled defaults.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        if not self.config_path.exists():
            raise FileNotFoundError(f"Config file not found: {self.config_path}")

        with open(self.config_path, 'r') as f:
            self._config = json.load(f)

        logger.info(f"Loaded config: {self._config.get('name', 'Unknown')}")

    @property
    def name(self) -> str:
        return self._config.get("name", "Unknown")

    def get_geometry_default(self, param_name: str, default: Any = None) -> Any:
        """
        Get a plan geometry default.

        Args:
            param_name: Parameter name ('length', 'mesh', 'orientation', ...)
            default: Default value if not found

        Returns:
            Parameter value or default
        """
        return self._config.get("geometry_defaults", {}).get(param_name, default)

    def get_pedestal_default(self, param_name: str, default: Any = None) -> Any:
        """Get a default pedestal footprint dimension ('length' or 'width')."""
        return self._config.get("pedestal_defaults", {}).get(param_name, default)

    def get_export_setting(self, setting_name: str, default: Any = None) -> Any:
        """
        Get a STAAD export setting.

        Args:
            setting_name: Setting name ('line_limit', 'file_name', ...)
            default: Default value if not found

        Returns:
            Setting value or default
        """
        return self._config.get("export", {}).get(setting_name, default)

    def get_material(self) -> Dict[str, Any]:
        """Get the isotropic material definition written with members."""
        return dict(self._config.get("material", {}))


# Global default config instance
_default_config: Optional[Config] = None


def get_default_config() -> Config:
    """Get the default global configuration instance."""
    global _default_config
    if _default_config is None:
        _default_config = Config()
    return _default_config


def load_config(config_path: str) -> Config:
    """
    Load configuration from a specific file.

    Args:
        config_path: Path to JSON config file

    Returns:
        Config instance
    """
    return Config(config_path)
