"""YAML Configuration Loader for Synduct Insights.

Loads and caches configuration from YAML files with fallback to defaults.
"""

from pathlib import Path
from typing import Any, Dict, Optional
from dataclasses import dataclass, field
from functools import lru_cache
import yaml

# Get config directory
CONFIG_DIR = Path(__file__).parent


class ConfigurationError(Exception):
    """Raised when configuration loading or access fails."""

    pass


def _load_yaml_file(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of YAML file in config directory

    Returns:
        Parsed YAML content as dictionary

    Raises:
        ConfigurationError: If file cannot be loaded
    """
    filepath = CONFIG_DIR / filename
    if not filepath.exists():
        raise ConfigurationError(f"Configuration file not found: {filepath}")

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Error parsing {filename}: {e}")
    except IOError as e:
        raise ConfigurationError(f"Error reading {filename}: {e}")


@lru_cache(maxsize=1)
def load_presets() -> Dict[str, Any]:
    """Load presets.yaml configuration."""
    try:
        return _load_yaml_file("presets.yaml")
    except ConfigurationError:
        return {
            "presets": {
                "all-data": {
                    "name": "All Data",
                    "description": "No filters applied",
                    "category": "General",
                    "filters": {},
                    "is_default": True,
                }
            }
        }


def clear_config_cache() -> None:
    """Clear all cached configuration data."""
    load_presets.cache_clear()


@dataclass
class FilterPresets:
    """Filter preset configuration accessor."""

    _data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        presets = load_presets()
        self._data = presets.get("presets", {})

    def get_preset(self, key: str) -> Optional[Dict[str, Any]]:
        """Get a specific preset by key."""
        return self._data.get(key)

    def get_all_presets(self) -> Dict[str, Dict[str, Any]]:
        """Get all presets."""
        return self._data


_filter_presets: Optional[FilterPresets] = None


def get_filter_presets() -> FilterPresets:
    """Get filter presets configuration."""
    global _filter_presets
    if _filter_presets is None:
        _filter_presets = FilterPresets()
    return _filter_presets


def reload_all_config() -> None:
    """Reload all configuration from YAML files."""
    global _filter_presets

    clear_config_cache()
    _filter_presets = None
