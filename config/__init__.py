"""Configuration module for Synduct Insights.

All filter defaults are "all data" - no drug, country or specialty is prioritized.
"""

from .settings import config, DataConfig, AnalysisConfig, AppConfig, Config
from .constants import (
    DEFAULT_DATE_FROM,
    AGE_GROUPS,
    GENDERS,
    FILTER_DIMENSION_LABELS,
    SCENARIO_KEY_PREFIX,
    get_dimension_label,
)

__all__ = [
    # Settings
    "config",
    "DataConfig",
    "AnalysisConfig",
    "AppConfig",
    "Config",
    # Default filter values
    "DEFAULT_DATE_FROM",
    # Constants
    "AGE_GROUPS",
    "GENDERS",
    "FILTER_DIMENSION_LABELS",
    "SCENARIO_KEY_PREFIX",
    "get_dimension_label",
]
