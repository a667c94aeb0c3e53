"""Constants for Synduct Insights.

IMPORTANT: All filter defaults are EMPTY (all drugs/countries/specialties).
Only the date range has a default, and it is applied by the URL codec.
"""

from typing import Dict, Tuple


# =============================================================================
# Default Filter Values
# =============================================================================

# Matches the start of the Q&A dataset
DEFAULT_DATE_FROM = "2024-01-01"

# Years accepted in filter bounds; pandas timestamps end in 2262
MIN_BOUND_YEAR = 1900
MAX_BOUND_YEAR = 2200


# =============================================================================
# Record Enumerations
# =============================================================================

AGE_GROUPS: Tuple[str, ...] = ("child", "adolescent", "adult", "elderly")
GENDERS: Tuple[str, ...] = ("male", "female", "both")


# =============================================================================
# Filter Dimension Labels
# =============================================================================

# FilterState field -> label used in human-readable summaries
FILTER_DIMENSION_LABELS: Dict[str, str] = {
    "drug": "Drugs",
    "company": "Companies",
    "therapeutic_area": "Therapeutic areas",
    "country": "Countries",
    "specialty": "Specialties",
    "profession": "Professions",
    "age_group": "Age groups",
    "gender": "Genders",
}

# Summaries list values inline up to this many, then show a count
SUMMARY_INLINE_LIMIT = 3


# =============================================================================
# Scenario Storage
# =============================================================================

SCENARIO_KEY_PREFIX = "synduct-scenario:"


def get_dimension_label(field_name: str) -> str:
    """Get display label for a FilterState field."""
    return FILTER_DIMENSION_LABELS.get(field_name, field_name.replace("_", " ").title())
