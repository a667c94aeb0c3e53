"""Built-in filter presets (use-case templates) loaded from config/presets.yaml."""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, Optional

from config.config_loader import get_filter_presets
from src.filtering.codec import today_utc
from src.filtering.exceptions import UnknownPresetError
from src.filtering.models import FilterState


@dataclass(frozen=True)
class FilterPreset:
    """A named, read-only filter configuration."""

    id: str
    name: str
    description: str = ""
    category: str = "General"
    filters: Dict[str, Any] = field(default_factory=dict)
    lookback_days: Optional[int] = None
    is_default: bool = False

    def resolve(self, today: Optional[date] = None) -> FilterState:
        """
        Build the FilterState this preset applies.

        Args:
            today: Reference day for `lookback_days`; defaults to today (UTC).

        Returns:
            FilterState with the preset's filters and, when the preset has a
            lookback, a date range ending today.
        """
        state = FilterState.from_dict(self.filters)
        if self.lookback_days is not None:
            today = today or today_utc()
            state = state.patched({
                "date_from": (today - timedelta(days=self.lookback_days)).isoformat(),
                "date_to": today.isoformat(),
            })
        return state

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "filters": dict(self.filters),
            "lookbackDays": self.lookback_days,
            "isDefault": self.is_default,
            "isBuiltIn": True,
        }

    @classmethod
    def from_dict(cls, preset_id: str, data: Dict[str, Any]) -> "FilterPreset":
        """Create from a presets.yaml entry."""
        return cls(
            id=preset_id,
            name=data.get("name", preset_id),
            description=data.get("description", ""),
            category=data.get("category", "General"),
            filters=dict(data.get("filters") or {}),
            lookback_days=data.get("lookback_days"),
            is_default=bool(data.get("is_default", False)),
        )


def get_builtin_presets() -> Dict[str, FilterPreset]:
    """
    Get all built-in presets.

    Returns:
        Dictionary of preset id to FilterPreset, in file order.
    """
    return {
        preset_id: FilterPreset.from_dict(preset_id, data)
        for preset_id, data in get_filter_presets().get_all_presets().items()
    }


def get_preset(preset_id: str) -> FilterPreset:
    """
    Get a built-in preset by id.

    Raises:
        UnknownPresetError: If no preset has this id.
    """
    data = get_filter_presets().get_preset(preset_id)
    if data is None:
        raise UnknownPresetError(preset_id)
    return FilterPreset.from_dict(preset_id, data)
