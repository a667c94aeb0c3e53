"""Filter state, URL codec, predicates and the dashboard store."""

from .exceptions import (
    FilterError,
    FilterCodecError,
    RecordValidationError,
    RecordSourceError,
    UnknownPresetError,
)
from .models import FilterState, Record, MULTI_VALUE_FIELDS, DATE_FIELDS
from .codec import URL_PARAM_KEYS, encode, decode, build_url, default_state
from .predicates import FIELD_PREDICATES, matches, filter_records
from .sources import RecordSource, StaticRecordSource, JsonRecordSource
from .presets import FilterPreset, get_builtin_presets, get_preset
from .store import DashboardStore, Navigator

__all__ = [
    # Errors
    "FilterError",
    "FilterCodecError",
    "RecordValidationError",
    "RecordSourceError",
    "UnknownPresetError",
    # Model
    "FilterState",
    "Record",
    "MULTI_VALUE_FIELDS",
    "DATE_FIELDS",
    # Codec
    "URL_PARAM_KEYS",
    "encode",
    "decode",
    "build_url",
    "default_state",
    # Predicates
    "FIELD_PREDICATES",
    "matches",
    "filter_records",
    # Sources
    "RecordSource",
    "StaticRecordSource",
    "JsonRecordSource",
    # Presets
    "FilterPreset",
    "get_builtin_presets",
    "get_preset",
    # Store
    "DashboardStore",
    "Navigator",
]
