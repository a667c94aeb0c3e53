"""Exceptions raised by the filtering layer."""

from typing import Any


class FilterError(Exception):
    """Base class for filter state and record source errors."""

    pass


class FilterCodecError(FilterError, ValueError):
    """Raised when a URL parameter or filter bound cannot be parsed."""

    def __init__(self, key: str, value: Any, reason: str = "not a valid ISO-8601 date"):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{key}': {value!r} ({reason})")


class RecordValidationError(FilterError, ValueError):
    """Raised when a source record does not match the expected shape."""

    pass


class RecordSourceError(FilterError):
    """Raised when a record source cannot be read."""

    pass


class UnknownPresetError(FilterError, KeyError):
    """Raised when a preset id is not defined."""

    def __init__(self, preset_id: str):
        self.preset_id = preset_id
        super().__init__(preset_id)

    def __str__(self) -> str:
        return f"Unknown preset: {self.preset_id}"
