"""Record store service for FastAPI."""

from typing import Optional
from pathlib import Path

from api.config import get_settings
from config.logging_config import get_logger
from src.filtering import DashboardStore, JsonRecordSource

logger = get_logger("api.store")


def load_store(records_path: Optional[Path] = None) -> DashboardStore:
    """Load the record set into a new store.

    Args:
        records_path: JSON record file; defaults to the configured path.

    Returns:
        DashboardStore. A missing file yields an empty store.

    Raises:
        RecordSourceError: If the file exists but cannot be read or parsed.
    """
    path = Path(records_path or get_settings().records_path)
    if not path.exists():
        logger.warning(f"Record file not found: {path}; serving an empty record set")
        return DashboardStore(())
    return DashboardStore.from_source(JsonRecordSource(path))


# Global store instance
_store: Optional[DashboardStore] = None


def get_store() -> DashboardStore:
    """Get global store instance."""
    global _store
    if _store is None:
        _store = load_store()
    return _store

