"""API services."""

from api.services.store import get_store, load_store
from api.services.filters import filters_from_request

__all__ = ["get_store", "load_store", "filters_from_request"]
