"""Dashboard store: owns the record set and the canonical FilterState.

Consumers receive the store by reference and interact with it through
`get_state()`, `subscribe()` and `dispatch()`. Every mutation updates the
state, the URL and the filtered subset before any listener runs.
"""

import json
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Mapping, MutableMapping, Optional, Protocol, Tuple

from config import config
from config.constants import SCENARIO_KEY_PREFIX
from config.logging_config import get_logger
from src.filtering.codec import QueryInput, build_url, decode, default_state
from src.filtering.models import FilterState, Record
from src.filtering.predicates import filter_records
from src.filtering.presets import get_preset
from src.filtering.sources import RecordSource

logger = get_logger("store")

Listener = Callable[[FilterState], None]


class Navigator(Protocol):
    """Browser history adapter. Filter changes only ever replace the entry."""

    def replace(self, url: str) -> None:
        ...


class DashboardStore:
    """Single owner of the filter state and the record set."""

    def __init__(
        self,
        records: Iterable[Record],
        filters: Optional[FilterState] = None,
        navigator: Optional[Navigator] = None,
        path: str = "/",
        scenario_storage: Optional[MutableMapping[str, str]] = None,
        history_limit: Optional[int] = None,
        today: Optional[date] = None,
    ):
        """
        Initialize the store.

        Args:
            records: Full, unfiltered record set (materialized once).
            filters: Initial state; defaults to the default date range.
            navigator: Receives the encoded URL on every mutation.
            path: Page path used when building URLs.
            scenario_storage: Key-value storage for saved scenarios
                (e.g. a browser local-storage adapter). In-memory by default.
            history_limit: Maximum number of previous states kept.
            today: Fixed reference day for defaults; None means today (UTC).
        """
        self._records: Tuple[Record, ...] = tuple(records)
        self._today = today
        self._navigator = navigator
        self._path = path
        self._scenarios = scenario_storage if scenario_storage is not None else {}
        self._history_limit = history_limit or config.analysis.history_limit
        self._history: List[Dict[str, Any]] = []
        self._listeners: List[Listener] = []

        self._state = filters if filters is not None else default_state(today)
        self._filtered = filter_records(self._records, self._state)
        self._url = build_url(path, self._state)

    @classmethod
    def from_source(cls, source: RecordSource, **kwargs) -> "DashboardStore":
        """Create a store from a record source."""
        return cls(source.load(), **kwargs)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    @property
    def filtered(self) -> Tuple[Record, ...]:
        return self._filtered

    @property
    def url(self) -> str:
        return self._url

    def get_state(self) -> FilterState:
        return self._state

    def select(self, state: FilterState) -> Tuple[Record, ...]:
        """Filtered subset for an arbitrary state; the canonical state is untouched."""
        return filter_records(self._records, state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new state after each change.

        Returns:
            Function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def dispatch(self, patch: Mapping[str, Any]) -> FilterState:
        """Apply a partial update (snake_case or camelCase keys)."""
        return self._commit(self._state.patched(patch))

    def set_filters(self, state: FilterState) -> FilterState:
        """Replace the whole state."""
        return self._commit(state)

    def reset(self) -> FilterState:
        """Reset all filters to defaults."""
        return self._commit(default_state(self._today))

    def hydrate_from_url(self, query: QueryInput) -> FilterState:
        """
        Re-read the state from the URL after a navigation event.

        This is the single decode point per navigation. It does not navigate
        again and does not record history.

        Raises:
            FilterCodecError: If the URL carries a malformed date.
        """
        state = decode(query, today=self._today)
        if state != self._state:
            self._apply(state, navigate=False)
            self._notify(state)
        return self._state

    def apply_preset(self, preset_id: str) -> FilterState:
        """
        Replace the state with a built-in preset.

        Raises:
            UnknownPresetError: If no preset has this id.
        """
        return self._commit(get_preset(preset_id).resolve(self._today))

    def _commit(self, state: FilterState) -> FilterState:
        if state == self._state:
            return self._state
        previous = self._state
        self._apply(state, navigate=True)
        self._push_history(previous)
        self._notify(state)
        return self._state

    def _apply(self, state: FilterState, navigate: bool) -> None:
        # A bad date bound raises before any state changes
        filtered = filter_records(self._records, state)

        self._state = state
        self._url = build_url(self._path, state)
        self._filtered = filtered
        if navigate and self._navigator is not None:
            self._navigator.replace(self._url)

        logger.debug(f"Filters changed: {state.get_summary()} -> {len(filtered)} records")

    def _notify(self, state: FilterState) -> None:
        for listener in list(self._listeners):
            listener(state)

    # -------------------------------------------------------------------------
    # History
    # -------------------------------------------------------------------------

    def _push_history(self, state: FilterState) -> None:
        if state.is_empty:
            return  # Don't save empty states

        snapshot = state.to_dict()

        # Don't add duplicate consecutive entries
        if self._history and self._history[-1] == snapshot:
            return

        self._history.append(snapshot)
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit:]

    @property
    def history_count(self) -> int:
        return len(self._history)

    def restore_previous(self) -> bool:
        """
        Restore the previous filter state from history.

        Returns:
            True if filters were restored, False if no history.
        """
        if not self._history:
            return False
        previous = FilterState.from_dict(self._history.pop())
        self._apply(previous, navigate=True)
        self._notify(previous)
        return True

    # -------------------------------------------------------------------------
    # Scenarios
    # -------------------------------------------------------------------------

    def save_scenario(self, name: str) -> None:
        """Save the current state under a name."""
        self._scenarios[f"{SCENARIO_KEY_PREFIX}{name}"] = json.dumps(self._state.to_dict())
        logger.info(f"Saved scenario '{name}'")

    def load_scenario(self, name: str) -> bool:
        """
        Replace the state with a saved scenario.

        Returns:
            True if the scenario exists and was applied.
        """
        raw = self._scenarios.get(f"{SCENARIO_KEY_PREFIX}{name}")
        if raw is None:
            return False
        self.set_filters(FilterState.from_dict(json.loads(raw)))
        return True

    def delete_scenario(self, name: str) -> bool:
        """Delete a saved scenario. Returns False if it did not exist."""
        key = f"{SCENARIO_KEY_PREFIX}{name}"
        if key not in self._scenarios:
            return False
        del self._scenarios[key]
        return True

    def list_scenarios(self) -> List[str]:
        """Names of all saved scenarios."""
        return [
            key[len(SCENARIO_KEY_PREFIX):]
            for key in self._scenarios
            if key.startswith(SCENARIO_KEY_PREFIX)
        ]
