"""Tests for the dashboard store."""

import json
import pytest
from datetime import date


class RecordingNavigator:
    """Navigator that records every replaced URL."""

    def __init__(self):
        self.urls = []

    def replace(self, url):
        self.urls.append(url)


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def store(sample_records, navigator, today):
    from src.filtering.store import DashboardStore

    return DashboardStore(sample_records, navigator=navigator, today=today)


class TestInitialState:
    """Tests for store construction."""

    def test_defaults(self, store, sample_records):
        """Test that the store starts with the default date range."""
        state = store.get_state()

        assert state.date_from == "2024-01-01"
        assert state.date_to == "2024-06-30"
        assert store.records == sample_records
        assert store.filtered == sample_records
        assert store.url == "/?from=2024-01-01&to=2024-06-30"

    def test_from_source(self, records_file, sample_records, today):
        """Test creating a store from a record source."""
        from src.filtering.sources import JsonRecordSource
        from src.filtering.store import DashboardStore

        store = DashboardStore.from_source(JsonRecordSource(records_file), today=today)

        assert store.records == sample_records


class TestDispatch:
    """Tests for state mutations."""

    def test_dispatch_updates_state_url_and_subset(self, store, navigator):
        """Test a partial update."""
        state = store.dispatch({"drug": ["A"]})

        assert state.drug == ("A",)
        assert state.date_from == "2024-01-01"
        assert [r.id for r in store.filtered] == ["r1", "r3", "r5"]
        assert store.url == "/?drug=A&from=2024-01-01&to=2024-06-30"
        assert navigator.urls == [store.url]

    def test_listener_sees_consistent_store(self, store):
        """Test that listeners run after state, URL and subset are updated."""
        seen = []

        def listener(state):
            seen.append((state, store.get_state(), store.url, len(store.filtered)))

        store.subscribe(listener)
        store.dispatch({"country": ["France"]})

        assert len(seen) == 1
        state, current, url, count = seen[0]
        assert state == current
        assert "country=France" in url
        assert count == 2

    def test_unsubscribe(self, store):
        """Test that an unsubscribed listener is not called."""
        calls = []
        unsubscribe = store.subscribe(calls.append)

        unsubscribe()
        store.dispatch({"drug": ["A"]})

        assert calls == []

    def test_no_op_dispatch(self, store, navigator):
        """Test that an unchanged state does not navigate or notify."""
        calls = []
        store.subscribe(calls.append)

        store.dispatch({"dateFrom": "2024-01-01"})

        assert calls == []
        assert navigator.urls == []

    def test_set_filters_replaces_state(self, store):
        """Test full replacement."""
        from src.filtering.models import FilterState

        store.dispatch({"drug": ["A"]})
        state = store.set_filters(FilterState(country=["UK"]))

        assert state == FilterState(country=["UK"])
        assert [r.id for r in store.filtered] == ["r4"]

    def test_reset(self, store):
        """Test reset to the default date range."""
        store.dispatch({"drug": ["A"], "dateFrom": "2024-02-01"})
        state = store.reset()

        assert state.drug == ()
        assert state.date_from == "2024-01-01"
        assert len(store.filtered) == 5

    def test_empty_result_is_not_an_error(self, store):
        """Test that a filter matching nothing yields an empty subset."""
        store.dispatch({"drug": ["Z"]})

        assert store.filtered == ()

    def test_bad_date_keeps_previous_state(self, store):
        """Test that a malformed date raises and leaves the store untouched."""
        from src.filtering.exceptions import FilterCodecError

        before = store.get_state()
        with pytest.raises(FilterCodecError):
            store.dispatch({"dateTo": "someday"})

        assert store.get_state() == before
        assert len(store.filtered) == 5
        assert store.history_count == 0

    def test_select_does_not_touch_state(self, store):
        """Test filtering for an arbitrary state."""
        from src.filtering.models import FilterState

        before = store.get_state()
        result = store.select(FilterState(country=["Germany"]))

        assert [r.id for r in result] == ["r1", "r3"]
        assert store.get_state() == before


class TestHydrate:
    """Tests for hydrate_from_url()."""

    def test_hydrate_does_not_navigate(self, store, navigator):
        """Test that reading the URL never writes it back."""
        calls = []
        store.subscribe(calls.append)

        state = store.hydrate_from_url("?ta=Immunology&from=2024-01-01&to=2024-06-30")

        assert state.therapeutic_area == ("Immunology",)
        assert [r.id for r in store.filtered] == ["r3", "r4"]
        assert navigator.urls == []
        assert len(calls) == 1
        assert store.history_count == 0

    def test_hydrate_malformed_date(self, store):
        """Test that a malformed URL date is rejected."""
        from src.filtering.exceptions import FilterCodecError

        with pytest.raises(FilterCodecError):
            store.hydrate_from_url("from=2024-99-01")


class TestPresets:
    """Tests for apply_preset()."""

    def test_apply_preset_replaces_state(self, store):
        """Test that a preset replaces the whole state."""
        store.dispatch({"drug": ["A"]})
        state = store.apply_preset("geographic-expansion")

        assert state.drug == ()
        assert state.country == ("Germany", "France", "UK")
        assert state.date_from is None
        assert len(store.filtered) == 5

    def test_apply_unknown_preset(self, store):
        """Test that an unknown preset raises and leaves the state alone."""
        from src.filtering.exceptions import UnknownPresetError

        before = store.get_state()
        with pytest.raises(UnknownPresetError):
            store.apply_preset("nope")

        assert store.get_state() == before


class TestHistory:
    """Tests for filter history."""

    def test_restore_previous(self, store):
        """Test stepping back through history."""
        store.dispatch({"drug": ["A"]})
        store.dispatch({"country": ["France"]})

        assert store.history_count == 2
        assert store.restore_previous()
        assert store.get_state().drug == ("A",)
        assert store.get_state().country == ()
        assert store.restore_previous()
        assert store.get_state().drug == ()
        assert not store.restore_previous()

    def test_failing_listener_still_records_history(self, store):
        """Test that a listener error does not lose the previous state."""
        def failing_listener(state):
            raise RuntimeError("render failed")

        store.dispatch({"drug": ["A"]})
        store.subscribe(failing_listener)

        with pytest.raises(RuntimeError):
            store.dispatch({"country": ["France"]})

        assert store.get_state().country == ("France",)
        assert store.history_count == 2

        with pytest.raises(RuntimeError):
            store.restore_previous()

        assert store.get_state().drug == ("A",)
        assert store.get_state().country == ()

    def test_history_is_bounded(self, sample_records, today):
        """Test that only the newest entries are kept."""
        from src.filtering.store import DashboardStore

        store = DashboardStore(sample_records, history_limit=2, today=today)
        for drug in ("A", "B", "C"):
            store.dispatch({"drug": [drug]})

        assert store.history_count == 2

    def test_empty_states_not_recorded(self, sample_records, today):
        """Test that an empty state is not pushed to history."""
        from src.filtering.models import FilterState
        from src.filtering.store import DashboardStore

        store = DashboardStore(sample_records, filters=FilterState(), today=today)
        store.dispatch({"drug": ["A"]})

        assert store.history_count == 0


class TestScenarios:
    """Tests for saved scenarios."""

    def test_save_and_load(self, sample_records, today):
        """Test saving a scenario and loading it later."""
        from src.filtering.store import DashboardStore

        storage = {}
        store = DashboardStore(sample_records, scenario_storage=storage, today=today)
        store.dispatch({"drug": ["A"], "country": ["France"]})
        store.save_scenario("french-a")
        store.reset()

        assert store.load_scenario("french-a")
        assert store.get_state().country == ("France",)
        assert json.loads(storage["synduct-scenario:french-a"])["drug"] == ["A"]

    def test_shared_storage(self, sample_records, today):
        """Test that scenarios persist through an injected storage mapping."""
        from src.filtering.store import DashboardStore

        storage = {}
        first = DashboardStore(sample_records, scenario_storage=storage, today=today)
        first.dispatch({"gender": ["female"]})
        first.save_scenario("women")

        second = DashboardStore(sample_records, scenario_storage=storage, today=today)

        assert second.list_scenarios() == ["women"]
        assert second.load_scenario("women")
        assert [r.id for r in second.filtered] == ["r3"]

    def test_missing_and_delete(self, store):
        """Test loading and deleting unknown scenarios."""
        assert not store.load_scenario("missing")
        store.save_scenario("tmp")
        assert store.delete_scenario("tmp")
        assert not store.delete_scenario("tmp")
        assert store.list_scenarios() == []
