"""Tests for merge-with-persisted and toggle semantics."""

from daytrip.app.db.persistence import PersistenceAdapter, snapshot
from daytrip.app.engine.store import ActivityStore, merge_with_persisted, toggle_completed
from daytrip.app.models import Activity, PersistedEntry


class TestMergeWithPersisted:
    """Test reconciliation of canonical itinerary with persisted flags."""

    def test_scenario_restores_flags_in_canonical_order(self, make_activity) -> None:
        canonical = [make_activity("x", "09:00", "10:00"), make_activity("y", "10:00", "11:00")]
        merged = merge_with_persisted(canonical, [PersistedEntry(id="x", completed=True)])

        assert [a.id for a in merged] == ["x", "y"]
        assert merged[0].completed is True
        assert merged[1].completed is False

    def test_unknown_persisted_ids_dropped(self, canonical: list[Activity]) -> None:
        persisted = [
            PersistedEntry(id="gone", completed=True),
            PersistedEntry(id="b", completed=True),
        ]
        merged = merge_with_persisted(canonical, persisted)
        assert [a.id for a in merged] == ["a", "b", "c"]
        assert [a.completed for a in merged] == [False, True, False]

    def test_persisted_order_does_not_matter(self, canonical: list[Activity]) -> None:
        persisted = [
            PersistedEntry(id="c", completed=True),
            PersistedEntry(id="a", completed=True),
        ]
        merged = merge_with_persisted(canonical, persisted)
        assert [a.id for a in merged] == ["a", "b", "c"]
        assert [a.completed for a in merged] == [True, False, True]

    def test_only_completed_is_taken_from_persisted(self, canonical: list[Activity]) -> None:
        merged = merge_with_persisted(canonical, [PersistedEntry(id="a", completed=True)])
        assert merged[0].model_dump(exclude={"completed"}) == canonical[0].model_dump(
            exclude={"completed"}
        )

    def test_persisted_false_overrides_canonical_default(self, make_activity) -> None:
        canonical = [make_activity("x", "09:00", "10:00", completed=True)]
        merged = merge_with_persisted(canonical, [PersistedEntry(id="x", completed=False)])
        assert merged[0].completed is False

    def test_does_not_mutate_inputs(self, canonical: list[Activity]) -> None:
        before = [a.model_copy() for a in canonical]
        merged = merge_with_persisted(canonical, [PersistedEntry(id="a", completed=True)])
        assert canonical == before
        assert merged is not canonical

    def test_empty_persisted_keeps_defaults(self, canonical: list[Activity]) -> None:
        assert merge_with_persisted(canonical, []) == canonical

    def test_idempotent(self, canonical: list[Activity]) -> None:
        once = merge_with_persisted(canonical, [PersistedEntry(id="b", completed=True)])
        twice = merge_with_persisted(once, snapshot(once))
        assert twice == once


class TestToggleCompleted:
    """Test functional toggle."""

    def test_flips_only_target(self, canonical: list[Activity]) -> None:
        toggled = toggle_completed(canonical, "b")
        assert [a.completed for a in toggled] == [False, True, False]
        assert toggled is not canonical
        assert canonical[1].completed is False

    def test_double_toggle_restores(self, canonical: list[Activity]) -> None:
        twice = toggle_completed(toggle_completed(canonical, "a"), "a")
        assert [a.completed for a in twice] == [a.completed for a in canonical]

    def test_unknown_id_returns_unchanged_copy(self, canonical: list[Activity]) -> None:
        result = toggle_completed(canonical, "missing")
        assert result == canonical
        assert result is not canonical


class TestActivityStore:
    """Test the stateful store wrapper."""

    def test_load_merges_persisted_state(
        self, canonical: list[Activity], persistence: PersistenceAdapter
    ) -> None:
        persistence.save(toggle_completed(canonical, "c"))

        store = ActivityStore(canonical, persistence)
        store.load()

        assert [a.completed for a in store.activities] == [False, False, True]

    def test_toggle_persists_and_bumps_version(
        self, canonical: list[Activity], persistence: PersistenceAdapter
    ) -> None:
        store = ActivityStore(canonical, persistence)
        store.load()
        version = store.version
        before = store.activities

        after = store.toggle("a")

        assert store.version == version + 1
        assert after is not before
        assert after[0].completed is True
        assert persistence.load() == [
            PersistedEntry(id="a", completed=True),
            PersistedEntry(id="b", completed=False),
            PersistedEntry(id="c", completed=False),
        ]

    def test_toggle_unknown_id_is_noop(
        self, canonical: list[Activity], persistence: PersistenceAdapter
    ) -> None:
        store = ActivityStore(canonical, persistence)
        store.load()
        version = store.version

        store.toggle("missing")

        assert store.version == version
        assert all(not a.completed for a in store.activities)

    def test_get(self, canonical: list[Activity], persistence: PersistenceAdapter) -> None:
        store = ActivityStore(canonical, persistence)
        assert store.get("b") is canonical[1]
        assert store.get("nope") is None

    def test_mutating_returned_list_does_not_touch_store(
        self, canonical: list[Activity], persistence: PersistenceAdapter
    ) -> None:
        store = ActivityStore(canonical, persistence)
        store.load()
        version = store.version

        snapshot = store.activities
        snapshot.clear()
        store.toggle("a").pop()

        assert [a.id for a in store.activities] == ["a", "b", "c"]
        assert store.version == version + 1
