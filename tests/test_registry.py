from __future__ import annotations

import pytest

from docmerge.core.registry import (
    Fragment,
    FragmentRegistry,
    IndexBatch,
    RegistryState,
    register_all,
)


class Recorder:
    def __init__(self) -> None:
        self.batches: list[IndexBatch[str]] = []

    def __call__(self, batch: IndexBatch[str]) -> None:
        self.batches.append(batch)


@pytest.fixture
def registry() -> FragmentRegistry[str]:
    return FragmentRegistry(name="test")


def test_fragments_buffered_before_attach_arrive_as_one_batch(
    registry: FragmentRegistry[str],
) -> None:
    registry.register(Fragment("a", {"K1": ["a1"], "K2": ["a2"]}))
    registry.register(Fragment("b", {"K2": ["b1"]}))
    registry.register(Fragment("c", {"K1": ["c1", "c2"]}))
    recorder = Recorder()

    registry.attach(recorder)

    assert len(recorder.batches) == 1
    batch = recorder.batches[0]
    assert batch.initial is True
    assert batch.producers == ["a", "b", "c"]
    assert batch == {"K1": ["a1", "c1", "c2"], "K2": ["a2", "b1"]}
    assert registry.pending_count == 0


def test_initial_batch_only_depends_on_per_key_order(registry: FragmentRegistry[str]) -> None:
    other: FragmentRegistry[str] = FragmentRegistry()
    registry.register(Fragment("a", {"X": ["a"]}))
    registry.register(Fragment("b", {"Y": ["b"]}))
    registry.register(Fragment("c", {"X": ["c"]}))
    other.register(Fragment("b", {"Y": ["b"]}))
    other.register(Fragment("a", {"X": ["a"]}))
    other.register(Fragment("c", {"X": ["c"]}))
    first, second = Recorder(), Recorder()

    registry.attach(first)
    other.attach(second)

    assert dict(first.batches[0]) == dict(second.batches[0]) == {"X": ["a", "c"], "Y": ["b"]}


def test_registration_after_attach_delivers_only_the_new_fragment(
    registry: FragmentRegistry[str],
) -> None:
    registry.register(Fragment("a", {"K": ["a1"]}))
    recorder = Recorder()
    registry.attach(recorder)

    registry.register(Fragment("b", {"K": ["b1"], "L": ["b2"]}))

    assert len(recorder.batches) == 2
    delta = recorder.batches[1]
    assert delta.initial is False
    assert delta.producers == ["b"]
    assert delta == {"K": ["b1"], "L": ["b2"]}
    assert registry.lookup("K") == ["a1", "b1"]


def test_lookup_concatenates_in_registration_order(registry: FragmentRegistry[str]) -> None:
    registry.register(Fragment("first", {"key": ["a", "b"]}))
    registry.register(Fragment("second", {"key": ["c"]}))

    assert registry.lookup("key") == ["a", "b", "c"]


def test_lookup_of_unknown_key_is_empty(registry: FragmentRegistry[str]) -> None:
    assert registry.lookup("missing") == []
    registry.attach(Recorder())
    assert registry.lookup("missing") == []
    assert "missing" not in registry


def test_registering_the_same_fragment_twice_duplicates_items(
    registry: FragmentRegistry[str],
) -> None:
    fragment = Fragment("crate", {"A": ["x", "y"], "B": ["z"]})

    registry.register(fragment)
    registry.register(fragment)

    assert registry.lookup("A") == ["x", "y", "x", "y"]
    assert registry.lookup("B") == ["z", "z"]
    assert registry.producers() == ["crate", "crate"]


def test_duplicate_registration_after_attach_is_delivered_twice(
    registry: FragmentRegistry[str],
) -> None:
    fragment = Fragment("crate", {"A": ["x"]})
    recorder = Recorder()
    registry.attach(recorder)

    registry.register(fragment)
    registry.register(fragment)

    assert [dict(batch) for batch in recorder.batches[1:]] == [{"A": ["x"]}, {"A": ["x"]}]
    assert registry.lookup("A") == ["x", "x"]


def test_two_crate_scenario(registry: FragmentRegistry[str]) -> None:
    registry.register(Fragment("crate1", {"TraitX": ["Item1"]}))
    recorder = Recorder()
    registry.attach(recorder)
    assert recorder.batches[0] == {"TraitX": ["Item1"]}

    registry.register(Fragment("crate2", {"TraitX": ["Item2"], "TraitY": ["Item3"]}))

    assert recorder.batches[1] == {"TraitX": ["Item2"], "TraitY": ["Item3"]}
    assert registry.lookup("TraitX") == ["Item1", "Item2"]
    assert registry.lookup("TraitY") == ["Item3"]


def test_attach_without_fragments_delivers_empty_batch(registry: FragmentRegistry[str]) -> None:
    recorder = Recorder()
    registry.attach(recorder)

    assert len(recorder.batches) == 1
    assert recorder.batches[0].initial is True
    assert dict(recorder.batches[0]) == {}

    registry.register(Fragment("late", {"K": ["v"]}))
    assert recorder.batches[1] == {"K": ["v"]}


def test_state_moves_from_buffering_to_attached_once(registry: FragmentRegistry[str]) -> None:
    assert registry.state is RegistryState.BUFFERING
    registry.register(Fragment("a", {"K": ["v"]}))
    assert registry.pending_count == 1
    assert registry.consumer is None

    recorder = Recorder()
    registry.attach(recorder)

    assert registry.state is RegistryState.ATTACHED
    assert registry.consumer is recorder
    registry.register(Fragment("b", {"K": ["w"]}))
    assert registry.pending_count == 0


def test_reattach_replaces_consumer_without_replay(registry: FragmentRegistry[str]) -> None:
    registry.register(Fragment("a", {"K": ["v"]}))
    first, second = Recorder(), Recorder()
    registry.attach(first)

    registry.attach(second)
    assert second.batches == []

    registry.register(Fragment("b", {"K": ["w"]}))
    assert len(first.batches) == 1
    assert [dict(batch) for batch in second.batches] == [{"K": ["w"]}]
    assert registry.lookup("K") == ["v", "w"]


def test_lookup_sees_fragments_still_waiting_for_a_consumer(
    registry: FragmentRegistry[str],
) -> None:
    registry.register(Fragment("a", {"K": ["v"]}))

    assert registry.lookup("K") == ["v"]
    assert registry.pending_count == 1


def test_attach_rejects_non_callable(registry: FragmentRegistry[str]) -> None:
    with pytest.raises(TypeError):
        registry.attach("not a consumer")  # type: ignore[arg-type]
    assert registry.state is RegistryState.BUFFERING


def test_consumer_may_register_while_handling_a_batch(registry: FragmentRegistry[str]) -> None:
    seen: list[IndexBatch[str]] = []

    def consumer(batch: IndexBatch[str]) -> None:
        seen.append(batch)
        if batch.initial:
            registry.register(Fragment("nested", {"K": ["n"]}))

    registry.register(Fragment("a", {"K": ["v"]}))
    registry.attach(consumer)

    assert [batch.initial for batch in seen] == [True, False]
    assert seen[1] == {"K": ["n"]}
    assert registry.lookup("K") == ["v", "n"]


def test_consumer_errors_propagate_after_the_merge(registry: FragmentRegistry[str]) -> None:
    def consumer(batch: IndexBatch[str]) -> None:
        if not batch.initial:
            raise RuntimeError("render failed")

    registry.attach(consumer)

    with pytest.raises(RuntimeError, match="render failed"):
        registry.register(Fragment("a", {"K": ["v"]}))
    assert registry.lookup("K") == ["v"]


def test_fragment_entries_are_frozen_copies() -> None:
    source = {"K": ["a"]}
    fragment: Fragment[str] = Fragment("crate", source)
    source["K"].append("b")

    assert fragment.entries["K"] == ("a",)
    assert fragment.keys() == ["K"]
    assert fragment.item_count == 1
    with pytest.raises(TypeError):
        fragment.entries["L"] = ("c",)  # type: ignore[index]


def test_fragments_hash_by_identity() -> None:
    first: Fragment[str] = Fragment("crate", {"K": ["a"]})
    twin: Fragment[str] = Fragment("crate", {"K": ["a"]})

    assert hash(first) == hash(first)
    assert first != twin
    assert len({first, twin, first}) == 2


def test_batches_and_snapshots_do_not_alias_registry_state(
    registry: FragmentRegistry[str],
) -> None:
    registry.register(Fragment("a", {"K": ["v"]}))
    recorder = Recorder()
    registry.attach(recorder)

    recorder.batches[0]["K"].append("mutated")
    registry.snapshot()["K"].append("mutated")
    registry.lookup("K").append("mutated")

    assert registry.lookup("K") == ["v"]


def test_empty_item_sequences_still_create_the_key(registry: FragmentRegistry[str]) -> None:
    registry.register(Fragment("diesel", {"Queryable": []}))

    assert "Queryable" in registry
    assert registry.lookup("Queryable") == []
    assert registry.keys() == ["Queryable"]
    assert len(registry) == 1


def test_register_all_preserves_order(registry: FragmentRegistry[str]) -> None:
    count = register_all(
        registry, [Fragment("a", {"K": ["1"]}), Fragment("b", {"K": ["2"]})]
    )

    assert count == 2
    assert registry.fragment_count == 2
    assert registry.lookup("K") == ["1", "2"]
    assert "state=buffering" in repr(registry)
