from services.storage_service import KeyValueStorage, StorageEvent


def test_get_item_missing_key_returns_none(storage):
    assert storage.get_item("trailers") is None


def test_set_item_then_get_item(storage):
    storage.set_item("trailers", "[]", source="tab-a")
    assert storage.get_item("trailers") == "[]"

    storage.set_item("trailers", "[1]", source="tab-a")
    assert storage.get_item("trailers") == "[1]"


def test_writer_is_not_notified_of_its_own_write(storage):
    seen_a, seen_b = [], []
    storage.add_listener(seen_a.append, context_id="tab-a")
    storage.add_listener(seen_b.append, context_id="tab-b")

    storage.set_item("trailers", "[]", source="tab-a")

    assert seen_a == []
    assert seen_b == [StorageEvent(key="trailers", old_value=None, new_value="[]", source="tab-a")]


def test_unchanged_value_is_not_announced(storage):
    seen = []
    storage.set_item("trailers", "[]", source="tab-a")
    storage.add_listener(seen.append, context_id="tab-b")

    storage.set_item("trailers", "[]", source="tab-a")

    assert seen == []


def test_remove_item_and_clear_are_announced(storage):
    seen = []
    storage.add_listener(seen.append, context_id="tab-b")
    storage.set_item("trailers", "[]", source="tab-a")
    storage.set_item("shipments", "[]", source="tab-a")

    storage.remove_item("trailers", source="tab-a")
    storage.clear(source="tab-a")

    assert seen[2].key == "trailers"
    assert seen[2].new_value is None
    assert seen[3].key is None
    assert storage.keys() == []


def test_removed_listener_is_not_called(storage):
    seen = []
    remove = storage.add_listener(seen.append, context_id="tab-b")
    remove()

    storage.set_item("trailers", "[]", source="tab-a")

    assert seen == []


def test_failing_listener_does_not_block_others(storage):
    seen = []

    def broken(event):
        raise RuntimeError("boom")

    storage.add_listener(broken, context_id="tab-b")
    storage.add_listener(seen.append, context_id="tab-c")

    storage.set_item("trailers", "[]", source="tab-a")

    assert len(seen) == 1


def test_prefix_isolates_slots(session_factory):
    first = KeyValueStorage(session_factory, prefix="site-1:")
    second = KeyValueStorage(session_factory, prefix="site-2:")

    first.set_item("trailers", "[1]")
    second.set_item("trailers", "[2]")
    first.clear()

    assert first.keys() == []
    assert second.keys() == ["trailers"]
    assert second.get_item("trailers") == "[2]"
