"""LocalStore: string values persisted across instances.

Invariants:
    - Stores sharing a path never lose each other's writes
    - No temp files are left behind after a write
"""

import threading

from stickyboard.client.storage import LocalStore


def test_values_survive_a_new_instance(store):
    store.set_item("darkMode", "true")

    assert LocalStore(store.path).get_item("darkMode") == "true"


def test_missing_key_is_none(store):
    assert store.get_item("nope") is None


def test_remove_and_clear(store):
    store.set_item("a", "1")
    store.set_item("b", "2")

    store.remove_item("a")
    assert store.keys() == ["b"]

    store.clear()
    assert store.keys() == []


def test_json_helpers(store):
    store.set_json("notes", [{"id": "1"}])

    assert store.get_json("notes") == [{"id": "1"}]


def test_corrupt_json_value_reads_as_default(store, caplog):
    store.set_item("note_reminders", "{not json")

    assert store.get_json("note_reminders", {}) == {}
    assert "Corrupt JSON" in caplog.text


def test_corrupt_file_reads_as_empty(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[[[", encoding="utf-8")

    assert LocalStore(path).keys() == []


def test_concurrent_stores_keep_every_key(tmp_path):
    path = tmp_path / "shared.json"
    errors = []

    def writer(prefix):
        local = LocalStore(path)
        try:
            for i in range(100):
                local.set_item(f"{prefix}-{i}", str(i))
        except Exception as err:  # noqa: BLE001
            errors.append(err)

    threads = [threading.Thread(target=writer, args=(name,)) for name in ("notes", "reminders")]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(LocalStore(path).keys()) == 200
    assert not list(tmp_path.glob("*.tmp"))
