import json
import threading

import pytest

from device_crypto import FileKeyStore, KeyStoreError, MemoryKeyStore


def test_memory_store_get_set_remove():
    store = MemoryKeyStore()
    assert store.get_string("a") is None
    store.set_string("a", "1")
    assert store.get_string("a") == "1"
    store.remove("a")
    store.remove("a")
    assert store.get_string("a") is None


def test_file_store_persists_across_instances(tmp_path):
    path = tmp_path / "settings.json"
    FileKeyStore(path).set_string("device_encryption_key", "ab" * 32)

    reopened = FileKeyStore(path)
    assert reopened.get_string("device_encryption_key") == "ab" * 32


def test_file_store_missing_file_reads_as_empty(tmp_path):
    store = FileKeyStore(tmp_path / "nested" / "settings.json")
    assert store.get_string("anything") is None
    store.set_string("x", "y")
    assert (tmp_path / "nested" / "settings.json").exists()


def test_file_store_remove_keeps_other_entries(tmp_path):
    store = FileKeyStore(tmp_path / "settings.json")
    store.set_string("a", "1")
    store.set_string("b", "2")
    store.remove("a")
    assert store.get_string("a") is None
    assert store.get_string("b") == "2"


def test_file_store_leaves_no_temp_files(tmp_path):
    store = FileKeyStore(tmp_path / "settings.json")
    for i in range(5):
        store.set_string(f"k{i}", str(i))
    assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]


def test_file_store_corrupt_document_raises(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    with pytest.raises(KeyStoreError):
        FileKeyStore(path).get_string("a")


def test_file_store_non_object_document_raises(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("[1, 2]")
    with pytest.raises(KeyStoreError):
        FileKeyStore(path).get_string("a")


def test_two_instances_on_one_file_keep_every_write(tmp_path):
    path = tmp_path / "settings.json"
    stores = [FileKeyStore(path), FileKeyStore(tmp_path / "." / "settings.json")]

    def write(index, store):
        for i in range(100):
            store.set_string(f"t{index}-{i}", str(i))

    threads = [threading.Thread(target=write, args=(index, store)) for index, store in enumerate(stores)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(json.loads(path.read_text())) == 200
