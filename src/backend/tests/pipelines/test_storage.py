import pytest

from pipelines.storage import InMemoryStorage, LocalJsonStorage


@pytest.fixture(params=["memory", "json"])
def storage(request, tmp_path):
    if request.param == "memory":
        return InMemoryStorage()
    return LocalJsonStorage(tmp_path / "store" / "session.json")


def test_get_returns_only_present_keys(storage):
    storage.set({"usage_count": 3, "version": "0.1.0"})
    assert storage.get(["usage_count", "missing"]) == {"usage_count": 3}
    assert storage.get() == {"usage_count": 3, "version": "0.1.0"}


def test_set_merges_and_remove_deletes(storage):
    storage.set({"a": 1})
    storage.set({"b": {"nested": True}})
    storage.remove(["a", "never_set"])
    assert storage.get() == {"b": {"nested": True}}


def test_json_storage_persists_across_instances(tmp_path):
    path = tmp_path / "session.json"
    LocalJsonStorage(path).set({"client_profile": {"client_name": "Sharma Traders"}})
    assert LocalJsonStorage(path).get(["client_profile"]) == {
        "client_profile": {"client_name": "Sharma Traders"}
    }
