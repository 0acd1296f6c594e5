import json

import pytest

from smartcompare.session import add_manual_product, start_session
from smartcompare.storage import SessionStore


@pytest.fixture
def store(tmp_path):
    return SessionStore(tmp_path / "store.json", key="aiComparisonData")


def test_missing_file_means_no_session(store):
    assert store.load() is None


def test_saved_session_loads_back(store):
    session = add_manual_product(start_session("smartphone", "travel"), "APPLE", {"ram": "8", "price": "999"})
    store.save(session)

    loaded = store.load()
    assert loaded == session
    raw = json.loads(store.path.read_text(encoding="utf-8"))
    assert list(raw) == ["aiComparisonData"]
    assert raw["aiComparisonData"]["catalog"]["attributes"][0]["value_type"] == "number"


def test_other_keys_survive_save_and_clear(store):
    store.path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
    store.save(start_session("laptop", ""))
    store.clear()

    assert store.load() is None
    assert json.loads(store.path.read_text(encoding="utf-8")) == {"theme": "dark"}


@pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]", json.dumps({"aiComparisonData": {"product_type": "x"}})])
def test_unreadable_store_is_treated_as_empty(store, content):
    store.path.write_text(content, encoding="utf-8")
    assert store.load() is None


def test_save_replaces_corrupt_store(store):
    store.path.write_text("{not json", encoding="utf-8")
    session = start_session("elevator", "")
    store.save(session)
    assert store.load() == session
