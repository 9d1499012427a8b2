# tests/test_memory_store.py

"""
Tests for the in-memory document store and the model layer on top of it.
"""

import pytest

from ledger_admin.database.models.client import Client, split_client_name
from ledger_admin.database.models.transaction import Transaction
from ledger_admin.database.store import DESCENDING, StoreError


def test_find_with_filters_sort_and_limit(store):
    store.insert_many("transactions", [
        {"id": "a", "index": 2, "center_name": "A"},
        {"id": "b", "index": 7, "center_name": "B"},
        {"id": "c", "index": 5, "center_name": "A"},
    ])
    assert [d["id"] for d in store.find("transactions", {"center_name": "A"})] == ["a", "c"]
    top = store.find("transactions", sort=[("index", DESCENDING)], limit=1)
    assert top[0]["id"] == "b"
    assert store.count("transactions", {"center_name": "A"}) == 2


def test_documents_are_copied(store):
    doc = {"id": "x", "name": "Paris"}
    store.insert("centers", doc)
    doc["name"] = "changed"
    fetched = store.find_one("centers", {"id": "x"})
    fetched["name"] = "also changed"
    assert store.find_one("centers", {"id": "x"})["name"] == "Paris"


def test_update_and_delete(store):
    store.insert("centers", {"id": "x", "name": "Paris"})
    updated = store.update_one("centers", {"id": "x"}, {"name": "Lyon", "id": "ignored"})
    assert updated == {"id": "x", "name": "Lyon"}
    assert store.update_one("centers", {"id": "missing"}, {"name": "n"}) is None
    assert store.delete_one("centers", {"id": "x"}) == 1
    assert store.delete_one("centers", {"id": "x"}) == 0


def test_insert_many_is_all_or_nothing(store):
    store.insert("clients", {"id": "dup"})
    with pytest.raises(StoreError):
        store.insert_many("clients", [{"id": "new"}, {"id": "dup"}])
    assert store.find_one("clients", {"id": "new"}) is None


def test_unknown_collection_is_rejected(store):
    with pytest.raises(StoreError):
        store.find("ledgers")


def test_last_index_defaults_to_zero(store):
    assert Transaction.last_index(store) == 0
    Transaction.create(store, {"index": 4})
    Transaction.create(store, {"index": 9})
    assert Transaction.last_index(store) == 9


def test_client_name_split_uses_first_word_as_last_name():
    assert split_client_name("Doe John Paul") == ("John Paul", "Doe")
    assert split_client_name("Cher") == ("Cher", "Cher")


def test_client_reference_reuses_or_creates(store):
    existing = Client.create(store, {"first_name": "John", "last_name": "Doe", "email": "j@d.com"})

    client_id, client = Client.resolve_reference(store, existing.id)
    assert client_id == existing.id

    client_id, client = Client.resolve_reference(store, "Doe John")
    assert client_id == existing.id

    client_id, client = Client.resolve_reference(store, "Smith Anna")
    assert client_id != existing.id
    assert client.email == "anna.smith@example.com"
    assert Client.count(store) == 2
