import copy
import threading
from typing import Any, Dict, List

from ledger_admin.database.db_manager import normalize_row
from ledger_admin.database.store import DESCENDING, DocumentStore, StoreError


class MemoryDocumentStore(DocumentStore):
    """
    Process-local store with the same semantics as MySQLDocumentStore.
    Used for local development and tests. Documents are copied on the way in
    and out so callers never share state with the store.
    """

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def initialize(self) -> None:
        from ledger_admin.database.schema import COLLECTIONS

        with self._lock:
            for name in COLLECTIONS:
                self._collections.setdefault(name, {})

    def ping(self) -> bool:
        return True

    def _table(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(self._check_collection(collection), {})

    def _matches(self, document: Dict[str, Any], filters) -> bool:
        for field, value in (filters or {}).items():
            self._check_field(field)
            if document.get(field) != value:
                return False
        return True

    def find(self, collection, filters=None, sort=None, limit=None):
        with self._lock:
            found: List[Dict[str, Any]] = [
                copy.deepcopy(doc) for doc in self._table(collection).values() if self._matches(doc, filters)
            ]
        # stable multi-key sort: apply keys last to first
        for field, direction in reversed(list(sort or [])):
            self._check_field(field)
            present = [d for d in found if d.get(field) is not None]
            missing = [d for d in found if d.get(field) is None]
            present.sort(key=lambda d: d[field], reverse=direction == DESCENDING)
            found = present + missing if direction == DESCENDING else missing + present
        if limit is not None:
            found = found[:int(limit)]
        return found

    def insert(self, collection, document):
        if 'id' not in document:
            raise StoreError("Documents must carry an id")
        document = normalize_row(document)
        with self._lock:
            table = self._table(collection)
            if document['id'] in table:
                raise StoreError(f"Duplicate id in {collection}: {document['id']}")
            table[document['id']] = copy.deepcopy(document)
        return document

    def insert_many(self, collection, documents):
        documents = [normalize_row(d) for d in documents]
        if any('id' not in d for d in documents):
            raise StoreError("Documents must carry an id")
        with self._lock:
            table = self._table(collection)
            ids = [d['id'] for d in documents]
            if len(set(ids)) != len(ids) or any(i in table for i in ids):
                raise StoreError(f"Duplicate id in {collection}")
            for document in documents:
                table[document['id']] = copy.deepcopy(document)
        return documents

    def update_one(self, collection, filters, changes):
        with self._lock:
            table = self._table(collection)
            for doc_id, doc in table.items():
                if self._matches(doc, filters):
                    updated = {**doc, **normalize_row(changes), 'id': doc_id}
                    table[doc_id] = copy.deepcopy(updated)
                    return updated
        return None

    def delete_one(self, collection, filters):
        with self._lock:
            table = self._table(collection)
            for doc_id, doc in table.items():
                if self._matches(doc, filters):
                    del table[doc_id]
                    return 1
        return 0

    def delete_many(self, collection, filters=None):
        with self._lock:
            table = self._table(collection)
            doomed = [doc_id for doc_id, doc in table.items() if self._matches(doc, filters)]
            for doc_id in doomed:
                del table[doc_id]
        return len(doomed)
