"""
Document store used by the models.

The application only needs equality filters, an optional sort and limit, and
single/bulk writes over named collections. `MySQLDocumentStore` keeps every
collection in its own table with the document in a JSON column.
"""
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pymysql

from ledger_admin.database.config import database_name
from ledger_admin.database.db_manager import DBManager, normalize_row
from ledger_admin.database.schema import COLLECTIONS, create_schema_statements

logger = logging.getLogger(__name__)

Filters = Optional[Dict[str, Any]]
Sort = Optional[Sequence[Tuple[str, int]]]

ASCENDING = 1
DESCENDING = -1

_FIELD_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


class StoreError(Exception):
    """Raised when the underlying storage fails."""


class DocumentStore:
    """Interface every store implementation provides."""

    def initialize(self) -> None:
        raise NotImplementedError

    def ping(self) -> bool:
        raise NotImplementedError

    def find(self, collection: str, filters: Filters = None, sort: Sort = None,
             limit: Optional[int] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def find_one(self, collection: str, filters: Filters) -> Optional[Dict[str, Any]]:
        found = self.find(collection, filters, limit=1)
        return found[0] if found else None

    def count(self, collection: str, filters: Filters = None) -> int:
        return len(self.find(collection, filters))

    def insert(self, collection: str, document: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    def insert_many(self, collection: str, documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [self.insert(collection, document) for document in documents]

    def update_one(self, collection: str, filters: Filters, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def delete_one(self, collection: str, filters: Filters) -> int:
        raise NotImplementedError

    def delete_many(self, collection: str, filters: Filters = None) -> int:
        raise NotImplementedError

    @staticmethod
    def _check_collection(collection: str) -> str:
        if collection not in COLLECTIONS:
            raise StoreError(f"Unknown collection: {collection}")
        return collection

    @staticmethod
    def _check_field(field: str) -> str:
        if not _FIELD_RE.match(field):
            raise StoreError(f"Invalid field name: {field!r}")
        return field


class MySQLDocumentStore(DocumentStore):

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config
        self.db = DBManager(config)

    # --- lifecycle ---

    def initialize(self) -> None:
        """Creates the database and one table per collection if missing."""

        db_name = database_name(self.config)
        try:
            if db_name:
                self.db.execute_script([f"CREATE DATABASE IF NOT EXISTS `{db_name}`"], db_required=False)
            self.db.execute_script(create_schema_statements())
        except pymysql.MySQLError as e:
            raise StoreError(f"Failed to initialize schema: {e}") from e
        logger.info("Document store initialized (%d collections)", len(COLLECTIONS))

    def ping(self) -> bool:
        try:
            return self.db.execute_query("SELECT 1 AS ok", fetch='one') is not None
        except pymysql.MySQLError as e:
            logger.error("Store ping failed: %s", e)
            return False

    # --- query building ---

    def _where(self, filters: Filters) -> Tuple[str, List[Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        for field, value in (filters or {}).items():
            self._check_field(field)
            if field == 'id':
                clauses.append("id = %s")
                params.append(str(value))
            elif value is None:
                clauses.append(
                    f"(JSON_EXTRACT(doc, '$.{field}') IS NULL"
                    f" OR JSON_TYPE(JSON_EXTRACT(doc, '$.{field}')) = 'NULL')"
                )
            else:
                clauses.append(f"JSON_EXTRACT(doc, '$.{field}') = CAST(%s AS JSON)")
                params.append(json.dumps(value))
        where_sql = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return where_sql, params

    def _order(self, sort: Sort) -> str:
        if not sort:
            return ""
        parts = []
        for field, direction in sort:
            self._check_field(field)
            column = "id" if field == 'id' else f"JSON_EXTRACT(doc, '$.{field}')"
            parts.append(f"{column} {'DESC' if direction == DESCENDING else 'ASC'}")
        return " ORDER BY " + ", ".join(parts)

    @staticmethod
    def _decode(row: Dict[str, Any]) -> Dict[str, Any]:
        doc = row['doc']
        return json.loads(doc) if isinstance(doc, (str, bytes)) else doc

    @staticmethod
    def _encode(document: Dict[str, Any]) -> str:
        return json.dumps(normalize_row(document))

    # --- reads ---

    def find(self, collection, filters=None, sort=None, limit=None):
        table = self._check_collection(collection)
        where_sql, params = self._where(filters)
        query = f"SELECT doc FROM `{table}`{where_sql}{self._order(sort)}"
        if limit is not None:
            query += " LIMIT %s"
            params.append(int(limit))
        try:
            rows = self.db.execute_query(query, tuple(params), fetch='all') or []
        except pymysql.MySQLError as e:
            raise StoreError(f"Failed to fetch from {table}: {e}") from e
        return [self._decode(r) for r in rows]

    def count(self, collection, filters=None):
        table = self._check_collection(collection)
        where_sql, params = self._where(filters)
        try:
            row = self.db.execute_query(f"SELECT COUNT(*) AS total FROM `{table}`{where_sql}", tuple(params), fetch='one')
        except pymysql.MySQLError as e:
            raise StoreError(f"Failed to count {table}: {e}") from e
        return int((row or {}).get('total', 0))

    # --- writes ---

    def insert(self, collection, document):
        table = self._check_collection(collection)
        if 'id' not in document:
            raise StoreError("Documents must carry an id")
        try:
            self.db.execute_write_query(
                f"INSERT INTO `{table}` (id, doc) VALUES (%s, %s)",
                (str(document['id']), self._encode(document)),
            )
        except pymysql.MySQLError as e:
            raise StoreError(f"Failed to insert into {table}: {e}") from e
        return normalize_row(document)

    def insert_many(self, collection, documents):
        table = self._check_collection(collection)
        documents = [normalize_row(d) for d in documents]
        if not documents:
            return []
        if any('id' not in d for d in documents):
            raise StoreError("Documents must carry an id")
        try:
            self.db.execute_bulk_write_query(
                f"INSERT INTO `{table}` (id, doc) VALUES (%s, %s)",
                [(str(d['id']), json.dumps(d)) for d in documents],
            )
        except pymysql.MySQLError as e:
            raise StoreError(f"Failed to bulk insert into {table}: {e}") from e
        return documents

    def update_one(self, collection, filters, changes):
        table = self._check_collection(collection)
        current = self.find_one(table, filters)
        if current is None:
            return None
        updated = {**current, **normalize_row(changes), 'id': current['id']}
        try:
            self.db.execute_write_query(
                f"UPDATE `{table}` SET doc = %s WHERE id = %s",
                (json.dumps(updated), current['id']),
            )
        except pymysql.MySQLError as e:
            raise StoreError(f"Failed to update {table}: {e}") from e
        return updated

    def delete_one(self, collection, filters):
        table = self._check_collection(collection)
        current = self.find_one(table, filters)
        if current is None:
            return 0
        try:
            return self.db.execute_write_query(f"DELETE FROM `{table}` WHERE id = %s", (current['id'],)) or 0
        except pymysql.MySQLError as e:
            raise StoreError(f"Failed to delete from {table}: {e}") from e

    def delete_many(self, collection, filters=None):
        table = self._check_collection(collection)
        where_sql, params = self._where(filters)
        try:
            return self.db.execute_write_query(f"DELETE FROM `{table}`{where_sql}", tuple(params)) or 0
        except pymysql.MySQLError as e:
            raise StoreError(f"Failed to delete from {table}: {e}") from e
