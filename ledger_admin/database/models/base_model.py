from typing import Any, Dict, List, Optional, Type, TypeVar
from uuid6 import uuid7
from datetime import datetime, timezone

from ledger_admin.database.store import DocumentStore, Filters, Sort

T = TypeVar("T", bound="BaseModel")


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class BaseModel:
    _collection: Optional[str] = None
    _allowed_fields: set[str] = set()

    def __init__(self, **kwargs: Any) -> None:
        for key, value in kwargs.items():
            setattr(self, key, value)

    @classmethod
    def from_document(cls: Type[T], document: Optional[Dict[str, Any]]) -> Optional[T]:
        if not document:
            return None
        return cls(**document)

    @classmethod
    def _filter_fields(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in data.items() if not cls._allowed_fields or k in cls._allowed_fields}

    @classmethod
    def build_document(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Returns the document `create` would store, without writing it."""
        if not cls._collection:
            raise ValueError("Model must define _collection")
        document = cls._filter_fields(data)
        document["id"] = str(data.get("id") or uuid7())
        document.setdefault("created_at", utc_now())
        document.setdefault("updated_at", None)
        return document

    @classmethod
    def create(cls: Type[T], store: DocumentStore, data: Dict[str, Any]) -> T:
        saved = store.insert(cls._collection, cls.build_document(data))
        return cls.from_document(saved)

    @classmethod
    def bulk_create(cls: Type[T], store: DocumentStore, data_list: List[Dict[str, Any]]) -> List[T]:
        """Inserts every record or none of them."""
        if not data_list:
            return []
        saved = store.insert_many(cls._collection, [cls.build_document(d) for d in data_list])
        return [cls.from_document(d) for d in saved]

    @classmethod
    def update(cls: Type[T], store: DocumentStore, record_id: str, data: Dict[str, Any]) -> Optional[T]:
        changes = {k: v for k, v in cls._filter_fields(data).items() if k not in ("id", "created_at")}
        changes["updated_at"] = utc_now()
        return cls.from_document(store.update_one(cls._collection, {"id": record_id}, changes))

    @classmethod
    def find_all(cls: Type[T], store: DocumentStore, filters: Filters = None, sort: Sort = None,
                 limit: Optional[int] = None) -> List[T]:
        documents = store.find(cls._collection, filters, sort=sort, limit=limit)
        return [cls.from_document(d) for d in documents if d]

    @classmethod
    def find_by_id(cls: Type[T], store: DocumentStore, record_id: str) -> Optional[T]:
        if not record_id:
            return None
        return cls.from_document(store.find_one(cls._collection, {"id": str(record_id)}))

    @classmethod
    def find_one(cls: Type[T], store: DocumentStore, filters: Filters) -> Optional[T]:
        return cls.from_document(store.find_one(cls._collection, filters))

    @classmethod
    def count(cls, store: DocumentStore, filters: Filters = None) -> int:
        return store.count(cls._collection, filters)

    @classmethod
    def delete(cls, store: DocumentStore, record_id: str) -> bool:
        return store.delete_one(cls._collection, {"id": str(record_id)}) > 0

    @classmethod
    def delete_all(cls, store: DocumentStore) -> int:
        return store.delete_many(cls._collection)

    def to_dict(self) -> Dict[str, Any]:
        fields = ["id", *sorted(self._allowed_fields), "created_at", "updated_at"]
        return {field: getattr(self, field, None) for field in fields}
