"""
Local JSON-backed stand-in for the Firestore client.

Used when USE_MOCK_DB=true so the API can run without Firebase credentials.
Only the subset of the client API the services use is provided:

    db.collection(name).document(id).set/get/update
    db.collection(name).where(field, op, value).order_by(field).limit(n).stream()
    db.collections()
    db.transaction() + doc_ref.get(transaction=...)
"""

import copy
import json
import logging
import os
import threading
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional

logger = logging.getLogger(__name__)

ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"

_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": lambda a, b: a == b,
    "!=": lambda a, b: a != b,
    "<": lambda a, b: a is not None and a < b,
    "<=": lambda a, b: a is not None and a <= b,
    ">": lambda a, b: a is not None and a > b,
    ">=": lambda a, b: a is not None and a >= b,
    "in": lambda a, b: a in b,
    "not-in": lambda a, b: a not in b,
    "array_contains": lambda a, b: isinstance(a, list) and b in a,
}


def _encode(value: Any):
    if isinstance(value, datetime):
        return {"__datetime__": value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode(obj: Dict[str, Any]):
    if "__datetime__" in obj and len(obj) == 1:
        return datetime.fromisoformat(obj["__datetime__"])
    return obj


class MockDocumentSnapshot:
    def __init__(self, doc_id: str, data: Optional[Dict[str, Any]]):
        self.id = doc_id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field: str) -> Any:
        return (self._data or {}).get(field)


class MockDocumentReference:
    def __init__(self, store: "MockFirestore", collection: str, doc_id: str):
        self._store = store
        self._collection = collection
        self.id = doc_id

    def get(self, transaction: Optional["MockTransaction"] = None) -> MockDocumentSnapshot:
        with self._store.lock:
            data = self._store.data.get(self._collection, {}).get(self.id)
            return MockDocumentSnapshot(self.id, copy.deepcopy(data))

    def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        with self._store.lock:
            docs = self._store.data.setdefault(self._collection, {})
            if merge and self.id in docs:
                docs[self.id].update(copy.deepcopy(data))
            else:
                docs[self.id] = copy.deepcopy(data)
            self._store.flush()

    def update(self, data: Dict[str, Any]) -> None:
        with self._store.lock:
            docs = self._store.data.get(self._collection, {})
            if self.id not in docs:
                raise KeyError(f"No document to update: {self._collection}/{self.id}")
            docs[self.id].update(copy.deepcopy(data))
            self._store.flush()

    def delete(self) -> None:
        with self._store.lock:
            self._store.data.get(self._collection, {}).pop(self.id, None)
            self._store.flush()


class MockTransaction:
    """
    Serializes a read-modify-write against the store.

    The store lock is held for the whole callback, so no other writer can
    land between the callback's reads and its buffered writes.
    """

    def __init__(self, store: "MockFirestore"):
        self._store = store
        self._writes: List[tuple] = []

    def set(self, reference: MockDocumentReference, data: Dict[str, Any], merge: bool = False) -> None:
        self._writes.append(("set", reference, data, merge))

    def update(self, reference: MockDocumentReference, data: Dict[str, Any]) -> None:
        self._writes.append(("update", reference, data, False))

    def run(self, callback: Callable, *args, **kwargs):
        with self._store.lock:
            self._writes = []
            result = callback(self, *args, **kwargs)
            for operation, reference, data, merge in self._writes:
                if operation == "set":
                    reference.set(data, merge=merge)
                else:
                    reference.update(data)
            self._writes = []
            return result


class MockQuery:
    def __init__(
        self,
        store: "MockFirestore",
        collection: str,
        filters: Optional[List[tuple]] = None,
        orders: Optional[List[tuple]] = None,
        limit_count: Optional[int] = None,
    ):
        self._store = store
        self._collection = collection
        self._filters = filters or []
        self._orders = orders or []
        self._limit = limit_count

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        if op_string not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {op_string}")
        return MockQuery(self._store, self._collection, self._filters + [(field_path, op_string, value)], self._orders, self._limit)

    def order_by(self, field_path: str, direction: str = ASCENDING) -> "MockQuery":
        return MockQuery(self._store, self._collection, self._filters, self._orders + [(field_path, direction)], self._limit)

    def limit(self, count: int) -> "MockQuery":
        return MockQuery(self._store, self._collection, self._filters, self._orders, count)

    def stream(self) -> Iterator[MockDocumentSnapshot]:
        with self._store.lock:
            items = [
                (doc_id, copy.deepcopy(data))
                for doc_id, data in self._store.data.get(self._collection, {}).items()
            ]

        for field_path, op_string, value in self._filters:
            compare = _OPERATORS[op_string]
            items = [(doc_id, data) for doc_id, data in items if compare(data.get(field_path), value)]

        # Apply sort keys last-to-first so the first order_by wins
        for field_path, direction in reversed(self._orders):
            present = [item for item in items if item[1].get(field_path) is not None]
            missing = [item for item in items if item[1].get(field_path) is None]
            present.sort(key=lambda item: item[1][field_path], reverse=(direction == DESCENDING))
            items = present + missing

        if self._limit is not None:
            items = items[: self._limit]

        for doc_id, data in items:
            yield MockDocumentSnapshot(doc_id, data)

    def get(self) -> List[MockDocumentSnapshot]:
        return list(self.stream())


class MockCollectionReference(MockQuery):
    def __init__(self, store: "MockFirestore", collection: str):
        super().__init__(store, collection)
        self.id = collection

    def document(self, document_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._store, self._collection, document_id or uuid.uuid4().hex[:20])


class MockFirestore:
    """
    In-memory document store, optionally persisted to a JSON file after every write.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self.lock = threading.RLock()
        self.data: Dict[str, Dict[str, Dict[str, Any]]] = {}
        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self.data = json.load(f, object_hook=_decode)
            logger.info(f"[MOCK DB] Loaded {sum(len(d) for d in self.data.values())} documents from {path}")

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self.lock:
            return [MockCollectionReference(self, name) for name in self.data]

    def transaction(self) -> MockTransaction:
        return MockTransaction(self)

    def flush(self) -> None:
        if not self.path:
            return
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.data, f, default=_encode, indent=2)


_mock_db: Optional[MockFirestore] = None


def get_mock_db(path: Optional[str] = None) -> MockFirestore:
    global _mock_db
    if _mock_db is None:
        _mock_db = MockFirestore(path)
    return _mock_db
