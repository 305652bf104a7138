import operator
import uuid

import pytest

from firestore_mcp.registry import ProjectRegistry


def _copy(value):
    if isinstance(value, dict):
        return {k: _copy(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_copy(v) for v in value]
    return value


_OPS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "array_contains": lambda field, value: isinstance(field, list) and value in field,
    "array_contains_any": lambda field, value: isinstance(field, list) and any(v in field for v in value),
    "in": lambda field, value: field in value,
    "not-in": lambda field, value: field not in value,
}


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = _copy(data)

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return _copy(self._data)


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    @property
    def path(self):
        return f"{self._collection.id}/{self.id}"

    async def get(self):
        return FakeSnapshot(self.id, self._collection.docs.get(self.id))

    async def set(self, data, merge=False):
        docs = self._collection.docs
        if merge and self.id in docs:
            docs[self.id].update(_copy(data))
        else:
            docs[self.id] = _copy(data)

    async def delete(self):
        self._collection.docs.pop(self.id, None)


class FakeQuery:
    """Evaluates where/order_by/limit in memory the way Firestore would for simple queries."""

    def __init__(self, collection, filters=(), orders=(), count=None):
        self._collection = collection
        self._filters = tuple(filters)
        self._orders = tuple(orders)
        self._count = count

    def where(self, *, filter):
        return FakeQuery(self._collection, self._filters + (filter,), self._orders, self._count)

    def order_by(self, field_path, direction="ASCENDING"):
        return FakeQuery(self._collection, self._filters, self._orders + ((field_path, direction),), self._count)

    def limit(self, count):
        return FakeQuery(self._collection, self._filters, self._orders, count)

    async def get(self):
        items = list(self._collection.docs.items())
        for f in self._filters:
            items = [
                (doc_id, data) for doc_id, data in items
                if f.field_path in data and _OPS[f.op_string](data[f.field_path], f.value)
            ]
        for field_path, _ in self._orders:
            items = [(doc_id, data) for doc_id, data in items if field_path in data]
        for field_path, direction in reversed(self._orders):
            items.sort(key=lambda item: item[1][field_path], reverse=direction == "DESCENDING")
        if self._count:
            items = items[: self._count]
        return [FakeSnapshot(doc_id, data) for doc_id, data in items]


class FakeCollection(FakeQuery):
    def __init__(self, name):
        super().__init__(self)
        self.id = name
        self.docs = {}

    def document(self, doc_id):
        return FakeDocumentRef(self, doc_id)

    async def add(self, data):
        doc_id = uuid.uuid4().hex[:20]
        self.docs[doc_id] = _copy(data)
        return None, FakeDocumentRef(self, doc_id)


class FakeFirestore:
    def __init__(self):
        self._collections = {}

    def collection(self, name):
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]

    async def collections(self):
        for collection in list(self._collections.values()):
            if collection.docs:
                yield collection

    def seed(self, collection, docs):
        self.collection(collection).docs.update({k: _copy(v) for k, v in docs.items()})


class BrokenFirestore:
    def collection(self, name):
        raise RuntimeError("backend unavailable")


@pytest.fixture
def db():
    return FakeFirestore()


@pytest.fixture
def other_db():
    return FakeFirestore()


@pytest.fixture
def registry(db, other_db):
    return ProjectRegistry({"proj-a": db, "proj-b": other_db}, raw_config="proj-a,proj-b")


@pytest.fixture
def broken_registry():
    return ProjectRegistry({"proj-a": BrokenFirestore()})
