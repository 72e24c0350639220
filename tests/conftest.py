from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import count
from pathlib import Path
import uuid

import pytest
from fastapi.testclient import TestClient
from google.api_core.exceptions import Aborted
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from storefront.config import get_db, get_pricing_policy
from storefront.core.auth import get_principal
from storefront.schemas.principal import Principal
from storefront.schemas.product import Product
from storefront.services.pricing import PricingPolicy

# ---------- in-memory Firestore double ----------
_BASE_TS = datetime(2024, 1, 1, tzinfo=timezone.utc)
_tick = count()


def _resolve(value):
    if value is SERVER_TIMESTAMP:
        return _BASE_TS + timedelta(seconds=next(_tick))
    return value


class FakeSnapshot:
    def __init__(self, reference, data):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class FakeDocument:
    def __init__(self, db, collection, doc_id):
        self._db = db
        self._collection = collection
        self.id = doc_id

    @property
    def key(self):
        return (self._collection, self.id)

    @property
    def _store(self):
        return self._db.data.setdefault(self._collection, {})

    def get(self, transaction=None):
        if transaction is not None:
            transaction._track(self)
        return FakeSnapshot(self, self._store.get(self.id))

    def set(self, data, merge=False):
        resolved = {k: _resolve(v) for k, v in data.items()}
        if merge and self.id in self._store:
            self._store[self.id].update(resolved)
        else:
            self._store[self.id] = resolved
        self._db.bump(self.key)

    def update(self, patch):
        if self.id not in self._store:
            raise KeyError(self.id)
        self._store[self.id].update({k: _resolve(v) for k, v in patch.items()})
        self._db.bump(self.key)

    def delete(self):
        self._store.pop(self.id, None)
        self._db.bump(self.key)


class FakeTransaction:
    """
    Optimistic transaction with the hooks `firestore.transactional` drives:
    reads record the document version, writes are buffered until commit and a
    commit over a document changed since it was read raises Aborted (retried).
    """

    def __init__(self, db, max_attempts=5, read_only=False):
        self._db = db
        self._max_attempts = max_attempts
        self._read_only = read_only
        self._clean_up()

    @property
    def in_progress(self):
        return self._id is not None

    def _clean_up(self):
        self._id = None
        self._reads = {}
        self._writes = []

    def _begin(self, retry_id=None):
        self._id = uuid.uuid4().bytes

    def _rollback(self):
        self._clean_up()

    def _commit(self):
        stale = [key for key, version in self._reads.items() if self._db.versions.get(key, 0) != version]
        writes = self._writes
        self._clean_up()
        if stale:
            raise Aborted(f"Documents changed during transaction: {stale}")
        for write in writes:
            write()
        return []

    def _track(self, ref):
        self._reads.setdefault(ref.key, self._db.versions.get(ref.key, 0))

    def set(self, ref, data, merge=False):
        self._writes.append(lambda: ref.set(data, merge=merge))

    def update(self, ref, patch):
        self._writes.append(lambda: ref.update(patch))

    def delete(self, ref):
        self._writes.append(ref.delete)


class FakeQuery:
    def __init__(self, db, collection, filters=(), limit=None):
        self._db = db
        self._collection = collection
        self._filters = tuple(filters)
        self._limit = limit

    def where(self, filter):
        assert filter.op_string == "==", "only equality filters are used"
        return FakeQuery(self._db, self._collection, self._filters + (filter,), self._limit)

    def limit(self, n):
        return FakeQuery(self._db, self._collection, self._filters, n)

    def stream(self):
        out = []
        for doc_id, data in list(self._db.data.get(self._collection, {}).items()):
            if all(data.get(f.field_path) == f.value for f in self._filters):
                out.append(FakeSnapshot(FakeDocument(self._db, self._collection, doc_id), data))
        return iter(out[: self._limit] if self._limit is not None else out)


class FakeCollection(FakeQuery):
    def document(self, doc_id=None):
        return FakeDocument(self._db, self._collection, doc_id or uuid.uuid4().hex[:20])


class FakeFirestore:
    def __init__(self):
        self.data = {}
        self.versions = {}

    def collection(self, name):
        return FakeCollection(self, name)

    def transaction(self, **kwargs):
        return FakeTransaction(self, **kwargs)

    def bump(self, key):
        self.versions[key] = self.versions.get(key, 0) + 1


# ---------- fixtures ----------
def pytest_collection_modifyitems(config, items):
    for item in items:
        if "/api/" in str(Path(item.fspath)):
            item.add_marker(pytest.mark.api)


@pytest.fixture()
def db():
    return FakeFirestore()


@pytest.fixture()
def policy():
    return PricingPolicy(
        free_shipping_threshold=Decimal("1000"),
        flat_shipping_cost=Decimal("100"),
        tax_rate=Decimal("0.18"),
        currency="INR",
    )


@pytest.fixture()
def make_product():
    def _make(pid="prod-1", price=500, name=None, category="Electronics", **extra):
        return Product(id=pid, name=name or f"Product {pid}", price=price, category=category, **extra)
    return _make


@pytest.fixture()
def seed_product(db):
    """Insert a catalog document and return its id."""
    def _seed(pid, price, name=None, category="Electronics", **extra):
        doc = {
            "id": pid,
            "name": name or f"Product {pid}",
            "price": price,
            "category": category,
            "image": f"https://img.example/{pid}.jpg",
            "description": "",
            "is_new": False,
            "is_sale": False,
            "is_deleted": False,
            "created_at": SERVER_TIMESTAMP,
        }
        doc.update(extra)
        db.collection("products").document(pid).set(doc)
        return pid
    return _seed


@pytest.fixture()
def app(db, policy):
    from storefront.main import app as fastapi_app

    fastapi_app.dependency_overrides[get_db] = lambda: db
    fastapi_app.dependency_overrides[get_pricing_policy] = lambda: policy
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def login(app):
    """Sign the test client in as the given principal."""
    def _login(uid="user-1", role="user", **extra):
        principal = Principal(uid=uid, role=role, **extra)
        app.dependency_overrides[get_principal] = lambda: principal
        return principal
    return _login


@pytest.fixture()
def client(app):
    return TestClient(app)


@pytest.fixture()
def checkout_payload():
    return {
        "shipping": {
            "full_name": "Asha Verma",
            "email": "asha@example.com",
            "phone": "9876543210",
            "address": "12 MG Road, Flat 4B",
            "city": "Pune",
            "state": "Maharashtra",
            "postal_code": "411001",
        },
        "payment_method": "upi",
        "upi_id": "asha@okbank",
    }
