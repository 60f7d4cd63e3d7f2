"""
DocumentStore against a stub pymongo client

The stub collection BSON-encodes what it is given, the way the driver does
before any I/O, so encoding faults surface exactly where they would in
production.
"""
import logging
from types import SimpleNamespace

import bson
import pytest
from bson import ObjectId
from pymongo.errors import ServerSelectionTimeoutError

from bakery_api.core.errors import PersistenceError
from bakery_api.db.database import DocumentStore, id_filter, serialize_document
from bakery_api.schemas.order import SubmissionKind
from bakery_api.services.orders import HIDE_CARD, OrderIntakeService


class StubCursor:
    def __init__(self, docs):
        self._docs = docs

    async def to_list(self):
        return self._docs


class StubCollection:
    def __init__(self):
        self.calls: list[tuple] = []
        self.docs: list[dict] = []
        self.error: Exception | None = None

    def _fail(self):
        if self.error is not None:
            raise self.error

    async def insert_one(self, record):
        self.calls.append(("insert_one", record))
        self._fail()
        bson.encode(record)
        record.setdefault("_id", ObjectId())
        self.docs.append(record)
        return SimpleNamespace(inserted_id=record["_id"])

    def find(self, filter, projection=None):
        self.calls.append(("find", filter, projection))
        self._fail()
        return StubCursor(self.docs)

    async def delete_one(self, filter):
        self.calls.append(("delete_one", filter))
        self._fail()
        return SimpleNamespace(deleted_count=1)

    async def update_one(self, filter, update, upsert=False):
        self.calls.append(("update_one", filter, update, upsert))
        self._fail()
        bson.encode(update)
        return SimpleNamespace(matched_count=1)


class StubClient:
    def __init__(self):
        self.collections: dict[str, StubCollection] = {}
        self.closed = False
        self.admin = SimpleNamespace(command=self._command)

    async def _command(self, name):
        return {"ok": 1.0}

    def __getitem__(self, db_name):
        return StubDatabase(self)

    def collection(self, name) -> StubCollection:
        return self.collections.setdefault(name, StubCollection())

    async def close(self):
        self.closed = True


class StubDatabase:
    def __init__(self, client: StubClient):
        self._client = client

    def __getitem__(self, name):
        return self._client.collection(name)


@pytest.fixture
def mongo():
    return StubClient()


@pytest.fixture
def doc_store(mongo):
    return DocumentStore(mongo, "therecdose")


# ─── Helpers ───────────────────────────────────────────────────────────────────
def test_id_filter_matches_object_ids_and_order_ids():
    oid = ObjectId()
    assert id_filter(str(oid)) == {"_id": oid}
    assert id_filter("AbC123xYz9") == {"_id": "AbC123xYz9"}


def test_serialize_document_converts_nested_object_ids():
    oid, other = ObjectId(), ObjectId()
    doc = {"_id": oid, "items": [{"ref": other}, 3], "meta": {"owner": oid}}
    assert serialize_document(doc) == {
        "_id": str(oid),
        "items": [{"ref": str(other)}, 3],
        "meta": {"owner": str(oid)},
    }


# ─── Operations ────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_insert_returns_id(doc_store):
    inserted = await doc_store.insert("regularOrders", {"_id": "AbC123xYz9", "cart": [{"qty": 2}]})
    assert inserted == "AbC123xYz9"


@pytest.mark.asyncio
async def test_find_passes_filter_and_projection(doc_store, mongo):
    oid = ObjectId()
    mongo.collection("menu").docs.append({"_id": oid, "itemName": "Vanilla Bean"})
    docs = await doc_store.find("menu", {"_id": oid}, HIDE_CARD)
    assert docs == [{"_id": str(oid), "itemName": "Vanilla Bean"}]
    assert mongo.collection("menu").calls == [("find", {"_id": oid}, {"last4": 0})]


@pytest.mark.asyncio
async def test_update_builds_set_and_unset(doc_store, mongo):
    await doc_store.update_one("otherSettings", {"name": "OrderMin"}, {"minimum": "20"}, upsert=True)
    await doc_store.update_one("menu", {"_id": "x"}, unset=["imageKey"])
    assert mongo.collection("otherSettings").calls == [
        ("update_one", {"name": "OrderMin"}, {"$set": {"minimum": "20"}}, True)
    ]
    assert mongo.collection("menu").calls == [
        ("update_one", {"_id": "x"}, {"$unset": {"imageKey": ""}}, False)
    ]


@pytest.mark.asyncio
async def test_delete_and_ping_and_close(doc_store, mongo):
    assert await doc_store.delete_one("faq", {"_id": "x"}) == 1
    await doc_store.ping()
    await doc_store.close()
    assert mongo.closed


# ─── Faults ────────────────────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_driver_errors_become_persistence_errors(doc_store, mongo, caplog):
    mongo.collection("menu").error = ServerSelectionTimeoutError("no servers")
    caplog.set_level(logging.ERROR, logger="bakery_api.db.database")
    with pytest.raises(PersistenceError):
        await doc_store.find("menu")
    with pytest.raises(PersistenceError):
        await doc_store.insert("menu", {"itemName": "Vanilla Bean"})
    with pytest.raises(PersistenceError):
        await doc_store.delete_one("menu", {"_id": "x"})
    with pytest.raises(PersistenceError):
        await doc_store.update_one("menu", {"_id": "x"}, {"price": "3"})
    assert "no servers" in caplog.text


@pytest.mark.parametrize(
    "cart",
    [
        [{"item": "Vanilla Cupcake", "qty": 10**20}],
        [{"item\x00name": "Vanilla Cupcake"}],
    ],
)
@pytest.mark.asyncio
async def test_unencodable_documents_become_persistence_errors(doc_store, cart):
    with pytest.raises(PersistenceError):
        await doc_store.insert("regularOrders", {"_id": "AbC123xYz9", "cart": cart})


@pytest.mark.asyncio
async def test_unencodable_cart_after_charge_is_logged(doc_store, gateway, order_id, online_order, caplog):
    payload = {**online_order, "cart": [{"item": "Vanilla Cupcake", "qty": 10**20}]}
    service = OrderIntakeService(doc_store, gateway, id_factory=lambda: order_id)
    caplog.set_level(logging.ERROR, logger="bakery_api.services.orders")
    with pytest.raises(PersistenceError):
        await service.submit(SubmissionKind.ONLINE, payload)
    assert len(gateway.calls) == 1
    assert "pi_test_1" in caplog.text
