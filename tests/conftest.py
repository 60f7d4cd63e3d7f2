"""
Shared fixtures: in-memory store, payment gateway and blob store, an app
client over ASGITransport, and admin tokens minted with python-jose.
"""
import copy
import os
import time
from typing import Any

# Settings are cached on first use, so the environment goes first.
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["AUTH_JWKS_URI"] = ""
os.environ["AUTH_AUDIENCE"] = "https://bakery.test/api"
os.environ["AUTH_ISSUER"] = "https://auth.bakery.test/"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["METRICS_ENABLED"] = "false"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_123"
os.environ["S3_KEY"] = "test-key"
os.environ["S3_SECRET"] = "test-secret"
os.environ["BUCKET_NAME"] = "test-bucket"

import httpx
import pytest
import pytest_asyncio
from bson import ObjectId
from jose import jwt

from bakery_api.core.config import get_settings
from bakery_api.core.errors import PersistenceError
from bakery_api.db.database import get_store, serialize_document
from bakery_api.main import app
from bakery_api.services.blobs import get_blob_store
from bakery_api.services.orders import OrderIntakeService, get_order_service
from bakery_api.services.payments import ChargeResult, get_payment_gateway

settings = get_settings()

FIXED_ORDER_ID = "AbC123xYz9"


# ─── Fakes ─────────────────────────────────────────────────────────────────────

def _matches(doc: dict[str, Any], filter: dict[str, Any]) -> bool:
    for key, expected in filter.items():
        if isinstance(expected, dict) and "$in" in expected:
            if doc.get(key) not in expected["$in"]:
                return False
        elif doc.get(key) != expected:
            return False
    return True


class FakeStore:
    """In-memory DocumentStore. Add an operation name to ``failing`` to make it raise."""

    def __init__(self):
        self.collections: dict[str, list[dict[str, Any]]] = {}
        self.failing: set[str] = set()

    def _guard(self, op: str) -> None:
        if op in self.failing:
            raise PersistenceError()

    def docs(self, collection: str) -> list[dict[str, Any]]:
        return self.collections.setdefault(collection, [])

    async def insert(self, collection, record):
        self._guard("insert")
        doc = copy.deepcopy(record)
        doc.setdefault("_id", ObjectId())
        self.docs(collection).append(doc)
        return doc["_id"]

    async def find(self, collection, filter=None, projection=None):
        self._guard("find")
        hidden = {k for k, v in (projection or {}).items() if not v}
        found = []
        for doc in self.docs(collection):
            if _matches(doc, filter or {}):
                found.append({k: copy.deepcopy(v) for k, v in doc.items() if k not in hidden})
        return [serialize_document(d) for d in found]

    async def delete_one(self, collection, filter):
        self._guard("delete_one")
        docs = self.docs(collection)
        for i, doc in enumerate(docs):
            if _matches(doc, filter):
                del docs[i]
                return 1
        return 0

    async def update_one(self, collection, filter, patch=None, upsert=False, unset=()):
        self._guard("update_one")
        for doc in self.docs(collection):
            if _matches(doc, filter):
                doc.update(patch or {})
                for field in unset:
                    doc.pop(field, None)
                return 1
        if upsert:
            doc = {"_id": ObjectId(), **filter, **(patch or {})}
            self.docs(collection).append(doc)
        return 0

    async def ping(self):
        self._guard("ping")

    async def close(self):
        pass


class FakeGateway:
    def __init__(self):
        self.result = ChargeResult(status="succeeded", masked_last4="4242", reference="pi_test_1")
        self.error: Exception | None = None
        self.calls: list[tuple] = []

    async def charge(self, amount_minor_units, currency, method_token, receipt_email):
        self.calls.append((amount_minor_units, currency, method_token, receipt_email))
        if self.error is not None:
            raise self.error
        return self.result


class FakeBlobStore:
    def __init__(self):
        self.objects: dict[str, bytes] = {}

    async def upload(self, body, key, content_type):
        self.objects[key] = body
        return key

    async def exists(self, key):
        return key in self.objects

    async def delete(self, key):
        self.objects.pop(key, None)

    async def signed_url(self, key):
        return f"https://signed.bakery.test/{key}"


# ─── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def blobs():
    return FakeBlobStore()


@pytest.fixture
def order_id():
    return FIXED_ORDER_ID


@pytest_asyncio.fixture
async def client(store, gateway, blobs, order_id):
    app.state.store = store
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_blob_store] = lambda: blobs
    app.dependency_overrides[get_order_service] = lambda: OrderIntakeService(
        store, gateway, id_factory=lambda: order_id
    )
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def make_token(**overrides: Any) -> str:
    now = int(time.time())
    claims = {
        "sub": "auth0|admin",
        "aud": settings.AUTH_AUDIENCE,
        "iss": settings.AUTH_ISSUER,
        "iat": now,
        "exp": now + 3600,
    }
    claims.update(overrides)
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token()}"}


# ─── Payloads ──────────────────────────────────────────────────────────────────

@pytest.fixture
def cash_order():
    return {
        "name": "Jane Smith",
        "deliveryMethod": "Pick Up",
        "paymentMethod": "In Person",
        "dateForOrder": "Jan 5, 2024",
        "email": "jane@example.com",
        "phone": "555-123-4567",
        "total": [10, 1, 11],
        "cart": [{"item": "Vanilla Cupcake", "qty": 2}],
    }


@pytest.fixture
def online_order(cash_order):
    return {**cash_order, "paymentMethod": "Online Payment", "id": "pm_card_visa"}


@pytest.fixture
def cake_order():
    return {
        "orderType": "Cake",
        "orderDetails": ["Standard Cake", "8 Inches", "Blue, White", "Happy birthday Jane!"],
        "name": "Jane Smith",
        "deliveryMethod": "Delivery",
        "dateForOrder": "Feb 14, 2024",
        "address": ["12 Main St.", "Apt 4", "Springfield", "IL", "62701"],
        "email": "jane@example.com",
        "phone": "(555) 123-4567",
    }


@pytest.fixture
def catering_order():
    return {
        "name": "Jane Smith",
        "eventType": "Birthday Party",
        "guestNum": "40",
        "deliveryMethod": "Delivery",
        "dateForOrder": "Mar 20, 2024",
        "address": ["12 Main St.", "Springfield", "IL", "62701"],
        "email": "jane@example.com",
        "phone": "555-123-4567",
        "message": "Please include napkins and plates.",
    }
