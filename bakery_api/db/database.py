"""
Bakery API — MongoDB document store

A thin collection-oriented wrapper around pymongo's async client. Every
driver or BSON encoding fault is re-raised as PersistenceError so handlers
never see pymongo exceptions. The client is opened once in the application
lifespan and handed to routes through the ``get_store`` dependency.
"""
import logging
from typing import Any, Iterable, Mapping

from bson import ObjectId
from bson.errors import BSONError
from fastapi import Request
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from bakery_api.core.config import get_settings
from bakery_api.core.errors import PersistenceError

settings = get_settings()
logger = logging.getLogger(__name__)

# Encoding faults (NUL in keys, ints over 8 bytes) surface before the driver does any I/O.
STORE_ERRORS = (PyMongoError, BSONError, OverflowError)


def id_filter(raw_id: str) -> dict[str, Any]:
    """
    Order ids are short strings; content documents get ObjectIds from the
    server. Build an ``_id`` filter that matches either.
    """
    if ObjectId.is_valid(raw_id):
        return {"_id": ObjectId(raw_id)}
    return {"_id": raw_id}


def serialize_document(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Mapping):
        return {k: serialize_document(v) for k, v in value.items()}
    if isinstance(value, list):
        return [serialize_document(v) for v in value]
    return value


class DocumentStore:
    def __init__(self, client: AsyncMongoClient, db_name: str):
        self._client = client
        self._db = client[db_name]

    async def insert(self, collection: str, record: dict[str, Any]) -> Any:
        try:
            result = await self._db[collection].insert_one(record)
        except STORE_ERRORS as exc:
            logger.error("Insert into %s failed: %s", collection, exc)
            raise PersistenceError() from exc
        return result.inserted_id

    async def find(
        self,
        collection: str,
        filter: Mapping[str, Any] | None = None,
        projection: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        try:
            cursor = self._db[collection].find(dict(filter or {}), projection)
            docs = await cursor.to_list()
        except STORE_ERRORS as exc:
            logger.error("Query on %s failed: %s", collection, exc)
            raise PersistenceError() from exc
        return [serialize_document(d) for d in docs]

    async def delete_one(self, collection: str, filter: Mapping[str, Any]) -> int:
        try:
            result = await self._db[collection].delete_one(dict(filter))
        except STORE_ERRORS as exc:
            logger.error("Delete from %s failed: %s", collection, exc)
            raise PersistenceError() from exc
        return result.deleted_count

    async def update_one(
        self,
        collection: str,
        filter: Mapping[str, Any],
        patch: Mapping[str, Any] | None = None,
        upsert: bool = False,
        unset: Iterable[str] = (),
    ) -> int:
        update: dict[str, Any] = {}
        if patch:
            update["$set"] = dict(patch)
        fields = list(unset)
        if fields:
            update["$unset"] = {f: "" for f in fields}
        try:
            result = await self._db[collection].update_one(dict(filter), update, upsert=upsert)
        except STORE_ERRORS as exc:
            logger.error("Update on %s failed: %s", collection, exc)
            raise PersistenceError() from exc
        return result.matched_count

    async def ping(self) -> None:
        await self._client.admin.command("ping")

    async def close(self) -> None:
        await self._client.close()


def open_store() -> DocumentStore:
    client = AsyncMongoClient(
        settings.MONGO_URI,
        serverSelectionTimeoutMS=settings.MONGO_TIMEOUT_MS,
    )
    return DocumentStore(client, settings.MONGO_DB)


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store
