"""
Bakery API — Site content (menu, FAQ, recipes, contact messages, settings)

Each operation touches one collection and answers with the collection's
new state, which is what the admin screens render.
"""
import logging
from typing import Any, Callable, Sequence

from bakery_api.core.errors import NotFoundError, ValidationFailed
from bakery_api.db.database import DocumentStore, id_filter
from bakery_api.services.blobs import BlobStore, attach_signed_urls, remove_image
from bakery_api.validation.engine import Rule, validate

logger = logging.getLogger(__name__)

MENU = "menu"
FAQ = "faq"
RECIPES = "recipes"
CONTACT = "contact"
OTHER_SETTINGS = "otherSettings"

IMAGE_COLLECTIONS = {MENU, RECIPES}

STOREFRONT_SETTINGS = [
    "MenuPageToggle",
    "DeliveryAmount",
    "OrderMin",
    "FreeDeliveryMin",
    "DeliveryDate",
    "BlockedDates",
]


def validated(rules: Sequence[Rule], payload: Any, fields: Sequence[str]) -> dict[str, Any]:
    """Validate and keep only the named fields of the sanitized payload."""
    result = validate(rules, payload)
    if not result.ok:
        raise ValidationFailed(result.errors)
    return {f: result.data.get(f) for f in fields}


async def add_document(
    store: DocumentStore, collection: str, rules: Sequence[Rule], payload: Any, fields: Sequence[str]
) -> list[dict[str, Any]]:
    await store.insert(collection, validated(rules, payload, fields))
    return await store.find(collection)


async def find_one(store: DocumentStore, collection: str, doc_id: str) -> dict[str, Any]:
    matches = await store.find(collection, id_filter(doc_id))
    if not matches:
        raise NotFoundError("Item not found")
    return matches[0]


async def delete_document(
    store: DocumentStore, collection: str, doc_id: str, blobs: BlobStore | None = None
) -> list[dict[str, Any]]:
    doc = await find_one(store, collection, doc_id)
    if blobs is not None:
        await remove_image(blobs, doc)
    await store.delete_one(collection, id_filter(doc_id))
    logger.info("Deleted %s from %s", doc_id, collection)
    return await store.find(collection)


async def listing_with_images(store: DocumentStore, blobs: BlobStore, collection: str) -> list[dict[str, Any]]:
    return await attach_signed_urls(blobs, await store.find(collection))


async def update_setting(
    store: DocumentStore,
    name: str,
    rules: Sequence[Rule],
    payload: Any,
    field: str,
    convert: Callable[[Any], Any] | None = None,
) -> list[dict[str, Any]]:
    value = validated(rules, payload, [field])[field]
    if convert is not None:
        value = convert(value)
    await store.update_one(OTHER_SETTINGS, {"name": name}, {field: value}, upsert=True)
    return await store.find(OTHER_SETTINGS, {"name": name})


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1")
