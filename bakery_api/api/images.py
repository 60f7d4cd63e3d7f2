"""
Bakery API — Image upload/delete for menu items and recipes

The object key is recorded on the document as ``imageKey``; public listings
turn it into a signed URL.
"""
import logging

from fastapi import APIRouter, Depends, File, UploadFile

from bakery_api.core.errors import NotFoundError, ValidationFailed
from bakery_api.db.database import DocumentStore, get_store, id_filter
from bakery_api.services import content
from bakery_api.services.blobs import BlobStore, get_blob_store, image_key, remove_image
from bakery_api.validation.engine import FieldError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["images"])


def _image_collection(collection: str) -> str:
    if collection not in content.IMAGE_COLLECTIONS:
        raise NotFoundError(f"Collection '{collection}' does not hold images")
    return collection


@router.post("/{collection}/uploadImage/{item_id}")
async def upload_image(
    collection: str,
    item_id: str,
    file: UploadFile = File(...),
    store: DocumentStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    _image_collection(collection)
    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise ValidationFailed([FieldError("file", "File must be an image")])

    await content.find_one(store, collection, item_id)
    body = await file.read()
    key = await blobs.upload(body, image_key(collection, content_type), content_type)
    await store.update_one(collection, id_filter(item_id), {"imageKey": key})
    logger.info("Stored image %s for %s/%s", key, collection, item_id)
    return await store.find(collection)


@router.delete("/{collection}/delImage/{item_id}")
async def delete_image(
    collection: str,
    item_id: str,
    store: DocumentStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    _image_collection(collection)
    doc = await content.find_one(store, collection, item_id)
    if not doc.get("imageKey"):
        raise NotFoundError("Item doesn't contain Image")
    await remove_image(blobs, doc)
    await store.update_one(collection, id_filter(item_id), unset=["imageKey"])
    return await store.find(collection)
