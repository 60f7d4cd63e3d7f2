"""
Bakery API — Public storefront content routes
"""
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Body, Depends

from bakery_api.db.database import DocumentStore, get_store
from bakery_api.services import content
from bakery_api.services.blobs import BlobStore, attach_signed_urls, get_blob_store
from bakery_api.validation.rules import CONTACT_RULES

router = APIRouter(prefix="/api", tags=["content"])

CONTACT_FIELDS = ["contactTime", "name", "email", "subject", "message"]


@router.get("/menu/getMenuItem")
async def get_menu(
    store: DocumentStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    """Menu items, each with a signed ``url`` when it has an image."""
    return await content.listing_with_images(store, blobs, content.MENU)


@router.get("/faq/getFAQ")
async def get_faq(store: DocumentStore = Depends(get_store)):
    return await store.find(content.FAQ)


@router.get("/recipes/getRecipes")
async def get_recipes(
    store: DocumentStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    return await content.listing_with_images(store, blobs, content.RECIPES)


@router.get("/recipes/{recipe_name}")
async def get_recipe(
    recipe_name: str,
    store: DocumentStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    recipes = await store.find(content.RECIPES, {"recipeName": recipe_name})
    return await attach_signed_urls(blobs, recipes)


@router.post("/contact/addContactItem")
async def add_contact_item(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    doc = content.validated(CONTACT_RULES, payload, CONTACT_FIELDS)
    if not doc.get("contactTime"):
        doc["contactTime"] = datetime.now(tz=timezone.utc).isoformat()
    inserted_id = await store.insert(content.CONTACT, doc)
    return await store.find(content.CONTACT, {"_id": inserted_id})


@router.get("/about/getAbout")
async def get_about(store: DocumentStore = Depends(get_store)):
    return await store.find(content.OTHER_SETTINGS, {"name": "about"})


@router.get("/home/getOtherSettings")
async def get_other_settings(store: DocumentStore = Depends(get_store)):
    return await store.find(content.OTHER_SETTINGS, {"name": {"$in": content.STOREFRONT_SETTINGS}})
