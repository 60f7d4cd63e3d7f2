"""
Bakery API — Admin routes (bearer token enforced by JWTAuthMiddleware)
"""
from typing import Any

from fastapi import APIRouter, Body, Depends

from bakery_api.db.database import DocumentStore, get_store
from bakery_api.services import content
from bakery_api.services.blobs import BlobStore, get_blob_store
from bakery_api.services.orders import delete_order, list_orders
from bakery_api.validation import rules

router = APIRouter(prefix="/api/manage", tags=["manage"])

MENU_FIELDS = ["category", "itemName", "itemDesc", "price"]
FAQ_FIELDS = ["category", "question", "answer"]
RECIPE_FIELDS = [
    "recipeName", "estTime", "servings", "description",
    "ingredients", "directions", "bonusTips",
]


# ── Orders ────────────────────────────────────────────────────────────────────

@router.get("/getOrders")
async def get_orders(store: DocumentStore = Depends(get_store)):
    """All orders as [regular, custom, catering]."""
    return await list_orders(store)


@router.delete("/del/{order_type}/{order_id}")
async def remove_order(
    order_type: str,
    order_id: str,
    store: DocumentStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    return await delete_order(store, blobs, order_type, order_id)


# ── Menu ──────────────────────────────────────────────────────────────────────

@router.get("/getMenuItem")
async def get_menu(store: DocumentStore = Depends(get_store)):
    return await store.find(content.MENU)


@router.post("/addMenuItem")
async def add_menu_item(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.add_document(store, content.MENU, rules.MENU_ITEM_RULES, payload, MENU_FIELDS)


@router.delete("/delMenuItem/{item_id}")
async def delete_menu_item(
    item_id: str,
    store: DocumentStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    return await content.delete_document(store, content.MENU, item_id, blobs)


# ── FAQ ───────────────────────────────────────────────────────────────────────

@router.post("/addFAQItem")
async def add_faq_item(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.add_document(store, content.FAQ, rules.FAQ_RULES, payload, FAQ_FIELDS)


@router.delete("/delFAQItem/{item_id}")
async def delete_faq_item(item_id: str, store: DocumentStore = Depends(get_store)):
    return await content.delete_document(store, content.FAQ, item_id)


# ── Recipes ───────────────────────────────────────────────────────────────────

@router.get("/getRecipes")
async def get_recipes(store: DocumentStore = Depends(get_store)):
    return await store.find(content.RECIPES)


@router.post("/addRecipe")
async def add_recipe(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.add_document(store, content.RECIPES, rules.RECIPE_RULES, payload, RECIPE_FIELDS)


@router.delete("/delRecipe/{item_id}")
async def delete_recipe(
    item_id: str,
    store: DocumentStore = Depends(get_store),
    blobs: BlobStore = Depends(get_blob_store),
):
    return await content.delete_document(store, content.RECIPES, item_id, blobs)


# ── Contact messages ──────────────────────────────────────────────────────────

@router.get("/getContact")
async def get_contact(store: DocumentStore = Depends(get_store)):
    return await store.find(content.CONTACT)


@router.delete("/delContact/{item_id}")
async def delete_contact(item_id: str, store: DocumentStore = Depends(get_store)):
    return await content.delete_document(store, content.CONTACT, item_id)


# ── Settings ──────────────────────────────────────────────────────────────────

@router.put("/updateAbout")
async def update_about(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.update_setting(store, "about", rules.ABOUT_RULES, payload, "about")


@router.put("/updateMenuPageToggle")
async def update_menu_page_toggle(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.update_setting(
        store, "MenuPageToggle", rules.MENU_PAGE_TOGGLE_RULES, payload, "toggle", convert=content.as_bool
    )


@router.put("/updateDeliveryAmount")
async def update_delivery_amount(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.update_setting(store, "DeliveryAmount", rules.DELIVERY_AMOUNT_RULES, payload, "amount")


@router.put("/updateOrderMin")
async def update_order_min(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.update_setting(store, "OrderMin", rules.ORDER_MIN_RULES, payload, "minimum")


@router.put("/updateFreeDeliveryMin")
async def update_free_delivery_min(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.update_setting(
        store, "FreeDeliveryMin", rules.FREE_DELIVERY_MIN_RULES, payload, "minimum"
    )


@router.put("/updateDeliveryDate")
async def update_delivery_date(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.update_setting(store, "DeliveryDate", rules.DELIVERY_DATE_RULES, payload, "date")


@router.put("/updateBlockedDates")
async def update_blocked_dates(payload: dict[str, Any] = Body(...), store: DocumentStore = Depends(get_store)):
    return await content.update_setting(store, "BlockedDates", rules.BLOCKED_DATES_RULES, payload, "dates")
