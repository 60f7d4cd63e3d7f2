"""
Image upload and removal for menu items and recipes
"""
import pytest

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.mark.asyncio
async def test_upload_records_image_key(client, store, blobs, admin_headers):
    item_id = await store.insert("menu", {"itemName": "Vanilla Bean"})
    r = await client.post(
        f"/api/menu/uploadImage/{item_id}",
        files={"file": ("cupcake.png", PNG, "image/png")},
        headers=admin_headers,
    )
    assert r.status_code == 200, r.text
    key = r.json()[0]["imageKey"]
    assert key.startswith("menu/") and key.endswith(".png")
    assert blobs.objects[key] == PNG


@pytest.mark.asyncio
async def test_upload_rejects_non_images(client, store, blobs, admin_headers):
    item_id = await store.insert("recipes", {"recipeName": "Lemon Bars"})
    r = await client.post(
        f"/api/recipes/uploadImage/{item_id}",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=admin_headers,
    )
    assert r.status_code == 422
    assert r.json()["errors"] == [{"field": "file", "message": "File must be an image"}]
    assert blobs.objects == {}


@pytest.mark.asyncio
async def test_upload_only_to_image_collections(client, store, admin_headers):
    item_id = await store.insert("faq", {"question": "Do you deliver?"})
    r = await client.post(
        f"/api/faq/uploadImage/{item_id}",
        files={"file": ("a.png", PNG, "image/png")},
        headers=admin_headers,
    )
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_image_unsets_key(client, store, blobs, admin_headers):
    blobs.objects["recipes/1.jpg"] = b"jpg"
    item_id = await store.insert("recipes", {"recipeName": "Lemon Bars", "imageKey": "recipes/1.jpg"})
    r = await client.delete(f"/api/recipes/delImage/{item_id}", headers=admin_headers)
    assert r.status_code == 200, r.text
    assert "imageKey" not in r.json()[0]
    assert blobs.objects == {}


@pytest.mark.asyncio
async def test_delete_image_without_one(client, store, admin_headers):
    item_id = await store.insert("menu", {"itemName": "Vanilla Bean"})
    r = await client.delete(f"/api/menu/delImage/{item_id}", headers=admin_headers)
    assert r.status_code == 404
    assert r.json() == {"errors": {"msg": "Item doesn't contain Image"}}


@pytest.mark.asyncio
async def test_delete_image_missing_from_bucket(client, store, admin_headers):
    item_id = await store.insert("menu", {"itemName": "Vanilla Bean", "imageKey": "menu/gone.png"})
    r = await client.delete(f"/api/menu/delImage/{item_id}", headers=admin_headers)
    assert r.status_code == 404
    assert r.json() == {"errors": {"msg": "File not found"}}
