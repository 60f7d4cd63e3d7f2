"""
Public storefront content routes
"""
import pytest


@pytest.mark.asyncio
async def test_menu_listing_signs_image_urls(client, store):
    await store.insert("menu", {"itemName": "Vanilla Bean", "imageKey": "menu/1.png"})
    await store.insert("menu", {"itemName": "Lemon Jar"})
    r = await client.get("/api/menu/getMenuItem")
    assert r.status_code == 200
    items = {doc["itemName"]: doc for doc in r.json()}
    assert items["Vanilla Bean"]["url"] == "https://signed.bakery.test/menu/1.png"
    assert "url" not in items["Lemon Jar"]


@pytest.mark.asyncio
async def test_faq_listing(client, store):
    await store.insert("faq", {"category": "Delivery", "question": "Do you deliver?"})
    r = await client.get("/api/faq/getFAQ")
    assert [doc["question"] for doc in r.json()] == ["Do you deliver?"]


@pytest.mark.asyncio
async def test_recipe_by_name(client, store):
    await store.insert("recipes", {"recipeName": "Lemon Bars", "imageKey": "recipes/2.jpg"})
    await store.insert("recipes", {"recipeName": "Brownies"})

    r = await client.get("/api/recipes/getRecipes")
    assert len(r.json()) == 2

    r = await client.get("/api/recipes/Lemon Bars")
    assert r.status_code == 200
    recipes = r.json()
    assert len(recipes) == 1
    assert recipes[0]["url"] == "https://signed.bakery.test/recipes/2.jpg"


@pytest.mark.asyncio
async def test_add_contact_item_returns_inserted_record(client, store):
    message = {
        "name": "Jane Smith",
        "email": "Jane@Example.com",
        "subject": "Wedding cake",
        "message": "Do you make three tier cakes?",
    }
    r = await client.post("/api/contact/addContactItem", json=message)
    assert r.status_code == 200, r.text
    records = r.json()
    assert len(records) == 1
    assert records[0]["email"] == "jane@example.com"
    assert records[0]["contactTime"]
    assert len(store.docs("contact")) == 1


@pytest.mark.asyncio
async def test_add_contact_item_keeps_client_time(client):
    message = {
        "contactTime": "1/5/2024, 9:00:00 AM",
        "name": "Jane Smith",
        "email": "jane@example.com",
        "subject": "Hello",
        "message": "Are you open on Sundays?",
    }
    r = await client.post("/api/contact/addContactItem", json=message)
    assert r.json()[0]["contactTime"] == "1/5/2024, 9:00:00 AM"


@pytest.mark.asyncio
async def test_add_contact_item_validates(client, store):
    r = await client.post(
        "/api/contact/addContactItem",
        json={"name": "Jane Smith", "email": "jane@example.com", "subject": "Hi!", "message": "Hello"},
    )
    assert r.status_code == 422
    assert [e["field"] for e in r.json()["errors"]] == ["subject", "message"]
    assert store.docs("contact") == []


@pytest.mark.asyncio
async def test_about_and_storefront_settings(client, store):
    await store.insert("otherSettings", {"name": "about", "about": "We bake."})
    await store.insert("otherSettings", {"name": "OrderMin", "minimum": "20"})
    await store.insert("otherSettings", {"name": "DeliveryAmount", "amount": "5"})

    r = await client.get("/api/about/getAbout")
    assert [doc["about"] for doc in r.json()] == ["We bake."]

    r = await client.get("/api/home/getOtherSettings")
    assert sorted(doc["name"] for doc in r.json()) == ["DeliveryAmount", "OrderMin"]
