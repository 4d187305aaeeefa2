"""Clothing API tests — ownership, filtering and image side effects.

Learn: Every test uses real logged-in clients (cookies), and two
unrelated users where ownership matters. The image host is the
FakeImageStorage from conftest, so uploads/destroys can be counted.
"""

import uuid

import pytest

from wardrobe.db.models import ClothingItem

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


async def _create(client, **fields):
    body = {"name": "Oxford shirt", "category": "SHIRT", "color": "blue", **fields}
    r = await client.post("/api/clothing", json=body)
    assert r.status_code == 201, r.text
    return r.json()


async def _create_with_image(client, filename="shirt.png", content_type="image/png"):
    return await client.post(
        "/api/clothing",
        data={"name": "Linen shirt", "category": "shirt", "color": "white"},
        files={"image": (filename, PNG_BYTES, content_type)},
    )


# ═══════════════════════════════════════════════════════════
# Access
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/api/clothing"),
        ("POST", "/api/clothing"),
        ("PUT", f"/api/clothing/{uuid.uuid4()}"),
        ("DELETE", f"/api/clothing/{uuid.uuid4()}"),
    ],
)
async def test_clothing_requires_access_cookie(client, method, path):
    r = await client.request(method, path)
    assert r.status_code == 401
    assert r.json() == {"message": "No token provided, authorization denied"}


# ═══════════════════════════════════════════════════════════
# Create
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_item(user_client):
    item = await _create(user_client, brand="Uniqlo")
    assert item["name"] == "Oxford shirt"
    assert item["category"] == "SHIRT"
    assert item["brand"] == "Uniqlo"
    assert item["owner"] == user_client.user_id
    assert item["imageUrl"] is None
    assert "createdAt" in item and "updatedAt" in item


@pytest.mark.asyncio
async def test_create_normalizes_category(user_client):
    item = await _create(user_client, category="jacket")
    assert item["category"] == "JACKET"


@pytest.mark.asyncio
async def test_create_ignores_client_owner(user_client, other_client):
    item = await _create(user_client, owner=other_client.user_id)
    assert item["owner"] == user_client.user_id


@pytest.mark.asyncio
async def test_create_appears_in_profile(user_client):
    item = await _create(user_client)
    r = await user_client.get("/api/auth/me")
    assert r.json()["clothingItemIds"] == [item["id"]]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"category": "SHIRT", "color": "blue"},
        {"name": "Tee", "color": "blue"},
        {"name": "Tee", "category": "SHIRT"},
        {"name": "", "category": "SHIRT", "color": "blue"},
    ],
)
async def test_create_requires_name_category_color(user_client, body):
    r = await user_client.post("/api/clothing", json=body)
    assert r.status_code == 400
    assert r.json() == {"message": "Name, category, and color are required"}


@pytest.mark.asyncio
async def test_create_rejects_unknown_category(user_client):
    r = await user_client.post(
        "/api/clothing", json={"name": "Cape", "category": "CAPE", "color": "red"}
    )
    assert r.status_code == 400
    assert r.json() == {"message": "Validation error"}


@pytest.mark.asyncio
async def test_create_rejects_padded_category(user_client):
    r = await user_client.post(
        "/api/clothing", json={"name": "Tee", "category": " shirt ", "color": "red"}
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_create_rejects_malformed_json(user_client):
    r = await user_client.post(
        "/api/clothing",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_create_with_image(user_client, images):
    r = await _create_with_image(user_client)
    assert r.status_code == 201, r.text
    item = r.json()
    assert item["category"] == "SHIRT"
    assert item["imageUrl"] == "https://images.example.com/wardrobe/img-1.png"
    assert item["imageAssetId"] == "wardrobe/img-1"
    assert images.uploads == [("shirt.png", len(PNG_BYTES))]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "filename,content_type",
    [
        ("notes.txt", "text/plain"),
        ("shirt.png", "application/pdf"),
        ("shirt.pdf", "image/png"),
    ],
)
async def test_create_rejects_non_images(user_client, images, filename, content_type):
    r = await _create_with_image(user_client, filename, content_type)
    assert r.status_code == 400
    assert r.json() == {"message": "Images only"}
    assert images.uploads == []


@pytest.mark.asyncio
async def test_failed_upload_creates_nothing(user_client, images):
    images.fail_upload = True
    r = await _create_with_image(user_client)
    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error"}

    r = await user_client.get("/api/clothing")
    assert r.json() == []


# ═══════════════════════════════════════════════════════════
# List + filters
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_list_only_own_items(user_client, other_client):
    mine = await _create(user_client, name="Mine")
    await _create(other_client, name="Theirs")

    r = await user_client.get("/api/clothing")
    assert r.status_code == 200
    assert [i["id"] for i in r.json()] == [mine["id"]]


@pytest.mark.asyncio
async def test_list_ignores_owner_param(user_client, other_client):
    await _create(other_client, name="Theirs")
    r = await user_client.get("/api/clothing", params={"owner": other_client.user_id})
    assert r.json() == []


@pytest.mark.asyncio
async def test_list_filters_by_category_case_insensitive(user_client):
    await _create(user_client, name="Tee", category="SHIRT")
    await _create(user_client, name="Chinos", category="PANTS")

    r = await user_client.get("/api/clothing", params={"category": "pants"})
    assert [i["name"] for i in r.json()] == ["Chinos"]


@pytest.mark.asyncio
async def test_list_ignores_unknown_category(user_client):
    await _create(user_client, name="Tee")
    await _create(user_client, name="Boots", category="SHOES")

    r = await user_client.get("/api/clothing", params={"category": "spacesuit"})
    assert r.status_code == 200
    assert len(r.json()) == 2


@pytest.mark.asyncio
async def test_list_name_and_brand_are_substring_matches(user_client):
    await _create(user_client, name="Blue Oxford Shirt", brand="Uniqlo")
    await _create(user_client, name="Grey Hoodie", brand="Carhartt WIP")

    r = await user_client.get("/api/clothing", params={"name": "oxford"})
    assert [i["name"] for i in r.json()] == ["Blue Oxford Shirt"]

    r = await user_client.get("/api/clothing", params={"brand": "WIP"})
    assert [i["name"] for i in r.json()] == ["Grey Hoodie"]


@pytest.mark.asyncio
async def test_list_search_text_is_literal(user_client):
    await _create(user_client, name="Tee")
    r = await user_client.get("/api/clothing", params={"name": "%"})
    assert r.json() == []


@pytest.mark.asyncio
async def test_list_color_is_exact(user_client):
    await _create(user_client, name="Tee", color="blue")
    await _create(user_client, name="Jeans", color="dark blue")

    r = await user_client.get("/api/clothing", params={"color": "blue"})
    assert [i["name"] for i in r.json()] == ["Tee"]


@pytest.mark.asyncio
async def test_list_ignores_repeated_params(user_client):
    await _create(user_client, name="Tee")
    r = await user_client.get("/api/clothing?name=zzz&name=yyy")
    assert len(r.json()) == 1


# ═══════════════════════════════════════════════════════════
# Update
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_update_changes_only_sent_fields(user_client):
    item = await _create(user_client, brand="Uniqlo")
    r = await user_client.put(f"/api/clothing/{item['id']}", json={"color": "green"})
    assert r.status_code == 200
    updated = r.json()
    assert updated["color"] == "green"
    assert updated["name"] == item["name"]
    assert updated["brand"] == "Uniqlo"


@pytest.mark.asyncio
async def test_update_by_non_owner_is_forbidden(user_client, other_client, db_session):
    item = await _create(user_client)
    r = await other_client.put(f"/api/clothing/{item['id']}", json={"name": "Stolen"})
    assert r.status_code == 403
    assert r.json() == {"message": "User not authorized to update this item"}

    stored = await db_session.get(ClothingItem, uuid.UUID(item["id"]))
    assert stored.name == "Oxford shirt"


@pytest.mark.asyncio
async def test_update_cannot_reassign_owner(user_client, other_client):
    item = await _create(user_client)
    r = await user_client.put(
        f"/api/clothing/{item['id']}", json={"owner": other_client.user_id, "color": "red"}
    )
    assert r.status_code == 200
    assert r.json()["owner"] == user_client.user_id


@pytest.mark.asyncio
async def test_update_unknown_item(user_client):
    r = await user_client.put(f"/api/clothing/{uuid.uuid4()}", json={"name": "x"})
    assert r.status_code == 404
    assert r.json() == {"message": "Clothing item not found"}


@pytest.mark.asyncio
async def test_update_malformed_id(user_client):
    r = await user_client.put("/api/clothing/not-an-id", json={"name": "x"})
    assert r.status_code == 404
    assert r.json() == {"message": "Clothing item not found"}


@pytest.mark.asyncio
async def test_update_rejects_blank_required_field(user_client):
    item = await _create(user_client)
    r = await user_client.put(f"/api/clothing/{item['id']}", json={"name": ""})
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_update_replaces_image(user_client, images):
    created = (await _create_with_image(user_client)).json()

    r = await user_client.put(
        f"/api/clothing/{created['id']}",
        files={"image": ("new.jpg", PNG_BYTES, "image/jpeg")},
    )
    assert r.status_code == 200, r.text
    assert images.destroyed == ["wardrobe/img-1"]
    assert r.json()["imageAssetId"] == "wardrobe/img-2"


@pytest.mark.asyncio
async def test_failed_replacement_upload_keeps_old_reference(user_client, images):
    """The old asset is destroyed before the upload; nothing is rolled back."""
    created = (await _create_with_image(user_client)).json()
    images.fail_upload = True

    r = await user_client.put(
        f"/api/clothing/{created['id']}",
        files={"image": ("new.jpg", PNG_BYTES, "image/jpeg")},
    )
    assert r.status_code == 500
    assert r.json() == {"message": "Internal server error"}
    assert images.destroyed == ["wardrobe/img-1"]

    stored = (await user_client.get("/api/clothing")).json()
    assert [i["imageAssetId"] for i in stored] == ["wardrobe/img-1"]


@pytest.mark.asyncio
async def test_update_by_non_owner_never_touches_images(user_client, other_client, images):
    created = (await _create_with_image(user_client)).json()
    r = await other_client.put(
        f"/api/clothing/{created['id']}",
        files={"image": ("new.jpg", PNG_BYTES, "image/jpeg")},
    )
    assert r.status_code == 403
    assert images.destroyed == []
    assert len(images.uploads) == 1


# ═══════════════════════════════════════════════════════════
# Delete
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_delete_item_without_image(user_client, images):
    item = await _create(user_client)
    r = await user_client.delete(f"/api/clothing/{item['id']}")
    assert r.status_code == 204
    assert images.destroyed == []

    r = await user_client.get("/api/clothing")
    assert r.json() == []
    r = await user_client.get("/api/auth/me")
    assert r.json()["clothingItemIds"] == []


@pytest.mark.asyncio
async def test_delete_item_destroys_image_once(user_client, images):
    created = (await _create_with_image(user_client)).json()
    r = await user_client.delete(f"/api/clothing/{created['id']}")
    assert r.status_code == 204
    assert images.destroyed == ["wardrobe/img-1"]


@pytest.mark.asyncio
async def test_delete_by_non_owner_is_forbidden(user_client, other_client, images):
    created = (await _create_with_image(user_client)).json()
    r = await other_client.delete(f"/api/clothing/{created['id']}")
    assert r.status_code == 403
    assert r.json() == {"message": "User not authorized to delete this item"}
    assert images.destroyed == []

    r = await user_client.get("/api/clothing")
    assert len(r.json()) == 1


@pytest.mark.asyncio
async def test_delete_unknown_item(user_client):
    r = await user_client.delete(f"/api/clothing/{uuid.uuid4()}")
    assert r.status_code == 404
    assert r.json() == {"message": "Clothing item not found"}
