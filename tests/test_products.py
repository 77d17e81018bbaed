from ecologika.services import storage

from conftest import add_images, auth_headers, make_product, make_profile


def new_product(**overrides):
    data = {
        "name": "Garrafas PET",
        "description": "Fardos prensados",
        "material": "Plástico",
        "category": "Embalagens",
        "price": 80.0,
        "quantity": 500,
        "unit": "kg",
        "city": "Curitiba",
        "country": "Brasil",
    }
    data.update(overrides)
    return data


async def test_approved_seller_creates_pending_product(client, db):
    seller = await make_profile(db, user_type="seller", name="Carlos", company="PlastiVerde")

    response = await client.post("/api/products", json=new_product(), headers=auth_headers(seller))
    assert response.status_code == 200
    body = response.json()
    assert body["approval_status"] == "pending"
    assert body["is_active"] is True
    assert body["location"] == "Curitiba, Brasil"
    assert body["seller_id"] == seller.id
    assert body["seller_company"] == "PlastiVerde"

    assert await db.activity_logs.count_documents({"action": "product_created", "target_id": body["id"]}) == 1

    buyer = await make_profile(db)
    catalog = (await client.get("/api/products", headers=auth_headers(buyer))).json()
    assert catalog["total"] == 0


async def test_pending_seller_and_buyer_cannot_create(client, db):
    pending = await make_profile(db, user_type="seller", approval_status="pending")
    buyer = await make_profile(db)

    assert (await client.post("/api/products", json=new_product(), headers=auth_headers(pending))).status_code == 403
    assert (await client.post("/api/products", json=new_product(), headers=auth_headers(buyer))).status_code == 403


async def test_create_rejects_non_positive_price(client, db):
    seller = await make_profile(db, user_type="seller")
    response = await client.post("/api/products", json=new_product(price=0), headers=auth_headers(seller))
    assert response.status_code == 422


async def test_my_products_include_hidden_listings(client, db):
    seller = await make_profile(db, user_type="seller")
    other = await make_profile(db, user_type="seller")
    mine = await make_product(db, seller, approval_status="pending")
    inactive = await make_product(db, seller, is_active=False, created_offset=-5)
    await make_product(db, other)

    body = (await client.get("/api/my-products", headers=auth_headers(seller))).json()
    assert [p["id"] for p in body] == [mine.id, inactive.id]


async def test_edit_product_recomputes_location(client, db):
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)

    response = await client.put(
        f"/api/products/{product.id}",
        json={"city": "Campinas", "price": 99.5},
        headers=auth_headers(seller)
    )
    assert response.status_code == 200
    assert response.json()["location"] == "Campinas, Brasil"
    assert response.json()["price"] == 99.5


async def test_only_owner_can_edit_or_toggle(client, db):
    seller = await make_profile(db, user_type="seller")
    intruder = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)

    headers = auth_headers(intruder)
    assert (await client.put(f"/api/products/{product.id}", json={"name": "x"}, headers=headers)).status_code == 403
    assert (await client.put(f"/api/products/{product.id}/status", headers=headers)).status_code == 403
    assert (await client.put("/api/products/missing/status", headers=headers)).status_code == 404


async def test_toggle_status_hides_and_restores_listing(client, db):
    seller = await make_profile(db, user_type="seller")
    buyer = await make_profile(db)
    product = await make_product(db, seller)

    response = await client.put(f"/api/products/{product.id}/status", headers=auth_headers(seller))
    assert response.json()["is_active"] is False
    assert (await client.get(f"/api/products/{product.id}", headers=auth_headers(buyer))).status_code == 404

    response = await client.put(f"/api/products/{product.id}/status", headers=auth_headers(seller))
    assert response.json()["is_active"] is True
    assert (await client.get(f"/api/products/{product.id}", headers=auth_headers(buyer))).status_code == 200


async def test_upload_images_appends_in_order(client, db, tmp_path):
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)
    await add_images(db, product.id, ["http://localhost:8000/uploads/product-images/old/1.jpg"])

    files = [
        ("files", ("frente.png", b"\x89PNG-one", "image/png")),
        ("files", ("verso.jpg", b"\xff\xd8-two", "image/jpeg")),
    ]
    response = await client.post(f"/api/products/{product.id}/images", files=files, headers=auth_headers(seller))
    assert response.status_code == 200
    body = response.json()
    assert [i["image_order"] for i in body] == [1, 2, 3]
    assert body[1]["image_url"].endswith(".png")
    assert body[2]["image_url"].endswith(".jpg")

    stored = list((tmp_path / "product-images" / product.id).iterdir())
    assert len(stored) == 2
    assert await db.product_images.count_documents({"product_id": product.id}) == 3


async def test_upload_enforces_image_limit_before_writing(client, db, tmp_path):
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)
    await add_images(db, product.id, [f"http://cdn/{i}.jpg" for i in range(4)])

    files = [("files", (f"{i}.jpg", b"data", "image/jpeg")) for i in range(2)]
    response = await client.post(f"/api/products/{product.id}/images", files=files, headers=auth_headers(seller))
    assert response.status_code == 400
    assert response.json()["detail"] == "Você pode adicionar no máximo 5 imagens."
    assert not (tmp_path / "product-images").exists()


async def test_upload_rejects_non_images(client, db):
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)

    files = [("files", ("notas.pdf", b"%PDF", "application/pdf"))]
    response = await client.post(f"/api/products/{product.id}/images", files=files, headers=auth_headers(seller))
    assert response.status_code == 400
    assert await db.product_images.count_documents({}) == 0


async def test_reorder_images(client, db):
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)
    a, b, c = await add_images(db, product.id, ["http://cdn/a.jpg", "http://cdn/b.jpg", "http://cdn/c.jpg"])
    headers = auth_headers(seller)

    response = await client.put(
        f"/api/products/{product.id}/images/order",
        json={"image_ids": [c.id, a.id, b.id]},
        headers=headers
    )
    assert response.status_code == 200

    listed = (await client.get(f"/api/products/{product.id}/images", headers=headers)).json()
    assert [i["id"] for i in listed] == [c.id, a.id, b.id]
    assert [i["image_order"] for i in listed] == [1, 2, 3]

    partial = await client.put(
        f"/api/products/{product.id}/images/order",
        json={"image_ids": [a.id, b.id]},
        headers=headers
    )
    assert partial.status_code == 400


async def test_delete_image_renumbers_remaining(client, db):
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)
    a, b, c = await add_images(db, product.id, ["http://cdn/p/a.jpg", "http://cdn/p/b.jpg", "http://cdn/p/c.jpg"])
    headers = auth_headers(seller)

    response = await client.delete(f"/api/products/{product.id}/images/{a.id}", headers=headers)
    assert response.status_code == 200
    assert [(i["id"], i["image_order"]) for i in response.json()] == [(b.id, 1), (c.id, 2)]

    stored = await db.product_images.find({"product_id": product.id}).sort("image_order", 1).to_list(10)
    assert [(d["id"], d["image_order"]) for d in stored] == [(b.id, 1), (c.id, 2)]

    missing = await client.delete(f"/api/products/{product.id}/images/{a.id}", headers=headers)
    assert missing.status_code == 404


async def test_failed_upload_leaves_no_rows_or_files(client, db, tmp_path, monkeypatch):
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)
    real_upload = storage.upload
    calls = []

    def flaky_upload(content, path):
        calls.append(path)
        if len(calls) == 2:
            raise storage.StorageError("disk full")
        return real_upload(content, path)

    monkeypatch.setattr(storage, "upload", flaky_upload)

    files = [
        ("files", ("a.jpg", b"one", "image/jpeg")),
        ("files", ("b.jpg", b"two", "image/jpeg")),
    ]
    response = await client.post(f"/api/products/{product.id}/images", files=files, headers=auth_headers(seller))

    assert response.status_code == 503
    assert await db.product_images.count_documents({"product_id": product.id}) == 0
    assert list((tmp_path / "product-images" / product.id).iterdir()) == []


async def test_move_image_to_position(client, db):
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller)
    a, b, c = await add_images(db, product.id, ["http://cdn/a.jpg", "http://cdn/b.jpg", "http://cdn/c.jpg"])
    headers = auth_headers(seller)

    response = await client.put(
        f"/api/products/{product.id}/images/{c.id}/position",
        json={"position": 0},
        headers=headers
    )
    assert response.status_code == 200
    assert [(i["id"], i["image_order"]) for i in response.json()] == [(c.id, 1), (a.id, 2), (b.id, 3)]

    stored = await db.product_images.find({"product_id": product.id}).sort("image_order", 1).to_list(10)
    assert [d["id"] for d in stored] == [c.id, a.id, b.id]

    out_of_range = await client.put(
        f"/api/products/{product.id}/images/{a.id}/position",
        json={"position": 3},
        headers=headers
    )
    assert out_of_range.status_code == 400


async def test_images_of_hidden_product_are_only_listed_to_owner(client, db):
    seller = await make_profile(db, user_type="seller")
    buyer = await make_profile(db)
    product = await make_product(db, seller, approval_status="pending")
    await add_images(db, product.id, ["http://cdn/a.jpg"])

    hidden = await client.get(f"/api/products/{product.id}/images", headers=auth_headers(buyer))
    assert hidden.status_code == 404

    own = await client.get(f"/api/products/{product.id}/images", headers=auth_headers(seller))
    assert [i["image_url"] for i in own.json()] == ["http://cdn/a.jpg"]

    assert (await client.get("/api/products/missing/images", headers=auth_headers(buyer))).status_code == 404
