from conftest import auth_headers, make_product, make_profile

SHIPPING = {"name": "Ana Costa", "address": "Rua das Flores, 12", "city": "Lisboa", "postal_code": "1000-001", "phone": "912345678"}


async def test_quote_endpoint(client, db):
    buyer = await make_profile(db)
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller, price=100.0, quantity=10)

    response = await client.post(
        "/api/checkout/quote",
        json={"product_id": product.id, "quantity": 3},
        headers=auth_headers(buyer)
    )
    assert response.status_code == 200
    assert response.json()["subtotal"] == 300.0
    assert response.json()["total"] == 315.0

    over = await client.post(
        "/api/checkout/quote",
        json={"product_id": product.id, "quantity": 11},
        headers=auth_headers(buyer)
    )
    assert over.status_code == 400


async def test_checkout_records_purchase_and_notifies(client, db):
    buyer = await make_profile(db, name="Ana Costa")
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller, price=100.0, quantity=10, co2_savings=2.0)

    response = await client.post(
        "/api/checkout",
        json={"product_id": product.id, "quantity": 3, "shipping": SHIPPING},
        headers=auth_headers(buyer)
    )
    assert response.status_code == 200
    purchase = response.json()
    assert purchase["total_price"] == 315.0
    assert purchase["co2_saved"] == 6.0
    assert purchase["status"] == "completed"

    assert await db.notifications.count_documents({"user_id": buyer.id}) == 1
    assert await db.notifications.count_documents({"user_id": seller.id}) == 1
    assert await db.activity_logs.count_documents({"action": "purchase_completed"}) == 1

    history = (await client.get("/api/my-purchases", headers=auth_headers(buyer))).json()
    assert [h["purchase"]["id"] for h in history] == [purchase["id"]]
    assert history[0]["product_name"] == product.name

    sold = (await client.get("/api/sold-products", headers=auth_headers(seller))).json()
    assert sold[0]["buyer_name"] == "Ana Costa"

    report = (await client.get("/api/emissions-report", headers=auth_headers(buyer))).json()
    assert report["total_co2_saved"] == 6.0
    assert report["total_purchases"] == 1


async def test_checkout_validation_errors_are_translated(client, db):
    buyer = await make_profile(db)
    seller = await make_profile(db, user_type="seller")
    product = await make_product(db, seller, quantity=2)

    response = await client.post(
        "/api/checkout",
        json={"product_id": product.id, "quantity": 3, "shipping": {**SHIPPING, "phone": ""}},
        headers={**auth_headers(buyer), "Cookie": "ecologika_language=en"}
    )
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert set(errors) == {"phone", "quantity"}
    assert await db.purchases.count_documents({}) == 0


async def test_checkout_unknown_product(client, db):
    buyer = await make_profile(db)
    response = await client.post(
        "/api/checkout",
        json={"product_id": "missing", "quantity": 1, "shipping": SHIPPING},
        headers=auth_headers(buyer)
    )
    assert response.status_code == 404
