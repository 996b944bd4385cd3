def test_browse_catalogue_anonymously(client, category, product_a, product_b):
    categories = client.get("/api/categories").json()
    assert [c["name"] for c in categories] == ["Microcontrollers"]

    products = client.get("/api/products", params={"categoryId": category.id}).json()
    assert [p["name"] for p in products] == ["Arduino Uno", "ESP32 DevKit"]

    product = client.get(f"/api/products/{product_a.id}").json()
    assert product["stockQuantity"] == 10
    assert client.get("/api/products/999").status_code == 404


def test_catalogue_writes_need_admin(client, auth_headers, category):
    payload = {"name": "Sensor", "price": "3.50", "stockQuantity": 4, "categoryId": category.id}
    assert client.post("/api/products", json=payload).status_code == 401
    assert client.post("/api/products", json=payload, headers=auth_headers).status_code == 403


def test_admin_manages_products(client, admin_headers, category):
    payload = {"name": "Sensor", "price": "3.50", "stockQuantity": 4, "categoryId": category.id}
    response = client.post("/api/products", json=payload, headers=admin_headers)
    assert response.status_code == 201
    product_id = response.json()["id"]

    response = client.patch(f"/api/products/{product_id}/price", json={"price": "4.00"}, headers=admin_headers)
    assert float(response.json()["price"]) == 4.0

    response = client.post(f"/api/products/{product_id}/stock", json={"delta": -4}, headers=admin_headers)
    assert response.json()["stockQuantity"] == 0

    response = client.post(f"/api/products/{product_id}/stock", json={"delta": -1}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INSUFFICIENT_STOCK"

    assert client.delete(f"/api/products/{product_id}", headers=admin_headers).status_code == 204


def test_price_must_be_positive(client, admin_headers, category):
    payload = {"name": "Freebie", "price": "0", "stockQuantity": 1, "categoryId": category.id}
    assert client.post("/api/products", json=payload, headers=admin_headers).status_code == 422


def test_admin_manages_categories(client, admin_headers, category, product_a):
    response = client.post("/api/categories", json={"name": "Tools"}, headers=admin_headers)
    assert response.status_code == 201

    response = client.post("/api/categories", json={"name": "Tools"}, headers=admin_headers)
    assert response.json()["error"]["code"] == "CATEGORY_EXISTS"

    response = client.delete(f"/api/categories/{category.id}", headers=admin_headers)
    assert response.json()["error"]["code"] == "CATEGORY_IN_USE"
