"""HTTP surface, exercised through the Quart test client."""

import pytest


class TestPublicEndpoints:

    async def test_inventory(self, client, stock_colors):
        await stock_colors({"RED": 1, "BLUE": 5})
        response = await client.get("/inventory")
        assert response.status_code == 200
        body = await response.get_json()
        assert [(i["colorCode"], i["stock"]) for i in body] == [("RED", 1), ("BLUE", 5)]

    async def test_packs_carry_prices(self, client, packs):
        response = await client.get("/packs")
        body = await response.get_json()
        assert [(p["size"], p["price"]) for p in body] == [(2, 50), (3, 65), (4, 80)]

    async def test_public_settings_defaults(self, client):
        body = await (await client.get("/settings/public")).get_json()
        assert body["store_active"] is True
        assert body["pack_prices"] == {"2": 50, "3": 65, "4": 80}
        assert body["whatsapp_number"] == "971500000000"

    async def test_health(self, client):
        response = await client.get("/health")
        assert (await response.get_json()) == {"status": "ok"}

    async def test_metrics(self, client):
        await client.get("/health")
        response = await client.get("/metrics")
        assert b"http_requests_total" in await response.get_data()


class TestPlaceOrder:

    async def test_created(self, client, stock_colors, make_order):
        await stock_colors({"RED": 1, "BLUE": 5})
        response = await client.post("/orders", json=make_order([("RED", 1), ("BLUE", 1)]))
        assert response.status_code == 201
        body = await response.get_json()
        assert body["status"] == "CONFIRMED"
        assert body["orderCode"].startswith("CUP-")
        assert body["whatsappUrl"].startswith("https://wa.me/971500000000?text=")

        inventory = await (await client.get("/inventory")).get_json()
        assert {i["colorCode"]: i["stock"] for i in inventory} == {"RED": 0, "BLUE": 4}

    async def test_insufficient_stock(self, client, stock_colors, make_order):
        await stock_colors({"RED": 0, "BLUE": 5})
        response = await client.post("/orders", json=make_order([("RED", 1), ("BLUE", 1)]))
        assert response.status_code == 400
        body = await response.get_json()
        assert body["code"] == "insufficient_stock"
        assert body["colorCode"] == "RED"
        assert "Red" in body["error"]

    async def test_unknown_color(self, client, stock_colors, make_order):
        await stock_colors({"BLUE": 5})
        response = await client.post("/orders", json=make_order([("GHOST", 2)]))
        assert response.status_code == 400
        assert (await response.get_json())["code"] == "unknown_color"

    async def test_validation_error(self, client, stock_colors, make_order):
        await stock_colors({"BLUE": 5})
        response = await client.post("/orders", json=make_order([("BLUE", 2)], name=""))
        assert response.status_code == 400
        assert (await response.get_json())["code"] == "validation_error"

    async def test_unicode_digit_quantity(self, client, stock_colors, make_order):
        await stock_colors({"BLUE": 5})
        payload = make_order([("BLUE", 2)])
        payload["items"][0]["qty"] = "\u00b2"
        response = await client.post("/orders", json=payload)
        assert response.status_code == 400
        assert (await response.get_json())["code"] == "validation_error"

    async def test_store_closed(self, client, stock_colors, make_order, admin_headers):
        await stock_colors({"BLUE": 5})
        await client.put("/admin/settings", json={"store_active": False}, headers=admin_headers)
        response = await client.post("/orders", json=make_order([("BLUE", 2)]))
        assert response.status_code == 400
        body = await response.get_json()
        assert body == {"error": "Store is currently closed", "code": "store_closed"}


class TestActivity:

    async def test_recent_orders_and_low_stock(self, client, stock_colors, make_order):
        await stock_colors({"RED": 3, "BLUE": 50})
        await client.post("/orders", json=make_order([("BLUE", 2)]))
        body = await (await client.get("/activity?lang=en")).get_json()
        assert body == ["Sara from Dubai ordered 2 pieces! ✨", 'Only 3 left of "Red"! ⚡']

    async def test_arabic(self, client, stock_colors):
        await stock_colors({"RED": 3})
        body = await (await client.get("/activity?lang=ar")).get_json()
        assert body == ['بقي 3 قطع فقط من "red-ar"! ⚡']


class TestAdminAuth:

    async def test_requires_token(self, client):
        response = await client.get("/admin/orders")
        assert response.status_code == 401

    async def test_bad_credentials(self, client):
        response = await client.post("/admin/login", json={"username": "admin", "password": "nope"})
        assert response.status_code == 401

    async def test_session_lifecycle(self, client, admin_headers, fake_redis):
        assert (await client.get("/admin/orders", headers=admin_headers)).status_code == 200
        token = admin_headers["Authorization"].split(" ", 1)[1]
        assert await fake_redis.ttl(f"admin:session:{token}") > 0

        await client.post("/admin/logout", headers=admin_headers)
        assert (await client.get("/admin/orders", headers=admin_headers)).status_code == 401

    async def test_unknown_token(self, client):
        response = await client.get("/admin/settings", headers={"Authorization": "Bearer deadbeef"})
        assert response.status_code == 401


class TestAdminManagement:

    async def test_orders_and_status(self, client, admin_headers, stock_colors, make_order):
        await stock_colors({"BLUE": 5})
        created = await (await client.post("/orders", json=make_order([("BLUE", 2)]))).get_json()

        orders = await (await client.get("/admin/orders", headers=admin_headers)).get_json()
        assert [o["orderCode"] for o in orders] == [created["orderCode"]]
        assert orders[0]["customer"]["mobile"] == "0501234567"

        response = await client.put(
            f"/admin/orders/{created['id']}/status", json={"status": "SHIPPED"}, headers=admin_headers
        )
        assert (await response.get_json())["status"] == "SHIPPED"

        response = await client.put(
            f"/admin/orders/{created['id']}/status", json={"status": "LOST"}, headers=admin_headers
        )
        assert response.status_code == 400

    async def test_status_unknown_order(self, client, admin_headers):
        response = await client.put("/admin/orders/nope/status", json={"status": "SHIPPED"}, headers=admin_headers)
        assert response.status_code == 404

    async def test_stock_edit(self, client, admin_headers, stock_colors):
        await stock_colors({"RED": 1})
        response = await client.put("/admin/inventory/RED", json={"stock": -1}, headers=admin_headers)
        assert response.status_code == 400
        response = await client.put("/admin/inventory/RED", json={"stock": 7}, headers=admin_headers)
        assert (await response.get_json())["stock"] == 7
        response = await client.put("/admin/inventory/RED", json={"delta": -2}, headers=admin_headers)
        assert (await response.get_json())["stock"] == 5

    async def test_rejected_stock_edit_keeps_names(self, client, admin_headers, stock_colors):
        await stock_colors({"RED": 2})
        response = await client.put(
            "/admin/inventory/RED", json={"nameEn": "Ruby", "delta": -5}, headers=admin_headers
        )
        assert response.status_code == 400
        [item] = await (await client.get("/inventory")).get_json()
        assert item["nameEn"] == "Red"
        assert item["stock"] == 2

    async def test_settings(self, client, admin_headers):
        response = await client.put(
            "/admin/settings", json={"whatsapp_number": "+971 55 123 4567", "delivery_fee": 10}, headers=admin_headers
        )
        body = await response.get_json()
        assert body["whatsapp_number"] == "971551234567"
        assert body["delivery_fee"] == 10

        response = await client.put("/admin/settings", json={"secret": 1}, headers=admin_headers)
        assert response.status_code == 400

    async def test_pack_edit(self, client, admin_headers, packs):
        response = await client.put("/admin/packs/2", json={"titleEn": "Duo"}, headers=admin_headers)
        assert (await response.get_json())["titleEn"] == "Duo"
        response = await client.put("/admin/packs/9", json={"titleEn": "Nine"}, headers=admin_headers)
        assert response.status_code == 404
        response = await client.put("/admin/packs/2", json={}, headers=admin_headers)
        assert response.status_code == 400


class TestMedia:

    async def test_image_slots(self, client, admin_headers):
        slot = {"category": "color", "ref_key": "RED", "image_url": "/objects/uploads/a"}
        await client.put("/admin/images", json=slot, headers=admin_headers)
        await client.put("/admin/images", json={**slot, "image_url": "/objects/uploads/b"}, headers=admin_headers)

        images = await (await client.get("/images")).get_json()
        assert len(images) == 1
        assert images[0]["image_url"] == "/objects/uploads/b"

        response = await client.delete(f"/admin/images/{images[0]['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert await (await client.get("/images")).get_json() == []

    async def test_image_requires_fields(self, client, admin_headers):
        response = await client.put("/admin/images", json={"category": "color"}, headers=admin_headers)
        assert response.status_code == 400

    async def test_upload_round_trip(self, client, admin_headers, storage):
        payload = b"\x89PNG fake image"
        response = await client.post(
            "/uploads/request-url",
            json={"name": "red.png", "size": len(payload), "contentType": "image/png"},
            headers=admin_headers,
        )
        ticket = await response.get_json()
        assert ticket["objectPath"].startswith("/objects/uploads/")

        response = await client.put(ticket["uploadURL"], data=payload, headers={"Content-Type": "image/png"})
        assert response.status_code == 200

        response = await client.get(ticket["objectPath"])
        assert response.status_code == 200
        assert await response.get_data() == payload
        assert response.mimetype == "image/png"

        # tickets are single use
        response = await client.put(ticket["uploadURL"], data=payload, headers={"Content-Type": "image/png"})
        assert response.status_code == 404

    @pytest.mark.parametrize("content_type", ["text/html", "application/pdf"])
    async def test_upload_rejects_non_images(self, client, admin_headers, storage, content_type):
        response = await client.post(
            "/uploads/request-url",
            json={"name": "x", "size": 10, "contentType": content_type},
            headers=admin_headers,
        )
        assert response.status_code == 400
