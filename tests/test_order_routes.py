"""Menu, order history and two-phase order placement against a fake factory."""

import json

import pytest
import pytest_asyncio
from httpx import AsyncClient

from conftest import random_name


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def shop(async_client: AsyncClient, admin):
    """A franchise with one store and one menu item."""
    franchise = await async_client.post(
        "/api/franchise",
        headers=bearer(admin["token"]),
        json={"name": random_name(), "admins": [{"email": admin["user"]["email"]}]},
    )
    store = await async_client.post(
        f"/api/franchise/{franchise.json()['id']}/store",
        headers=bearer(admin["token"]),
        json={"name": random_name()},
    )
    menu = await async_client.put(
        "/api/order/menu",
        headers=bearer(admin["token"]),
        json={"title": "Test Pizza", "description": "A test pizza", "image": "test.png", "price": 0.005},
    )
    return {"franchise": franchise.json(), "store": store.json(), "item": menu.json()[-1]}


def order_for(shop, menu_id=None, price=None):
    return {
        "franchiseId": shop["franchise"]["id"],
        "storeId": shop["store"]["id"],
        "items": [{
            "menuId": menu_id if menu_id is not None else shop["item"]["id"],
            "description": shop["item"]["description"],
            "price": price if price is not None else shop["item"]["price"],
        }],
    }


class TestMenu:

    @pytest.mark.asyncio
    async def test_get_menu_is_public(self, async_client: AsyncClient, shop):
        res = await async_client.get("/api/order/menu")
        assert res.status_code == 200
        assert res.json()[0]["title"] == "Test Pizza"

    @pytest.mark.asyncio
    async def test_add_menu_item_as_admin(self, async_client: AsyncClient, admin, shop):
        res = await async_client.put(
            "/api/order/menu",
            headers=bearer(admin["token"]),
            json={"title": "Admin Pizza", "description": "Admin special", "image": "admin.png", "price": 0.01},
        )
        assert res.status_code == 200
        titles = [item["title"] for item in res.json()]
        assert titles == ["Test Pizza", "Admin Pizza"]

    @pytest.mark.asyncio
    async def test_add_menu_item_as_diner(self, async_client: AsyncClient, diner):
        res = await async_client.put(
            "/api/order/menu",
            headers=bearer(diner["token"]),
            json={"title": "Hacker Pizza", "description": "No", "image": "hack.png", "price": 0.001},
        )
        assert res.status_code == 403
        assert "unable to add menu item" in res.json()["message"]


class TestOrders:

    @pytest.mark.asyncio
    async def test_get_orders_empty(self, async_client: AsyncClient, diner):
        res = await async_client.get("/api/order", headers=bearer(diner["token"]))
        assert res.status_code == 200
        assert res.json()["dinerId"] == diner["user"]["id"]
        assert res.json()["orders"] == []

    @pytest.mark.asyncio
    async def test_get_orders_requires_auth(self, async_client: AsyncClient):
        res = await async_client.get("/api/order")
        assert res.status_code == 401

    @pytest.mark.asyncio
    async def test_create_order_factory_success(self, async_client: AsyncClient, diner, shop, factory):
        res = await async_client.post("/api/order", headers=bearer(diner["token"]), json=order_for(shop))

        assert res.status_code == 200
        body = res.json()
        assert body["order"]["id"]
        assert body["order"]["items"][0]["menuId"] == shop["item"]["id"]
        assert body["jwt"] == "factory-jwt-123"
        assert body["followLinkToEndChaos"] == "http://example.com/report"

        sent = json.loads(factory.requests[0].content)
        assert sent["diner"]["id"] == diner["user"]["id"]
        assert factory.requests[0].headers["Authorization"] == "Bearer test-key"

        history = await async_client.get("/api/order", headers=bearer(diner["token"]))
        assert [o["id"] for o in history.json()["orders"]] == [body["order"]["id"]]

    @pytest.mark.asyncio
    async def test_create_order_factory_failure(self, async_client: AsyncClient, diner, shop, factory):
        factory.status_code = 500
        factory.body = {"reportUrl": "http://example.com/fail-report"}

        res = await async_client.post("/api/order", headers=bearer(diner["token"]), json=order_for(shop))
        assert res.status_code == 500
        assert "Failed to fulfill order" in res.json()["message"]
        assert res.json()["followLinkToEndChaos"] == "http://example.com/fail-report"

        # the local record is kept even though the factory failed
        history = await async_client.get("/api/order", headers=bearer(diner["token"]))
        assert len(history.json()["orders"]) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [200, 500])
    async def test_factory_reply_not_an_object(self, async_client: AsyncClient, diner, shop, factory, status_code):
        factory.status_code = status_code
        factory.body = ["not", "an", "object"]

        res = await async_client.post("/api/order", headers=bearer(diner["token"]), json=order_for(shop))
        body = res.json()
        if status_code == 200:
            assert res.status_code == 200
            assert body["jwt"] is None
        else:
            assert res.status_code == 500
            assert body["message"] == "Failed to fulfill order at factory"
            assert body["followLinkToEndChaos"] is None

    @pytest.mark.asyncio
    async def test_create_order_unknown_menu_item(self, async_client: AsyncClient, diner, shop, factory):
        res = await async_client.post("/api/order", headers=bearer(diner["token"]), json=order_for(shop, menu_id=999999))
        assert res.status_code == 500
        assert factory.requests == []

    @pytest.mark.asyncio
    async def test_order_counts_toward_store_revenue(self, async_client: AsyncClient, admin, diner, shop):
        await async_client.post("/api/order", headers=bearer(diner["token"]), json=order_for(shop, price=0.05))
        res = await async_client.get(f"/api/franchise/{admin['user']['id']}", headers=bearer(admin["token"]))
        store = res.json()[0]["stores"][0]
        assert store["totalRevenue"] == pytest.approx(0.05)
