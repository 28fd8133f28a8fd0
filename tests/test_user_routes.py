"""User self-service endpoints and the self-or-admin update rule."""

import pytest
from httpx import AsyncClient

from conftest import random_name


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


class TestCurrentUser:

    @pytest.mark.asyncio
    async def test_get_me(self, async_client: AsyncClient, diner):
        res = await async_client.get("/api/user/me", headers=bearer(diner["token"]))
        assert res.status_code == 200
        body = res.json()
        assert body["email"] == diner["user"]["email"]
        assert body["id"] == diner["user"]["id"]
        assert "token" not in body


class TestUpdateUser:

    @pytest.mark.asyncio
    async def test_update_self(self, async_client: AsyncClient, diner):
        new_name = random_name()
        res = await async_client.put(
            f"/api/user/{diner['user']['id']}",
            headers=bearer(diner["token"]),
            json={"name": new_name, "email": diner["user"]["email"], "password": "dinerpass"},
        )
        assert res.status_code == 200
        body = res.json()
        assert body["user"]["name"] == new_name
        assert body["token"]

        me = await async_client.get("/api/user/me", headers=bearer(body["token"]))
        assert me.json()["name"] == new_name

    @pytest.mark.asyncio
    async def test_email_change_keeps_case(self, async_client: AsyncClient, diner):
        email = f"New.{random_name()}@Example.COM"
        res = await async_client.put(
            f"/api/user/{diner['user']['id']}",
            headers=bearer(diner["token"]),
            json={"email": email},
        )
        assert res.status_code == 200
        assert res.json()["user"]["email"] == email

        login = await async_client.put("/api/auth", json={"email": email, "password": diner["password"]})
        assert login.status_code == 200

    @pytest.mark.asyncio
    async def test_admin_updates_other_user(self, async_client: AsyncClient, admin, diner):
        new_name = random_name()
        res = await async_client.put(
            f"/api/user/{diner['user']['id']}",
            headers=bearer(admin["token"]),
            json={"name": new_name, "email": diner["user"]["email"], "password": "dinerpass"},
        )
        assert res.status_code == 200
        assert res.json()["user"]["name"] == new_name

    @pytest.mark.asyncio
    async def test_password_change_takes_effect(self, async_client: AsyncClient, diner):
        await async_client.put(
            f"/api/user/{diner['user']['id']}",
            headers=bearer(diner["token"]),
            json={"password": "brand-new"},
        )
        old = await async_client.put("/api/auth", json={"email": diner["user"]["email"], "password": diner["password"]})
        new = await async_client.put("/api/auth", json={"email": diner["user"]["email"], "password": "brand-new"})
        assert old.status_code == 404
        assert new.status_code == 200

    @pytest.mark.asyncio
    async def test_stranger_cannot_update(self, async_client: AsyncClient, diner, register):
        other = await register(password="pass2")
        res = await async_client.put(
            f"/api/user/{diner['user']['id']}",
            headers=bearer(other["token"]),
            json={"name": "hacker", "email": diner["user"]["email"], "password": "dinerpass"},
        )
        assert res.status_code == 403
        assert res.json()["message"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_update_requires_token(self, async_client: AsyncClient, diner):
        res = await async_client.put(f"/api/user/{diner['user']['id']}", json={"name": "x"})
        assert res.status_code == 401


class TestStubs:

    @pytest.mark.asyncio
    async def test_delete_user_not_implemented(self, async_client: AsyncClient, diner):
        res = await async_client.delete(f"/api/user/{diner['user']['id']}", headers=bearer(diner["token"]))
        assert res.status_code == 200
        assert res.json()["message"] == "not implemented"

        me = await async_client.get("/api/user/me", headers=bearer(diner["token"]))
        assert me.status_code == 200

    @pytest.mark.asyncio
    async def test_list_users_not_implemented(self, async_client: AsyncClient, diner):
        res = await async_client.get("/api/user/", headers=bearer(diner["token"]))
        assert res.status_code == 200
        assert res.json()["message"] == "not implemented"
        assert res.json()["users"] == []

    @pytest.mark.asyncio
    async def test_stubs_still_require_auth(self, async_client: AsyncClient):
        res = await async_client.get("/api/user/")
        assert res.status_code == 401
