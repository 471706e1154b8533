"""
End-to-end tests for the register / login / items HTTP surface.
"""

import pytest
from sqlalchemy.exc import OperationalError

from api import items as items_api
from auth.jwt import verify_token
from config.settings import config

from conftest import login_headers


class TestRegisterLogin:
    @pytest.mark.asyncio
    async def test_register_twice_is_400(self, client):
        body = {"username": "alice", "passwordHash": "h"}
        r = await client.post("/register", json=body)
        assert r.status_code == 200
        r = await client.post("/register", json=body)
        assert r.status_code == 400
        assert r.json() == {"detail": "User already exists"}

        r = await client.post("/register", json={"username": "bob", "passwordHash": "h"})
        assert r.status_code == 200

    @pytest.mark.asyncio
    async def test_login_returns_token(self, client):
        await client.post("/register", json={"username": "alice", "passwordHash": "h"})
        r = await client.post("/login", json={"username": "alice", "passwordHash": "h"})
        assert r.status_code == 200
        assert isinstance(r.json()["token"], str)

    @pytest.mark.asyncio
    async def test_login_with_wrong_hash_is_401(self, client):
        await client.post("/register", json={"username": "alice", "passwordHash": "h"})
        r = await client.post("/login", json={"username": "alice", "passwordHash": "nope"})
        assert r.status_code == 401
        r = await client.post("/login", json={"username": "ghost", "passwordHash": "h"})
        assert r.status_code == 401

    @pytest.mark.asyncio
    async def test_register_requires_fields(self, client):
        r = await client.post("/register", json={"username": "alice"})
        assert r.status_code == 422


class TestItems:
    @pytest.mark.asyncio
    async def test_create_then_list_roundtrip(self, client):
        headers = await login_headers(client, "alice")
        r = await client.post("/items", json={"name": "x", "completed": False}, headers=headers)
        assert r.status_code == 201
        created = r.json()
        assert r.headers["location"] == f"/items/{created['id']}"

        r = await client.get("/items", headers=headers)
        assert r.status_code == 200
        items = r.json()
        assert len(items) == 1
        assert items[0]["name"] == "x"
        assert items[0]["completed"] is False
        requester_id = verify_token(headers["Authorization"][len("Bearer "):]).user_id
        assert items[0]["ownerId"] == requester_id
        assert created["ownerId"] == requester_id

    @pytest.mark.asyncio
    async def test_owner_is_forced_to_requester(self, client):
        alice = await login_headers(client, "alice")
        bob = await login_headers(client, "bob")
        r = await client.post("/items", json={"name": "a"}, headers=alice)
        alice_id = r.json()["ownerId"]

        r = await client.post("/items", json={"name": "b", "ownerId": alice_id}, headers=bob)
        assert r.json()["ownerId"] != alice_id

    @pytest.mark.asyncio
    async def test_list_never_shows_other_users_items(self, client):
        alice = await login_headers(client, "alice")
        bob = await login_headers(client, "bob")
        await client.post("/items", json={"name": "secret"}, headers=alice)

        r = await client.get("/items", headers=bob)
        assert r.status_code == 200
        assert r.json() == []

    @pytest.mark.asyncio
    async def test_update_item(self, client):
        headers = await login_headers(client, "alice")
        item = (await client.post("/items", json={"name": "x"}, headers=headers)).json()

        r = await client.put(f"/items/{item['id']}", json={"name": "y", "completed": True}, headers=headers)
        assert r.status_code == 200
        assert r.json()["name"] == "y"
        assert r.json()["completed"] is True

    @pytest.mark.asyncio
    async def test_update_missing_is_404(self, client):
        headers = await login_headers(client, "alice")
        r = await client.put("/items/999", json={"name": "y"}, headers=headers)
        assert r.status_code == 404
        assert r.content == b""

    @pytest.mark.asyncio
    async def test_delete_item(self, client):
        headers = await login_headers(client, "alice")
        item = (await client.post("/items", json={"name": "x"}, headers=headers)).json()

        r = await client.delete(f"/items/{item['id']}", headers=headers)
        assert r.status_code == 204
        assert (await client.get("/items", headers=headers)).json() == []

    @pytest.mark.asyncio
    async def test_delete_missing_is_404_and_store_unchanged(self, client):
        headers = await login_headers(client, "alice")
        await client.post("/items", json={"name": "keep"}, headers=headers)

        r = await client.delete("/items/999", headers=headers)
        assert r.status_code == 404
        assert r.content == b""
        assert [i["name"] for i in (await client.get("/items", headers=headers)).json()] == ["keep"]

    @pytest.mark.asyncio
    async def test_write_without_token_is_401(self, client):
        r = await client.post("/items", json={"name": "x"})
        assert r.status_code == 401
        r = await client.delete("/items/1")
        assert r.status_code == 401


class TestStoreFailures:
    @pytest.mark.asyncio
    async def test_store_error_is_generic_500(self, client, monkeypatch):
        headers = await login_headers(client, "alice")

        async def _broken_store(session, user_id):
            raise OperationalError("SELECT * FROM items", {}, Exception("connection refused"))

        monkeypatch.setattr(items_api, "list_items_by_owner", _broken_store)
        r = await client.get("/items", headers=headers)
        assert r.status_code == 500
        assert r.json() == {"detail": "Internal server error"}
        assert "connection refused" not in r.text


class TestCrossOwnerMutation:
    """By default update/delete look items up by id only, as the source service did."""

    @pytest.mark.asyncio
    async def test_any_user_can_update_and_delete_by_id(self, client):
        alice = await login_headers(client, "alice")
        bob = await login_headers(client, "bob")
        item = (await client.post("/items", json={"name": "mine"}, headers=alice)).json()

        r = await client.put(f"/items/{item['id']}", json={"name": "bob was here"}, headers=bob)
        assert r.status_code == 200
        assert r.json()["ownerId"] == item["ownerId"]
        assert (await client.get("/items", headers=alice)).json()[0]["name"] == "bob was here"

        r = await client.delete(f"/items/{item['id']}", headers=bob)
        assert r.status_code == 204
        assert (await client.get("/items", headers=alice)).json() == []

    @pytest.mark.asyncio
    async def test_enforced_ownership_hides_foreign_items(self, client, monkeypatch):
        monkeypatch.setattr(config, "enforce_item_ownership", True)
        alice = await login_headers(client, "alice")
        bob = await login_headers(client, "bob")
        item = (await client.post("/items", json={"name": "mine"}, headers=alice)).json()

        r = await client.put(f"/items/{item['id']}", json={"name": "nope"}, headers=bob)
        assert r.status_code == 404
        r = await client.delete(f"/items/{item['id']}", headers=bob)
        assert r.status_code == 404

        r = await client.put(f"/items/{item['id']}", json={"name": "still mine"}, headers=alice)
        assert r.status_code == 200
