"""Integration tests for wallet, endpoint and API key routers."""


class TestWalletRouter:
    async def test_requires_auth(self, client):
        assert (await client.get("/wallets")).status_code == 401

    async def test_save_then_update(self, client, auth_headers):
        resp = await client.put("/wallets", headers=auth_headers, json={
            "wallet_address": "0xabc", "network": "base-mainnet",
        })
        assert resp.status_code == 200
        assert resp.json()["created"] is True

        resp = await client.put("/wallets", headers=auth_headers, json={
            "wallet_address": "0xdef", "network": "base-mainnet",
        })
        assert resp.json()["created"] is False

        wallets = (await client.get("/wallets", headers=auth_headers)).json()
        assert [w["wallet_address"] for w in wallets] == ["0xdef"]

    async def test_blank_address(self, client, auth_headers):
        resp = await client.put("/wallets", headers=auth_headers, json={
            "wallet_address": "   ", "network": "base-mainnet",
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "Please fill in all wallet fields"


class TestEndpointRouter:
    async def test_requires_auth(self, client):
        assert (await client.get("/endpoints")).status_code == 401

    async def test_create(self, client, auth_headers):
        resp = await client.post("/endpoints", headers=auth_headers, json={
            "endpoint_path": "/api/data",
            "price_per_call": "0.001",
            "description": "Market data",
        })
        assert resp.status_code == 201
        data = resp.json()
        assert data["is_active"] is True
        assert data["currency"] == "USDC"
        assert data["network"] == "base-mainnet"

    async def test_create_rejects_relative_path(self, client, auth_headers):
        resp = await client.post("/endpoints", headers=auth_headers, json={
            "endpoint_path": "api/data", "price_per_call": "0.01",
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == 'Endpoint path must start with "/"'

    async def test_create_rejects_zero_price(self, client, auth_headers):
        resp = await client.post("/endpoints", headers=auth_headers, json={
            "endpoint_path": "/api/data", "price_per_call": "0",
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "Price must be a positive number"

    async def test_update_toggle_delete(self, client, auth_headers):
        resp = await client.post("/endpoints", headers=auth_headers, json={
            "endpoint_path": "/api/data", "price_per_call": "0.01", "description": "x",
        })
        endpoint_id = resp.json()["id"]

        resp = await client.patch(f"/endpoints/{endpoint_id}", headers=auth_headers, json={
            "price_per_call": "0.02", "description": "",
        })
        assert resp.status_code == 200
        assert resp.json()["description"] is None
        assert resp.json()["endpoint_path"] == "/api/data"

        resp = await client.post(f"/endpoints/{endpoint_id}/toggle", headers=auth_headers)
        assert resp.json()["is_active"] is False

        resp = await client.delete(f"/endpoints/{endpoint_id}", headers=auth_headers)
        assert resp.status_code == 204
        assert (await client.get("/endpoints", headers=auth_headers)).json() == []

    async def test_missing_endpoint(self, client, auth_headers):
        resp = await client.post("/endpoints/nope/toggle", headers=auth_headers)
        assert resp.status_code == 404
        assert resp.json()["code"] == "NOT_FOUND"

    async def test_other_users_endpoint(self, client, auth_headers):
        resp = await client.post("/endpoints", headers=auth_headers, json={
            "endpoint_path": "/api/data", "price_per_call": "0.01",
        })
        endpoint_id = resp.json()["id"]

        await client.post("/auth/signup", json={"email": "eve@example.com", "password": "secret1"})
        token = (await client.post("/auth/token", json={
            "email": "eve@example.com", "password": "secret1",
        })).json()["access_token"]
        eve = {"Authorization": f"Bearer {token}"}

        assert (await client.delete(f"/endpoints/{endpoint_id}", headers=eve)).status_code == 404
        assert (await client.get("/endpoints", headers=eve)).json() == []


class TestApiKeyRouter:
    async def test_current_is_stable(self, client, auth_headers):
        first = (await client.get("/api-keys/current", headers=auth_headers)).json()
        second = (await client.get("/api-keys/current", headers=auth_headers)).json()
        assert first["api_key"] == second["api_key"]
        assert first["api_key"].startswith("402x_")

    async def test_regenerate(self, client, auth_headers):
        first = (await client.get("/api-keys/current", headers=auth_headers)).json()
        resp = await client.post("/api-keys/regenerate", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["api_key"] != first["api_key"]
        current = (await client.get("/api-keys/current", headers=auth_headers)).json()
        assert current["api_key"] == resp.json()["api_key"]
