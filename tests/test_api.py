"""End-to-end HTTP tests against an app wired with in-memory collaborators."""

from httpx import AsyncClient


async def _add(client: AsyncClient, **overrides) -> dict:
    body = {"description": "Lunch", "amount": 12.5, "category": "Food", "type": "expense", "date": "2026-03-02"}
    body.update(overrides)
    resp = await client.post("/transactions", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestHealth:
    async def test_ready(self, client: AsyncClient) -> None:
        resp = await client.get("/ready")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"
        assert resp.json()["commit"] == "3f9c2ab"

    async def test_health_reports_cache(self, auth_client: AsyncClient) -> None:
        await auth_client.get("/transactions")
        resp = await auth_client.get("/health")
        body = resp.json()
        assert body["commit"] == "3f9c2ab"
        assert body["store"] == "memory"
        assert body["identity"] == "memory"
        assert body["cache"]["entries"] == 1
        assert body["cache"]["ttl_seconds"] == 30
        assert body["cache"]["last_fetch"] is not None

    async def test_security_headers(self, client: AsyncClient) -> None:
        resp = await client.get("/ready")
        assert resp.headers["X-Content-Type-Options"] == "nosniff"
        assert resp.headers["X-Frame-Options"] == "DENY"


class TestAuth:
    async def test_requires_token(self, client: AsyncClient) -> None:
        resp = await client.get("/transactions")
        assert resp.status_code == 401
        assert resp.json() == {"error": "Missing bearer token"}

    async def test_rejects_unknown_token(self, client: AsyncClient) -> None:
        resp = await client.get("/transactions", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401

    async def test_sign_up_validation_errors(self, client: AsyncClient) -> None:
        resp = await client.post("/auth/sign-up", json={"name": "", "email": "x", "password": "short"})
        assert resp.status_code == 422
        assert set(resp.json()["fields"]) == {"name", "email", "password"}

    async def test_sign_in_and_me(self, auth_client: AsyncClient) -> None:
        resp = await auth_client.post("/auth/sign-in", json={
            "email": "alice@example.com", "password": "correct-horse",
        })
        assert resp.status_code == 200
        assert resp.json()["user"]["email"] == "alice@example.com"

        me = await auth_client.get("/auth/me")
        assert me.json()["name"] == "Alice Example"

    async def test_wrong_password(self, auth_client: AsyncClient) -> None:
        resp = await auth_client.post("/auth/sign-in", json={
            "email": "alice@example.com", "password": "wrong-horse",
        })
        assert resp.status_code == 401
        assert resp.json()["fields"] == {"password": "Incorrect password"}

    async def test_sign_out_ends_session(self, auth_client: AsyncClient) -> None:
        assert (await auth_client.post("/auth/sign-out")).status_code == 200
        assert (await auth_client.get("/auth/me")).status_code == 401

    async def test_password_reset(self, auth_client: AsyncClient, identity) -> None:
        resp = await auth_client.post("/auth/password-reset", json={"email": "alice@example.com"})
        assert resp.status_code == 200
        assert identity.reset_requests == ["alice@example.com"]


class TestTransactions:
    async def test_create_list_view_edit_delete(self, auth_client: AsyncClient) -> None:
        tx = await _add(auth_client)
        assert tx["amount"] == -12.5
        assert tx["icon"] == "🍽️"

        listing = (await auth_client.get("/transactions")).json()
        assert listing["count"] == 1

        resp = await auth_client.put(f"/transactions/{tx['id']}", json={
            "description": "Dinner", "amount": 30, "category": "Food", "type": "expense",
        })
        assert resp.json()["description"] == "Dinner"
        assert resp.json()["date"] == "2026-03-02"

        viewed = (await auth_client.get(f"/transactions/{tx['id']}")).json()
        assert viewed["amount"] == -30

        assert (await auth_client.delete(f"/transactions/{tx['id']}")).status_code == 200
        assert (await auth_client.get(f"/transactions/{tx['id']}")).status_code == 404

    async def test_invalid_transaction(self, auth_client: AsyncClient) -> None:
        resp = await auth_client.post("/transactions", json={"description": "", "amount": -1, "type": "gift"})
        assert resp.status_code == 422
        assert set(resp.json()["fields"]) == {"description", "amount", "category", "type"}

    async def test_default_date_is_today(self, auth_client: AsyncClient) -> None:
        tx = await _add(auth_client, date=None)
        assert tx["date"] == "2026-03-15"

    async def test_refresh_sees_external_writes(self, auth_client: AsyncClient, store) -> None:
        me = (await auth_client.get("/auth/me")).json()
        await auth_client.get("/transactions")
        await store.add("transactions", {
            "userId": me["uid"], "description": "Imported", "amount": 5.0,
            "type": "income", "category": "Salary", "date": "2026-03-03",
        })

        assert (await auth_client.get("/transactions")).json()["count"] == 0
        assert (await auth_client.get("/transactions?refresh=true")).json()["count"] == 1


class TestAggregates:
    async def test_dashboard(self, auth_client: AsyncClient) -> None:
        await _add(auth_client, description="Salary", amount=1000, category="Salary", type="income", date="2026-03-01")
        await _add(auth_client, amount=40, date="2026-03-05")
        await _add(auth_client, amount=60, date="2026-02-05")

        body = (await auth_client.get("/dashboard")).json()
        assert body["user_name"] == "Alice Example"
        assert body["total_balance"] == 900.0
        assert body["month_income"] == 1000.0
        assert body["month_expense"] == 40.0
        assert len(body["recent_transactions"]) == 3
        assert body["balance_trend"]["values"] == [-60.0, 940.0, 900.0]

    async def test_analytics_formats_with_currency(self, auth_client: AsyncClient) -> None:
        await _add(auth_client, amount=40, category="Bills")
        await auth_client.put("/settings/preferences", json={"currency": "EUR"})

        body = (await auth_client.get("/analytics")).json()
        assert body["currency"] == "EUR"
        assert body["top_category"] == {"name": "Bills", "amount": 40.0}
        assert body["display"]["total_expense"] == "€ 40.00"
        assert body["monthly_expenses"]["labels"] == ["Mar 2026"]


class TestCategories:
    async def test_defaults_seeded_at_sign_up(self, auth_client: AsyncClient) -> None:
        body = (await auth_client.get("/categories")).json()
        assert body["income_count"] == 2
        assert body["expense_count"] == 5

    async def test_crud(self, auth_client: AsyncClient) -> None:
        created = (await auth_client.post("/categories", json={"name": "Gym", "type": "expense", "icon": "🏋️"})).json()
        resp = await auth_client.put(f"/categories/{created['id']}", json={"name": "Gym", "type": "expense", "icon": "💪"})
        assert resp.json()["icon"] == "💪"
        assert (await auth_client.delete(f"/categories/{created['id']}")).status_code == 200
        assert (await auth_client.delete(f"/categories/{created['id']}")).status_code == 404

    async def test_icon_required(self, auth_client: AsyncClient) -> None:
        resp = await auth_client.post("/categories", json={"name": "Gym", "type": "expense"})
        assert resp.status_code == 422
        assert resp.json()["fields"] == {"icon": "Please select an icon"}


class TestSettings:
    async def test_default_currency_from_profile(self, auth_client: AsyncClient) -> None:
        assert (await auth_client.get("/settings/preferences")).json() == {"currency": "USD"}

    async def test_export_csv(self, auth_client: AsyncClient) -> None:
        await _add(auth_client)
        resp = await auth_client.get("/settings/export")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "transactions.csv" in resp.headers["content-disposition"]
        assert resp.text.splitlines()[0] == "Date,Description,Category,Type,Amount"

    async def test_delete_data_signs_out(self, auth_client: AsyncClient) -> None:
        await _add(auth_client)
        resp = await auth_client.delete("/settings/data")
        assert resp.json() == {"status": "deleted", "deleted_transactions": 1}
        assert (await auth_client.get("/transactions")).status_code == 401
