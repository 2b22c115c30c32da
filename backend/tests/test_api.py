# tests/test_api.py
from __future__ import annotations

from decimal import Decimal

import pytest

from conftest import ACK_BUCKET, create_agent, create_balance, create_sale, receipt_form

PNG = ("gcash.png", b"\x89PNG receipt", "image/png")


async def submit(client, **overrides):
    return await client.post("/api/v1/payments", data=receipt_form(**overrides), files={"receipt": PNG})


@pytest.mark.asyncio
async def test_root(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.json() == {"status": "ok", "service": "property-backoffice"}


# ---------------------------------------------------------
# payments
# ---------------------------------------------------------
@pytest.mark.asyncio
async def test_submit_review_and_acknowledge(client, db, receipt_store):
    await create_balance(db, "Maria Santos", "Living Water Subdivision", "3", "12")

    res = await submit(client)
    assert res.status_code == 201, res.text
    body = res.json()
    payment_id = body["id"]
    assert body["status"] == "Pending"
    assert body["payment_period"] == "2026-10-01"
    assert Decimal(body["amount"]) == Decimal("15000")

    res = await client.post(f"/api/v1/payments/{payment_id}/approve")
    assert res.status_code == 200
    assert res.json()["status"] == "Approved"

    res = await client.post(
        f"/api/v1/payments/{payment_id}/ack-receipt",
        files={"receipt": ("ar.pdf", b"%PDF-1.7 ack", "application/pdf")},
    )
    assert res.status_code == 200
    ack_path = res.json()["ack_receipt_path"]
    assert receipt_store.objects[(ACK_BUCKET, ack_path)] == b"%PDF-1.7 ack"

    res = await client.get(f"/api/v1/payments/{payment_id}/receipt", params={"kind": "acknowledgment"})
    assert res.status_code == 200
    assert res.content == b"%PDF-1.7 ack"
    assert res.headers["content-type"] == "application/pdf"


@pytest.mark.asyncio
async def test_submit_validation_error_body(client, db):
    await create_balance(db, "Maria Santos", "Living Water Subdivision", "3", "12")

    res = await submit(client, due_date="1st")

    assert res.status_code == 422
    detail = res.json()["detail"]
    assert detail["error"] == "VALIDATION_ERROR"
    assert detail["field"] == "due_date"


@pytest.mark.asyncio
async def test_submit_without_receipt(client, db):
    await create_balance(db, "Maria Santos", "Living Water Subdivision", "3", "12")

    res = await client.post("/api/v1/payments", data=receipt_form())

    assert res.status_code == 422
    assert res.json()["detail"]["field"] == "receipt"


@pytest.mark.asyncio
async def test_submit_when_storage_is_down(client, db, receipt_store):
    await create_balance(db, "Maria Santos", "Living Water Subdivision", "3", "12")
    receipt_store.fail_uploads = True

    res = await submit(client)

    assert res.status_code == 503
    assert res.json()["detail"]["error"] == "STORE_ERROR"


@pytest.mark.asyncio
async def test_invalid_transition_is_a_conflict(client, db):
    await create_balance(db, "Maria Santos", "Living Water Subdivision", "3", "12")
    payment_id = (await submit(client)).json()["id"]

    assert (await client.post(f"/api/v1/payments/{payment_id}/reject")).status_code == 200
    res = await client.post(f"/api/v1/payments/{payment_id}/approve")

    assert res.status_code == 409
    detail = res.json()["detail"]
    assert detail["error"] == "INVALID_TRANSITION"
    assert detail["current_status"] == "Rejected"
    assert (await client.get(f"/api/v1/payments/{payment_id}")).json()["status"] == "Rejected"


@pytest.mark.asyncio
async def test_edit_list_and_delete(client, db):
    await create_balance(db, "Maria Santos", "Living Water Subdivision", "3", "12")
    payment_id = (await submit(client)).json()["id"]
    await submit(client, reference_number="GC-000002")

    res = await client.patch(f"/api/v1/payments/{payment_id}", json={"amount": "15500.00", "vat": "Vatable"})
    assert res.status_code == 200
    assert res.json()["vat"] == "Vatable"
    assert res.json()["version"] == 2

    res = await client.get("/api/v1/payments", params={"payer_name": "maria", "status": "Pending"})
    page = res.json()
    assert page["total"] == 2
    assert page["page"] == 1
    assert page["total_pages"] == 1
    assert len(page["items"]) == 2

    res = await client.delete(f"/api/v1/payments/{payment_id}")
    assert res.status_code == 204

    res = await client.get(f"/api/v1/payments/{payment_id}")
    assert res.status_code == 404
    assert res.json()["detail"]["error"] == "NOT_FOUND"

    assert (await client.get("/api/v1/payments")).json()["total"] == 1
    assert (await client.get("/api/v1/payments", params={"page": 0})).status_code == 422


@pytest.mark.asyncio
async def test_client_views(client, db):
    await create_balance(db, "Maria Santos", "Living Water Subdivision", "3", "12")
    await create_balance(db, "Maria Santos", "Havahills Estate", "1", "4")
    await submit(client)

    res = await client.get("/api/v1/clients/Maria Santos/balances")
    assert res.status_code == 200
    assert {b["block_lot"] for b in res.json()} == {"Block 3 Lot 12", "Block 1 Lot 4"}

    res = await client.get("/api/v1/clients/Maria Santos/payments")
    assert [p["reference_number"] for p in res.json()] == ["GC-778812"]

    assert (await client.get("/api/v1/clients/Nobody/payments")).json() == []


# ---------------------------------------------------------
# sales + performance
# ---------------------------------------------------------
@pytest.mark.asyncio
async def test_sale_lifecycle_feeds_leaderboard(client, db):
    cruz = await create_agent(db, "A. Cruz")
    await create_agent(db, "B. Reyes")

    res = await client.post(
        "/api/v1/sales",
        json={
            "seller_name": "A. Cruz",
            "buyer_name": "Ramon Bautista",
            "total_contract_price": "3200000.00",
            "project": "Havahills Estate",
        },
    )
    assert res.status_code == 201, res.text
    sale = res.json()
    assert sale["agent_id"] == cruz.id
    assert sale["status"] == "pending"

    board = (await client.get("/api/v1/leaderboard")).json()
    assert all(Decimal(e["total_confirmed"]) == 0 for e in board["items"])

    res = await client.post(f"/api/v1/sales/{sale['id']}/confirm")
    assert res.json()["status"] == "confirmed"
    assert (await client.post(f"/api/v1/sales/{sale['id']}/reject")).status_code == 409

    board = (await client.get("/api/v1/leaderboard", params={"limit": 1})).json()
    assert board["total_agents"] == 2
    assert [e["full_name"] for e in board["items"]] == ["A. Cruz"]
    assert Decimal(board["items"][0]["total_confirmed"]) == Decimal("3200000")

    listed = (await client.get("/api/v1/sales", params={"status": "confirmed"})).json()
    assert [s["id"] for s in listed] == [sale["id"]]


@pytest.mark.asyncio
async def test_agent_standing(client, db):
    cruz = await create_agent(db, "A. Cruz")
    await create_sale(db, "A. Cruz", 2_000_000)
    await create_sale(db, "A. Cruz", 3_000_000)

    res = await client.get(f"/api/v1/agents/{cruz.id}/standing")

    assert res.status_code == 200
    body = res.json()
    assert body["rank"] == 1
    assert body["current_tier"]["label"] == "Bronze Tier"
    assert body["next_tier"]["label"] == "Silver Tier"
    assert Decimal(body["progress_percent"]) == Decimal("66.7")
    assert (await client.get("/api/v1/agents/999/standing")).status_code == 404


@pytest.mark.asyncio
async def test_commission_tiers(client):
    res = await client.get("/api/v1/commission/tiers")

    assert res.status_code == 200
    assert [t["label"] for t in res.json()] == ["No Allowance", "Bronze Tier", "Silver Tier", "Gold Tier"]
    assert Decimal(res.json()[1]["threshold"]) == Decimal("3000000")
