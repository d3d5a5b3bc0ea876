# tests/test_api.py
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from httpx import ASGITransport, AsyncClient
from app.database import get_db
from app.main import app
from app.models.enums import UserRole
from tests.factories import add_chauffeur, add_user


@pytest.fixture
async def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(db):
    add_user(db, "adm", role=UserRole.ADMIN)
    add_user(db, "emp-a", name="Asha")
    add_user(db, "emp-b", name="Bala")
    add_chauffeur(db, "c1", name="Ravi")


async def onboard(client, **fields):
    body = {"license_plate": "KA09ZZ0009", "vin": "VIN9", "make": "Maruti", "model": "Ciaz",
            "mileage": 20000, "assigned_employee_id": "emp-a"}
    body.update(fields)
    resp = await client.post("/api/v1/vehicles", json=body)
    assert resp.status_code == 201
    return resp.json()


class TestFleetApi:
    @pytest.mark.asyncio
    async def test_health(self, client):
        resp = await client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["database"] == "ok"

    @pytest.mark.asyncio
    async def test_onboard_and_transfer_vehicle(self, client, seeded):
        vehicle = await onboard(client, assigned_chauffeur_id="c1")
        assert vehicle["assigned_chauffeur_id"] == "c1"
        assert len(vehicle["assignment_history"]) == 1

        resp = await client.put(f"/api/v1/vehicles/{vehicle['id']}", json={"assigned_employee_id": "emp-b"})
        assert resp.status_code == 422

        resp = await client.put(f"/api/v1/vehicles/{vehicle['id']}",
                                json={"assigned_employee_id": "emp-b", "mileage": 26000, "transfer_reason": "Promotion"})
        assert resp.status_code == 200

        resp = await client.get(f"/api/v1/vehicles/{vehicle['id']}/assignments")
        ledger = resp.json()
        assert [e["assigned_to_id"] for e in ledger] == ["emp-a", "emp-b"]
        assert ledger[0]["end_mileage"] == 26000
        assert ledger[1]["end_date"] is None

        resp = await client.get("/api/v1/employees/emp-a/policy")
        assert resp.status_code == 200
        assert resp.json()["total_km_driven"] == 6000
        assert resp.json()["status"] == "Within Limit"

    @pytest.mark.asyncio
    async def test_unknown_vehicle_is_404(self, client):
        resp = await client.get("/api/v1/vehicles/ghost")
        assert resp.status_code == 404
        assert "ghost" in resp.json()["detail"]

    @pytest.mark.asyncio
    async def test_dispatch_accept_round_trip(self, client, seeded):
        vehicle = await onboard(client)
        trip = (await client.post("/api/v1/trips", json={"trip_name": "Guest pickup", "trip_purpose": "Pool Trip"})).json()
        assert trip["dispatch_status"] == "Pending Dispatch"

        resp = await client.post(f"/api/v1/trips/{trip['id']}/dispatch", json={
            "chauffeur_id": "c1", "vehicle_id": vehicle["id"], "trip_purpose": "Guest Trip",
        })
        assert resp.status_code == 200
        assert resp.json()["dispatch_status"] == "Awaiting Acceptance"

        resp = await client.post(f"/api/v1/trips/{trip['id']}/accept", json={"chauffeur_id": "c1"})
        assert resp.status_code == 200
        assert resp.json()["dispatch_status"] == "Accepted"
        assert resp.json()["chauffeur_id"] == "c1"

        resp = await client.post(f"/api/v1/trips/{trip['id']}/reject", json={"chauffeur_id": "c1"})
        assert resp.status_code == 409

        types = [n["type"] for n in (await client.get("/api/v1/notifications")).json()]
        assert "Trip Dispatch" in types
        assert "Trip Accepted" in types

    @pytest.mark.asyncio
    async def test_mark_all_read(self, client, seeded):
        await client.post("/api/v1/chauffeurs", json={"name": "Manoj", "license_number": "DL-77"})

        resp = await client.put("/api/v1/notifications/read")
        assert resp.status_code == 200
        assert resp.json()["marked_read"] == 1

        unread = (await client.get("/api/v1/notifications", params={"unread_only": True})).json()
        assert unread == []

    @pytest.mark.asyncio
    async def test_compliance_check_endpoint(self, client, seeded):
        await onboard(client, documents=[{"doc_type": "Insurance", "expiry_date": "2000-01-01"}])

        first = await client.post("/api/v1/compliance/check")
        second = await client.post("/api/v1/compliance/check")

        assert first.status_code == 200
        assert [e["subject"] for e in first.json()] == ["URGENT: Insurance Expiry for Vehicle KA09ZZ0009"]
        assert second.json() == []
        assert len((await client.get("/api/v1/emails")).json()) == 1
