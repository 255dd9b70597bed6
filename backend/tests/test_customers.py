"""
Integration tests for customer management.

Tests customer CRUD, validation and the delete restriction.
"""

import pytest

# Note: Client and DB setup are in conftest.py


# TEST 1: Create round-trip
@pytest.mark.asyncio
async def test_create_customer_round_trip(client):
    """Created customer is listed with the same client-facing fields."""
    payload = {
        "nome": "João Lima",
        "email": "joao@example.com",
        "telefone": "1133334444",
        "codigo": "C100",
        "contaCorrente": "9876-5"
    }

    response = await client.post("/api/clientes", json=payload)

    assert response.status_code == 201
    created = response.json()
    assert created["id"]
    for key, value in payload.items():
        assert created[key] == value

    listed = (await client.get("/api/clientes")).json()
    assert len(listed) == 1
    assert listed[0] == created


# TEST 2: Required fields
@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"codigo": "C1"},
    {"nome": "Ana"},
    {"nome": "   ", "codigo": "C1"},
    {"nome": "Ana", "codigo": ""},
])
async def test_create_customer_requires_name_and_code(client, payload):
    response = await client.post("/api/clientes", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error_code"] == "ERR_VALIDATION"
    assert body["message"]


# TEST 3: Ordering
@pytest.mark.asyncio
async def test_list_customers_ordered_by_name(client):
    for name, code in [("Carla", "C3"), ("Ana", "C1"), ("Bruno", "C2")]:
        await client.post("/api/clientes", json={"nome": name, "codigo": code})

    response = await client.get("/api/clientes")

    assert response.status_code == 200
    assert [c["nome"] for c in response.json()] == ["Ana", "Bruno", "Carla"]


# TEST 4: Update
@pytest.mark.asyncio
async def test_update_customer(client, customer):
    response = await client.put(
        f"/api/clientes/{customer['id']}",
        json={"telefone": "1100000000"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["telefone"] == "1100000000"
    assert data["nome"] == customer["nome"]  # Unchanged


@pytest.mark.asyncio
async def test_update_customer_cannot_null_name(client, customer):
    response = await client.put(f"/api/clientes/{customer['id']}", json={"nome": None})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_missing_customer_returns_404(client):
    response = await client.put("/api/clientes/doesnotexist0000", json={"nome": "X"})

    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND_001"


# TEST 5: Delete
@pytest.mark.asyncio
async def test_delete_customer(client, customer):
    response = await client.delete(f"/api/clientes/{customer['id']}")

    assert response.status_code == 204
    assert (await client.get("/api/clientes")).json() == []


@pytest.mark.asyncio
async def test_delete_missing_customer_returns_404(client):
    response = await client.delete("/api/clientes/doesnotexist0000")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_customer_with_charges_is_refused(client, customer, make_charge):
    """Customers referenced by charges cannot be deleted."""
    await make_charge()

    response = await client.delete(f"/api/clientes/{customer['id']}")

    assert response.status_code == 409
    assert response.json()["details"]["count"] == 1
    assert len((await client.get("/api/clientes")).json()) == 1


# TEST 6: Audit trail
@pytest.mark.asyncio
async def test_customer_changes_are_audited(client, customer, db_session):
    from backend.app.services.audit import get_audit_trail, AuditAction

    await client.put(f"/api/clientes/{customer['id']}", json={"email": "novo@example.com"})

    trail = await get_audit_trail(db_session, entity_id=customer["id"])

    assert [entry.action for entry in trail] == [AuditAction.CUSTOMER_UPDATED, AuditAction.CUSTOMER_CREATED]
    assert trail[0].meta_data == {"updated_fields": ["email"]}
