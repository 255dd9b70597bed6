"""
Integration tests for charge management.
"""

import pytest


@pytest.mark.asyncio
async def test_create_charge_defaults(client, customer):
    """A charge created without status is Pendente and not yet shipped."""
    response = await client.post("/api/cobrancas", json={
        "clienteId": customer["id"],
        "descricao": "Mensalidade janeiro",
        "valor": 450.5,
        "vencimento": "2025-01-10"
    })

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "Pendente"
    assert data["statusRemessa"] == "N/A"
    assert data["nsa_remessa"] is None
    assert data["valor"] == 450.5
    assert data["vencimento"] == "2025-01-10"
    assert data["clienteId"] == customer["id"]
    assert len(data["id"]) == 16


@pytest.mark.asyncio
@pytest.mark.parametrize("override", [
    {"valor": 0},
    {"valor": -10},
    {"vencimento": "2025-13-40"},
    {"descricao": ""},
    {"status": "Desconhecido"},
])
async def test_create_charge_validation(client, customer, override):
    payload = {
        "clienteId": customer["id"],
        "descricao": "Mensalidade",
        "valor": 100,
        "vencimento": "2025-01-10",
        **override
    }

    response = await client.post("/api/cobrancas", json=payload)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_charge_missing_fields(client):
    response = await client.post("/api/cobrancas", json={"descricao": "Sem cliente"})

    assert response.status_code == 400
    fields = {tuple(err["loc"])[-1] for err in response.json()["details"]["errors"]}
    assert {"clienteId", "valor", "vencimento"} <= fields


@pytest.mark.asyncio
async def test_create_charge_unknown_customer(client):
    response = await client.post("/api/cobrancas", json={
        "clienteId": "ffffffffffffffff",
        "descricao": "Mensalidade",
        "valor": 100,
        "vencimento": "2025-01-10"
    })

    assert response.status_code == 400
    assert response.json()["details"]["field"] == "clienteId"


@pytest.mark.asyncio
async def test_list_charges_latest_due_date_first(client, make_charge):
    await make_charge(vencimento="2025-01-10")
    await make_charge(vencimento="2025-03-10")
    await make_charge(vencimento="2025-02-10")

    response = await client.get("/api/cobrancas")

    assert response.status_code == 200
    assert [c["vencimento"] for c in response.json()] == ["2025-03-10", "2025-02-10", "2025-01-10"]


@pytest.mark.asyncio
async def test_update_charge_status(client, make_charge):
    charge = await make_charge()

    response = await client.put(f"/api/cobrancas/{charge['id']}", json={"status": "Pago"})

    assert response.status_code == 200
    assert response.json()["status"] == "Pago"
    assert response.json()["descricao"] == charge["descricao"]


@pytest.mark.asyncio
async def test_update_charge_cannot_clear_shipment_sequence(client, make_charge):
    charge = await make_charge()
    await client.post("/api/marcar-remessa", json={"ids": [charge["id"]], "nsa": "041"})

    response = await client.put(f"/api/cobrancas/{charge['id']}", json={"nsa_remessa": None})

    assert response.status_code == 400
    listed = (await client.get("/api/cobrancas")).json()
    assert listed[0]["nsa_remessa"] == "041"


@pytest.mark.asyncio
async def test_update_missing_charge_returns_404(client):
    response = await client.put("/api/cobrancas/doesnotexist0000", json={"status": "Pago"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_charge(client, make_charge):
    charge = await make_charge()

    response = await client.delete(f"/api/cobrancas/{charge['id']}")

    assert response.status_code == 204
    assert (await client.get("/api/cobrancas")).json() == []

    again = await client.delete(f"/api/cobrancas/{charge['id']}")
    assert again.status_code == 404
