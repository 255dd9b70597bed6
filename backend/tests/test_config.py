"""
Integration tests for the singleton NSA configuration.
"""

import pytest
from sqlalchemy import select, func

from backend.app.models.billing_config import BillingConfig


@pytest.mark.asyncio
async def test_get_config_creates_defaults(client):
    response = await client.get("/api/config")

    assert response.status_code == 200
    assert response.json() == {"id": 1, "ultimoNsaSequencial": 0, "parteFixaNsa": "04"}


@pytest.mark.asyncio
async def test_update_config(client):
    await client.get("/api/config")

    response = await client.put("/api/config/1", json={"ultimoNsaSequencial": 42})

    assert response.status_code == 200
    assert response.json()["ultimoNsaSequencial"] == 42
    assert (await client.get("/api/config")).json()["ultimoNsaSequencial"] == 42


@pytest.mark.asyncio
async def test_update_config_creates_row_if_absent(client):
    response = await client.put("/api/config/1", json={"ultimoNsaSequencial": 7, "parteFixaNsa": "05"})

    assert response.status_code == 200
    assert response.json() == {"id": 1, "ultimoNsaSequencial": 7, "parteFixaNsa": "05"}


@pytest.mark.asyncio
async def test_update_config_missing_field(client):
    response = await client.put("/api/config/1", json={})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_config_unknown_id(client):
    response = await client.put("/api/config/2", json={"ultimoNsaSequencial": 1})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_repeated_get_keeps_single_row(client, db_session):
    for _ in range(3):
        assert (await client.get("/api/config")).status_code == 200

    count = (await db_session.execute(select(func.count(BillingConfig.id)))).scalar()
    assert count == 1
