"""
Charge API Endpoints.

CRUD over charges (cobrancas).
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from backend.app.db.session import get_db
from backend.app.repositories.charge_repo import ChargeRepository
from backend.app.schemas.charge import ChargeCreate, ChargeUpdate, ChargeResponse
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/cobrancas", tags=["Charges"])


@router.get("", response_model=List[ChargeResponse])
async def list_charges(db: AsyncSession = Depends(get_db)):
    """List all charges, latest due date first."""
    charges = await ChargeRepository.list(db)
    return [ChargeResponse.model_validate(charge) for charge in charges]


@router.post("", response_model=ChargeResponse, status_code=status.HTTP_201_CREATED)
async def create_charge(charge_data: ChargeCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a charge for an existing customer.

    Status defaults to Pendente.
    """
    charge = await ChargeRepository.create(db, charge_data)

    await log_event(
        db=db,
        action=AuditAction.CHARGE_CREATED,
        entity="cobrancas",
        entity_id=charge.id,
        metadata={"clienteId": charge.customer_id, "valor": str(charge.amount)}
    )

    return ChargeResponse.model_validate(charge)


@router.put("/{charge_id}", response_model=ChargeResponse)
async def update_charge(
    charge_id: str,
    charge_data: ChargeUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update charge fields (only the fields sent are changed)."""
    charge = await ChargeRepository.update(db, charge_id, charge_data)

    await log_event(
        db=db,
        action=AuditAction.CHARGE_UPDATED,
        entity="cobrancas",
        entity_id=charge.id,
        metadata={"updated_fields": list(charge_data.model_dump(exclude_unset=True, by_alias=True).keys())}
    )

    return ChargeResponse.model_validate(charge)


@router.delete("/{charge_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_charge(charge_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a charge."""
    await ChargeRepository.delete(db, charge_id)

    await log_event(
        db=db,
        action=AuditAction.CHARGE_DELETED,
        entity="cobrancas",
        entity_id=charge_id,
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
