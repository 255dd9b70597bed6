"""
Customer API Endpoints.

CRUD over customers (clientes).
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from backend.app.db.session import get_db
from backend.app.repositories.customer_repo import CustomerRepository
from backend.app.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/clientes", tags=["Customers"])


@router.get("", response_model=List[CustomerResponse])
async def list_customers(db: AsyncSession = Depends(get_db)):
    """List all customers ordered by name."""
    customers = await CustomerRepository.list(db)
    return [CustomerResponse.model_validate(customer) for customer in customers]


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(customer_data: CustomerCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a new customer.

    `nome` and `codigo` are required.
    """
    customer = await CustomerRepository.create(db, customer_data)

    await log_event(
        db=db,
        action=AuditAction.CUSTOMER_CREATED,
        entity="clientes",
        entity_id=customer.id,
        metadata={"codigo": customer.code}
    )

    return CustomerResponse.model_validate(customer)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: str,
    customer_data: CustomerUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update customer fields (only the fields sent are changed)."""
    customer = await CustomerRepository.update(db, customer_id, customer_data)

    await log_event(
        db=db,
        action=AuditAction.CUSTOMER_UPDATED,
        entity="clientes",
        entity_id=customer.id,
        metadata={"updated_fields": list(customer_data.model_dump(exclude_unset=True, by_alias=True).keys())}
    )

    return CustomerResponse.model_validate(customer)


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: str, db: AsyncSession = Depends(get_db)):
    """
    Delete a customer.

    Returns 409 while charges still reference the customer.
    """
    await CustomerRepository.delete(db, customer_id)

    await log_event(
        db=db,
        action=AuditAction.CUSTOMER_DELETED,
        entity="clientes",
        entity_id=customer_id,
    )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
