"""
Customer repository.

CRUD operations for customers on top of the persistence gateway.
"""

from typing import List

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ResourceNotFoundError, ResourceInUseError
from backend.app.db import gateway
from backend.app.models.customer import Customer
from backend.app.models.charge import Charge
from backend.app.schemas.customer import CustomerCreate, CustomerUpdate


class CustomerRepository:

    @staticmethod
    async def create(db: AsyncSession, data: CustomerCreate) -> Customer:
        customer = Customer(**data.model_dump())
        db.add(customer)
        await gateway.commit(db)
        await db.refresh(customer)
        return customer

    @staticmethod
    async def get(db: AsyncSession, customer_id: str) -> Customer:
        result = await gateway.execute(db, select(Customer).where(Customer.id == customer_id))
        customer = result.scalar_one_or_none()
        if not customer:
            raise ResourceNotFoundError("Customer", customer_id)
        return customer

    @staticmethod
    async def list(db: AsyncSession) -> List[Customer]:
        """All customers ordered by name."""
        result = await gateway.execute(db, select(Customer).order_by(Customer.name, Customer.id))
        return list(result.scalars().all())

    @staticmethod
    async def update(db: AsyncSession, customer_id: str, data: CustomerUpdate) -> Customer:
        customer = await CustomerRepository.get(db, customer_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(customer, field, value)

        await gateway.commit(db)
        await db.refresh(customer)
        return customer

    @staticmethod
    async def delete(db: AsyncSession, customer_id: str) -> None:
        """
        Delete a customer.

        Refused while any charge still references the customer.
        """
        customer = await CustomerRepository.get(db, customer_id)

        result = await gateway.execute(
            db, select(func.count(Charge.id)).where(Charge.customer_id == customer_id)
        )
        charge_count = result.scalar()
        if charge_count:
            raise ResourceInUseError("Customer", customer_id, "charges", charge_count)

        await db.delete(customer)
        await gateway.commit(db)
