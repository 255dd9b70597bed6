"""
Charge repository.

CRUD operations for charges plus the bulk statements used by the
remittance workflow (status updates, shipment marking, archiving).
"""

from typing import Iterable, List

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ResourceNotFoundError, ValidationError
from backend.app.db import gateway
from backend.app.models.charge import Charge
from backend.app.models.customer import Customer
from backend.app.models.billing_enums import ChargeStatus, ShipmentStatus
from backend.app.schemas.charge import ChargeCreate, ChargeUpdate


class ChargeRepository:

    @staticmethod
    async def _ensure_customer(db: AsyncSession, customer_id: str) -> None:
        result = await gateway.execute(db, select(Customer.id).where(Customer.id == customer_id))
        if result.scalar_one_or_none() is None:
            raise ValidationError(
                f"Customer {customer_id} does not exist",
                field="clienteId",
            )

    @staticmethod
    async def create(db: AsyncSession, data: ChargeCreate) -> Charge:
        await ChargeRepository._ensure_customer(db, data.customer_id)

        charge = Charge(
            customer_id=data.customer_id,
            description=data.description,
            amount=data.amount,
            due_date=data.due_date,
            status=data.status or ChargeStatus.PENDING.value,
            shipment_status=ShipmentStatus.NOT_SENT.value,
        )
        db.add(charge)
        await gateway.commit(db)
        await db.refresh(charge)
        return charge

    @staticmethod
    async def get(db: AsyncSession, charge_id: str) -> Charge:
        result = await gateway.execute(db, select(Charge).where(Charge.id == charge_id))
        charge = result.scalar_one_or_none()
        if not charge:
            raise ResourceNotFoundError("Charge", charge_id)
        return charge

    @staticmethod
    async def list(db: AsyncSession) -> List[Charge]:
        """All charges, latest due date first."""
        result = await gateway.execute(
            db, select(Charge).order_by(Charge.due_date.desc(), Charge.id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update(db: AsyncSession, charge_id: str, data: ChargeUpdate) -> Charge:
        charge = await ChargeRepository.get(db, charge_id)
        update_data = data.model_dump(exclude_unset=True)

        if "shipment_sequence" in update_data and not update_data["shipment_sequence"]:
            if charge.shipment_sequence:
                raise ValidationError(
                    "Remittance sequence cannot be cleared once assigned",
                    field="nsa_remessa",
                )
            update_data.pop("shipment_sequence")

        if "customer_id" in update_data and update_data["customer_id"] != charge.customer_id:
            await ChargeRepository._ensure_customer(db, update_data["customer_id"])

        for field, value in update_data.items():
            setattr(charge, field, value)

        await gateway.commit(db)
        await db.refresh(charge)
        return charge

    @staticmethod
    async def delete(db: AsyncSession, charge_id: str) -> None:
        charge = await ChargeRepository.get(db, charge_id)
        await db.delete(charge)
        await gateway.commit(db)

    @staticmethod
    async def set_status(db: AsyncSession, charge_id: str, status: str) -> None:
        """Set the status of one charge; raises ResourceNotFoundError if no row matched."""
        result = await gateway.execute(
            db,
            update(Charge)
            .where(Charge.id == charge_id)
            .values(status=status)
            .execution_options(synchronize_session=False),
        )
        if result.rowcount == 0:
            await gateway.rollback(db)
            raise ResourceNotFoundError("Charge", charge_id)
        await gateway.commit(db)

    @staticmethod
    async def mark_shipped(db: AsyncSession, charge_ids: Iterable[str], sequence: str) -> int:
        """Assign the NSA to every existing charge in the set. Returns matched rows."""
        result = await gateway.execute(
            db,
            update(Charge)
            .where(Charge.id.in_(list(charge_ids)))
            .values(shipment_sequence=sequence, shipment_status=ShipmentStatus.PROCESSED.value)
            .execution_options(synchronize_session=False),
        )
        await gateway.commit(db)
        return result.rowcount

    @staticmethod
    async def delete_many(db: AsyncSession, charge_ids: Iterable[str]) -> int:
        result = await gateway.execute(
            db,
            delete(Charge)
            .where(Charge.id.in_(list(charge_ids)))
            .execution_options(synchronize_session=False),
        )
        await gateway.commit(db)
        return result.rowcount
