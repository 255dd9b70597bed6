"""
Charge database model.

A charge is an amount owed by a customer, collected through bank remittances.
"""

from sqlalchemy import Column, String, Numeric, Date, DateTime, ForeignKey, Text
from sqlalchemy.sql import func
from backend.app.db.session import Base
from backend.app.models.customer import generate_id
from backend.app.models.billing_enums import ChargeStatus, ShipmentStatus

SHIPMENT_SEQUENCE_MAX_LENGTH = 30


class Charge(Base):
    """
    Charge model.

    Status moves from Pendente to Pago/Rejeitado through return file
    reconciliation or manual update. Once a remittance sequence (NSA) is
    assigned it is never cleared.
    """
    __tablename__ = "cobrancas"

    id = Column(String(16), primary_key=True, default=generate_id)

    # Customers with charges cannot be deleted
    customer_id = Column(
        String(16),
        ForeignKey("clientes.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(Date, nullable=False, index=True)

    status = Column(String(50), nullable=False, default=ChargeStatus.PENDING.value)

    # Remittance tracking
    shipment_status = Column(String(30), nullable=False, default=ShipmentStatus.NOT_SENT.value)
    shipment_sequence = Column(String(SHIPMENT_SEQUENCE_MAX_LENGTH), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Charge(id={self.id}, customer_id={self.customer_id}, amount={self.amount}, status='{self.status}')>"
