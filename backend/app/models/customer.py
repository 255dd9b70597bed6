"""
Customer database model.

A customer is the responsible party billed for daycare services.
"""

import uuid

from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from backend.app.db.session import Base


def generate_id() -> str:
    """Opaque 16-char identifier, sized to fit the return-file identifier field."""
    return uuid.uuid4().hex[:16]


class Customer(Base):
    """
    Customer model.

    `code` is the business identifier used by the organization and is
    distinct from the server generated `id`.
    """
    __tablename__ = "clientes"

    id = Column(String(16), primary_key=True, default=generate_id)

    name = Column(String(255), nullable=False, index=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(30), nullable=True)
    code = Column(String(50), nullable=False, index=True)
    bank_account = Column(String(50), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}', code='{self.code}')>"
