"""
Audit Log Database Model.

Tracks billing mutations and remittance batch operations.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from backend.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model for tracking billing events.

    Events logged:
    - CUSTOMER_CREATED / CUSTOMER_UPDATED / CUSTOMER_DELETED
    - CHARGE_CREATED / CHARGE_UPDATED / CHARGE_DELETED
    - CONFIG_UPDATED
    - REMITTANCE_MARKED / REMITTANCE_ARCHIVED
    - RETURN_FILE_PROCESSED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # Which record was affected (None for batch actions)
    entity = Column(String(50), nullable=True)
    entity_id = Column(String(50), nullable=True, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    # Timestamp
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', entity={self.entity}, entity_id={self.entity_id})>"
