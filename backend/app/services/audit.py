"""
Audit logging service for tracking billing mutations and batch operations.

Provides a persistent trail of who-changed-what for customers, charges and
remittances.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from backend.app.db import gateway
from backend.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    CUSTOMER_CREATED = "CUSTOMER_CREATED"
    CUSTOMER_UPDATED = "CUSTOMER_UPDATED"
    CUSTOMER_DELETED = "CUSTOMER_DELETED"

    CHARGE_CREATED = "CHARGE_CREATED"
    CHARGE_UPDATED = "CHARGE_UPDATED"
    CHARGE_DELETED = "CHARGE_DELETED"

    CONFIG_UPDATED = "CONFIG_UPDATED"

    # Remittance workflow
    REMITTANCE_MARKED = "REMITTANCE_MARKED"
    RETURN_FILE_PROCESSED = "RETURN_FILE_PROCESSED"
    REMITTANCE_ARCHIVED = "REMITTANCE_ARCHIVED"


async def log_event(
    db: AsyncSession,
    action: str,
    entity: Optional[str] = None,
    entity_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """
    Log a billing event to the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        entity: Table of the affected record (if applicable)
        entity_id: ID of the affected record
        metadata: Additional context as JSON

    Returns:
        Created AuditLog instance
    """
    audit_log = AuditLog(
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta_data=metadata,
    )

    db.add(audit_log)
    await gateway.commit(db)

    return audit_log


async def get_audit_trail(
    db: AsyncSession,
    entity_id: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100
) -> list[AuditLog]:
    """
    Retrieve audit trail with optional filtering, newest first.
    """
    query = select(AuditLog)

    if entity_id:
        query = query.where(AuditLog.entity_id == entity_id)

    if action:
        query = query.where(AuditLog.action == action)

    query = query.order_by(desc(AuditLog.timestamp), desc(AuditLog.id)).limit(limit)

    result = await gateway.execute(db, query)
    return list(result.scalars().all())
