"""
Billing Configuration API Endpoints.

Singleton NSA configuration.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.session import get_db
from backend.app.repositories.config_repo import ConfigRepository
from backend.app.schemas.billing_config import ConfigUpdate, ConfigResponse
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(prefix="/config", tags=["Config"])


@router.get("", response_model=ConfigResponse)
async def get_config(db: AsyncSession = Depends(get_db)):
    """Fetch the configuration, creating it with defaults on first access."""
    config = await ConfigRepository.get(db)
    return ConfigResponse.model_validate(config)


@router.put("/{config_id}", response_model=ConfigResponse)
async def update_config(config_id: int, config_data: ConfigUpdate, db: AsyncSession = Depends(get_db)):
    """Update the last used NSA sequence number."""
    config = await ConfigRepository.update(
        db,
        config_id,
        config_data.last_sequence_number,
        config_data.fixed_sequence_prefix,
    )

    await log_event(
        db=db,
        action=AuditAction.CONFIG_UPDATED,
        entity="config",
        entity_id=config.id,
        metadata={"ultimoNsaSequencial": config.last_sequence_number}
    )

    return ConfigResponse.model_validate(config)
