"""
Billing configuration repository.

The configuration is a singleton row created lazily on first read.
"""

from typing import Optional

from sqlalchemy import select, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.config import settings
from backend.app.core.exceptions import ResourceNotFoundError
from backend.app.db import gateway
from backend.app.models.billing_config import BillingConfig, SINGLETON_CONFIG_ID


def _insert_if_absent(dialect_name: str, values: dict):
    """INSERT that silently does nothing when the singleton already exists."""
    if dialect_name == "postgresql":
        return postgresql.insert(BillingConfig).values(**values).on_conflict_do_nothing(index_elements=["id"])
    if dialect_name == "sqlite":
        return sqlite.insert(BillingConfig).values(**values).on_conflict_do_nothing(index_elements=["id"])
    return insert(BillingConfig).values(**values).prefix_with("IGNORE")


class ConfigRepository:

    @staticmethod
    async def get(db: AsyncSession) -> BillingConfig:
        """Return the configuration, creating it with defaults if absent."""
        result = await gateway.execute(
            db, select(BillingConfig).where(BillingConfig.id == SINGLETON_CONFIG_ID)
        )
        config = result.scalar_one_or_none()
        if config:
            return config

        statement = _insert_if_absent(
            db.get_bind().dialect.name,
            {
                "id": SINGLETON_CONFIG_ID,
                "last_sequence_number": 0,
                "fixed_sequence_prefix": settings.default_sequence_prefix,
            },
        )
        await gateway.execute(db, statement)
        await gateway.commit(db)

        result = await gateway.execute(
            db, select(BillingConfig).where(BillingConfig.id == SINGLETON_CONFIG_ID)
        )
        return result.scalar_one()

    @staticmethod
    async def update(
        db: AsyncSession,
        config_id: int,
        last_sequence_number: int,
        fixed_sequence_prefix: Optional[str] = None,
    ) -> BillingConfig:
        if config_id != SINGLETON_CONFIG_ID:
            raise ResourceNotFoundError("Config", config_id)

        config = await ConfigRepository.get(db)
        config.last_sequence_number = last_sequence_number
        if fixed_sequence_prefix:
            config.fixed_sequence_prefix = fixed_sequence_prefix

        await gateway.commit(db)
        await db.refresh(config)
        return config
