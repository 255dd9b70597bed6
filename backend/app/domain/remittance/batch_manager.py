"""
Remittance Batch Manager.

Marks charges as sent in a remittance and archives charges whose
remittance cycle is complete.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.exceptions import ArchiveDeletionError, PersistenceError, ValidationError
from backend.app.models.charge import SHIPMENT_SEQUENCE_MAX_LENGTH
from backend.app.repositories.charge_repo import ChargeRepository
from backend.app.services.archive_store import ArchiveStore

logger = logging.getLogger("creche_billing")


@dataclass
class ArchiveResult:
    file_name: str
    archive_written: bool
    deleted: int


def current_period() -> str:
    """Default period label: the current year and month."""
    return date.today().strftime("%Y-%m")


class RemittanceBatchManager:

    @staticmethod
    async def mark_as_shipped(
        db: AsyncSession,
        charge_ids: Sequence[str],
        sequence: Optional[Union[str, int]],
    ) -> int:
        """
        Assign a shipment sequence (NSA) to a set of charges.

        Identifiers that do not exist are skipped.

        Returns:
            Number of charges actually updated
        """
        ids = [charge_id.strip() for charge_id in charge_ids or [] if charge_id and charge_id.strip()]
        if not ids:
            raise ValidationError("No charge ids were provided", field="ids")

        nsa = str(sequence).strip() if sequence is not None else ""
        if not nsa:
            raise ValidationError("Remittance sequence (NSA) is required", field="nsa")
        if len(nsa) > SHIPMENT_SEQUENCE_MAX_LENGTH:
            raise ValidationError(
                f"Remittance sequence (NSA) must be at most {SHIPMENT_SEQUENCE_MAX_LENGTH} characters",
                field="nsa",
            )

        updated = await ChargeRepository.mark_shipped(db, set(ids), nsa)
        logger.info("Remittance %s: %s of %s charges marked as shipped", nsa, updated, len(set(ids)))
        return updated

    @staticmethod
    async def archive(
        db: AsyncSession,
        store: ArchiveStore,
        snapshots: List[Dict[str, Any]],
        period: Optional[str] = None,
    ) -> ArchiveResult:
        """
        Back up charge snapshots to the period archive, then delete the charges.

        Flow:
        1. Append snapshots to remessa_<period>.json (best-effort, logged on failure)
        2. Delete the charges by id (authoritative, failure raises)
        """
        if not snapshots:
            raise ValidationError("No charges to archive were provided", field="cobrancasParaArquivar")

        period = period or current_period()
        file_name = store.file_name(period)
        charge_ids = [str(snapshot["id"]) for snapshot in snapshots]

        # 1. Backup file
        archive_written = True
        try:
            await store.append(period, snapshots)
        except (OSError, ValueError, TypeError) as exc:
            archive_written = False
            logger.error("Could not write archive %s, proceeding with deletion: %s", file_name, exc)

        # 2. Remove from the live table
        try:
            deleted = await ChargeRepository.delete_many(db, charge_ids)
        except PersistenceError as exc:
            logger.error("Archive %s: deleting charges %s failed: %s", file_name, charge_ids, exc.message)
            raise ArchiveDeletionError(charge_ids, exc.message) from exc

        logger.info("Archive %s: %s charges archived, %s deleted", file_name, len(snapshots), deleted)
        return ArchiveResult(file_name=file_name, archive_written=archive_written, deleted=deleted)
