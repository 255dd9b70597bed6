"""
Remittance API Endpoints.

Remittance marking, bank return file processing and archive management.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typing import List, Optional

from backend.app.core.config import settings
from backend.app.core.exceptions import ValidationError
from backend.app.db.session import get_db, get_session_factory
from backend.app.domain.remittance.batch_manager import RemittanceBatchManager
from backend.app.domain.remittance.reconciliation import ReconciliationEngine
from backend.app.domain.remittance.return_file_parser import parse_return_file
from backend.app.schemas.remittance import (
    MarkShippedRequest, MarkShippedResponse,
    ArchiveRequest, ArchiveResponse,
    ReconciliationSummaryResponse, ReturnFileResponse,
)
from backend.app.services.archive_store import ArchiveStore, get_archive_store
from backend.app.services.audit import log_event, AuditAction

router = APIRouter(tags=["Remittance"])


@router.post("/marcar-remessa", response_model=MarkShippedResponse)
async def mark_remittance(request: MarkShippedRequest, db: AsyncSession = Depends(get_db)):
    """
    Mark charges as sent in the remittance identified by `nsa`.

    Unknown ids are skipped; the response reports how many were updated.
    """
    updated = await RemittanceBatchManager.mark_as_shipped(db, request.ids, request.nsa)

    await log_event(
        db=db,
        action=AuditAction.REMITTANCE_MARKED,
        metadata={"nsa": str(request.nsa), "requested": len(request.ids), "updated": updated}
    )

    return MarkShippedResponse(
        message=f"{updated} cobranças marcadas na remessa {request.nsa}",
        updated=updated,
    )


@router.post("/processar-retorno", response_model=ReturnFileResponse)
async def process_return_file(
    arquivo_retorno: Optional[UploadFile] = File(None, alias="arquivoRetorno"),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    """
    Upload a bank return file and update charge statuses.

    Lines that fail to update are counted, never fatal.
    """
    if arquivo_retorno is None:
        raise ValidationError("No return file was uploaded", field="arquivoRetorno")

    content = await arquivo_retorno.read()

    engine = ReconciliationEngine(session_factory, settings.reconciliation_max_concurrency)
    summary = await engine.reconcile(parse_return_file(content))

    async with session_factory() as db:
        await log_event(
            db=db,
            action=AuditAction.RETURN_FILE_PROCESSED,
            metadata={"filename": arquivo_retorno.filename, **summary.as_dict()}
        )

    return ReturnFileResponse(
        message="Arquivo de retorno processado",
        details=ReconciliationSummaryResponse(**summary.as_dict()),
    )


@router.post("/arquivar-remessa", response_model=ArchiveResponse)
async def archive_remittance(
    request: ArchiveRequest,
    db: AsyncSession = Depends(get_db),
    store: ArchiveStore = Depends(get_archive_store),
):
    """
    Back up charges to the period archive and remove them from the live table.

    A failed backup is logged and does not stop the deletion; a failed
    deletion fails the request.
    """
    snapshots = [charge.model_dump(mode="json") for charge in request.charges]
    result = await RemittanceBatchManager.archive(db, store, snapshots, request.period)

    await log_event(
        db=db,
        action=AuditAction.REMITTANCE_ARCHIVED,
        metadata={
            "arquivo": result.file_name,
            "ids": [snapshot["id"] for snapshot in snapshots],
            "archive_written": result.archive_written,
        }
    )

    return ArchiveResponse(
        message="Remessa finalizada e cobranças removidas com sucesso!",
        archived=result.deleted,
        archive_written=result.archive_written,
        file_name=result.file_name,
    )


@router.get("/listar-arquivos", response_model=List[str])
async def list_archives(store: ArchiveStore = Depends(get_archive_store)):
    """Archive file names, newest first."""
    return await store.list_files()


@router.get("/download-arquivo/{file_name}")
async def download_archive(file_name: str, store: ArchiveStore = Depends(get_archive_store)):
    """Download one archive file."""
    path = store.resolve(file_name)
    return FileResponse(path, media_type="application/json", filename=path.name)
