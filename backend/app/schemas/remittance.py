"""
Remittance and return file schemas.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Union

from backend.app.services.archive_store import PERIOD_PATTERN


class MarkShippedRequest(BaseModel):
    """Charges to include in a remittance and the NSA assigned to them."""
    ids: List[str] = Field(default_factory=list)
    nsa: Optional[Union[str, int]] = None


class MarkShippedResponse(BaseModel):
    message: str
    updated: int


class ChargeSnapshot(BaseModel):
    """
    Full charge as fetched by the client before archiving.

    Unknown fields are kept so the archive holds exactly what was sent.
    """
    id: str = Field(..., min_length=1)

    class Config:
        extra = "allow"


class ArchiveRequest(BaseModel):
    """Charges to archive and the period label naming the archive file."""
    charges: List[ChargeSnapshot] = Field(..., alias="cobrancasParaArquivar")
    period: Optional[str] = Field(None, alias="periodo", min_length=1, max_length=40, pattern=PERIOD_PATTERN)

    class Config:
        populate_by_name = True


class ArchiveResponse(BaseModel):
    message: str
    archived: int
    archive_written: bool = Field(..., alias="archiveWritten")
    file_name: str = Field(..., alias="arquivo")

    class Config:
        populate_by_name = True


class ReconciliationSummaryResponse(BaseModel):
    """Tally of a processed return file."""
    processed: int
    paid: int
    rejected: int
    update_failures: int = Field(..., alias="updateFailures")
    malformed: int
    duplicates: int

    class Config:
        from_attributes = True
        populate_by_name = True


class ReturnFileResponse(BaseModel):
    message: str
    details: ReconciliationSummaryResponse = Field(..., alias="detalhes")

    class Config:
        populate_by_name = True
