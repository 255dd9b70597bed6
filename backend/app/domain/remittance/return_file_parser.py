"""
Bank Return File Parser.

Turns the raw bytes of a fixed-width bank return file into reconciliation
outcomes. Pure: no I/O and no state besides the input bytes.

Record layout (0-based, end-exclusive):
    [0]      record type, 'T' for transaction records
    [1:17]   charge identifier
    [17:19]  occurrence code ('00' or 'PG' mean paid)

Header, trailer and any other record types are ignored.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from backend.app.models.billing_enums import ChargeStatus, PAID_OCCURRENCE_CODES

TRANSACTION_MARKER = "T"
IDENTIFIER_SLICE = slice(1, 17)
OCCURRENCE_SLICE = slice(17, 19)

# Bank files are single-byte encoded; latin-1 never fails to decode
FILE_ENCODING = "latin-1"
UTF8_BOM = b"\xef\xbb\xbf"


@dataclass(frozen=True)
class ReconciliationOutcome:
    """Result of parsing one transaction record."""
    line_number: int
    charge_identifier: str
    occurrence_code: str
    resolved_status: Optional[str]

    @property
    def malformed(self) -> bool:
        return not self.charge_identifier or not self.occurrence_code

    @property
    def is_paid(self) -> bool:
        return self.resolved_status == ChargeStatus.PAID.value


def resolve_status(occurrence_code: str) -> Optional[str]:
    """Map a bank occurrence code to a charge status (None for an empty code)."""
    if not occurrence_code:
        return None
    if occurrence_code in PAID_OCCURRENCE_CODES:
        return ChargeStatus.PAID.value
    return ChargeStatus.rejected(occurrence_code)


def parse_line(line: str, line_number: int) -> Optional[ReconciliationOutcome]:
    """Parse one line, returning None for blank and non-transaction records."""
    if not line.strip() or not line.startswith(TRANSACTION_MARKER):
        return None

    charge_identifier = line[IDENTIFIER_SLICE].strip()
    occurrence_code = line[OCCURRENCE_SLICE].strip()

    return ReconciliationOutcome(
        line_number=line_number,
        charge_identifier=charge_identifier,
        occurrence_code=occurrence_code,
        resolved_status=resolve_status(occurrence_code) if charge_identifier else None,
    )


class ReturnFile:
    """
    Lazy view over the transaction records of a return file.

    Every iteration re-parses the stored bytes, so the sequence can be
    consumed any number of times with identical results.
    """

    def __init__(self, content: bytes):
        self._content = bytes(content)

    def __iter__(self) -> Iterator[ReconciliationOutcome]:
        content = self._content
        if content.startswith(UTF8_BOM):
            content = content[len(UTF8_BOM):]
        text = content.decode(FILE_ENCODING)
        for line_number, raw_line in enumerate(text.split("\n"), start=1):
            outcome = parse_line(raw_line.rstrip("\r"), line_number)
            if outcome is not None:
                yield outcome

    def __repr__(self):
        return f"<ReturnFile(size={len(self._content)})>"


def parse_return_file(content: bytes) -> ReturnFile:
    """Parse raw return file bytes into a restartable sequence of outcomes."""
    return ReturnFile(content)
