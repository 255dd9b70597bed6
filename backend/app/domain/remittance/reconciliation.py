"""
Return File Reconciliation Engine.

Applies parsed return file outcomes to charges concurrently and reports
an aggregate tally.

Flow:
1. Skip malformed records (empty identifier or occurrence code)
2. Collapse duplicate identifiers: the last record in file order wins
3. Fan out one status update per charge, each in its own session
4. Join on all updates; individual failures are only counted
"""

import asyncio
import logging
from dataclasses import dataclass, asdict
from typing import Iterable, List, Tuple

from sqlalchemy.ext.asyncio import async_sessionmaker

from backend.app.core.exceptions import PersistenceError, ResourceNotFoundError, StoreUnavailableError
from backend.app.domain.remittance.return_file_parser import ReconciliationOutcome
from backend.app.repositories.charge_repo import ChargeRepository

logger = logging.getLogger("creche_billing")


@dataclass
class ReconciliationSummary:
    """Tally returned to the caller; the only result of a reconciliation run."""
    processed: int = 0
    paid: int = 0
    rejected: int = 0
    update_failures: int = 0
    malformed: int = 0
    duplicates: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def select_applicable(outcomes: Iterable[ReconciliationOutcome]) -> Tuple[List[ReconciliationOutcome], ReconciliationSummary]:
    """
    Split parsed outcomes into those to apply and the pre-apply counters.

    When the same charge identifier appears more than once, only its last
    record in file order is applied.
    """
    summary = ReconciliationSummary()
    latest = {}

    for outcome in outcomes:
        summary.processed += 1
        if outcome.malformed:
            summary.malformed += 1
            logger.warning("Malformed return file record at line %s", outcome.line_number)
            continue
        if outcome.charge_identifier in latest:
            summary.duplicates += 1
            # Re-insert so dict order follows the winning record
            del latest[outcome.charge_identifier]
        latest[outcome.charge_identifier] = outcome

    return list(latest.values()), summary


class ReconciliationEngine:
    """
    Applies return file outcomes to the charge table.

    Each update runs in its own session, since an AsyncSession cannot be
    shared between concurrent tasks. A semaphore caps how many updates hold
    a pooled connection at once.
    """

    def __init__(self, session_factory: async_sessionmaker, max_concurrency: int = 10):
        self.session_factory = session_factory
        self.max_concurrency = max(1, max_concurrency)

    async def _apply(self, semaphore: asyncio.Semaphore, outcome: ReconciliationOutcome) -> bool:
        """Apply one outcome. Returns False on a per-charge failure."""
        async with semaphore:
            async with self.session_factory() as db:
                try:
                    await ChargeRepository.set_status(db, outcome.charge_identifier, outcome.resolved_status)
                except StoreUnavailableError:
                    raise
                except ResourceNotFoundError:
                    logger.info(
                        "Return file line %s: charge %s not found",
                        outcome.line_number, outcome.charge_identifier,
                    )
                    return False
                except PersistenceError as exc:
                    logger.warning(
                        "Return file line %s: update of charge %s failed: %s",
                        outcome.line_number, outcome.charge_identifier, exc.message,
                    )
                    return False
        return True

    async def _run(self, outcomes: List[ReconciliationOutcome]) -> list:
        semaphore = asyncio.Semaphore(self.max_concurrency)
        return await asyncio.gather(
            *(self._apply(semaphore, outcome) for outcome in outcomes),
            return_exceptions=True,
        )

    async def reconcile(self, outcomes: Iterable[ReconciliationOutcome]) -> ReconciliationSummary:
        """
        Apply every well-formed outcome and return the tally.

        Raises:
            StoreUnavailableError: the store became unreachable. Raised only
                after every started update has finished.
        """
        applicable, summary = select_applicable(outcomes)

        # Shielded so a client disconnect does not cancel started updates
        results = await asyncio.shield(self._run(applicable))

        infrastructure_errors = []
        for outcome, result in zip(applicable, results):
            if isinstance(result, BaseException):
                infrastructure_errors.append(result)
            elif result is False:
                summary.update_failures += 1
            elif outcome.is_paid:
                summary.paid += 1
            else:
                summary.rejected += 1

        if infrastructure_errors:
            logger.error(
                "Return file reconciliation aborted: %s of %s updates hit infrastructure errors",
                len(infrastructure_errors), len(applicable),
            )
            raise infrastructure_errors[0]

        logger.info("Return file reconciled: %s", summary.as_dict())
        return summary
