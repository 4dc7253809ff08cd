"""Keeps journal entries in step with classified bank transactions."""

import logging
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import RegenerationResult, SkippedTransaction, transaction_reference
from ledgerkit.domain.errors import DomainError, NotFoundError, transaction_not_found
from ledgerkit.domain.posting import DEFAULT_CREATED_BY, JournalPostingGenerator

logger = logging.getLogger(__name__)


class JournalSyncService:
    """Service for syncing and regenerating transaction postings."""

    def __init__(self, db: Database, created_by: str = DEFAULT_CREATED_BY):
        """Initialize journal sync service.

        Args:
            db: Database instance
            created_by: Value stamped on generated journal entries
        """
        self.db = db
        self.created_by = created_by
        self.generator = JournalPostingGenerator(db)

    def sync_journal_entries(self, company_id: int, fiscal_period_id: Optional[int] = None) -> int:
        """Post every classified transaction that has no journal entry yet.

        The whole batch is one unit of work: the first failure propagates and
        nothing from this call is kept. Running it again after success posts
        nothing new.

        Args:
            company_id: Company ID
            fiscal_period_id: Optional fiscal period filter

        Returns:
            Number of journal entries created

        Raises:
            DomainError: The first posting failure encountered
        """
        created = 0
        with self.db.unit_of_work():
            for txn in self.db.list_unposted_classified_transactions(company_id, fiscal_period_id):
                self.generator.post(txn, created_by=self.created_by)
                created += 1

        logger.info("Synced %d journal entries for company %s", created, company_id)
        return created

    def regenerate_all_journal_entries(self, company_id: int) -> RegenerationResult:
        """Rebuild every transaction posting of a company from scratch.

        Existing transaction postings are deleted first; opening balance
        entries are kept. Each classified transaction is then posted in its
        own unit of work, so one bad transaction does not block the rest.
        Transactions that cannot be posted are logged and reported as skipped.

        Returns:
            RegenerationResult with deleted, created and skipped details
        """
        with self.db.unit_of_work():
            deleted = self.db.delete_journal_entries(company_id)

        created = 0
        skipped = []
        for txn in self.db.list_bank_transactions(company_id, classified=True):
            try:
                with self.db.unit_of_work():
                    self.generator.post(txn, created_by=self.created_by)
            except DomainError as e:
                logger.warning("Skipping transaction %s during regeneration: %s", txn.id, e)
                skipped.append(SkippedTransaction(transaction_id=txn.id, reason=str(e)))
                continue
            created += 1

        logger.info(
            "Regenerated journal entries for company %s: %d deleted, %d created, %d skipped",
            company_id,
            deleted,
            created,
            len(skipped),
        )
        return RegenerationResult(deleted_count=deleted, created_count=created, skipped=tuple(skipped))

    def generated_entry_exists(self, transaction_id: int) -> bool:
        """Check whether a transaction already has its journal entry.

        Raises:
            NotFoundError: If the transaction doesn't exist
        """
        txn = self.db.get_bank_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        entry = self.db.find_journal_entry_by_reference(txn.company_id, transaction_reference(txn.id))
        return entry is not None
