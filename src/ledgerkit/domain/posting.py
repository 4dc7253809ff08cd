"""Journal posting generation for classified bank transactions."""

import logging
from decimal import Decimal

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    ZERO,
    Account,
    BankTransaction,
    JournalDraft,
    JournalEntry,
    JournalLineDraft,
)
from ledgerkit.domain.errors import (
    ImbalancedPostingError,
    MissingConfigurationError,
    NotFoundError,
    UnclassifiedError,
    ValidationError,
    account_id_not_found,
    account_inactive,
    account_not_found,
    bank_account_missing,
    imbalanced_posting,
    transaction_unclassified,
)

logger = logging.getLogger(__name__)

DEFAULT_CREATED_BY = "SYSTEM"


class JournalPostingGenerator:
    """Turns a classified bank transaction into a balanced journal entry.

    Two modes are supported:

    * Pair mode: the transaction carries explicit debit and credit account
      IDs, which are used as-is.
    * Single-account mode: the transaction carries one account code and the
      other side is the company's default bank/cash account. Money in debits
      the bank and credits the classified account; money out debits the
      classified account and credits the bank.
    """

    def __init__(self, db: Database):
        """Initialize posting generator.

        Args:
            db: Database instance
        """
        self.db = db

    def generate(self, transaction: BankTransaction) -> JournalDraft:
        """Build the journal draft for a transaction without writing anything.

        Args:
            transaction: Transaction to post

        Returns:
            Balanced journal draft referencing ``TXN-<id>``

        Raises:
            UnclassifiedError: If the transaction has no classification
            ValidationError: If the transaction amount is zero
            NotFoundError: If a referenced account is missing or inactive
            MissingConfigurationError: If single-account mode finds no bank account
            ImbalancedPostingError: If the generated lines do not balance
        """
        if not transaction.is_classified:
            raise UnclassifiedError(transaction_unclassified(transaction.id))

        amount = transaction.amount
        if amount == ZERO:
            raise ValidationError(f"Transaction {transaction.id} has a zero amount; nothing to post")

        if transaction.has_account_pair:
            debit_account = self._require_account_id(transaction.company_id, transaction.debit_account_id)
            credit_account = self._require_account_id(transaction.company_id, transaction.credit_account_id)
        else:
            classified = self._require_account_code(transaction.company_id, transaction.account_code)
            bank = self.db.get_default_cash_account(transaction.company_id)
            if bank is None:
                raise MissingConfigurationError(bank_account_missing(transaction.company_id))

            if transaction.is_credit:
                debit_account, credit_account = bank, classified
            else:
                debit_account, credit_account = classified, bank

        lines = (
            JournalLineDraft(
                account_id=debit_account.id,
                debit_amount=amount,
                credit_amount=ZERO,
                description=transaction.description,
                source_transaction_id=transaction.id,
            ),
            JournalLineDraft(
                account_id=credit_account.id,
                debit_amount=ZERO,
                credit_amount=amount,
                description=transaction.description,
                source_transaction_id=transaction.id,
            ),
        )
        draft = JournalDraft(
            company_id=transaction.company_id,
            fiscal_period_id=transaction.fiscal_period_id,
            entry_date=transaction.transaction_date,
            description=transaction.description,
            reference=transaction.reference,
            source_transaction_id=transaction.id,
            lines=lines,
        )
        check_balanced(draft, amount)
        return draft

    def post(self, transaction: BankTransaction, created_by: str = DEFAULT_CREATED_BY) -> JournalEntry:
        """Generate and persist the journal entry for a transaction.

        Does not check for an existing entry; callers that must not
        duplicate postings go through JournalSyncService.

        Returns:
            The stored journal entry with its lines
        """
        draft = self.generate(transaction)
        entry = self.db.create_journal_entry(draft, created_by=created_by)
        logger.debug("Posted %s as journal entry %s", draft.reference, entry.id)
        return entry

    def _require_account_code(self, company_id: int, code: str) -> Account:
        account = self.db.get_account_by_code(company_id, code)
        if account is None:
            raise NotFoundError(account_not_found(company_id, code))
        if not account.is_active:
            raise NotFoundError(account_inactive(code))
        return account

    def _require_account_id(self, company_id: int, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None or account.company_id != company_id:
            raise NotFoundError(account_id_not_found(account_id))
        if not account.is_active:
            raise NotFoundError(account_inactive(account.code))
        return account


def check_balanced(draft: JournalDraft, amount: Decimal) -> None:
    """Verify a draft's debits equal its credits and the expected amount.

    Raises:
        ImbalancedPostingError: If the totals disagree
    """
    debits = draft.total_debits
    credits = draft.total_credits
    if debits != credits or debits != amount:
        raise ImbalancedPostingError(imbalanced_posting(draft.reference, debits, credits))
