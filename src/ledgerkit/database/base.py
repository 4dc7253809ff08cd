"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date
from decimal import Decimal

# Entities only; domain services import this module
from ledgerkit.domain.entities import (
    Account,
    AccountNature,
    BankTransaction,
    FiscalPeriod,
    JournalDraft,
    JournalEntry,
    MappingRule,
    MatchType,
    PostedLine,
)


class Database(ABC):
    """Abstract database interface for ledgerkit.

    Every writer commits immediately when called outside ``unit_of_work()``.
    Inside a unit of work, writes become visible to later reads of the same
    database instance and are committed or rolled back together.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def unit_of_work(self) -> AbstractContextManager[None]:
        """Return a context manager grouping writes into one transaction.

        The outermost block commits on success and rolls back on error.
        Nested blocks behave as savepoints.
        """
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, company_id: int, code: str, name: str, nature: AccountNature, is_bank: bool = False
    ) -> int:
        """Create a chart-of-accounts entry. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, company_id: int, code: str) -> Optional[Account]:
        """Get account by company and code."""
        pass

    @abstractmethod
    def list_accounts(self, company_id: int, active_only: bool = False) -> list[Account]:
        """List accounts of a company ordered by code."""
        pass

    @abstractmethod
    def get_default_cash_account(self, company_id: int) -> Optional[Account]:
        """Get the active bank/cash account with the lowest code."""
        pass

    @abstractmethod
    def set_account_active(self, account_id: int, is_active: bool) -> None:
        """Activate or deactivate an account."""
        pass

    # Fiscal period operations
    @abstractmethod
    def create_fiscal_period(self, company_id: int, name: str, start_date: date, end_date: date) -> int:
        """Create a fiscal period. Returns period ID."""
        pass

    @abstractmethod
    def get_fiscal_period(self, period_id: int) -> Optional[FiscalPeriod]:
        """Get fiscal period by ID."""
        pass

    @abstractmethod
    def list_fiscal_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List fiscal periods of a company ordered by start date."""
        pass

    @abstractmethod
    def set_fiscal_period_closed(self, period_id: int, is_closed: bool) -> None:
        """Open or close a fiscal period."""
        pass

    # Mapping rule operations
    @abstractmethod
    def create_mapping_rule(
        self,
        company_id: int,
        name: str,
        match_type: MatchType,
        pattern: str,
        account_code: str,
        priority: int = 0,
    ) -> int:
        """Create a mapping rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_mapping_rule(self, rule_id: int) -> Optional[MappingRule]:
        """Get mapping rule by ID."""
        pass

    @abstractmethod
    def list_mapping_rules(self, company_id: int, active_only: bool = False) -> list[MappingRule]:
        """List rules ordered by priority (descending) then definition order."""
        pass

    @abstractmethod
    def update_mapping_rule(
        self, rule_id: int, priority: Optional[int] = None, is_active: Optional[bool] = None
    ) -> None:
        """Update rule priority and/or active flag."""
        pass

    # Bank transaction operations
    @abstractmethod
    def create_bank_transaction(
        self,
        company_id: int,
        fiscal_period_id: int,
        transaction_date: date,
        description: Optional[str],
        debit_amount: Decimal,
        credit_amount: Decimal,
        balance: Optional[Decimal] = None,
    ) -> int:
        """Create a bank transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_bank_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""
        pass

    @abstractmethod
    def list_bank_transactions(
        self,
        company_id: int,
        fiscal_period_id: Optional[int] = None,
        classified: Optional[bool] = None,
    ) -> list[BankTransaction]:
        """List transactions in date order.

        Args:
            company_id: Company scope
            fiscal_period_id: Optional fiscal period filter
            classified: True for classified only, False for unclassified only,
                None for both
        """
        pass

    @abstractmethod
    def list_unposted_classified_transactions(
        self, company_id: int, fiscal_period_id: Optional[int] = None
    ) -> list[BankTransaction]:
        """List classified transactions that have no journal entry yet."""
        pass

    @abstractmethod
    def update_transaction_account_code(self, transaction_id: int, account_code: str) -> None:
        """Store a single-account classification."""
        pass

    @abstractmethod
    def update_transaction_account_pair(
        self, transaction_id: int, debit_account_id: int, credit_account_id: int
    ) -> None:
        """Store an explicit debit/credit classification."""
        pass

    @abstractmethod
    def clear_transaction_classification(self, transaction_id: int) -> None:
        """Remove any classification from a transaction."""
        pass

    # Journal operations
    @abstractmethod
    def create_journal_entry(self, draft: JournalDraft, created_by: str) -> JournalEntry:
        """Persist a journal entry together with its lines."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry with lines by ID."""
        pass

    @abstractmethod
    def find_journal_entry_by_reference(self, company_id: int, reference: str) -> Optional[JournalEntry]:
        """Get journal entry with lines by reference."""
        pass

    @abstractmethod
    def list_journal_entries(
        self, company_id: int, fiscal_period_id: Optional[int] = None
    ) -> list[JournalEntry]:
        """List journal entries with lines ordered by date and ID."""
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: int) -> None:
        """Delete one journal entry and its lines."""
        pass

    @abstractmethod
    def delete_journal_entries(self, company_id: int, include_opening_balances: bool = False) -> int:
        """Delete journal entries and their lines for a company. Returns count deleted."""
        pass

    @abstractmethod
    def list_posted_lines(
        self, company_id: int, fiscal_period_id: int, account_id: Optional[int] = None
    ) -> list[PostedLine]:
        """List journal lines of a period joined with their entry headers.

        Lines are ordered by entry date, entry ID and line ID.
        """
        pass
