"""Domain model entities for ledgerkit.

These are immutable snapshots of business concepts, independent of the
database schema. Services hand them across layers freely because nothing
can change them in place; updates go through the Database port.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0")

TRANSACTION_REFERENCE_PREFIX = "TXN-"
OPENING_BALANCE_REFERENCE_PREFIX = "OB-"


class AccountNature(str, Enum):
    """Nature of a chart-of-accounts entry."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def is_debit_normal(self) -> bool:
        """Assets and expenses grow on the debit side."""
        return self in (AccountNature.ASSET, AccountNature.EXPENSE)


class MatchType(str, Enum):
    """How a mapping rule pattern is compared with a description."""

    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    EQUALS = "equals"
    REGEX = "regex"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: int
    company_id: int
    code: str
    name: str
    nature: AccountNature
    is_active: bool
    is_bank: bool
    created_at: datetime


@dataclass(frozen=True)
class FiscalPeriod:
    """Fiscal period domain entity."""

    id: int
    company_id: int
    name: str
    start_date: date
    end_date: date
    is_closed: bool
    created_at: datetime

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class MappingRule:
    """Classification rule that maps a description pattern to an account code."""

    id: int
    company_id: int
    name: str
    match_type: MatchType
    pattern: str
    account_code: str
    priority: int
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class BankTransaction:
    """Parsed bank statement line.

    Classification is either a single ``account_code`` or an explicit
    ``(debit_account_id, credit_account_id)`` pair.
    """

    id: int
    company_id: int
    fiscal_period_id: int
    transaction_date: date
    description: Optional[str]
    debit_amount: Decimal
    credit_amount: Decimal
    balance: Optional[Decimal]
    account_code: Optional[str]
    debit_account_id: Optional[int]
    credit_account_id: Optional[int]
    imported_at: datetime

    @property
    def has_account_pair(self) -> bool:
        return self.debit_account_id is not None and self.credit_account_id is not None

    @property
    def is_classified(self) -> bool:
        return self.has_account_pair or self.account_code is not None

    @property
    def is_credit(self) -> bool:
        """Money in: the credit side carries the amount."""
        return self.credit_amount != ZERO

    @property
    def amount(self) -> Decimal:
        return self.credit_amount if self.is_credit else self.debit_amount

    @property
    def reference(self) -> str:
        return transaction_reference(self.id)


@dataclass(frozen=True)
class JournalEntryLine:
    """One side of a journal entry."""

    id: int
    journal_entry_id: int
    account_id: int
    debit_amount: Decimal
    credit_amount: Decimal
    description: Optional[str]
    source_transaction_id: Optional[int]


@dataclass(frozen=True)
class JournalEntry:
    """Balanced double-entry record together with its lines."""

    id: int
    company_id: int
    fiscal_period_id: int
    entry_date: date
    description: Optional[str]
    reference: str
    created_by: str
    created_at: datetime
    source_transaction_id: Optional[int]
    lines: tuple[JournalEntryLine, ...] = ()

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit_amount for line in self.lines), ZERO)

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit_amount for line in self.lines), ZERO)

    @property
    def is_opening_balance(self) -> bool:
        return self.reference.startswith(OPENING_BALANCE_REFERENCE_PREFIX)


@dataclass(frozen=True)
class JournalLineDraft:
    """Unsaved journal line produced by the posting generator."""

    account_id: int
    debit_amount: Decimal
    credit_amount: Decimal
    description: Optional[str]
    source_transaction_id: Optional[int] = None


@dataclass(frozen=True)
class JournalDraft:
    """Unsaved journal entry produced by the posting generator."""

    company_id: int
    fiscal_period_id: int
    entry_date: date
    description: Optional[str]
    reference: str
    source_transaction_id: Optional[int]
    lines: tuple[JournalLineDraft, ...]

    @property
    def total_debits(self) -> Decimal:
        return sum((line.debit_amount for line in self.lines), ZERO)

    @property
    def total_credits(self) -> Decimal:
        return sum((line.credit_amount for line in self.lines), ZERO)


@dataclass(frozen=True)
class PostedLine:
    """Journal line joined with its entry header, used by the aggregator."""

    entry_id: int
    entry_date: date
    reference: str
    description: Optional[str]
    account_id: int
    debit_amount: Decimal
    credit_amount: Decimal


@dataclass(frozen=True)
class TrialBalanceEntry:
    """Opening, movement and closing balance of one account in one period."""

    account_code: str
    account_name: str
    nature: AccountNature
    opening_balance: Decimal
    period_debits: Decimal
    period_credits: Decimal
    closing_balance: Decimal

    @property
    def debit_column(self) -> Decimal:
        """Amount shown in the debit column of a trial balance."""
        if self.nature.is_debit_normal:
            return self.closing_balance if self.closing_balance > ZERO else ZERO
        return -self.closing_balance if self.closing_balance < ZERO else ZERO

    @property
    def credit_column(self) -> Decimal:
        """Amount shown in the credit column of a trial balance."""
        if self.nature.is_debit_normal:
            return -self.closing_balance if self.closing_balance < ZERO else ZERO
        return self.closing_balance if self.closing_balance > ZERO else ZERO


@dataclass(frozen=True)
class TrialBalanceTotals:
    """Column totals of a trial balance."""

    total_debits: Decimal
    total_credits: Decimal

    @property
    def difference(self) -> Decimal:
        return self.total_debits - self.total_credits

    @property
    def is_balanced(self) -> bool:
        return self.difference == ZERO


@dataclass(frozen=True)
class LedgerLineView:
    """Single posting in an account ledger with its running balance."""

    entry_date: date
    reference: str
    description: Optional[str]
    debit_amount: Decimal
    credit_amount: Decimal
    running_balance: Decimal


@dataclass(frozen=True)
class AccountLedger:
    """General ledger view of one account for one fiscal period."""

    account_code: str
    account_name: str
    nature: AccountNature
    opening_balance: Decimal
    lines: tuple[LedgerLineView, ...]
    period_debits: Decimal
    period_credits: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class SkippedTransaction:
    """Transaction left without a journal entry during regeneration."""

    transaction_id: int
    reason: str


@dataclass(frozen=True)
class RegenerationResult:
    """Outcome of a best-effort journal regeneration."""

    deleted_count: int
    created_count: int
    skipped: tuple[SkippedTransaction, ...] = field(default_factory=tuple)

    @property
    def has_failures(self) -> bool:
        return bool(self.skipped)


def transaction_reference(transaction_id: int) -> str:
    """Return the journal reference for a transaction posting."""
    return f"{TRANSACTION_REFERENCE_PREFIX}{transaction_id}"


def opening_balance_reference(fiscal_period_id: int) -> str:
    """Return the journal reference for a period's opening balance entry."""
    return f"{OPENING_BALANCE_REFERENCE_PREFIX}{fiscal_period_id}"
