"""Trial balance and general ledger aggregation."""

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import (
    OPENING_BALANCE_REFERENCE_PREFIX,
    ZERO,
    Account,
    AccountLedger,
    AccountNature,
    FiscalPeriod,
    JournalDraft,
    JournalEntry,
    JournalLineDraft,
    LedgerLineView,
    PostedLine,
    TrialBalanceEntry,
    TrialBalanceTotals,
    opening_balance_reference,
)
from ledgerkit.domain.errors import (
    MissingConfigurationError,
    NotFoundError,
    ValidationError,
    account_inactive,
    account_not_found,
    bank_account_missing,
    period_not_found,
)
from ledgerkit.domain.posting import DEFAULT_CREATED_BY, check_balanced

logger = logging.getLogger(__name__)


def signed_amount(nature: AccountNature, debit: Decimal, credit: Decimal) -> Decimal:
    """Return a movement signed so that growth on the normal side is positive."""
    if nature.is_debit_normal:
        return debit - credit
    return credit - debit


def _is_opening_line(line: PostedLine) -> bool:
    return line.reference.startswith(OPENING_BALANCE_REFERENCE_PREFIX)


@dataclass(frozen=True)
class _Balance:
    opening: Decimal
    debits: Decimal
    credits: Decimal
    closing: Decimal


class LedgerService:
    """Service computing opening, movement and closing balances per account.

    The closing balance of a period carries forward as the opening balance of
    the period that immediately follows it. When there is nothing to carry,
    the period's own opening balance entry (reference ``OB-<period id>``) is
    used instead. Opening balance entries never count as period movement.
    """

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_period(self, company_id: int, fiscal_period_id: int) -> FiscalPeriod:
        period = self.db.get_fiscal_period(fiscal_period_id)
        if period is None or period.company_id != company_id:
            raise NotFoundError(period_not_found(fiscal_period_id))
        return period

    def _period_balances(
        self, company_id: int, period: FiscalPeriod, accounts: list[Account]
    ) -> dict[int, _Balance]:
        """Compute balances of every account for a period.

        Walks the company's periods from the earliest up to the target so
        that each period's closing feeds the next one's opening.
        """
        chain = [p for p in self.db.list_fiscal_periods(company_id) if p.start_date <= period.start_date]
        previous_closing: dict[int, Decimal] = {}
        balances: dict[int, _Balance] = {}

        for current in chain:
            debits: dict[int, Decimal] = defaultdict(lambda: ZERO)
            credits: dict[int, Decimal] = defaultdict(lambda: ZERO)
            opening_debits: dict[int, Decimal] = defaultdict(lambda: ZERO)
            opening_credits: dict[int, Decimal] = defaultdict(lambda: ZERO)

            for line in self.db.list_posted_lines(company_id, current.id):
                if _is_opening_line(line):
                    if line.entry_date == current.start_date:
                        opening_debits[line.account_id] += line.debit_amount
                        opening_credits[line.account_id] += line.credit_amount
                    continue
                debits[line.account_id] += line.debit_amount
                credits[line.account_id] += line.credit_amount

            balances = {}
            for account in accounts:
                carried = previous_closing.get(account.id, ZERO)
                if carried != ZERO:
                    opening = carried
                else:
                    opening = signed_amount(
                        account.nature, opening_debits[account.id], opening_credits[account.id]
                    )
                period_debits = debits[account.id]
                period_credits = credits[account.id]
                closing = opening + signed_amount(account.nature, period_debits, period_credits)
                balances[account.id] = _Balance(opening, period_debits, period_credits, closing)

            previous_closing = {account_id: b.closing for account_id, b in balances.items()}

        return balances

    def opening_balance(self, company_id: int, fiscal_period_id: int, account: Account) -> Decimal:
        """Resolve the opening balance of an account for a period.

        Resolution order: the preceding period's closing balance if non-zero,
        then the period's opening balance entry, then zero.

        Raises:
            NotFoundError: If the fiscal period doesn't exist for the company
        """
        period = self._require_period(company_id, fiscal_period_id)
        return self._period_balances(company_id, period, [account])[account.id].opening

    def trial_balance(self, company_id: int, fiscal_period_id: int) -> list[TrialBalanceEntry]:
        """Build the trial balance of a period.

        Accounts with neither an opening balance nor movement are left out.

        Returns:
            Trial balance entries ordered by account code

        Raises:
            NotFoundError: If the fiscal period doesn't exist for the company
        """
        period = self._require_period(company_id, fiscal_period_id)
        accounts = self.db.list_accounts(company_id)
        balances = self._period_balances(company_id, period, accounts)

        entries = []
        for account in accounts:
            b = balances[account.id]
            if b.opening == ZERO and b.debits == ZERO and b.credits == ZERO:
                continue
            entries.append(
                TrialBalanceEntry(
                    account_code=account.code,
                    account_name=account.name,
                    nature=account.nature,
                    opening_balance=b.opening,
                    period_debits=b.debits,
                    period_credits=b.credits,
                    closing_balance=b.closing,
                )
            )
        return entries

    def trial_balance_totals(self, entries: list[TrialBalanceEntry]) -> TrialBalanceTotals:
        """Sum the debit and credit columns of a trial balance."""
        return TrialBalanceTotals(
            total_debits=sum((e.debit_column for e in entries), ZERO),
            total_credits=sum((e.credit_column for e in entries), ZERO),
        )

    def balances_by_nature(self, company_id: int, fiscal_period_id: int) -> dict[AccountNature, Decimal]:
        """Total closing balances per account nature, each on its normal side."""
        totals = {nature: ZERO for nature in AccountNature}
        for entry in self.trial_balance(company_id, fiscal_period_id):
            totals[entry.nature] += entry.closing_balance
        return totals

    def ledger_lines(self, company_id: int, fiscal_period_id: int, account_code: str) -> AccountLedger:
        """Build the general ledger of one account for a period.

        Returns:
            AccountLedger with each posting and the running balance after it

        Raises:
            NotFoundError: If the period or account doesn't exist
        """
        period = self._require_period(company_id, fiscal_period_id)
        account = self.db.get_account_by_code(company_id, account_code)
        if account is None:
            raise NotFoundError(account_not_found(company_id, account_code))

        balance = self._period_balances(company_id, period, [account])[account.id]
        running = balance.opening
        lines = []
        for line in self.db.list_posted_lines(company_id, period.id, account_id=account.id):
            if _is_opening_line(line):
                continue
            running += signed_amount(account.nature, line.debit_amount, line.credit_amount)
            lines.append(
                LedgerLineView(
                    entry_date=line.entry_date,
                    reference=line.reference,
                    description=line.description,
                    debit_amount=line.debit_amount,
                    credit_amount=line.credit_amount,
                    running_balance=running,
                )
            )

        return AccountLedger(
            account_code=account.code,
            account_name=account.name,
            nature=account.nature,
            opening_balance=balance.opening,
            lines=tuple(lines),
            period_debits=balance.debits,
            period_credits=balance.credits,
            closing_balance=balance.closing,
        )

    def create_opening_balance_entry(
        self,
        company_id: int,
        fiscal_period_id: int,
        amount: Decimal,
        equity_account_code: str = "3300",
        created_by: str = DEFAULT_CREATED_BY,
    ) -> JournalEntry:
        """Record the opening bank balance of a period.

        Debits the default bank account and credits the equity account; a
        negative amount (overdrawn bank) reverses the sides. Any existing
        opening balance entry of the period is replaced.

        Args:
            company_id: Company ID
            fiscal_period_id: Fiscal period the balance opens
            amount: Opening bank balance
            equity_account_code: Balancing equity account
            created_by: Value stamped on the entry

        Returns:
            The stored opening balance entry

        Raises:
            NotFoundError: If the period or equity account doesn't exist
            MissingConfigurationError: If the company has no bank account
            ValidationError: If the amount is zero
        """
        amount = Decimal(amount)
        if amount == ZERO:
            raise ValidationError("Opening balance amount must be non-zero")

        period = self._require_period(company_id, fiscal_period_id)
        bank = self.db.get_default_cash_account(company_id)
        if bank is None:
            raise MissingConfigurationError(bank_account_missing(company_id))
        equity = self.db.get_account_by_code(company_id, equity_account_code)
        if equity is None:
            raise NotFoundError(account_not_found(company_id, equity_account_code))
        if not equity.is_active:
            raise NotFoundError(account_inactive(equity_account_code))

        if amount > ZERO:
            debit_account, credit_account = bank, equity
        else:
            debit_account, credit_account = equity, bank
        value = abs(amount)
        description = f"Opening balance {period.name}"

        reference = opening_balance_reference(period.id)
        draft = JournalDraft(
            company_id=company_id,
            fiscal_period_id=period.id,
            entry_date=period.start_date,
            description=description,
            reference=reference,
            source_transaction_id=None,
            lines=(
                JournalLineDraft(debit_account.id, value, ZERO, description),
                JournalLineDraft(credit_account.id, ZERO, value, description),
            ),
        )
        check_balanced(draft, value)

        with self.db.unit_of_work():
            existing: Optional[JournalEntry] = self.db.find_journal_entry_by_reference(company_id, reference)
            if existing is not None:
                self.db.delete_journal_entry(existing.id)
            entry = self.db.create_journal_entry(draft, created_by=created_by)

        logger.info("Created opening balance entry %s for company %s: %s", reference, company_id, amount)
        return entry
