"""Bank transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from ledgerkit.database.base import Database
from ledgerkit.domain.entities import ZERO, BankTransaction as TransactionEntity
from ledgerkit.domain.errors import NotFoundError, ValidationError, period_not_found, transaction_not_found
from ledgerkit.utils.amount_parser import CENTS


class TransactionService:
    """Service for recording parsed bank statement lines."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        company_id: int,
        fiscal_period_id: int,
        transaction_date: date,
        description: Optional[str],
        debit_amount: Decimal = ZERO,
        credit_amount: Decimal = ZERO,
        balance: Optional[Decimal] = None,
    ) -> int:
        """Record a bank transaction.

        Args:
            company_id: Company ID
            fiscal_period_id: Fiscal period the transaction belongs to
            transaction_date: Statement date
            description: Statement description
            debit_amount: Money out (>= 0), rounded half up to cents
            credit_amount: Money in (>= 0), rounded half up to cents
            balance: Optional running balance from the statement

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the fiscal period doesn't exist for the company
            ValidationError: If amounts are negative, both or neither are
                non-zero, the date falls outside the period, or the period is closed
        """
        debit_amount = Decimal(debit_amount)
        credit_amount = Decimal(credit_amount)
        if not (debit_amount.is_finite() and credit_amount.is_finite()):
            raise ValidationError("Debit and credit amounts must be finite numbers")

        # Stored to the cent; validate what will actually be kept
        debit_amount = debit_amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        credit_amount = credit_amount.quantize(CENTS, rounding=ROUND_HALF_UP)
        if balance is not None:
            balance = Decimal(balance).quantize(CENTS, rounding=ROUND_HALF_UP)

        if debit_amount < ZERO or credit_amount < ZERO:
            raise ValidationError("Debit and credit amounts must not be negative")
        if (debit_amount != ZERO) == (credit_amount != ZERO):
            raise ValidationError(
                "Exactly one of debit amount and credit amount must be non-zero "
                f"(got debit {debit_amount}, credit {credit_amount})"
            )

        # Verify period exists and contains the date
        period = self.db.get_fiscal_period(fiscal_period_id)
        if period is None or period.company_id != company_id:
            raise NotFoundError(period_not_found(fiscal_period_id))
        if period.is_closed:
            raise ValidationError(f"Fiscal period '{period.name}' is closed")
        if not period.contains(transaction_date):
            raise ValidationError(
                f"Transaction date {transaction_date} is outside fiscal period "
                f"'{period.name}' ({period.start_date} to {period.end_date})"
            )

        return self.db.create_bank_transaction(
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            transaction_date=transaction_date,
            description=description,
            debit_amount=debit_amount,
            credit_amount=credit_amount,
            balance=balance,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_bank_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_bank_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def list_transactions(
        self,
        company_id: int,
        fiscal_period_id: Optional[int] = None,
        classified: Optional[bool] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters.

        Args:
            company_id: Company ID
            fiscal_period_id: Optional fiscal period filter
            classified: True for classified only, False for unclassified only

        Returns:
            List of transaction entities in date order
        """
        return self.db.list_bank_transactions(
            company_id=company_id, fiscal_period_id=fiscal_period_id, classified=classified
        )
