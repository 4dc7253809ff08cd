"""Chart of accounts domain service."""

import logging
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import Account as AccountEntity, AccountNature
from ledgerkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_not_found,
    duplicate_account_code,
)

logger = logging.getLogger(__name__)


# Default chart: (code, name, nature, is_bank)
DEFAULT_CHART = [
    # Assets
    ("1000", "Assets", AccountNature.ASSET, False),
    ("1210", "Inventories", AccountNature.ASSET, False),
    ("1220", "Trade Receivables", AccountNature.ASSET, False),
    ("1230", "Cash and Cash Equivalents", AccountNature.ASSET, True),
    # Liabilities
    ("2310", "Trade Payables", AccountNature.LIABILITY, False),
    ("2320", "Tax Liabilities", AccountNature.LIABILITY, False),
    ("2400", "Loans Payable", AccountNature.LIABILITY, False),
    # Equity
    ("3100", "Share Capital", AccountNature.EQUITY, False),
    ("3200", "Retained Earnings", AccountNature.EQUITY, False),
    ("3300", "Opening Balance Equity", AccountNature.EQUITY, False),
    # Revenue
    ("4000", "Sales Revenue", AccountNature.REVENUE, False),
    ("4100", "Interest Income", AccountNature.REVENUE, False),
    ("4900", "Other Income", AccountNature.REVENUE, False),
    # Expenses
    ("7100", "Salaries and Wages", AccountNature.EXPENSE, False),
    ("7200", "Bank Charges", AccountNature.EXPENSE, False),
    ("7300", "Rent", AccountNature.EXPENSE, False),
    ("7400", "Telephone and Internet", AccountNature.EXPENSE, False),
    ("7500", "Fuel and Transport", AccountNature.EXPENSE, False),
    ("7600", "Insurance", AccountNature.EXPENSE, False),
]


class ChartOfAccountsService:
    """Service for managing a company's chart of accounts."""

    def __init__(self, db: Database):
        """Initialize chart of accounts service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        company_id: int,
        code: str,
        name: str,
        nature: AccountNature | str,
        is_bank: bool = False,
    ) -> int:
        """Create a new account.

        Args:
            company_id: Company the account belongs to
            code: Account code, unique within the company
            name: Account name
            nature: Account nature (asset, liability, equity, revenue, expense)
            is_bank: Whether this is a bank/cash account

        Returns:
            Account ID

        Raises:
            ValidationError: If code/name is blank, the nature is unknown, or a
                non-asset account is flagged as bank
            ConflictError: If the code already exists for the company
        """
        code = code.strip()
        name = name.strip()
        if not code or not name:
            raise ValidationError("Account code and name are required")

        try:
            nature = AccountNature(nature)
        except ValueError:
            valid = ", ".join(n.value for n in AccountNature)
            raise ValidationError(f"Unknown account nature '{nature}'. Expected one of: {valid}")

        if is_bank and nature is not AccountNature.ASSET:
            raise ValidationError("Bank/cash accounts must have nature 'asset'")

        if self.db.get_account_by_code(company_id, code) is not None:
            raise ConflictError(duplicate_account_code(company_id, code))

        return self.db.create_account(
            company_id=company_id, code=code, name=name, nature=nature, is_bank=is_bank
        )

    def get_account(self, company_id: int, code: str) -> Optional[AccountEntity]:
        """Get account by code.

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account_by_code(company_id, code)

    def get_account_by_id(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def require_account(self, company_id: int, code: str) -> AccountEntity:
        """Get account by code or raise NotFoundError."""
        account = self.db.get_account_by_code(company_id, code)
        if account is None:
            raise NotFoundError(account_not_found(company_id, code))
        return account

    def list_accounts(self, company_id: int, active_only: bool = False) -> list[AccountEntity]:
        """List accounts of a company ordered by code."""
        return self.db.list_accounts(company_id, active_only=active_only)

    def get_default_cash_account(self, company_id: int) -> Optional[AccountEntity]:
        """Get the company's designated bank/cash account, if one is configured."""
        return self.db.get_default_cash_account(company_id)

    def deactivate_account(self, company_id: int, code: str) -> None:
        """Deactivate an account. Accounts are never deleted once created.

        Raises:
            NotFoundError: If account not found
        """
        account = self.require_account(company_id, code)
        self.db.set_account_active(account.id, False)

    def activate_account(self, company_id: int, code: str) -> None:
        """Reactivate an account."""
        account = self.require_account(company_id, code)
        self.db.set_account_active(account.id, True)

    def initialize_chart_of_accounts(
        self,
        company_id: int,
        template: Optional[list[tuple[str, str, AccountNature, bool]]] = None,
    ) -> int:
        """Create any template accounts the company does not have yet.

        Args:
            company_id: Company to initialize
            template: List of (code, name, nature, is_bank); defaults to DEFAULT_CHART

        Returns:
            Number of accounts created
        """
        if template is None:
            template = DEFAULT_CHART

        created = 0
        with self.db.unit_of_work():
            for code, name, nature, is_bank in template:
                if self.db.get_account_by_code(company_id, code) is not None:
                    continue
                self.db.create_account(
                    company_id=company_id, code=code, name=name, nature=nature, is_bank=is_bank
                )
                created += 1

        logger.info("Initialized chart of accounts for company %s: %d accounts created", company_id, created)
        return created
