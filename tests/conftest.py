"""Shared pytest fixtures for ledgerkit tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.classifier import ClassificationService
from ledgerkit.domain.entities import AccountNature
from ledgerkit.domain.journal_sync import JournalSyncService
from ledgerkit.domain.ledger import LedgerService
from ledgerkit.domain.periods import FiscalPeriodService
from ledgerkit.domain.posting import JournalPostingGenerator
from ledgerkit.domain.rules import MappingRuleService
from ledgerkit.domain.transaction import TransactionService

COMPANY_ID = 1


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def chart_service(temp_db):
    """Create a ChartOfAccountsService with a temporary database."""
    return ChartOfAccountsService(temp_db)


@pytest.fixture
def period_service(temp_db):
    """Create a FiscalPeriodService with a temporary database."""
    return FiscalPeriodService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a MappingRuleService with a temporary database."""
    return MappingRuleService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def classification_service(temp_db):
    """Create a ClassificationService with a temporary database."""
    return ClassificationService(temp_db)


@pytest.fixture
def posting_generator(temp_db):
    """Create a JournalPostingGenerator with a temporary database."""
    return JournalPostingGenerator(temp_db)


@pytest.fixture
def sync_service(temp_db):
    """Create a JournalSyncService with a temporary database."""
    return JournalSyncService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def chart(chart_service):
    """Seed a small chart of accounts with a bank account and return accounts by code."""
    accounts = [
        ("1230", "Bank", AccountNature.ASSET, True),
        ("3300", "Opening Balance Equity", AccountNature.EQUITY, False),
        ("4100", "Interest Income", AccountNature.REVENUE, False),
        ("7100", "Salaries", AccountNature.EXPENSE, False),
        ("7200", "Bank Charges", AccountNature.EXPENSE, False),
        ("7300", "Rent", AccountNature.EXPENSE, False),
    ]
    for code, name, nature, is_bank in accounts:
        chart_service.create_account(COMPANY_ID, code, name, nature, is_bank=is_bank)
    return {acc.code: acc for acc in chart_service.list_accounts(COMPANY_ID)}


@pytest.fixture
def chart_without_bank(chart_service):
    """Seed accounts but no bank/cash account."""
    chart_service.create_account(COMPANY_ID, "7200", "Bank Charges", AccountNature.EXPENSE)
    chart_service.create_account(COMPANY_ID, "4100", "Interest Income", AccountNature.REVENUE)
    return {acc.code: acc for acc in chart_service.list_accounts(COMPANY_ID)}


@pytest.fixture
def fy2024(period_service):
    """Create the 2024 fiscal period."""
    period_id = period_service.create_period(COMPANY_ID, "FY2024", date(2024, 1, 1), date(2024, 12, 31))
    return period_service.get_period(period_id)


@pytest.fixture
def fy2025(period_service, fy2024):
    """Create the 2025 fiscal period following FY2024."""
    period_id = period_service.create_period(COMPANY_ID, "FY2025", date(2025, 1, 1), date(2025, 12, 31))
    return period_service.get_period(period_id)


@pytest.fixture
def add_transaction(transaction_service, fy2024):
    """Return a helper creating a FY2024 transaction; positive amounts are money in."""

    def _add(description, amount, day=date(2024, 3, 15), period=None):
        amount = Decimal(amount)
        return transaction_service.create_transaction(
            company_id=COMPANY_ID,
            fiscal_period_id=(period or fy2024).id,
            transaction_date=day,
            description=description,
            debit_amount=-amount if amount < 0 else Decimal("0"),
            credit_amount=amount if amount > 0 else Decimal("0"),
        )

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
