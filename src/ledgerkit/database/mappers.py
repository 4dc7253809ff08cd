"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the ORM rows never leave the
database package.
"""

from decimal import Decimal
from typing import Optional

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Account as ORMAccount,
    FiscalPeriod as ORMFiscalPeriod,
    MappingRule as ORMMappingRule,
    BankTransaction as ORMBankTransaction,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
)


def _money(value) -> Decimal:
    return Decimal("0") if value is None else Decimal(value)


def _optional_money(value) -> Optional[Decimal]:
    return None if value is None else Decimal(value)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        company_id=orm_account.company_id,
        code=orm_account.code,
        name=orm_account.name,
        nature=domain.AccountNature(orm_account.nature),
        is_active=orm_account.is_active,
        is_bank=orm_account.is_bank,
        created_at=orm_account.created_at,
    )


def fiscal_period_to_domain(orm_period: ORMFiscalPeriod) -> domain.FiscalPeriod:
    """Convert SQLAlchemy FiscalPeriod model to domain FiscalPeriod entity."""
    return domain.FiscalPeriod(
        id=orm_period.id,
        company_id=orm_period.company_id,
        name=orm_period.name,
        start_date=orm_period.start_date,
        end_date=orm_period.end_date,
        is_closed=orm_period.is_closed,
        created_at=orm_period.created_at,
    )


def mapping_rule_to_domain(orm_rule: ORMMappingRule) -> domain.MappingRule:
    """Convert SQLAlchemy MappingRule model to domain MappingRule entity."""
    return domain.MappingRule(
        id=orm_rule.id,
        company_id=orm_rule.company_id,
        name=orm_rule.name,
        match_type=domain.MatchType(orm_rule.match_type),
        pattern=orm_rule.pattern,
        account_code=orm_rule.account_code,
        priority=orm_rule.priority,
        is_active=orm_rule.is_active,
        created_at=orm_rule.created_at,
    )


def bank_transaction_to_domain(orm_transaction: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_transaction.id,
        company_id=orm_transaction.company_id,
        fiscal_period_id=orm_transaction.fiscal_period_id,
        transaction_date=orm_transaction.transaction_date,
        description=orm_transaction.description,
        debit_amount=_money(orm_transaction.debit_amount),
        credit_amount=_money(orm_transaction.credit_amount),
        balance=_optional_money(orm_transaction.balance),
        account_code=orm_transaction.account_code,
        debit_account_id=orm_transaction.debit_account_id,
        credit_account_id=orm_transaction.credit_account_id,
        imported_at=orm_transaction.imported_at,
    )


def journal_entry_line_to_domain(orm_line: ORMJournalEntryLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalEntryLine model to domain JournalEntryLine entity."""
    return domain.JournalEntryLine(
        id=orm_line.id,
        journal_entry_id=orm_line.journal_entry_id,
        account_id=orm_line.account_id,
        debit_amount=_money(orm_line.debit_amount),
        credit_amount=_money(orm_line.credit_amount),
        description=orm_line.description,
        source_transaction_id=orm_line.source_transaction_id,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model, with its lines, to a domain entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        company_id=orm_entry.company_id,
        fiscal_period_id=orm_entry.fiscal_period_id,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        reference=orm_entry.reference,
        created_by=orm_entry.created_by,
        created_at=orm_entry.created_at,
        source_transaction_id=orm_entry.source_transaction_id,
        lines=tuple(journal_entry_line_to_domain(line) for line in orm_entry.lines),
    )


def posted_line_to_domain(orm_line: ORMJournalEntryLine, orm_entry: ORMJournalEntry) -> domain.PostedLine:
    """Join a journal line with its entry header."""
    return domain.PostedLine(
        entry_id=orm_entry.id,
        entry_date=orm_entry.entry_date,
        reference=orm_entry.reference,
        description=orm_line.description or orm_entry.description,
        account_id=orm_line.account_id,
        debit_amount=_money(orm_line.debit_amount),
        credit_amount=_money(orm_line.credit_amount),
    )
