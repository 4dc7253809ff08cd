"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Referenced account, fiscal period, transaction or rule does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class UnclassifiedError(DomainError):
    """Posting attempted on a transaction with no classification."""


class MissingConfigurationError(DomainError):
    """Required company configuration, such as a bank account, is absent."""


class ImbalancedPostingError(RuntimeError):
    """A generated journal entry does not balance.

    This signals a defect in posting logic, not a user error, so it does not
    derive from DomainError.
    """


def account_not_found(company_id: int, code: str) -> str:
    """Return message for missing account by code."""
    return f"Account '{code}' not found for company {company_id}"


def account_id_not_found(account_id: int) -> str:
    """Return message for missing account by ID."""
    return f"Account {account_id} not found"


def account_inactive(code: str) -> str:
    """Return message for an inactive account."""
    return f"Account '{code}' is inactive"


def period_not_found(period_id: int) -> str:
    """Return message for missing fiscal period."""
    return f"Fiscal period {period_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing mapping rule."""
    return f"Mapping rule {rule_id} not found"


def transaction_unclassified(transaction_id: int) -> str:
    """Return message for posting an unclassified transaction."""
    return (
        f"Transaction {transaction_id} is not classified. "
        "Classify it before generating a journal entry."
    )


def bank_account_missing(company_id: int) -> str:
    """Return message when a company has no active bank/cash account."""
    return (
        f"No active bank/cash account configured for company {company_id}. "
        "Create one with 'ledgerkit account create <CODE> <NAME> --nature asset --bank' "
        "(for example code 1230 'Bank')."
    )


def duplicate_account_code(company_id: int, code: str) -> str:
    """Return message for duplicate account code."""
    return f"Account '{code}' already exists for company {company_id}"


def imbalanced_posting(reference: str, debits: Decimal, credits: Decimal) -> str:
    """Return message for an entry whose sides differ."""
    return f"Journal entry {reference} is imbalanced: debits {debits} != credits {credits}"
