"""Tests for domain error types and messages."""

from decimal import Decimal

from ledgerkit.domain.errors import (
    DomainError,
    ImbalancedPostingError,
    MissingConfigurationError,
    NotFoundError,
    UnclassifiedError,
    bank_account_missing,
    imbalanced_posting,
)


def test_domain_errors_are_value_errors():
    """Domain errors stay catchable as ValueError."""
    for error_type in (NotFoundError, UnclassifiedError, MissingConfigurationError):
        assert issubclass(error_type, DomainError)
        assert issubclass(error_type, ValueError)


def test_imbalanced_posting_is_not_a_domain_error():
    """An imbalanced posting is a defect, not a user error."""
    assert issubclass(ImbalancedPostingError, RuntimeError)
    assert not issubclass(ImbalancedPostingError, DomainError)


def test_bank_account_missing_names_company_and_fix():
    """The message says which company lacks a bank account and how to add one."""
    message = bank_account_missing(3)
    assert "company 3" in message
    assert "--bank" in message
    assert "1230" in message


def test_imbalanced_posting_message():
    message = imbalanced_posting("TXN-1", Decimal("10.00"), Decimal("9.00"))
    assert "TXN-1" in message
    assert "10.00" in message
    assert "9.00" in message
