"""Tests for journal posting generation."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import BankTransaction, JournalDraft, JournalLineDraft
from ledgerkit.domain.errors import (
    ImbalancedPostingError,
    MissingConfigurationError,
    NotFoundError,
    UnclassifiedError,
    ValidationError,
)
from ledgerkit.domain.posting import check_balanced

COMPANY_ID = 1


def _lines_by_side(draft):
    debits = [(line.account_id, line.debit_amount) for line in draft.lines if line.debit_amount]
    credits = [(line.account_id, line.credit_amount) for line in draft.lines if line.credit_amount]
    return debits, credits


def test_credit_transaction_debits_bank(posting_generator, classification_service, transaction_service, chart, add_transaction):
    """Money in: debit the bank, credit the classified account."""
    txn_id = add_transaction("INTEREST", "12.50")
    classification_service.classify_manually(txn_id, "4100")

    draft = posting_generator.generate(transaction_service.get_transaction(txn_id))

    debits, credits = _lines_by_side(draft)
    assert debits == [(chart["1230"].id, Decimal("12.50"))]
    assert credits == [(chart["4100"].id, Decimal("12.50"))]
    assert draft.reference == f"TXN-{txn_id}"
    assert draft.source_transaction_id == txn_id
    assert draft.entry_date == date(2024, 3, 15)


def test_debit_transaction_credits_bank(posting_generator, classification_service, transaction_service, chart, add_transaction):
    """Money out: debit the classified account, credit the bank."""
    txn_id = add_transaction("BANK FEE", "-45.50")
    classification_service.classify_manually(txn_id, "7200")

    draft = posting_generator.generate(transaction_service.get_transaction(txn_id))

    debits, credits = _lines_by_side(draft)
    assert debits == [(chart["7200"].id, Decimal("45.50"))]
    assert credits == [(chart["1230"].id, Decimal("45.50"))]


@pytest.mark.parametrize("amount", ["250.00", "-250.00"])
def test_pair_mode_uses_explicit_accounts(
    posting_generator, classification_service, transaction_service, chart, add_transaction, amount
):
    """Pair mode ignores the bank account and polarity."""
    txn_id = add_transaction("SALARY ADVANCE REPAID", amount)
    classification_service.classify_with_pair(txn_id, chart["7100"].id, chart["7300"].id)

    draft = posting_generator.generate(transaction_service.get_transaction(txn_id))

    debits, credits = _lines_by_side(draft)
    assert debits == [(chart["7100"].id, Decimal("250.00"))]
    assert credits == [(chart["7300"].id, Decimal("250.00"))]


@pytest.mark.parametrize("amount", ["0.01", "-0.01", "999999.99", "-1234.56"])
def test_generated_entries_balance(posting_generator, classification_service, transaction_service, chart, add_transaction, amount):
    """Debits equal credits equal the transaction amount."""
    txn_id = add_transaction("ANY", amount)
    classification_service.classify_manually(txn_id, "7200")

    draft = posting_generator.generate(transaction_service.get_transaction(txn_id))

    assert draft.total_debits == draft.total_credits == abs(Decimal(amount))


def test_unclassified_transaction_raises(posting_generator, transaction_service, chart, add_transaction):
    """Posting an unclassified transaction is refused."""
    txn_id = add_transaction("MYSTERY", "-5.00")
    with pytest.raises(UnclassifiedError):
        posting_generator.generate(transaction_service.get_transaction(txn_id))


def test_inactive_classified_account_raises(
    posting_generator, classification_service, chart_service, transaction_service, chart, add_transaction
):
    txn_id = add_transaction("RENT", "-500.00")
    classification_service.classify_manually(txn_id, "7300")
    chart_service.deactivate_account(COMPANY_ID, "7300")

    with pytest.raises(NotFoundError, match="inactive"):
        posting_generator.generate(transaction_service.get_transaction(txn_id))


def test_inactive_pair_account_raises(
    posting_generator, classification_service, chart_service, transaction_service, chart, add_transaction
):
    txn_id = add_transaction("RENT", "-500.00")
    classification_service.classify_with_pair(txn_id, chart["7300"].id, chart["1230"].id)
    chart_service.deactivate_account(COMPANY_ID, "7300")

    with pytest.raises(NotFoundError):
        posting_generator.generate(transaction_service.get_transaction(txn_id))


def test_bank_fee_refund_without_bank_account(
    posting_generator, classification_service, rule_service, transaction_service, chart_without_bank, fy2024
):
    """Classification succeeds but posting needs a configured bank account."""
    rule_service.create_rule(COMPANY_ID, "Refunds", "REFUND", "7200", priority=10)
    txn_id = transaction_service.create_transaction(
        COMPANY_ID, fy2024.id, date(2024, 3, 1), "BANK FEE REFUND", credit_amount=Decimal("1000.00")
    )
    assert classification_service.classify_transaction(txn_id) == "7200"

    with pytest.raises(MissingConfigurationError, match="company 1"):
        posting_generator.post(transaction_service.get_transaction(txn_id))


def test_bank_fee_refund_with_bank_account(
    posting_generator, classification_service, rule_service, transaction_service, chart, fy2024
):
    """With bank 1230 configured the refund posts as one balanced entry."""
    rule_service.create_rule(COMPANY_ID, "Refunds", "REFUND", "7200", priority=10)
    txn_id = transaction_service.create_transaction(
        COMPANY_ID, fy2024.id, date(2024, 3, 1), "BANK FEE REFUND", credit_amount=Decimal("1000.00")
    )
    classification_service.classify_transaction(txn_id)

    entry = posting_generator.post(transaction_service.get_transaction(txn_id), created_by="tester")

    assert entry.reference == f"TXN-{txn_id}"
    assert entry.created_by == "tester"
    assert [(l.account_id, l.debit_amount, l.credit_amount) for l in entry.lines] == [
        (chart["1230"].id, Decimal("1000.00"), Decimal("0.00")),
        (chart["7200"].id, Decimal("0.00"), Decimal("1000.00")),
    ]


def test_check_balanced_detects_imbalance():
    """A draft whose sides differ is a defect."""
    draft = JournalDraft(
        company_id=COMPANY_ID,
        fiscal_period_id=1,
        entry_date=date(2024, 1, 1),
        description=None,
        reference="TXN-1",
        source_transaction_id=1,
        lines=(
            JournalLineDraft(1, Decimal("10.00"), Decimal("0"), None),
            JournalLineDraft(2, Decimal("0"), Decimal("9.99"), None),
        ),
    )
    with pytest.raises(ImbalancedPostingError):
        check_balanced(draft, Decimal("10.00"))


def test_zero_amount_has_nothing_to_post(posting_generator):
    txn = BankTransaction(
        id=1,
        company_id=COMPANY_ID,
        fiscal_period_id=1,
        transaction_date=date(2024, 1, 1),
        description="ZERO",
        debit_amount=Decimal("0"),
        credit_amount=Decimal("0"),
        balance=None,
        account_code="7200",
        debit_account_id=None,
        credit_account_id=None,
        imported_at=datetime.now(UTC),
    )
    with pytest.raises(ValidationError, match="zero amount"):
        posting_generator.generate(txn)
