"""Tests for journal sync and regeneration."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.errors import MissingConfigurationError, NotFoundError, UnclassifiedError

COMPANY_ID = 1


def test_sync_posts_classified_transactions_once(sync_service, classification_service, temp_db, chart, fy2024, add_transaction):
    """A second sync creates nothing new."""
    fee = add_transaction("BANK FEE", "-10.00")
    interest = add_transaction("INTEREST", "3.00")
    add_transaction("MYSTERY", "-1.00")
    classification_service.classify_manually(fee, "7200")
    classification_service.classify_manually(interest, "4100")

    assert sync_service.sync_journal_entries(COMPANY_ID) == 2
    assert sync_service.sync_journal_entries(COMPANY_ID) == 0

    references = sorted(e.reference for e in temp_db.list_journal_entries(COMPANY_ID))
    assert references == sorted([f"TXN-{fee}", f"TXN-{interest}"])
    assert sync_service.generated_entry_exists(fee)


def test_sync_posts_newly_classified_transactions(sync_service, classification_service, chart, fy2024, add_transaction):
    first = add_transaction("BANK FEE", "-10.00")
    second = add_transaction("RENT", "-500.00")
    classification_service.classify_manually(first, "7200")
    assert sync_service.sync_journal_entries(COMPANY_ID, fy2024.id) == 1
    assert not sync_service.generated_entry_exists(second)

    classification_service.classify_manually(second, "7300")
    assert sync_service.sync_journal_entries(COMPANY_ID, fy2024.id) == 1
    assert sync_service.generated_entry_exists(second)


def test_sync_is_all_or_nothing(sync_service, classification_service, chart_service, temp_db, chart, fy2024, add_transaction):
    """One failing transaction rolls back the whole batch."""
    ok = add_transaction("BANK FEE", "-10.00", day=date(2024, 1, 5))
    bad = add_transaction("RENT", "-500.00", day=date(2024, 2, 5))
    classification_service.classify_manually(ok, "7200")
    classification_service.classify_manually(bad, "7300")
    chart_service.deactivate_account(COMPANY_ID, "7300")

    with pytest.raises(NotFoundError, match="7300"):
        sync_service.sync_journal_entries(COMPANY_ID)

    assert temp_db.list_journal_entries(COMPANY_ID) == []
    assert not sync_service.generated_entry_exists(ok)


def test_sync_without_bank_account_fails(sync_service, classification_service, transaction_service, chart_without_bank, fy2024):
    txn_id = transaction_service.create_transaction(
        COMPANY_ID, fy2024.id, date(2024, 3, 1), "BANK FEE", Decimal("10.00")
    )
    classification_service.classify_manually(txn_id, "7200")

    with pytest.raises(MissingConfigurationError):
        sync_service.sync_journal_entries(COMPANY_ID)


def test_sync_service_stamps_created_by(temp_db, classification_service, chart, fy2024, add_transaction):
    from ledgerkit.domain.journal_sync import JournalSyncService

    txn_id = add_transaction("BANK FEE", "-10.00")
    classification_service.classify_manually(txn_id, "7200")
    JournalSyncService(temp_db, created_by="importer").sync_journal_entries(COMPANY_ID)

    assert temp_db.find_journal_entry_by_reference(COMPANY_ID, f"TXN-{txn_id}").created_by == "importer"


def test_regenerate_skips_failing_transaction(
    sync_service, classification_service, chart_service, temp_db, chart, fy2024, add_transaction
):
    """Ten classified transactions, one on a now-inactive account: nine are rebuilt."""
    txn_ids = []
    for day in range(1, 10):
        txn_id = add_transaction(f"BANK FEE {day}", "-10.00", day=date(2024, 4, day))
        classification_service.classify_manually(txn_id, "7200")
        txn_ids.append(txn_id)
    rent = add_transaction("OFFICE RENT", "-500.00", day=date(2024, 4, 10))
    classification_service.classify_manually(rent, "7300")
    assert sync_service.sync_journal_entries(COMPANY_ID) == 10

    chart_service.deactivate_account(COMPANY_ID, "7300")
    result = sync_service.regenerate_all_journal_entries(COMPANY_ID)

    assert result.deleted_count == 10
    assert result.created_count == 9
    assert result.has_failures
    assert [s.transaction_id for s in result.skipped] == [rent]
    assert "7300" in result.skipped[0].reason
    assert len(temp_db.list_journal_entries(COMPANY_ID)) == 9
    assert not sync_service.generated_entry_exists(rent)


def test_regenerate_keeps_opening_balance_entries(
    sync_service, ledger_service, classification_service, temp_db, chart, fy2024, add_transaction
):
    ledger_service.create_opening_balance_entry(COMPANY_ID, fy2024.id, Decimal("1000.00"))
    txn_id = add_transaction("BANK FEE", "-10.00")
    classification_service.classify_manually(txn_id, "7200")
    sync_service.sync_journal_entries(COMPANY_ID)

    result = sync_service.regenerate_all_journal_entries(COMPANY_ID)

    assert result.deleted_count == 1
    assert result.created_count == 1
    assert not result.has_failures
    references = {e.reference for e in temp_db.list_journal_entries(COMPANY_ID)}
    assert references == {f"OB-{fy2024.id}", f"TXN-{txn_id}"}


def test_regenerate_reflects_reclassification(sync_service, classification_service, temp_db, chart, fy2024, add_transaction):
    """Regeneration posts transactions with their current classification."""
    txn_id = add_transaction("BANK FEE", "-10.00")
    classification_service.classify_manually(txn_id, "7200")
    sync_service.sync_journal_entries(COMPANY_ID)

    classification_service.classify_manually(txn_id, "7300")
    sync_service.regenerate_all_journal_entries(COMPANY_ID)

    entry = temp_db.find_journal_entry_by_reference(COMPANY_ID, f"TXN-{txn_id}")
    debit_line = next(line for line in entry.lines if line.debit_amount)
    assert debit_line.account_id == chart["7300"].id


def test_post_unclassified_raises_via_generator(sync_service, transaction_service, chart, add_transaction):
    """Unclassified transactions are never posted, even directly."""
    txn_id = add_transaction("MYSTERY", "-5.00")
    with pytest.raises(UnclassifiedError):
        sync_service.generator.post(transaction_service.get_transaction(txn_id))


def test_generated_entry_exists_unknown_transaction(sync_service):
    with pytest.raises(NotFoundError):
        sync_service.generated_entry_exists(404)
