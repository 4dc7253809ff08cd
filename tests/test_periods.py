"""Tests for the fiscal period service."""

from datetime import date

import pytest

from ledgerkit.domain.errors import NotFoundError, ValidationError

COMPANY_ID = 1


def test_create_period(period_service):
    """Test creating a fiscal period."""
    period_id = period_service.create_period(COMPANY_ID, "FY2024", date(2024, 1, 1), date(2024, 12, 31))
    period = period_service.get_period(period_id)

    assert period.name == "FY2024"
    assert not period.is_closed
    assert period.contains(date(2024, 1, 1))
    assert period.contains(date(2024, 12, 31))
    assert not period.contains(date(2025, 1, 1))


def test_inverted_range_rejected(period_service):
    with pytest.raises(ValidationError, match="after end date"):
        period_service.create_period(COMPANY_ID, "Bad", date(2024, 12, 31), date(2024, 1, 1))


def test_overlap_rejected(period_service, fy2024):
    """Periods of one company may not overlap."""
    with pytest.raises(ValidationError, match="overlaps"):
        period_service.create_period(COMPANY_ID, "H2", date(2024, 7, 1), date(2025, 6, 30))

    # Other companies are independent
    period_service.create_period(2, "FY2024", date(2024, 1, 1), date(2024, 12, 31))


def test_previous_period(period_service, fy2024, fy2025):
    """The previous period is the latest one ending before the start."""
    assert period_service.previous_period(fy2025).id == fy2024.id
    assert period_service.previous_period(fy2024) is None


def test_period_for_date(period_service, fy2024, fy2025):
    assert period_service.period_for_date(COMPANY_ID, date(2025, 6, 1)).id == fy2025.id
    assert period_service.period_for_date(COMPANY_ID, date(2023, 6, 1)) is None


def test_require_period_scoped_to_company(period_service, fy2024):
    """A period of another company is not found."""
    assert period_service.require_period(COMPANY_ID, fy2024.id).id == fy2024.id
    with pytest.raises(NotFoundError):
        period_service.require_period(2, fy2024.id)


def test_close_period(period_service, fy2024):
    period_service.close_period(COMPANY_ID, fy2024.id)
    assert period_service.get_period(fy2024.id).is_closed
