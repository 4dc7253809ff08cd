"""Fiscal period domain service."""

from datetime import date
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import FiscalPeriod
from ledgerkit.domain.errors import NotFoundError, ValidationError, period_not_found


class FiscalPeriodService:
    """Service for managing fiscal periods."""

    def __init__(self, db: Database):
        """Initialize fiscal period service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_period(self, company_id: int, name: str, start_date: date, end_date: date) -> int:
        """Create a fiscal period.

        Args:
            company_id: Company ID
            name: Period name (e.g., "FY2024")
            start_date: First day of the period
            end_date: Last day of the period

        Returns:
            Fiscal period ID

        Raises:
            ValidationError: If the range is inverted or overlaps an existing period
        """
        if not name or not name.strip():
            raise ValidationError("Fiscal period name is required")
        if start_date > end_date:
            raise ValidationError(
                f"Fiscal period start date {start_date} is after end date {end_date}"
            )

        for existing in self.db.list_fiscal_periods(company_id):
            if start_date <= existing.end_date and existing.start_date <= end_date:
                raise ValidationError(
                    f"Fiscal period {start_date} to {end_date} overlaps "
                    f"'{existing.name}' ({existing.start_date} to {existing.end_date})"
                )

        return self.db.create_fiscal_period(
            company_id=company_id, name=name.strip(), start_date=start_date, end_date=end_date
        )

    def get_period(self, period_id: int) -> Optional[FiscalPeriod]:
        """Get fiscal period by ID."""
        return self.db.get_fiscal_period(period_id)

    def require_period(self, company_id: int, period_id: int) -> FiscalPeriod:
        """Get a fiscal period of the company or raise NotFoundError."""
        period = self.db.get_fiscal_period(period_id)
        if period is None or period.company_id != company_id:
            raise NotFoundError(period_not_found(period_id))
        return period

    def list_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List fiscal periods ordered by start date."""
        return self.db.list_fiscal_periods(company_id)

    def previous_period(self, period: FiscalPeriod) -> Optional[FiscalPeriod]:
        """Return the period immediately preceding the given one, if any."""
        previous = None
        for candidate in self.db.list_fiscal_periods(period.company_id):
            if candidate.end_date < period.start_date:
                previous = candidate
        return previous

    def period_for_date(self, company_id: int, day: date) -> Optional[FiscalPeriod]:
        """Return the period containing the given date, if any."""
        for period in self.db.list_fiscal_periods(company_id):
            if period.contains(day):
                return period
        return None

    def close_period(self, company_id: int, period_id: int) -> None:
        """Mark a fiscal period as closed."""
        self.require_period(company_id, period_id)
        self.db.set_fiscal_period_closed(period_id, True)
