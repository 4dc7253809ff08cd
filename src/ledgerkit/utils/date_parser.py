"""Date parsing utilities."""

import re
from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-03-15", "15 March 2024") and a few
    relative forms ("today", "yesterday", "start of month", "start of year").

    Args:
        date_str: Date string

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "start of month": today.replace(day=1),
        "start of year": today.replace(month=1, day=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    try:
        # Statements are day-first outside ISO format
        return date_parser.parse(text, dayfirst=not re.match(r"^\d{4}-", text)).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def period_bounds(period: str, start_month: int = 1) -> tuple[date, date]:
    """Get first and last day of a named fiscal period.

    Args:
        period: "YYYY" for a fiscal year or "YYYY-MM" for a single month
        start_month: Month a fiscal year starts in (1 = calendar year)

    Returns:
        Tuple of (start_date, end_date), both inclusive

    Raises:
        ValueError: If the period string is not recognized
    """
    text = period.strip()

    month_match = re.fullmatch(r"(\d{4})-(\d{1,2})", text)
    if month_match:
        year, month = int(month_match.group(1)), int(month_match.group(2))
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month in period '{period}'")
        start_date = date(year, month, 1)
        return (start_date, start_date + relativedelta(months=1) - timedelta(days=1))

    if re.fullmatch(r"\d{4}", text):
        if not 1 <= start_month <= 12:
            raise ValueError(f"Invalid fiscal year start month: {start_month}")
        start_date = date(int(text), start_month, 1)
        return (start_date, start_date + relativedelta(years=1) - timedelta(days=1))

    raise ValueError(f"Unknown period: '{period}'. Expected YYYY or YYYY-MM")
