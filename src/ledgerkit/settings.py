"""Settings sourced from the environment."""

from dataclasses import dataclass
import os
from typing import Optional

from ledgerkit.domain.errors import ValidationError

DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
DEFAULT_CREATED_BY = "SYSTEM"
DEFAULT_COMPANY_ID = 1


@dataclass(frozen=True)
class Settings:
    """Runtime settings for ledgerkit.

    Attributes:
        db_path: SQLite database file; None selects the factory default.
        log_level: Name of the logging level for the CLI.
        created_by: Value stamped on generated journal entries.
        company_id: Company scope used when a command does not name one.
    """

    db_path: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL
    created_by: str = DEFAULT_CREATED_BY
    company_id: int = DEFAULT_COMPANY_ID

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from LEDGERKIT_* environment variables.

        Raises:
            ValidationError: If LEDGERKIT_COMPANY_ID is not an integer or
                LEDGERKIT_LOG_LEVEL is not a known level name
        """
        raw_company = os.getenv("LEDGERKIT_COMPANY_ID", str(DEFAULT_COMPANY_ID)).strip()
        try:
            company_id = int(raw_company)
        except ValueError:
            raise ValidationError(f"LEDGERKIT_COMPANY_ID must be an integer, got '{raw_company}'")

        log_level = os.getenv("LEDGERKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL
        if log_level not in LOG_LEVELS:
            raise ValidationError(
                f"LEDGERKIT_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got '{log_level}'"
            )

        return cls(
            db_path=os.getenv("LEDGERKIT_DB_PATH") or None,
            log_level=log_level,
            created_by=os.getenv("LEDGERKIT_CREATED_BY", DEFAULT_CREATED_BY).strip() or DEFAULT_CREATED_BY,
            company_id=company_id,
        )
