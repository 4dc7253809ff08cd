"""Mapping rule domain service."""

import logging
import re
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import MappingRule, MatchType
from ledgerkit.domain.errors import (
    NotFoundError,
    ValidationError,
    account_inactive,
    account_not_found,
    rule_not_found,
)

logger = logging.getLogger(__name__)


# Default rules: (name, match_type, pattern, account_code, priority)
DEFAULT_RULES = [
    ("Bank fees", MatchType.CONTAINS, "FEE", "7200", 10),
    ("Bank charges", MatchType.CONTAINS, "CHARGE", "7200", 10),
    ("Interest received", MatchType.CONTAINS, "INTEREST", "4100", 10),
    ("Salaries", MatchType.CONTAINS, "SALARY", "7100", 10),
    ("Rent", MatchType.CONTAINS, "RENT", "7300", 5),
    ("Telephone", MatchType.REGEX, r"\b(TELKOM|VODACOM|MTN|CELL C)\b", "7400", 5),
    ("Fuel", MatchType.REGEX, r"\b(FUEL|PETROL|ENGEN|SHELL|CALTEX)\b", "7500", 5),
    ("Insurance", MatchType.CONTAINS, "INSURANCE", "7600", 5),
]


class MappingRuleService:
    """Service for managing transaction mapping rules."""

    def __init__(self, db: Database):
        """Initialize mapping rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(
        self,
        company_id: int,
        name: str,
        pattern: str,
        account_code: str,
        priority: int = 0,
        match_type: MatchType | str = MatchType.CONTAINS,
    ) -> int:
        """Create a mapping rule.

        Args:
            company_id: Company ID
            name: Human readable rule name
            pattern: Text or regular expression matched against descriptions
            account_code: Target account code
            priority: Higher priority rules are evaluated first
            match_type: How the pattern is compared with the description

        Returns:
            Rule ID

        Raises:
            ValidationError: If the pattern is empty, the match type is unknown,
                or a regex does not compile
            NotFoundError: If the target account does not exist or is inactive
        """
        if not pattern or not pattern.strip():
            raise ValidationError("Rule pattern is required")

        try:
            match_type = MatchType(match_type)
        except ValueError:
            valid = ", ".join(m.value for m in MatchType)
            raise ValidationError(f"Unknown match type '{match_type}'. Expected one of: {valid}")

        if match_type is MatchType.REGEX:
            try:
                re.compile(pattern)
            except re.error as e:
                raise ValidationError(f"Invalid regular expression '{pattern}': {e}")

        account = self.db.get_account_by_code(company_id, account_code)
        if account is None:
            raise NotFoundError(account_not_found(company_id, account_code))
        if not account.is_active:
            raise NotFoundError(account_inactive(account_code))

        return self.db.create_mapping_rule(
            company_id=company_id,
            name=name or pattern,
            match_type=match_type,
            pattern=pattern,
            account_code=account_code,
            priority=priority,
        )

    def get_rule(self, rule_id: int) -> Optional[MappingRule]:
        """Get mapping rule by ID."""
        return self.db.get_mapping_rule(rule_id)

    def get_active_rules(self, company_id: int) -> list[MappingRule]:
        """Get active rules in evaluation order.

        Returns:
            Rules ordered by priority (highest first), then by definition order
        """
        return self.db.list_mapping_rules(company_id, active_only=True)

    def list_rules(self, company_id: int) -> list[MappingRule]:
        """List all rules of a company in evaluation order."""
        return self.db.list_mapping_rules(company_id)

    def _require_rule(self, company_id: int, rule_id: int) -> MappingRule:
        rule = self.db.get_mapping_rule(rule_id)
        if rule is None or rule.company_id != company_id:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def deactivate_rule(self, company_id: int, rule_id: int) -> None:
        """Deactivate a rule so the classifier no longer evaluates it."""
        self._require_rule(company_id, rule_id)
        self.db.update_mapping_rule(rule_id, is_active=False)

    def update_rule_priority(self, company_id: int, rule_id: int, priority: int) -> None:
        """Change the priority of a rule."""
        self._require_rule(company_id, rule_id)
        self.db.update_mapping_rule(rule_id, priority=priority)

    def initialize_default_rules(
        self,
        company_id: int,
        template: Optional[list[tuple[str, MatchType, str, str, int]]] = None,
    ) -> int:
        """Seed rules from a template.

        Rules already present (same pattern and target) are skipped, as are
        rules whose target account does not exist for the company.

        Returns:
            Number of rules created
        """
        if template is None:
            template = DEFAULT_RULES

        existing = {(r.match_type, r.pattern, r.account_code) for r in self.db.list_mapping_rules(company_id)}
        created = 0
        with self.db.unit_of_work():
            for name, match_type, pattern, account_code, priority in template:
                if (match_type, pattern, account_code) in existing:
                    continue
                account = self.db.get_account_by_code(company_id, account_code)
                if account is None or not account.is_active:
                    logger.warning(
                        "Skipping rule '%s': account %s not available for company %s",
                        name,
                        account_code,
                        company_id,
                    )
                    continue
                self.db.create_mapping_rule(
                    company_id=company_id,
                    name=name,
                    match_type=match_type,
                    pattern=pattern,
                    account_code=account_code,
                    priority=priority,
                )
                created += 1

        logger.info("Initialized %d mapping rules for company %s", created, company_id)
        return created
