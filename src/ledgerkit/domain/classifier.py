"""Rule-matching classification of bank transactions.

The matching functions are pure: they take immutable rules and transactions
and return an account code or None. ``ClassificationService`` applies them
against the Database port. Nothing here ever invents an account; a
transaction that matches no rule stays unclassified.
"""

import logging
import re
from typing import Iterable, Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.entities import BankTransaction, MappingRule, MatchType
from ledgerkit.domain.errors import (
    NotFoundError,
    ValidationError,
    account_id_not_found,
    account_inactive,
    account_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)


def rule_matches(rule: MappingRule, description: Optional[str]) -> bool:
    """Check whether a rule matches a description, ignoring case."""
    if description is None or not rule.is_active:
        return False

    text = description.strip().upper()
    pattern = rule.pattern.strip().upper()
    if not text or not pattern:
        return False

    if rule.match_type is MatchType.CONTAINS:
        return pattern in text
    if rule.match_type is MatchType.STARTS_WITH:
        return text.startswith(pattern)
    if rule.match_type is MatchType.ENDS_WITH:
        return text.endswith(pattern)
    if rule.match_type is MatchType.EQUALS:
        return text == pattern
    if rule.match_type is MatchType.REGEX:
        return re.search(rule.pattern.strip(), description.strip(), re.IGNORECASE) is not None
    return False


def order_rules(rules: Iterable[MappingRule]) -> list[MappingRule]:
    """Sort rules into evaluation order.

    Highest priority first; equal priorities keep definition order (rule ID),
    independent of the order the rules were supplied in.
    """
    return sorted(rules, key=lambda r: (-r.priority, r.id))


def find_matching_rule(description: Optional[str], rules: Iterable[MappingRule]) -> Optional[MappingRule]:
    """Return the first rule, in evaluation order, matching the description."""
    for rule in order_rules(rules):
        if rule_matches(rule, description):
            return rule
    return None


def classify(transaction: BankTransaction, rules: Iterable[MappingRule]) -> Optional[str]:
    """Select the target account code for a transaction.

    Returns:
        Account code of the winning rule, or None when no rule matches
    """
    rule = find_matching_rule(transaction.description, rules)
    if rule is None:
        return None
    logger.debug("Transaction %s matched rule %s (%s)", transaction.id, rule.id, rule.name)
    return rule.account_code


class ClassificationService:
    """Service applying mapping rules and manual classifications to transactions."""

    def __init__(self, db: Database):
        """Initialize classification service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_transaction(self, transaction_id: int) -> BankTransaction:
        txn = self.db.get_bank_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def _require_active_code(self, company_id: int, account_code: str) -> None:
        account = self.db.get_account_by_code(company_id, account_code)
        if account is None:
            raise NotFoundError(account_not_found(company_id, account_code))
        if not account.is_active:
            raise NotFoundError(account_inactive(account_code))

    def classify_transaction(self, transaction_id: int) -> Optional[str]:
        """Apply the company's active rules to one transaction.

        Re-running with the same rules yields the same classification. A
        transaction classified with an explicit debit/credit pair is left alone.

        Returns:
            Assigned account code, or None if no rule matched or the
            transaction carries an account pair (the transaction is left
            untouched)

        Raises:
            NotFoundError: If the transaction or the rule's target account doesn't exist
        """
        txn = self._require_transaction(transaction_id)
        if txn.has_account_pair:
            return None

        rules = self.db.list_mapping_rules(txn.company_id, active_only=True)
        account_code = classify(txn, rules)
        if account_code is None:
            return None

        self._require_active_code(txn.company_id, account_code)
        if txn.account_code != account_code:
            self.db.update_transaction_account_code(txn.id, account_code)
        return account_code

    def auto_classify(self, company_id: int, fiscal_period_id: int) -> int:
        """Classify every unclassified transaction of a period using the rules.

        Already classified transactions are never touched, so repeating the
        call is safe and returns 0 once nothing new can be matched. The batch
        is all-or-nothing.

        Returns:
            Number of transactions classified

        Raises:
            NotFoundError: If a matching rule targets a missing or inactive account
        """
        rules = order_rules(self.db.list_mapping_rules(company_id, active_only=True))
        classified_count = 0

        with self.db.unit_of_work():
            unclassified = self.db.list_bank_transactions(
                company_id=company_id, fiscal_period_id=fiscal_period_id, classified=False
            )
            checked_codes: set[str] = set()
            for txn in unclassified:
                account_code = classify(txn, rules)
                if account_code is None:
                    continue
                if account_code not in checked_codes:
                    self._require_active_code(company_id, account_code)
                    checked_codes.add(account_code)
                self.db.update_transaction_account_code(txn.id, account_code)
                classified_count += 1

        logger.info(
            "Auto-classified %d transactions for company %s, period %s",
            classified_count,
            company_id,
            fiscal_period_id,
        )
        return classified_count

    def reclassify_all(self, company_id: int, fiscal_period_id: int) -> int:
        """Re-apply current rules to the period's single-account and unclassified transactions.

        Transactions classified with an explicit debit/credit pair are left
        alone, and a classification is never cleared when no rule matches.

        Returns:
            Number of transactions whose account code changed
        """
        rules = order_rules(self.db.list_mapping_rules(company_id, active_only=True))
        changed = 0

        with self.db.unit_of_work():
            for txn in self.db.list_bank_transactions(company_id=company_id, fiscal_period_id=fiscal_period_id):
                if txn.has_account_pair:
                    continue
                account_code = classify(txn, rules)
                if account_code is None or account_code == txn.account_code:
                    continue
                self._require_active_code(company_id, account_code)
                self.db.update_transaction_account_code(txn.id, account_code)
                changed += 1

        logger.info("Reclassified %d transactions for company %s, period %s", changed, company_id, fiscal_period_id)
        return changed

    def classify_manually(self, transaction_id: int, account_code: str) -> None:
        """Assign a single account code chosen by an operator.

        Raises:
            NotFoundError: If the transaction or account doesn't exist
        """
        txn = self._require_transaction(transaction_id)
        self._require_active_code(txn.company_id, account_code)
        self.db.update_transaction_account_code(txn.id, account_code)

    def classify_with_pair(self, transaction_id: int, debit_account_id: int, credit_account_id: int) -> None:
        """Assign an explicit debit/credit account pair.

        Raises:
            NotFoundError: If the transaction or either account doesn't exist
                for the transaction's company
            ValidationError: If both sides are the same account
        """
        txn = self._require_transaction(transaction_id)
        if debit_account_id == credit_account_id:
            raise ValidationError("Debit and credit accounts must differ")

        for account_id in (debit_account_id, credit_account_id):
            account = self.db.get_account(account_id)
            if account is None or account.company_id != txn.company_id:
                raise NotFoundError(account_id_not_found(account_id))
            if not account.is_active:
                raise NotFoundError(account_inactive(account.code))

        self.db.update_transaction_account_pair(txn.id, debit_account_id, credit_account_id)

    def clear_classification(self, transaction_id: int) -> None:
        """Return a transaction to the unclassified state."""
        txn = self._require_transaction(transaction_id)
        self.db.clear_transaction_classification(txn.id)

    def count_classified(self, company_id: int, fiscal_period_id: int) -> int:
        """Count classified transactions of a period."""
        return len(self.db.list_bank_transactions(company_id, fiscal_period_id, classified=True))

    def count_unclassified(self, company_id: int, fiscal_period_id: int) -> int:
        """Count unclassified transactions of a period."""
        return len(self.db.list_bank_transactions(company_id, fiscal_period_id, classified=False))
