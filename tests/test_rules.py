"""Tests for the mapping rule service."""

import pytest

from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.entities import AccountNature, MatchType
from ledgerkit.domain.errors import NotFoundError, ValidationError
from ledgerkit.domain.rules import DEFAULT_RULES

COMPANY_ID = 1


def test_create_rule(rule_service, chart):
    """Test creating a rule with defaults."""
    rule_id = rule_service.create_rule(COMPANY_ID, "Fees", "BANK FEE", "7200", priority=10)
    rule = rule_service.get_rule(rule_id)

    assert rule.pattern == "BANK FEE"
    assert rule.account_code == "7200"
    assert rule.priority == 10
    assert rule.match_type is MatchType.CONTAINS
    assert rule.is_active


def test_create_rule_requires_active_account(rule_service, chart_service, chart):
    """Rules may only target existing, active accounts."""
    with pytest.raises(NotFoundError, match="9999"):
        rule_service.create_rule(COMPANY_ID, "Nowhere", "X", "9999")

    chart_service.deactivate_account(COMPANY_ID, "7300")
    with pytest.raises(NotFoundError, match="inactive"):
        rule_service.create_rule(COMPANY_ID, "Rent", "RENT", "7300")


def test_create_rule_validation(rule_service, chart):
    """Empty patterns, unknown match types and bad regexes are rejected."""
    with pytest.raises(ValidationError, match="pattern"):
        rule_service.create_rule(COMPANY_ID, "Empty", "  ", "7200")
    with pytest.raises(ValidationError, match="Unknown match type"):
        rule_service.create_rule(COMPANY_ID, "Glob", "FEE*", "7200", match_type="glob")
    with pytest.raises(ValidationError, match="Invalid regular expression"):
        rule_service.create_rule(COMPANY_ID, "Broken", "(FEE", "7200", match_type=MatchType.REGEX)


def test_active_rules_ordering(rule_service, chart):
    """Active rules come back by priority, ties in definition order."""
    first = rule_service.create_rule(COMPANY_ID, "a", "A", "7200", priority=1)
    second = rule_service.create_rule(COMPANY_ID, "b", "B", "7200", priority=1)
    top = rule_service.create_rule(COMPANY_ID, "c", "C", "7200", priority=3)

    assert [r.id for r in rule_service.get_active_rules(COMPANY_ID)] == [top, first, second]


def test_deactivate_and_reprioritize(rule_service, chart):
    rule_id = rule_service.create_rule(COMPANY_ID, "a", "A", "7200")
    rule_service.update_rule_priority(COMPANY_ID, rule_id, 50)
    assert rule_service.get_rule(rule_id).priority == 50

    rule_service.deactivate_rule(COMPANY_ID, rule_id)
    assert rule_service.get_active_rules(COMPANY_ID) == []
    assert len(rule_service.list_rules(COMPANY_ID)) == 1


def test_rule_of_other_company_not_found(rule_service, chart):
    rule_id = rule_service.create_rule(COMPANY_ID, "a", "A", "7200")
    with pytest.raises(NotFoundError):
        rule_service.deactivate_rule(2, rule_id)


def test_initialize_default_rules(rule_service, temp_db):
    """Default rules are seeded once, skipping rules whose account is missing."""
    chart_service = ChartOfAccountsService(temp_db)
    chart_service.initialize_chart_of_accounts(COMPANY_ID)
    chart_service.deactivate_account(COMPANY_ID, "7600")

    created = rule_service.initialize_default_rules(COMPANY_ID)
    insurance_rules = [r for r in DEFAULT_RULES if r[3] == "7600"]
    assert created == len(DEFAULT_RULES) - len(insurance_rules)
    assert rule_service.initialize_default_rules(COMPANY_ID) == 0


def test_initialize_default_rules_without_chart(rule_service, chart_service):
    """Nothing is seeded when none of the target accounts exist."""
    chart_service.create_account(COMPANY_ID, "1230", "Bank", AccountNature.ASSET, is_bank=True)
    assert rule_service.initialize_default_rules(COMPANY_ID) == 0
