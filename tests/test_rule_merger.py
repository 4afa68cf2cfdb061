"""Tests for merging company overrides into effective rules."""

from decimal import Decimal

from kpi_payroll.calculators.rule_merger import (
    merge_company_rules,
    to_effective,
)
from kpi_payroll.calculators.types import CompanyRuleOverride
from tests.factories import make_rule_record


class TestRuleMerger:
    """Test override precedence."""

    def test_no_override_keeps_global_values(self):
        rule = make_rule_record(reward="5", penalty="10")
        effective = to_effective(rule)

        assert effective.reward_percent == Decimal("5")
        assert effective.penalty_percent == Decimal("10")
        assert effective.overridden is False

    def test_override_wins_field_by_field(self):
        """A null override field keeps the global value."""
        rule = make_rule_record(reward="5", penalty="10")
        override = CompanyRuleOverride(
            company_id="company-1", rule_id="rule-1", reward_percent=Decimal("8")
        )
        effective = to_effective(rule, override)

        assert effective.reward_percent == Decimal("8")
        assert effective.penalty_percent == Decimal("10")
        assert effective.overridden is True

    def test_zero_override_is_respected(self):
        rule = make_rule_record(reward="5")
        override = CompanyRuleOverride(
            company_id="company-1", rule_id="rule-1", reward_percent=Decimal("0")
        )
        assert to_effective(rule, override).reward_percent == Decimal("0")

    def test_merge_only_uses_company_overrides(self):
        rules = [
            make_rule_record("rule-1", "acc_attendance"),
            make_rule_record("rule-2", "acc_didox", category="automation", reward="2"),
        ]
        overrides = [
            CompanyRuleOverride("company-2", "rule-2", reward_percent=Decimal("9")),
            CompanyRuleOverride("company-1", "rule-2", reward_percent=Decimal("3")),
        ]

        merged = merge_company_rules(rules, overrides, "company-1")

        assert [r.id for r in merged] == ["rule-1", "rule-2"]
        assert merged[0].overridden is False
        assert merged[1].reward_percent == Decimal("3")
        assert merged[1].is_automation is True
