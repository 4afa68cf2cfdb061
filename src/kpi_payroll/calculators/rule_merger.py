"""Merge global KPI rules with company-specific overrides."""

from __future__ import annotations

from collections.abc import Iterable

from kpi_payroll.calculators.types import CompanyRuleOverride, EffectiveRule, KPIRuleRecord


def to_effective(rule: KPIRuleRecord, override: CompanyRuleOverride | None = None) -> EffectiveRule:
    """Build the effective rule for one rule and an optional override.

    Override percentages win only when they are set; a null override field
    keeps the global value.
    """
    reward = rule.reward_percent
    penalty = rule.penalty_percent
    if override is not None:
        if override.reward_percent is not None:
            reward = override.reward_percent
        if override.penalty_percent is not None:
            penalty = override.penalty_percent

    return EffectiveRule(
        id=rule.id,
        name=rule.name,
        role=rule.role,
        category=rule.category,
        reward_percent=reward,
        penalty_percent=penalty,
        is_active=rule.is_active,
        overridden=override is not None,
    )


def merge_company_rules(
    rules: Iterable[KPIRuleRecord],
    overrides: Iterable[CompanyRuleOverride],
    company_id: str,
) -> list[EffectiveRule]:
    """Return the effective rule table for a company, in rule order."""
    by_rule = {o.rule_id: o for o in overrides if o.company_id == company_id}
    return [to_effective(rule, by_rule.get(rule.id)) for rule in rules]
