"""Performance service - manual KPI marks and their review."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kpi_payroll.calculators.periods import month_start
from kpi_payroll.calculators.rule_merger import to_effective
from kpi_payroll.models import Company, CompanyKPIRule, KPIRule, MonthlyPerformance, Staff
from kpi_payroll.services.errors import NotFoundError
from kpi_payroll.services.performance_state import (
    PerformanceStateMachine,
    calculated_score,
    next_toggle_value,
    source_for_role,
)

logger = logging.getLogger(__name__)


class PerformanceService:
    """Write side of monthly performance rows.

    Operations:
    - toggle: cycle a mark 0 → 1 → -1 → 0 for (month, company, employee, rule)
    - review: approve or reject a submitted mark
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_performance(self, performance_id: str) -> MonthlyPerformance | None:
        return await self.session.get(MonthlyPerformance, performance_id)

    async def find_mark(
        self, month: str, company_id: str, employee_id: str, rule_id: str
    ) -> MonthlyPerformance | None:
        """Load the row for a (month, company, employee, rule) tuple."""
        result = await self.session.execute(
            select(MonthlyPerformance).where(
                MonthlyPerformance.month == month_start(month),
                MonthlyPerformance.company_id == company_id,
                MonthlyPerformance.employee_id == employee_id,
                MonthlyPerformance.rule_id == rule_id,
            )
        )
        return result.scalar_one_or_none()

    async def toggle(
        self,
        month: str,
        company_id: str,
        employee_id: str,
        rule_id: str,
        actor_id: str | None = None,
        actor_role: str | None = None,
        notes: str | None = None,
    ) -> MonthlyPerformance:
        """Advance a mark one step through the toggle cycle.

        Creates the row on first toggle. The status is reset on every toggle:
        reviewers' marks are approved at once, others wait for review.
        """
        rule = await self.session.get(KPIRule, rule_id)
        if rule is None:
            raise NotFoundError("KPIRule", rule_id)
        if await self.session.get(Company, company_id) is None:
            raise NotFoundError("Company", company_id)
        if await self.session.get(Staff, employee_id) is None:
            raise NotFoundError("Staff", employee_id)

        override = await self._override_for(company_id, rule_id)
        effective = to_effective(
            rule.to_record(), override.to_record() if override is not None else None
        )

        perf = await self.find_mark(month, company_id, employee_id, rule_id)
        if perf is None:
            perf = MonthlyPerformance(
                month=month_start(month),
                company_id=company_id,
                employee_id=employee_id,
                rule_id=rule_id,
                value=0,
            )
            self.session.add(perf)

        old_value = perf.value or 0
        perf.value = next_toggle_value(old_value)
        perf.status = PerformanceStateMachine.status_after_toggle(actor_role)
        perf.source = source_for_role(actor_role).value
        perf.rule_role = rule.role
        perf.calculated_score = calculated_score(
            perf.value,
            perf.reward_percent_override
            if perf.reward_percent_override is not None
            else effective.reward_percent,
            perf.penalty_percent_override
            if perf.penalty_percent_override is not None
            else effective.penalty_percent,
        )
        perf.recorded_by = actor_id
        perf.recorded_at = datetime.now(timezone.utc)
        perf.reviewed_by = None
        perf.reviewed_at = None
        if notes is not None:
            perf.notes = notes

        await self.session.flush()
        logger.info(
            "Toggled %s for employee %s at company %s (%s): %d -> %d [%s]",
            rule.name,
            employee_id,
            company_id,
            month,
            old_value,
            perf.value,
            perf.status,
        )
        return perf

    async def review(
        self,
        performance_id: str,
        to_status: str,
        actor_id: str | None = None,
        actor_role: str | None = None,
        reason: str | None = None,
    ) -> MonthlyPerformance:
        """Approve or reject a mark.

        Raises PermissionDeniedError for non-reviewers and
        InvalidPerformanceTransitionError for disallowed transitions.
        """
        perf = await self.get_performance(performance_id)
        if perf is None:
            raise NotFoundError("MonthlyPerformance", performance_id)

        from_status = perf.status
        PerformanceStateMachine.validate_review(actor_role, from_status, to_status)

        perf.status = to_status
        perf.reviewed_by = actor_id
        perf.reviewed_at = datetime.now(timezone.utc)
        if reason:
            perf.change_reason = reason

        await self.session.flush()
        logger.info(
            "Performance %s reviewed by %s: %s -> %s",
            performance_id,
            actor_id,
            from_status,
            to_status,
        )
        return perf

    async def _override_for(self, company_id: str, rule_id: str) -> CompanyKPIRule | None:
        result = await self.session.execute(
            select(CompanyKPIRule).where(
                CompanyKPIRule.company_id == company_id,
                CompanyKPIRule.rule_id == rule_id,
            )
        )
        return result.scalar_one_or_none()
