"""Payroll service - loads a month's data and runs the salary engine."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from kpi_payroll.calculators.engine import calculate_company_salaries, compute_results_fingerprint
from kpi_payroll.calculators.periods import month_start, normalize_period
from kpi_payroll.calculators.rollup import AccountantRollup, build_accountant_rollup
from kpi_payroll.calculators.rule_merger import merge_company_rules
from kpi_payroll.calculators.summary import (
    AdjustmentRecord,
    EmployeeSalarySummary,
    StaffRecord,
    build_payroll_summaries,
    find_operation,
    super_admin_commission,
)
from kpi_payroll.calculators.types import (
    CompanyRecord,
    CompanyRuleOverride,
    EffectiveRule,
    KPIRuleRecord,
    OperationRecord,
    PerformanceRecord,
    SalaryResult,
)
from kpi_payroll.config import get_settings
from kpi_payroll.models import (
    Company,
    CompanyKPIRule,
    KPIRule,
    MonthlyPerformance,
    OperationEntry,
    PayrollAdjustment,
    Staff,
)
from kpi_payroll.services.errors import NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class MonthData:
    """In-memory snapshot of every collection the engine needs for a month."""

    month: str
    staff: list[StaffRecord] = field(default_factory=list)
    companies: list[CompanyRecord] = field(default_factory=list)
    operations: list[OperationRecord] = field(default_factory=list)
    rules: list[KPIRuleRecord] = field(default_factory=list)
    overrides: list[CompanyRuleOverride] = field(default_factory=list)
    performances: list[PerformanceRecord] = field(default_factory=list)
    adjustments: list[AdjustmentRecord] = field(default_factory=list)

    def company(self, company_id: str) -> CompanyRecord | None:
        for c in self.companies:
            if c.id == company_id:
                return c
        return None


@dataclass
class CompanySalaryBreakdown:
    """Salary results of one company for one month."""

    company: CompanyRecord
    month: str
    results: list[SalaryResult]
    fingerprint: str


@dataclass
class PayrollReport:
    """Employee summaries plus the super-admin commission for a month."""

    month: str
    summaries: list[EmployeeSalarySummary]
    super_admin_commission: Decimal

    @property
    def total_salary(self) -> Decimal:
        return sum((s.total_salary for s in self.summaries), Decimal("0"))


class PayrollService:
    """Read side of payroll: fetch, merge rules, calculate, aggregate.

    Payroll is never stored; every call recomputes from the current records.
    Collections are fetched concurrently, each in its own session.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.settings = get_settings()

    async def load_month(self, month: str) -> MonthData:
        """Fetch all collections for a month concurrently."""
        period = normalize_period(month)
        start = month_start(period)

        (
            staff,
            companies,
            operations,
            rules,
            overrides,
            performances,
            adjustments,
        ) = await asyncio.gather(
            self._fetch(select(Staff).where(Staff.is_active.is_(True))),
            self._fetch(select(Company).order_by(Company.name)),
            self._fetch(select(OperationEntry).where(OperationEntry.period == period)),
            self._fetch(select(KPIRule).order_by(KPIRule.sort_order)),
            self._fetch(select(CompanyKPIRule)),
            self._fetch(select(MonthlyPerformance).where(MonthlyPerformance.month == start)),
            self._fetch(select(PayrollAdjustment).where(PayrollAdjustment.month == start)),
        )

        data = MonthData(
            month=period,
            staff=[s.to_record() for s in staff],
            companies=[c.to_record() for c in companies],
            operations=[o.to_record() for o in operations],
            rules=[r.to_record() for r in rules],
            overrides=[o.to_record() for o in overrides],
            performances=[p.to_record() for p in performances],
            adjustments=[a.to_record() for a in adjustments],
        )
        logger.debug(
            "Loaded %s: %d companies, %d operations, %d performance rows",
            period,
            len(data.companies),
            len(data.operations),
            len(data.performances),
        )
        return data

    async def effective_rules(self, company_id: str) -> list[EffectiveRule]:
        """Effective rule table of a company."""
        company, rules, overrides = await asyncio.gather(
            self._get(Company, company_id),
            self._fetch(select(KPIRule).order_by(KPIRule.sort_order)),
            self._fetch(select(CompanyKPIRule).where(CompanyKPIRule.company_id == company_id)),
        )
        if company is None:
            raise NotFoundError("Company", company_id)
        return merge_company_rules(
            [r.to_record() for r in rules], [o.to_record() for o in overrides], company_id
        )

    async def company_salaries(self, company_id: str, month: str) -> CompanySalaryBreakdown:
        """Salary breakdown of every role in one company."""
        data = await self.load_month(month)
        return self.breakdown_from(data, company_id)

    def breakdown_from(self, data: MonthData, company_id: str) -> CompanySalaryBreakdown:
        company = data.company(company_id)
        if company is None:
            raise NotFoundError("Company", company_id)

        rules = merge_company_rules(data.rules, data.overrides, company_id)
        operation = find_operation(data.operations, company_id, data.month)
        results = calculate_company_salaries(company, operation, data.performances, rules)

        return CompanySalaryBreakdown(
            company=company,
            month=data.month,
            results=results,
            fingerprint=compute_results_fingerprint(results, self.settings.engine_version),
        )

    async def payroll_summaries(self, month: str) -> PayrollReport:
        """Employee-level payroll summaries for a month."""
        data = await self.load_month(month)
        return self.report_from(data)

    def report_from(self, data: MonthData) -> PayrollReport:
        summaries = build_payroll_summaries(
            data.staff,
            data.month,
            data.companies,
            data.operations,
            data.performances,
            data.rules,
            data.overrides,
            data.adjustments,
        )
        commission = super_admin_commission(
            data.companies, self.settings.super_admin_commission_percent
        )
        logger.info(
            "Computed payroll for %s: %d employees, commission %s",
            data.month,
            len(summaries),
            commission,
        )
        return PayrollReport(
            month=data.month, summaries=summaries, super_admin_commission=commission
        )

    async def accountant_rollup(self, month: str) -> list[AccountantRollup]:
        """Report progress per accountant for a month."""
        data = await self.load_month(month)
        return build_accountant_rollup(data.staff, data.companies, data.operations, data.month)

    async def _fetch(self, stmt: Select[Any]) -> list[Any]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def _get(self, model: type[T], entity_id: str) -> T | None:
        async with self.session_factory() as session:
            return await session.get(model, entity_id)
