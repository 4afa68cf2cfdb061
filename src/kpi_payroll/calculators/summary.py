"""Employee-level payroll summaries built from per-company salary results."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from kpi_payroll.calculators.engine import calculate_company_salaries
from kpi_payroll.calculators.line_builder import SalaryLineBuilder
from kpi_payroll.calculators.periods import periods_equal
from kpi_payroll.calculators.rule_merger import merge_company_rules
from kpi_payroll.calculators.types import (
    CompanyRecord,
    CompanyRuleOverride,
    KPIRuleRecord,
    OperationRecord,
    PerformanceRecord,
    SalaryResult,
)

ZERO = Decimal("0")


@dataclass(frozen=True)
class StaffRecord:
    """A staff member who may hold payroll roles."""

    id: str
    name: str
    role: str = "accountant"
    is_active: bool = True


@dataclass(frozen=True)
class AdjustmentRecord:
    """A manual payroll adjustment (bonus, penalty, advance)."""

    employee_id: str
    month: str
    amount: Decimal
    adjustment_type: str = "manual"
    is_approved: bool = True
    id: str | None = None
    reason: str = ""


@dataclass
class EmployeeSalarySummary:
    """Payroll summary of one employee for one month."""

    employee_id: str
    employee_name: str
    employee_role: str
    month: str
    company_count: int = 0
    base_salary: Decimal = ZERO
    kpi_bonus: Decimal = ZERO
    kpi_penalty: Decimal = ZERO  # negative or zero
    adjustments: Decimal = ZERO
    results: list[SalaryResult] = field(default_factory=list)

    @property
    def total_salary(self) -> Decimal:
        return self.base_salary + self.kpi_bonus + self.kpi_penalty + self.adjustments


def _same_name(a: str | None, b: str | None) -> bool:
    return bool(a and b and a.strip().lower() == b.strip().lower())


def find_operation(
    operations: Iterable[OperationRecord], company_id: str, month: str
) -> OperationRecord | None:
    """Return the operation record of a company for a month, if any."""
    for op in operations:
        if op.company_id == company_id and periods_equal(op.period, month):
            return op
    return None


def companies_for_staff(
    staff: StaffRecord,
    companies: Iterable[CompanyRecord],
    operations: Iterable[OperationRecord],
    month: str,
) -> list[CompanyRecord]:
    """Companies where a staff member holds a payroll role.

    Matches by assigned id, by the month's operation assignments, and by name
    when the company has no id for that role.
    """
    from_operations = {
        op.company_id
        for op in operations
        if periods_equal(op.period, month)
        and staff.id in (
            op.assigned_accountant_id,
            op.assigned_bank_manager_id,
            op.assigned_supervisor_id,
        )
    }

    matched = []
    for c in companies:
        if (
            staff.id in (c.accountant_id, c.bank_client_id, c.supervisor_id, c.chief_accountant_id)
            or c.id in from_operations
            or (not c.bank_client_id and _same_name(c.bank_client_name, staff.name))
            or (not c.supervisor_id and _same_name(c.supervisor_name, staff.name))
            or (not c.chief_accountant_id and _same_name(c.chief_accountant_name, staff.name))
        ):
            matched.append(c)
    return matched


def summarize_employee(
    staff: StaffRecord,
    month: str,
    companies: Sequence[CompanyRecord],
    operations: Sequence[OperationRecord],
    performances: Sequence[PerformanceRecord],
    rules: Sequence[KPIRuleRecord],
    overrides: Sequence[CompanyRuleOverride],
    adjustments: Sequence[AdjustmentRecord] = (),
) -> EmployeeSalarySummary:
    """Aggregate one employee's salary across all their companies."""
    summary = EmployeeSalarySummary(
        employee_id=staff.id,
        employee_name=staff.name,
        employee_role=staff.role,
        month=month,
    )

    my_companies = companies_for_staff(staff, companies, operations, month)
    summary.company_count = len(my_companies)

    for company in my_companies:
        effective = merge_company_rules(rules, overrides, company.id)
        operation = find_operation(operations, company.id, month)
        for result in calculate_company_salaries(company, operation, performances, effective):
            # Match by id first, then by name for roles assigned by name only
            if result.staff_id != staff.id and not _same_name(result.staff_name, staff.name):
                continue

            summary.results.append(result)
            summary.base_salary += result.base_amount
            diff = result.adjustment
            if diff > 0:
                summary.kpi_bonus += diff
            elif diff < 0:
                summary.kpi_penalty += diff

    for adj in adjustments:
        if adj.employee_id == staff.id and adj.is_approved and periods_equal(adj.month, month):
            summary.adjustments += adj.amount

    return summary


def build_payroll_summaries(
    staff: Iterable[StaffRecord],
    month: str,
    companies: Sequence[CompanyRecord],
    operations: Sequence[OperationRecord],
    performances: Sequence[PerformanceRecord],
    rules: Sequence[KPIRuleRecord],
    overrides: Sequence[CompanyRuleOverride],
    adjustments: Sequence[AdjustmentRecord] = (),
) -> list[EmployeeSalarySummary]:
    """Build summaries for all staff, dropping those with no companies."""
    summaries = [
        summarize_employee(
            s, month, companies, operations, performances, rules, overrides, adjustments
        )
        for s in staff
    ]
    return [s for s in summaries if s.company_count > 0]


def super_admin_commission(
    companies: Iterable[CompanyRecord], percent: Decimal
) -> Decimal:
    """Commission on the contract turnover of all active companies.

    Independent of any chief accountant share configured on a company.
    """
    turnover = sum(
        (c.contract_amount or ZERO for c in companies if c.is_active), ZERO
    )
    return SalaryLineBuilder.round_amount(turnover * percent / 100)
