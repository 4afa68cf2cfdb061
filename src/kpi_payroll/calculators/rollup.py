"""Per-accountant report progress rollup."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from kpi_payroll.calculators.periods import periods_equal
from kpi_payroll.calculators.report_status import (
    get_report_status_multiplier,
    is_blocked,
    is_completed,
    normalize_status,
)
from kpi_payroll.calculators.summary import StaffRecord
from kpi_payroll.calculators.types import CompanyRecord, OperationRecord

GREEN_THRESHOLD = 90
YELLOW_THRESHOLD = 60


@dataclass
class AccountantRollup:
    """Report progress of one accountant for one period."""

    employee_id: str
    name: str
    total_companies: int
    annual_completed: int
    annual_pending: int
    annual_blocked: int
    stats_completed: int

    @property
    def annual_progress(self) -> int:
        return _progress(self.annual_completed, self.total_companies)

    @property
    def stats_progress(self) -> int:
        return _progress(self.stats_completed, self.total_companies)

    @property
    def zone(self) -> str:
        if self.annual_progress >= GREEN_THRESHOLD:
            return "green"
        if self.annual_progress >= YELLOW_THRESHOLD:
            return "yellow"
        return "red"


def _progress(done: int, total: int) -> int:
    if total <= 0:
        return 0
    return int(done * 100 / total + 0.5)


def rollup_accountant(
    staff: StaffRecord,
    companies: Iterable[CompanyRecord],
    operations: Iterable[OperationRecord],
    period: str,
) -> AccountantRollup:
    """Count completed, pending and blocked reports of an accountant.

    Blocked (kartoteka) statuses are kept in their own bucket and are not
    counted as pending, even though the salary engine penalises them.
    """
    mine = [
        c for c in companies
        if c.accountant_id == staff.id
        or (not c.accountant_id and c.accountant_name
            and c.accountant_name.strip().lower() == staff.name.strip().lower())
    ]
    ids = {c.id for c in mine}
    ops = [op for op in operations if op.company_id in ids and periods_equal(op.period, period)]

    completed = pending = blocked = stats = 0
    for op in ops:
        status = op.profit_tax_status
        if is_completed(status):
            completed += 1
        elif is_blocked(status):
            blocked += 1
        elif get_report_status_multiplier(status) < 0:
            pending += 1
        if normalize_status(op.stats_status) in ("+", "accepted"):
            stats += 1

    return AccountantRollup(
        employee_id=staff.id,
        name=staff.name,
        total_companies=len(mine),
        annual_completed=completed,
        annual_pending=pending,
        annual_blocked=blocked,
        stats_completed=stats,
    )


def build_accountant_rollup(
    staff: Sequence[StaffRecord],
    companies: Sequence[CompanyRecord],
    operations: Sequence[OperationRecord],
    period: str,
) -> list[AccountantRollup]:
    """Rollup for every staff member, best progress first."""
    rows = [rollup_accountant(s, companies, operations, period) for s in staff]
    return sorted(rows, key=lambda r: r.annual_progress, reverse=True)
