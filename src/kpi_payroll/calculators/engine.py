"""KPI salary engine - per-company, per-period salary breakdown."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Sequence
from decimal import Decimal

from kpi_payroll.calculators.line_builder import SalaryLineBuilder
from kpi_payroll.calculators.report_status import get_report_status_multiplier
from kpi_payroll.calculators.rule_fields import OperationField, resolve_operation_field
from kpi_payroll.calculators.types import (
    ROLE_MATCHES,
    CompanyRecord,
    EffectiveRule,
    OperationRecord,
    PerformanceRecord,
    RuleRole,
    SalaryLine,
    SalaryLineType,
    SalaryResult,
    SalaryRole,
)

ZERO = Decimal("0")

UNASSIGNED = "Unassigned"


def _dec(value: Decimal | int | float | str | None) -> Decimal:
    """Coerce an optional numeric value to Decimal, treating junk as zero."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except ArithmeticError:
        return ZERO


def rule_role_applies(rule_role: str | None, role: SalaryRole) -> bool:
    """Check whether a manual KPI row targeted at ``rule_role`` hits ``role``.

    Rows without a role (or targeted at all roles) apply to every role except
    the chief accountant, which only receives rows addressed to it.
    """
    if not rule_role or rule_role == RuleRole.ALL.value:
        return role != SalaryRole.CHIEF_ACCOUNTANT
    return rule_role in ROLE_MATCHES[role]


class SalaryEngine:
    """Salary calculation for one company and one period.

    Pipeline per role:
    1) Base from a fixed sum, else a share of the contract amount
    2) Manual KPI percent from approved performance rows
    3) Automation KPI percent from report statuses
    4) KPI bonus = contract * percent / 100 (always against the full contract)
    5) Final = max(0, base + bonus)
    """

    def __init__(
        self,
        company: CompanyRecord,
        operation: OperationRecord | None = None,
        performances: Iterable[PerformanceRecord] = (),
        rules: Sequence[EffectiveRule] = (),
    ):
        self.company = company
        self.operation = operation
        self.contract = _dec(company.contract_amount)
        self.performances = [
            p for p in performances
            if p.company_id == company.id and p.counts_for_payroll
        ]
        self.rules = [r for r in rules if r.is_active]
        self._rules_by_id = {r.id: r for r in self.rules}

    def calculate(self) -> list[SalaryResult]:
        """Calculate every assigned role of the company."""
        c = self.company
        results: list[SalaryResult] = []

        candidates = [
            (SalaryRole.ACCOUNTANT, c.accountant_id, c.accountant_name, c.accountant_perc, None),
            (
                SalaryRole.BANK_MANAGER,
                c.bank_client_id,
                c.bank_client_name,
                c.bank_client_perc,
                c.bank_client_sum,
            ),
        ]

        # No default share for the chief accountant: it must be configured.
        if _dec(c.chief_accountant_perc) > 0 or _dec(c.chief_accountant_sum) > 0:
            candidates.append((
                SalaryRole.CHIEF_ACCOUNTANT,
                c.chief_accountant_id,
                c.chief_accountant_name,
                c.chief_accountant_perc,
                c.chief_accountant_sum,
            ))

        candidates.append(
            (SalaryRole.SUPERVISOR, c.supervisor_id, c.supervisor_name, c.supervisor_perc, None)
        )

        for role, staff_id, staff_name, perc, fixed in candidates:
            result = self.calculate_for_role(role, staff_id, staff_name, perc, fixed)
            if result is not None:
                results.append(result)

        return results

    def calculate_for_role(
        self,
        role: SalaryRole,
        staff_id: str | None,
        staff_name: str | None,
        perc: Decimal | None = None,
        fixed_sum: Decimal | None = None,
    ) -> SalaryResult | None:
        """Calculate one role, or None when the role has no payroll line."""
        perc = _dec(perc)
        fixed_sum = _dec(fixed_sum)

        if not staff_id and not fixed_sum and not perc:
            return None

        lines: list[SalaryLine] = []
        if fixed_sum:
            base_line = SalaryLineBuilder.create_fixed_base_line(fixed_sum)
        elif perc:
            base_line = SalaryLineBuilder.create_percent_base_line(self.contract, perc)
        else:
            return None

        base = base_line.amount
        lines.append(base_line)

        if staff_id:
            lines.extend(self._manual_lines(role, staff_id))
        lines.extend(self._automation_lines(role))

        sum_percent = SalaryLineBuilder.sum_percent(lines)
        kpi_bonus = self.contract * sum_percent / 100
        final = max(ZERO, base + kpi_bonus)

        return SalaryResult(
            role=role,
            staff_id=staff_id,
            staff_name=staff_name or UNASSIGNED,
            company_id=self.company.id,
            base_amount=SalaryLineBuilder.round_amount(base),
            kpi_score=sum_percent,
            kpi_bonus=SalaryLineBuilder.round_amount(kpi_bonus),
            final_amount=SalaryLineBuilder.round_amount(final),
            lines=lines,
        )

    def _manual_lines(self, role: SalaryRole, staff_id: str) -> list[SalaryLine]:
        """Build KPI lines from approved manual performance rows."""
        lines: list[SalaryLine] = []
        for perf in self.performances:
            if perf.employee_id != staff_id:
                continue
            if not rule_role_applies(perf.rule_role, role):
                continue

            rule = self._rules_by_id.get(perf.rule_id)
            if perf.value == 1:
                reward = perf.reward_percent_override
                if reward is None and rule is not None:
                    reward = rule.reward_percent
                percent = _dec(reward)
            elif perf.value == -1:
                penalty = perf.penalty_percent_override
                if penalty is None and rule is not None:
                    penalty = rule.penalty_percent
                percent = -abs(_dec(penalty))
            else:
                continue

            if percent == 0:
                continue

            label = rule.name if rule is not None else perf.rule_id
            lines.append(
                SalaryLineBuilder.create_kpi_line(
                    SalaryLineType.MANUAL_KPI, percent, self.contract, label, perf.rule_id
                )
            )
        return lines

    def _automation_lines(self, role: SalaryRole) -> list[SalaryLine]:
        """Build KPI lines from report statuses on the operation record."""
        if self.operation is None:
            return []

        lines: list[SalaryLine] = []
        for rule in self.rules:
            if not rule.is_automation:
                continue

            field = resolve_operation_field(rule.name)
            if field is None:
                continue

            applies = (
                role == SalaryRole.ACCOUNTANT and rule.role == RuleRole.ACCOUNTANT.value
            ) or (role == SalaryRole.BANK_MANAGER and field == OperationField.BANK_KLIENT)
            if not applies:
                continue

            multiplier = get_report_status_multiplier(self.operation.status_of(field.value))
            if multiplier == 0:
                continue

            if multiplier > 0:
                percent = abs(rule.reward_percent)
            else:
                percent = -abs(rule.penalty_percent)
            if percent == 0:
                continue

            lines.append(
                SalaryLineBuilder.create_kpi_line(
                    SalaryLineType.AUTOMATION_KPI,
                    percent,
                    self.contract,
                    f"{rule.name} ({field.value})",
                    rule.id,
                )
            )
        return lines


def calculate_company_salaries(
    company: CompanyRecord,
    operation: OperationRecord | None = None,
    performances: Iterable[PerformanceRecord] = (),
    rules: Sequence[EffectiveRule] = (),
) -> list[SalaryResult]:
    """Calculate the salary breakdown of every assigned role in a company."""
    return SalaryEngine(company, operation, performances, rules).calculate()


def compute_results_fingerprint(results: Iterable[SalaryResult], engine_version: str) -> str:
    """Deterministic fingerprint of a set of salary results."""
    data = {
        "engine_version": engine_version,
        "results": [
            {
                "role": r.role.value,
                "staff_id": r.staff_id,
                "company_id": r.company_id,
                "base_amount": str(r.base_amount),
                "final_amount": str(r.final_amount),
                "lines": [SalaryLineBuilder.compute_line_hash(line) for line in r.lines],
            }
            for r in results
        ],
    }
    json_str = json.dumps(data, sort_keys=True)
    return hashlib.sha256(json_str.encode()).hexdigest()[:32]
