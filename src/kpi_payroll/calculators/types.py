"""Type definitions for the salary calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any


class SalaryRole(str, Enum):
    """Payroll roles a company can assign."""

    ACCOUNTANT = "accountant"
    BANK_MANAGER = "bank_manager"
    CHIEF_ACCOUNTANT = "chief_accountant"
    SUPERVISOR = "supervisor"


class RuleRole(str, Enum):
    """Role a KPI rule targets."""

    ACCOUNTANT = "accountant"
    BANK_CLIENT = "bank_client"
    SUPERVISOR = "supervisor"
    CHIEF_ACCOUNTANT = "chief_accountant"
    ALL = "all"


class RuleCategory(str, Enum):
    """Where a KPI rule's value comes from."""

    AUTOMATION = "automation"
    MANUAL = "manual"


class PerformanceStatus(str, Enum):
    """Review status of a monthly performance row."""

    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class PerformanceSource(str, Enum):
    """Who recorded a monthly performance row."""

    EMPLOYEE = "employee"
    SUPERVISOR = "supervisor"
    CHIEF = "chief"


class SalaryLineType(str, Enum):
    """Salary line item types."""

    BASE = "BASE"
    MANUAL_KPI = "MANUAL_KPI"
    AUTOMATION_KPI = "AUTOMATION_KPI"


# Rule roles that map onto each salary role when filtering manual KPI rows.
ROLE_MATCHES: dict[SalaryRole, frozenset[str]] = {
    SalaryRole.ACCOUNTANT: frozenset({RuleRole.ACCOUNTANT.value}),
    SalaryRole.BANK_MANAGER: frozenset({RuleRole.BANK_CLIENT.value, SalaryRole.BANK_MANAGER.value}),
    SalaryRole.SUPERVISOR: frozenset({RuleRole.SUPERVISOR.value}),
    SalaryRole.CHIEF_ACCOUNTANT: frozenset({RuleRole.CHIEF_ACCOUNTANT.value}),
}


@dataclass(frozen=True)
class CompanyRecord:
    """Company contract terms and role assignments."""

    id: str
    name: str = ""
    inn: str | None = None
    contract_amount: Decimal | None = None
    is_active: bool = True

    accountant_id: str | None = None
    accountant_name: str | None = None
    accountant_perc: Decimal | None = None

    bank_client_id: str | None = None
    bank_client_name: str | None = None
    bank_client_perc: Decimal | None = None
    bank_client_sum: Decimal | None = None

    supervisor_id: str | None = None
    supervisor_name: str | None = None
    supervisor_perc: Decimal | None = None

    chief_accountant_id: str | None = None
    chief_accountant_name: str | None = None
    chief_accountant_perc: Decimal | None = None
    chief_accountant_sum: Decimal | None = None


@dataclass(frozen=True)
class OperationRecord:
    """Report statuses of one company for one period."""

    company_id: str
    period: str
    statuses: dict[str, str | None] = field(default_factory=dict)

    assigned_accountant_id: str | None = None
    assigned_accountant_name: str | None = None
    assigned_bank_manager_id: str | None = None
    assigned_bank_manager_name: str | None = None
    assigned_supervisor_id: str | None = None
    assigned_supervisor_name: str | None = None

    profit_tax_status: str | None = None
    stats_status: str | None = None

    def status_of(self, field_name: str) -> str:
        """Return the raw status string of a report field ('' when unset)."""
        return self.statuses.get(field_name) or ""


@dataclass(frozen=True)
class PerformanceRecord:
    """A manual KPI mark for one employee, company, rule and month."""

    company_id: str
    employee_id: str
    rule_id: str
    value: int
    month: str = ""
    id: str | None = None
    status: str | None = None
    source: str | None = None
    rule_role: str | None = None
    reward_percent_override: Decimal | None = None
    penalty_percent_override: Decimal | None = None

    @property
    def counts_for_payroll(self) -> bool:
        """Approved rows and legacy rows without a status count."""
        return self.status is None or self.status == PerformanceStatus.APPROVED.value


@dataclass(frozen=True)
class KPIRuleRecord:
    """Global KPI rule as stored."""

    id: str
    name: str
    role: str
    category: str
    reward_percent: Decimal = Decimal("0")
    penalty_percent: Decimal = Decimal("0")
    name_uz: str | None = None
    name_ru: str | None = None
    input_type: str = "checkbox"
    is_active: bool = True
    sort_order: int = 0


@dataclass(frozen=True)
class CompanyRuleOverride:
    """Company-specific reward/penalty override for a rule."""

    company_id: str
    rule_id: str
    reward_percent: Decimal | None = None
    penalty_percent: Decimal | None = None


@dataclass(frozen=True)
class EffectiveRule:
    """A KPI rule after applying any company-specific override."""

    id: str
    name: str
    role: str
    category: str
    reward_percent: Decimal
    penalty_percent: Decimal
    is_active: bool = True
    overridden: bool = False

    @property
    def is_automation(self) -> bool:
        return self.category == RuleCategory.AUTOMATION.value


@dataclass
class SalaryLine:
    """One contributing line of a salary calculation."""

    line_type: SalaryLineType
    percent: Decimal = Decimal("0")
    amount: Decimal = Decimal("0")
    rule_id: str | None = None
    explanation: str = ""

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (deterministic ordering)."""
        return {
            "line_type": self.line_type.value,
            "percent": str(self.percent),
            "amount": str(self.amount),
            "rule_id": self.rule_id,
        }


@dataclass
class SalaryResult:
    """Salary breakdown of one role in one company."""

    role: SalaryRole
    staff_id: str | None
    staff_name: str
    company_id: str
    base_amount: Decimal
    kpi_score: Decimal  # signed percent of contract
    kpi_bonus: Decimal
    final_amount: Decimal
    lines: list[SalaryLine] = field(default_factory=list)

    @property
    def details(self) -> list[str]:
        """Human-readable audit trail of every contributing line."""
        return [line.explanation for line in self.lines]

    @property
    def adjustment(self) -> Decimal:
        """Difference between the final and base amounts."""
        return self.final_amount - self.base_amount
