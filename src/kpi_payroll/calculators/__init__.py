"""KPI salary calculation."""

from kpi_payroll.calculators.engine import SalaryEngine, calculate_company_salaries
from kpi_payroll.calculators.line_builder import SalaryLineBuilder
from kpi_payroll.calculators.report_status import get_report_status_multiplier
from kpi_payroll.calculators.rule_merger import merge_company_rules
from kpi_payroll.calculators.summary import build_payroll_summaries, super_admin_commission

__all__ = [
    "SalaryEngine",
    "calculate_company_salaries",
    "SalaryLineBuilder",
    "get_report_status_multiplier",
    "merge_company_rules",
    "build_payroll_summaries",
    "super_admin_commission",
]
