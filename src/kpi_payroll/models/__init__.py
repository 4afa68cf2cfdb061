"""ORM models."""

from kpi_payroll.models.base import Base, IdMixin, TimestampMixin, new_id
from kpi_payroll.models.company import Company, OperationEntry, Staff
from kpi_payroll.models.kpi import CompanyKPIRule, KPIRule, MonthlyPerformance
from kpi_payroll.models.payroll import PayrollAdjustment

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "new_id",
    "Company",
    "OperationEntry",
    "Staff",
    "CompanyKPIRule",
    "KPIRule",
    "MonthlyPerformance",
    "PayrollAdjustment",
]
