"""Business services."""

from kpi_payroll.services.adjustment_service import AdjustmentService
from kpi_payroll.services.errors import NotFoundError
from kpi_payroll.services.payroll_service import (
    CompanySalaryBreakdown,
    MonthData,
    PayrollReport,
    PayrollService,
)
from kpi_payroll.services.performance_service import PerformanceService
from kpi_payroll.services.performance_state import (
    InvalidPerformanceTransitionError,
    PerformanceStateMachine,
    PermissionDeniedError,
)

__all__ = [
    "AdjustmentService",
    "CompanySalaryBreakdown",
    "InvalidPerformanceTransitionError",
    "MonthData",
    "NotFoundError",
    "PayrollReport",
    "PayrollService",
    "PerformanceService",
    "PerformanceStateMachine",
    "PermissionDeniedError",
]
