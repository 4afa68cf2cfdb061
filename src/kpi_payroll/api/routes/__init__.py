"""API routes."""

from kpi_payroll.api.routes.adjustments import router as adjustments_router
from kpi_payroll.api.routes.health import router as health_router
from kpi_payroll.api.routes.kpi_rules import router as kpi_rules_router
from kpi_payroll.api.routes.payroll import router as payroll_router
from kpi_payroll.api.routes.performance import router as performance_router

__all__ = [
    "adjustments_router",
    "health_router",
    "kpi_rules_router",
    "payroll_router",
    "performance_router",
]
