"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Salary schemas
# ============================================================================


class SalaryLineResponse(BaseModel):
    """One contributing line of a salary result."""

    model_config = ConfigDict(from_attributes=True)

    line_type: str
    percent: Decimal
    amount: Decimal
    rule_id: str | None = None
    explanation: str


class SalaryResultResponse(BaseModel):
    """Salary breakdown of one role in one company."""

    model_config = ConfigDict(from_attributes=True)

    role: str
    staff_id: str | None = None
    staff_name: str
    company_id: str
    base_amount: Decimal
    kpi_score: Decimal
    kpi_bonus: Decimal
    final_amount: Decimal
    details: list[str]
    lines: list[SalaryLineResponse]


class CompanySalaryResponse(BaseModel):
    """All salary results of a company for a month."""

    company_id: str
    company_name: str
    month: str
    contract_amount: Decimal | None = None
    fingerprint: str
    results: list[SalaryResultResponse]


class EmployeeSummaryResponse(BaseModel):
    """Payroll summary of one employee."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    employee_name: str
    employee_role: str
    company_count: int
    base_salary: Decimal
    kpi_bonus: Decimal
    kpi_penalty: Decimal
    adjustments: Decimal
    total_salary: Decimal


class PayrollReportResponse(BaseModel):
    """Payroll of all employees for a month."""

    month: str
    label: str
    super_admin_commission: Decimal
    total_salary: Decimal
    employees: list[EmployeeSummaryResponse]


class AccountantRollupResponse(BaseModel):
    """Report progress of one accountant."""

    model_config = ConfigDict(from_attributes=True)

    employee_id: str
    name: str
    total_companies: int
    annual_completed: int
    annual_pending: int
    annual_blocked: int
    stats_completed: int
    annual_progress: int
    stats_progress: int
    zone: str


# ============================================================================
# KPI rule schemas
# ============================================================================


class KPIRuleResponse(BaseModel):
    """Global KPI rule."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    name_uz: str | None = None
    name_ru: str | None = None
    role: str
    category: str
    reward_percent: Decimal
    penalty_percent: Decimal
    input_type: str
    is_active: bool
    sort_order: int


class EffectiveRuleResponse(BaseModel):
    """Rule after applying company overrides."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    role: str
    category: str
    reward_percent: Decimal
    penalty_percent: Decimal
    is_active: bool
    overridden: bool


# ============================================================================
# Performance schemas
# ============================================================================


class PerformanceToggleRequest(BaseModel):
    """Request to cycle a manual KPI mark."""

    month: str = Field(..., description="Period, e.g. 2026-02")
    company_id: str
    employee_id: str
    rule_id: str
    notes: str | None = None


class PerformanceReviewRequest(BaseModel):
    """Request to approve or reject a mark."""

    status: Literal["approved", "rejected"]
    reason: str | None = None


class PerformanceResponse(BaseModel):
    """Monthly performance row."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    month: date
    company_id: str
    employee_id: str
    rule_id: str
    value: int
    calculated_score: Decimal
    status: str | None = None
    source: str | None = None
    rule_role: str | None = None
    notes: str | None = None
    change_reason: str | None = None
    recorded_by: str | None = None
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    next_statuses: list[str] = []


# ============================================================================
# Adjustment schemas
# ============================================================================


class AdjustmentCreate(BaseModel):
    """Schema for recording a payroll adjustment."""

    month: str
    employee_id: str
    adjustment_type: Literal["bonus", "avans", "jarima", "manual", "other"]
    amount: Decimal
    reason: str = ""
    is_approved: bool = True


class AdjustmentResponse(BaseModel):
    """Payroll adjustment."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    month: date
    employee_id: str
    adjustment_type: str
    amount: Decimal
    reason: str
    is_approved: bool


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
