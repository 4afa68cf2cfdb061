"""Payroll API endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from kpi_payroll.api.dependencies import SessionFactory
from kpi_payroll.api.schemas import (
    AccountantRollupResponse,
    CompanySalaryResponse,
    EmployeeSummaryResponse,
    ErrorResponse,
    PayrollReportResponse,
    SalaryLineResponse,
    SalaryResultResponse,
)
from kpi_payroll.calculators.periods import InvalidPeriodError, period_label
from kpi_payroll.calculators.types import SalaryResult
from kpi_payroll.services.errors import NotFoundError
from kpi_payroll.services.payroll_service import PayrollService

router = APIRouter(prefix="/payroll", tags=["payroll"])


def salary_result_response(result: SalaryResult) -> SalaryResultResponse:
    """Convert an engine result into its API shape."""
    return SalaryResultResponse(
        role=result.role.value,
        staff_id=result.staff_id,
        staff_name=result.staff_name,
        company_id=result.company_id,
        base_amount=result.base_amount,
        kpi_score=result.kpi_score,
        kpi_bonus=result.kpi_bonus,
        final_amount=result.final_amount,
        details=result.details,
        lines=[
            SalaryLineResponse(
                line_type=line.line_type.value,
                percent=line.percent,
                amount=line.amount,
                rule_id=line.rule_id,
                explanation=line.explanation,
            )
            for line in result.lines
        ],
    )


def _bad_period(e: InvalidPeriodError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=str(e),
    )


@router.get(
    "/{month}",
    response_model=PayrollReportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def get_payroll(
    factory: SessionFactory,
    month: Annotated[str, Path(description="Period, e.g. 2026-02")],
) -> PayrollReportResponse:
    """Employee payroll summaries for a month, plus the super-admin commission."""
    try:
        report = await PayrollService(factory).payroll_summaries(month)
    except InvalidPeriodError as e:
        raise _bad_period(e)

    return PayrollReportResponse(
        month=report.month,
        label=period_label(report.month),
        super_admin_commission=report.super_admin_commission,
        total_salary=report.total_salary,
        employees=[
            EmployeeSummaryResponse(
                employee_id=s.employee_id,
                employee_name=s.employee_name,
                employee_role=s.employee_role,
                company_count=s.company_count,
                base_salary=s.base_salary,
                kpi_bonus=s.kpi_bonus,
                kpi_penalty=s.kpi_penalty,
                adjustments=s.adjustments,
                total_salary=s.total_salary,
            )
            for s in report.summaries
        ],
    )


@router.get(
    "/{month}/rollup",
    response_model=list[AccountantRollupResponse],
    responses={400: {"model": ErrorResponse}},
)
async def get_accountant_rollup(
    factory: SessionFactory,
    month: Annotated[str, Path()],
) -> list[AccountantRollupResponse]:
    """Report progress per accountant."""
    try:
        rows = await PayrollService(factory).accountant_rollup(month)
    except InvalidPeriodError as e:
        raise _bad_period(e)
    return [AccountantRollupResponse.model_validate(r) for r in rows]


@router.get(
    "/{month}/companies/{company_id}",
    response_model=CompanySalaryResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_company_salaries(
    factory: SessionFactory,
    month: Annotated[str, Path()],
    company_id: Annotated[str, Path()],
) -> CompanySalaryResponse:
    """Salary breakdown of every role in one company."""
    try:
        breakdown = await PayrollService(factory).company_salaries(company_id, month)
    except InvalidPeriodError as e:
        raise _bad_period(e)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    return CompanySalaryResponse(
        company_id=breakdown.company.id,
        company_name=breakdown.company.name,
        month=breakdown.month,
        contract_amount=breakdown.company.contract_amount,
        fingerprint=breakdown.fingerprint,
        results=[salary_result_response(r) for r in breakdown.results],
    )
