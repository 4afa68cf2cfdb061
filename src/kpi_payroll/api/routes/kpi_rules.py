"""KPI rule endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, status
from sqlalchemy import select

from kpi_payroll.api.dependencies import DbSession, SessionFactory
from kpi_payroll.api.schemas import EffectiveRuleResponse, ErrorResponse, KPIRuleResponse
from kpi_payroll.models import KPIRule
from kpi_payroll.services.errors import NotFoundError
from kpi_payroll.services.payroll_service import PayrollService

router = APIRouter(prefix="/kpi-rules", tags=["kpi-rules"])


@router.get("", response_model=list[KPIRuleResponse])
async def list_kpi_rules(
    db: DbSession,
    role: str | None = None,
    active_only: Annotated[bool, Query()] = False,
) -> list[KPIRuleResponse]:
    """List global KPI rules."""
    query = select(KPIRule).order_by(KPIRule.sort_order, KPIRule.name)
    if role:
        query = query.where(KPIRule.role == role)
    if active_only:
        query = query.where(KPIRule.is_active.is_(True))

    result = await db.execute(query)
    return [KPIRuleResponse.model_validate(r) for r in result.scalars().all()]


@router.get(
    "/effective/{company_id}",
    response_model=list[EffectiveRuleResponse],
    responses={404: {"model": ErrorResponse}},
)
async def get_effective_rules(
    factory: SessionFactory,
    company_id: Annotated[str, Path()],
) -> list[EffectiveRuleResponse]:
    """Rule table of a company after merging its overrides."""
    try:
        rules = await PayrollService(factory).effective_rules(company_id)
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    return [EffectiveRuleResponse.model_validate(r) for r in rules]
