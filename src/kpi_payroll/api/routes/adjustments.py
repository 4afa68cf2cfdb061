"""Payroll adjustment endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from kpi_payroll.api.dependencies import CurrentActor, DbSession
from kpi_payroll.api.schemas import AdjustmentCreate, AdjustmentResponse, ErrorResponse
from kpi_payroll.calculators.periods import InvalidPeriodError
from kpi_payroll.services.adjustment_service import AdjustmentService
from kpi_payroll.services.errors import NotFoundError

router = APIRouter(prefix="/adjustments", tags=["adjustments"])


@router.get(
    "/{month}",
    response_model=list[AdjustmentResponse],
    responses={400: {"model": ErrorResponse}},
)
async def list_adjustments(
    db: DbSession,
    month: Annotated[str, Path()],
) -> list[AdjustmentResponse]:
    """List adjustments recorded for a month."""
    try:
        adjustments = await AdjustmentService(db).list_for_month(month)
    except InvalidPeriodError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return [AdjustmentResponse.model_validate(a) for a in adjustments]


@router.post(
    "",
    response_model=AdjustmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_adjustment(
    db: DbSession,
    actor: CurrentActor,
    payload: AdjustmentCreate,
) -> AdjustmentResponse:
    """Record a bonus, penalty or advance for an employee."""
    try:
        adjustment = await AdjustmentService(db).add(
            month=payload.month,
            employee_id=payload.employee_id,
            adjustment_type=payload.adjustment_type,
            amount=payload.amount,
            reason=payload.reason,
            actor_id=actor.id,
            approved=payload.is_approved,
        )
    except InvalidPeriodError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    await db.commit()
    return AdjustmentResponse.model_validate(adjustment)
