"""Monthly performance endpoints."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from kpi_payroll.api.dependencies import CurrentActor, DbSession
from kpi_payroll.api.schemas import (
    ErrorResponse,
    PerformanceResponse,
    PerformanceReviewRequest,
    PerformanceToggleRequest,
)
from kpi_payroll.calculators.periods import InvalidPeriodError
from kpi_payroll.models import MonthlyPerformance
from kpi_payroll.services.errors import NotFoundError
from kpi_payroll.services.performance_service import PerformanceService
from kpi_payroll.services.performance_state import (
    InvalidPerformanceTransitionError,
    PerformanceStateMachine,
    PermissionDeniedError,
)

router = APIRouter(prefix="/performance", tags=["performance"])


def performance_response(perf: MonthlyPerformance) -> PerformanceResponse:
    response = PerformanceResponse.model_validate(perf)
    response.next_statuses = PerformanceStateMachine.get_next_statuses(perf.status)
    return response


@router.post(
    "/toggle",
    response_model=PerformanceResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def toggle_performance(
    db: DbSession,
    actor: CurrentActor,
    payload: PerformanceToggleRequest,
) -> PerformanceResponse:
    """Cycle a manual KPI mark: none, reward, penalty, none."""
    service = PerformanceService(db)
    try:
        perf = await service.toggle(
            month=payload.month,
            company_id=payload.company_id,
            employee_id=payload.employee_id,
            rule_id=payload.rule_id,
            actor_id=actor.id,
            actor_role=actor.role,
            notes=payload.notes,
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
    return performance_response(perf)


@router.post(
    "/{performance_id}/review",
    response_model=PerformanceResponse,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def review_performance(
    db: DbSession,
    actor: CurrentActor,
    performance_id: Annotated[str, Path()],
    payload: PerformanceReviewRequest,
) -> PerformanceResponse:
    """Approve or reject a submitted mark."""
    service = PerformanceService(db)
    try:
        perf = await service.review(
            performance_id,
            payload.status,
            actor_id=actor.id,
            actor_role=actor.role,
            reason=payload.reason,
        )
    except NotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except PermissionDeniedError as e:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=str(e),
        )
    except InvalidPerformanceTransitionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    await db.commit()
    return performance_response(perf)
