"""Service health: database reachability and the KPI rule catalogue."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Response, status
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from kpi_payroll.api.dependencies import DbSession
from kpi_payroll.config import get_settings
from kpi_payroll.models import KPIRule

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class RuleCatalogue(BaseModel):
    """Active KPI rules by category."""

    automation: int = 0
    manual: int = 0


class HealthResponse(BaseModel):
    """Health of the payroll API."""

    status: str
    timestamp: datetime
    database: str
    engine_version: str
    kpi_rules: RuleCatalogue


async def _active_rule_counts(db: DbSession) -> RuleCatalogue:
    rows = await db.execute(
        select(KPIRule.category, func.count())
        .where(KPIRule.is_active.is_(True))
        .group_by(KPIRule.category)
    )
    return RuleCatalogue(**{category: count for category, count in rows.all()})


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(db: DbSession) -> HealthResponse:
    """Report database reachability and how many KPI rules drive the engine.

    With no active rules payroll still computes, but only base salaries, so
    the service reports itself as degraded.
    """
    catalogue = RuleCatalogue()
    database = "unreachable"
    try:
        catalogue = await _active_rule_counts(db)
        database = "healthy"
    except SQLAlchemyError:
        logger.warning("KPI rule catalogue query failed", exc_info=True)

    ok = database == "healthy" and (catalogue.automation + catalogue.manual) > 0
    return HealthResponse(
        status="healthy" if ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        database=database,
        engine_version=get_settings().engine_version,
        kpi_rules=catalogue,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(db: DbSession, response: Response) -> dict[str, str]:
    """Ready once the rule table can be read."""
    try:
        await _active_rule_counts(db)
    except SQLAlchemyError:
        logger.warning("Readiness check failed", exc_info=True)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {"status": "unavailable"}
    return {"status": "ready"}


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}
