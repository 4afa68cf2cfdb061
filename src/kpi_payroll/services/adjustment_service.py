"""Adjustment service - manual bonuses, penalties and advances."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kpi_payroll.calculators.periods import month_start
from kpi_payroll.models import PayrollAdjustment, Staff
from kpi_payroll.services.errors import NotFoundError

logger = logging.getLogger(__name__)

# Deductions are always stored negative, bonuses always positive.
NEGATIVE_TYPES = frozenset({"jarima", "avans"})
POSITIVE_TYPES = frozenset({"bonus"})
ADJUSTMENT_TYPES = frozenset({"bonus", "avans", "jarima", "manual", "other"})


def signed_amount(adjustment_type: str, amount: Decimal) -> Decimal:
    if adjustment_type in NEGATIVE_TYPES:
        return -abs(amount)
    if adjustment_type in POSITIVE_TYPES:
        return abs(amount)
    return amount


class AdjustmentService:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(
        self,
        month: str,
        employee_id: str,
        adjustment_type: str,
        amount: Decimal,
        reason: str = "",
        actor_id: str | None = None,
        approved: bool = True,
    ) -> PayrollAdjustment:
        """Record an adjustment for an employee and month."""
        if adjustment_type not in ADJUSTMENT_TYPES:
            raise ValueError(f"Unknown adjustment type: {adjustment_type!r}")
        if await self.session.get(Staff, employee_id) is None:
            raise NotFoundError("Staff", employee_id)

        now = datetime.now(timezone.utc)
        adjustment = PayrollAdjustment(
            month=month_start(month),
            employee_id=employee_id,
            adjustment_type=adjustment_type,
            amount=signed_amount(adjustment_type, Decimal(str(amount))),
            reason=reason,
            is_approved=approved,
            approved_by=actor_id if approved else None,
            approved_at=now if approved else None,
            created_by=actor_id,
        )
        self.session.add(adjustment)
        await self.session.flush()

        logger.info(
            "Adjustment %s of %s recorded for %s (%s)",
            adjustment_type,
            adjustment.amount,
            employee_id,
            month,
        )
        return adjustment

    async def list_for_month(self, month: str) -> list[PayrollAdjustment]:
        result = await self.session.execute(
            select(PayrollAdjustment)
            .where(PayrollAdjustment.month == month_start(month))
            .order_by(PayrollAdjustment.created_at)
        )
        return list(result.scalars().all())
