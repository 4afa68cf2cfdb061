"""Manual payroll adjustment model."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from kpi_payroll.calculators.summary import AdjustmentRecord
from kpi_payroll.models.base import Base, IdMixin, TimestampMixin


class PayrollAdjustment(Base, IdMixin, TimestampMixin):
    """Bonus, penalty or advance entered by hand for an employee and month."""

    __tablename__ = "payroll_adjustments"

    month: Mapped[date] = mapped_column(Date, nullable=False)
    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    adjustment_type: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_approved: Mapped[bool] = mapped_column(default=False, nullable=False)
    approved_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(nullable=True)
    created_by: Mapped[str | None] = mapped_column(String(36), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "adjustment_type IN ('bonus', 'avans', 'jarima', 'manual', 'other')",
            name="payroll_adjustments_type_check",
        ),
    )

    def to_record(self) -> AdjustmentRecord:
        return AdjustmentRecord(
            id=self.id,
            employee_id=self.employee_id,
            month=self.month.isoformat(),
            amount=self.amount,
            adjustment_type=self.adjustment_type,
            is_approved=self.is_approved,
            reason=self.reason,
        )
