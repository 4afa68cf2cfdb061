"""KPI rule and monthly performance models."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from kpi_payroll.calculators.types import (
    CompanyRuleOverride,
    KPIRuleRecord,
    PerformanceRecord,
)
from kpi_payroll.models.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from kpi_payroll.models.company import Company


class KPIRule(Base, IdMixin, TimestampMixin):
    """Global KPI scoring rule."""

    __tablename__ = "kpi_rules"

    name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    name_uz: Mapped[str | None] = mapped_column(String, nullable=True)
    name_ru: Mapped[str | None] = mapped_column(String, nullable=True)
    role: Mapped[str] = mapped_column(String, nullable=False, default="all")
    category: Mapped[str] = mapped_column(String, nullable=False, default="manual")
    reward_percent: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    penalty_percent: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    input_type: Mapped[str] = mapped_column(String, nullable=False, default="checkbox")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint(
            "role IN ('accountant', 'bank_client', 'supervisor', 'chief_accountant', 'all')",
            name="kpi_rules_role_check",
        ),
        CheckConstraint(
            "category IN ('automation', 'manual')",
            name="kpi_rules_category_check",
        ),
    )

    overrides: Mapped[list[CompanyKPIRule]] = relationship(back_populates="rule")

    def to_record(self) -> KPIRuleRecord:
        return KPIRuleRecord(
            id=self.id,
            name=self.name,
            role=self.role,
            category=self.category,
            reward_percent=self.reward_percent,
            penalty_percent=self.penalty_percent,
            name_uz=self.name_uz,
            name_ru=self.name_ru,
            input_type=self.input_type,
            is_active=self.is_active,
            sort_order=self.sort_order,
        )


class CompanyKPIRule(Base, IdMixin, TimestampMixin):
    """Company-specific override of a rule's reward/penalty percentages."""

    __tablename__ = "company_kpi_rules"

    company_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    rule_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("kpi_rules.id", ondelete="CASCADE"), nullable=False
    )
    reward_percent: Mapped[Decimal | None] = mapped_column(nullable=True)
    penalty_percent: Mapped[Decimal | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "rule_id", name="company_kpi_rules_unique"),
    )

    rule: Mapped[KPIRule] = relationship(back_populates="overrides")
    company: Mapped[Company] = relationship()

    def to_record(self) -> CompanyRuleOverride:
        return CompanyRuleOverride(
            company_id=self.company_id,
            rule_id=self.rule_id,
            reward_percent=self.reward_percent,
            penalty_percent=self.penalty_percent,
        )


class MonthlyPerformance(Base, IdMixin):
    """Manual KPI mark for one (month, company, employee, rule)."""

    __tablename__ = "monthly_performance"

    month: Mapped[date] = mapped_column(Date, nullable=False)
    company_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    employee_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    rule_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("kpi_rules.id", ondelete="CASCADE"), nullable=False
    )
    value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    reward_percent_override: Mapped[Decimal | None] = mapped_column(nullable=True)
    penalty_percent_override: Mapped[Decimal | None] = mapped_column(nullable=True)
    calculated_score: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    status: Mapped[str | None] = mapped_column(String, nullable=True)
    source: Mapped[str | None] = mapped_column(String, nullable=True)
    rule_role: Mapped[str | None] = mapped_column(String, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    change_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    recorded_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    recorded_at: Mapped[datetime | None] = mapped_column(nullable=True)
    reviewed_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "month", "company_id", "employee_id", "rule_id",
            name="monthly_performance_triple_unique",
        ),
        CheckConstraint("value IN (-1, 0, 1)", name="monthly_performance_value_check"),
        CheckConstraint(
            "status IS NULL OR status IN ('submitted', 'approved', 'rejected')",
            name="monthly_performance_status_check",
        ),
    )

    def to_record(self) -> PerformanceRecord:
        return PerformanceRecord(
            id=self.id,
            month=self.month.isoformat() if self.month else "",
            company_id=self.company_id,
            employee_id=self.employee_id,
            rule_id=self.rule_id,
            value=self.value,
            status=self.status,
            source=self.source,
            rule_role=self.rule_role,
            reward_percent_override=self.reward_percent_override,
            penalty_percent_override=self.penalty_percent_override,
        )
