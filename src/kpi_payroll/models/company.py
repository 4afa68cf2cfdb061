"""Company, staff and monthly operation models."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from kpi_payroll.calculators.rule_fields import OperationField
from kpi_payroll.calculators.summary import StaffRecord
from kpi_payroll.calculators.types import CompanyRecord, OperationRecord
from kpi_payroll.models.base import Base, IdMixin, TimestampMixin


class Staff(Base, IdMixin, TimestampMixin):
    """Firm employee profile."""

    __tablename__ = "profiles"

    full_name: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False, default="accountant")
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    def to_record(self) -> StaffRecord:
        return StaffRecord(
            id=self.id,
            name=self.full_name,
            role=self.role,
            is_active=self.is_active,
        )


class Company(Base, IdMixin, TimestampMixin):
    """Client company with contract terms and role assignments."""

    __tablename__ = "companies"

    name: Mapped[str] = mapped_column(String, nullable=False)
    inn: Mapped[str | None] = mapped_column(String, nullable=True, unique=True)
    contract_amount: Mapped[Decimal | None] = mapped_column(nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    accountant_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    accountant_name: Mapped[str | None] = mapped_column(String, nullable=True)
    accountant_perc: Mapped[Decimal | None] = mapped_column(nullable=True)

    bank_client_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    bank_client_name: Mapped[str | None] = mapped_column(String, nullable=True)
    bank_client_perc: Mapped[Decimal | None] = mapped_column(nullable=True)
    bank_client_sum: Mapped[Decimal | None] = mapped_column(nullable=True)

    supervisor_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    supervisor_name: Mapped[str | None] = mapped_column(String, nullable=True)
    supervisor_perc: Mapped[Decimal | None] = mapped_column(nullable=True)

    chief_accountant_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    chief_accountant_name: Mapped[str | None] = mapped_column(String, nullable=True)
    chief_accountant_perc: Mapped[Decimal | None] = mapped_column(nullable=True)
    chief_accountant_sum: Mapped[Decimal | None] = mapped_column(nullable=True)

    def to_record(self) -> CompanyRecord:
        return CompanyRecord(
            id=self.id,
            name=self.name,
            inn=self.inn,
            contract_amount=self.contract_amount,
            is_active=self.is_active,
            accountant_id=self.accountant_id,
            accountant_name=self.accountant_name,
            accountant_perc=self.accountant_perc,
            bank_client_id=self.bank_client_id,
            bank_client_name=self.bank_client_name,
            bank_client_perc=self.bank_client_perc,
            bank_client_sum=self.bank_client_sum,
            supervisor_id=self.supervisor_id,
            supervisor_name=self.supervisor_name,
            supervisor_perc=self.supervisor_perc,
            chief_accountant_id=self.chief_accountant_id,
            chief_accountant_name=self.chief_accountant_name,
            chief_accountant_perc=self.chief_accountant_perc,
            chief_accountant_sum=self.chief_accountant_sum,
        )


class OperationEntry(Base, IdMixin, TimestampMixin):
    """Report statuses of one company for one period."""

    __tablename__ = "operations"

    company_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False
    )
    period: Mapped[str] = mapped_column(String(7), nullable=False)

    bank_klient: Mapped[str | None] = mapped_column(String, nullable=True)
    didox: Mapped[str | None] = mapped_column(String, nullable=True)
    xatlar: Mapped[str | None] = mapped_column(String, nullable=True)
    avtokameral: Mapped[str | None] = mapped_column(String, nullable=True)
    my_mehnat: Mapped[str | None] = mapped_column(String, nullable=True)
    one_c: Mapped[str | None] = mapped_column(String, nullable=True)
    pul_oqimlari: Mapped[str | None] = mapped_column(String, nullable=True)
    chiqadigan_soliqlar: Mapped[str | None] = mapped_column(String, nullable=True)
    hisoblangan_oylik: Mapped[str | None] = mapped_column(String, nullable=True)
    debitor_kreditor: Mapped[str | None] = mapped_column(String, nullable=True)
    foyda_va_zarar: Mapped[str | None] = mapped_column(String, nullable=True)
    tovar_ostatka: Mapped[str | None] = mapped_column(String, nullable=True)
    nds_bekor_qilish: Mapped[str | None] = mapped_column(String, nullable=True)
    aylanma_qqs: Mapped[str | None] = mapped_column(String, nullable=True)
    daromad_soliq: Mapped[str | None] = mapped_column(String, nullable=True)
    inps: Mapped[str | None] = mapped_column(String, nullable=True)
    foyda_soliq: Mapped[str | None] = mapped_column(String, nullable=True)
    moliyaviy_natija: Mapped[str | None] = mapped_column(String, nullable=True)
    buxgalteriya_balansi: Mapped[str | None] = mapped_column(String, nullable=True)
    statistika: Mapped[str | None] = mapped_column(String, nullable=True)
    bonak: Mapped[str | None] = mapped_column(String, nullable=True)
    yer_soligi: Mapped[str | None] = mapped_column(String, nullable=True)
    mol_mulk_soligi: Mapped[str | None] = mapped_column(String, nullable=True)
    suv_soligi: Mapped[str | None] = mapped_column(String, nullable=True)

    # Legacy summary columns used by the report rollup
    profit_tax_status: Mapped[str | None] = mapped_column(String, nullable=True)
    stats_status: Mapped[str | None] = mapped_column(String, nullable=True)

    assigned_accountant_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    assigned_accountant_name: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_bank_manager_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    assigned_bank_manager_name: Mapped[str | None] = mapped_column(String, nullable=True)
    assigned_supervisor_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    assigned_supervisor_name: Mapped[str | None] = mapped_column(String, nullable=True)

    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("company_id", "period", name="operations_company_period_unique"),
    )

    def to_record(self) -> OperationRecord:
        return OperationRecord(
            company_id=self.company_id,
            period=self.period,
            statuses={f.value: getattr(self, f.value) for f in OperationField},
            assigned_accountant_id=self.assigned_accountant_id,
            assigned_accountant_name=self.assigned_accountant_name,
            assigned_bank_manager_id=self.assigned_bank_manager_id,
            assigned_bank_manager_name=self.assigned_bank_manager_name,
            assigned_supervisor_id=self.assigned_supervisor_id,
            assigned_supervisor_name=self.assigned_supervisor_name,
            profit_tax_status=self.profit_tax_status,
            stats_status=self.stats_status,
        )
