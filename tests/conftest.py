"""Pytest fixtures for KPI payroll tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from kpi_payroll.models import (
    Base,
    Company,
    CompanyKPIRule,
    KPIRule,
    OperationEntry,
    Staff,
)


@pytest.fixture
async def engine(tmp_path):
    """Create a test database engine.

    A file-backed SQLite database lets concurrent sessions see the same data.
    """
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'kpi_payroll.db'}",
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def seeded(session_factory) -> dict[str, str]:
    """Seed one company with an accountant, a bank manager and a supervisor.

    Returns the ids of the created records.
    """
    async with session_factory() as session:
        accountant = Staff(full_name="Aziza Karimova", role="accountant")
        banker = Staff(full_name="Bekzod Aliyev", role="bank_client")
        supervisor = Staff(full_name="Sardor Rahimov", role="supervisor")
        session.add_all([accountant, banker, supervisor])
        await session.flush()

        company = Company(
            name="Alpha LLC",
            inn="301234567",
            contract_amount=Decimal("1000000"),
            accountant_id=accountant.id,
            accountant_name=accountant.full_name,
            accountant_perc=Decimal("20"),
            bank_client_id=banker.id,
            bank_client_name=banker.full_name,
            bank_client_sum=Decimal("150000"),
            supervisor_id=supervisor.id,
            supervisor_name=supervisor.full_name,
            supervisor_perc=Decimal("2.5"),
        )
        session.add(company)
        await session.flush()

        manual_rule = KPIRule(
            name="acc_attendance",
            name_uz="Ishga kelish/ketish",
            role="accountant",
            category="manual",
            reward_percent=Decimal("5"),
            penalty_percent=Decimal("-10"),
            sort_order=1,
        )
        didox_rule = KPIRule(
            name="acc_didox",
            role="accountant",
            category="automation",
            reward_percent=Decimal("2"),
            penalty_percent=Decimal("-1"),
            sort_order=2,
        )
        bank_rule = KPIRule(
            name="bank_klient",
            role="bank_client",
            category="automation",
            reward_percent=Decimal("1"),
            penalty_percent=Decimal("-1"),
            sort_order=3,
        )
        session.add_all([manual_rule, didox_rule, bank_rule])
        await session.flush()

        session.add(
            CompanyKPIRule(
                company_id=company.id,
                rule_id=didox_rule.id,
                reward_percent=Decimal("3"),
            )
        )
        session.add(
            OperationEntry(
                company_id=company.id,
                period="2026-02",
                didox="+",
                bank_klient="-",
                profit_tax_status="+",
                stats_status="+",
            )
        )
        await session.commit()

        return {
            "accountant_id": accountant.id,
            "banker_id": banker.id,
            "supervisor_id": supervisor.id,
            "company_id": company.id,
            "manual_rule_id": manual_rule.id,
            "didox_rule_id": didox_rule.id,
            "bank_rule_id": bank_rule.id,
        }
