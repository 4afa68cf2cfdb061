"""Seed script for the standard KPI rules.

Run with:
    python scripts/seed_kpi_rules.py

Creates the automation rules that read report statuses and the manual rules
supervisors mark by hand. Existing rules (matched by name) are left alone.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kpi_payroll.calculators.rule_fields import AutomationRule
from kpi_payroll.database import get_session
from kpi_payroll.models import KPIRule

ONE = Decimal("1.00")

# name, name_uz, role, category, reward, penalty
STANDARD_RULES: list[tuple[str, str, str, str, Decimal, Decimal]] = [
    (AutomationRule.ACC_1C_BASE.value, "1C baza", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_DIDOX.value, "Didox", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_LETTERS.value, "Xatlar", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_MY_MEHNAT.value, "My Mehnat", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_AUTO_CAMERAL.value, "Avtokameral", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_CASHFLOW.value, "Pul oqimlari", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_TAX_INFO.value, "Chiqadigan soliqlar", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_PAYROLL.value, "Hisoblangan oylik", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_DEBT.value, "Debitor/kreditor", "accountant", "automation", ONE, -ONE),
    (AutomationRule.ACC_PNL.value, "Foyda va zarar", "accountant", "automation", ONE, -ONE),
    (AutomationRule.BANK_KLIENT.value, "Bank klient", "bank_client", "automation", ONE, -ONE),
    ("acc_attendance", "Ishga kelish/ketish", "accountant", "manual", ONE, -ONE),
    ("acc_telegram_ok", "Telegram javob", "accountant", "manual", ONE, Decimal("0")),
    ("acc_telegram_missed", "Telegram javobsiz", "accountant", "manual", Decimal("0"), -ONE),
    ("bank_attendance", "Bank: ishga kelish", "bank_client", "manual", ONE, -ONE),
    ("bank_telegram_ok", "Bank: Telegram javob", "bank_client", "manual", ONE, Decimal("0")),
    ("bank_telegram_missed", "Bank: Telegram javobsiz", "bank_client", "manual", Decimal("0"), -ONE),
    ("supervisor_attendance", "Nazoratchi: ishga kelish", "supervisor", "manual", ONE, -ONE),
]


async def seed_rules(session: AsyncSession) -> int:
    """Create missing standard rules. Returns the number created."""
    result = await session.execute(select(KPIRule.name))
    existing = set(result.scalars().all())

    created = 0
    for order, (name, name_uz, role, category, reward, penalty) in enumerate(STANDARD_RULES):
        if name in existing:
            continue
        session.add(
            KPIRule(
                name=name,
                name_uz=name_uz,
                role=role,
                category=category,
                reward_percent=reward,
                penalty_percent=penalty,
                sort_order=order,
            )
        )
        created += 1
        print(f"Created rule {name}")

    await session.flush()
    return created


async def main() -> None:
    """Run all seed functions."""
    async with get_session() as session:
        created = await seed_rules(session)
    print(f"Seeding complete: {created} rule(s) created.")


if __name__ == "__main__":
    asyncio.run(main())
