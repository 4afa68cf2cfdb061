"""Salary line builder with deterministic hashing."""

from __future__ import annotations

import hashlib
import json
from decimal import ROUND_HALF_UP, Decimal

from kpi_payroll.calculators.types import SalaryLine, SalaryLineType


def _fmt(value: Decimal) -> str:
    """Format an amount with thousands separators and no trailing zeros."""
    normalized = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if normalized == normalized.to_integral_value():
        return f"{int(normalized):,}"
    return f"{normalized:,}"


def _fmt_percent(value: Decimal) -> str:
    return format(value.normalize(), "f")


class SalaryLineBuilder:
    """Builds salary lines with a readable explanation.

    Sign conventions:
    - BASE: positive amount, percent is the contract share (0 for fixed sums)
    - MANUAL_KPI / AUTOMATION_KPI: signed percent of the contract amount
    """

    OUTPUT_PRECISION = Decimal("0.01")

    @staticmethod
    def round_amount(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places."""
        return amount.quantize(SalaryLineBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def compute_line_hash(line: SalaryLine) -> str:
        """Compute deterministic hash for a salary line."""
        json_str = json.dumps(line.to_canonical_dict(), sort_keys=True)
        return hashlib.sha256(json_str.encode()).hexdigest()[:32]

    @staticmethod
    def create_fixed_base_line(amount: Decimal) -> SalaryLine:
        """Create a base line from a fixed sum."""
        return SalaryLine(
            line_type=SalaryLineType.BASE,
            amount=abs(amount),
            explanation=f"Fixed Sum: {_fmt(abs(amount))}",
        )

    @staticmethod
    def create_percent_base_line(contract: Decimal, percent: Decimal) -> SalaryLine:
        """Create a base line from a share of the contract amount."""
        return SalaryLine(
            line_type=SalaryLineType.BASE,
            percent=percent,
            amount=contract * percent / 100,
            explanation=f"Contract: {_fmt(contract)} * {_fmt_percent(percent)}%",
        )

    @staticmethod
    def create_kpi_line(
        line_type: SalaryLineType,
        percent: Decimal,
        contract: Decimal,
        label: str,
        rule_id: str | None = None,
    ) -> SalaryLine:
        """Create a KPI line carrying a signed percent of the contract."""
        sign = "+" if percent >= 0 else "-"
        prefix = "KPI" if line_type == SalaryLineType.MANUAL_KPI else "Auto"
        return SalaryLine(
            line_type=line_type,
            percent=percent,
            amount=contract * percent / 100,
            rule_id=rule_id,
            explanation=f"{prefix} {label}: {sign}{_fmt_percent(abs(percent))}%",
        )

    @staticmethod
    def sum_percent(lines: list[SalaryLine]) -> Decimal:
        """Sum the signed KPI percent of all non-base lines."""
        total = Decimal("0")
        for line in lines:
            if line.line_type != SalaryLineType.BASE:
                total += line.percent
        return total
