"""KPI payroll command line interface.

Usage:
    python -m kpi_payroll.cli init-db
    python -m kpi_payroll.cli payroll --month 2026-02
    python -m kpi_payroll.cli payroll --month 2026-02 --company-id X
    python -m kpi_payroll.cli rollup --month 2026-02
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Awaitable
from typing import Any, Callable

from kpi_payroll.calculators.periods import InvalidPeriodError, normalize_period, period_label
from kpi_payroll.config import get_settings
from kpi_payroll.database import dispose_db, init_db
from kpi_payroll.models import Base
from kpi_payroll.services.errors import NotFoundError
from kpi_payroll.services.payroll_service import PayrollService

logger = logging.getLogger(__name__)


def parse_month(s: str) -> str:
    """Parse a period label for argparse."""
    try:
        return normalize_period(s)
    except InvalidPeriodError as e:
        raise argparse.ArgumentTypeError(str(e))


class PayrollCli:
    """KPI payroll command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="python -m kpi_payroll.cli",
            description="KPI payroll tools",
        )
        parser.add_argument(
            "--database-url",
            type=str,
            help="Database URL (default: $DATABASE_URL)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        subparsers.add_parser("init-db", help="Create database tables")

        payroll = subparsers.add_parser(
            "payroll",
            help="Print payroll summaries for a month",
        )
        payroll.add_argument(
            "--month",
            type=parse_month,
            required=True,
            help="Period, e.g. 2026-02 or '2026 Fevral'",
        )
        payroll.add_argument(
            "--company-id",
            type=str,
            help="Print the per-role breakdown of one company instead",
        )

        rollup = subparsers.add_parser(
            "rollup",
            help="Print report progress per accountant",
        )
        rollup.add_argument(
            "--month",
            type=parse_month,
            required=True,
            help="Period, e.g. 2026-02",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 1

        logging.basicConfig(
            level=get_settings().log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        handlers: dict[str, Callable[..., Awaitable[int]]] = {
            "init-db": self._cmd_init_db,
            "payroll": self._cmd_payroll,
            "rollup": self._cmd_rollup,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return 1

        return asyncio.run(self._with_db(parsed, handler))

    async def _with_db(
        self, args: argparse.Namespace, handler: Callable[..., Awaitable[int]]
    ) -> int:
        init_db(args.database_url)
        try:
            return await handler(args)
        finally:
            await dispose_db()

    async def _cmd_init_db(self, args: argparse.Namespace) -> int:
        """Create all tables."""
        engine, _ = init_db()
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        print("Tables created.")
        return 0

    async def _cmd_payroll(self, args: argparse.Namespace) -> int:
        """Print payroll for a month, or one company's breakdown."""
        _, factory = init_db()
        service = PayrollService(factory)

        if args.company_id:
            try:
                breakdown = await service.company_salaries(args.company_id, args.month)
            except NotFoundError as e:
                print(str(e), file=sys.stderr)
                return 1
            _dump({
                "company_id": breakdown.company.id,
                "company_name": breakdown.company.name,
                "month": breakdown.month,
                "fingerprint": breakdown.fingerprint,
                "results": [
                    {
                        "role": r.role.value,
                        "staff_id": r.staff_id,
                        "staff_name": r.staff_name,
                        "base_amount": r.base_amount,
                        "kpi_score": r.kpi_score,
                        "kpi_bonus": r.kpi_bonus,
                        "final_amount": r.final_amount,
                        "details": r.details,
                    }
                    for r in breakdown.results
                ],
            })
            return 0

        report = await service.payroll_summaries(args.month)
        _dump({
            "month": report.month,
            "label": period_label(report.month),
            "super_admin_commission": report.super_admin_commission,
            "total_salary": report.total_salary,
            "employees": [
                {
                    "employee_id": s.employee_id,
                    "employee_name": s.employee_name,
                    "company_count": s.company_count,
                    "base_salary": s.base_salary,
                    "kpi_bonus": s.kpi_bonus,
                    "kpi_penalty": s.kpi_penalty,
                    "adjustments": s.adjustments,
                    "total_salary": s.total_salary,
                }
                for s in report.summaries
            ],
        })
        return 0

    async def _cmd_rollup(self, args: argparse.Namespace) -> int:
        """Print report progress per accountant."""
        _, factory = init_db()
        rows = await PayrollService(factory).accountant_rollup(args.month)
        _dump([
            {
                "employee_id": r.employee_id,
                "name": r.name,
                "total_companies": r.total_companies,
                "annual_completed": r.annual_completed,
                "annual_pending": r.annual_pending,
                "annual_blocked": r.annual_blocked,
                "annual_progress": r.annual_progress,
                "stats_progress": r.stats_progress,
                "zone": r.zone,
            }
            for r in rows
        ])
        return 0


def _dump(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def main() -> int:
    """CLI entry point."""
    cli = PayrollCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
