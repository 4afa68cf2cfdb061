"""Reporting period labels."""

from __future__ import annotations

import re
from datetime import date

MONTHS_UZ = [
    "Yanvar",
    "Fevral",
    "Mart",
    "Aprel",
    "May",
    "Iyun",
    "Iyul",
    "Avgust",
    "Sentyabr",
    "Oktyabr",
    "Noyabr",
    "Dekabr",
]

_MONTH_INDEX = {name.lower(): i for i, name in enumerate(MONTHS_UZ, start=1)}

_ISO_RE = re.compile(r"^(\d{4})-(\d{1,2})(?:-(\d{1,2}))?$")
_LABEL_RE = re.compile(r"^(\d{4})\s+([^\s]+)$")


class InvalidPeriodError(ValueError):
    """Raised when a period label cannot be parsed."""

    def __init__(self, label: str):
        self.label = label
        super().__init__(f"Unrecognized period: {label!r}")


def normalize_period(label: str | date) -> str:
    """Normalize a period label to ``YYYY-MM``.

    Accepts ``2026-02``, ``2026-02-01``, ``2026 Fevral`` and ``date`` objects.
    """
    if isinstance(label, date):
        return f"{label.year:04d}-{label.month:02d}"

    text = (label or "").strip()
    match = _ISO_RE.match(text)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
    else:
        match = _LABEL_RE.match(text)
        if not match or match.group(2).lower() not in _MONTH_INDEX:
            raise InvalidPeriodError(text)
        year, month = int(match.group(1)), _MONTH_INDEX[match.group(2).lower()]

    if not 1 <= month <= 12:
        raise InvalidPeriodError(text)
    return f"{year:04d}-{month:02d}"


def periods_equal(a: str | None, b: str | None) -> bool:
    """Compare two period labels irrespective of format."""
    if not a or not b:
        return False
    try:
        return normalize_period(a) == normalize_period(b)
    except InvalidPeriodError:
        return a.strip() == b.strip()


def month_start(period: str | date) -> date:
    """First day of the period's month."""
    year, month = normalize_period(period).split("-")
    return date(int(year), int(month), 1)


def period_label(period: str | date) -> str:
    """Human label in the dashboard's style, e.g. ``2026 Fevral``."""
    start = month_start(period)
    return f"{start.year} {MONTHS_UZ[start.month - 1]}"
