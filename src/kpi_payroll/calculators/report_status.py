"""Report status codes and their KPI multipliers."""

from __future__ import annotations

REWARD_STATUSES = frozenset({"+", "accepted", "topshirildi", "submitted"})

PENALTY_STATUSES = frozenset({
    "-",
    "not_submitted",
    "rejected",
    "rad etildi",
    "error",
    "oshibka",
    "blocked",
    "kartoteka",
})

BLOCKED_STATUSES = frozenset({"blocked", "kartoteka"})

COMPLETED_STATUSES = frozenset({"+", "accepted", "0", "not_required"})


def normalize_status(status: str | None) -> str:
    """Lower-case and trim a raw status string."""
    if not status:
        return ""
    return str(status).strip().lower()


def get_report_status_multiplier(status: str | None) -> int:
    """Convert a report status to a KPI multiplier.

    Returns +1 for reward statuses, -1 for penalty statuses and 0 for
    anything else, including empty or unknown values.
    """
    normalized = normalize_status(status)
    if normalized in REWARD_STATUSES:
        return 1
    if normalized in PENALTY_STATUSES:
        return -1
    return 0


def is_blocked(status: str | None) -> bool:
    return normalize_status(status) in BLOCKED_STATUSES


def is_completed(status: str | None) -> bool:
    return normalize_status(status) in COMPLETED_STATUSES
