"""Monthly performance toggle cycle and review state machine."""

from __future__ import annotations

from decimal import Decimal

from kpi_payroll.calculators.types import PerformanceSource, PerformanceStatus


class InvalidPerformanceTransitionError(Exception):
    """Raised when an invalid review transition is attempted."""

    def __init__(self, from_status: str | None, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class PermissionDeniedError(Exception):
    """Raised when an actor may not perform a review action."""

    def __init__(self, actor_role: str | None, action: str):
        self.actor_role = actor_role
        self.action = action
        super().__init__(f"Role '{actor_role}' may not {action}")


# Cycle: 0 -> 1 -> -1 -> 0
TOGGLE_CYCLE: dict[int, int] = {0: 1, 1: -1, -1: 0}

REVIEWER_ROLES = frozenset({"supervisor", "super_admin"})

SOURCE_BY_ROLE: dict[str, PerformanceSource] = {
    "supervisor": PerformanceSource.SUPERVISOR,
    "super_admin": PerformanceSource.CHIEF,
}


def next_toggle_value(current: int | None) -> int:
    """Next value in the reward/penalty/none cycle."""
    return TOGGLE_CYCLE.get(current or 0, 0)


def source_for_role(actor_role: str | None) -> PerformanceSource:
    """Map the acting user's role to the performance source."""
    return SOURCE_BY_ROLE.get(actor_role or "", PerformanceSource.EMPLOYEE)


def calculated_score(
    value: int, reward_percent: Decimal | None, penalty_percent: Decimal | None
) -> Decimal:
    """Percent contribution of a mark: +reward, -|penalty| or zero."""
    if value == 1:
        return reward_percent or Decimal("0")
    if value == -1:
        return -abs(penalty_percent or Decimal("0"))
    return Decimal("0")


class PerformanceStateMachine:
    """Review status transitions for monthly performance rows.

    Allowed transitions:
    - submitted → approved
    - submitted → rejected
    - rejected → submitted (resubmission)
    - approved → submitted (re-opened by a new toggle)

    Legacy rows without a status are treated as approved.
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        PerformanceStatus.SUBMITTED.value: [
            PerformanceStatus.APPROVED.value,
            PerformanceStatus.REJECTED.value,
        ],
        PerformanceStatus.REJECTED.value: [PerformanceStatus.SUBMITTED.value],
        PerformanceStatus.APPROVED.value: [PerformanceStatus.SUBMITTED.value],
    }

    @staticmethod
    def effective_status(status: str | None) -> str:
        return status or PerformanceStatus.APPROVED.value

    @classmethod
    def can_transition(cls, from_status: str | None, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(cls.effective_status(from_status), [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str | None, to_status: str) -> None:
        """Validate a transition, raising InvalidPerformanceTransitionError if invalid."""
        if not cls.can_transition(from_status, to_status):
            raise InvalidPerformanceTransitionError(from_status, to_status)

    @classmethod
    def validate_review(cls, actor_role: str | None, from_status: str | None, to_status: str) -> None:
        """Validate an approve/reject action by an actor."""
        if actor_role not in REVIEWER_ROLES:
            raise PermissionDeniedError(actor_role, f"mark performance as {to_status}")
        if to_status not in (PerformanceStatus.APPROVED.value, PerformanceStatus.REJECTED.value):
            raise InvalidPerformanceTransitionError(
                from_status, to_status, "Review must approve or reject"
            )
        cls.validate_transition(from_status, to_status)

    @classmethod
    def status_after_toggle(cls, actor_role: str | None) -> str:
        """Status a row lands in after a toggle by this actor.

        Reviewers' own toggles are approved immediately; employee
        self-reports wait for review.
        """
        if actor_role in REVIEWER_ROLES:
            return PerformanceStatus.APPROVED.value
        return PerformanceStatus.SUBMITTED.value

    @classmethod
    def get_next_statuses(cls, current_status: str | None) -> list[str]:
        """Get list of valid next statuses from current status."""
        return list(cls.VALID_TRANSITIONS.get(cls.effective_status(current_status), []))
