"""
Status Workflow Engine - report lifecycle.

Intended lifecycle:
    reported → in-progress → resolved

By default every transition is accepted, matching how the dashboard has
always behaved. Setting STRICT_STATUS_TRANSITIONS=true enforces
ALLOWED_TRANSITIONS instead.
"""

from enum import Enum
from datetime import datetime, timezone
from typing import Dict, List
import logging

logger = logging.getLogger(__name__)


class ReportStatus(str, Enum):
    REPORTED = "reported"          # Initial state, awaiting action
    IN_PROGRESS = "in-progress"    # Crew assigned / work started
    RESOLVED = "resolved"          # Problem fixed


class InvalidStatusTransitionError(ValueError):
    """Raised in strict mode when a transition is not in ALLOWED_TRANSITIONS."""

    def __init__(self, from_status: str, to_status: str, allowed: List[str]):
        self.from_status = from_status
        self.to_status = to_status
        self.allowed = allowed
        super().__init__(
            f"Invalid status transition: {from_status} → {to_status}. "
            f"Allowed transitions from {from_status}: {allowed}"
        )


class StatusWorkflowEngine:
    """
    Report status transitions.

    Rules (strict mode only):
    - No backward transitions
    - Resolved is terminal
    - Same status is a no-op and always valid
    """

    ALLOWED_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
        ReportStatus.REPORTED: [ReportStatus.IN_PROGRESS, ReportStatus.RESOLVED],
        ReportStatus.IN_PROGRESS: [ReportStatus.RESOLVED],
        ReportStatus.RESOLVED: [],
    }

    def __init__(self, strict: bool = False):
        self.strict = strict

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        try:
            from_enum = ReportStatus(from_status)
            to_enum = ReportStatus(to_status)
        except ValueError:
            return False

        if from_enum == to_enum:
            return True

        return to_enum in cls.ALLOWED_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        try:
            current_enum = ReportStatus(current_status)
        except ValueError:
            return []
        return [status.value for status in cls.ALLOWED_TRANSITIONS.get(current_enum, [])]

    def validate_transition(self, current_status: str, new_status: str) -> None:
        """
        Check a transition against the lifecycle.

        Raises:
            InvalidStatusTransitionError: strict mode and the transition is not allowed
        """
        if self.is_valid_transition(current_status, new_status):
            return

        if self.strict:
            raise InvalidStatusTransitionError(
                current_status, new_status, self.get_allowed_transitions(current_status)
            )

        logger.warning(f"Accepting out-of-order status transition {current_status} → {new_status}")

    @staticmethod
    def transition_timestamp() -> datetime:
        return datetime.now(timezone.utc)
