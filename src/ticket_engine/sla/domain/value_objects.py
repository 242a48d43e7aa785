"""
SLA Value Objects
==================

Response-time SLA calculations.

The deadline is always reference_time + hours(priority), where the
reference is ticket creation, or the latest escalation once the ticket
has escalated.
"""

from datetime import datetime, timedelta
from typing import Optional

from ticket_engine.config import PRIORITY_ORDER, Priority
from ticket_engine.core import ensure_utc
from ticket_engine.rules.domain import EngineRules


class SLACalculator:
    """
    Pure functions for SLA calculations.

    All SLA calculation logic in one place.
    """

    def __init__(self, rules: Optional[EngineRules] = None):
        self._rules = rules or EngineRules()

    def hours_for(self, priority: Priority) -> int:
        """Response window in hours for a priority."""
        return self._rules.get_sla_hours(priority)

    def calculate_deadline(self, reference_time: datetime, priority: Priority) -> datetime:
        """
        Calculate the SLA deadline.

        Args:
            reference_time: Creation time, or the time of the latest escalation
            priority: Ticket priority at the time of computation

        Returns:
            The SLA deadline
        """
        return ensure_utc(reference_time) + timedelta(hours=self.hours_for(priority))

    @staticmethod
    def increase_priority(priority: Priority) -> Priority:
        """Next priority up, saturating at critical."""
        index = PRIORITY_ORDER.index(Priority(priority))
        return PRIORITY_ORDER[min(index + 1, len(PRIORITY_ORDER) - 1)]

    @staticmethod
    def remaining_seconds(deadline: datetime, current_time: datetime) -> float:
        """Seconds left until the deadline, 0 once it has passed."""
        return max(0.0, (ensure_utc(deadline) - ensure_utc(current_time)).total_seconds())

    @staticmethod
    def is_breached(deadline: datetime, current_time: datetime) -> bool:
        return ensure_utc(current_time) > ensure_utc(deadline)
