"""
Ticket Domain Entities
======================

The Ticket aggregate and its escalation history.

Following Domain-Driven Design principles, these entities contain
business logic and are free of infrastructure concerns. Escalation never
mutates a Ticket in place; it produces a new one.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from ticket_engine.config import (
    OPEN_STATUSES, Platform, Priority, TicketSource, TicketStatus, TicketTier
)
from ticket_engine.core import ensure_utc, utc_now
from ticket_engine.triage.domain import KnowledgeBaseEntry


@dataclass(frozen=True)
class TicketEscalation:
    """Immutable record of one tier transition."""
    id: str
    timestamp: datetime
    from_tier: TicketTier
    to_tier: TicketTier
    reason: str
    escalated_by: str
    notes: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))


@dataclass
class Ticket:
    """
    Support ticket created from a chat session.

    tags and created_at never change after creation; escalations only grow.
    Naive timestamps are read as UTC.
    """

    # Core attributes
    id: str
    title: str
    description: str
    priority: Priority
    tier: TicketTier
    customer_id: str
    customer_name: str

    # Timestamps
    created_at: datetime
    updated_at: datetime
    sla_deadline: datetime

    status: TicketStatus = TicketStatus.OPEN
    source: TicketSource = TicketSource.CHAT
    platform: Optional[Platform] = None
    customer_email: Optional[str] = None
    assigned_to: Optional[str] = None

    # Knowledge base suggestions
    ai_suggestions: Tuple[KnowledgeBaseEntry, ...] = ()
    ai_confidence: float = 0.0
    ai_attempted: bool = False

    escalations: Tuple[TicketEscalation, ...] = ()
    chat_session_id: Optional[str] = None
    tags: Tuple[str, ...] = ()
    attachments: Tuple[str, ...] = ()

    # Minutes from creation, set once
    response_time: Optional[float] = None
    resolved_at: Optional[datetime] = None
    resolution_time: Optional[float] = None

    def __post_init__(self):
        """Validate ticket on initialization."""
        self.created_at = ensure_utc(self.created_at)
        self.updated_at = ensure_utc(self.updated_at)
        self.sla_deadline = ensure_utc(self.sla_deadline)
        self.resolved_at = ensure_utc(self.resolved_at)

        if self.updated_at < self.created_at:
            raise ValueError("updated_at cannot be before created_at")

        if self.resolved_at is not None and self.resolved_at < self.created_at:
            raise ValueError("resolved_at cannot be before created_at")

        if not 0.0 <= self.ai_confidence <= 1.0:
            raise ValueError("ai_confidence must be between 0 and 1")

    @staticmethod
    def mean_confidence(suggestions: Iterable[KnowledgeBaseEntry]) -> float:
        """Mean suggestion confidence, 0 when there are none."""
        confidences = [s.confidence for s in suggestions]
        if not confidences:
            return 0.0
        return sum(confidences) / len(confidences)

    @property
    def escalation_count(self) -> int:
        return len(self.escalations)

    @property
    def last_escalation(self) -> Optional[TicketEscalation]:
        return self.escalations[-1] if self.escalations else None

    @property
    def sla_reference_time(self) -> datetime:
        """Time the current SLA deadline was computed from."""
        last = self.last_escalation
        return last.timestamp if last else self.created_at

    @property
    def is_open(self) -> bool:
        """Check if ticket is still open."""
        return self.status in OPEN_STATUSES

    @property
    def is_terminal_tier(self) -> bool:
        return self.tier == TicketTier.ESCALATED

    def age(self, now: Optional[datetime] = None) -> timedelta:
        """Time since creation."""
        return ensure_utc(now or utc_now()) - self.created_at

    def _minutes_since_creation(self, timestamp: datetime) -> float:
        if timestamp < self.created_at:
            raise ValueError("timestamp cannot be before created_at")
        return (timestamp - self.created_at).total_seconds() / 60

    def mark_first_response(self, timestamp: Optional[datetime] = None) -> None:
        """Record the first agent response time."""
        if self.response_time is not None:
            return  # Already has first response
        timestamp = ensure_utc(timestamp or utc_now())
        self.response_time = self._minutes_since_creation(timestamp)
        self.updated_at = timestamp

    def resolve(
        self,
        timestamp: Optional[datetime] = None,
        status: TicketStatus = TicketStatus.RESOLVED
    ) -> None:
        """
        Close the ticket and record the resolution time.

        Resolving an already resolved ticket only updates the status.
        """
        if status in OPEN_STATUSES:
            raise ValueError(f"{status.value} is not a closing status")
        if self.resolved_at is None:
            timestamp = ensure_utc(timestamp or utc_now())
            self.resolution_time = self._minutes_since_creation(timestamp)
            self.resolved_at = timestamp
            self.updated_at = timestamp
        self.status = status
