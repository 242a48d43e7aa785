"""
Escalation State Machine
========================

    tier1 -> tier2 -> tier3 -> escalated (terminal)

Escalating at the terminal tier keeps the tier but still appends a
record, raises priority, recomputes the SLA and reassigns. Count
escalation records to detect progress, not tier changes.
"""

from dataclasses import replace
from datetime import datetime
from typing import List, Optional
from uuid import uuid4

from ticket_engine.config import TIER_ORDER, Satisfaction, TicketTier
from ticket_engine.core import ensure_utc, utc_now
from ticket_engine.rules.domain import EngineRules
from ticket_engine.sla.domain import SLACalculator
from ticket_engine.tickets.domain.entities import Ticket, TicketEscalation
from ticket_engine.triage.domain import ChatSession


class EscalationReason:
    """Labels for automatic escalation triggers."""
    TIME_LIMIT = "Time limit exceeded"
    LOW_CONFIDENCE = "Low AI confidence"
    CRITICAL_ISSUE = "Critical issue detected"
    DISSATISFACTION = "Customer dissatisfaction"


def generate_escalation_id() -> str:
    return f"ESC-{uuid4().hex[:10].upper()}"


class EscalationEngine:
    """Decides when a ticket escalates and builds the escalated ticket."""

    def __init__(
        self,
        rules: Optional[EngineRules] = None,
        sla_calculator: Optional[SLACalculator] = None
    ):
        self._rules = rules or EngineRules()
        self._sla = sla_calculator or SLACalculator(self._rules)

    @staticmethod
    def next_tier(tier: TicketTier) -> TicketTier:
        """Next tier up; the terminal tier maps to itself."""
        index = TIER_ORDER.index(TicketTier(tier))
        return TIER_ORDER[min(index + 1, len(TIER_ORDER) - 1)]

    def escalation_reasons(
        self,
        ticket: Ticket,
        chat_session: Optional[ChatSession] = None,
        now: Optional[datetime] = None
    ) -> List[str]:
        """Every trigger that currently fires for the ticket."""
        now = ensure_utc(now or utc_now())
        rules = self._rules.escalation
        reasons = []

        max_age = self._rules.get_max_age(ticket.tier)
        if max_age is not None and ticket.age(now) > max_age:
            reasons.append(EscalationReason.TIME_LIMIT)

        # Remaining triggers only apply while the ticket is still at tier1
        if ticket.tier != TicketTier.TIER1:
            return reasons

        if ticket.ai_confidence < rules.low_confidence_threshold:
            reasons.append(EscalationReason.LOW_CONFIDENCE)

        critical_tags = set(rules.critical_tags)
        if any(tag in critical_tags for tag in ticket.tags):
            reasons.append(EscalationReason.CRITICAL_ISSUE)

        if chat_session is not None and chat_session.satisfaction == Satisfaction.NEGATIVE:
            reasons.append(EscalationReason.DISSATISFACTION)

        return reasons

    def should_escalate(
        self,
        ticket: Ticket,
        chat_session: Optional[ChatSession] = None,
        now: Optional[datetime] = None
    ) -> bool:
        return bool(self.escalation_reasons(ticket, chat_session, now))

    def escalate(
        self,
        ticket: Ticket,
        reason: str,
        escalated_by: str,
        notes: Optional[str] = None,
        assigned_to: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Ticket:
        """
        Build the escalated ticket.

        Args:
            ticket: Ticket before escalation
            reason: Why it escalates
            escalated_by: Agent ID or system actor
            notes: Optional free text
            assigned_to: Agent committed for the new tier, None to unassign
            now: Escalation time, also the new SLA reference

        Returns:
            New Ticket; the input is left untouched
        """
        now = ensure_utc(now or utc_now())
        new_tier = self.next_tier(ticket.tier)
        new_priority = self._sla.increase_priority(ticket.priority)

        escalation = TicketEscalation(
            id=generate_escalation_id(),
            timestamp=now,
            from_tier=ticket.tier,
            to_tier=new_tier,
            reason=reason,
            escalated_by=escalated_by,
            notes=notes
        )

        return replace(
            ticket,
            tier=new_tier,
            priority=new_priority,
            assigned_to=assigned_to,
            escalations=ticket.escalations + (escalation,),
            sla_deadline=self._sla.calculate_deadline(now, new_priority),
            updated_at=now
        )
