"""
Ticket Domain Layer
===================

Contains:
- Entities: Ticket, TicketEscalation
- Domain Services: EscalationEngine (tier state machine and triggers)
"""

from ticket_engine.tickets.domain.entities import Ticket, TicketEscalation
from ticket_engine.tickets.domain.escalation import (
    EscalationEngine,
    EscalationReason,
    generate_escalation_id,
)

__all__ = [
    "Ticket",
    "TicketEscalation",
    "EscalationEngine",
    "EscalationReason",
    "generate_escalation_id",
]
