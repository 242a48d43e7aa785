"""
Ticket Infrastructure Layer
===========================

Contains:
- Repositories: InMemoryTicketRepository
- External: EscalationScheduler (APScheduler)
"""

from ticket_engine.tickets.infrastructure.external import EscalationScheduler
from ticket_engine.tickets.infrastructure.repositories import InMemoryTicketRepository

__all__ = ["EscalationScheduler", "InMemoryTicketRepository"]
