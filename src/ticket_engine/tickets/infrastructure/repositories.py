"""
Ticket Infrastructure Repositories
==================================

In-memory ticket repository. Durable storage lives outside the engine and
plugs in behind ITicketRepository.
"""

from typing import Dict, List, Optional

from ticket_engine.tickets.application import ITicketRepository
from ticket_engine.tickets.domain import Ticket


class InMemoryTicketRepository(ITicketRepository):
    """Tickets held in process memory, keyed by ID."""

    def __init__(self):
        self._tickets: Dict[str, Ticket] = {}

    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        return self._tickets.get(ticket_id)

    async def save(self, ticket: Ticket) -> Ticket:
        self._tickets[ticket.id] = ticket
        return ticket

    async def list_open(self) -> List[Ticket]:
        return [t for t in self._tickets.values() if t.is_open]
