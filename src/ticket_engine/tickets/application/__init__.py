"""
Ticket Application Layer
========================

Contains:
- Services: TicketOrchestrator, EscalationSweepService
- Interfaces: ITicketRepository
- DTOs: TicketDTO, TicketEscalationDTO

This layer depends on the domain layers and collaborator interfaces,
but not on concrete infrastructure implementations.
"""

from ticket_engine.tickets.application.dto import TicketDTO, TicketEscalationDTO
from ticket_engine.tickets.application.services import (
    EscalationSweepService,
    ITicketRepository,
    TicketOrchestrator,
    generate_ticket_id,
)

__all__ = [
    "TicketDTO",
    "TicketEscalationDTO",
    "EscalationSweepService",
    "ITicketRepository",
    "TicketOrchestrator",
    "generate_ticket_id",
]
