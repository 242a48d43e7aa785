"""
Assignment Domain Layer
=======================

Contains:
- Entities: TicketAgent
- Domain Services: AgentSelector
"""

from ticket_engine.assignment.domain.entities import TicketAgent
from ticket_engine.assignment.domain.selector import AgentSelector

__all__ = ["TicketAgent", "AgentSelector"]
