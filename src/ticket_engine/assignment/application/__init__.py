"""
Assignment Application Layer
============================

Contains:
- Services: AssignmentService (select on snapshot, commit atomically)
- Interfaces: IAgentDirectory
- DTOs: TicketAgentDTO
"""

from ticket_engine.assignment.application.dto import TicketAgentDTO
from ticket_engine.assignment.application.services import AssignmentService, IAgentDirectory

__all__ = ["TicketAgentDTO", "AssignmentService", "IAgentDirectory"]
