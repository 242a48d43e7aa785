"""
Assignment Domain Entities
==========================
"""

from dataclasses import dataclass
from typing import Tuple

from ticket_engine.config import AgentStatus, TicketTier


@dataclass(frozen=True)
class TicketAgent:
    """
    Snapshot of a human support agent.

    The live load counter is owned by the agent directory; a snapshot is
    only ever used to choose a candidate.
    """
    id: str
    name: str
    email: str
    tier: TicketTier
    status: AgentStatus
    current_tickets: int
    max_tickets: int
    specialties: Tuple[str, ...] = ()

    def __post_init__(self):
        """Validate capacity invariant."""
        if not self.id:
            raise ValueError("Agent id is required")
        if self.current_tickets < 0:
            raise ValueError("current_tickets cannot be negative")
        if self.current_tickets > self.max_tickets:
            raise ValueError("current_tickets cannot exceed max_tickets")

    @property
    def has_capacity(self) -> bool:
        return self.current_tickets < self.max_tickets

    @property
    def is_available(self) -> bool:
        """Check if agent can take a ticket right now."""
        return self.status != AgentStatus.OFFLINE and self.has_capacity

    def matches_any(self, tags) -> bool:
        """
        Substring or equality match between any tag and any specialty.

        Blank tags and blank specialties are ignored on both sides.
        """
        specialties = [s for s in self.specialties if s]
        return any(
            tag in specialty or specialty in tag
            for specialty in specialties
            for tag in tags
            if tag
        )
