"""
Agent Selection
===============

Pure scoring over an agent directory snapshot. Committing the choice is the
directory's job.
"""

from typing import Iterable, List, Optional

from ticket_engine.assignment.domain.entities import TicketAgent
from ticket_engine.config import TicketTier


class AgentSelector:
    """
    Picks the best available agent for a tier and tag set.

    Preference order:
    1. First available agent (snapshot order) with a matching specialty
    2. Least-loaded available agent, ties broken by snapshot order
    """

    @staticmethod
    def candidates(agents: Iterable[TicketAgent], tier: TicketTier) -> List[TicketAgent]:
        """Available agents at the tier."""
        return [a for a in agents if a.tier == tier and a.is_available]

    def select(
        self,
        agents: Iterable[TicketAgent],
        tier: TicketTier,
        tags: Iterable[str]
    ) -> Optional[TicketAgent]:
        available = self.candidates(agents, tier)
        if not available:
            return None

        tags = list(tags)
        for agent in available:
            if agent.matches_any(tags):
                return agent

        return min(available, key=lambda a: a.current_tickets)
