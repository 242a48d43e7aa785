"""
Assignment Application Services
===============================

Coordinates agent selection on a snapshot with the directory's atomic
assign primitive.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from ticket_engine.assignment.domain import AgentSelector, TicketAgent
from ticket_engine.config import TicketTier
from ticket_engine.core import AgentCapacityException, ResourceNotFoundException
from ticket_engine.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class IAgentDirectory(ABC):
    """
    Interface for the agent directory.

    The directory records which tickets hold a slot with which agent.
    assign_ticket and release_ticket must be atomic per agent and
    idempotent per (agent, ticket) pair.
    """

    @abstractmethod
    def list_agents(self) -> List[TicketAgent]:
        """Snapshot of all agents."""

    @abstractmethod
    def get(self, agent_id: str) -> Optional[TicketAgent]:
        """Snapshot of one agent."""

    @abstractmethod
    def holds_ticket(self, agent_id: str, ticket_id: str) -> bool:
        """True if the ticket currently holds a slot with the agent."""

    @abstractmethod
    def assign_ticket(self, agent_id: str, ticket_id: str) -> TicketAgent:
        """
        Give the ticket a slot with the agent.

        Re-checks availability and capacity against live state. A ticket
        that already holds a slot with the agent is returned unchanged.

        Raises:
            AgentCapacityException: agent is offline or full
            ResourceNotFoundException: unknown agent
        """

    @abstractmethod
    def release_ticket(self, agent_id: str, ticket_id: str) -> TicketAgent:
        """
        Free the ticket's slot with the agent.

        Does nothing if the ticket holds no slot with the agent.
        """


# ========== Application Services ==========

class AssignmentService:
    """
    Assigns tickets to agents without breaking capacity.

    Selection runs on a snapshot; the commit goes through the directory.
    If another assignment fills the chosen agent first, selection is
    retried on a fresh snapshot.
    """

    def __init__(
        self,
        directory: IAgentDirectory,
        selector: Optional[AgentSelector] = None,
        max_attempts: int = 3
    ):
        self._directory = directory
        self._selector = selector or AgentSelector()
        self._max_attempts = max_attempts

    def assign(
        self,
        tier: TicketTier,
        tags: Iterable[str],
        ticket_id: str
    ) -> Optional[TicketAgent]:
        """
        Select and commit an agent for the tier.

        If an agent at the tier already holds the ticket, that agent is
        returned without taking a second slot.

        Returns:
            Agent snapshot after the commit, or None if nobody can take it
        """
        tags = list(tags)

        agents = self._directory.list_agents()
        for agent in agents:
            if agent.tier == tier and self._directory.holds_ticket(agent.id, ticket_id):
                logger.info(
                    "Ticket already assigned at tier",
                    extra={
                        "agent_id": agent.id,
                        "ticket_id": ticket_id,
                        "tier": TicketTier(tier).value,
                    }
                )
                return agent

        for attempt in range(1, self._max_attempts + 1):
            if attempt > 1:
                agents = self._directory.list_agents()
            candidate = self._selector.select(agents, tier, tags)
            if candidate is None:
                logger.info(
                    "No available agent",
                    extra={"tier": TicketTier(tier).value, "ticket_id": ticket_id, "attempt": attempt}
                )
                return None

            try:
                agent = self._directory.assign_ticket(candidate.id, ticket_id)
            except (AgentCapacityException, ResourceNotFoundException) as e:
                logger.info(
                    "Agent assignment lost race, reselecting",
                    extra={"agent_id": candidate.id, "attempt": attempt, "error": e.message}
                )
                continue

            logger.info(
                "Agent assigned",
                extra={
                    "agent_id": agent.id,
                    "ticket_id": ticket_id,
                    "tier": TicketTier(tier).value,
                    "current_tickets": agent.current_tickets,
                    "max_tickets": agent.max_tickets,
                }
            )
            return agent

        logger.warning(
            "Agent assignment gave up",
            extra={"tier": TicketTier(tier).value, "ticket_id": ticket_id, "attempts": self._max_attempts}
        )
        return None

    def release(self, agent_id: Optional[str], ticket_id: str) -> None:
        """Free the slot the ticket holds with the agent, if any."""
        if not agent_id:
            return
        try:
            self._directory.release_ticket(agent_id, ticket_id)
        except ResourceNotFoundException:
            logger.warning(
                "Released agent no longer in directory",
                extra={"agent_id": agent_id, "ticket_id": ticket_id}
            )
