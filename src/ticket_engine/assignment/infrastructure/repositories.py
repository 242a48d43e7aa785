"""
Assignment Infrastructure Repositories
======================================

In-memory agent directory with per-agent locking.
"""

import threading
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Set

from ticket_engine.assignment.application import IAgentDirectory
from ticket_engine.assignment.domain import TicketAgent
from ticket_engine.config import AgentStatus, TicketTier
from ticket_engine.core import AgentCapacityException, ResourceNotFoundException


SAMPLE_AGENTS = (
    TicketAgent(
        id="agent1",
        name="Sarah Johnson",
        email="sarah@company.com",
        tier=TicketTier.TIER1,
        status=AgentStatus.ONLINE,
        current_tickets=8,
        max_tickets=15,
        specialties=("billing", "account-setup", "basic-support"),
    ),
    TicketAgent(
        id="agent2",
        name="Mike Chen",
        email="mike@company.com",
        tier=TicketTier.TIER2,
        status=AgentStatus.ONLINE,
        current_tickets=5,
        max_tickets=10,
        specialties=("technical-integration", "api-support", "troubleshooting"),
    ),
    TicketAgent(
        id="agent3",
        name="Lisa Rodriguez",
        email="lisa@company.com",
        tier=TicketTier.TIER3,
        status=AgentStatus.BUSY,
        current_tickets=3,
        max_tickets=5,
        specialties=("enterprise-support", "security", "escalations"),
    ),
)


class InMemoryAgentDirectory(IAgentDirectory):
    """
    Agent directory held in process memory.

    Each agent record has its own lock; assign and release re-check and
    update the record, and the set of tickets holding a slot with the
    agent, while holding it. Load seeded through the constructor or
    upsert is not tied to any ticket.
    """

    def __init__(self, agents: Optional[Iterable[TicketAgent]] = None):
        self._agents: Dict[str, TicketAgent] = {
            a.id: a for a in (SAMPLE_AGENTS if agents is None else agents)
        }
        self._locks: Dict[str, threading.Lock] = {a_id: threading.Lock() for a_id in self._agents}
        self._held: Dict[str, Set[str]] = {a_id: set() for a_id in self._agents}
        self._registry_lock = threading.Lock()

    def list_agents(self) -> List[TicketAgent]:
        with self._registry_lock:
            return list(self._agents.values())

    def get(self, agent_id: str) -> Optional[TicketAgent]:
        with self._registry_lock:
            return self._agents.get(agent_id)

    def upsert(self, agent: TicketAgent) -> None:
        """Add an agent or replace its record (status changes, new limits)."""
        with self._registry_lock:
            lock = self._locks.setdefault(agent.id, threading.Lock())
            self._held.setdefault(agent.id, set())
        with lock:
            self._store(agent)

    def set_status(self, agent_id: str, status: AgentStatus) -> TicketAgent:
        with self._lock_for(agent_id):
            agent = replace(self._require(agent_id), status=status)
            self._store(agent)
            return agent

    def holds_ticket(self, agent_id: str, ticket_id: str) -> bool:
        return ticket_id in self.held_tickets(agent_id)

    def held_tickets(self, agent_id: str) -> Set[str]:
        """Copy of the ticket IDs holding a slot with the agent."""
        with self._registry_lock:
            lock = self._locks.get(agent_id)
        if lock is None:
            return set()
        with lock:
            return set(self._held[agent_id])

    def assign_ticket(self, agent_id: str, ticket_id: str) -> TicketAgent:
        with self._lock_for(agent_id):
            agent = self._require(agent_id)
            held = self._held[agent_id]
            if ticket_id in held:
                return agent
            if not agent.is_available:
                raise AgentCapacityException(agent.id, agent.current_tickets, agent.max_tickets)
            agent = replace(agent, current_tickets=agent.current_tickets + 1)
            held.add(ticket_id)
            self._store(agent)
            return agent

    def release_ticket(self, agent_id: str, ticket_id: str) -> TicketAgent:
        with self._lock_for(agent_id):
            agent = self._require(agent_id)
            held = self._held[agent_id]
            if ticket_id not in held:
                return agent
            held.discard(ticket_id)
            agent = replace(agent, current_tickets=max(0, agent.current_tickets - 1))
            self._store(agent)
            return agent

    def _lock_for(self, agent_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(agent_id)
        if lock is None:
            raise ResourceNotFoundException("Agent", agent_id)
        return lock

    def _require(self, agent_id: str) -> TicketAgent:
        with self._registry_lock:
            agent = self._agents.get(agent_id)
        if agent is None:
            raise ResourceNotFoundException("Agent", agent_id)
        return agent

    def _store(self, agent: TicketAgent) -> None:
        with self._registry_lock:
            self._agents[agent.id] = agent
