"""
Ticket Application Services
===========================

Application services orchestrate business logic and coordinate between
domain components and collaborator interfaces.

- TicketOrchestrator: chat -> ticket, escalation, escalation checks
- EscalationSweepService: periodic sweep over open tickets
"""

import asyncio
import threading
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Dict, List, Optional
from uuid import uuid4

from ticket_engine.assignment.application import AssignmentService, IAgentDirectory
from ticket_engine.config import TicketSource, TicketStatus
from ticket_engine.core import ResourceNotFoundException, ensure_utc, utc_now
from ticket_engine.rules.application import IRulesProvider, StaticRulesProvider
from ticket_engine.rules.domain import EngineRules
from ticket_engine.shared.infrastructure.logging import get_context_logger, get_logger, log_latency
from ticket_engine.sla.domain import SLACalculator
from ticket_engine.tickets.domain import EscalationEngine, Ticket
from ticket_engine.triage.application import IChatSessionRepository, IKnowledgeBaseStore
from ticket_engine.triage.domain import (
    ChatSession, KnowledgeBaseMatcher, PriorityClassifier, TicketTextBuilder, TierClassifier
)

logger = get_logger(__name__)


# ========== Repository Interfaces ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID."""

    @abstractmethod
    async def save(self, ticket: Ticket) -> Ticket:
        """Create or replace a ticket."""

    @abstractmethod
    async def list_open(self) -> List[Ticket]:
        """Tickets whose status is still open."""


def generate_ticket_id() -> str:
    return f"TKT-{uuid4().hex[:10].upper()}"


@dataclass(frozen=True)
class _Components:
    """Domain components built from one rule set."""
    rules: EngineRules
    priority: PriorityClassifier
    tier: TierClassifier
    text: TicketTextBuilder
    matcher: KnowledgeBaseMatcher
    sla: SLACalculator
    escalation: EscalationEngine

    @classmethod
    def build(cls, rules: EngineRules) -> "_Components":
        sla = SLACalculator(rules)
        return cls(
            rules=rules,
            priority=PriorityClassifier(rules),
            tier=TierClassifier(rules),
            text=TicketTextBuilder(rules),
            matcher=KnowledgeBaseMatcher(rules),
            sla=sla,
            escalation=EscalationEngine(rules, sla)
        )


# ========== Application Services ==========

class TicketOrchestrator:
    """
    Composes triage, assignment, SLA and escalation.

    Components are rebuilt whenever the rules provider hands out a new
    rule set, so hot-reloaded rules apply to the next call.
    """

    def __init__(
        self,
        knowledge_base: IKnowledgeBaseStore,
        agent_directory: IAgentDirectory,
        rules_provider: Optional[IRulesProvider] = None,
        assignment_max_attempts: int = 3
    ):
        self._knowledge_base = knowledge_base
        self._rules_provider = rules_provider or StaticRulesProvider()
        self._assignment = AssignmentService(agent_directory, max_attempts=assignment_max_attempts)
        self._components_lock = threading.Lock()
        self._components_cache: Optional[_Components] = None

    def _components(self) -> _Components:
        rules = self._rules_provider.get_rules()
        with self._components_lock:
            if self._components_cache is None or self._components_cache.rules is not rules:
                self._components_cache = _Components.build(rules)
            return self._components_cache

    def create_ticket_from_chat(
        self,
        session: ChatSession,
        now: Optional[datetime] = None
    ) -> Ticket:
        """
        Turn a finished chat session into an assigned, SLA-stamped ticket.

        No knowledge base match or no free agent is not an error: the
        ticket comes back with empty suggestions or unassigned.
        """
        now = ensure_utc(now or utc_now())
        components = self._components()

        priority = components.priority.classify(session)
        tier = components.tier.classify(session)
        description = components.text.build_description(session)

        suggestions = components.matcher.find_suggestions(
            description, session.tags, self._knowledge_base.list_entries()
        )
        ticket_id = generate_ticket_id()
        agent = self._assignment.assign(tier, session.tags, ticket_id)

        ticket = Ticket(
            id=ticket_id,
            title=components.text.build_title(session),
            description=description,
            status=TicketStatus.OPEN,
            priority=priority,
            tier=tier,
            source=TicketSource.CHAT,
            platform=session.platform,
            customer_id=session.customer_id,
            customer_name=session.customer_name,
            assigned_to=agent.id if agent else None,
            created_at=now,
            updated_at=now,
            ai_suggestions=tuple(suggestions),
            ai_confidence=Ticket.mean_confidence(suggestions),
            ai_attempted=len(suggestions) > 0,
            chat_session_id=session.id,
            tags=tuple(session.tags),
            sla_deadline=components.sla.calculate_deadline(now, priority)
        )

        logger.info(
            "Ticket created from chat",
            extra={
                "ticket_id": ticket.id,
                "chat_session_id": session.id,
                "priority": ticket.priority.value,
                "tier": ticket.tier.value,
                "assigned_to": ticket.assigned_to,
                "suggestions": len(suggestions),
                "ai_confidence": round(ticket.ai_confidence, 3),
            }
        )
        return ticket

    def escalate_ticket(
        self,
        ticket: Ticket,
        reason: str,
        escalated_by: str,
        notes: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> Ticket:
        """
        Move the ticket to the next tier and reassign it.

        The previous agent's slot is released once the new assignment has
        been committed. Assignment and release are keyed by ticket, so
        replaying the escalation of one snapshot moves the slot once. Callers escalating stored tickets concurrently
        should go through EscalationSweepService, which serializes per
        ticket.
        """
        now = ensure_utc(now or utc_now())
        components = self._components()

        new_tier = components.escalation.next_tier(ticket.tier)
        agent = self._assignment.assign(new_tier, ticket.tags, ticket.id)
        if agent is None or agent.id != ticket.assigned_to:
            self._assignment.release(ticket.assigned_to, ticket.id)

        escalated = components.escalation.escalate(
            ticket,
            reason=reason,
            escalated_by=escalated_by,
            notes=notes,
            assigned_to=agent.id if agent else None,
            now=now
        )

        logger.info(
            "Ticket escalated",
            extra={
                "ticket_id": ticket.id,
                "from_tier": ticket.tier.value,
                "to_tier": escalated.tier.value,
                "priority": escalated.priority.value,
                "assigned_to": escalated.assigned_to,
                "escalated_by": escalated_by,
                "reason": reason,
            }
        )
        return escalated

    def resolve_ticket(
        self,
        ticket: Ticket,
        status: TicketStatus = TicketStatus.RESOLVED,
        now: Optional[datetime] = None
    ) -> Ticket:
        """
        Close the ticket and free the assigned agent's slot.

        Returns a resolved copy; the input ticket is left untouched.

        Raises:
            ValueError: if status is not a closing status
        """
        resolved = replace(ticket)
        resolved.resolve(ensure_utc(now or utc_now()), status)
        self._assignment.release(resolved.assigned_to, resolved.id)

        logger.info(
            "Ticket resolved",
            extra={
                "ticket_id": resolved.id,
                "status": resolved.status.value,
                "assigned_to": resolved.assigned_to,
                "resolution_time": resolved.resolution_time,
            }
        )
        return resolved

    def escalation_reasons(
        self,
        ticket: Ticket,
        chat_session: Optional[ChatSession] = None,
        now: Optional[datetime] = None
    ) -> List[str]:
        return self._components().escalation.escalation_reasons(ticket, chat_session, now)

    def should_escalate(
        self,
        ticket: Ticket,
        chat_session: Optional[ChatSession] = None,
        now: Optional[datetime] = None
    ) -> bool:
        return bool(self.escalation_reasons(ticket, chat_session, now))


@dataclass
class _TicketLock:
    """Per-ticket lock and the number of tasks holding or waiting on it."""
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    users: int = 0


class EscalationSweepService:
    """
    Service for evaluating open tickets and escalating them.

    Run periodically. Tickets are evaluated concurrently, but each ticket
    ID is held under its own lock and re-read from the repository inside
    it, so one ticket is never escalated twice at once.
    """

    def __init__(
        self,
        ticket_repository: ITicketRepository,
        orchestrator: TicketOrchestrator,
        chat_sessions: Optional[IChatSessionRepository] = None,
        system_actor: str = "system"
    ):
        self._ticket_repo = ticket_repository
        self._orchestrator = orchestrator
        self._chat_sessions = chat_sessions
        self._system_actor = system_actor
        self._locks: Dict[str, _TicketLock] = {}

    @asynccontextmanager
    async def _ticket_lock(self, ticket_id: str):
        """Hold the ticket's lock; the entry is dropped once nobody uses it."""
        entry = self._locks.get(ticket_id)
        if entry is None:
            entry = self._locks[ticket_id] = _TicketLock()
        entry.users += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.users -= 1
            if entry.users == 0:
                del self._locks[ticket_id]

    async def run_once(self, now: Optional[datetime] = None) -> dict:
        """
        Evaluate all open tickets and escalate the ones that need it.

        Returns:
            Summary of the sweep
        """
        sweep_logger = get_context_logger(__name__, str(uuid4()))
        open_tickets = await self._ticket_repo.list_open()

        with log_latency(sweep_logger, "escalation_sweep", tickets=len(open_tickets)):
            results = await asyncio.gather(
                *(self._evaluate_ticket(t.id, now) for t in open_tickets),
                return_exceptions=True
            )

        escalated = 0
        failed = 0
        for ticket, result in zip(open_tickets, results):
            if isinstance(result, Exception):
                failed += 1
                sweep_logger.error(
                    "Escalation check failed",
                    extra={"ticket_id": ticket.id, "error": str(result)}
                )
            elif isinstance(result, BaseException):
                raise result
            elif result:
                escalated += 1

        summary = {
            "tickets_evaluated": len(open_tickets),
            "tickets_escalated": escalated,
            "failures": failed,
        }
        sweep_logger.info("Escalation sweep finished", extra=summary)
        return summary

    async def _evaluate_ticket(self, ticket_id: str, now: Optional[datetime]) -> bool:
        """Escalate one ticket if any trigger fires. Returns True if it escalated."""
        async with self._ticket_lock(ticket_id):
            ticket = await self._ticket_repo.get_by_id(ticket_id)
            if ticket is None or not ticket.is_open:
                return False

            chat_session = await self._load_chat_session(ticket)
            reasons = self._orchestrator.escalation_reasons(ticket, chat_session, now)
            if not reasons:
                return False

            escalated = self._orchestrator.escalate_ticket(
                ticket,
                reason="; ".join(reasons),
                escalated_by=self._system_actor,
                now=now
            )
            await self._ticket_repo.save(escalated)
            return True

    async def escalate(
        self,
        ticket_id: str,
        reason: str,
        escalated_by: str,
        notes: Optional[str] = None
    ) -> Ticket:
        """
        Manually escalate a stored ticket.

        Raises:
            ResourceNotFoundException: if the ticket does not exist
        """
        async with self._ticket_lock(ticket_id):
            ticket = await self._ticket_repo.get_by_id(ticket_id)
            if ticket is None:
                raise ResourceNotFoundException("Ticket", ticket_id)

            escalated = self._orchestrator.escalate_ticket(
                ticket, reason=reason, escalated_by=escalated_by, notes=notes
            )
            return await self._ticket_repo.save(escalated)

    async def _load_chat_session(self, ticket: Ticket) -> Optional[ChatSession]:
        if self._chat_sessions is None or not ticket.chat_session_id:
            return None
        return await self._chat_sessions.get_by_id(ticket.chat_session_id)
