"""
Shared pytest fixtures.

Builders for chat sessions, tickets and agents so each test only spells
out the fields it cares about.
"""

from datetime import datetime, timedelta, timezone

import pytest

from ticket_engine.assignment.domain import TicketAgent
from ticket_engine.assignment.infrastructure import InMemoryAgentDirectory
from ticket_engine.config import (
    AgentStatus, MessageSender, Platform, Priority, Satisfaction, TicketTier
)
from ticket_engine.tickets.application import TicketOrchestrator
from ticket_engine.tickets.domain import Ticket
from ticket_engine.triage.domain import ChatMessage, ChatSession, KnowledgeBaseEntry
from ticket_engine.triage.infrastructure import InMemoryKnowledgeBaseStore


NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_session():
    """Factory for chat sessions."""

    def _make(
        tags=(),
        handoff_occurred=False,
        satisfaction=Satisfaction.NEUTRAL,
        user_messages=("I need help with my account",),
        session_id="chat-1",
        platform=Platform.WEB,
    ) -> ChatSession:
        messages = [
            ChatMessage(
                id="m0",
                timestamp=NOW - timedelta(minutes=10),
                content="Hi! How can I help you today?",
                sender=MessageSender.BOT,
                confidence=0.9,
            )
        ]
        for i, content in enumerate(user_messages, start=1):
            messages.append(ChatMessage(
                id=f"m{i}",
                timestamp=NOW - timedelta(minutes=10 - i),
                content=content,
                sender=MessageSender.USER,
            ))
        return ChatSession(
            id=session_id,
            customer_id="cust-42",
            customer_name="Dana Whitfield",
            platform=platform,
            messages=tuple(messages),
            handoff_occurred=handoff_occurred,
            satisfaction=satisfaction,
            tags=tuple(tags),
        )

    return _make


@pytest.fixture
def make_ticket():
    """Factory for tickets with a consistent SLA deadline."""

    def _make(
        tier=TicketTier.TIER1,
        priority=Priority.MEDIUM,
        created_at=NOW,
        ai_confidence=0.9,
        tags=(),
        assigned_to=None,
        chat_session_id="chat-1",
        ticket_id="TKT-TEST",
    ) -> Ticket:
        suggestions = ()
        if ai_confidence:
            suggestions = (KnowledgeBaseEntry(
                id="kb-x", title="Entry", content="Body", confidence=ai_confidence
            ),)
        return Ticket(
            id=ticket_id,
            title="Cannot log in",
            description="Cannot log in since yesterday",
            priority=priority,
            tier=tier,
            customer_id="cust-42",
            customer_name="Dana Whitfield",
            created_at=created_at,
            updated_at=created_at,
            sla_deadline=created_at + timedelta(hours=24),
            assigned_to=assigned_to,
            ai_suggestions=suggestions,
            ai_confidence=ai_confidence,
            ai_attempted=bool(suggestions),
            chat_session_id=chat_session_id,
            tags=tuple(tags),
        )

    return _make


def _make_agent(
    agent_id,
    tier=TicketTier.TIER1,
    status=AgentStatus.ONLINE,
    current_tickets=0,
    max_tickets=5,
    specialties=(),
) -> TicketAgent:
    return TicketAgent(
        id=agent_id,
        name=agent_id.title(),
        email=f"{agent_id}@company.com",
        tier=tier,
        status=status,
        current_tickets=current_tickets,
        max_tickets=max_tickets,
        specialties=tuple(specialties),
    )


@pytest.fixture
def make_agent():
    """Factory for agent snapshots."""
    return _make_agent


@pytest.fixture
def directory() -> InMemoryAgentDirectory:
    """Directory seeded with the sample agents."""
    return InMemoryAgentDirectory()


@pytest.fixture
def orchestrator(directory) -> TicketOrchestrator:
    return TicketOrchestrator(
        knowledge_base=InMemoryKnowledgeBaseStore(),
        agent_directory=directory,
    )
