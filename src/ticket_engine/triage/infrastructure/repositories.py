"""
Triage Infrastructure Repositories
==================================

In-memory implementations of the knowledge base store and the chat session
repository. Production deployments plug in their own adapters behind the
same interfaces.
"""

import threading
from typing import Dict, Iterable, List, Optional

from ticket_engine.triage.application import IChatSessionRepository, IKnowledgeBaseStore
from ticket_engine.triage.domain import ChatSession, KnowledgeBaseEntry


SAMPLE_KNOWLEDGE_BASE = (
    KnowledgeBaseEntry(
        id="kb1",
        title="Billing Double Charge Resolution",
        content=(
            "To resolve double billing: 1) Check payment history, 2) Verify subscription "
            "status, 3) Process refund if confirmed, 4) Update billing settings"
        ),
        tags=("billing", "refund", "payment"),
        confidence=0.92,
        usage_count=156,
    ),
    KnowledgeBaseEntry(
        id="kb2",
        title="Discord Bot Setup Guide",
        content=(
            "Discord bot setup: 1) Create bot role with proper permissions, 2) Invite bot "
            "to server, 3) Configure slash commands, 4) Test functionality"
        ),
        tags=("discord", "bot-setup", "permissions", "integration"),
        confidence=0.87,
        usage_count=89,
    ),
    KnowledgeBaseEntry(
        id="kb3",
        title="Security Incident Response Protocol",
        content=(
            "Security incident response: 1) Immediately reset passwords, 2) Enable 2FA, "
            "3) Review access logs, 4) Monitor for suspicious activity"
        ),
        tags=("security", "incident-response", "urgent", "breach"),
        confidence=0.95,
        usage_count=23,
    ),
    KnowledgeBaseEntry(
        id="kb4",
        title="API Integration Troubleshooting",
        content=(
            "API issues: 1) Check API keys and permissions, 2) Verify endpoint URLs, "
            "3) Review rate limits, 4) Test with sandbox environment"
        ),
        tags=("api", "integration", "troubleshooting", "developer"),
        confidence=0.89,
        usage_count=134,
    ),
    KnowledgeBaseEntry(
        id="kb5",
        title="Account Recovery Process",
        content=(
            "Account recovery: 1) Verify identity, 2) Check security questions, "
            "3) Send recovery email, 4) Guide through password reset"
        ),
        tags=("account", "recovery", "password", "security"),
        confidence=0.91,
        usage_count=78,
    ),
)


class InMemoryKnowledgeBaseStore(IKnowledgeBaseStore):
    """Knowledge base held in process memory."""

    def __init__(self, entries: Optional[Iterable[KnowledgeBaseEntry]] = None):
        self._entries: List[KnowledgeBaseEntry] = list(
            SAMPLE_KNOWLEDGE_BASE if entries is None else entries
        )
        self._lock = threading.Lock()

    def list_entries(self) -> List[KnowledgeBaseEntry]:
        with self._lock:
            return list(self._entries)

    def replace_all(self, entries: Iterable[KnowledgeBaseEntry]) -> None:
        """Swap in a new snapshot, e.g. after the knowledge base is edited."""
        new_entries = list(entries)
        with self._lock:
            self._entries = new_entries


class InMemoryChatSessionRepository(IChatSessionRepository):
    """Chat sessions held in process memory, keyed by ID."""

    def __init__(self, sessions: Optional[Iterable[ChatSession]] = None):
        self._sessions: Dict[str, ChatSession] = {s.id: s for s in sessions or ()}

    def add(self, session: ChatSession) -> None:
        self._sessions[session.id] = session

    async def get_by_id(self, session_id: str) -> Optional[ChatSession]:
        return self._sessions.get(session_id)
