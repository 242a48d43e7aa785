"""
Triage Application Services
============================

Collaborator interfaces consumed by triage.

Knowledge base and chat sessions are owned by external services; the engine
only reads snapshots through these interfaces.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ticket_engine.triage.domain import ChatSession, KnowledgeBaseEntry


class IKnowledgeBaseStore(ABC):
    """Interface for knowledge base reads."""

    @abstractmethod
    def list_entries(self) -> List[KnowledgeBaseEntry]:
        """Snapshot of all knowledge base entries."""


class IChatSessionRepository(ABC):
    """Interface for chat session lookups."""

    @abstractmethod
    async def get_by_id(self, session_id: str) -> Optional[ChatSession]:
        """Get a finished chat session by ID."""
