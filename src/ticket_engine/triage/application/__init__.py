"""
Triage Application Layer
========================

Contains:
- Collaborator interfaces: IKnowledgeBaseStore, IChatSessionRepository
- DTOs: chat session and knowledge base payload validation
"""

from ticket_engine.triage.application.dto import (
    ChatMessageDTO,
    ChatSessionDTO,
    KnowledgeBaseEntryDTO,
    parse_chat_session,
)
from ticket_engine.triage.application.services import (
    IKnowledgeBaseStore,
    IChatSessionRepository,
)

__all__ = [
    "ChatMessageDTO",
    "ChatSessionDTO",
    "KnowledgeBaseEntryDTO",
    "parse_chat_session",
    "IKnowledgeBaseStore",
    "IChatSessionRepository",
]
