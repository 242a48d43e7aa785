"""
Triage Infrastructure Layer
============================

In-memory collaborator implementations for the knowledge base and chat
sessions, plus the sample knowledge base.
"""

from ticket_engine.triage.infrastructure.repositories import (
    SAMPLE_KNOWLEDGE_BASE,
    InMemoryKnowledgeBaseStore,
    InMemoryChatSessionRepository,
)

__all__ = [
    "SAMPLE_KNOWLEDGE_BASE",
    "InMemoryKnowledgeBaseStore",
    "InMemoryChatSessionRepository",
]
