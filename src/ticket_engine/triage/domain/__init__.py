"""
Triage Domain Layer
===================

Domain layer for ticket triage.

Contains:
- Entities: ChatSession, ChatMessage, KnowledgeBaseEntry
- Classifiers: PriorityClassifier, TierClassifier, TicketTextBuilder
- Matching: KnowledgeBaseMatcher

This layer is framework-agnostic and contains pure business logic.
"""

from ticket_engine.triage.domain.entities import (
    ChatMessage,
    ChatSession,
    KnowledgeBaseEntry,
)
from ticket_engine.triage.domain.classifiers import (
    PriorityClassifier,
    TierClassifier,
    TicketTextBuilder,
)
from ticket_engine.triage.domain.matching import KnowledgeBaseMatcher

__all__ = [
    "ChatMessage",
    "ChatSession",
    "KnowledgeBaseEntry",
    "PriorityClassifier",
    "TierClassifier",
    "TicketTextBuilder",
    "KnowledgeBaseMatcher",
]
