"""
Triage Domain Entities
======================

Domain entities for turning a finished chat into triage signals.

ChatSession and KnowledgeBaseEntry are snapshots handed in by external
collaborators; they are frozen and never written back.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ticket_engine.config import MessageSender, Platform, Satisfaction
from ticket_engine.core import ensure_utc


@dataclass(frozen=True)
class ChatMessage:
    """Single message in a chat transcript."""
    id: str
    timestamp: datetime
    content: str
    sender: MessageSender
    confidence: Optional[float] = None  # bot answer confidence, 0.0 to 1.0

    def __post_init__(self):
        object.__setattr__(self, "timestamp", ensure_utc(self.timestamp))
        if self.confidence is not None and not 0.0 <= self.confidence <= 1.0:
            raise ValueError("Confidence must be between 0 and 1")


@dataclass(frozen=True)
class ChatSession:
    """
    Finished chat session, as captured by the chat service.

    Read-only input to ticket creation and to the satisfaction
    escalation trigger.
    """
    id: str
    customer_id: str
    customer_name: str
    platform: Platform
    messages: Tuple[ChatMessage, ...] = ()
    handoff_occurred: bool = False
    satisfaction: Satisfaction = Satisfaction.NEUTRAL
    tags: Tuple[str, ...] = ()
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def __post_init__(self):
        """Validate required identity fields."""
        object.__setattr__(self, "start_time", ensure_utc(self.start_time))
        object.__setattr__(self, "end_time", ensure_utc(self.end_time))
        if not self.id or not self.id.strip():
            raise ValueError("Chat session id is required")
        if not self.customer_id or not self.customer_id.strip():
            raise ValueError("Chat session customer_id is required")
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("end_time cannot be before start_time")

    @property
    def user_messages(self) -> Tuple[ChatMessage, ...]:
        """Messages written by the customer, in order."""
        return tuple(m for m in self.messages if m.sender == MessageSender.USER)

    def has_any_tag(self, candidates) -> bool:
        """Check whether any session tag is in the candidate set."""
        wanted = set(candidates)
        return any(tag in wanted for tag in self.tags)


@dataclass(frozen=True)
class KnowledgeBaseEntry:
    """
    Stored solution article.

    confidence on a suggestion is the match score for that one query;
    the stored value belongs to the knowledge base owner.
    """
    id: str
    title: str
    content: str
    tags: Tuple[str, ...] = ()
    confidence: float = 0.0
    usage_count: int = 0

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("Confidence must be between 0 and 1")
        if self.usage_count < 0:
            raise ValueError("usage_count cannot be negative")

    @property
    def searchable_text(self) -> str:
        """Lower-cased title, content and tags used for keyword matching."""
        return f"{self.title} {self.content} {' '.join(self.tags)}".lower()
