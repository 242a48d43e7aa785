"""
Triage Application DTOs
=======================

Pydantic models for chat session and knowledge base payloads.

These handle validation of wire-shaped data coming from the chat capture
service and the knowledge base store, and convert to domain entities.
"""

from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from ticket_engine.config import MessageSender, Platform, Satisfaction
from ticket_engine.core import ValidationException, ensure_utc
from ticket_engine.triage.domain import ChatMessage, ChatSession, KnowledgeBaseEntry


# ========== Type Aliases for Literals ==========
PlatformStr = Literal["web", "whatsapp", "facebook", "instagram", "line", "discord", "telegram", "other"]
SatisfactionStr = Literal["positive", "neutral", "negative"]
SenderStr = Literal["bot", "user", "agent"]


def _clean_tags(tags: List[str]) -> List[str]:
    """Strip tags and drop blanks and duplicates, keeping order."""
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class ChatMessageDTO(BaseModel):
    """DTO for one chat message."""
    id: str = Field(..., min_length=1)
    timestamp: datetime
    content: str = ""
    sender: SenderStr
    confidence: Optional[float] = Field(None, ge=0.0, le=1.0)

    def to_domain(self) -> ChatMessage:
        return ChatMessage(
            id=self.id,
            timestamp=self.timestamp,
            content=self.content,
            sender=MessageSender(self.sender),
            confidence=self.confidence
        )


class ChatSessionDTO(BaseModel):
    """DTO for a finished chat session."""
    id: str = Field(..., min_length=1, description="Chat session ID")
    customer_id: str = Field(..., min_length=1, description="Customer ID")
    customer_name: str = Field(..., description="Customer display name")
    platform: PlatformStr
    messages: List[ChatMessageDTO] = Field(default_factory=list)
    handoff_occurred: bool = False
    satisfaction: SatisfactionStr = "neutral"
    tags: List[str] = Field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @field_validator("id", "customer_id")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only identifiers."""
        cleaned = v.strip()
        if not cleaned:
            raise ValueError("must not be blank")
        return cleaned

    @field_validator("tags")
    @classmethod
    def validate_tags(cls, v: List[str]) -> List[str]:
        return _clean_tags(v)

    @field_validator("end_time")
    @classmethod
    def validate_end_time(cls, v: Optional[datetime], info) -> Optional[datetime]:
        """Ensure end_time is not before start_time."""
        start = info.data.get("start_time")
        if v is not None and start is not None and ensure_utc(v) < ensure_utc(start):
            raise ValueError("end_time cannot be before start_time")
        return v

    def to_domain(self) -> ChatSession:
        """Convert to domain entity."""
        return ChatSession(
            id=self.id,
            customer_id=self.customer_id,
            customer_name=self.customer_name,
            platform=Platform(self.platform),
            messages=tuple(m.to_domain() for m in self.messages),
            handoff_occurred=self.handoff_occurred,
            satisfaction=Satisfaction(self.satisfaction),
            tags=tuple(self.tags),
            start_time=self.start_time,
            end_time=self.end_time
        )


class KnowledgeBaseEntryDTO(BaseModel):
    """DTO for a knowledge base entry."""
    id: str = Field(..., min_length=1)
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    usage_count: int = Field(default=0, ge=0)

    def to_domain(self) -> KnowledgeBaseEntry:
        return KnowledgeBaseEntry(
            id=self.id,
            title=self.title,
            content=self.content,
            tags=tuple(self.tags),
            confidence=self.confidence,
            usage_count=self.usage_count
        )

    @classmethod
    def from_domain(cls, entry: KnowledgeBaseEntry) -> "KnowledgeBaseEntryDTO":
        return cls(
            id=entry.id,
            title=entry.title,
            content=entry.content,
            tags=list(entry.tags),
            confidence=entry.confidence,
            usage_count=entry.usage_count
        )


def parse_chat_session(payload: Any) -> ChatSession:
    """
    Validate a raw chat session payload and build the domain entity.

    Raises:
        ValidationException: if required fields are missing or malformed
    """
    try:
        return ChatSessionDTO.model_validate(payload).to_domain()
    except ValidationError as e:
        raise ValidationException(
            "Invalid chat session payload",
            {"errors": e.errors(include_url=False)}
        ) from e
