"""
Ticket Application DTOs
=======================

Data Transfer Objects for handing tickets to callers that serialize them
(REST layers, storage adapters).
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ticket_engine.config import Platform, Priority, TicketSource, TicketStatus, TicketTier
from ticket_engine.tickets.domain import Ticket, TicketEscalation
from ticket_engine.triage.application import KnowledgeBaseEntryDTO

# ========== Type Aliases for Literals ==========
PriorityStr = Literal["low", "medium", "high", "critical"]
TierStr = Literal["tier1", "tier2", "tier3", "escalated"]
TicketStatusStr = Literal["open", "in_progress", "pending_customer", "resolved", "closed"]
TicketSourceStr = Literal["chat", "email", "phone", "web_form", "api"]
PlatformStr = Literal["web", "whatsapp", "facebook", "instagram", "line", "discord", "telegram", "other"]


class TicketEscalationDTO(BaseModel):
    """DTO for one escalation record."""
    id: str
    timestamp: datetime
    from_tier: TierStr
    to_tier: TierStr
    reason: str
    escalated_by: str
    notes: Optional[str] = None

    def to_domain(self) -> TicketEscalation:
        return TicketEscalation(
            id=self.id,
            timestamp=self.timestamp,
            from_tier=TicketTier(self.from_tier),
            to_tier=TicketTier(self.to_tier),
            reason=self.reason,
            escalated_by=self.escalated_by,
            notes=self.notes
        )

    @classmethod
    def from_domain(cls, escalation: TicketEscalation) -> "TicketEscalationDTO":
        return cls(
            id=escalation.id,
            timestamp=escalation.timestamp,
            from_tier=escalation.from_tier.value,
            to_tier=escalation.to_tier.value,
            reason=escalation.reason,
            escalated_by=escalation.escalated_by,
            notes=escalation.notes
        )


class TicketDTO(BaseModel):
    """
    DTO representing a ticket as passed to and from storage.

    This bridges the gap between domain entities and serialized records.
    """
    id: str
    title: str
    description: str
    status: TicketStatusStr = "open"
    priority: PriorityStr
    tier: TierStr
    source: TicketSourceStr = "chat"
    platform: Optional[PlatformStr] = None
    customer_id: str
    customer_name: str
    customer_email: Optional[str] = None
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    ai_suggestions: List[KnowledgeBaseEntryDTO] = Field(default_factory=list)
    ai_confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    ai_attempted: bool = False
    escalations: List[TicketEscalationDTO] = Field(default_factory=list)
    chat_session_id: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    attachments: List[str] = Field(default_factory=list)
    sla_deadline: datetime
    response_time: Optional[float] = Field(None, ge=0.0)
    resolved_at: Optional[datetime] = None
    resolution_time: Optional[float] = Field(None, ge=0.0)

    def to_domain(self) -> Ticket:
        """Convert to domain entity."""
        return Ticket(
            id=self.id,
            title=self.title,
            description=self.description,
            status=TicketStatus(self.status),
            priority=Priority(self.priority),
            tier=TicketTier(self.tier),
            source=TicketSource(self.source),
            platform=Platform(self.platform) if self.platform else None,
            customer_id=self.customer_id,
            customer_name=self.customer_name,
            customer_email=self.customer_email,
            assigned_to=self.assigned_to,
            created_at=self.created_at,
            updated_at=self.updated_at,
            ai_suggestions=tuple(s.to_domain() for s in self.ai_suggestions),
            ai_confidence=self.ai_confidence,
            ai_attempted=self.ai_attempted,
            escalations=tuple(e.to_domain() for e in self.escalations),
            chat_session_id=self.chat_session_id,
            tags=tuple(self.tags),
            attachments=tuple(self.attachments),
            sla_deadline=self.sla_deadline,
            response_time=self.response_time,
            resolved_at=self.resolved_at,
            resolution_time=self.resolution_time
        )

    @classmethod
    def from_domain(cls, ticket: Ticket) -> "TicketDTO":
        """Create from domain entity."""
        return cls(
            id=ticket.id,
            title=ticket.title,
            description=ticket.description,
            status=ticket.status.value,
            priority=ticket.priority.value,
            tier=ticket.tier.value,
            source=ticket.source.value,
            platform=ticket.platform.value if ticket.platform else None,
            customer_id=ticket.customer_id,
            customer_name=ticket.customer_name,
            customer_email=ticket.customer_email,
            assigned_to=ticket.assigned_to,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
            ai_suggestions=[KnowledgeBaseEntryDTO.from_domain(s) for s in ticket.ai_suggestions],
            ai_confidence=ticket.ai_confidence,
            ai_attempted=ticket.ai_attempted,
            escalations=[TicketEscalationDTO.from_domain(e) for e in ticket.escalations],
            chat_session_id=ticket.chat_session_id,
            tags=list(ticket.tags),
            attachments=list(ticket.attachments),
            sla_deadline=ticket.sla_deadline,
            response_time=ticket.response_time,
            resolved_at=ticket.resolved_at,
            resolution_time=ticket.resolution_time
        )
