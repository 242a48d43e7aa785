"""
Assignment Application DTOs
===========================
"""

from typing import List, Literal

from pydantic import BaseModel, Field, model_validator

from ticket_engine.assignment.domain import TicketAgent
from ticket_engine.config import AgentStatus, TicketTier

TierStr = Literal["tier1", "tier2", "tier3", "escalated"]
AgentStatusStr = Literal["online", "busy", "offline"]


class TicketAgentDTO(BaseModel):
    """DTO for an agent directory record."""
    id: str = Field(..., min_length=1)
    name: str
    email: str
    tier: TierStr
    status: AgentStatusStr = "online"
    current_tickets: int = Field(default=0, ge=0)
    max_tickets: int = Field(..., ge=0)
    specialties: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_capacity(self) -> "TicketAgentDTO":
        """Ensure current_tickets does not exceed max_tickets."""
        if self.current_tickets > self.max_tickets:
            raise ValueError("current_tickets cannot exceed max_tickets")
        return self

    def to_domain(self) -> TicketAgent:
        return TicketAgent(
            id=self.id,
            name=self.name,
            email=self.email,
            tier=TicketTier(self.tier),
            status=AgentStatus(self.status),
            current_tickets=self.current_tickets,
            max_tickets=self.max_tickets,
            specialties=tuple(self.specialties)
        )

    @classmethod
    def from_domain(cls, agent: TicketAgent) -> "TicketAgentDTO":
        return cls(
            id=agent.id,
            name=agent.name,
            email=agent.email,
            tier=agent.tier.value,
            status=agent.status.value,
            current_tickets=agent.current_tickets,
            max_tickets=agent.max_tickets,
            specialties=list(agent.specialties)
        )
