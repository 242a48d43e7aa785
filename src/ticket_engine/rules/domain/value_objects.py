"""
Rules Value Objects
===================

Decision tables driving triage, matching, SLA and escalation.

Loaded from YAML by the rules config manager. Every field has a default, so an
empty or missing file yields the standard rule set.
"""

from datetime import timedelta
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ticket_engine.config import VALID_PRIORITIES, VALID_TIERS, Priority, TicketTier


DEFAULT_SLA_HOURS = {
    Priority.CRITICAL.value: 2,
    Priority.HIGH.value: 4,
    Priority.MEDIUM.value: 24,
    Priority.LOW.value: 48,
}

DEFAULT_MAX_AGE_HOURS = {
    TicketTier.TIER1.value: 2.0,
    TicketTier.TIER2.value: 4.0,
    TicketTier.TIER3.value: 8.0,
    TicketTier.ESCALATED.value: None,
}


class PriorityRules(BaseModel):
    """Tag sets used by the priority classifier."""
    critical_tags: List[str] = Field(
        default_factory=lambda: ["security", "breach", "critical", "urgent"],
        description="Any of these tags makes a ticket critical"
    )
    medium_tags: List[str] = Field(
        default_factory=lambda: ["billing", "payment", "api", "integration"],
        description="Any of these tags makes a ticket at least medium"
    )


class TierRules(BaseModel):
    """Tag sets used to pick the initial support tier."""
    tier3_tags: List[str] = Field(
        default_factory=lambda: ["security", "enterprise", "breach", "critical"]
    )
    tier2_tags: List[str] = Field(
        default_factory=lambda: ["api", "integration", "technical", "developer"]
    )


class MatchingRules(BaseModel):
    """Knowledge base keyword matching parameters."""
    min_keyword_length: int = Field(
        default=3,
        ge=1,
        description="Keywords shorter than this never count as a match"
    )
    match_threshold: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Entries must score strictly above this to be suggested"
    )
    max_suggestions: int = Field(default=3, ge=0)


class EscalationRules(BaseModel):
    """Automatic escalation triggers."""
    max_age_hours: Dict[str, Optional[float]] = Field(
        default_factory=lambda: dict(DEFAULT_MAX_AGE_HOURS),
        description="Ticket age per tier after which it escalates (null = never)"
    )
    low_confidence_threshold: float = Field(default=0.6, ge=0.0, le=1.0)
    critical_tags: List[str] = Field(
        default_factory=lambda: ["security", "breach", "enterprise", "critical"]
    )

    @field_validator("max_age_hours")
    @classmethod
    def validate_max_age_hours(
        cls, v: Dict[str, Optional[float]]
    ) -> Dict[str, Optional[float]]:
        """Fill in missing tiers and reject unknown or negative entries."""
        for tier, hours in v.items():
            if tier not in VALID_TIERS:
                raise ValueError(f"unknown tier in max_age_hours: {tier}")
            if hours is not None and hours < 0:
                raise ValueError(f"max_age_hours for {tier} must be positive")

        for tier in VALID_TIERS:
            if tier not in v:
                v[tier] = DEFAULT_MAX_AGE_HOURS[tier]

        return v


class TextRules(BaseModel):
    """Ticket title and description generation."""
    title_max_length: int = Field(default=80, ge=1)
    description_max_length: int = Field(default=200, ge=1)
    default_title: str = Field(default="Support Request")
    ellipsis: str = Field(default="...")


class EngineRules(BaseModel):
    """
    Complete rule set for the engine.

    This is a value object - treat it as immutable and swap the whole object
    on reload.
    """
    priority: PriorityRules = Field(default_factory=PriorityRules)
    tier: TierRules = Field(default_factory=TierRules)
    sla_hours: Dict[str, int] = Field(
        default_factory=lambda: dict(DEFAULT_SLA_HOURS),
        description="Response deadline in hours by priority"
    )
    matching: MatchingRules = Field(default_factory=MatchingRules)
    escalation: EscalationRules = Field(default_factory=EscalationRules)
    text: TextRules = Field(default_factory=TextRules)

    @field_validator("sla_hours")
    @classmethod
    def validate_sla_hours(cls, v: Dict[str, int]) -> Dict[str, int]:
        """Validate SLA hours have every priority."""
        for priority, hours in v.items():
            if priority not in VALID_PRIORITIES:
                raise ValueError(f"unknown priority in sla_hours: {priority}")
            if hours <= 0:
                raise ValueError(f"sla_hours for {priority} must be positive")

        for priority in VALID_PRIORITIES:
            if priority not in v:
                v[priority] = DEFAULT_SLA_HOURS[priority]

        return v

    def get_sla_hours(self, priority: Priority) -> int:
        """Hours until the response deadline for a priority."""
        return self.sla_hours[Priority(priority).value]

    def get_max_age(self, tier: TicketTier) -> Optional[timedelta]:
        """Age after which a ticket at this tier escalates, None for never."""
        hours = self.escalation.max_age_hours.get(TicketTier(tier).value)
        if hours is None:
            return None
        return timedelta(hours=hours)
