"""
Configuration Module
====================

Application settings and shared enumerations using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Engine settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="ticket-engine", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Decision Rules ==========
    rules_config_path: Path = Field(
        default=Path("engine_rules.yaml"),
        description="Path to the triage/escalation rules YAML file"
    )
    watch_rules_config: bool = Field(
        default=True,
        description="Reload the rules file when it changes on disk"
    )

    # ========== Assignment ==========
    assignment_max_attempts: int = Field(
        default=3,
        description="Selection retries when an agent fills up between snapshot and commit",
        ge=1,
        le=20
    )

    # ========== Escalation Sweep ==========
    escalation_sweep_interval: int = Field(
        default=300,
        description="Seconds between escalation sweeps over open tickets",
        ge=10
    )
    system_actor: str = Field(
        default="system",
        description="escalated_by value recorded for automatic escalations"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# ========== Constants ==========

class Priority(str, Enum):
    """Ticket priority levels, lowest first."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TicketTier(str, Enum):
    """Support tiers, in escalation order."""
    TIER1 = "tier1"
    TIER2 = "tier2"
    TIER3 = "tier3"
    ESCALATED = "escalated"


class TicketStatus(str, Enum):
    """Ticket lifecycle statuses."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    PENDING_CUSTOMER = "pending_customer"
    RESOLVED = "resolved"
    CLOSED = "closed"


class TicketSource(str, Enum):
    """Channel a ticket was raised through."""
    CHAT = "chat"
    EMAIL = "email"
    PHONE = "phone"
    WEB_FORM = "web_form"
    API = "api"


class Platform(str, Enum):
    """Messaging platform a chat session ran on."""
    WEB = "web"
    WHATSAPP = "whatsapp"
    FACEBOOK = "facebook"
    INSTAGRAM = "instagram"
    LINE = "line"
    DISCORD = "discord"
    TELEGRAM = "telegram"
    OTHER = "other"


class AgentStatus(str, Enum):
    """Human agent availability."""
    ONLINE = "online"
    BUSY = "busy"
    OFFLINE = "offline"


class Satisfaction(str, Enum):
    """Coarse customer satisfaction captured at the end of a chat."""
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class MessageSender(str, Enum):
    """Author of a chat message."""
    BOT = "bot"
    USER = "user"
    AGENT = "agent"


# ========== Lists for validation ==========

PRIORITY_ORDER = [Priority.LOW, Priority.MEDIUM, Priority.HIGH, Priority.CRITICAL]
TIER_ORDER = [TicketTier.TIER1, TicketTier.TIER2, TicketTier.TIER3, TicketTier.ESCALATED]
OPEN_STATUSES = [TicketStatus.OPEN, TicketStatus.IN_PROGRESS, TicketStatus.PENDING_CUSTOMER]
VALID_PRIORITIES = [p.value for p in PRIORITY_ORDER]
VALID_TIERS = [t.value for t in TIER_ORDER]
