"""
Core Exceptions
================

Error types shared by every bounded context.

Everything derives from ApplicationException, which carries a message and a
details dict for structured logging. Degenerate inputs (no tags, no matching
knowledge, no free agent) are valid outcomes and never raise.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class ValidationException(ApplicationException):
    """Exception for malformed input payloads."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class AgentCapacityException(DomainException):
    """Raised when an agent can no longer accept a ticket at commit time."""

    def __init__(
        self,
        agent_id: str,
        current_tickets: int,
        max_tickets: int,
        details: Optional[dict] = None
    ):
        self.agent_id = agent_id
        self.current_tickets = current_tickets
        self.max_tickets = max_tickets
        super().__init__(
            f"Agent {agent_id} cannot accept another ticket "
            f"({current_tickets}/{max_tickets})",
            details or {
                "agent_id": agent_id,
                "current_tickets": current_tickets,
                "max_tickets": max_tickets,
            }
        )
