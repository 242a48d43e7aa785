"""
Core Module
============

Shared core utilities and abstractions used across the engine.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from ticket_engine.core.clock import ensure_utc, utc_now
from ticket_engine.core.exceptions import (
    ApplicationException,
    DomainException,
    ValidationException,
    ResourceNotFoundException,
    ConfigurationException,
    AgentCapacityException,
)

__all__ = [
    "ensure_utc",
    "utc_now",
    "ApplicationException",
    "DomainException",
    "ValidationException",
    "ResourceNotFoundException",
    "ConfigurationException",
    "AgentCapacityException",
]
