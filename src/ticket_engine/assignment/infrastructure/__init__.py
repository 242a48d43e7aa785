"""
Assignment Infrastructure Layer
===============================
"""

from ticket_engine.assignment.infrastructure.repositories import (
    SAMPLE_AGENTS,
    InMemoryAgentDirectory,
)

__all__ = ["SAMPLE_AGENTS", "InMemoryAgentDirectory"]
