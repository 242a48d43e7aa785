"""
Rules Domain Layer
==================

Value objects describing the engine's decision tables.
"""

from ticket_engine.rules.domain.value_objects import (
    EngineRules,
    PriorityRules,
    TierRules,
    MatchingRules,
    EscalationRules,
    TextRules,
    DEFAULT_SLA_HOURS,
    DEFAULT_MAX_AGE_HOURS,
)

__all__ = [
    "EngineRules",
    "PriorityRules",
    "TierRules",
    "MatchingRules",
    "EscalationRules",
    "TextRules",
    "DEFAULT_SLA_HOURS",
    "DEFAULT_MAX_AGE_HOURS",
]
