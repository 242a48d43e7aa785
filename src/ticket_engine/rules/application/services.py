"""
Rules Application Services
==========================

Provider interface through which other contexts read the current rule set.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ticket_engine.rules.domain import EngineRules


class IRulesProvider(ABC):
    """Interface for rule set access."""

    @abstractmethod
    def get_rules(self) -> EngineRules:
        """Get the current rule set."""


class StaticRulesProvider(IRulesProvider):
    """Serves one fixed rule set, the defaults unless given."""

    def __init__(self, rules: Optional[EngineRules] = None):
        self._rules = rules or EngineRules()

    def get_rules(self) -> EngineRules:
        return self._rules
