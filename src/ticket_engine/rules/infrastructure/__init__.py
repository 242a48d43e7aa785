"""
Rules Infrastructure Layer
==========================
"""

from ticket_engine.rules.infrastructure.external import RulesConfigManager, RulesFileHandler

__all__ = ["RulesConfigManager", "RulesFileHandler"]
