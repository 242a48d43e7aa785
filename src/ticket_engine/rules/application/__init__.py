"""
Rules Application Layer
=======================
"""

from ticket_engine.rules.application.services import IRulesProvider, StaticRulesProvider

__all__ = ["IRulesProvider", "StaticRulesProvider"]
