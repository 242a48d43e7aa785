"""
SLA Domain Layer
================

Contains:
- Domain Services: SLACalculator

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from ticket_engine.sla.domain.value_objects import SLACalculator

__all__ = ["SLACalculator"]
