"""
Tickets Module
==============

Bounded Context for the ticket lifecycle: creation from chat and escalation.

Responsibilities:
- Create tickets from finished chat sessions
- Decide when tickets escalate and move them through the tiers
- Sweep open tickets periodically for escalation
"""

__version__ = "1.0.0"
