"""
SLA Module
==========

Bounded Context for response-time service level agreements.

Responsibilities:
- Map ticket priority to a response deadline
- Raise priority one step on escalation, saturating at critical
"""

__version__ = "1.0.0"
