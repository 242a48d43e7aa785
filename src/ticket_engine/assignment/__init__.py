"""
Assignment Module
=================

Bounded Context for routing tickets to human agents.

Responsibilities:
- Choose the best available agent for a tier, favouring specialty matches
- Commit assignments without exceeding agent capacity under concurrency
"""

__version__ = "1.0.0"
