"""
Rules Module
============

Bounded Context for the decision tables shared by triage, assignment and
escalation.

Responsibilities:
- Hold tag sets, SLA hours, matching and escalation thresholds
- Load them from YAML and hot-reload on change
"""

__version__ = "1.0.0"
