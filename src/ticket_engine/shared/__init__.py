"""
Shared Kernel Module
====================

Generic infrastructure used by every bounded context (triage, assignment,
sla, tickets).

DO NOT add triage, assignment or escalation rules to the shared kernel.
"""

__version__ = "1.0.0"
