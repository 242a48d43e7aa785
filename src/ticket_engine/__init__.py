"""
Ticket Engine
=============

Ticket triage, assignment and escalation for finished support chats.

Modules:
- triage: priority/tier classification, knowledge base matching
- assignment: agent selection and capacity-safe assignment
- sla: response deadlines
- tickets: ticket creation, escalation, escalation sweep
- rules: decision tables, YAML loading and hot-reload
"""

__version__ = "1.0.0"
