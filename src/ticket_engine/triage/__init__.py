"""
Triage Module
=============

Bounded Context for turning a finished chat session into triage signals.

Responsibilities:
- Classify priority from tags, handoff and satisfaction
- Pick the initial support tier from tags
- Build ticket title and description from the transcript
- Suggest knowledge base entries by keyword overlap
"""

__version__ = "1.0.0"
