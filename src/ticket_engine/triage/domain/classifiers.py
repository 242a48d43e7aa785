"""
Triage Classifiers
==================

Rule-based priority and tier classification plus ticket text generation.

Priority and tier are independent axes: a tier1 ticket can be critical.
"""

from typing import Optional

from ticket_engine.config import Priority, Satisfaction, TicketTier
from ticket_engine.rules.domain import EngineRules
from ticket_engine.triage.domain.entities import ChatSession


class PriorityClassifier:
    """
    Derives ticket priority from chat session signals.

    Checks run in order and the first match wins:
    critical tags, then handoff or negative satisfaction,
    then medium tags, else low.
    """

    def __init__(self, rules: Optional[EngineRules] = None):
        self._rules = (rules or EngineRules()).priority

    def classify(self, session: ChatSession) -> Priority:
        if session.has_any_tag(self._rules.critical_tags):
            return Priority.CRITICAL

        if session.handoff_occurred or session.satisfaction == Satisfaction.NEGATIVE:
            return Priority.HIGH

        if session.has_any_tag(self._rules.medium_tags):
            return Priority.MEDIUM

        return Priority.LOW


class TierClassifier:
    """Picks the initial support tier from session tags."""

    def __init__(self, rules: Optional[EngineRules] = None):
        self._rules = (rules or EngineRules()).tier

    def classify(self, session: ChatSession) -> TicketTier:
        if session.has_any_tag(self._rules.tier3_tags):
            return TicketTier.TIER3

        if session.has_any_tag(self._rules.tier2_tags):
            return TicketTier.TIER2

        return TicketTier.TIER1


class TicketTextBuilder:
    """Builds ticket title and description from the chat transcript."""

    def __init__(self, rules: Optional[EngineRules] = None):
        self._rules = (rules or EngineRules()).text

    def build_description(self, session: ChatSession) -> str:
        """All customer messages joined by spaces, truncated."""
        text = " ".join(m.content for m in session.user_messages)
        return self._truncate(text, self._rules.description_max_length)

    def build_title(self, session: ChatSession) -> str:
        """First customer message, or the default title."""
        user_messages = session.user_messages
        title = user_messages[0].content if user_messages else ""
        return self._truncate(title or self._rules.default_title, self._rules.title_max_length)

    def _truncate(self, text: str, limit: int) -> str:
        if len(text) > limit:
            return text[:limit] + self._rules.ellipsis
        return text
