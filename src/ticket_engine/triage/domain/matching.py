"""
Knowledge Base Matching
=======================

Deterministic keyword-overlap scoring of knowledge base entries.

    match_score = |{k in keywords : len(k) >= min_len and k in entry_text}| / |keywords|

The keyword set is the lower-cased whitespace-split description plus the
ticket tags. An empty keyword set scores 0 against every entry.
"""

from dataclasses import replace
from typing import Iterable, List, Optional, Set, Tuple

from ticket_engine.rules.domain import EngineRules
from ticket_engine.triage.domain.entities import KnowledgeBaseEntry


class KnowledgeBaseMatcher:
    """Scores and ranks knowledge base entries for a ticket."""

    def __init__(self, rules: Optional[EngineRules] = None):
        self._rules = (rules or EngineRules()).matching

    @staticmethod
    def build_keywords(description: str, tags: Iterable[str]) -> Set[str]:
        """Keyword set for a query."""
        keywords = set(description.lower().split())
        keywords.update(tags)
        return keywords

    def match_score(self, keywords: Set[str], entry: KnowledgeBaseEntry) -> float:
        """Fraction of keywords found in the entry, within [0, 1]."""
        if not keywords:
            return 0.0

        text = entry.searchable_text
        matches = sum(
            1 for keyword in keywords
            if len(keyword) >= self._rules.min_keyword_length and keyword in text
        )
        return min(max(matches / len(keywords), 0.0), 1.0)

    def rank(
        self,
        description: str,
        tags: Iterable[str],
        entries: Iterable[KnowledgeBaseEntry]
    ) -> List[Tuple[KnowledgeBaseEntry, float]]:
        """
        Score every entry, best first.

        Ties keep the order the entries were supplied in.
        """
        keywords = self.build_keywords(description, tags)
        scored = [(entry, self.match_score(keywords, entry)) for entry in entries]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored

    def find_suggestions(
        self,
        description: str,
        tags: Iterable[str],
        entries: Iterable[KnowledgeBaseEntry]
    ) -> List[KnowledgeBaseEntry]:
        """
        Suggestions above the match threshold, at most max_suggestions.

        Each returned entry is a copy whose confidence is its score
        for this query.
        """
        suggestions = [
            replace(entry, confidence=score)
            for entry, score in self.rank(description, tags, entries)
            if score > self._rules.match_threshold
        ]
        return suggestions[:self._rules.max_suggestions]
