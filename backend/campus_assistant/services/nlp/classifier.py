"""
Keyword-overlap classifier shared by event categories, resource types and
resource subjects.
"""

import re
import logging
from typing import Dict, Optional

from campus_assistant.services.nlp.taxonomy import Taxonomy

logger = logging.getLogger(__name__)


def keyword_in_text(keyword: str, text: str) -> bool:
    """
    Match keyword in lowercase text.
    Short keywords (4 chars or fewer) must be whole words, optionally plural ("exam" matches "exams").
    """
    if len(keyword) <= 4:
        return bool(re.search(r'\b' + re.escape(keyword) + r'(?:e?s)?\b', text))
    return keyword in text


class KeywordClassifier:
    """Maps free text or a loosely-typed label onto a member of one taxonomy."""

    def __init__(self, taxonomy: Taxonomy):
        self.taxonomy = taxonomy

    def score(self, text: str) -> Dict[str, int]:
        """Count distinct keyword hits per taxonomy member."""
        text_lower = (text or '').lower()
        return {
            value: sum(1 for kw in keywords if keyword_in_text(kw, text_lower))
            for value, keywords in self.taxonomy.keywords.items()
        }

    def best_match(self, text: str) -> str:
        """
        Highest-scoring member for text.
        Ties and zero-hit texts resolve to the taxonomy fallback.
        """
        scores = self.score(text)
        top = max(scores.values(), default=0)
        if top == 0:
            return self.taxonomy.fallback

        leaders = [value for value, hits in scores.items() if hits == top]
        if len(leaders) > 1:
            logger.debug(f"{self.taxonomy.name}: tie between {leaders}, using fallback")
            return self.taxonomy.fallback
        return leaders[0]

    def closest(self, value: str) -> str:
        """
        Map an explicit label value (e.g. "category: sports day") onto a member.

        Order: exact case-insensitive match, substring containment in either
        direction, then keyword scoring of the value itself.
        """
        wanted = (value or '').strip().lower()
        if not wanted:
            return self.taxonomy.fallback

        exact = self.taxonomy.canonical(wanted)
        if exact:
            return exact

        for member in self.taxonomy.values:
            member_lower = member.lower()
            if member_lower in wanted or wanted in member_lower:
                return member

        return self.best_match(wanted)

    def classify(self, text: str, explicit: Optional[str] = None) -> str:
        if explicit:
            result = self.closest(explicit)
            logger.debug(f"{self.taxonomy.name}: explicit {explicit!r} -> {result}")
            return result
        return self.best_match(text)


def classify_category(text: str, taxonomy: Taxonomy, explicit: Optional[str] = None) -> str:
    """Classify text (or an explicit label value) into a member of taxonomy."""
    return KeywordClassifier(taxonomy).classify(text, explicit)
