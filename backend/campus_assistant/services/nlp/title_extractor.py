"""
Title and description extraction.

A title is looked for line by line, skipping salutations, trying increasingly
loose patterns on each line:
  1. explicit labels            "Title: ...", "Event: ..."
  2. announcement lead-ins      "... proudly presents ...", "Announcing ..."
  3. domain-noun sentences      "Workshop on Machine Learning on March 15th ..."
  4. year-adjacent phrases      "TechFest 2024"
If nothing matches, the first content line (truncated) is used.
"""

import re
import logging
from typing import List, Optional

from campus_assistant.services.nlp.text_utils import capitalize_words, content_lines, find_label_value

logger = logging.getLogger(__name__)

EVENT_TITLE_LABELS = ['title', 'event', 'name', 'topic', 'subject']
# For resources "subject:" names the subject field, not the title
RESOURCE_TITLE_LABELS = ['title', 'name', 'topic']

DESCRIPTION_LABELS = ['description', 'about', 'details']

DOMAIN_NOUNS = [
    'event', 'festival', 'fest', 'competition', 'tournament', 'conference',
    'workshop', 'seminar', 'hackathon', 'symposium', 'webinar', 'lecture',
    'meetup', 'fair', 'summit', 'bootcamp', 'exhibition', 'concert',
]

_MONTHS = (
    r'january|february|march|april|may|june|july|august|september|october|november|december|'
    r'jan|feb|mar|apr|jun|jul|aug|sept|sep|oct|nov|dec'
)
_WEEKDAYS = r'monday|tuesday|wednesday|thursday|friday|saturday|sunday'

_LEAD_IN_RE = re.compile(
    r'\b(?:proudly\s+presents|presents|announcing|we\s+are\s+(?:excited|pleased|happy)\s+to\s+announce)'
    r'\s*:?\s+(?:the\s+|our\s+)?([^\n.!?]+)',
    re.IGNORECASE,
)

_DOMAIN_NOUN_RE = re.compile(r'\b(?:' + '|'.join(DOMAIN_NOUNS) + r')s?\b', re.IGNORECASE)

_YEAR_PHRASE_RE = re.compile(
    r'\b((?:[A-Za-z][\w&\'-]*\s+){1,3}(?:19|20)\d{2}'
    r'(?:\s+(?:' + '|'.join(DOMAIN_NOUNS) + r'))?)\b',
    re.IGNORECASE,
)

# Where a title stops: the first temporal or locative clause
_CLAUSE_BOUNDARY_RE = re.compile(
    r'\s+(?:'
    rf'on\s+(?:the\s+)?(?:\d|(?i:{_MONTHS}|{_WEEKDAYS})\b)'
    r'|at\s+\d'
    r'|at\s+(?:the\s+)?[A-Z]'
    r'|in\s+the\b'
    r'|from\s+\d'
    rf'|(?i:{_MONTHS})\.?\s+\d{{1,2}}(?!\d)'
    r'|(?:this|next)\s+(?i:week|weekend|month|' + _WEEKDAYS + r')\b'
    r'|(?:today|tomorrow|tonight)\b'
    r'|(?:starting|starts|begins)\b'
    r')',
)

_BARE_DATE_RE = re.compile(r'^\d{1,4}[-/]\d{1,2}[-/]\d{1,4}$')


def _first_sentence(line: str) -> str:
    # Sentence ends at . ! ? followed by whitespace or end of line; keeps "ml-workshop.com" intact
    return re.split(r'(?<=[.!?])\s+|[.!?]+$', line, maxsplit=1)[0].strip()


def _trim_clause(candidate: str) -> str:
    match = _CLAUSE_BOUNDARY_RE.search(candidate)
    if match and match.start() > 0:
        candidate = candidate[:match.start()]
    return candidate.strip(' \t,;:-–!.')


def _acceptable(candidate: Optional[str]) -> bool:
    if not candidate:
        return False
    candidate = candidate.strip()
    return len(candidate) > 3 and not _BARE_DATE_RE.match(candidate)


def _title_from_line(line: str, labels: List[str]) -> Optional[str]:
    # 1. Explicit labels
    labelled = find_label_value(line, labels)
    if _acceptable(labelled):
        return labelled

    # 2. Announcement lead-ins
    match = _LEAD_IN_RE.search(line)
    if match:
        candidate = _trim_clause(match.group(1))
        if _acceptable(candidate):
            return candidate

    # 3. First sentence naming the kind of event
    sentence = _first_sentence(line)
    if _DOMAIN_NOUN_RE.search(sentence):
        candidate = _trim_clause(sentence)
        if _acceptable(candidate) and _DOMAIN_NOUN_RE.search(candidate):
            return candidate

    # 4. "<Name> 2024"
    match = _YEAR_PHRASE_RE.search(line)
    if match:
        candidate = match.group(1).strip()
        if _acceptable(candidate):
            return candidate

    return None


def extract_title(text: str, kind: str = 'event', max_length: int = 50) -> Optional[str]:
    """
    Extract a title from free text.

    Args:
        text: Announcement text
        kind: 'event' or 'resource' (selects the label set)
        max_length: Fallback first-line titles longer than this are truncated

    Returns:
        Capitalized title, or None when text is empty or only salutations
    """
    lines = content_lines(text)
    if not lines:
        return None

    labels = RESOURCE_TITLE_LABELS if kind == 'resource' else EVENT_TITLE_LABELS

    for line in lines:
        title = _title_from_line(line, labels)
        if title:
            logger.debug(f"Title from pattern: {title!r}")
            return capitalize_words(title)

    first = lines[0]
    if len(first) > max_length:
        first = first[:max_length - 3].rstrip() + '...'
    logger.debug(f"Title from first line: {first!r}")
    return capitalize_words(first)


def extract_description(text: str) -> Optional[str]:
    """Value of an explicit "Description:"/"About:"/"Details:" label, if any."""
    return find_label_value(text, DESCRIPTION_LABELS)
