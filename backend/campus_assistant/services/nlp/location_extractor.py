import re
import logging
from typing import Optional

from campus_assistant.services.nlp.text_utils import find_label_value

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = 'Main Campus'

LOCATION_LABELS = ['location', 'venue', 'place', 'where']

# "at the Library on Friday": place bounded by a following temporal preposition
_AT_BOUNDED_RE = re.compile(
    r'\bat\s+([^\n.;,]+?)(?=\s+(?:on|at|from|till|until|to)\s+)',
    re.IGNORECASE,
)

# "in the Main Auditorium", "at Newman Hall": capitalised place phrase (case-sensitive)
_CAPITALISED_PLACE_RE = re.compile(
    r"\b(?:in|at|At|In)\s+(?:the\s+)?"
    r"((?:[A-Z][\w'&-]*|\d+[A-Z]?)(?:\s+(?:[A-Z][\w'&-]*|\d+[A-Z]?|of|and|&))*)"
)

_NOT_A_PLACE_RE = re.compile(
    r'^(?:\d{1,2}(?::\d{2})?\s*(?:am|pm)?|noon|midnight|'
    r'january|february|march|april|may|june|july|august|september|october|november|december|'
    r'monday|tuesday|wednesday|thursday|friday|saturday|sunday|'
    r'today|tomorrow|tonight|am|pm)\b',
    re.IGNORECASE,
)


def _clean_place(candidate: str) -> Optional[str]:
    candidate = candidate.strip().rstrip('.,;:!')
    candidate = re.sub(r'^the\s+', '', candidate, flags=re.IGNORECASE)
    # Trailing connectives left by the capitalised-phrase pattern
    candidate = re.sub(r'(?:\s+(?:of|and|&))+$', '', candidate)
    if len(candidate) < 2 or not re.search(r'[A-Za-z]', candidate):
        return None
    if '://' in candidate or candidate.lower().startswith('www.'):
        return None
    if _NOT_A_PLACE_RE.match(candidate):
        return None
    return candidate


def extract_location(text: str, default: Optional[str] = DEFAULT_LOCATION) -> Optional[str]:
    """
    Extract the venue from free text.

    Tries explicit "location:"/"venue:"/"place:" labels, then an "at <place>"
    phrase bounded by a following temporal preposition, then a capitalised
    place name after "in"/"at". Returns `default` when nothing matches.
    """
    if not text:
        return default

    labelled = find_label_value(text, LOCATION_LABELS, stop=r'\n;')
    if labelled:
        place = _clean_place(labelled)
        if place:
            logger.debug(f"Location from label: {place!r}")
            return place

    for pattern in (_AT_BOUNDED_RE, _CAPITALISED_PLACE_RE):
        for match in pattern.finditer(text):
            place = _clean_place(match.group(1))
            if place:
                logger.debug(f"Location from phrase: {place!r}")
                return place

    return default
