"""
URL, organizer, contact and application-method extraction.

URLs are classified as registration links or general website links by
looking at the words around them; everything else is label-driven.
"""

import re
import logging
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

from campus_assistant.services.nlp.text_utils import find_label_value

logger = logging.getLogger(__name__)

REGISTRATION_KEYWORDS = ['register', 'registration', 'sign up', 'signup', 'join', 'enroll', 'enrol', 'apply', 'rsvp']

# Bare domains are only recognised on these TLDs so "notes.pdf" is not a link
_BARE_TLDS = (
    'com|org|net|edu|gov|io|ai|app|dev|info|co|in|uk|ie|us|ca|au|me|ly|ac|tech|xyz'
)

_URL_RE = re.compile(
    r'(?:https?://[^\s<>"\'()]+'
    r'|\bwww\.[^\s<>"\'()]+'
    r'|(?<![@\w.-])(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+(?:' + _BARE_TLDS + r')\b(?:/[^\s<>"\'()]*)?)',
    re.IGNORECASE,
)

_EMAIL_RE = re.compile(r'\b[\w.+-]+@[\w-]+(?:\.[\w-]+)+\b')

# Sentence boundaries used to clip the registration-keyword window
_SENTENCE_BREAK_RE = re.compile(r'[.!?](?:\s+|$)|\n')

ORGANIZER_PATTERNS = [
    re.compile(r'\borgani[sz]ed\s+by\s*:?\s*([^,.\n;]+)', re.IGNORECASE),
    re.compile(r'\borgani[sz]er\s*:?\s+([^,.\n;]+)', re.IGNORECASE),
    re.compile(r'\bhosted\s+by\s*:?\s*([^,.\n;]+)', re.IGNORECASE),
    re.compile(r'\bpresented\s+by\s*:?\s*([^,.\n;]+)', re.IGNORECASE),
]

_HONORIFIC = r'(?:(?:prof|dr|mr|mrs|ms|mx|sr|jr)\.\s*)?'

CONTACT_PATTERNS = [
    re.compile(
        r'\bcontact(?:\s+(?:info(?:rmation)?|person|details))?\s*:?\s+'
        rf'({_HONORIFIC}[^\s,;\n]+(?:\s+(?!for\b|at\b|on\b|or\b|to\b|with\b)[^\s,;\n]+)*?)'
        r'(?=\s+(?:for|at|on|or|to|with)\b|[,;\n]|\.(?:\s|$)|$)',
        re.IGNORECASE,
    ),
    re.compile(r'\be-?mail\s*:?\s+([\w.+-]+@[\w-]+(?:\.[\w-]+)+)', re.IGNORECASE),
    re.compile(r'\b(?:phone|tel|call)\s*:?\s+(\+?[\d][\d\s()-]{5,}\d)', re.IGNORECASE),
]

APPLICATION_PATTERNS = [
    re.compile(r'\bhow\s+to\s+apply\s*:?\s*([^.\n;]+)', re.IGNORECASE),
    re.compile(r'\bapply\s+by\s*:?\s*([^.\n;]+)', re.IGNORECASE),
    re.compile(r'\bapplication\s+process\s*:?\s*([^.\n;]+)', re.IGNORECASE),
    re.compile(r'\bregister\s+by\s*:?\s*([^.\n;]+)', re.IGNORECASE),
]

ADDITIONAL_DETAILS_LABELS = [r'additional\s+details', r'additional\s+info(?:rmation)?']


def normalize_url(candidate: str) -> str:
    """Strip trailing punctuation and add https:// to scheme-less URLs."""
    url = candidate.strip().rstrip('.,;:!?*')
    if not re.match(r'^https?://', url, re.IGNORECASE):
        url = 'https://' + url
    return url


def is_valid_url(url: Optional[str]) -> bool:
    if not url or re.search(r'\s', url):
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    host = parsed.hostname or ''
    return parsed.scheme in ('http', 'https') and '.' in host and not host.startswith('.')


def find_urls(text: str) -> List[Tuple[str, int, int]]:
    """
    All valid URLs in text as (normalized_url, start, end) spans.
    Invalid candidates are dropped.
    """
    urls = []
    for match in _URL_RE.finditer(text or ''):
        url = normalize_url(match.group(0))
        if is_valid_url(url):
            end = match.start() + len(match.group(0).rstrip('.,;:!?*'))
            urls.append((url, match.start(), end))
        else:
            logger.debug(f"Discarding malformed URL candidate: {match.group(0)!r}")
    return urls


def _sentence_window(text: str, start: int, end: int, window: int) -> str:
    """Text up to `window` chars either side of [start, end), clipped to the enclosing sentence."""
    lo = max(0, start - window)
    hi = min(len(text), end + window)

    before = text[lo:start]
    breaks = list(_SENTENCE_BREAK_RE.finditer(before))
    if breaks:
        lo += breaks[-1].end()

    after = text[end:hi]
    brk = _SENTENCE_BREAK_RE.search(after)
    if brk:
        hi = end + brk.start()

    return text[lo:hi].lower()


def _first_match(patterns, text: str) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            value = match.group(1).strip().rstrip('.,;:')
            if value:
                return value
    return None


def extract_links(text: str, window: int = 50) -> Dict[str, Optional[str]]:
    """
    Extract URL and contact style optional fields.

    Returns a dict with website_url, registration_link, organizer,
    contact_info, application_method and additional_details; missing
    fields are None.
    """
    result: Dict[str, Optional[str]] = {
        'website_url': None,
        'registration_link': None,
        'organizer': None,
        'contact_info': None,
        'application_method': None,
        'additional_details': None,
    }
    if not text:
        return result

    # Explicit labels win over context classification
    for field, labels in (
        ('registration_link', [r'registration(?:\s+link)?', r'register\s+at']),
        ('website_url', [r'website(?:\s+url)?']),
    ):
        value = find_label_value(text, labels, stop=r'\s')
        if value:
            url = normalize_url(value)
            if is_valid_url(url):
                result[field] = url

    for url, start, end in find_urls(text):
        if url in (result['website_url'], result['registration_link']):
            continue
        context = _sentence_window(text, start, end, window)
        if any(keyword in context for keyword in REGISTRATION_KEYWORDS):
            if not result['registration_link']:
                result['registration_link'] = url
        elif not result['website_url']:
            result['website_url'] = url

    result['organizer'] = _first_match(ORGANIZER_PATTERNS, text)
    result['contact_info'] = _first_match(CONTACT_PATTERNS, text)
    if not result['contact_info']:
        email = _EMAIL_RE.search(text)
        if email:
            result['contact_info'] = email.group(0)
    result['application_method'] = _first_match(APPLICATION_PATTERNS, text)
    result['additional_details'] = find_label_value(text, ADDITIONAL_DETAILS_LABELS)

    found = [field for field, value in result.items() if value]
    if found:
        logger.debug(f"Link/contact fields found: {found}")
    return result
