"""Small text helpers shared by the field extractors."""

import re
from typing import List, Optional, Sequence


# Salutations that open announcements but never carry the event name
GREETING_PATTERNS = [
    re.compile(r'^dear\s+(?:students?|friends?|colleagues?|all|everyone|sir|madam|members?)\b', re.IGNORECASE),
    re.compile(r'^(?:hi|hey)(?:\s+(?:all|everyone|there|folks|guys))?\s*[,.!]?\s*$', re.IGNORECASE),
    re.compile(r'^hello(?:\s+(?:all|everyone|there|folks))?\s*[,.!]?\s*$', re.IGNORECASE),
    re.compile(r'^greetings\b', re.IGNORECASE),
    re.compile(r'^good\s+(?:morning|afternoon|evening)\b', re.IGNORECASE),
    re.compile(r'^attention\s+(?:students?|all|everyone)\b', re.IGNORECASE),
    re.compile(r'^to\s+(?:all|whom\s+it\s+may\s+concern)\b', re.IGNORECASE),
]


def capitalize_words(text: str) -> str:
    """
    Upper-case the first character of every space-separated word.
    The rest of each word is left alone so acronyms survive ("AI", "IEEE").
    """
    return ' '.join(word[:1].upper() + word[1:] for word in text.split(' '))


def is_greeting(line: str) -> bool:
    stripped = line.strip()
    return any(pattern.match(stripped) for pattern in GREETING_PATTERNS)


def content_lines(text: str) -> List[str]:
    """Non-empty, stripped lines of text that are not salutations."""
    return [
        line.strip() for line in (text or '').splitlines()
        if line.strip() and not is_greeting(line)
    ]


def find_label_value(text: str, labels: Sequence[str], stop: str = r'\n') -> Optional[str]:
    """
    Return the value following the first "<label>:" found in text.

    Labels are regex fragments tried in order; the value runs until a
    character in the `stop` class and is stripped of trailing punctuation.
    """
    for label in labels:
        pattern = rf'(?:^|\b){label}\s*:\s*([^{stop}]+)'
        match = re.search(pattern, text or '', re.IGNORECASE)
        if match:
            value = match.group(1).strip().rstrip('.,;')
            if value:
                return value
    return None


def slugify(value: str) -> str:
    return re.sub(r'\s+', '-', value.strip().lower())
