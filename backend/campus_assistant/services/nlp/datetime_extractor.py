import re
from datetime import date, datetime
from typing import Dict, Optional, Tuple

import pytz

from campus_assistant.services.nlp.date_parser import DateParser, format_date
from campus_assistant.services.nlp.time_parser import TimeParser, format_time

_date_parser = DateParser()
_time_parser = TimeParser()

# "2025-03-15 14:30", "2025-03-15T14:30:00", "2025/03/15 2:30 pm"
_COMBINED_RE = re.compile(
    r'^\s*(\d{4}[-/]\d{1,2}[-/]\d{1,2})(?:[T\s]+(\d{1,2}:\d{2}(?::\d{2})?(?:\s*[ap]\.?m\.?)?))?'
    r'(?:\.\d+)?(?:Z|[+-]\d{2}:?\d{2})?\s*$',
    re.IGNORECASE,
)


def extract_datetime(text: str, reference_date: date) -> Dict[str, Optional[str]]:
    """
    Run the date and time parsers independently over text.

    Returns {'date': 'YYYY-MM-DD' or None, 'time': 'HH:MM' or None}.
    """
    parsed_date = _date_parser.parse_date(text, reference_date)
    parsed_time = _time_parser.parse_time(text)
    return {
        'date': format_date(parsed_date) if parsed_date else None,
        'time': format_time(parsed_time) if parsed_time else None,
    }


def split_datetime(value: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a combined "YYYY-MM-DD HH:MM" value (as manual forms submit it)
    into canonical date and time strings. Returns (None, None) when value is
    not in that shape.
    """
    if not value:
        return None, None
    match = _COMBINED_RE.match(value)
    if not match:
        return None, None

    parsed_date = _date_parser.parse_value(match.group(1), date.today())
    if parsed_date is None:
        return None, None

    parsed_time = _time_parser.parse_value(match.group(2)) if match.group(2) else None
    return format_date(parsed_date), format_time(parsed_time) if parsed_time else None


def normalize_date(value: Optional[str], reference_date: date) -> Optional[str]:
    """Canonicalise a loosely formatted date value, or None if it cannot be read."""
    parsed = _date_parser.parse_value(value, reference_date) if value else None
    return format_date(parsed) if parsed else None


def normalize_time(value: Optional[str]) -> Optional[str]:
    """Canonicalise a loosely formatted time value, or None if it cannot be read."""
    parsed = _time_parser.parse_value(value) if value else None
    return format_time(parsed) if parsed else None


def local_today(timezone_name: str) -> date:
    """Today's date in the named timezone."""
    return datetime.now(pytz.timezone(timezone_name)).date()
