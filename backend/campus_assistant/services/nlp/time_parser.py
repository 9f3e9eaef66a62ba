"""
Time parser for free-text event announcements.
Handles 12-hour times introduced by "at"/"from"/"time:", bare 24-hour
times and the noon/midnight keywords.
"""

import re
from typing import Optional, Dict
import logging

logger = logging.getLogger(__name__)


class TimeParser:
    """Ordered-pattern time parser returning {'hour': H, 'minute': M} in 24-hour form."""

    def __init__(self):
        # Special time keywords
        self.special_times = {
            'noon': {'hour': 12, 'minute': 0},
            'midnight': {'hour': 0, 'minute': 0},
        }

        clock = r'(\d{1,2})(?:\s*[:.]\s*(\d{2}))?\s*(am|pm|a\.m\.|p\.m\.)(?![a-z])'

        # (name, compiled pattern) in priority order
        self.patterns = [
            ('at_12hour', re.compile(rf'\bat\s+{clock}', re.IGNORECASE)),
            ('from_12hour', re.compile(rf'\bfrom\s+{clock}', re.IGNORECASE)),
            ('label_12hour', re.compile(rf'\btime\s*:\s*{clock}', re.IGNORECASE)),
            ('24hour_format', re.compile(r'(?<![\d:])(\d{1,2}):(\d{2})(?::\d{2})?(?![\d:]|\s*(?:am|pm))', re.IGNORECASE)),
            ('bare_12hour', re.compile(rf'(?<![\d:.])\b{clock}', re.IGNORECASE)),
        ]

    @staticmethod
    def _normalize(text: str) -> str:
        """
        Normalise informal spellings before parsing.

        - "6 : 30 pm" → "6:30 pm"
        - "5 o'clock" → "5:00"
        - "13h30"     → "13:30"
        """
        t = text
        t = re.sub(r'(\d)\s*:\s*(\d)', r'\1:\2', t)
        t = re.sub(r"(\d{1,2})\s+o'?clock\b", r'\1:00', t, flags=re.IGNORECASE)
        t = re.sub(r'\b([01]?\d|2[0-3])h([0-5]\d)\b', r'\1:\2', t, flags=re.IGNORECASE)
        return t

    def parse_time(self, text: str) -> Optional[Dict[str, int]]:
        """
        Parse the first valid time in text.

        Returns:
            Dict with 'hour' and 'minute' keys, or None if no valid time found
        """
        if not text:
            return None
        text = self._normalize(text)

        for pattern_type, pattern in self.patterns:
            for match in pattern.finditer(text):
                time_dict = self._from_match(pattern_type, match)
                if time_dict and self._validate_time(time_dict['hour'], time_dict['minute']):
                    logger.debug(f"Selected time: {format_time(time_dict)} (pattern: {pattern_type})")
                    return time_dict
                logger.debug(f"Invalid time candidate rejected: {pattern_type} -> {match.group(0)!r}")

        for keyword, time_dict in self.special_times.items():
            if re.search(rf'\b{keyword}\b', text, re.IGNORECASE):
                return time_dict.copy()

        return None

    def parse_value(self, value: str) -> Optional[Dict[str, int]]:
        """
        Parse a bare time value from a form field: "15:00", "15:00:00", "3pm", "3:30 PM".
        """
        if not value:
            return None
        value = self._normalize(value.strip())

        match = re.fullmatch(r'(\d{1,2}):(\d{2})(?::\d{2})?', value)
        if match:
            hour, minute = int(match.group(1)), int(match.group(2))
            if self._validate_time(hour, minute):
                return {'hour': hour, 'minute': minute}
            return None

        match = re.fullmatch(r'(\d{1,2})(?:[:.](\d{2}))?\s*(am|pm|a\.m\.|p\.m\.)', value, re.IGNORECASE)
        if match:
            return self._from_match('label_12hour', match)

        return self.parse_time(value)

    def _from_match(self, pattern_type: str, match: re.Match) -> Optional[Dict[str, int]]:
        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0
        if pattern_type == '24hour_format':
            return {'hour': hour, 'minute': minute}

        period = match.group(3).replace('.', '').upper()
        hour = self._convert_to_24h(hour, period)
        if hour is None:
            return None
        return {'hour': hour, 'minute': minute}

    def _convert_to_24h(self, hour: int, period: str) -> Optional[int]:
        """
        Convert 12-hour format to 24-hour format.

        Args:
            hour: Hour in 12-hour format (1-12)
            period: 'AM' or 'PM'

        Returns:
            Hour in 24-hour format (0-23), or None if invalid
        """
        if not (1 <= hour <= 12):
            return None

        if period == 'AM':
            return 0 if hour == 12 else hour
        elif period == 'PM':
            return 12 if hour == 12 else hour + 12
        else:
            logger.warning(f"Invalid period: {period}")
            return None

    def _validate_time(self, hour: int, minute: int) -> bool:
        """Validate that time is a real clock time."""
        return 0 <= hour <= 23 and 0 <= minute <= 59


def format_time(time_dict: Dict[str, int]) -> str:
    return f"{time_dict['hour']:02d}:{time_dict['minute']:02d}"
