"""
Date parser for free-text event announcements.
Tries each supported date format in priority order and returns the first
candidate that forms a real calendar date.
"""

import re
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple
import logging

logger = logging.getLogger(__name__)


class DateParser:
    """Ordered-pattern date parser. Missing years are taken from the reference date."""

    def __init__(self):
        # Month name mappings (full and abbreviated)
        self.month_map = {
            'january': 1, 'jan': 1,
            'february': 2, 'feb': 2,
            'march': 3, 'mar': 3,
            'april': 4, 'apr': 4,
            'may': 5,
            'june': 6, 'jun': 6,
            'july': 7, 'jul': 7,
            'august': 8, 'aug': 8,
            'september': 9, 'sept': 9, 'sep': 9,
            'october': 10, 'oct': 10,
            'november': 11, 'nov': 11,
            'december': 12, 'dec': 12
        }

        # Weekday mappings
        self.weekday_map = {
            'monday': 0, 'mon': 0,
            'tuesday': 1, 'tue': 1, 'tues': 1,
            'wednesday': 2, 'wed': 2,
            'thursday': 3, 'thu': 3, 'thur': 3, 'thurs': 3,
            'friday': 4, 'fri': 4,
            'saturday': 5, 'sat': 5,
            'sunday': 6, 'sun': 6
        }

        # Relative date keywords
        self.relative_keywords = {
            'today': 0,
            'tonight': 0,
            'tomorrow': 1,
        }

        # Longest names first so "september" is not matched as "sep"
        month_names = sorted(self.month_map.keys(), key=len, reverse=True)
        self.month_pattern = '|'.join(month_names)
        self.weekday_pattern = '|'.join(sorted(self.weekday_map.keys(), key=len, reverse=True))

        m = self.month_pattern
        ordinal = r'(?:st|nd|rd|th)?'

        # (name, compiled pattern) in priority order
        self.patterns = [
            ('iso', re.compile(r'\b(\d{4})[-/](\d{1,2})[-/](\d{1,2})\b')),
            ('day_first_numeric', re.compile(r'\b(\d{1,2})[-/](\d{1,2})[-/](\d{4})\b')),
            ('month_day_year', re.compile(rf'\b({m})\.?\s+(\d{{1,2}}){ordinal},?\s+(\d{{4}})\b', re.IGNORECASE)),
            ('day_month_year', re.compile(rf'\b(\d{{1,2}}){ordinal}\s+(?:of\s+)?({m})\.?,?\s+(\d{{4}})\b', re.IGNORECASE)),
            ('month_day', re.compile(rf'\b({m})\.?\s+(\d{{1,2}}){ordinal}\b(?!\s*[:/])', re.IGNORECASE)),
            ('day_month', re.compile(rf'\b(\d{{1,2}}){ordinal}\s+(?:of\s+)?({m})\b', re.IGNORECASE)),
        ]

        # Lowercase "may" with a bare day number is usually the verb ("students may 5 minutes early")
        self.modal_may_pattern = re.compile(r'^(?:may\.?\s+\d{1,2}|\d{1,2}\s+(?:of\s+)?may)$')

        self.label_pattern = re.compile(
            r'\b(?:date|when|scheduled\s+(?:for|on)|will\s+be\s+held\s+on)\s*:\s*([^\n;]+)',
            re.IGNORECASE,
        )

    def parse_date(self, text: str, reference_date: date) -> Optional[date]:
        """
        Parse the first valid date in text.

        Args:
            text: Free text to search
            reference_date: "Today"; supplies the year when it is omitted and
                anchors relative words in explicit date labels

        Returns:
            Parsed date or None if no pattern yields a real date
        """
        if not text:
            return None

        for pattern_type, parsed in self._candidates(text, reference_date.year, free_text=True):
            if parsed is not None:
                logger.debug(f"Selected date: {parsed.isoformat()} (pattern: {pattern_type})")
                return parsed

        # Explicit labels whose value is not in one of the formats above
        for match in self.label_pattern.finditer(text):
            parsed = self.parse_value(match.group(1), reference_date)
            if parsed is not None:
                logger.debug(f"Selected date: {parsed.isoformat()} (pattern: label)")
                return parsed

        logger.debug("No valid date candidates found")
        return None

    def parse_value(self, value: str, reference_date: date) -> Optional[date]:
        """Parse a short date value such as a form field or a "when:" label."""
        if not value:
            return None
        value = self._strip_ordinals(value.strip())

        for _, parsed in self._candidates(value, reference_date.year):
            if parsed is not None:
                return parsed

        return self._parse_relative(value.lower(), reference_date)

    def _candidates(
        self, text: str, default_year: int, free_text: bool = False,
    ) -> Iterator[Tuple[str, Optional[date]]]:
        for pattern_type, pattern in self.patterns:
            for match in pattern.finditer(text):
                if free_text and self.modal_may_pattern.match(match.group(0)):
                    logger.debug(f"Skipping modal 'may': {match.group(0)!r}")
                    continue
                yield pattern_type, self._from_match(pattern_type, match, default_year)

    def _from_match(self, pattern_type: str, match: re.Match, default_year: int) -> Optional[date]:
        groups = match.groups()
        if pattern_type == 'iso':
            year, month, day = int(groups[0]), int(groups[1]), int(groups[2])
        elif pattern_type == 'day_first_numeric':
            day, month, year = int(groups[0]), int(groups[1]), int(groups[2])
        elif pattern_type == 'month_day_year':
            month, day, year = self.month_map[groups[0].lower()], int(groups[1]), int(groups[2])
        elif pattern_type == 'day_month_year':
            day, month, year = int(groups[0]), self.month_map[groups[1].lower()], int(groups[2])
        elif pattern_type == 'month_day':
            month, day, year = self.month_map[groups[0].lower()], int(groups[1]), default_year
        else:
            day, month, year = int(groups[0]), self.month_map[groups[1].lower()], default_year

        created = self._create_date(year, month, day)
        if created is None:
            logger.debug(f"Invalid date candidate rejected: {pattern_type} -> {match.group(0)!r}")
        return created

    def _parse_relative(self, text: str, ref_date: date) -> Optional[date]:
        """Parse: today | tomorrow | next Monday | this Friday | Friday"""
        for keyword, days_offset in self.relative_keywords.items():
            if re.search(rf'\b{keyword}\b', text):
                return ref_date + timedelta(days=days_offset)

        match = re.search(rf'\bnext\s+({self.weekday_pattern})\b', text)
        if match:
            target_weekday = self.weekday_map[match.group(1)]
            days_ahead = (target_weekday - ref_date.weekday() + 7) % 7
            if days_ahead == 0:
                days_ahead = 7
            return ref_date + timedelta(days=days_ahead)

        match = re.search(rf'\b(?:this\s+)?({self.weekday_pattern})\b', text)
        if match:
            target_weekday = self.weekday_map[match.group(1)]
            days_ahead = (target_weekday - ref_date.weekday()) % 7
            if days_ahead == 0:
                days_ahead = 7  # Next week if same day
            return ref_date + timedelta(days=days_ahead)

        return None

    @staticmethod
    def _strip_ordinals(text: str) -> str:
        return re.sub(r'(\d+)(?:st|nd|rd|th)\b', r'\1', text, flags=re.IGNORECASE)

    @staticmethod
    def _create_date(year: int, month: int, day: int) -> Optional[date]:
        """Safely create a date object."""
        try:
            return date(year, month, day)
        except ValueError:
            return None


def format_date(value: date) -> str:
    return value.strftime('%Y-%m-%d')
