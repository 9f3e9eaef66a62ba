"""
Validator / defaulter: the last pipeline stage.

Takes a partial record (from the extractor or from a manual admin form) and
returns a complete EventRecord or ResourceRecord. Required fields are always
filled, enum fields are always taxonomy members and optional URL fields are
either valid URLs or absent. Bad input is defaulted, never raised.
"""

import logging
from datetime import date, timedelta
from typing import Any, Dict, Optional, Union

from campus_assistant.core.config import Settings
from campus_assistant.services.nlp.classifier import KeywordClassifier
from campus_assistant.services.nlp.datetime_extractor import (
    local_today, normalize_date, normalize_time, split_datetime,
)
from campus_assistant.services.nlp.link_extractor import is_valid_url, normalize_url
from campus_assistant.services.nlp.records import EventRecord, RecordKind, ResourceRecord
from campus_assistant.services.nlp.taxonomy import Taxonomy
from campus_assistant.services.nlp.text_utils import capitalize_words, slugify

logger = logging.getLogger(__name__)

URL_FIELDS = ('website_url', 'registration_link')
OPTIONAL_TEXT_FIELDS = ('organizer', 'contact_info', 'application_method', 'additional_details')


def _clean(value: Any) -> Optional[str]:
    """Stringify and strip a field value; blank becomes None."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _flags(value: Any) -> Dict[str, bool]:
    if not isinstance(value, dict):
        return {}
    return {str(key): bool(flag) for key, flag in value.items()}


class RecordValidator:
    """Completes partial event/resource dicts against the configured taxonomies."""

    def __init__(
        self,
        settings: Settings,
        event_taxonomy: Taxonomy,
        type_taxonomy: Taxonomy,
        subject_taxonomy: Taxonomy,
    ):
        self.settings = settings
        self.event_taxonomy = event_taxonomy
        self.type_taxonomy = type_taxonomy
        self.subject_taxonomy = subject_taxonomy

        self.category_classifier = KeywordClassifier(event_taxonomy)
        self.type_classifier = KeywordClassifier(type_taxonomy)
        self.subject_classifier = KeywordClassifier(subject_taxonomy)

        self.default_time = normalize_time(settings.DEFAULT_EVENT_TIME) or '15:00'

    def validate(
        self,
        kind: Union[RecordKind, str],
        partial: Dict[str, Any],
        reference_date: Optional[date] = None,
    ) -> Union[EventRecord, ResourceRecord]:
        if reference_date is None:
            reference_date = local_today(self.settings.TIMEZONE)
        partial = partial or {}

        if RecordKind(kind) == RecordKind.RESOURCE:
            return self.validate_resource(partial)
        return self.validate_event(partial, reference_date)

    # ── Shared fields ────────────────────────────────────────────────────────

    def _title(self, value: Any, default: str) -> str:
        title = _clean(value)
        return capitalize_words(title) if title else default

    def _description(self, value: Any) -> str:
        return _clean(value) or self.settings.DEFAULT_DESCRIPTION

    # ── Events ───────────────────────────────────────────────────────────────

    def _event_date_time(self, partial: Dict[str, Any], reference_date: date):
        raw_date = _clean(partial.get('date'))
        raw_time = _clean(partial.get('time'))

        # Manual forms submit "YYYY-MM-DD HH:MM" in a single field
        split_date, split_time = split_datetime(raw_date)
        if split_date:
            raw_date = split_date
            raw_time = raw_time or split_time

        event_date = normalize_date(raw_date, reference_date) if raw_date else None
        if event_date is None:
            if raw_date:
                logger.debug(f"Unreadable date {raw_date!r}, using default")
            event_date = (reference_date + timedelta(days=self.settings.DEFAULT_DATE_OFFSET_DAYS)).isoformat()

        event_time = normalize_time(raw_time) if raw_time else None
        if event_time is None:
            if raw_time:
                logger.debug(f"Unreadable time {raw_time!r}, using default")
            event_time = self.default_time

        return event_date, event_time

    def _category(self, value: Any, title: str, description: str) -> str:
        category = self.event_taxonomy.canonical(_clean(value))
        if category:
            return category
        inferred = self.category_classifier.best_match(f"{title} {description}")
        if _clean(value):
            logger.debug(f"Category {value!r} is not in {self.event_taxonomy.values}; inferred {inferred}")
        return inferred

    def validate_event(self, partial: Dict[str, Any], reference_date: date) -> EventRecord:
        title = self._title(partial.get('title'), self.settings.DEFAULT_EVENT_TITLE)
        description = self._description(partial.get('description'))
        event_date, event_time = self._event_date_time(partial, reference_date)

        optional: Dict[str, Optional[str]] = {}
        for field in URL_FIELDS:
            url = _clean(partial.get(field))
            if url:
                url = normalize_url(url)
                if not is_valid_url(url):
                    logger.debug(f"Dropping invalid {field}: {partial.get(field)!r}")
                    url = None
            optional[field] = url
        for field in OPTIONAL_TEXT_FIELDS:
            optional[field] = _clean(partial.get(field))

        return EventRecord(
            title=title,
            description=description,
            date=event_date,
            time=event_time,
            location=_clean(partial.get('location')) or self.settings.DEFAULT_LOCATION,
            category=self._category(partial.get('category'), title, description),
            extracted_data=_flags(partial.get('extracted_data')),
            **optional,
        )

    # ── Resources ────────────────────────────────────────────────────────────

    def validate_resource(self, partial: Dict[str, Any]) -> ResourceRecord:
        title = self._title(partial.get('title'), self.settings.DEFAULT_RESOURCE_TITLE)
        description = self._description(partial.get('description'))
        signal = f"{title} {description}"

        resource_type = self.type_taxonomy.canonical(_clean(partial.get('type')))
        if not resource_type:
            resource_type = self.type_classifier.best_match(signal)

        subject = _clean(partial.get('subject'))
        if subject:
            # Free text is allowed; known members are normalised to their canonical spelling
            subject = self.subject_taxonomy.canonical(subject) or subject
        else:
            subject = self.subject_classifier.best_match(signal)

        url = _clean(partial.get('url'))
        if url:
            url = normalize_url(url)
            if not is_valid_url(url):
                logger.debug(f"Dropping invalid resource url: {partial.get('url')!r}")
                url = None
        if not url:
            url = f"{self.settings.RESOURCE_URL_BASE.rstrip('/')}/{slugify(resource_type)}/{slugify(subject)}"

        return ResourceRecord(
            title=title,
            description=description,
            type=resource_type,
            subject=subject,
            url=url,
            extracted_data=_flags(partial.get('extracted_data')),
        )
