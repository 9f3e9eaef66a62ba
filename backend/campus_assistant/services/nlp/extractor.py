"""
FieldExtractor: natural-language text -> structured event/resource record.

Pipeline:
  1. Independent field extractors run over the same text
     (title, description, date, time, location, category, links/contacts;
     for resources type, subject and url)
  2. Results are merged into a partial record with per-field found flags
  3. RecordValidator fills defaults and enforces taxonomy membership

Extraction is pure: the same text, kind and reference date always give the
same record. The extractor holds no per-call state and can be shared.
"""

import logging
from datetime import date
from typing import Any, Dict, Optional, Union

from campus_assistant.core.config import Settings, settings as default_settings
from campus_assistant.services.nlp.classifier import KeywordClassifier
from campus_assistant.services.nlp.datetime_extractor import extract_datetime, local_today
from campus_assistant.services.nlp.link_extractor import extract_links, find_urls, is_valid_url, normalize_url
from campus_assistant.services.nlp.location_extractor import extract_location
from campus_assistant.services.nlp.records import EventRecord, RecordKind, ResourceRecord
from campus_assistant.services.nlp.taxonomy import (
    Taxonomy, event_taxonomy_for, resource_subject_taxonomy, resource_type_taxonomy,
)
from campus_assistant.services.nlp.text_utils import find_label_value
from campus_assistant.services.nlp.title_extractor import extract_description, extract_title
from campus_assistant.services.nlp.validator import RecordValidator

logger = logging.getLogger(__name__)

CATEGORY_LABELS = ['category', 'type']
RESOURCE_TYPE_LABELS = [r'type', r'resource\s+type']
RESOURCE_SUBJECT_LABELS = ['subject', 'course', 'module']
RESOURCE_URL_LABELS = ['url', 'link']


class FieldExtractor:
    """
    Heuristic field extractor for event and resource announcements.
    Taxonomies are injected; when omitted they are built from settings.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        event_taxonomy: Optional[Taxonomy] = None,
        type_taxonomy: Optional[Taxonomy] = None,
        subject_taxonomy: Optional[Taxonomy] = None,
    ):
        self.settings = settings or default_settings
        self.event_taxonomy = event_taxonomy or event_taxonomy_for(self.settings.EVENT_TAXONOMY)
        self.type_taxonomy = type_taxonomy or resource_type_taxonomy()
        self.subject_taxonomy = subject_taxonomy or resource_subject_taxonomy()

        self.category_classifier = KeywordClassifier(self.event_taxonomy)
        self.type_classifier = KeywordClassifier(self.type_taxonomy)
        self.subject_classifier = KeywordClassifier(self.subject_taxonomy)

        self.validator = RecordValidator(
            self.settings, self.event_taxonomy, self.type_taxonomy, self.subject_taxonomy,
        )

    def _reference_date(self, reference_date: Optional[date]) -> date:
        return reference_date or local_today(self.settings.TIMEZONE)

    def extract(
        self,
        text: str,
        kind: Union[RecordKind, str] = RecordKind.EVENT,
        reference_date: Optional[date] = None,
    ) -> Union[EventRecord, ResourceRecord]:
        """
        Extract a complete, validated record from free text.

        Args:
            text: Raw announcement text (may be empty)
            kind: 'event' or 'resource'
            reference_date: The "today" used for year inference and the
                default date; today in settings.TIMEZONE when omitted

        Returns:
            EventRecord or ResourceRecord with every required field set
        """
        reference_date = self._reference_date(reference_date)
        partial = self.extract_partial(text, kind, reference_date)
        record = self.validator.validate(kind, partial, reference_date)
        logger.info(f"Extracted {RecordKind(kind).value}: {record.title!r}")
        return record

    def extract_partial(
        self,
        text: str,
        kind: Union[RecordKind, str] = RecordKind.EVENT,
        reference_date: Optional[date] = None,
    ) -> Dict[str, Any]:
        """
        Run the field extractors without defaulting.
        Missing fields are None; `extracted_data` records which were found.
        """
        text = text or ''
        if RecordKind(kind) == RecordKind.RESOURCE:
            return self._extract_resource(text)
        return self._extract_event(text, self._reference_date(reference_date))

    # ── Events ───────────────────────────────────────────────────────────────

    def _extract_event(self, text: str, reference_date: date) -> Dict[str, Any]:
        title = extract_title(text, kind='event', max_length=self.settings.TITLE_MAX_LENGTH)
        labelled_description = extract_description(text)
        description = labelled_description or text.strip() or None
        when = extract_datetime(text, reference_date)
        location = extract_location(text, default=None)

        explicit_category = find_label_value(text, CATEGORY_LABELS)
        category_hit = bool(explicit_category) or any(self.category_classifier.score(text).values())
        category = self.category_classifier.classify(text, explicit_category)

        links = extract_links(text, window=self.settings.URL_CONTEXT_WINDOW)

        partial: Dict[str, Any] = {
            'title': title,
            'description': description,
            'date': when['date'],
            'time': when['time'],
            'location': location,
            'category': category,
            **links,
        }
        partial['extracted_data'] = {
            'title_found': title is not None,
            'description_found': labelled_description is not None,
            'date_found': when['date'] is not None,
            'time_found': when['time'] is not None,
            'location_found': location is not None,
            'category_found': category_hit,
            **{f"{field}_found": value is not None for field, value in links.items()},
        }
        logger.debug(f"Event fields found: {[k for k, v in partial['extracted_data'].items() if v]}")
        return partial

    # ── Resources ────────────────────────────────────────────────────────────

    def _resource_url(self, text: str) -> Optional[str]:
        labelled = find_label_value(text, RESOURCE_URL_LABELS, stop=r'\s')
        if labelled:
            url = normalize_url(labelled)
            if is_valid_url(url):
                return url
        urls = find_urls(text)
        return urls[0][0] if urls else None

    def _extract_resource(self, text: str) -> Dict[str, Any]:
        title = extract_title(text, kind='resource', max_length=self.settings.TITLE_MAX_LENGTH)
        labelled_description = extract_description(text)
        description = labelled_description or text.strip() or None

        explicit_type = find_label_value(text, RESOURCE_TYPE_LABELS)
        type_hit = bool(explicit_type) or any(self.type_classifier.score(text).values())
        resource_type = self.type_classifier.classify(text, explicit_type)

        # A labelled subject is kept as written; otherwise infer one
        subject = find_label_value(text, RESOURCE_SUBJECT_LABELS)
        subject_hit = subject is not None or any(self.subject_classifier.score(text).values())
        if subject is None:
            subject = self.subject_classifier.best_match(text)

        url = self._resource_url(text)

        partial: Dict[str, Any] = {
            'title': title,
            'description': description,
            'type': resource_type,
            'subject': subject,
            'url': url,
        }
        partial['extracted_data'] = {
            'title_found': title is not None,
            'description_found': labelled_description is not None,
            'type_found': type_hit,
            'subject_found': subject_hit,
            'url_found': url is not None,
        }
        logger.debug(f"Resource fields found: {[k for k, v in partial['extracted_data'].items() if v]}")
        return partial
