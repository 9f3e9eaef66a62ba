"""
End-to-end tests for FieldExtractor: text in, complete record out.

Every test pins the reference date so results do not depend on the
day the suite runs.

Run with:
    pytest backend/tests/nlp/test_field_extractor.py -v
"""
import re
from datetime import date

import pytest

from campus_assistant.core.config import Settings
from campus_assistant.services.nlp.extractor import FieldExtractor
from campus_assistant.services.nlp.link_extractor import is_valid_url
from campus_assistant.services.nlp.records import EventRecord, RecordKind, ResourceRecord
from campus_assistant.services.nlp.taxonomy import (
    campus_event_taxonomy,
    dashboard_event_taxonomy,
    resource_type_taxonomy,
)

REF = date(2025, 1, 10)

SAMPLES = [
    "",
    "Workshop on Machine Learning on March 15th at 3 PM in the Main Auditorium. "
    "Contact Prof. Smith for more details. Visit ml-workshop.example.com for info.",
    "Sign up at https://reg.example.com. Learn more at https://info.example.com.",
    "Dear students,\nAI Hackathon 2024 registration now open!",
    "Calculus II midterm practice test with solutions",
    "Cricket match vs. Engineering at the Sports Ground on Saturday 10am",
    "!!! ??? ...",
]


@pytest.fixture(scope="module")
def extractor():
    return FieldExtractor(Settings(_env_file=None))


# ── Scenarios ─────────────────────────────────────────────────────────────────

class TestScenarios:

    def test_explicit_full_text(self, extractor):
        text = (
            "Workshop on Machine Learning on March 15th at 3 PM in the Main Auditorium. "
            "Contact Prof. Smith for more details. Visit ml-workshop.example.com for info."
        )
        record = extractor.extract(text, "event", REF)
        assert record.title == "Workshop On Machine Learning"
        assert record.date == "2025-03-15"
        assert record.time == "15:00"
        assert record.location == "Main Auditorium"
        assert record.category == "Academic"
        assert record.website_url == "https://ml-workshop.example.com"
        assert "Prof. Smith" in record.contact_info
        assert record.description == text

    def test_empty_input(self, extractor):
        record = extractor.extract("", "event", REF)
        assert record.title == "New Event"
        assert record.date == "2025-01-11"
        assert record.time == "15:00"
        assert record.location == "Main Campus"
        assert record.category == "Other"
        assert record.description == "No description provided."
        assert record.website_url is None
        assert record.registration_link is None
        assert not any(record.extracted_data.values())

    def test_registration_vs_website(self, extractor):
        record = extractor.extract(
            "Sign up at https://reg.example.com. Learn more at https://info.example.com.", "event", REF,
        )
        assert record.registration_link == "https://reg.example.com"
        assert record.website_url == "https://info.example.com"

    def test_resource_classification(self, extractor):
        record = extractor.extract("Calculus II midterm practice test with solutions", "resource", REF)
        assert isinstance(record, ResourceRecord)
        assert record.type == "Test Paper"
        assert record.subject == "Mathematics"
        assert record.url == "https://example.com/resources/test-paper/mathematics"

    def test_plural_resource_type_with_full_subject_name(self, extractor):
        record = extractor.extract("Mathematics exams 2023 with answers", "resource", REF)
        assert record.type == "Test Paper"
        assert record.subject == "Mathematics"
        assert record.extracted_data["type_found"] is True
        assert record.extracted_data["subject_found"] is True

    def test_greeting_skip(self, extractor):
        record = extractor.extract("Dear students,\nAI Hackathon 2024 registration now open!", "event", REF)
        assert record.title == "AI Hackathon 2024 Registration Now Open"
        assert "Dear" not in record.title


# ── Labelled announcements ───────────────────────────────────────────────────

class TestLabelledText:

    def test_labelled_event(self, extractor):
        text = (
            "Title: Robotics Expo\n"
            "Date: 2025-02-20\n"
            "Time: 10:30 AM\n"
            "Venue: Engineering Block\n"
            "Category: Club\n"
            "Register at: https://forms.example.com/robotics\n"
            "Organized by: Robotics Society"
        )
        record = extractor.extract(text, RecordKind.EVENT, REF)
        assert record.title == "Robotics Expo"
        assert record.starts_at == "2025-02-20 10:30"
        assert record.location == "Engineering Block"
        assert record.category == "Club"
        assert record.registration_link == "https://forms.example.com/robotics"
        assert record.organizer == "Robotics Society"
        assert record.extracted_data["registration_link_found"] is True
        assert record.extracted_data["website_url_found"] is False

    def test_labelled_resource(self, extractor):
        text = "Title: Week 3 slides\nSubject: Organic Chemistry\nLink: https://drive.example.com/w3"
        record = extractor.extract(text, "resource", REF)
        assert record.title == "Week 3 Slides"
        assert record.subject == "Organic Chemistry"
        assert record.type == "Notes"
        assert record.url == "https://drive.example.com/w3"
        assert record.extracted_data["subject_found"] is True
        assert record.extracted_data["url_found"] is True


# ── Partial extraction ───────────────────────────────────────────────────────

class TestExtractPartial:

    def test_missing_fields_are_none(self, extractor):
        partial = extractor.extract_partial("Chess night", "event", REF)
        assert partial["date"] is None
        assert partial["time"] is None
        assert partial["location"] is None
        assert partial["extracted_data"]["date_found"] is False
        assert partial["extracted_data"]["title_found"] is True

    def test_found_flags(self, extractor):
        partial = extractor.extract_partial("Chess night on March 3 at 7pm in Room 12B", "event", REF)
        flags = partial["extracted_data"]
        assert flags["date_found"] and flags["time_found"] and flags["location_found"]
        assert partial["date"] == "2025-03-03"
        assert partial["time"] == "19:00"


# ── Properties ───────────────────────────────────────────────────────────────

class TestProperties:

    @pytest.mark.parametrize("text", SAMPLES)
    @pytest.mark.parametrize("kind", ["event", "resource"])
    def test_deterministic(self, extractor, text, kind):
        assert extractor.extract(text, kind, REF) == extractor.extract(text, kind, REF)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_event_total_defaulting_and_closure(self, extractor, text):
        record = extractor.extract(text, "event", REF)
        assert isinstance(record, EventRecord)
        for field in ("title", "description", "date", "time", "location", "category"):
            assert getattr(record, field)
        assert record.category in campus_event_taxonomy()
        assert re.match(r"^\d{4}-\d{2}-\d{2}$", record.date)
        assert re.match(r"^\d{2}:\d{2}$", record.time)
        for url in (record.website_url, record.registration_link):
            assert url is None or is_valid_url(url)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_resource_total_defaulting_and_closure(self, extractor, text):
        record = extractor.extract(text, "resource", REF)
        assert record.title and record.description and record.subject
        assert record.type in resource_type_taxonomy()
        assert is_valid_url(record.url)

    def test_title_capitalization_idempotent(self, extractor):
        record = extractor.extract("Title: night of jazz", "event", REF)
        again = extractor.extract(f"Title: {record.title}", "event", REF)
        assert record.title == again.title == "Night Of Jazz"

    def test_default_date_follows_reference(self, extractor):
        assert extractor.extract("Free pizza", "event", date(2024, 2, 28)).date == "2024-02-29"


class TestInjectedTaxonomy:

    def test_dashboard_preset(self):
        extractor = FieldExtractor(Settings(_env_file=None), event_taxonomy=dashboard_event_taxonomy())
        record = extractor.extract("Hands-on workshop for beginners", "event", REF)
        assert record.category == "Workshop"

    def test_preset_from_settings(self):
        extractor = FieldExtractor(Settings(_env_file=None, EVENT_TAXONOMY="dashboard"))
        record = extractor.extract("Freshers party and social mixer", "event", REF)
        assert record.category == "Social"

    def test_unknown_preset_rejected(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, EVENT_TAXONOMY="bogus")
