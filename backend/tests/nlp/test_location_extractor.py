"""
Tests for venue extraction.

Run with:
    pytest backend/tests/nlp/test_location_extractor.py -v
"""
from campus_assistant.services.nlp.location_extractor import extract_location


class TestLocation:

    def test_capitalised_place_after_in(self):
        text = "Workshop on Machine Learning on March 15th at 3 PM in the Main Auditorium."
        assert extract_location(text) == "Main Auditorium"

    def test_venue_label(self):
        assert extract_location("Venue: Newman Building, Room 101\nTime: 5pm") == "Newman Building, Room 101"

    def test_at_place_bounded_by_time_word(self):
        assert extract_location("Meet at the library on Friday") == "library"

    def test_default(self):
        assert extract_location("") == "Main Campus"
        assert extract_location("Free pizza for all") == "Main Campus"
        assert extract_location("Free pizza for all", default=None) is None
