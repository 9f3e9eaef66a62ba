"""
Public read-only endpoints: event/resource listings, filters, pagination.

Run with:
    pytest backend/tests/api/test_public_api.py -v
"""
import uuid
from datetime import timedelta

import pytest
import pytest_asyncio

from campus_assistant.core.config import settings
from campus_assistant.services.nlp.datetime_extractor import local_today


@pytest_asyncio.fixture
async def seeded(client, admin_headers):
    today = local_today(settings.TIMEZONE)
    events = [
        {"title": "Guest lecture", "date": today.isoformat(), "time": "18:00", "category": "Academic"},
        {"title": "Coding workshop", "date": today.isoformat(), "time": "09:00", "category": "Academic"},
        {"title": "Cricket match", "date": (today + timedelta(days=1)).isoformat(), "category": "Sports"},
        {"title": "Career fair", "date": (today + timedelta(days=20)).isoformat(), "category": "Career"},
        {"title": "Old meetup", "date": (today - timedelta(days=3)).isoformat(), "category": "Club"},
    ]
    for body in events:
        response = await client.post("/api/v1/admin/events", json=body, headers=admin_headers)
        assert response.status_code == 201

    resources = [
        {"title": "Calculus midterm", "type": "Test Paper", "subject": "Mathematics"},
        {"title": "Algebra notes", "type": "Notes", "subject": "Mathematics"},
        {"title": "Physics timetable", "type": "Timetable", "subject": "Physics"},
    ]
    for body in resources:
        response = await client.post("/api/v1/admin/resources", json=body, headers=admin_headers)
        assert response.status_code == 201

    return today


class TestRoot:

    @pytest.mark.asyncio
    async def test_root_and_health(self, client):
        assert (await client.get("/")).json()["message"] == "Campus Assistant API"
        health = (await client.get("/health")).json()
        assert health["status"] == "healthy"


class TestEventListing:

    @pytest.mark.asyncio
    async def test_all_active_ordered_by_date_then_time(self, client, seeded):
        body = (await client.get("/api/v1/events")).json()
        assert body["total"] == 5
        titles = [item["title"] for item in body["items"]]
        assert titles == ["Old Meetup", "Coding Workshop", "Guest Lecture", "Cricket Match", "Career Fair"]

    @pytest.mark.asyncio
    async def test_category_filter_case_insensitive(self, client, seeded):
        body = (await client.get("/api/v1/events", params={"category": "academic"})).json()
        assert body["total"] == 2
        assert {item["category"] for item in body["items"]} == {"Academic"}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("date_filter,expected", [
        ("today", {"Guest Lecture", "Coding Workshop"}),
        ("tomorrow", {"Cricket Match"}),
        ("week", {"Guest Lecture", "Coding Workshop", "Cricket Match"}),
        ("upcoming", {"Guest Lecture", "Coding Workshop", "Cricket Match", "Career Fair"}),
    ])
    async def test_date_filters(self, client, seeded, date_filter, expected):
        body = (await client.get("/api/v1/events", params={"date_filter": date_filter})).json()
        assert {item["title"] for item in body["items"]} == expected

    @pytest.mark.asyncio
    async def test_specific_date(self, client, seeded):
        day = (seeded + timedelta(days=20)).isoformat()
        body = (await client.get("/api/v1/events", params={"date_filter": day})).json()
        assert [item["title"] for item in body["items"]] == ["Career Fair"]

    @pytest.mark.asyncio
    async def test_bad_date_filter(self, client, seeded):
        response = await client.get("/api/v1/events", params={"date_filter": "next-ish"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_pagination(self, client, seeded):
        body = (await client.get("/api/v1/events", params={"page": 2, "page_size": 2})).json()
        assert body["total"] == 5
        assert body["pages"] == 3
        assert body["page"] == 2
        assert [item["title"] for item in body["items"]] == ["Guest Lecture", "Cricket Match"]

    @pytest.mark.asyncio
    async def test_unknown_event(self, client):
        assert (await client.get(f"/api/v1/events/{uuid.uuid4()}")).status_code == 404


class TestResourceListing:

    @pytest.mark.asyncio
    async def test_filters(self, client, seeded):
        body = (await client.get("/api/v1/resources", params={"subject": "mathematics"})).json()
        assert body["total"] == 2

        body = (await client.get("/api/v1/resources", params={"type": "Test Paper"})).json()
        assert [item["title"] for item in body["items"]] == ["Calculus Midterm"]

    @pytest.mark.asyncio
    async def test_get_by_id(self, client, seeded):
        items = (await client.get("/api/v1/resources")).json()["items"]
        resource = (await client.get(f"/api/v1/resources/{items[0]['id']}")).json()
        assert resource["id"] == items[0]["id"]
        assert resource["url"].startswith("https://")

    @pytest.mark.asyncio
    async def test_unknown_resource(self, client):
        assert (await client.get(f"/api/v1/resources/{uuid.uuid4()}")).status_code == 404
