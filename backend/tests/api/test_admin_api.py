"""
Admin API tests: key gating, extraction preview, create/update/delete, stats.

Run with:
    pytest backend/tests/api/test_admin_api.py -v
"""
import uuid

import pytest

SCENARIO_TEXT = (
    "Workshop on Machine Learning on March 15th at 3 PM in the Main Auditorium. "
    "Contact Prof. Smith for more details. Visit ml-workshop.example.com for info."
)


class TestAdminKey:

    @pytest.mark.asyncio
    async def test_wrong_key_rejected(self, client):
        response = await client.post(
            "/api/v1/admin/events", json={"text": SCENARIO_TEXT}, headers={"X-Admin-Key": "wrong"},
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_key_rejected(self, client):
        response = await client.get("/api/v1/admin/stats")
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_wrong_key_rejected_on_preview(self, client):
        response = await client.post(
            "/api/v1/admin/extract", json={"text": "x"}, headers={"X-Admin-Key": "nope"},
        )
        assert response.status_code == 403


class TestExtractPreview:

    @pytest.mark.asyncio
    async def test_event_preview_stores_nothing(self, client, admin_headers):
        response = await client.post(
            "/api/v1/admin/extract",
            json={"text": "Sign up at https://reg.example.com. Learn more at https://info.example.com."},
            headers=admin_headers,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["kind"] == "event"
        assert body["record"]["registration_link"] == "https://reg.example.com"
        assert body["record"]["website_url"] == "https://info.example.com"

        listing = await client.get("/api/v1/events")
        assert listing.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_resource_preview(self, client, admin_headers):
        response = await client.post(
            "/api/v1/admin/extract",
            json={"text": "Calculus II midterm practice test with solutions", "kind": "resource"},
            headers=admin_headers,
        )
        record = response.json()["record"]
        assert record["type"] == "Test Paper"
        assert record["subject"] == "Mathematics"

    @pytest.mark.asyncio
    async def test_unknown_kind_rejected(self, client, admin_headers):
        response = await client.post(
            "/api/v1/admin/extract", json={"text": "x", "kind": "poster"}, headers=admin_headers,
        )
        assert response.status_code == 422


class TestEventCrud:

    @pytest.mark.asyncio
    async def test_create_from_text(self, client, admin_headers):
        response = await client.post("/api/v1/admin/events", json={"text": SCENARIO_TEXT}, headers=admin_headers)
        assert response.status_code == 201
        event = response.json()
        assert event["title"] == "Workshop On Machine Learning"
        assert event["event_date"].endswith("-03-15")
        assert event["event_time"].startswith("15:00")
        assert event["location"] == "Main Auditorium"
        assert event["category"] == "Academic"
        assert event["website_url"] == "https://ml-workshop.example.com"
        assert event["extracted_data"]["date_found"] is True

        fetched = await client.get(f"/api/v1/events/{event['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["title"] == event["title"]

    @pytest.mark.asyncio
    async def test_create_from_fields_is_validated(self, client, admin_headers):
        response = await client.post(
            "/api/v1/admin/events",
            json={"title": "chess night", "date": "2030-06-01 19:30", "category": "club", "website_url": "not a url"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        event = response.json()
        assert event["title"] == "Chess Night"
        assert event["event_date"] == "2030-06-01"
        assert event["event_time"].startswith("19:30")
        assert event["category"] == "Club"
        assert event["location"] == "Main Campus"
        assert event["website_url"] is None

    @pytest.mark.asyncio
    async def test_explicit_fields_override_text(self, client, admin_headers):
        response = await client.post(
            "/api/v1/admin/events",
            json={"text": SCENARIO_TEXT, "location": "Room 101"},
            headers=admin_headers,
        )
        assert response.json()["location"] == "Room 101"

    @pytest.mark.asyncio
    async def test_empty_body_rejected(self, client, admin_headers):
        response = await client.post("/api/v1/admin/events", json={}, headers=admin_headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_merges_and_revalidates(self, client, admin_headers):
        created = (await client.post(
            "/api/v1/admin/events",
            json={"title": "Chess night", "date": "2030-06-01", "time": "19:00"},
            headers=admin_headers,
        )).json()

        response = await client.put(
            f"/api/v1/admin/events/{created['id']}",
            json={"time": "8pm", "category": "sports"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["title"] == "Chess Night"
        assert updated["event_date"] == "2030-06-01"
        assert updated["event_time"].startswith("20:00")
        assert updated["category"] == "Sports"

    @pytest.mark.asyncio
    async def test_update_with_combined_datetime_replaces_time(self, client, admin_headers):
        created = (await client.post(
            "/api/v1/admin/events",
            json={"title": "Chess night", "date": "2030-06-01 19:30"},
            headers=admin_headers,
        )).json()

        response = await client.put(
            f"/api/v1/admin/events/{created['id']}",
            json={"date": "2030-06-02 10:00"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        updated = response.json()
        assert updated["event_date"] == "2030-06-02"
        assert updated["event_time"].startswith("10:00")

    @pytest.mark.asyncio
    async def test_update_unknown_event(self, client, admin_headers):
        response = await client.put(
            f"/api/v1/admin/events/{uuid.uuid4()}", json={"title": "x"}, headers=admin_headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, client, admin_headers):
        created = (await client.post(
            "/api/v1/admin/events", json={"title": "Book swap"}, headers=admin_headers,
        )).json()

        response = await client.delete(f"/api/v1/admin/events/{created['id']}", headers=admin_headers)
        assert response.status_code == 200

        assert (await client.get(f"/api/v1/events/{created['id']}")).status_code == 404
        again = await client.delete(f"/api/v1/admin/events/{created['id']}", headers=admin_headers)
        assert again.status_code == 404


class TestResourceCrud:

    @pytest.mark.asyncio
    async def test_create_update_delete(self, client, admin_headers):
        response = await client.post(
            "/api/v1/admin/resources",
            json={"text": "Calculus II midterm practice test with solutions"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        resource = response.json()
        assert resource["type"] == "Test Paper"
        assert resource["subject"] == "Mathematics"
        assert resource["url"].endswith("/test-paper/mathematics")

        response = await client.put(
            f"/api/v1/admin/resources/{resource['id']}",
            json={"url": "files.example.com/calc2.pdf"},
            headers=admin_headers,
        )
        assert response.json()["url"] == "https://files.example.com/calc2.pdf"
        assert response.json()["type"] == "Test Paper"

        response = await client.delete(f"/api/v1/admin/resources/{resource['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert (await client.get(f"/api/v1/resources/{resource['id']}")).status_code == 404


class TestStats:

    @pytest.mark.asyncio
    async def test_counts_active_rows(self, client, admin_headers):
        for body in ({"title": "Cricket match"}, {"title": "Football tournament"}, {"title": "Guest lecture"}):
            await client.post("/api/v1/admin/events", json=body, headers=admin_headers)
        await client.post("/api/v1/admin/resources", json={"title": "Physics timetable"}, headers=admin_headers)

        stats = (await client.get("/api/v1/admin/stats", headers=admin_headers)).json()
        assert stats["events"]["total"] == 3
        assert stats["events"]["by_category"] == {"Sports": 2, "Academic": 1}
        assert stats["resources"]["by_type"] == {"Timetable": 1}
