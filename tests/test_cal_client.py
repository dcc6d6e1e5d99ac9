"""Tests for cal/client.py and cal/models.py."""

from __future__ import annotations

import unittest
from datetime import datetime, timezone

from core.cli_errors import APIError, DecodeError, ExitCode, UsageError
from cal.client import CalClient, webcal_url
from cal.models import CreateEventRequest, Event, parse_timestamp
from tests.fixtures import FakeResponse, FakeSession, event_json, feed_json


def _client(*responses) -> tuple[CalClient, FakeSession]:
    session = FakeSession(responses=list(responses))
    return CalClient("http://cal.test", session=session), session


class TestFeeds(unittest.TestCase):
    def test_create_feed(self):
        client, session = _client(
            FakeResponse(201, {"id": "f1", "name": "Work", "token": "tok1", "url": "http://cal.test/cal/tok1.ics"})
        )
        created = client.create_feed("Work")
        self.assertEqual(created.id, "f1")
        self.assertEqual(created.name, "Work")
        self.assertEqual(created.token, "tok1")
        self.assertEqual(created.url, "http://cal.test/cal/tok1.ics")
        call = session.last
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], "http://cal.test/api/feeds")
        self.assertEqual(call["json"], {"name": "Work"})

    def test_create_feed_with_slug(self):
        client, session = _client(
            FakeResponse(201, {"id": "f2", "name": "My Cal", "token": "my-cal", "url": "http://cal.test/cal/my-cal.ics"})
        )
        created = client.create_feed("My Cal", slug="my-cal")
        self.assertEqual(session.last["json"], {"name": "My Cal", "slug": "my-cal"})
        self.assertEqual(created.token, "my-cal")

    def test_create_feed_wrong_status(self):
        client, _ = _client(FakeResponse(200, {"id": "f1"}))
        with self.assertRaises(APIError) as ctx:
            client.create_feed("Work")
        self.assertEqual(ctx.exception.status_code, 200)

    def test_create_feed_conflict_message(self):
        client, _ = _client(FakeResponse(409, {"error": "slug already taken"}))
        with self.assertRaises(APIError) as ctx:
            client.create_feed("Work", slug="taken")
        self.assertEqual(str(ctx.exception), "cal api: 409 slug already taken")

    def test_create_feed_requires_name(self):
        client, session = _client()
        with self.assertRaises(UsageError):
            client.create_feed("")
        self.assertEqual(session.calls, [])

    def test_list_feeds(self):
        client, session = _client(FakeResponse(200, [feed_json("f1", "Work", "tok1"), feed_json("f2", "Home", "tok2")]))
        feeds = client.list_feeds()
        self.assertEqual([f.id for f in feeds], ["f1", "f2"])
        self.assertEqual(feeds[1].name, "Home")
        self.assertEqual(feeds[0].created_at, datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc))
        self.assertEqual(session.last["method"], "GET")
        self.assertEqual(session.last["url"], "http://cal.test/api/feeds")

    def test_list_feeds_null_and_empty(self):
        client, _ = _client(FakeResponse(200, text="null"), FakeResponse(200, []))
        self.assertEqual(client.list_feeds(), [])
        self.assertEqual(client.list_feeds(), [])

    def test_list_feeds_server_error(self):
        client, _ = _client(FakeResponse(500, text="internal server error"))
        with self.assertRaises(APIError) as ctx:
            client.list_feeds()
        self.assertEqual(str(ctx.exception), "cal api: 500 internal server error")

    def test_list_feeds_malformed(self):
        client, _ = _client(FakeResponse(200, {"not": "a list"}))
        with self.assertRaises(DecodeError):
            client.list_feeds()

    def test_delete_feed(self):
        client, session = _client(FakeResponse(204))
        self.assertIsNone(client.delete_feed("feed-123"))
        self.assertEqual(session.last["method"], "DELETE")
        self.assertEqual(session.last["url"], "http://cal.test/api/feeds/feed-123")

    def test_delete_feed_not_found(self):
        client, _ = _client(FakeResponse(404, {"error": "feed not found"}))
        with self.assertRaises(APIError) as ctx:
            client.delete_feed("nope")
        self.assertEqual(ctx.exception.code, ExitCode.NOT_FOUND)
        self.assertIn("feed not found", str(ctx.exception))

    def test_delete_feed_ok_status_is_error(self):
        client, _ = _client(FakeResponse(200, {}))
        with self.assertRaises(APIError):
            client.delete_feed("feed-123")


class TestEvents(unittest.TestCase):
    def test_create_event_body(self):
        client, session = _client(FakeResponse(201, event_json("evt-1", "feed-1")))
        request = CreateEventRequest(
            feed_id="feed-1",
            summary="Meeting",
            start="2026-02-01T14:00:00Z",
            end="2026-02-01T15:00:00Z",
            location="Room 1",
            status="CONFIRMED",
        )
        created = client.create_event(request)
        self.assertEqual(created.id, "evt-1")
        self.assertEqual(created.summary, "Meeting")
        self.assertEqual(created.start, datetime(2026, 2, 1, 14, 0, tzinfo=timezone.utc))
        call = session.last
        self.assertEqual(call["method"], "POST")
        self.assertEqual(call["url"], "http://cal.test/api/events")
        self.assertEqual(
            call["json"],
            {
                "feed_id": "feed-1",
                "summary": "Meeting",
                "start": "2026-02-01T14:00:00Z",
                "end": "2026-02-01T15:00:00Z",
                "location": "Room 1",
                "status": "CONFIRMED",
            },
        )

    def test_create_event_all_day_flag(self):
        client, session = _client(FakeResponse(201, event_json(AllDay=True)))
        created = client.create_event(
            CreateEventRequest(feed_id="feed-1", summary="Holiday", start="2026-03-01T00:00:00Z", all_day=True)
        )
        self.assertTrue(session.last["json"]["all_day"])
        self.assertTrue(created.all_day)

    def test_create_event_server_validation_error(self):
        client, _ = _client(FakeResponse(400, {"error": "feed_id, summary, and start are required"}))
        with self.assertRaises(APIError) as ctx:
            client.create_event(CreateEventRequest(feed_id="", summary="", start=""))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertIn("required", str(ctx.exception))

    def test_list_events(self):
        client, session = _client(FakeResponse(200, [event_json("evt-1"), event_json("evt-2", Summary="Standup")]))
        events = client.list_events("feed-1")
        self.assertEqual([e.id for e in events], ["evt-1", "evt-2"])
        self.assertEqual(events[1].summary, "Standup")
        self.assertEqual(session.last["url"], "http://cal.test/api/feeds/feed-1/events")

    def test_list_events_empty(self):
        client, _ = _client(FakeResponse(200, []))
        self.assertEqual(client.list_events("feed-1"), [])

    def test_delete_event(self):
        client, session = _client(FakeResponse(204))
        client.delete_event("evt-1")
        self.assertEqual(session.last["method"], "DELETE")
        self.assertEqual(session.last["url"], "http://cal.test/api/events/evt-1")

    def test_delete_event_not_found(self):
        client, _ = _client(FakeResponse(404, {"error": "event not found"}))
        with self.assertRaises(APIError) as ctx:
            client.delete_event("nope")
        self.assertEqual(ctx.exception.code, ExitCode.NOT_FOUND)


class TestSubscribe(unittest.TestCase):
    def test_subscribe_url(self):
        client = CalClient("https://cal.jredh.com", session=FakeSession())
        self.assertEqual(client.subscribe_url("my-cal"), "https://cal.jredh.com/cal/my-cal.ics")

    def test_subscribe_url_trailing_slash(self):
        client = CalClient("http://localhost:8085/", session=FakeSession())
        self.assertEqual(client.subscribe_url("abc"), "http://localhost:8085/cal/abc.ics")

    def test_subscribe_url_makes_no_request(self):
        session = FakeSession()
        CalClient("http://cal.test", session=session).subscribe_url("tok")
        self.assertEqual(session.calls, [])

    def test_webcal_url(self):
        self.assertEqual(webcal_url("https://cal.jredh.com/cal/x.ics"), "webcal://cal.jredh.com/cal/x.ics")
        self.assertEqual(webcal_url("http://localhost:8085/cal/x.ics"), "webcal://localhost:8085/cal/x.ics")
        self.assertEqual(webcal_url("webcal://already"), "webcal://already")


class TestModels(unittest.TestCase):
    def test_parse_timestamp_variants(self):
        self.assertIsNone(parse_timestamp(None))
        self.assertIsNone(parse_timestamp(""))
        self.assertEqual(
            parse_timestamp("2026-02-01T14:00:00.123456789Z"),
            datetime(2026, 2, 1, 14, 0, 0, 123456, tzinfo=timezone.utc),
        )
        self.assertEqual(
            parse_timestamp("2026-02-01T14:00:00.5Z"),
            datetime(2026, 2, 1, 14, 0, 0, 500000, tzinfo=timezone.utc),
        )
        self.assertEqual(
            parse_timestamp("2026-02-01T14:00:00.12345Z"),
            datetime(2026, 2, 1, 14, 0, 0, 123450, tzinfo=timezone.utc),
        )
        self.assertEqual(
            parse_timestamp("2026-02-01T14:00:00.1234567+02:00").microsecond,
            123456,
        )
        self.assertEqual(parse_timestamp("2026-02-01T14:00:00+02:00").utcoffset().total_seconds(), 7200)

    def test_list_events_with_short_fractions(self):
        body = [event_json(CreatedAt="2026-02-01T14:00:00.12345Z", Start="2026-02-01T14:00:00.5Z")]
        client, _ = _client(FakeResponse(200, body))
        (event,) = client.list_events("feed-1")
        self.assertEqual(event.created_at.microsecond, 123450)
        self.assertEqual(event.start.microsecond, 500000)

    def test_parse_timestamp_invalid(self):
        with self.assertRaises(DecodeError):
            parse_timestamp("yesterday")
        with self.assertRaises(DecodeError):
            parse_timestamp(12)

    def test_event_optional_fields(self):
        event = Event.from_api(event_json(End=None, Deadline="2026-02-02T09:00:00Z", Categories="work,meeting"))
        self.assertIsNone(event.end)
        self.assertEqual(event.deadline, datetime(2026, 2, 2, 9, 0, tzinfo=timezone.utc))
        self.assertEqual(event.categories, "work,meeting")

    def test_event_bad_all_day(self):
        with self.assertRaises(DecodeError):
            Event.from_api(event_json(AllDay="yes"))

    def test_create_request_omits_empty_optionals(self):
        body = CreateEventRequest(feed_id="f", summary="s", start="2026-01-01T00:00:00Z").to_api()
        self.assertEqual(body, {"feed_id": "f", "summary": "s", "start": "2026-01-01T00:00:00Z"})


if __name__ == "__main__":
    unittest.main()
