"""CLI for the cal service using core.cli_framework."""

from __future__ import annotations

from pathlib import Path

from core.cli_framework import CLIApp
from core.config import resolve

from .client import CalClient, webcal_url
from .models import EVENT_STATUSES, CreateEventRequest

app = CLIApp(
    "pylon cal",
    "Calendar subscription service commands.",
    epilog=(
        "Configuration:\n"
        "  ~/.pylonrc [cal] url = ...   Base URL for the cal service\n"
        "  PYLON_CAL_URL                Env var override (default: http://localhost:8085)\n"
    ),
)
app.global_argument("--url", help="Base URL of the cal service (overrides config)")

feed = app.group("feed", help="Manage calendar feeds")
event = app.group("event", help="Manage calendar events")


def _get_client(args) -> CalClient:
    config_path = getattr(args, "config", None)
    cfg = resolve(Path(config_path) if config_path else None)
    return CalClient(getattr(args, "url", None) or cfg.cal_url)


@feed.command("create", help="Create a new feed")
@feed.argument("name", nargs="+", help="Feed name (may be several words)")
@feed.argument("--slug", help="Readable token for the subscription URL (e.g. my-calendar)")
def cmd_feed_create(args) -> int:
    created = _get_client(args).create_feed(" ".join(args.name), args.slug)
    args._output.print_dict(
        {"ID": created.id, "Name": created.name, "Token": created.token, "URL": created.url},
        title="Created feed:",
    )
    return 0


@feed.command("list", help="List all feeds", aliases=["ls"])
def cmd_feed_list(args) -> int:
    feeds = _get_client(args).list_feeds()
    args._output.print_rows(
        feeds,
        columns=["id", "name", "token", "created_at"],
        headers=["ID", "NAME", "TOKEN", "CREATED"],
        empty="No feeds.",
    )
    return 0


@feed.command("delete", help="Delete a feed and all its events", aliases=["rm"])
@feed.argument("id", help="Feed ID")
def cmd_feed_delete(args) -> int:
    _get_client(args).delete_feed(args.id)
    args._output.print("Feed deleted.")
    return 0


@event.command("add", help="Create a new event", aliases=["create"])
@event.argument("--feed", required=True, help="Feed ID")
@event.argument("--summary", required=True, help="Event title")
@event.argument("--start", required=True, help="Start time (RFC 3339)")
@event.argument("--end", default="", help="End time (RFC 3339)")
@event.argument("--description", default="")
@event.argument("--location", default="")
@event.argument("--event-url", dest="event_url", default="", help="Link attached to the event")
@event.argument("--all-day", action="store_true", help="Mark as all-day event")
@event.argument("--deadline", default="", help="Deadline with alarm (RFC 3339)")
@event.argument("--status", default="", type=str.upper, choices=EVENT_STATUSES)
@event.argument("--categories", default="", help="Comma-separated categories")
def cmd_event_add(args) -> int:
    request = CreateEventRequest(
        feed_id=args.feed,
        summary=args.summary,
        start=args.start,
        end=args.end,
        description=args.description,
        location=args.location,
        url=args.event_url,
        all_day=args.all_day,
        deadline=args.deadline,
        status=args.status,
        categories=args.categories,
    )
    created = _get_client(args).create_event(request)
    details = {
        "ID": created.id,
        "Summary": created.summary,
        "Start": created.start.isoformat() if created.start else "",
    }
    if created.end:
        details["End"] = created.end.isoformat()
    if created.location:
        details["Location"] = created.location
    args._output.print_dict(details, title="Created event:")
    return 0


@event.command("list", help="List events for a feed", aliases=["ls"])
@event.argument("--feed", required=True, help="Feed ID")
def cmd_event_list(args) -> int:
    events = _get_client(args).list_events(args.feed)
    args._output.print_rows(
        events,
        columns=["id", "summary", "start", "end", "status"],
        headers=["ID", "SUMMARY", "START", "END", "STATUS"],
        empty="No events.",
    )
    return 0


@event.command("delete", help="Delete an event", aliases=["rm"])
@event.argument("id", help="Event ID")
def cmd_event_delete(args) -> int:
    _get_client(args).delete_event(args.id)
    args._output.print("Event deleted.")
    return 0


@app.command("subscribe", help="Show subscription URLs for a feed token")
@app.argument("token", help="Feed token (or slug)")
def cmd_subscribe(args) -> int:
    url = _get_client(args).subscribe_url(args.token)
    webcal = webcal_url(url)
    out = args._output
    if out.structured:
        out.print_data({"url": url, "webcal": webcal})
        return 0
    out.print(f"Subscribe URL:  {url}")
    out.print(f"Webcal URL:     {webcal}")
    out.print()
    out.print("To subscribe in your calendar app, use the webcal URL.")
    out.print("For Google Calendar, use the https URL in 'Other calendars > From URL'.")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    return app.run(argv)
