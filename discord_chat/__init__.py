"""Discord webhook/bot client and CLI."""
