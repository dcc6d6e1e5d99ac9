"""Discord messaging and channel access CLI."""

from __future__ import annotations

from pathlib import Path

from core.cli_framework import CLIApp
from core.config import PylonConfig, resolve

from .client import DEFAULT_MESSAGE_LIMIT, DiscordClient, format_messages

app = CLIApp(
    "pylon discord",
    "Discord messaging and channel access.",
    epilog=(
        "Configuration (~/.pylonrc [discord] section or env vars):\n"
        "  webhook      / PYLON_DISCORD_WEBHOOK      Webhook URL for sending messages\n"
        "  bot_token    / PYLON_DISCORD_BOT_TOKEN    Bot token for reading messages/channels\n"
        "  guild_id     / PYLON_DISCORD_GUILD_ID     Default guild (server) ID\n"
        "  channel_id   / PYLON_DISCORD_CHANNEL_ID   Default channel ID for reading\n"
    ),
)


def _load_config(args) -> PylonConfig:
    config_path = getattr(args, "config", None)
    return resolve(Path(config_path) if config_path else None)


def _get_client(cfg: PylonConfig) -> DiscordClient:
    return DiscordClient(
        bot_token=cfg.discord_bot_token,
        webhook_url=cfg.discord_webhook,
        api_base=cfg.discord_api_base,
    )


@app.command("msg", help="Send a message via webhook", aliases=["send"])
@app.argument("message", nargs="+", help="Message text")
def cmd_msg(args) -> int:
    _get_client(_load_config(args)).send_message(" ".join(args.message))
    args._output.print("Message sent.")
    return 0


@app.command("read", help="Read recent messages from a channel")
@app.argument("--channel", help="Channel ID (default: channel_id from config)")
@app.argument("--count", type=int, default=DEFAULT_MESSAGE_LIMIT, help="Number of messages, 1-100 (default 20)")
def cmd_read(args) -> int:
    cfg = _load_config(args)
    messages = _get_client(cfg).read_messages(args.channel or cfg.discord_channel_id, args.count)
    out = args._output
    if out.structured:
        out.print_data(messages)
        return 0
    if not messages:
        out.print("No messages found.")
        return 0
    out.print(format_messages(messages), end="")
    return 0


@app.command("channels", help="List text channels in a guild")
@app.argument("--guild", help="Guild ID (default: guild_id from config)")
def cmd_channels(args) -> int:
    cfg = _load_config(args)
    channels = _get_client(cfg).list_channels(args.guild or cfg.discord_guild_id)
    args._output.print_rows(
        channels,
        columns=["id", "name", "position"],
        headers=["ID", "NAME", "POSITION"],
        empty="No text channels.",
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    return app.run(argv)
