"""``pylon config``: inspect the resolved configuration."""

from __future__ import annotations

from pathlib import Path

from .cli_framework import CLIApp
from .config import default_config_path, masked, resolve

app = CLIApp("pylon config", "Inspect pylon configuration.")


@app.command("show", help="Print resolved settings (secrets masked)")
@app.argument("--show-secrets", action="store_true", help="Print the bot token and webhook unmasked")
def cmd_show(args) -> int:
    path = Path(args.config) if getattr(args, "config", None) else default_config_path()
    cfg = resolve(path)
    if cfg.path:
        source = str(cfg.path)
    elif path:
        source = f"{path} (not found)"
    else:
        source = "(none)"
    secret = (lambda v: v) if args.show_secrets else masked
    args._output.print_dict(
        {
            "file": source,
            "cal.url": cfg.cal_url,
            "discord.webhook": secret(cfg.discord_webhook),
            "discord.bot_token": secret(cfg.discord_bot_token),
            "discord.guild_id": cfg.discord_guild_id,
            "discord.channel_id": cfg.discord_channel_id,
            "discord.api_base": cfg.discord_api_base,
        },
        indent=0,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    return app.run(argv)
