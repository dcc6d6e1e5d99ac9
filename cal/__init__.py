"""Client and CLI for the cal feed service."""
