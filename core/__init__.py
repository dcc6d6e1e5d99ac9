"""Shared pieces of pylon: config resolution, HTTP plumbing and the CLI framework."""

__all__ = ["__version__"]
__version__ = "0.1.0"
