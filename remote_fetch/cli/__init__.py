"""Command-line interface for the remote fetcher."""

from remote_fetch.cli.main import cli


__all__ = ["cli"]
