"""CLI commands for checking and fetching remote images."""

import asyncio
import logging
import sys
import uuid
from pathlib import Path

import click
import structlog

from remote_fetch import __version__
from remote_fetch.allowlist.validator import AllowListValidator
from remote_fetch.errors import (
    AllowListConfigError,
    MalformedUrlError,
    RemoteFetchError,
    http_status_for_error,
)
from remote_fetch.fetch.config import FetchConfig
from remote_fetch.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from remote_fetch.service import RemoteImageService
from remote_fetch.settings.app import get_settings


logger = structlog.get_logger()

EXIT_FORBIDDEN = 1
EXIT_MALFORMED = 2


def _build_validator(patterns: tuple[str, ...]) -> AllowListValidator:
    """Build a validator from --allow options, falling back to settings."""
    hosts = list(patterns) or get_settings().allowed_hosts_list
    try:
        return AllowListValidator(hosts)
    except AllowListConfigError as e:
        raise click.BadParameter(str(e), param_hint="--allow") from e


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def cli(json_logs: bool, verbose: bool) -> None:
    """Allow-listed, bounded remote image fetcher."""
    configure_logging(
        level=logging.DEBUG if verbose else get_settings().log_level_int,
        output=sys.stderr,
        json_format=json_logs,
    )


@cli.command()
@click.argument("url")
@click.option(
    "--allow",
    "patterns",
    multiple=True,
    help="Allowed host pattern (repeatable). Defaults to REMOTE_FETCH_ALLOWED_HOSTS.",
)
def check(url: str, patterns: tuple[str, ...]) -> None:
    """Check whether URL passes the host allow-list."""
    validator = _build_validator(patterns)
    try:
        entry = validator.match(url)
    except MalformedUrlError as e:
        click.echo(f"malformed: {e.reason}", err=True)
        sys.exit(EXIT_MALFORMED)

    if entry is None:
        click.echo("forbidden")
        sys.exit(EXIT_FORBIDDEN)
    click.echo(f"allowed (matched {entry.pattern})")


@cli.command()
@click.argument("url")
@click.option(
    "--allow",
    "patterns",
    multiple=True,
    help="Allowed host pattern (repeatable). Defaults to REMOTE_FETCH_ALLOWED_HOSTS.",
)
@click.option(
    "--out",
    "output_path",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to write the fetched bytes to.",
)
@click.option("--max-bytes", type=int, default=None, help="Byte ceiling.")
@click.option("--timeout-ms", type=int, default=None, help="Deadline in ms.")
@click.option("--user-agent", type=str, default=None, help="User-Agent header.")
def get(
    url: str,
    patterns: tuple[str, ...],
    output_path: Path,
    max_bytes: int | None,
    timeout_ms: int | None,
    user_agent: str | None,
) -> None:
    """Fetch URL through the allow-list and write it to --out."""
    settings = get_settings()
    overrides = {
        key: value
        for key, value in (
            ("max_bytes", max_bytes),
            ("timeout_millis", timeout_ms),
            ("user_agent", user_agent),
        )
        if value is not None
    }
    try:
        config = FetchConfig.model_validate(
            settings.to_fetch_config().model_dump() | overrides
        )
    except ValueError as e:
        raise click.UsageError(str(e)) from e

    service = RemoteImageService(allow_list=_build_validator(patterns), config=config)

    bind_request_context(str(uuid.uuid4()), url=url)
    try:
        body = asyncio.run(service.get_image(url))
    except RemoteFetchError as e:
        click.echo(
            f"{e.error_class.value} ({http_status_for_error(e)}): {e.message}",
            err=True,
        )
        sys.exit(EXIT_MALFORMED if isinstance(e, MalformedUrlError) else 1)
    finally:
        clear_request_context()

    output_path.write_bytes(body)
    logger.info("image_written", path=str(output_path), bytes=len(body))
    click.echo(f"wrote {len(body)} bytes to {output_path}")


def main() -> None:
    """Console script entry point."""
    cli()
