"""Command-line interface for FileServe.

This module provides the CLI commands for running the server and for
inspecting the storage root.
"""

import asyncio
import sys
from datetime import timedelta
from typing import NoReturn

import click

from fileserve import __version__
from fileserve.core.config import get_settings
from fileserve.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="FileServe")
def cli() -> None:
    """FileServe - read-only file and image API.

    Settings are read from FILESERVE_* environment variables and .env.
    """


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload/--no-reload",
    default=None,
    help="Enable auto-reload (defaults to on in development)",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool | None) -> None:
    """Start the FileServe server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    if reload is None:
        reload = settings.is_development

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting FileServe server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
        root_path=str(settings.storage_root),
    )

    uvicorn.run(
        "fileserve.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


@cli.command("list-files")
def list_files() -> None:
    """List every file under the storage root."""
    from fileserve.domain.services import FileRetrievalService

    service = FileRetrievalService(get_settings())
    files = asyncio.run(service.list_files())

    for metadata in files:
        click.echo(f"{metadata.relative_path}\t{metadata.size_bytes}\t{metadata.content_type}")
    click.echo(f"{len(files)} file(s) in {service.resolver.root}", err=True)


@cli.command()
@click.argument("path")
def describe(path: str) -> None:
    """Resolve PATH the way the API does and print its metadata."""
    from fileserve.domain.exceptions import InvalidArgumentError
    from fileserve.domain.services import FileRetrievalService

    service = FileRetrievalService(get_settings())
    try:
        metadata = asyncio.run(service.get_metadata(path))
    except InvalidArgumentError as e:
        raise click.BadParameter(str(e), param_hint="PATH")

    if metadata is None:
        click.echo(f"Not found: {path}", err=True)
        sys.exit(1)

    for key, value in metadata.to_dict().items():
        click.echo(f"{key}: {value}")


@cli.command("issue-token")
@click.argument("subject")
@click.option("--group", "groups", multiple=True, help="Group claim (repeatable)")
@click.option(
    "--expires-minutes",
    type=int,
    default=None,
    help="Token lifetime (defaults to config)",
)
def issue_token(subject: str, groups: tuple[str, ...], expires_minutes: int | None) -> None:
    """Mint an access token for SUBJECT using the configured secret."""
    from fileserve.infrastructure.auth import jwt_service

    expires_delta = timedelta(minutes=expires_minutes) if expires_minutes else None
    click.echo(jwt_service.create_access_token(subject, list(groups), expires_delta))


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `fileserve` command is run
    or when using `python -m fileserve`.
    """
    cli()


if __name__ == "__main__":
    main()
