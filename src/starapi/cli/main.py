"""
StarAPI CLI Main Entry Point

Command-line front end for sending requests and managing saved endpoints.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Optional, TextIO

import click
from pydantic import ValidationError as PydanticValidationError

from .. import __version__
from ..core.config import get_config, get_store_path
from ..core.exceptions import ConfigurationError, StarAPIException
from ..core.logging import setup_logging
from ..core.models import HTTP_METHODS, RequestDescriptor
from ..repeater.editor import EndpointParser
from ..repeater.executor import RequestExecutor
from ..repeater.session import RepeaterSession
from ..storage.backend import JSONFileKeyValueStore
from ..storage.endpoints import EndpointStore

METHOD_CHOICE = click.Choice(sorted(HTTP_METHODS), case_sensitive=False)


def _fail(error: StarAPIException) -> None:
    click.echo(f"✗ {error.message}", err=True)
    sys.exit(1)


def _echo_json(value: Any) -> None:
    click.echo(json.dumps(value, indent=2, ensure_ascii=False))


def _send(coro: Any) -> None:
    try:
        result = asyncio.run(coro)
    except StarAPIException as e:
        _fail(e)
    _echo_json(result.to_display())


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--store-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Saved endpoint storage file (defaults to configuration)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Logging level",
)
@click.pass_context
def cli(ctx: click.Context, store_path: Optional[Path], log_level: Optional[str]):
    """
    StarAPI - send HTTP requests and keep a library of saved endpoints.
    """
    try:
        config = get_config()
    except PydanticValidationError as e:
        _fail(ConfigurationError(f"Invalid configuration: {e}"))
    setup_logging(log_level=log_level, config=config)

    store = EndpointStore(
        JSONFileKeyValueStore(store_path or get_store_path(config)),
        key=config.store.key,
    )
    ctx.obj = RepeaterSession(store, RequestExecutor(config.http))


@cli.command("send")
@click.argument("method", type=METHOD_CHOICE)
@click.argument("url")
@click.option("--body", "-b", default=None, help="Request body (ignored for GET/HEAD)")
@click.pass_obj
def send_request(session: RepeaterSession, method: str, url: str, body: Optional[str]):
    """
    Send a request and print the response.

    Example:
        starapi send POST https://httpbin.org/post -b '{"a": 1}'
    """
    _send(session.send(RequestDescriptor(method=method, url=url, body=body)))


@cli.group()
def endpoints():
    """Saved endpoint commands."""
    pass


@endpoints.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print stored records as JSON")
@click.pass_obj
def list_endpoints(session: RepeaterSession, as_json: bool):
    """
    List saved endpoints in save order.

    Example:
        starapi endpoints list
    """
    saved = session.store.list()

    if as_json:
        _echo_json([e.to_record() for e in saved])
        return

    if session.store.was_corrupt:
        click.echo("! Stored endpoints could not be read and were ignored.", err=True)

    if not saved:
        click.echo("No saved endpoints.")
        return

    click.echo(f"\nFound {len(saved)} endpoint(s):\n")
    for e in saved:
        click.echo(f"  • {e.name}")
        click.echo(f"    ID: {e.id}")
        click.echo(f"    {e.method} {e.url}")
        click.echo()


@endpoints.command("save")
@click.argument("method", type=METHOD_CHOICE)
@click.argument("url")
@click.option("--body", "-b", default=None, help="Request body")
@click.option("--name", "-n", default=None, help="Display name")
@click.pass_obj
def save_endpoint(
    session: RepeaterSession,
    method: str,
    url: str,
    body: Optional[str],
    name: Optional[str],
):
    """
    Save an endpoint.

    Example:
        starapi endpoints save GET https://api.example.com/ping -n Ping
    """
    try:
        endpoint = session.store.save(
            RequestDescriptor(method=method, url=url, body=body), name
        )
    except StarAPIException as e:
        _fail(e)

    click.echo(f"✓ Saved endpoint: {endpoint.name}")
    click.echo(f"  ID: {endpoint.id}")


@endpoints.command("import")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--name", "-n", default=None, help="Display name")
@click.pass_obj
def import_endpoint(session: RepeaterSession, source: TextIO, name: Optional[str]):
    """
    Save an endpoint from copied text read from SOURCE (stdin by default).

    Example:
        starapi endpoints copy 1700000000000 | starapi endpoints import
    """
    try:
        endpoint = session.store.save(EndpointParser.parse_text(source.read()), name)
    except StarAPIException as e:
        _fail(e)

    click.echo(f"✓ Saved endpoint: {endpoint.name}")
    click.echo(f"  ID: {endpoint.id}")


@endpoints.command("delete")
@click.argument("endpoint_id")
@click.pass_obj
def delete_endpoint(session: RepeaterSession, endpoint_id: str):
    """Delete a saved endpoint."""
    try:
        session.store.delete(endpoint_id)
    except StarAPIException as e:
        _fail(e)

    click.echo(f"✓ Deleted endpoint: {endpoint_id}")


@endpoints.command("run")
@click.argument("endpoint_id")
@click.pass_obj
def run_endpoint(session: RepeaterSession, endpoint_id: str):
    """Send a saved endpoint and print the response."""
    _send(session.run(endpoint_id))


@endpoints.command("copy")
@click.argument("endpoint_id")
@click.pass_obj
def copy_endpoint(session: RepeaterSession, endpoint_id: str):
    """Print a saved endpoint as copyable text."""
    try:
        click.echo(session.copy_text(endpoint_id))
    except StarAPIException as e:
        _fail(e)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
