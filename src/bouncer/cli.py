"""Bucket Bouncer CLI - request signing and bouncer administration."""

import asyncio
import json
import sys
from collections.abc import Callable, Coroutine
from typing import Any, ParamSpec, TypeVar

import click
from rich.console import Console
from rich.table import Table

from bouncer.auth.authenticator import Accepted, Authenticator, SignedRequest
from bouncer.auth.canonical import HttpVerb
from bouncer.auth.credentials import Credential, StaticCredentialProvider
from bouncer.auth.signer import build_auth_header
from bouncer.client import BucketBouncerClient, BucketBouncerError
from bouncer.common.logging import setup_logging
from bouncer.common.settings import Settings

console = Console()

P = ParamSpec("P")
R = TypeVar("R")

VERBS = [verb.value for verb in HttpVerb]


def async_command(f: Callable[P, Coroutine[Any, Any, R]]) -> Callable[P, R]:
    """Decorator to run async commands."""

    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def _parse_headers(values: tuple[str, ...]) -> list[tuple[str, str]]:
    headers: list[tuple[str, str]] = []
    for value in values:
        name, sep, header_value = value.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected 'Name: value', got {value!r}", param_hint="-H")
        headers.append((name.strip(), header_value.strip()))
    return headers


def _credential(ctx: click.Context) -> Credential | None:
    settings: Settings = ctx.obj["settings"]
    if settings.admin_key_id and settings.admin_secret:
        return Credential(key_id=settings.admin_key_id, secret=settings.admin_secret)
    return None


def _require_credential(ctx: click.Context) -> Credential:
    credential = _credential(ctx)
    if credential is None:
        console.print("[red]Admin key id and secret are required (--key-id/--secret)[/red]")
        sys.exit(1)
    return credential


@click.group()
@click.option("--host", default=None, help="Bucket bouncer host")
@click.option("--port", type=int, default=None, help="Bucket bouncer port")
@click.option("--ssl/--no-ssl", default=None, help="Use HTTPS")
@click.option("--key-id", envvar="BOUNCER_ADMIN_KEY_ID", help="Admin key id")
@click.option("--secret", envvar="BOUNCER_ADMIN_SECRET", help="Admin secret")
@click.pass_context
def cli(
    ctx: click.Context,
    host: str | None,
    port: int | None,
    ssl: bool | None,
    key_id: str | None,
    secret: str | None,
) -> None:
    """Bucket Bouncer CLI - Sign requests and manage buckets."""
    overrides: dict[str, Any] = {}
    if host is not None:
        overrides["bouncer_host"] = host
    if port is not None:
        overrides["bouncer_port"] = port
    if ssl is not None:
        overrides["bouncer_ssl"] = ssl
    if key_id is not None:
        overrides["admin_key_id"] = key_id
    if secret is not None:
        overrides["admin_secret"] = secret

    settings = Settings(**overrides)
    setup_logging(settings.log_level, json_output=settings.log_json)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# === Signing ===


@cli.command("sign")
@click.option("--verb", "-X", type=click.Choice(VERBS, case_sensitive=False), default="GET")
@click.option("--header", "-H", "header", multiple=True, help="Header as 'Name: value'")
@click.argument("path")
@click.pass_context
def sign_cmd(ctx: click.Context, verb: str, header: tuple[str, ...], path: str) -> None:
    """Print the Authorization header value for a request."""
    settings: Settings = ctx.obj["settings"]
    credential = _require_credential(ctx)
    headers = _parse_headers(header)

    value = build_auth_header(
        verb,
        headers,
        path,
        credential,
        scheme_tag=settings.auth_scheme_tag,
        prefix=settings.custom_header_prefix,
    )
    click.echo(value)


@cli.command("verify")
@click.option("--verb", "-X", type=click.Choice(VERBS, case_sensitive=False), default="GET")
@click.option("--header", "-H", "header", multiple=True, help="Header as 'Name: value'")
@click.option("--authorization", "-a", required=True, help="Presented Authorization value")
@click.argument("path")
@click.pass_context
def verify_cmd(
    ctx: click.Context,
    verb: str,
    header: tuple[str, ...],
    authorization: str,
    path: str,
) -> None:
    """Verify a presented Authorization value against the admin credential."""
    settings: Settings = ctx.obj["settings"]
    authenticator = Authenticator(
        StaticCredentialProvider(_credential(ctx)),
        custom_prefix=settings.custom_header_prefix,
    )
    request = SignedRequest(verb=verb, headers=_parse_headers(header), path=path)
    result = authenticator.authenticate_header(
        request,
        authorization,
        scheme_tag=settings.auth_scheme_tag,
    )

    if isinstance(result, Accepted):
        console.print(f"[green]✓ Signature is valid for {result.key_id}[/green]")
    else:
        console.print(f"[red]✗ Rejected: {result.reason}[/red]")
        sys.exit(1)


# === Bouncer administration ===


async def _run(ctx: click.Context, call: Callable[[BucketBouncerClient], Coroutine[Any, Any, R]]) -> R:
    settings: Settings = ctx.obj["settings"]
    async with BucketBouncerClient(settings, credential=_credential(ctx)) as client:
        try:
            return await call(client)
        except BucketBouncerError as exc:
            console.print(f"[red]Error: {exc}[/red]")
            sys.exit(1)


@cli.command("ping")
@click.pass_context
@async_command
async def ping_cmd(ctx: click.Context) -> None:
    """Check that the bouncer is reachable."""
    await _run(ctx, lambda client: client.ping())
    console.print("[green]✓ Bouncer is up[/green]")


@cli.command("create-bucket")
@click.option("--bucket", "-b", required=True, help="Bucket name")
@click.option("--requester", "-r", required=True, help="Requesting key id")
@click.pass_context
@async_command
async def create_bucket_cmd(ctx: click.Context, bucket: str, requester: str) -> None:
    """Register a bucket for a requester."""
    await _run(ctx, lambda client: client.create_bucket(bucket, requester))
    console.print(f"[green]Bucket {bucket} created for {requester}[/green]")


@cli.command("delete-bucket")
@click.option("--bucket", "-b", required=True, help="Bucket name")
@click.option("--requester", "-r", required=True, help="Requesting key id")
@click.pass_context
@async_command
async def delete_bucket_cmd(ctx: click.Context, bucket: str, requester: str) -> None:
    """Delete a bucket owned by the requester."""
    await _run(ctx, lambda client: client.delete_bucket(bucket, requester))
    console.print(f"[green]Bucket {bucket} deleted[/green]")


@cli.command("list-buckets")
@click.option("--owner", "-o", help="Only buckets owned by this key id")
@click.pass_context
@async_command
async def list_buckets_cmd(ctx: click.Context, owner: str | None) -> None:
    """List buckets that currently have owners."""
    buckets = await _run(ctx, lambda client: client.list_buckets(owner))

    if not buckets:
        console.print("[yellow]No buckets[/yellow]")
        return

    table = Table(title="Buckets")
    table.add_column("Bucket", style="cyan")
    table.add_column("Owner", style="green")
    for record in buckets:
        table.add_row(str(record.get("bucket", "")), str(record.get("owner", "")))

    console.print(table)


@cli.command("stats")
@click.pass_context
@async_command
async def stats_cmd(ctx: click.Context) -> None:
    """Show bouncer statistics."""
    stats = await _run(ctx, lambda client: client.stats())
    console.print(json.dumps(stats, indent=2))


def main() -> None:
    """CLI entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
