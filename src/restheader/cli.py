"""restheader CLI - build, sign and verify REST headers from the shell."""

import json
import sys
import uuid

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from restheader.common.errors import RESTHeaderError
from restheader.common.logging import configure_logging
from restheader.common.settings import get_settings
from restheader.common.signing import create_signature, verify_signature
from restheader.header import RESTHeader

console = Console()
err_console = Console(stderr=True)


def _print_headers(headers: dict[str, str], as_table: bool) -> None:
    if not as_table:
        click.echo(json.dumps(headers, indent=2))
        return

    table = Table(title="Request Headers")
    table.add_column("Header", style="cyan")
    table.add_column("Value", style="green")
    for name, value in headers.items():
        table.add_row(name, value)
    console.print(table)


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Log level (default: RESTHEADER_LOG_LEVEL or WARNING)",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log renderer (default: RESTHEADER_LOG_FORMAT or console)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_format: str | None) -> None:
    """restheader - fluent REST request header builder."""
    try:
        settings = get_settings()
    except ValidationError as exc:
        err_console.print(f"[red]Invalid RESTHEADER_* configuration: {escape(str(exc))}[/red]")
        sys.exit(1)

    try:
        configure_logging(log_level or settings.log_level, log_format or settings.log_format)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--log-level") from exc
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command("demo")
def demo() -> None:
    """Print headers with api-version 1 and a random bearer token."""
    headers = RESTHeader(1).add_bearer_auth(str(uuid.uuid4())).build()
    _print_headers(headers, as_table=False)


@cli.command("build")
@click.option("--api-version", help="api-version header (default: RESTHEADER_API_VERSION)")
@click.option("--accept", help="Accept header")
@click.option("--accept-scim", is_flag=True, help="Accept application/scim+json")
@click.option("--content-type", help="Content-Type header")
@click.option("--form", is_flag=True, help="Content-Type application/x-www-form-urlencoded")
@click.option("--bearer", help="Bearer access token")
@click.option("--plain", help="Authorization header value, used verbatim")
@click.option("--client-id", help="Client id for Basic auth")
@click.option("--client-secret", help="Client secret for Basic auth")
@click.option("--product-key", help="x-product-key header")
@click.option("--custom-header", help="x-custom-header header")
@click.option("--etag", help="If-Match header")
@click.option("--shared-key", help="Shared key for api-signature")
@click.option("--secret-key", help="Secret key for api-signature")
@click.option("--table", "as_table", is_flag=True, help="Print a table instead of JSON")
@click.pass_context
def build(
    ctx: click.Context,
    api_version: str | None,
    accept: str | None,
    accept_scim: bool,
    content_type: str | None,
    form: bool,
    bearer: str | None,
    plain: str | None,
    client_id: str | None,
    client_secret: str | None,
    product_key: str | None,
    custom_header: str | None,
    etag: str | None,
    shared_key: str | None,
    secret_key: str | None,
    as_table: bool,
) -> None:
    """Build a header set and print it."""
    if len([v for v in (bearer, plain, client_id or client_secret) if v]) > 1:
        err_console.print("[red]Use only one of --bearer, --plain or --client-id/--client-secret[/red]")
        sys.exit(1)
    if bool(shared_key) != bool(secret_key):
        err_console.print("[red]--shared-key and --secret-key must be given together[/red]")
        sys.exit(1)

    header = RESTHeader(api_version or ctx.obj["settings"].api_version)

    if accept_scim:
        header.add_accept_scim()
    elif accept:
        header.add_accept(accept)

    if form:
        header.add_form_content_type()
    elif content_type:
        header.add_content_type(content_type)

    if bearer:
        header.add_bearer_auth(bearer)
    elif plain:
        header.add_plain_auth(plain)
    elif client_id or client_secret:
        header.add_basic_auth({"client_id": client_id, "client_secret": client_secret})

    if product_key:
        header.add_product_key(product_key)
    if custom_header:
        header.add_custom_header(custom_header)
    if etag:
        header.add_etag(etag)

    if shared_key and secret_key:
        try:
            header.add_signature(shared_key, secret_key)
        except RESTHeaderError as exc:
            err_console.print(f"[red]Error: {exc}[/red]")
            sys.exit(1)

    _print_headers(header.build(), as_table)


@cli.command("sign")
@click.argument("shared_key")
@click.argument("secret_key")
def sign(shared_key: str, secret_key: str) -> None:
    """Print an api-signature header and its signedDate."""
    try:
        signature = create_signature(shared_key, secret_key)
    except RESTHeaderError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    click.echo(
        json.dumps(
            {"api-signature": signature.sig_header, "signedDate": signature.signed_date},
            indent=2,
        )
    )


@cli.command("verify")
@click.argument("sig_header")
@click.argument("signed_date")
@click.argument("secret_key")
@click.option(
    "--max-age",
    type=float,
    default=None,
    help="Max age of signedDate in seconds (default: RESTHEADER_SIGNATURE_MAX_AGE_SECONDS)",
)
@click.option("--no-max-age", is_flag=True, help="Skip the signedDate age check")
@click.pass_context
def verify(
    ctx: click.Context,
    sig_header: str,
    signed_date: str,
    secret_key: str,
    max_age: float | None,
    no_max_age: bool,
) -> None:
    """Verify an api-signature header against its signedDate."""
    if no_max_age and max_age is not None:
        raise click.UsageError("--max-age and --no-max-age are mutually exclusive")

    if no_max_age:
        window = None
    else:
        window = max_age if max_age is not None else ctx.obj["settings"].signature_max_age_seconds

    try:
        is_valid = verify_signature(sig_header, signed_date, secret_key, max_age=window)
    except RESTHeaderError as exc:
        err_console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    if is_valid:
        console.print("[green]✓ Signature is valid[/green]")
    else:
        console.print("[red]✗ Signature is invalid[/red]")
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
