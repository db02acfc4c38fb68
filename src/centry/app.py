"""Typer application and CLI entry point for centry.

The ``centry`` command drives the OAuth2 dance by hand, which is what the
out-of-band redirect URI ``urn:ietf:wg:oauth:2.0:oob`` is meant for:

    centry authorize-url --client-id ID --scope "public read_orders"
    centry authorize CODE --client-id ID --client-secret SECRET
    centry refresh --client-id ID --client-secret SECRET --refresh-token TOKEN
    centry request get conexion/v1/sizes.json -p limit=5 --access-token TOKEN

Grant commands print the resulting token set to stdout so the caller can
persist it; nothing is written to disk and no environment variables are
read. The client secret is prompted for (with hidden input) when omitted.
"""

from __future__ import annotations

import json
import signal
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import typer

from centry import __version__
from centry.client import Centry
from centry.exceptions import CentryError
from centry.exit_codes import EXIT_GENERIC_FAILURE
from centry.output import error, format_response, success


OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

app = typer.Typer(
    name="centry",
    help="OAuth2 helper and request tool for the Centry API.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"centry {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Install the global output manager from the CLI flags."""
    from centry.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))


# ------------------------------------------------------------------ #
# Helpers
# ------------------------------------------------------------------ #


def _make_client(
    client_id: str,
    client_secret: str,
    redirect_uri: str,
    access_token: Optional[str] = None,
    refresh_token: Optional[str] = None,
) -> Centry:
    return Centry(client_id, client_secret, redirect_uri, access_token, refresh_token)


@contextmanager
def _handle_errors() -> Iterator[None]:
    """Turn :class:`CentryError` into an error message and its exit code."""
    try:
        yield
    except CentryError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def _print_tokens(client: Centry) -> None:
    format_response(client.tokens().model_dump(mode="json"))


def _parse_params(values: Optional[list[str]]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in values or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint="--param")
        params[key] = value
    return params


def _parse_payload(data: Optional[str]) -> Optional[dict[str, Any]]:
    if data is None:
        return None
    try:
        payload = json.loads(data)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"invalid JSON: {exc}", param_hint="--data") from None
    if not isinstance(payload, dict):
        raise typer.BadParameter("body must be a JSON object", param_hint="--data")
    return payload


# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #


@app.command("authorize-url")
def authorize_url_command(
    scope: str = typer.Option(..., "--scope", "-s", help="Space-separated scopes."),
    client_id: str = typer.Option(..., "--client-id", help="Application client_id."),
    redirect_uri: str = typer.Option(
        OOB_REDIRECT_URI, "--redirect-uri", help="Registered redirect URI."
    ),
) -> None:
    """Print the URL where a user authorizes the application."""
    client = _make_client(client_id, "", redirect_uri)
    typer.echo(client.authorization_url(scope))


@app.command("authorize")
def authorize_command(
    code: str = typer.Argument(help="Authorization code shown by Centry."),
    client_id: str = typer.Option(..., "--client-id", help="Application client_id."),
    client_secret: str = typer.Option(
        ..., "--client-secret", prompt=True, hide_input=True, help="Application client_secret."
    ),
    redirect_uri: str = typer.Option(
        OOB_REDIRECT_URI, "--redirect-uri", help="Registered redirect URI."
    ),
) -> None:
    """Exchange an authorization code for a token set."""
    client = _make_client(client_id, client_secret, redirect_uri)
    with _handle_errors():
        client.authorize(code)
    success("Authorized.")
    _print_tokens(client)


@app.command("refresh")
def refresh_command(
    refresh_token: str = typer.Option(..., "--refresh-token", help="Stored refresh token."),
    client_id: str = typer.Option(..., "--client-id", help="Application client_id."),
    client_secret: str = typer.Option(
        ..., "--client-secret", prompt=True, hide_input=True, help="Application client_secret."
    ),
    redirect_uri: str = typer.Option(
        OOB_REDIRECT_URI, "--redirect-uri", help="Registered redirect URI."
    ),
) -> None:
    """Trade a refresh token for a new token set."""
    client = _make_client(client_id, client_secret, redirect_uri, refresh_token=refresh_token)
    with _handle_errors():
        client.refresh()
    success("Tokens refreshed.")
    _print_tokens(client)


@app.command("client-credentials")
def client_credentials_command(
    scope: Optional[str] = typer.Option(None, "--scope", "-s", help="Space-separated scopes."),
    client_id: str = typer.Option(..., "--client-id", help="Application client_id."),
    client_secret: str = typer.Option(
        ..., "--client-secret", prompt=True, hide_input=True, help="Application client_secret."
    ),
    redirect_uri: str = typer.Option(
        OOB_REDIRECT_URI, "--redirect-uri", help="Registered redirect URI."
    ),
) -> None:
    """Obtain an application token with the client credentials grant."""
    client = _make_client(client_id, client_secret, redirect_uri)
    with _handle_errors():
        client.client_credentials(scope)
    success("Token issued.")
    _print_tokens(client)


@app.command("request")
def request_command(
    method: str = typer.Argument(help="GET, POST, PUT or DELETE."),
    endpoint: str = typer.Argument(help="Endpoint path, e.g. conexion/v1/sizes.json."),
    param: Optional[list[str]] = typer.Option(
        None, "--param", "-p", help="Query parameter as KEY=VALUE. Repeatable."
    ),
    data: Optional[str] = typer.Option(None, "--data", "-d", help="JSON object body."),
    access_token: Optional[str] = typer.Option(
        None, "--access-token", help="Bearer token to send."
    ),
    client_id: str = typer.Option("", "--client-id", help="Application client_id."),
) -> None:
    """Send a request to the API and print the response."""
    from centry.response import format_api_response

    params = _parse_params(param)
    payload = _parse_payload(data)
    client = _make_client(client_id, "", OOB_REDIRECT_URI, access_token=access_token)
    with _handle_errors():
        response = client.request(endpoint, method, params, payload)
    format_api_response(response)


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def main() -> None:
    """CLI entry point invoked by the ``centry`` console script."""
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except CentryError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        error(f"Unexpected error: {exc}")
        sys.exit(EXIT_GENERIC_FAILURE)
