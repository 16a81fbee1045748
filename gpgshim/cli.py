"""gpgshim CLI application with Typer."""

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated, NoReturn

import typer

from gpgshim import __version__
from gpgshim.app import GnuPGError
from gpgshim.bootstrap import bootstrap_application
from gpgshim.config import get_settings, set_settings
from gpgshim.protocol.status import SummaryCode
from gpgshim.utils.cli_output import json_response

app = typer.Typer(
    name="gpgshim",
    help="Import OpenPGP keys and verify detached signatures with gpg",
    add_completion=True,
    no_args_is_help=True,
)

EXIT_INVALID = 1
EXIT_NO_VERDICT = 2
EXIT_GATEWAY_FAILURE = 3


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"gpgshim version {__version__}")
        raise typer.Exit()


def _gateway_error(exc: Exception) -> NoReturn:
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=EXIT_GATEWAY_FAILURE) from exc


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = None,
    homedir: Annotated[
        Path | None,
        typer.Option("--homedir", help="Override the isolated gpg home directory"),
    ] = None,
    gpg_binary: Annotated[
        Path | None,
        typer.Option("--gpg-binary", help="Path to the gpg executable"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log gpg invocations to stderr"),
    ] = False,
) -> None:
    """gpgshim - thin wrapper around gpg for key import and signature checks."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    # Update settings with CLI flags
    settings = get_settings()
    if homedir:
        settings.home_dir = homedir
    if gpg_binary:
        settings.gpg_binary = gpg_binary
    set_settings(settings)


@app.command("import")
def import_key(
    key_file: Annotated[
        Path,
        typer.Argument(
            help="File holding the public key (armored or binary)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """Import a public key into the gpgshim keyring."""
    key = key_file.read_bytes()
    container = bootstrap_application()

    try:
        result = container.keyring.import_key(key)
    except GnuPGError as exc:
        _gateway_error(exc)

    if json_output:
        typer.echo(
            json_response(
                "import_result",
                1,
                key_file=str(key_file),
                imported=result.imported,
                fingerprint=result.fingerprint or None,
            )
        )
    elif result.imported:
        typer.secho(
            f"Imported key {result.fingerprint} ({result.imported})",
            fg=typer.colors.GREEN,
        )
    else:
        typer.secho("No key imported", fg=typer.colors.YELLOW)

    if not result.imported:
        raise typer.Exit(code=EXIT_INVALID)


@app.command("verify")
def verify(
    message_file: Annotated[
        Path,
        typer.Argument(help="Signed data", exists=True, dir_okay=False, readable=True),
    ],
    signature_file: Annotated[
        Path,
        typer.Argument(
            help="Detached signature over the data", exists=True, dir_okay=False, readable=True
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """Verify a detached signature.

    Exit status: 0 valid, 1 bad signature or verification error,
    2 no verdict, 3 gpg could not be run.
    """
    message = message_file.read_bytes()
    signature = signature_file.read_bytes()
    container = bootstrap_application()

    try:
        result = container.keyring.verify(message, signature)
    except GnuPGError as exc:
        _gateway_error(exc)

    if json_output:
        typer.echo(
            json_response(
                "verify_result",
                1,
                message_file=str(message_file),
                signature_file=str(signature_file),
                signatures=[] if result is None else [result.to_legacy()],
            )
        )
    elif result is None:
        typer.secho("No verdict: gpg reported no signature status", fg=typer.colors.YELLOW)
    elif result.summary is SummaryCode.VALID:
        created = (
            datetime.fromtimestamp(result.timestamp, UTC).isoformat()
            if result.timestamp
            else "unknown"
        )
        typer.secho(
            f"Good signature from {result.fingerprint} (created {created})",
            fg=typer.colors.GREEN,
        )
    elif result.summary is SummaryCode.BAD:
        typer.secho(f"BAD signature from {result.fingerprint}", fg=typer.colors.RED)
    else:
        typer.secho(
            f"Could not verify signature by {result.fingerprint} (missing key or malformed signature)",
            fg=typer.colors.RED,
        )

    if result is None:
        raise typer.Exit(code=EXIT_NO_VERDICT)
    if result.summary is not SummaryCode.VALID:
        raise typer.Exit(code=EXIT_INVALID)


if __name__ == "__main__":
    app()
