"""CLI application entry point and command routing for now-certs.

This module is the **sole error boundary** for the entire application.
It catches :class:`~now_certs.exceptions.NowCertsError`,
``KeyboardInterrupt``, and any unexpected ``Exception``, rendering
user-friendly messages via Rich and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here — all work is delegated to the command
  handlers, the core service and the infrastructure layer.
* Options may appear anywhere on the command line, before or after the
  subcommand and its arguments.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import TYPE_CHECKING, NoReturn

from now_certs.cli import exit_codes
from now_certs.cli.console import console, escape, out
from now_certs.cli.debug_logging import configure_logging
from now_certs.exceptions import NowCertsError, UsageError
from now_certs.version import __version__

if TYPE_CHECKING:
    from now_certs.core.models import InvocationContext
    from now_certs.infra.now_client import NowCertsClient

logger = logging.getLogger(__name__)

PROG = "now-certs"


# ---------------------------------------------------------------------------
# Help text
# ---------------------------------------------------------------------------

HELP_TEXT = f"""
  [bold]▲ {PROG}[/bold] \\[options] <command>

  [yellow]NOTE:[/yellow] This command is intended for advanced use only.
  By default, Now manages your certificates automatically.

  [dim]Commands:[/dim]

    ls                    Show all available certificates
    create    \\[domain]    Create a certificate for a domain
    renew     \\[domain]    Renew the certificate of an existing domain
    replace   \\[domain]    Switch out a domain's certificate
    rm        \\[domain]    Remove a domain's certificate

  [dim]Options:[/dim]

    -h, --help                     Output usage information
    -V, --version                  Output the version number
    -A [bold underline]FILE[/bold underline], --local-config=[bold underline]FILE[/bold underline]   Path to the local `now.json` file
    -Q [bold underline]DIR[/bold underline], --global-config=[bold underline]DIR[/bold underline]    Path to the global `.now` directory
    -d, --debug                    Debug mode \\[off]
    -t [bold underline]TOKEN[/bold underline], --token=[bold underline]TOKEN[/bold underline]        Login token
    --crt [bold underline]FILE[/bold underline]                     Certificate file
    --key [bold underline]FILE[/bold underline]                     Certificate key file
    --ca [bold underline]FILE[/bold underline]                      CA certificate chain file
    -T, --team                     Set a custom team scope

  [dim]Examples:[/dim]

  [dim]–[/dim] Replace an existing certificate with a custom one

      [cyan]$ {PROG} replace --crt domain.crt --key domain.key --ca ca_chain.crt domain.com[/cyan]
"""


def _print_help() -> None:
    out.print(HELP_TEXT)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

class _CertsArgumentParser(argparse.ArgumentParser):
    """Parser that reports bad options as :class:`UsageError` (exit 1)."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message, hint=f"Run `{self.prog} --help` for usage.")


def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    The built-in argparse help is disabled; ``-h`` renders the
    hand-formatted :data:`HELP_TEXT` instead.
    """
    parser = _CertsArgumentParser(prog=PROG, add_help=False)
    parser.add_argument("-h", "--help", action="store_true")
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument("-A", "--local-config", metavar="FILE")
    parser.add_argument("-Q", "--global-config", metavar="DIR")
    parser.add_argument("-d", "--debug", action="store_true")
    parser.add_argument("-t", "--token", metavar="TOKEN")
    parser.add_argument("-T", "--team", metavar="SLUG")
    parser.add_argument("--crt", metavar="FILE")
    parser.add_argument("--key", metavar="FILE")
    parser.add_argument("--ca", metavar="FILE")
    parser.add_argument("subcommand", nargs="?", default=None)
    parser.add_argument("args", nargs="*", default=[])
    return parser


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _build_client(context: InvocationContext) -> NowCertsClient:
    """Open the certificates API client for *context*."""
    from now_certs.infra.now_client import NowCertsClient

    return NowCertsClient(context.api_url, context.token, team=context.team)


def _run_subcommand(args: argparse.Namespace) -> int:
    """Resolve credentials, open the client and run one subcommand.

    The client is closed on every path, including errors and aborts.
    """
    from now_certs.cli.commands import CommandRequest, run_command
    from now_certs.core.certificate_service import CertificateService
    from now_certs.infra.config_loader import load_invocation_context

    started_at = time.monotonic()
    context = load_invocation_context(
        token=args.token,
        team=args.team,
        local_config=args.local_config,
        global_config=args.global_config,
    )
    request = CommandRequest(
        subcommand=args.subcommand,
        args=tuple(args.args),
        context=context,
        crt=args.crt,
        key=args.key,
        ca=args.ca,
        started_at=started_at,
    )
    with _build_client(context) as client:
        return run_command(request, CertificateService(client))


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    """Run the now-certs CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.

    Returns
    -------
    int
        OS process exit code.

    Raises
    ------
    NowCertsError
        For usage, configuration, lookup and API failures; rendered by
        :func:`cli`.
    """
    from now_certs.cli.commands import COMMANDS

    parser = _build_parser()
    args = parser.parse_intermixed_args(argv)
    configure_logging(args.debug)

    if args.help or args.subcommand is None:
        _print_help()
        return exit_codes.SUCCESS

    if args.subcommand not in COMMANDS:
        console.print(
            "[bold red]Error:[/bold red] Please specify a valid subcommand: "
            "ls | create | renew | replace | rm"
        )
        _print_help()
        return exit_codes.GENERAL_ERROR

    return _run_subcommand(args)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli(argv: list[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main(argv)
        sys.exit(code)
    except NowCertsError as exc:
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        if exc.hint:
            console.print(f"[yellow]Hint:[/yellow] {escape(exc.hint)}")
        sys.exit(exc.exit_code)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except OSError as exc:
        logger.debug("file access failed", exc_info=True)
        console.print(f"[bold red]Error:[/bold red] {escape(str(exc))}")
        sys.exit(exit_codes.GENERAL_ERROR)
    except Exception as exc:  # noqa: BLE001
        logger.debug("unexpected error", exc_info=True)
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {escape(str(exc))}"
        )
        sys.exit(exit_codes.GENERAL_ERROR)
