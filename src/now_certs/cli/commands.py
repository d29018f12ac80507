"""Subcommand handlers for ``now-certs``.

Each handler receives the per-invocation :class:`CommandRequest` and a
:class:`~now_certs.core.certificate_service.CertificateService`, writes
its output through the Rich console proxies, and either returns an exit
code or raises a :class:`~now_certs.exceptions.NowCertsError` for the
error boundary in :mod:`now_certs.cli.app` to render.

Validation always happens before any file read or API call.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone

from now_certs.cli import exit_codes
from now_certs.cli.certs_table import render_certificate_table
from now_certs.cli.confirm import read_confirmation
from now_certs.cli.console import escape, out
from now_certs.core.certificate_service import CertificateService
from now_certs.core.humanize import format_elapsed, pluralize
from now_certs.core.models import Certificate, InvocationContext
from now_certs.exceptions import UsageError, UserAbortError
from now_certs.infra.cert_files import load_bundle

PROG = "now-certs"

CUSTOM_CERT_USAGE = "--crt DOMAIN.CRT --key DOMAIN.KEY [--ca CA.CRT] <id | cn>"


@dataclass(frozen=True, slots=True)
class CommandRequest:
    """Everything one subcommand needs, passed explicitly."""

    subcommand: str
    args: tuple[str, ...]
    context: InvocationContext
    crt: str | None = None
    key: str | None = None
    ca: str | None = None
    started_at: float = 0.0
    """``time.monotonic()`` reading taken when the subcommand began."""

    @property
    def has_cert_flags(self) -> bool:
        return bool(self.crt or self.key or self.ca)

    def elapsed(self) -> str:
        return format_elapsed(time.monotonic() - self.started_at)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

def _usage_error(usage: str) -> UsageError:
    return UsageError(f"Invalid number of arguments. Usage: `{PROG} {usage}`")


def _require_single_arg(request: CommandRequest, usage: str) -> str:
    if len(request.args) != 1:
        raise _usage_error(usage)
    return request.args[0]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _confirm_or_abort(cert: Certificate, message: str) -> None:
    if not read_confirmation(cert, message, _now()):
        raise UserAbortError("User abort")


def _print_success(cert: Certificate, action: str, request: CommandRequest) -> None:
    out.print(
        f"[cyan]> Success![/cyan] Certificate [bold]{escape(cert.cn)}[/bold] "
        f"[dim]({escape(cert.uid)})[/dim] {action} "
        f"[dim]{escape(f'[{request.elapsed()}]')}[/dim]"
    )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def handle_ls(request: CommandRequest, service: CertificateService) -> int:
    """List every certificate in scope, sorted by common name."""
    if request.args:
        raise _usage_error("ls")

    certs = service.list_certificates()
    out.print(
        f"> {pluralize('certificate', len(certs))} found "
        f"[dim]{escape(f'[{request.elapsed()}]')}[/dim] "
        f"under [bold]{escape(request.context.owner_label)}[/bold]"
    )
    for line in render_certificate_table(certs, _now()):
        out.print(line)
    return exit_codes.SUCCESS


def handle_create(request: CommandRequest, service: CertificateService) -> int:
    """Create a standard certificate, or a custom one from ``--crt``/``--key``."""
    cn = _require_single_arg(request, "create <cn>")

    if request.has_cert_flags:
        if not request.crt or not request.key:
            raise UsageError(
                "Missing required arguments for a custom certificate entry. "
                f"Usage: `{PROG} create {CUSTOM_CERT_USAGE}`"
            )
        uid = service.create_custom(
            cn, load_bundle(request.crt, request.key, request.ca),
        )
    else:
        uid = service.create_standard(cn)

    out.print(
        f"[cyan]> Success![/cyan] Certificate entry [bold]{escape(cn)}[/bold] "
        f"[dim]({escape(uid)})[/dim] created "
        f"[dim]{escape(f'[{request.elapsed()}]')}[/dim]"
    )
    return exit_codes.SUCCESS


def handle_renew(request: CommandRequest, service: CertificateService) -> int:
    id_or_cn = _require_single_arg(request, "renew <id | cn>")
    cert = service.find(id_or_cn, request.context.owner_label)
    _confirm_or_abort(cert, "The following certificate will be renewed")
    service.renew(cert)
    _print_success(cert, "renewed", request)
    return exit_codes.SUCCESS


def handle_replace(request: CommandRequest, service: CertificateService) -> int:
    """Swap in new PEM material for an existing certificate."""
    usage = f"replace {CUSTOM_CERT_USAGE}"
    if not request.crt or not request.key:
        raise _usage_error(usage)
    id_or_cn = _require_single_arg(request, usage)

    bundle = load_bundle(request.crt, request.key, request.ca)
    cert = service.find(id_or_cn, request.context.owner_label)
    _confirm_or_abort(cert, "The following certificate will be replaced permanently")
    service.replace(cert, bundle)
    _print_success(cert, "replaced", request)
    return exit_codes.SUCCESS


def handle_remove(request: CommandRequest, service: CertificateService) -> int:
    id_or_cn = _require_single_arg(request, "rm <id | cn>")
    cert = service.find(id_or_cn, request.context.owner_label)
    _confirm_or_abort(cert, "The following certificate will be removed permanently")
    service.remove(cert)
    _print_success(cert, "removed", request)
    return exit_codes.SUCCESS


# ---------------------------------------------------------------------------
# Dispatch table
# ---------------------------------------------------------------------------

Handler = Callable[[CommandRequest, CertificateService], int]

COMMANDS: dict[str, Handler] = {
    "ls": handle_ls,
    "list": handle_ls,
    "create": handle_create,
    "renew": handle_renew,
    "replace": handle_replace,
    "rm": handle_remove,
    "remove": handle_remove,
}


def run_command(request: CommandRequest, service: CertificateService) -> int:
    """Dispatch *request* to its handler.

    Raises
    ------
    UsageError
        If the subcommand is not known.
    """
    handler = COMMANDS.get(request.subcommand)
    if handler is None:
        raise UsageError(
            "Please specify a valid subcommand: ls | create | renew | replace | rm",
        )
    return handler(request, service)
