"""Interactive ``[y/N]`` confirmation before a mutating call.

The prompt summarises the affected certificate on a single row and
reads exactly one line from standard input.  Only ``y`` (any case,
surrounding whitespace ignored) counts as consent; EOF or anything else
is a refusal.  There is no retry loop.
"""

from __future__ import annotations

import sys
from datetime import datetime

from now_certs.cli.console import escape, out
from now_certs.core.humanize import format_age
from now_certs.core.models import Certificate

_COLUMN_GAP = " " * 6


def format_summary_row(cert: Certificate, now: datetime) -> str:
    """Render ``uid      cn      age`` for the prompt."""
    return _COLUMN_GAP.join(
        (
            escape(cert.uid),
            f"[bold]{escape(cert.cn)}[/bold]",
            f"[dim]{format_age(cert.created, now)}[/dim]",
        )
    )


def is_affirmative(answer: str) -> bool:
    return answer.strip().lower() == "y"


def read_confirmation(cert: Certificate, message: str, now: datetime) -> bool:
    """Show *message* and the certificate summary, then ask for consent."""
    out.print(f"> {message}")
    out.print(f"  {format_summary_row(cert, now)}")
    out.print(
        f"[bold red]> Are you sure?[/bold red] [dim]{escape('[y/N]')}[/dim] ",
        end="",
    )
    return is_affirmative(sys.stdin.readline())
