"""Column layout for the ``ls`` certificate table.

Cells are padded on their plain text first and only then wrapped in
Rich markup, so styling never shifts the column alignment.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from now_certs.cli.console import escape
from now_certs.core.humanize import format_age, format_expiration
from now_certs.core.models import Certificate

CREATED_WIDTH = 8
EXPIRATION_WIDTH = 10
AUTO_RENEW_WIDTH = 10


# ---------------------------------------------------------------------------
# Presentation helpers (pure transforms — no I/O themselves)
# ---------------------------------------------------------------------------

def cn_column_width(certs: Sequence[Certificate]) -> int:
    """Longest common name plus one character of padding."""
    return max((len(cert.cn) for cert in certs), default=0) + 1


def _format_auto_renew(auto_renew: bool) -> str:
    return "yes" if auto_renew else "no"


def format_header(cn_width: int) -> str:
    header = (
        f"  {'cn':<{cn_width}} {'created':<{CREATED_WIDTH}}"
        f"  {'expiration':<{EXPIRATION_WIDTH}}  {'auto-renew':<{AUTO_RENEW_WIDTH}}"
    )
    return f"[dim]{header}[/dim]"


def format_row(cert: Certificate, cn_width: int, now: datetime) -> str:
    """Render one certificate as a markup line aligned to the header."""
    cn = f"{cert.cn:<{cn_width}}"
    created = f"{format_age(cert.created, now):<{CREATED_WIDTH}}"
    expiration = f"{format_expiration(cert.expiration, now):<{EXPIRATION_WIDTH}}"
    auto_renew = f"{_format_auto_renew(cert.auto_renew):<{AUTO_RENEW_WIDTH}}"
    return (
        f"  [bold]{escape(cn)}[/bold] [dim]{created}[/dim]"
        f"  [dim]{expiration}[/dim]  {auto_renew}"
    )


def render_certificate_table(
    certs: Sequence[Certificate],
    now: datetime,
) -> list[str]:
    """Return the header plus one line per certificate, in input order."""
    if not certs:
        return []
    cn_width = cn_column_width(certs)
    lines = [format_header(cn_width)]
    lines.extend(format_row(cert, cn_width, now) for cert in certs)
    return lines
