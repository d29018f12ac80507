"""Domain models for now-certs.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  They carry zero I/O, zero dependencies on
external packages, and must remain pure across the entire lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


# ---------------------------------------------------------------------------
# Certificates
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Certificate:
    """A certificate entry registered with the account."""

    uid: str
    """Opaque identifier assigned by the API."""

    cn: str
    """Common name (domain).  Unique within an account scope; ``""`` if absent."""

    created: datetime | None
    """Creation time, timezone-aware (UTC).  ``None`` when the API omits it."""

    expiration: datetime | None
    """Expiry time, timezone-aware (UTC).  May lie in the past or be ``None``."""

    auto_renew: bool
    """Whether the platform renews this certificate automatically."""


@dataclass(frozen=True, slots=True)
class CertificateBundle:
    """PEM material for a custom certificate."""

    crt: str
    key: str
    ca: str = ""


# ---------------------------------------------------------------------------
# Identity / invocation context
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Team:
    slug: str
    id: str | None = None


@dataclass(frozen=True, slots=True)
class User:
    username: str | None = None
    email: str | None = None


@dataclass(frozen=True, slots=True)
class InvocationContext:
    """Resolved credentials and scope for one CLI run."""

    token: str
    api_url: str
    user: User
    team: Team | None = None

    @property
    def owner_label(self) -> str:
        """Name shown for the current scope: team slug, username or email."""
        if self.team is not None and self.team.slug:
            return self.team.slug
        return self.user.username or self.user.email or ""
