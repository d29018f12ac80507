"""Protocols (interfaces) consumed by the core layer.

These define the contracts that infrastructure adapters must satisfy.
Core code depends ONLY on these protocols — never on concrete
implementations — preserving the dependency inversion principle.
"""

from __future__ import annotations

from typing import Any, Protocol


class CertsClient(Protocol):
    """Contract for certificate API backends.

    Records are exchanged as raw wire dicts with at least ``uid``,
    ``cn``, ``created``, ``expiration`` and ``autoRenew`` keys; parsing
    into domain models happens in the core layer.

    Implementations must map all backend-specific exceptions to
    :class:`~now_certs.exceptions.NowCertsError` subclasses.
    """

    def ls(self) -> list[dict[str, Any]]:
        """Return every certificate visible in the current scope."""
        ...  # pragma: no cover

    def create(self, cn: str) -> dict[str, Any] | None:
        """Request a standard certificate for *cn*.

        Returns ``None`` when the certificate has already been issued.
        """
        ...  # pragma: no cover

    def put(self, cn: str, crt: str, key: str, ca: str) -> dict[str, Any] | None:
        """Upload custom PEM material for *cn*, creating or replacing it."""
        ...  # pragma: no cover

    def renew(self, cn: str) -> None:
        """Ask the platform to renew the certificate for *cn*."""
        ...  # pragma: no cover

    def delete(self, cn: str) -> None:
        """Remove the certificate for *cn*."""
        ...  # pragma: no cover

    def close(self) -> None:
        """Release the underlying connection pool."""
        ...  # pragma: no cover
