"""Custom exception hierarchy for now-certs.

All exceptions that cross layer boundaries must inherit from
:class:`NowCertsError`.  Raw third-party exceptions (e.g. from httpx)
must NEVER propagate beyond the infrastructure layer — they must be
caught and re-raised as a typed subclass defined here.

Every subclass carries the process exit code the CLI error boundary
should use when it escapes.

Hierarchy
---------
NowCertsError
├── UsageError
├── ConfigError
├── CertificateNotFoundError
├── DuplicateCertificateError
├── UserAbortError
├── MissingDependencyError
└── ApiError
    └── AuthenticationError
"""

from __future__ import annotations

from typing import ClassVar


class NowCertsError(Exception):
    """Base exception for all now-certs errors.

    Every user-visible error condition must map to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    exit_code: ClassVar[int] = 1
    """Process exit code used when this error reaches the boundary."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Invocation ------------------------------------------------------------

class UsageError(NowCertsError):
    """Raised for a wrong argument count or a missing required flag."""


class ConfigError(NowCertsError):
    """Raised when credentials or config files cannot be resolved."""


class UserAbortError(NowCertsError):
    """Raised when the user declines a confirmation prompt."""

    exit_code: ClassVar[int] = 0


class MissingDependencyError(NowCertsError):
    """Raised when an optional runtime dependency is not installed."""


# --- Certificates ----------------------------------------------------------

class CertificateNotFoundError(NowCertsError):
    """Raised when no certificate matches the given id or common name."""


class DuplicateCertificateError(NowCertsError):
    """Raised when the API reports the certificate is already issued."""


# --- Remote API ------------------------------------------------------------

class ApiError(NowCertsError):
    """Raised when the certificates API fails or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code: int | None = status_code


class AuthenticationError(ApiError):
    """Raised when the API rejects the login token."""
